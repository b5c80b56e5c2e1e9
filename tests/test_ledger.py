from decimal import Decimal

import pytest
from expense_ledger.ledger import Ledger
from expense_ledger.models import ValidationError


@pytest.fixture
def saved():
    return []


@pytest.fixture
def ledger(clock, make_tx, saved):
    seed = [
        make_tx(3, -50, "2024-02-01", description="Train", category="transport"),
        make_tx(2, -200, "2024-01-06", description="Weekly shop", category="groceries"),
        make_tx(1, 1000, "2024-01-05", description="Salary", category="salary"),
    ]
    return Ledger.from_transactions(seed, clock=clock, on_change=saved.append)


def test_add_reports_kind_and_persists_full_list(ledger, saved):
    result = ledger.on_add("Bonus", "250", "salary", "2024-03-01")
    assert result.ok
    assert result.message == "Income added successfully!"
    assert len(saved) == 1
    assert saved[0][0].id == result.transaction_id
    assert len(saved[0]) == 4

    expense = ledger.on_add("Lunch", "-12", "food")
    assert expense.message == "Expense added successfully!"
    assert len(saved) == 2


def test_invalid_add_is_rejected_without_saving(ledger, saved):
    result = ledger.on_add("", "10")
    assert not result.ok
    assert result.message.startswith("Please enter a valid description and amount")
    assert saved == []
    assert len(ledger.store) == 3


def test_edit_messages(ledger, saved):
    ok = ledger.on_edit(2, description="Weekly shop", amount="300", date="2024-01-06")
    assert ok.ok
    assert ok.message == "Transaction updated successfully!"
    assert ledger.store.get(2).amount == Decimal("-300")
    assert len(saved) == 1

    bad = ledger.on_edit(2, description="Weekly shop", amount="", date="2024-01-06")
    assert not bad.ok
    assert bad.message.startswith("Please fill all fields correctly")

    gone = ledger.on_edit(42, description="x", amount="1", date="2024-01-06")
    assert not gone.ok
    assert gone.message == "Transaction no longer exists"
    assert len(saved) == 1


def test_delete_reports_description_and_amount(ledger, saved):
    result = ledger.on_delete(3)
    assert result.ok
    assert result.message == "Deleted Train (-$50)"
    assert [t.id for t in saved[-1]] == [2, 1]

    again = ledger.on_delete(3)
    assert not again.ok
    assert again.message == "Transaction no longer exists"
    assert len(saved) == 1


def test_month_filter_resets_when_its_last_transaction_goes(ledger):
    ledger.set_month_filter("2024-02")
    ledger.on_delete(3)
    assert ledger.month == "all"


def test_month_filter_survives_unrelated_mutations(ledger):
    ledger.set_month_filter("2024-01")
    ledger.on_delete(3)
    assert ledger.month == "2024-01"


def test_set_month_filter_validates(ledger):
    with pytest.raises(ValidationError):
        ledger.set_month_filter("2024-1")
    assert ledger.month == "all"


def test_clear(ledger, saved):
    result = ledger.on_clear()
    assert result.ok
    assert result.message == "All transactions cleared!"
    assert len(ledger.store) == 0
    assert saved == [[]]

    again = ledger.on_clear()
    assert not again.ok
    assert again.message == "No transactions to clear"
    assert len(saved) == 1


def test_export_uses_month_scope(ledger):
    ledger.set_month_filter("2024-01")
    result = ledger.on_export()
    assert result.ok
    assert result.message == "Exported 2 transactions to CSV"
    assert result.export.filename == "expense-tracker-2024-01.csv"
    assert result.export.count == 2
    assert result.export.content.splitlines() == [
        "Date,Description,Category,Amount,Type",
        "2024-01-06,Weekly shop,Groceries,200.00,Expense",
        "2024-01-05,Salary,Salary,1000.00,Income",
    ]


def test_export_all_months_is_named_after_today(ledger):
    result = ledger.on_export()
    assert result.export.filename == "expense-tracker-2024-03-15.csv"
    assert result.export.count == 3


def test_export_with_no_transactions(clock):
    result = Ledger.from_transactions(clock=clock).on_export()
    assert not result.ok
    assert result.message == "No transactions to export"
    assert result.export is None


def test_view_scopes_everything_but_the_list_narrowing(ledger):
    ledger.set_month_filter("2024-01")
    view = ledger.view(search="salary", type_filter="income")

    assert [t.id for t in view.transactions] == [1]
    assert view.summary.total_income == Decimal("1000")
    assert view.summary.total_expense == Decimal("200")
    assert view.summary.balance == Decimal("800")
    assert view.stats.top_category == "groceries"
    assert view.chart.mode == "daily"
    assert len(view.chart.bars) == 31
    assert [m.key for m in view.months] == ["2024-02", "2024-01"]
    assert view.month == "2024-01"


def test_view_is_pure(ledger, saved):
    first = ledger.view()
    second = ledger.view()
    assert first == second
    assert saved == []
    assert first.summary.balance == Decimal("750")
    assert first.chart.mode == "monthly"


def test_out_of_range_amount_is_rejected_and_views_stay_renderable(ledger, saved):
    result = ledger.on_add("Big", "1e30", "misc")
    assert not result.ok
    assert result.message.startswith("Please enter a valid description and amount")
    assert saved == []

    ledger.on_add("Largest", "-99999999999999999999.99", "misc", "2024-01-10")
    ledger.set_month_filter("2024-01")
    export = ledger.on_export().export
    assert "99999999999999999999.99" in export.content
    assert ledger.view().summary.total_expense == Decimal("100000000000000000199.99")


def test_delete_leaves_store_untouched_when_message_cannot_be_built(
    ledger, saved, monkeypatch
):
    def boom(amount, short=False):
        raise RuntimeError("formatter failed")

    monkeypatch.setattr("expense_ledger.ledger.format_currency", boom)
    with pytest.raises(RuntimeError):
        ledger.on_delete(3)
    assert 3 in ledger.store
    assert saved == []
