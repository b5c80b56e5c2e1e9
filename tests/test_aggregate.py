from datetime import datetime
from decimal import Decimal

import pytest
from expense_ledger.aggregate import compute_quick_stats, summarize
from expense_ledger.filters import month_scoped

NOW = datetime(2024, 3, 15, 10, 30)


@pytest.fixture
def scenario(make_tx):
    # Newest first, as the store keeps them.
    return [
        make_tx(3, -50, "2024-02-01", category="transport"),
        make_tx(2, -200, "2024-01-06", category="groceries"),
        make_tx(1, 1000, "2024-01-05", category="salary"),
    ]


def test_summary_all_months(scenario):
    s = summarize(scenario)
    assert s.total_income == Decimal("1000")
    assert s.total_expense == Decimal("250")
    assert s.balance == Decimal("750")


def test_summary_single_month(scenario):
    s = summarize(month_scoped(scenario, "2024-01"))
    assert s.total_income == Decimal("1000")
    assert s.total_expense == Decimal("200")
    assert s.balance == Decimal("800")


def test_balance_equals_signed_sum(make_tx):
    amounts = ["10.10", "-3.33", "0", "-0.01", "250", "-99.99", "0.02"]
    txs = [make_tx(i, a, "2024-01-01") for i, a in enumerate(amounts)]
    s = summarize(txs)
    assert s.total_income - s.total_expense == s.balance
    assert s.balance == sum((Decimal(a) for a in amounts), Decimal("0"))


def test_empty_subset_yields_zeros():
    s = summarize([])
    assert (s.total_income, s.total_expense, s.balance) == (0, 0, 0)

    stats = compute_quick_stats([], now=NOW)
    assert stats.today_expense == 0
    assert stats.week_expense == 0
    assert stats.category_totals == {}
    assert stats.top_category is None
    assert stats.top_category_label == "-"
    assert stats.avg_monthly_expense == 0


def test_today_and_sliding_week_window(make_tx):
    txs = [
        make_tx(1, -10, "2024-03-15"),  # today
        make_tx(2, -20, "2024-03-09"),  # midnight is after now - 7d (03-08 10:30)
        make_tx(3, -40, "2024-03-08"),  # midnight is before the window start
        make_tx(4, 500, "2024-03-15"),  # income never counts
    ]
    stats = compute_quick_stats(txs, now=NOW)
    assert stats.today_expense == Decimal("10")
    assert stats.week_expense == Decimal("30")


def test_category_totals_are_expense_only_and_keep_stored_case(make_tx):
    txs = [
        make_tx(1, -10, "2024-03-01", category="food"),
        make_tx(2, -5, "2024-03-02", category="Food"),
        make_tx(3, 100, "2024-03-03", category="food"),
        make_tx(4, 0, "2024-03-03", category="zero"),
    ]
    stats = compute_quick_stats(txs, now=NOW)
    assert stats.category_totals == {"food": Decimal("10"), "Food": Decimal("5")}
    assert list(stats.category_totals) == ["food", "Food"]


def test_top_category_tie_goes_to_first_inserted(make_tx):
    txs = [
        make_tx(1, -30, "2024-03-01", category="rent"),
        make_tx(2, -30, "2024-03-02", category="food"),
        make_tx(3, -10, "2024-03-03", category="fun"),
    ]
    stats = compute_quick_stats(txs, now=NOW)
    assert stats.top_category == "rent"
    assert stats.top_category_label == "Rent"


def test_avg_monthly_expense_over_months_with_expenses(make_tx):
    txs = [
        make_tx(1, -100, "2024-01-10"),
        make_tx(2, -50, "2024-01-20"),
        make_tx(3, -30, "2024-03-01"),
        make_tx(4, 999, "2024-02-01"),  # income-only month is not counted
    ]
    stats = compute_quick_stats(txs, now=NOW)
    assert stats.avg_monthly_expense == Decimal("90")


def test_avg_monthly_expense_degenerates_to_month_total_when_scoped(make_tx):
    txs = [make_tx(1, -100, "2024-01-10"), make_tx(2, -30, "2024-03-01")]
    stats = compute_quick_stats(month_scoped(txs, "2024-01"), now=NOW)
    assert stats.avg_monthly_expense == Decimal("100")
