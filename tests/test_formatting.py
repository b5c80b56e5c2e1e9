from datetime import date
from decimal import Decimal

import pytest
from expense_ledger.formatting import (
    capitalize_category,
    display_row,
    format_currency,
    format_date,
    month_label,
)

TODAY = date(2024, 3, 15)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("1234.5"), "$1,234.5"),
        (Decimal("1234.50"), "$1,234.5"),
        (Decimal("1000"), "$1,000"),
        (Decimal("0.125"), "$0.13"),
        (Decimal("-20"), "-$20"),
        (Decimal("-0.5"), "-$0.5"),
        (Decimal("0"), "$0"),
        (1234567.891, "$1,234,567.89"),
        (7, "$7"),
    ],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("1234.5"), "$1,235"),
        (Decimal("199.49"), "$199"),
        (Decimal("-2500"), "-$2,500"),
    ],
)
def test_format_currency_short(amount, expected):
    assert format_currency(amount, short=True) == expected


def test_format_date_relative_labels():
    assert format_date(TODAY, today=TODAY) == "Today"
    assert format_date(date(2024, 3, 14), today=TODAY) == "Yesterday"
    assert format_date(date(2024, 3, 13), today=TODAY) == "Mar 13"
    assert format_date(date(2023, 12, 5), today=TODAY) == "Dec 5"


def test_format_date_yesterday_across_month_boundary():
    assert format_date(date(2024, 2, 29), today=date(2024, 3, 1)) == "Yesterday"


def test_capitalize_category_only_touches_first_character():
    assert capitalize_category("groceries") == "Groceries"
    assert capitalize_category("eating OUT") == "Eating OUT"
    assert capitalize_category("") == ""


def test_month_label():
    assert month_label("2024-01") == "January 2024"
    assert month_label("1999-12") == "December 1999"


def test_display_row(make_tx):
    row = display_row(
        make_tx(9, "-42.10", "2024-03-14", description="Books", category="education"),
        today=TODAY,
    )
    assert row.id == 9
    assert row.description == "Books"
    assert row.amount == "-$42.1"
    assert row.category == "Education"
    assert row.date == "Yesterday"
    assert row.kind == "expense"

    income = display_row(make_tx(1, 10, "2024-03-15"), today=TODAY)
    assert income.kind == "income"
    assert income.date == "Today"


def test_format_currency_at_the_amount_bound():
    big = Decimal("-99999999999999999999.99")
    assert format_currency(big) == "-$99,999,999,999,999,999,999.99"
    assert format_currency(big, short=True) == "-$100,000,000,000,000,000,000"
    assert format_currency(big * 1000) == "-$99,999,999,999,999,999,999,990"
