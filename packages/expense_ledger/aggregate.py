"""Totals and quick stats over a month-scoped transaction subset.

Both entry points make a single pass over their input. Zero-amount records
pass validation but are neither income nor expense and therefore contribute
to nothing here. Empty input yields all-zero results.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, time, timedelta
from decimal import Decimal

from .models import ZERO, QuickStats, Summary, Transaction

WEEK_WINDOW = timedelta(days=7)


def summarize(transactions: Iterable[Transaction]) -> Summary:
    """Return income, expense (as a magnitude) and balance."""

    income = ZERO
    expense = ZERO
    for tx in transactions:
        if tx.amount > 0:
            income += tx.amount
        elif tx.amount < 0:
            expense += -tx.amount
    return Summary(total_income=income, total_expense=expense, balance=income - expense)


def compute_quick_stats(transactions: Iterable[Transaction], *, now: datetime) -> QuickStats:
    """Today/week expense, per-category totals, top category and monthly average.

    Notes
    -----
    - ``week_expense`` is a sliding window: an expense counts when its date,
      taken at midnight, is at or after ``now - 7 days``. It is not aligned to
      calendar weeks.
    - ``category_totals`` keeps first-seen order, so ``top_category`` is the
      earliest category among those tied for the largest total.
    - ``avg_monthly_expense`` divides by the number of distinct months that
      contain at least one expense within the given subset. For a subset that
      is already a single month this is simply that month's total.
    """

    today = now.date()
    window_start = now - WEEK_WINDOW

    today_expense = ZERO
    week_expense = ZERO
    total_expense = ZERO
    category_totals: dict[str, Decimal] = {}
    expense_months: set[tuple[int, int]] = set()

    for tx in transactions:
        if tx.amount >= 0:
            continue
        amount = -tx.amount
        if tx.date == today:
            today_expense += amount
        if datetime.combine(tx.date, time.min) >= window_start:
            week_expense += amount
        category_totals[tx.category] = category_totals.get(tx.category, ZERO) + amount
        expense_months.add((tx.date.year, tx.date.month))
        total_expense += amount

    top_category: str | None = None
    top_amount = ZERO
    for category, amount in category_totals.items():
        if amount > top_amount:
            top_category, top_amount = category, amount

    avg = total_expense / len(expense_months) if expense_months else ZERO

    return QuickStats(
        today_expense=today_expense,
        week_expense=week_expense,
        category_totals=category_totals,
        top_category=top_category,
        avg_monthly_expense=avg,
    )


__all__ = ["WEEK_WINDOW", "compute_quick_stats", "summarize"]
