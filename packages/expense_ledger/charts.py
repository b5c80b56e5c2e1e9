"""Chart series: income/expense comparison and the expense histogram.

The histogram has two modes. With no month selected it buckets expenses by
calendar month of a single year (Jan..Dec, zero-filled). With a month
selected it buckets by day of that month (1..days-in-month, zero-filled).
Heights are percentages of the largest bucket. When there is nothing to
draw the series is flagged ``empty`` and carries no bars.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from .filters import validate_month
from .formatting import MONTH_ABBR, format_currency
from .models import ALL, ZERO, ChartBar, ChartSeries, ComparisonSeries, Summary, Transaction

_ONE = Decimal("1")


def comparison_series(summary: Summary) -> ComparisonSeries:
    income = summary.total_income
    expense = summary.total_expense
    total = income + expense
    if total > 0:
        income_pct = float(income / total * 100)
        expense_pct = float(expense / total * 100)
    else:
        income_pct = expense_pct = 0.0
    return ComparisonSeries(
        income=income,
        expense=expense,
        income_percent=income_pct,
        expense_percent=expense_pct,
    )


def _bars(buckets: list[tuple[str, Decimal]], scale: Decimal) -> tuple[ChartBar, ...]:
    return tuple(
        ChartBar(
            label=label,
            total=total,
            height=float(total / scale * 100),
            value_label=format_currency(total, short=True),
        )
        for label, total in buckets
    )


def monthly_expense_series(transactions: Iterable[Transaction], *, year: int) -> ChartSeries:
    """Expense totals per month of ``year``; other years are ignored."""

    totals = [ZERO] * 12
    for tx in transactions:
        if tx.amount < 0 and tx.date.year == year:
            totals[tx.date.month - 1] += -tx.amount

    if all(t == 0 for t in totals):
        return ChartSeries(mode="monthly", bars=(), empty=True)

    # Scale is floored at 1.
    scale = max(max(totals), _ONE)
    buckets = list(zip(MONTH_ABBR, totals, strict=True))
    return ChartSeries(mode="monthly", bars=_bars(buckets, scale), empty=False)


def daily_expense_series(
    transactions: Iterable[Transaction], *, year: int, month: int
) -> ChartSeries:
    """Expense totals per calendar day of ``year``/``month``."""

    days_in_month = calendar.monthrange(year, month)[1]
    totals = [ZERO] * days_in_month
    for tx in transactions:
        if tx.amount < 0 and tx.date.year == year and tx.date.month == month:
            totals[tx.date.day - 1] += -tx.amount

    peak = max(totals)
    if peak == 0:
        return ChartSeries(mode="daily", bars=(), empty=True)

    buckets = [(str(day), total) for day, total in enumerate(totals, start=1)]
    return ChartSeries(mode="daily", bars=_bars(buckets, peak), empty=False)


def expense_chart(transactions: Iterable[Transaction], *, month: str, today: date) -> ChartSeries:
    """Pick the histogram mode from the active month filter.

    ``month == "all"`` charts the months of ``today``'s year; a ``YYYY-MM``
    key charts the days of that month.
    """

    validate_month(month)
    if month == ALL:
        return monthly_expense_series(transactions, year=today.year)
    year_s, month_s = month.split("-")
    return daily_expense_series(transactions, year=int(year_s), month=int(month_s))


__all__ = [
    "comparison_series",
    "daily_expense_series",
    "expense_chart",
    "monthly_expense_series",
]
