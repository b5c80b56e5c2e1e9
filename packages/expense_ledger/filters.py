"""Filter predicate and month-scoping helpers.

``matches`` implements the full display-list predicate (search AND type AND
month). ``month_scoped`` applies the month part alone and is what every
aggregate, chart and export consumes: those views intentionally ignore the
free-text search and the income/expense toggle.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .formatting import month_label
from .models import ALL, TYPE_FILTERS, LedgerQuery, MonthOption, Transaction, ValidationError

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def validate_month(month: str) -> str:
    """Return ``month`` when it is ``"all"`` or a ``YYYY-MM`` key."""

    if month == ALL or _MONTH_RE.fullmatch(month or ""):
        return month
    raise ValidationError(f"invalid month filter: {month!r} (expected 'all' or YYYY-MM)")


def validate_query(query: LedgerQuery) -> LedgerQuery:
    if query.type_filter not in TYPE_FILTERS:
        raise ValidationError(
            f"invalid type filter: {query.type_filter!r}. Allowed: {list(TYPE_FILTERS)}"
        )
    validate_month(query.month)
    return query


def _matches_search(tx: Transaction, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return needle in tx.description.lower() or needle in tx.category.lower()


def _matches_type(tx: Transaction, type_filter: str) -> bool:
    if type_filter == "income":
        return tx.amount > 0
    if type_filter == "expense":
        return tx.amount < 0
    return True


def _matches_month(tx: Transaction, month: str) -> bool:
    return month == ALL or tx.month_key == month


def matches(tx: Transaction, query: LedgerQuery) -> bool:
    """Return ``True`` when ``tx`` passes every filter in ``query``."""

    return (
        _matches_search(tx, query.search)
        and _matches_type(tx, query.type_filter)
        and _matches_month(tx, query.month)
    )


def filter_transactions(
    transactions: Iterable[Transaction], query: LedgerQuery
) -> list[Transaction]:
    """Display-list view: all three filters, input order preserved."""

    validate_query(query)
    return [tx for tx in transactions if matches(tx, query)]


def month_scoped(transactions: Iterable[Transaction], month: str = ALL) -> list[Transaction]:
    """Month-scoped subset used by summaries, stats, charts and export."""

    validate_month(month)
    return [tx for tx in transactions if _matches_month(tx, month)]


def month_options(transactions: Iterable[Transaction]) -> list[MonthOption]:
    """Distinct months present in ``transactions``, newest first."""

    keys = {tx.month_key for tx in transactions}
    return [MonthOption(key=k, label=month_label(k)) for k in sorted(keys, reverse=True)]


def resolve_month_filter(current: str, options: Iterable[MonthOption]) -> str:
    """Keep ``current`` while it is still selectable; otherwise fall back to ``all``."""

    if current != ALL and current in {o.key for o in options}:
        return current
    return ALL


__all__ = [
    "filter_transactions",
    "matches",
    "month_options",
    "month_scoped",
    "resolve_month_filter",
    "validate_month",
    "validate_query",
]
