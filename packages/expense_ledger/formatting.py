"""Pure text formatters for amounts, dates, categories and month keys.

Output is fixed to US English / USD regardless of the process locale.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from .models import DisplayRow, Transaction

MONTH_ABBR: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)  # fmt: skip
MONTH_NAMES: tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)  # fmt: skip

_CENT = Decimal("0.01")
_UNIT = Decimal("1")


def _as_decimal(amount: Decimal | int | float) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def format_currency(amount: Decimal | int | float, short: bool = False) -> str:
    """Format ``amount`` as USD, e.g. ``$1,234.5`` or ``-$20``.

    The magnitude is formatted first (no fraction digits when ``short``,
    otherwise up to two with trailing zeros dropped, rounding half-up) and the
    ``-`` sign is prepended afterwards for negative amounts.
    """

    value = _as_decimal(amount)
    magnitude = abs(value)
    if short:
        text = f"{magnitude.quantize(_UNIT, rounding=ROUND_HALF_UP):,.0f}"
    else:
        text = f"{magnitude.quantize(_CENT, rounding=ROUND_HALF_UP):,.2f}"
        if text.endswith(".00"):
            text = text[:-3]
        elif text.endswith("0"):
            text = text[:-1]
    formatted = f"${text}"
    return f"-{formatted}" if value < 0 else formatted


def format_date(d: date, *, today: date) -> str:
    """``Today``, ``Yesterday`` or an abbreviated ``Mon D`` label (no year)."""

    if d == today:
        return "Today"
    if d == today - timedelta(days=1):
        return "Yesterday"
    return f"{MONTH_ABBR[d.month - 1]} {d.day}"


def capitalize_category(category: str) -> str:
    """Uppercase only the first character; the stored value is never changed."""

    return category[:1].upper() + category[1:]


def month_label(month_key: str) -> str:
    """``"2024-01"`` -> ``"January 2024"``."""

    year, month = month_key.split("-")
    return f"{MONTH_NAMES[int(month) - 1]} {int(year)}"


def display_row(tx: Transaction, *, today: date) -> DisplayRow:
    return DisplayRow(
        id=tx.id,
        description=tx.description,
        amount=format_currency(tx.amount),
        category=capitalize_category(tx.category),
        date=format_date(tx.date, today=today),
        kind="income" if tx.amount > 0 else "expense",
    )


__all__ = [
    "MONTH_ABBR",
    "MONTH_NAMES",
    "capitalize_category",
    "display_row",
    "format_currency",
    "format_date",
    "month_label",
]
