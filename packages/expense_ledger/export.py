"""CSV export rows for the month-scoped transaction subset.

Only the row/document text is built here; writing or downloading the file is
the caller's job. Rows go through :mod:`csv` with minimal quoting, so any
field holding a comma, a double quote or a line break is wrapped in quotes
with inner quotes doubled (RFC 4180 style).
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from .filters import validate_month
from .formatting import capitalize_category
from .models import ALL, ExportRow, Transaction

CSV_HEADER: tuple[str, ...] = ("Date", "Description", "Category", "Amount", "Type")

_CENT = Decimal("0.01")


def export_row(tx: Transaction) -> ExportRow:
    return ExportRow(
        date=tx.date.isoformat(),
        description=tx.description,
        category=capitalize_category(tx.category),
        amount=f"{abs(tx.amount).quantize(_CENT, rounding=ROUND_HALF_UP):.2f}",
        type="Income" if tx.amount > 0 else "Expense",
    )


def export_rows(transactions: Iterable[Transaction]) -> list[ExportRow]:
    return [export_row(tx) for tx in transactions]


def render_csv(transactions: Iterable[Transaction]) -> str:
    """Header plus one record per transaction, separated by ``\\n``.

    The document carries no trailing line terminator.
    """

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(row.as_fields() for row in export_rows(transactions))
    return buf.getvalue().removesuffix("\n")


def export_filename(month: str, *, today: date) -> str:
    validate_month(month)
    suffix = today.isoformat() if month == ALL else month
    return f"expense-tracker-{suffix}.csv"


__all__ = [
    "CSV_HEADER",
    "export_filename",
    "export_row",
    "export_rows",
    "render_csv",
]
