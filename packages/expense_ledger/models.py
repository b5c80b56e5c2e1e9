"""Data models and type aliases for ``expense_ledger``.

The ledger has a single entity, :class:`Transaction`, whose ``amount`` sign
encodes its type (positive income, negative expense). Everything else in this
module is a derived, read-only value produced by the engine (summaries, quick
stats, chart series) or a DTO describing the on-disk record shape.
"""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ValidationError(ValueError):
    """Raised when a transaction input is rejected; the store is left untouched."""


# ---------------------------------------------------------------------------
# Filter vocabulary
# ---------------------------------------------------------------------------

type TypeFilter = Literal["all", "income", "expense"]

ALL = "all"
TYPE_FILTERS: tuple[str, ...] = ("all", "income", "expense")

ZERO = Decimal("0")

# Exclusive bound on an amount's magnitude. Cent-quantized values, and sums
# of many of them, stay well inside the default 28-digit decimal context.
MAX_AMOUNT = Decimal("1e20")


# ---------------------------------------------------------------------------
# Input parsing
# ---------------------------------------------------------------------------


def parse_amount(raw: Any) -> Decimal:
    """Parse ``raw`` into a finite ``Decimal``.

    Accepts ``Decimal``, ``int``, ``float`` and numeric strings (surrounding
    whitespace ignored). Booleans, empty strings, non-numeric text, NaN,
    infinities and magnitudes of ``MAX_AMOUNT`` or more are rejected with
    :class:`ValidationError`.
    """

    if raw is None or isinstance(raw, bool):
        raise ValidationError("amount is required")
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise ValidationError(f"invalid amount: {raw!r}")
        # Go through str() so 0.1 stays 0.1 rather than its binary expansion.
        raw = str(raw)
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise ValidationError("amount is empty")
    try:
        d = Decimal(raw)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"invalid amount: {raw!r}") from exc
    return check_amount(d)


def check_amount(d: Decimal) -> Decimal:
    if not d.is_finite():
        raise ValidationError(f"invalid amount: {d}")
    if abs(d) >= MAX_AMOUNT:
        raise ValidationError(f"amount out of range: {d}")
    return d


def parse_date(raw: Any) -> dt.date:
    """Parse a ``YYYY-MM-DD`` string (or pass through a ``date``)."""

    if isinstance(raw, dt.date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("date is required")
    try:
        return dt.date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValidationError(f"invalid date: {raw!r}") from exc


def clean_description(raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("description must not be empty")
    return raw.strip()


# ---------------------------------------------------------------------------
# Core record
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single signed monetary record.

    Attributes
    ----------
    id:
        Creation-time identifier, unique within a store; never changes.
    description:
        Trimmed, non-empty text.
    amount:
        Signed amount. ``> 0`` is income, ``< 0`` is expense. Zero passes
        validation but counts as neither type in any aggregate.
    category:
        Free-text label stored verbatim. Matching is case-insensitive and the
        capitalized form is only produced for display.
    date:
        Calendar day without a time component.
    """

    id: int
    description: str
    amount: Decimal
    category: str
    date: dt.date

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def kind(self) -> Literal["income", "expense"] | None:
        if self.amount > 0:
            return "income"
        if self.amount < 0:
            return "expense"
        return None

    @property
    def month_key(self) -> str:
        """Calendar year-month as ``YYYY-MM`` (1-indexed, zero-padded)."""

        return f"{self.date.year:04d}-{self.date.month:02d}"


type Transactions = Iterable[Transaction]
"""Any iterable of transactions; engine functions never mutate their input."""


# ---------------------------------------------------------------------------
# Query and derived results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LedgerQuery:
    """Active filters for the display list.

    ``month`` is the shared, global month filter. ``search`` and
    ``type_filter`` only ever narrow the display list; summaries, quick stats,
    charts and exports ignore them.
    """

    search: str = ""
    type_filter: TypeFilter = "all"
    month: str = ALL


@dataclass(frozen=True, slots=True)
class Summary:
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class QuickStats:
    today_expense: Decimal = ZERO
    week_expense: Decimal = ZERO
    category_totals: dict[str, Decimal] = field(default_factory=dict)
    top_category: str | None = None
    avg_monthly_expense: Decimal = ZERO

    @property
    def top_category_label(self) -> str:
        """Capitalized top category, or ``-`` when there are no expenses."""

        if self.top_category is None:
            return "-"
        return self.top_category[:1].upper() + self.top_category[1:]


@dataclass(frozen=True, slots=True)
class ComparisonSeries:
    income: Decimal
    expense: Decimal
    income_percent: float
    expense_percent: float


@dataclass(frozen=True, slots=True)
class ChartBar:
    label: str
    total: Decimal
    height: float
    value_label: str


@dataclass(frozen=True, slots=True)
class ChartSeries:
    """Expense histogram; ``empty`` means render a placeholder, not bars."""

    mode: Literal["monthly", "daily"]
    bars: tuple[ChartBar, ...]
    empty: bool


@dataclass(frozen=True, slots=True)
class MonthOption:
    key: str
    label: str


@dataclass(frozen=True, slots=True)
class DisplayRow:
    id: int
    description: str
    amount: str
    category: str
    date: str
    kind: Literal["income", "expense"]


@dataclass(frozen=True, slots=True)
class ExportRow:
    date: str
    description: str
    category: str
    amount: str
    type: Literal["Income", "Expense"]

    def as_fields(self) -> tuple[str, str, str, str, str]:
        return (self.date, self.description, self.category, self.amount, self.type)


@dataclass(frozen=True, slots=True)
class LedgerView:
    """Everything the presentation layer needs, recomputed from scratch."""

    transactions: Sequence[Transaction]
    summary: Summary
    stats: QuickStats
    comparison: ComparisonSeries
    chart: ChartSeries
    months: Sequence[MonthOption]
    month: str


@dataclass(frozen=True, slots=True)
class CsvExport:
    filename: str
    content: str
    count: int


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of a ledger action: a user-facing message instead of a raise."""

    ok: bool
    message: str
    transaction_id: int | None = None
    export: CsvExport | None = None


# ---------------------------------------------------------------------------
# DTO for the persisted record shape
# ---------------------------------------------------------------------------


class TransactionRecordModel(BaseModel):
    """Typed, validated model of one persisted ``{id, description, amount,
    category, date}`` record.

    Extra keys are ignored so that older or hand-edited files still load.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: int
    description: str
    amount: Decimal
    category: str
    date: dt.date

    @field_validator("description")
    @classmethod
    def _description_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("description must be non-empty")
        return v

    @field_validator("amount")
    @classmethod
    def _amount_in_range(cls, v: Decimal) -> Decimal:
        return check_amount(v)

    @field_serializer("amount")
    def _amount_exact(self, v: Decimal) -> int | float | str:
        # A JSON number when it reloads to the same value, else the decimal text.
        if v == v.to_integral_value():
            return int(v)
        as_float = float(v)
        if Decimal(repr(as_float)) == v:
            return as_float
        return str(v)

    @classmethod
    def from_transaction(cls, tx: Transaction) -> TransactionRecordModel:
        return cls(
            id=tx.id,
            description=tx.description,
            amount=tx.amount,
            category=tx.category,
            date=tx.date,
        )

    def to_transaction(self) -> Transaction:
        return Transaction(
            id=self.id,
            description=self.description,
            amount=self.amount,
            category=self.category,
            date=self.date,
        )


__all__ = [
    "ALL",
    "TYPE_FILTERS",
    "MAX_AMOUNT",
    "ZERO",
    "ActionResult",
    "ChartBar",
    "ChartSeries",
    "ComparisonSeries",
    "CsvExport",
    "DisplayRow",
    "ExportRow",
    "LedgerQuery",
    "LedgerView",
    "MonthOption",
    "QuickStats",
    "Summary",
    "Transaction",
    "TransactionRecordModel",
    "Transactions",
    "TypeFilter",
    "ValidationError",
    "clean_description",
    "check_amount",
    "parse_amount",
    "parse_date",
]
