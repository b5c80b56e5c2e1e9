from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import BigInteger, Date, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class Base(DeclarativeBase):
    pass


class DecimalText(TypeDecorator[Decimal]):
    """``Decimal`` stored as its canonical text; a reload yields the same digits."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect) -> str | None:
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value: str | None, dialect) -> Decimal | None:
        if value is None:
            return None
        return Decimal(value)


# ---------------------------
# Core: ledger_transactions
# ---------------------------


class LedgerEntry(Base):
    """One persisted ledger transaction.

    ``id`` is the creation-time id assigned by the in-memory store, not a
    database sequence. ``position`` records the store order (0 = newest) so a
    reload reproduces the list verbatim.
    """

    __tablename__ = "ledger_transactions"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Signed: > 0 income, < 0 expense.
    amount: Mapped[Decimal] = mapped_column(DecimalText, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False, server_default="")
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
