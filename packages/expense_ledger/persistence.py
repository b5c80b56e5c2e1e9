"""Persistence collaborators for the ledger.

Two interchangeable backends hand the engine its initial ordered list and
save the updated list after every mutation:

- :class:`JsonLedgerFile`: a JSON array of ``{id, description, amount,
  category, date}`` records in store order. Writes go to ``.tmp`` first and
  are then ``os.replace``d into place.
- :class:`DatabaseLedger`: the ``ledger_transactions`` table owned by
  ``libs/db``; saving replaces the table contents and ``position`` keeps the
  order.

Loading never fails: a missing file, malformed JSON, an invalid record,
duplicate ids or a database error all degrade to an empty list (logged at
WARNING). Save errors propagate to the caller.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

import pydantic
from db.client import create_schema, session_scope
from db.models.ledger import LedgerEntry
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .logging_setup import get_logger
from .models import Transaction, TransactionRecordModel
from .settings import LedgerSettings

_logger = get_logger("expense_ledger.persistence")

_RECORDS = pydantic.TypeAdapter(list[TransactionRecordModel])


class LedgerBackend(Protocol):
    def load(self) -> list[Transaction]: ...

    def save(self, transactions: list[Transaction]) -> None: ...


# ----------------------------------------------------------------------------
# JSON records
# ----------------------------------------------------------------------------


def dump_records(transactions: Iterable[Transaction]) -> str:
    """Serialize ``transactions`` verbatim (order preserved) as a JSON array."""

    records = [TransactionRecordModel.from_transaction(tx) for tx in transactions]
    return _RECORDS.dump_json(records, indent=2).decode("utf-8")


def _unique(transactions: list[Transaction]) -> list[Transaction]:
    ids = [tx.id for tx in transactions]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate transaction ids")
    return transactions


def load_records(text: str | bytes) -> list[Transaction]:
    """Parse a JSON array of records; any problem yields ``[]``."""

    try:
        records = _RECORDS.validate_json(text)
        return _unique([r.to_transaction() for r in records])
    except (pydantic.ValidationError, ValueError):
        _logger.warning("persistence:json_invalid; starting with an empty ledger", exc_info=True)
        return []


class JsonLedgerFile:
    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def load(self) -> list[Transaction]:
        if not self.path.exists():
            return []
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            _logger.warning(
                "persistence:read_failed path=%s; starting with an empty ledger",
                os.fspath(self.path),
                exc_info=True,
            )
            return []
        return load_records(text)

    def save(self, transactions: list[Transaction]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp.write_text(dump_records(transactions), encoding="utf-8")
            os.replace(tmp, self.path)
        except Exception:
            with contextlib.suppress(FileNotFoundError):
                tmp.unlink()
            raise
        _logger.debug("persistence:saved count=%d path=%s", len(transactions), self.path)


# ----------------------------------------------------------------------------
# Database
# ----------------------------------------------------------------------------


def load_transactions(session: Session) -> list[Transaction]:
    rows = session.execute(select(LedgerEntry).order_by(LedgerEntry.position)).scalars()
    return [
        Transaction(
            id=row.id,
            description=row.description,
            amount=row.amount,
            category=row.category,
            date=row.date,
        )
        for row in rows
    ]


def save_transactions(session: Session, transactions: Iterable[Transaction]) -> None:
    """Replace the table contents with ``transactions`` (commit at caller)."""

    session.execute(delete(LedgerEntry))
    session.add_all(
        LedgerEntry(
            id=tx.id,
            position=pos,
            description=tx.description,
            amount=tx.amount,
            category=tx.category,
            date=tx.date,
        )
        for pos, tx in enumerate(transactions)
    )


class DatabaseLedger:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def load(self) -> list[Transaction]:
        try:
            create_schema(database_url=self.database_url)
            with session_scope(database_url=self.database_url) as session:
                return _unique(load_transactions(session))
        except (SQLAlchemyError, ValueError):
            _logger.warning(
                "persistence:db_load_failed; starting with an empty ledger", exc_info=True
            )
            return []

    def save(self, transactions: list[Transaction]) -> None:
        create_schema(database_url=self.database_url)
        with session_scope(database_url=self.database_url) as session:
            save_transactions(session, transactions)


def open_backend(settings: LedgerSettings) -> LedgerBackend:
    if settings.database_url:
        return DatabaseLedger(settings.database_url)
    return JsonLedgerFile(settings.data_file)


__all__ = [
    "DatabaseLedger",
    "JsonLedgerFile",
    "LedgerBackend",
    "dump_records",
    "load_records",
    "load_transactions",
    "open_backend",
    "save_transactions",
]
