"""In-memory transaction store.

The store is the only mutable state in the engine. It keeps records newest
first (insertion at the head), assigns creation-time ids, and validates every
write before touching its contents so a rejected operation leaves no trace.

Missing ids are never an error: ``remove`` and ``update`` report ``False`` and
do nothing, since callers may hold a stale reference to a deleted record.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Iterator
from datetime import date, datetime
from typing import Any

from .logging_setup import get_logger
from .models import (
    Transaction,
    ValidationError,
    clean_description,
    parse_amount,
    parse_date,
)

type Clock = Callable[[], datetime]

_logger = get_logger("expense_ledger.store")


class TransactionStore:
    """Ordered collection of :class:`~expense_ledger.models.Transaction`.

    Parameters
    ----------
    transactions:
        Initial records in display order (newest first), e.g. as supplied by a
        persistence collaborator. Ids must be unique.
    clock:
        Callable returning the current local ``datetime``; used for id
        assignment and the default transaction date. Defaults to
        ``datetime.now``.
    """

    def __init__(
        self, transactions: Iterable[Transaction] = (), *, clock: Clock | None = None
    ) -> None:
        self._clock: Clock = clock or datetime.now
        self._items: list[Transaction] = list(transactions)
        ids = [t.id for t in self._items]
        if len(set(ids)) != len(ids):
            raise ValidationError("transaction ids must be unique")
        self._last_id = max(ids, default=0)

    # -- read side ---------------------------------------------------------

    def list(self) -> list[Transaction]:
        """Return a copy of the records, newest first."""

        return list(self._items)

    def get(self, tx_id: int) -> Transaction | None:
        for tx in self._items:
            if tx.id == tx_id:
                return tx
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._items))

    def __contains__(self, tx_id: object) -> bool:
        return any(tx.id == tx_id for tx in self._items)

    # -- write side --------------------------------------------------------

    def _next_id(self) -> int:
        # Millisecond timestamp, bumped past the last issued id so that two
        # adds within the same millisecond still get distinct, increasing ids.
        candidate = int(self._clock().timestamp() * 1000)
        candidate = max(candidate, self._last_id + 1)
        while candidate in self:
            candidate += 1
        self._last_id = candidate
        return candidate

    def add(
        self,
        description: Any,
        amount: Any,
        category: str = "",
        date: date | str | None = None,
    ) -> int:
        """Validate and insert a new record at the head; return its id.

        Raises :class:`ValidationError` when the trimmed description is empty,
        the amount is not a finite number, or ``date`` is not a calendar date.
        """

        desc = clean_description(description)
        amt = parse_amount(amount)
        day = self._clock().date() if date is None else parse_date(date)

        tx = Transaction(
            id=self._next_id(),
            description=desc,
            amount=amt,
            category=category or "",
            date=day,
        )
        self._items.insert(0, tx)
        _logger.debug("store:add id=%d amount=%s date=%s", tx.id, tx.amount, tx.date)
        return tx.id

    def remove(self, tx_id: int) -> bool:
        for i, tx in enumerate(self._items):
            if tx.id == tx_id:
                del self._items[i]
                _logger.debug("store:remove id=%d", tx_id)
                return True
        return False

    def update(
        self,
        tx_id: int,
        *,
        description: Any = None,
        amount: Any = None,
        category: str | None = None,
        date: date | str | None = None,
    ) -> bool:
        """Replace the editable fields of record ``tx_id`` in place.

        ``description``, ``amount`` and ``date`` are required. ``amount`` is
        taken as a magnitude: when the original record is an expense and the
        new value is positive, it is negated so an edit never turns an
        expense into income. ``category=None`` keeps the current category.

        Returns ``False`` without validating when ``tx_id`` is unknown.
        """

        index = next((i for i, tx in enumerate(self._items) if tx.id == tx_id), None)
        if index is None:
            return False
        original = self._items[index]

        desc = clean_description(description)
        if date is None or (isinstance(date, str) and not date.strip()):
            raise ValidationError("date is required")
        day = parse_date(date)
        amt = parse_amount(amount)
        if original.amount < 0 and amt > 0:
            amt = -amt

        self._items[index] = dataclasses.replace(
            original,
            description=desc,
            amount=amt,
            category=original.category if category is None else category,
            date=day,
        )
        _logger.debug("store:update id=%d amount=%s date=%s", tx_id, amt, day)
        return True

    def clear(self) -> int:
        """Remove every record; return how many there were."""

        count = len(self._items)
        self._items.clear()
        _logger.debug("store:clear removed=%d", count)
        return count


__all__ = ["Clock", "TransactionStore"]
