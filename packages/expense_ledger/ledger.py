"""Ledger controller: explicit actions over a store handle.

A :class:`Ledger` wraps one :class:`~expense_ledger.store.TransactionStore`
together with the global month filter, a clock, and an optional change hook
that a persistence collaborator uses to save the full ordered list after every
successful mutation.

Actions (``on_add``, ``on_edit``, ``on_delete``, ``on_clear``,
``on_export``) never raise for user input problems; they return an
:class:`~expense_ledger.models.ActionResult` carrying the message to show.
Destructive actions run unconditionally: asking for confirmation is the
presentation layer's job.

``view`` recomputes every derived value from the current store contents and
filters. There is no incremental state, so two calls with the same store and
filters always return equal views.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import Any

from .aggregate import compute_quick_stats, summarize
from .charts import comparison_series, expense_chart
from .export import export_filename, render_csv
from .filters import (
    filter_transactions,
    month_options,
    month_scoped,
    resolve_month_filter,
    validate_month,
)
from .formatting import format_currency
from .logging_setup import get_logger
from .models import (
    ALL,
    ActionResult,
    CsvExport,
    LedgerQuery,
    LedgerView,
    Transaction,
    TypeFilter,
    ValidationError,
)
from .store import Clock, TransactionStore

type ChangeHook = Callable[[list[Transaction]], None]

_logger = get_logger("expense_ledger.ledger")


class Ledger:
    def __init__(
        self,
        store: TransactionStore,
        *,
        month: str = ALL,
        clock: Clock | None = None,
        on_change: ChangeHook | None = None,
    ) -> None:
        self.store = store
        self._clock: Clock = clock or datetime.now
        self._on_change = on_change
        self._month = validate_month(month)

    @classmethod
    def from_transactions(
        cls,
        transactions: Iterable[Transaction] = (),
        *,
        clock: Clock | None = None,
        on_change: ChangeHook | None = None,
    ) -> Ledger:
        return cls(TransactionStore(transactions, clock=clock), clock=clock, on_change=on_change)

    # -- month filter ------------------------------------------------------

    @property
    def month(self) -> str:
        return self._month

    def set_month_filter(self, month: str) -> str:
        self._month = validate_month(month)
        return self._month

    def today(self) -> date:
        return self._clock().date()

    def _commit(self) -> None:
        # A month that no longer has transactions stops being selectable.
        self._month = resolve_month_filter(self._month, month_options(self.store))
        if self._on_change is not None:
            self._on_change(self.store.list())

    # -- actions -----------------------------------------------------------

    def on_add(
        self,
        description: Any,
        amount: Any,
        category: str = "",
        date: date | str | None = None,
    ) -> ActionResult:
        try:
            tx_id = self.store.add(description, amount, category, date)
        except ValidationError as e:
            _logger.info("ledger:add rejected reason=%s", e)
            return ActionResult(
                ok=False, message=f"Please enter a valid description and amount ({e})"
            )
        self._commit()
        tx = self.store.get(tx_id)
        assert tx is not None  # just inserted
        kind = "Income" if tx.amount > 0 else "Expense"
        return ActionResult(ok=True, message=f"{kind} added successfully!", transaction_id=tx_id)

    def on_edit(
        self,
        tx_id: int,
        *,
        description: Any = None,
        amount: Any = None,
        category: str | None = None,
        date: date | str | None = None,
    ) -> ActionResult:
        try:
            updated = self.store.update(
                tx_id,
                description=description,
                amount=amount,
                category=category,
                date=date,
            )
        except ValidationError as e:
            _logger.info("ledger:edit rejected id=%d reason=%s", tx_id, e)
            return ActionResult(
                ok=False, message=f"Please fill all fields correctly ({e})", transaction_id=tx_id
            )
        if not updated:
            return ActionResult(
                ok=False, message="Transaction no longer exists", transaction_id=tx_id
            )
        self._commit()
        return ActionResult(
            ok=True, message="Transaction updated successfully!", transaction_id=tx_id
        )

    def on_delete(self, tx_id: int) -> ActionResult:
        tx = self.store.get(tx_id)
        if tx is None:
            return ActionResult(
                ok=False, message="Transaction no longer exists", transaction_id=tx_id
            )
        # Built before the removal so a formatting error leaves the store as is.
        message = f"Deleted {tx.description} ({format_currency(tx.amount)})"
        self.store.remove(tx_id)
        self._commit()
        return ActionResult(ok=True, message=message, transaction_id=tx_id)

    def on_clear(self) -> ActionResult:
        removed = self.store.clear()
        if removed == 0:
            return ActionResult(ok=False, message="No transactions to clear")
        self._commit()
        _logger.info("ledger:clear removed=%d", removed)
        return ActionResult(ok=True, message="All transactions cleared!")

    def on_export(self) -> ActionResult:
        if len(self.store) == 0:
            return ActionResult(ok=False, message="No transactions to export")
        subset = month_scoped(self.store, self._month)
        export = CsvExport(
            filename=export_filename(self._month, today=self.today()),
            content=render_csv(subset),
            count=len(subset),
        )
        return ActionResult(
            ok=True,
            message=f"Exported {export.count} transactions to CSV",
            export=export,
        )

    # -- derived views -----------------------------------------------------

    def view(self, search: str = "", type_filter: TypeFilter = "all") -> LedgerView:
        """Recompute the display list, totals, stats and charts.

        ``search`` and ``type_filter`` narrow the display list only; every
        other part of the view is computed from the month-scoped subset.
        """

        now = self._clock()
        records = self.store.list()
        query = LedgerQuery(search=search, type_filter=type_filter, month=self._month)
        scoped = month_scoped(records, self._month)
        summary = summarize(scoped)
        return LedgerView(
            transactions=filter_transactions(records, query),
            summary=summary,
            stats=compute_quick_stats(scoped, now=now),
            comparison=comparison_series(summary),
            chart=expense_chart(scoped, month=self._month, today=now.date()),
            months=month_options(records),
            month=self._month,
        )


__all__ = ["ChangeHook", "Ledger"]
