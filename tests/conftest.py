"""Pytest configuration and shared fixtures.

The CLI and persistence collaborators read ``EXPENSE_LEDGER_DATA_FILE`` and
``DATABASE_URL`` from the environment. To keep tests hermetic, an autouse
fixture points the data file at the test's own temporary directory and
removes any ambient ``DATABASE_URL``.

Engine functions take ``now``/``today`` explicitly; the ``clock`` fixture
provides a frozen "current time" for the store and ledger.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest
from expense_ledger.models import Transaction

NOW = datetime(2024, 3, 15, 10, 30)


@pytest.fixture(autouse=True)
def _isolate_ledger_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_file = tmp_path / "ledger" / "transactions.json"
    monkeypatch.setenv("EXPENSE_LEDGER_DATA_FILE", os.fspath(data_file))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.chdir(tmp_path)
    return data_file


@pytest.fixture
def data_file(_isolate_ledger_env: Path) -> Path:
    return _isolate_ledger_env


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: NOW


@pytest.fixture
def make_tx() -> Callable[..., Transaction]:
    """Build a ``Transaction`` with terse arguments: ``make_tx(1, -20, "2024-01-05")``."""

    def _make(
        tx_id: int,
        amount: str | int | float,
        day: str,
        *,
        description: str = "item",
        category: str = "misc",
    ) -> Transaction:
        return Transaction(
            id=tx_id,
            description=description,
            amount=Decimal(str(amount)),
            category=category,
            date=date.fromisoformat(day),
        )

    return _make
