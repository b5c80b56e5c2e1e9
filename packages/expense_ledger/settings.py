"""Environment-driven settings for the CLI and persistence collaborators.

Variables
---------
- ``EXPENSE_LEDGER_DATA_FILE``: JSON snapshot path. Default:
  ``./.ledger/transactions.json`` under the current working directory.
- ``DATABASE_URL``: when set, the database backend is used instead of the
  JSON snapshot.
- ``EXPENSE_LEDGER_LOG_LEVEL``: read by :mod:`expense_ledger.logging_setup`.

Explicit arguments (CLI flags) always win over the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_FILE_ENV = "EXPENSE_LEDGER_DATA_FILE"
DATABASE_URL_ENV = "DATABASE_URL"


def _get_data_file(override: str | os.PathLike[str] | None = None) -> Path:
    raw = override if override is not None else os.getenv(DATA_FILE_ENV)
    if raw is not None and str(raw).strip():
        return Path(raw).expanduser().resolve()
    return (Path.cwd() / ".ledger" / "transactions.json").resolve()


@dataclass(frozen=True, slots=True)
class LedgerSettings:
    data_file: Path
    database_url: str | None = None

    @classmethod
    def from_env(
        cls,
        *,
        data_file: str | os.PathLike[str] | None = None,
        database_url: str | None = None,
    ) -> LedgerSettings:
        url = database_url or os.getenv(DATABASE_URL_ENV) or None
        return cls(data_file=_get_data_file(data_file), database_url=url)


__all__ = ["DATA_FILE_ENV", "DATABASE_URL_ENV", "LedgerSettings"]
