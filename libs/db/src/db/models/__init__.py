"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the ledger models used by ``expense_ledger``.
"""

from .ledger import Base, LedgerEntry

__all__ = [
    "Base",
    "LedgerEntry",
]
