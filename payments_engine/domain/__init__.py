"""
Domain package for the payments engine.

Exports the record and state models used by the reader, the engine and the
writers. Keep this package focused on data definitions and validation concerns.
"""

from payments_engine.domain.models import (
    Account,
    EntryKind,
    EntryState,
    LedgerEntry,
    Transaction,
    TransactionType,
    round_amount,
)

__all__ = [
    "Account",
    "EntryKind",
    "EntryState",
    "LedgerEntry",
    "Transaction",
    "TransactionType",
    "round_amount",
]
