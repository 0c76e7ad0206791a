"""
Engine package: the transaction ledger, the account table and the processor
that applies records to them.
"""

from payments_engine.engine.accounts import AccountTable
from payments_engine.engine.ledger import TransactionLedger
from payments_engine.engine.processor import IgnoreReason, Outcome, apply

__all__ = [
    "AccountTable",
    "TransactionLedger",
    "IgnoreReason",
    "Outcome",
    "apply",
]
