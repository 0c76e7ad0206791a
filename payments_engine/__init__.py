"""
Payments engine - replays a transaction log into per-client balances.

The package reads a CSV log of deposits, withdrawals, disputes, resolves and
chargebacks, applies each record in order to an in-memory ledger and account
table, and writes the final balance of every client:

- `reader` decodes CSV rows into validated `Transaction` records
- `engine` holds the ledger, the account table and the processor state machine
- `pipeline` drives the fold and applies the record error policy
- `writers` render the account snapshot (csv, table, json)
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from payments_engine.config import ErrorPolicy, Settings, get_settings
from payments_engine.domain.models import (
    Account,
    EntryKind,
    EntryState,
    LedgerEntry,
    Transaction,
    TransactionType,
)
from payments_engine.engine import AccountTable, IgnoreReason, Outcome, TransactionLedger, apply
from payments_engine.errors import (
    DuplicateTransactionError,
    InputError,
    MalformedRecordError,
    MissingAmountError,
    PaymentsEngineError,
    RecordError,
)
from payments_engine.pipeline import PipelineResult, process_transactions, run_pipeline
from payments_engine.utils.logging import configure_logging, get_logger
from payments_engine.writers import available_formats, get_writer

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "ErrorPolicy",
    "Settings",
    "get_settings",
    # Domain
    "Account",
    "EntryKind",
    "EntryState",
    "LedgerEntry",
    "Transaction",
    "TransactionType",
    # Engine
    "AccountTable",
    "TransactionLedger",
    "IgnoreReason",
    "Outcome",
    "apply",
    # Errors
    "PaymentsEngineError",
    "RecordError",
    "MissingAmountError",
    "MalformedRecordError",
    "DuplicateTransactionError",
    "InputError",
    # Pipeline
    "PipelineResult",
    "process_transactions",
    "run_pipeline",
    # Writers
    "available_formats",
    "get_writer",
    # Logging
    "configure_logging",
    "get_logger",
]
