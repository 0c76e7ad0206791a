"""
Exception hierarchy for the payments engine.

Only malformed *records* are errors. Well-formed records that reference
unknown, wrongly-staged or foreign transactions, withdrawals without enough
funds, and activity on locked accounts are silent no-ops handled inside the
processor and never surface here.
"""

from __future__ import annotations

from typing import Optional


class PaymentsEngineError(Exception):
    """Base class for all payments engine errors."""


class RecordError(PaymentsEngineError):
    """
    A single input record could not be processed.

    The pipeline's error policy decides whether the run skips the record or
    aborts.
    """

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


class MissingAmountError(RecordError):
    """A deposit or withdrawal record arrived without an amount."""

    def __init__(self, kind: str, client_id: int, tx_id: int, line: Optional[int] = None) -> None:
        super().__init__(f"{kind} transaction expected to have an amount", line=line)
        self.kind = kind
        self.client_id = client_id
        self.tx_id = tx_id


class MalformedRecordError(RecordError):
    """The reader could not decode a row into a transaction record."""


class DuplicateTransactionError(PaymentsEngineError):
    """A ledger entry already exists for the transaction id."""

    def __init__(self, tx_id: int) -> None:
        super().__init__(f"ledger already holds an entry for tx {tx_id}")
        self.tx_id = tx_id


class InputError(PaymentsEngineError):
    """The input source is missing, unreadable or has no header row."""


__all__ = [
    "PaymentsEngineError",
    "RecordError",
    "MissingAmountError",
    "MalformedRecordError",
    "DuplicateTransactionError",
    "InputError",
]
