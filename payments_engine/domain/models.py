"""
Domain models for the payments engine.

`Transaction` is the validated input unit produced by the reader. `LedgerEntry`
and `Account` are the mutable state the processor folds records into; they
are plain dataclasses because the processor updates them in place for every
record.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

AMOUNT_PLACES = 4
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_PLACES)

# Bounds on input amounts: sums and 4-place rounding stay exact in the
# default 28-digit decimal context.
MAX_AMOUNT = Decimal(10) ** 15
MAX_INPUT_PLACES = 8

MAX_CLIENT_ID = 2**16 - 1
MAX_TX_ID = 2**32 - 1


def round_amount(value: Decimal) -> Decimal:
    """Round an amount to the emitted precision (4 decimal places)."""
    return value.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def requires_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class Transaction(BaseModel):
    """
    One decoded input record.

    `amount` is only meaningful for deposits and withdrawals. It is left
    optional here so that a deposit without an amount reaches the processor
    and is rejected there as `MissingAmountError`.
    """

    kind: TransactionType = Field(..., alias="type", description="Record type.")
    client_id: int = Field(..., alias="client", ge=0, le=MAX_CLIENT_ID, description="Client id (u16).")
    tx_id: int = Field(..., alias="tx", ge=0, le=MAX_TX_ID, description="Transaction id (u32).")
    amount: Optional[Decimal] = Field(None, description="Amount for deposits and withdrawals.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "allow_inf_nan": False,
    }

    @field_validator("amount")
    @classmethod
    def _amount_fits(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is None:
            return value
        if abs(value) >= MAX_AMOUNT:
            raise ValueError(f"amount must be less than {MAX_AMOUNT:,} in magnitude")
        if value.normalize().as_tuple().exponent < -MAX_INPUT_PLACES:
            raise ValueError(f"amount must have at most {MAX_INPUT_PLACES} decimal places")
        return value


class EntryKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class EntryState(str, Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


@dataclass
class LedgerEntry:
    """
    State of one accepted deposit or withdrawal.

    `amount` is signed: positive for deposits, negative for withdrawals, so it
    is always the value to reverse out of `available`.
    """

    kind: EntryKind
    amount: Decimal
    client_id: int
    disputed: bool = False
    charged_back: bool = False

    @property
    def state(self) -> EntryState:
        if self.charged_back:
            return EntryState.CHARGED_BACK
        if self.disputed:
            return EntryState.DISPUTED
        return EntryState.NORMAL


@dataclass
class Account:
    """Balance snapshot for a single client. `total == available + held` always holds."""

    client_id: int
    available: Decimal = field(default_factory=Decimal)
    held: Decimal = field(default_factory=Decimal)
    total: Decimal = field(default_factory=Decimal)
    locked: bool = False

    def is_balanced(self) -> bool:
        return self.total == self.available + self.held

    def rounded(self) -> dict:
        """Row representation with amounts rounded for output."""
        return {
            "client": self.client_id,
            "available": round_amount(self.available),
            "held": round_amount(self.held),
            "total": round_amount(self.total),
            "locked": self.locked,
        }


__all__ = [
    "AMOUNT_PLACES",
    "MAX_AMOUNT",
    "MAX_INPUT_PLACES",
    "MAX_CLIENT_ID",
    "MAX_TX_ID",
    "round_amount",
    "TransactionType",
    "Transaction",
    "EntryKind",
    "EntryState",
    "LedgerEntry",
    "Account",
]
