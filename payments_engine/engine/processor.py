"""
Transaction processor: the state machine that folds one record at a time
into the ledger and the account table.

Rules, per record:

1. Resolve the client's account (created on first reference).
2. A locked account ignores every record, deposits included.
3. If the ledger already knows the tx id, only dispute, resolve and
   chargeback act on it, and only for deposit-origin entries:

       normal   --dispute-->    disputed
       disputed --resolve-->    normal
       disputed --chargeback--> charged_back   (terminal, locks the account)

   A deposit or withdrawal reusing a known tx id is ignored.
4. Otherwise the record is the first mention of the tx id. Deposits and
   withdrawals must carry an amount (else `MissingAmountError`) and create
   a ledger entry; a withdrawal only executes with sufficient available
   funds. Dispute, resolve and chargeback on an unknown tx id are ignored.

Ignored records are not errors. `apply` reports them through `Outcome`.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from payments_engine.domain.models import (
    Account,
    EntryKind,
    LedgerEntry,
    Transaction,
    TransactionType,
)
from payments_engine.engine.accounts import AccountTable
from payments_engine.engine.ledger import TransactionLedger
from payments_engine.errors import MissingAmountError
from payments_engine.utils.logging import get_logger

log = get_logger(__name__)


class IgnoreReason(str, Enum):
    LOCKED = "locked"
    DUPLICATE_TX = "duplicate_tx"
    UNKNOWN_TX = "unknown_tx"
    NOT_A_DEPOSIT = "not_a_deposit"
    ALREADY_DISPUTED = "already_disputed"
    ALREADY_CHARGED_BACK = "already_charged_back"
    NOT_DISPUTED = "not_disputed"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    CLIENT_MISMATCH = "client_mismatch"


@dataclass(frozen=True)
class Outcome:
    applied: bool
    reason: Optional[IgnoreReason] = None

    @classmethod
    def ignored(cls, reason: IgnoreReason) -> "Outcome":
        return cls(applied=False, reason=reason)


APPLIED = Outcome(applied=True)


def apply(
    record: Transaction,
    ledger: TransactionLedger,
    accounts: AccountTable,
    *,
    strict_client_match: bool = False,
) -> Outcome:
    """
    Apply a single record.

    Raises
    ------
    MissingAmountError
        A deposit or withdrawal for a new tx id has no amount. No balance
        or ledger entry changes in that case.
    """
    account = accounts.get_or_create(record.client_id)
    if account.locked:
        return _ignored(record, Outcome.ignored(IgnoreReason.LOCKED))

    entry = ledger.lookup(record.tx_id)
    if entry is not None:
        outcome = _apply_to_entry(record, entry, account, strict_client_match)
    else:
        outcome = _apply_new(record, ledger, account)

    if not outcome.applied:
        return _ignored(record, outcome)
    return outcome


def _apply_to_entry(
    record: Transaction, entry: LedgerEntry, account: Account, strict_client_match: bool
) -> Outcome:
    if record.kind.requires_amount:
        return Outcome.ignored(IgnoreReason.DUPLICATE_TX)
    if strict_client_match and entry.client_id != record.client_id:
        return Outcome.ignored(IgnoreReason.CLIENT_MISMATCH)
    if entry.kind is not EntryKind.DEPOSIT:
        return Outcome.ignored(IgnoreReason.NOT_A_DEPOSIT)

    amount = entry.amount
    if record.kind is TransactionType.DISPUTE:
        if entry.charged_back:
            return Outcome.ignored(IgnoreReason.ALREADY_CHARGED_BACK)
        if entry.disputed:
            return Outcome.ignored(IgnoreReason.ALREADY_DISPUTED)
        entry.disputed = True
        entry.charged_back = False
        account.available -= amount
        account.held += amount
        return APPLIED

    if not entry.disputed:
        return Outcome.ignored(IgnoreReason.NOT_DISPUTED)

    if record.kind is TransactionType.RESOLVE:
        entry.disputed = False
        entry.charged_back = False
        account.available += amount
        account.held -= amount
        return APPLIED

    # chargeback
    entry.disputed = False
    entry.charged_back = True
    account.total -= amount
    account.held -= amount
    account.locked = True
    log.info(
        "Account locked after chargeback",
        extra={"client": record.client_id, "tx": record.tx_id},
    )
    return APPLIED


def _apply_new(record: Transaction, ledger: TransactionLedger, account: Account) -> Outcome:
    if not record.kind.requires_amount:
        return Outcome.ignored(IgnoreReason.UNKNOWN_TX)

    amount = _required_amount(record)
    if record.kind is TransactionType.DEPOSIT:
        amount = abs(amount)
        ledger.insert(record.tx_id, LedgerEntry(EntryKind.DEPOSIT, amount, record.client_id))
        account.total += amount
        account.available += amount
        return APPLIED

    if amount > account.available:
        return Outcome.ignored(IgnoreReason.INSUFFICIENT_FUNDS)
    ledger.insert(record.tx_id, LedgerEntry(EntryKind.WITHDRAWAL, -amount, record.client_id))
    account.total -= amount
    account.available -= amount
    return APPLIED


def _required_amount(record: Transaction) -> Decimal:
    if record.amount is None:
        raise MissingAmountError(record.kind.value, record.client_id, record.tx_id)
    return record.amount


def _ignored(record: Transaction, outcome: Outcome) -> Outcome:
    log.debug(
        "Record ignored",
        extra={
            "type": record.kind.value,
            "client": record.client_id,
            "tx": record.tx_id,
            "reason": outcome.reason.value if outcome.reason else None,
        },
    )
    return outcome


__all__ = ["IgnoreReason", "Outcome", "apply"]
