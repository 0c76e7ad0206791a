from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

import pytest

from payments_engine.domain.models import Account, EntryKind, EntryState, Transaction, TransactionType
from payments_engine.engine import AccountTable, IgnoreReason, TransactionLedger, apply
from payments_engine.errors import MissingAmountError


def _tx(kind: TransactionType, client: int, tx: int, amount: Optional[str] = None) -> Transaction:
    return Transaction(
        kind=kind,
        client_id=client,
        tx_id=tx,
        amount=Decimal(amount) if amount is not None else None,
    )


def deposit(client: int, tx: int, amount: Optional[str]) -> Transaction:
    return _tx(TransactionType.DEPOSIT, client, tx, amount)


def withdrawal(client: int, tx: int, amount: Optional[str]) -> Transaction:
    return _tx(TransactionType.WITHDRAWAL, client, tx, amount)


def dispute(client: int, tx: int) -> Transaction:
    return _tx(TransactionType.DISPUTE, client, tx)


def resolve(client: int, tx: int) -> Transaction:
    return _tx(TransactionType.RESOLVE, client, tx)


def chargeback(client: int, tx: int) -> Transaction:
    return _tx(TransactionType.CHARGEBACK, client, tx)


def replay(ledger: TransactionLedger, accounts: AccountTable, *records: Transaction, **kwargs) -> list:
    return [apply(record, ledger, accounts, **kwargs) for record in records]


def expected(client: int, available: str, held: str, total: str, locked: bool = False) -> Account:
    return Account(
        client_id=client,
        available=Decimal(available),
        held=Decimal(held),
        total=Decimal(total),
        locked=locked,
    )


class TestScenarios:
    """Reference scenarios for the dispute lifecycle."""

    def test_deposit(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "1.0"))
        assert accounts.get(1) == expected(1, "1.0", "0.0", "1.0")

    def test_dispute_deposit(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "1.0"), dispute(1, 1))
        assert accounts.get(1) == expected(1, "0.0", "1.0", "1.0")
        assert ledger.lookup(1).state is EntryState.DISPUTED

    def test_resolve_dispute(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "1.0"), dispute(1, 1), resolve(1, 1))
        assert accounts.get(1) == expected(1, "1.0", "0.0", "1.0")
        assert ledger.lookup(1).state is EntryState.NORMAL

    def test_chargeback_locks_account(self, ledger, accounts):
        outcomes = replay(
            ledger,
            accounts,
            deposit(1, 1, "1.0"),
            dispute(1, 1),
            chargeback(1, 1),
            deposit(1, 2, "100.0"),
        )
        assert accounts.get(1) == expected(1, "0.0", "0.0", "0.0", locked=True)
        assert ledger.lookup(1).state is EntryState.CHARGED_BACK
        assert 2 not in ledger
        assert outcomes[-1].reason is IgnoreReason.LOCKED

    def test_withdrawal(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "10.0"), withdrawal(1, 2, "7.0"))
        assert accounts.get(1) == expected(1, "3.0", "0.0", "3.0")

    def test_withdrawal_with_insufficient_funds_is_ignored(self, ledger, accounts):
        outcomes = replay(ledger, accounts, deposit(1, 1, "5.0"), withdrawal(1, 2, "10.0"))
        assert accounts.get(1) == expected(1, "5.0", "0.0", "5.0")
        assert outcomes[1].reason is IgnoreReason.INSUFFICIENT_FUNDS
        assert 2 not in ledger

    def test_withdrawal_of_entire_balance_is_allowed(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "5.0"), withdrawal(1, 2, "5.0"))
        assert accounts.get(1) == expected(1, "0.0", "0.0", "0.0")
        assert ledger.lookup(2).amount == Decimal("-5.0")

    def test_deposit_without_amount_raises(self, ledger, accounts):
        with pytest.raises(MissingAmountError) as exc_info:
            apply(deposit(1, 1, None), ledger, accounts)

        assert exc_info.value.tx_id == 1
        assert len(ledger) == 0
        # get-or-create runs before the amount check, so an empty account remains
        assert accounts.get(1) == expected(1, "0", "0", "0")


class TestIgnoredRecords:
    """Well-formed records that must not change state and must not raise."""

    def test_dispute_on_unknown_tx(self, ledger, accounts):
        outcomes = replay(ledger, accounts, deposit(1, 1, "5.0"), dispute(1, 2))
        assert accounts.get(1) == expected(1, "5.0", "0.0", "5.0")
        assert outcomes[1].reason is IgnoreReason.UNKNOWN_TX

    @pytest.mark.parametrize("record", [resolve(1, 9), chargeback(1, 9)])
    def test_resolve_and_chargeback_on_unknown_tx(self, ledger, accounts, record):
        replay(ledger, accounts, deposit(1, 1, "5.0"))
        outcome = apply(record, ledger, accounts)
        assert not outcome.applied
        assert accounts.get(1) == expected(1, "5.0", "0.0", "5.0")

    def test_resolve_on_undisputed_tx(self, ledger, accounts):
        outcomes = replay(ledger, accounts, deposit(1, 1, "5.0"), resolve(1, 1))
        assert accounts.get(1) == expected(1, "5.0", "0.0", "5.0")
        assert outcomes[1].reason is IgnoreReason.NOT_DISPUTED

    def test_chargeback_on_undisputed_tx(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "5.0"), chargeback(1, 1))
        assert accounts.get(1) == expected(1, "5.0", "0.0", "5.0")

    def test_dispute_on_disputed_tx(self, ledger, accounts):
        outcomes = replay(ledger, accounts, deposit(1, 1, "5.0"), dispute(1, 1), dispute(1, 1))
        assert accounts.get(1) == expected(1, "0.0", "5.0", "5.0")
        assert outcomes[2].reason is IgnoreReason.ALREADY_DISPUTED

    def test_withdrawal_cannot_be_disputed(self, ledger, accounts):
        outcomes = replay(
            ledger,
            accounts,
            deposit(1, 1, "10.0"),
            withdrawal(1, 2, "4.0"),
            dispute(1, 2),
            resolve(1, 2),
            chargeback(1, 2),
        )
        assert accounts.get(1) == expected(1, "6.0", "0.0", "6.0")
        assert ledger.lookup(2).kind is EntryKind.WITHDRAWAL
        assert [o.reason for o in outcomes[2:]] == [IgnoreReason.NOT_A_DEPOSIT] * 3

    def test_duplicate_deposit_tx_is_ignored(self, ledger, accounts):
        outcomes = replay(ledger, accounts, deposit(1, 1, "5.0"), deposit(1, 1, "7.0"))
        assert accounts.get(1) == expected(1, "5.0", "0.0", "5.0")
        assert ledger.lookup(1).amount == Decimal("5.0")
        assert outcomes[1].reason is IgnoreReason.DUPLICATE_TX

    def test_tx_collision_with_other_client_is_ignored(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "5.0"), withdrawal(2, 1, "1.0"), deposit(2, 1, "3.0"))
        assert accounts.get(1) == expected(1, "5.0", "0.0", "5.0")
        assert accounts.get(2) == expected(2, "0", "0", "0")
        assert ledger.lookup(1).client_id == 1

    def test_duplicate_tx_without_amount_is_ignored_not_rejected(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "5.0"))
        outcome = apply(deposit(1, 1, None), ledger, accounts)
        assert outcome.reason is IgnoreReason.DUPLICATE_TX

    def test_locked_account_ignores_records_without_amount(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "5.0"), dispute(1, 1), chargeback(1, 1))
        outcome = apply(withdrawal(1, 2, None), ledger, accounts)
        assert outcome.reason is IgnoreReason.LOCKED

    def test_charged_back_entry_is_terminal(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "5.0"), dispute(1, 1), chargeback(1, 1))
        # the owner is locked; another client referencing the same tx cannot revive it
        outcome = apply(dispute(2, 1), ledger, accounts)
        assert outcome.reason is IgnoreReason.ALREADY_CHARGED_BACK
        assert accounts.get(2) == expected(2, "0", "0", "0")

    def test_ignored_record_is_logged_at_debug(self, ledger, accounts, caplog):
        with caplog.at_level(logging.DEBUG, logger="payments_engine.engine.processor"):
            apply(dispute(1, 42), ledger, accounts)
        records = [r for r in caplog.records if r.getMessage() == "Record ignored"]
        assert len(records) == 1
        assert records[0].reason == "unknown_tx"
        assert records[0].tx == 42


class TestClientMatch:
    def test_foreign_dispute_applies_to_filing_client_by_default(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "5.0"), deposit(2, 2, "5.0"), dispute(2, 1))
        assert accounts.get(1) == expected(1, "5.0", "0.0", "5.0")
        assert accounts.get(2) == expected(2, "0.0", "5.0", "5.0")

    def test_foreign_dispute_ignored_when_strict(self, ledger, accounts):
        outcomes = replay(
            ledger,
            accounts,
            deposit(1, 1, "5.0"),
            deposit(2, 2, "5.0"),
            dispute(2, 1),
            strict_client_match=True,
        )
        assert outcomes[2].reason is IgnoreReason.CLIENT_MISMATCH
        assert accounts.get(2) == expected(2, "5.0", "0.0", "5.0")
        assert not ledger.lookup(1).disputed


class TestAmounts:
    def test_negative_deposit_is_stored_as_magnitude(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "-2.5"))
        assert accounts.get(1) == expected(1, "2.5", "0", "2.5")
        assert ledger.lookup(1).amount == Decimal("2.5")

    def test_full_precision_is_kept(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "0.00001"), deposit(1, 2, "0.00001"))
        assert accounts.get(1).available == Decimal("0.00002")

    def test_multiple_disputes_accumulate_held(self, ledger, accounts):
        replay(
            ledger,
            accounts,
            deposit(1, 1, "1.5"),
            deposit(1, 2, "2.25"),
            dispute(1, 1),
            dispute(1, 2),
            resolve(1, 1),
        )
        assert accounts.get(1) == expected(1, "1.5", "2.25", "3.75")

    def test_dispute_after_withdrawal_can_drive_available_negative(self, ledger, accounts):
        replay(ledger, accounts, deposit(1, 1, "10"), withdrawal(1, 2, "8"), dispute(1, 1))
        assert accounts.get(1) == expected(1, "-8", "10", "2")
