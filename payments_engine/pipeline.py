"""
Pipeline driver: folds the input records through the processor.

Usage (example from CLI):
    from payments_engine.pipeline import run_pipeline

    result = run_pipeline("transactions.csv")
    for account in result.accounts:
        print(account)

Records are applied strictly in input order. A `RecordError` (a malformed
row, or a deposit/withdrawal without an amount) is handled according to the
error policy: `skip` logs it and moves on, `abort` re-raises it. Ignored
records (unknown tx, insufficient funds, locked account, ...) are counted but
never reported as failures.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from payments_engine.config import ErrorPolicy, get_settings
from payments_engine.domain.models import Account, Transaction
from payments_engine.engine.accounts import AccountTable
from payments_engine.engine.ledger import TransactionLedger
from payments_engine.engine.processor import apply
from payments_engine.errors import RecordError
from payments_engine.reader import CsvRow, decode, load_rows
from payments_engine.utils.logging import get_logger
from payments_engine.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)


@dataclass
class RunStats:
    records: int = 0
    applied: int = 0
    ignored: int = 0
    errors: int = 0
    ignored_reasons: Counter = field(default_factory=Counter)
    profile: Optional[ProfileStats] = None

    def as_dict(self) -> Dict[str, object]:
        summary: Dict[str, object] = {
            "records": self.records,
            "applied": self.applied,
            "ignored": self.ignored,
            "errors": self.errors,
            "ignored_reasons": dict(sorted(self.ignored_reasons.items())),
        }
        if self.profile is not None:
            summary["duration_seconds"] = round(self.profile.duration_seconds, 3)
            summary["peak_rss_bytes"] = self.profile.peak_rss_bytes
            summary["cpu_percent"] = (
                round(self.profile.cpu_percent, 1) if self.profile.cpu_percent is not None else None
            )
        return summary


@dataclass
class PipelineResult:
    accounts: AccountTable
    ledger: TransactionLedger
    stats: RunStats

    def snapshot(self) -> List[Account]:
        return self.accounts.snapshot()


def process_transactions(
    records: Iterable[Transaction],
    *,
    on_error: Optional[ErrorPolicy] = None,
    strict_client_match: Optional[bool] = None,
    ledger: Optional[TransactionLedger] = None,
    accounts: Optional[AccountTable] = None,
) -> PipelineResult:
    """
    Apply already decoded records.

    Useful when records come from somewhere other than a CSV file. The ledger
    and account table may be passed in to continue from an earlier state.
    """
    rows = ((None, record) for record in records)
    return _fold(rows, on_error, strict_client_match, ledger, accounts)


def process_rows(
    rows: Iterable[CsvRow],
    *,
    on_error: Optional[ErrorPolicy] = None,
    strict_client_match: Optional[bool] = None,
) -> PipelineResult:
    """Decode and apply CSV rows."""
    return _fold(((row, None) for row in rows), on_error, strict_client_match, None, None)


def run_pipeline(
    input_path: Path | str,
    *,
    on_error: Optional[ErrorPolicy] = None,
    strict_client_match: Optional[bool] = None,
) -> PipelineResult:
    """
    Read `input_path` and process every record, profiling the run.

    Parameters
    ----------
    input_path : Path | str
        CSV file with a `type,client,tx,amount` header.
    on_error : ErrorPolicy | None
        Record error policy. Defaults to settings.on_error.
    strict_client_match : bool | None
        Ignore disputes whose client differs from the disputed transaction's
        client. Defaults to settings.strict_client_match.

    Raises
    ------
    InputError
        The file cannot be read or has no usable header.
    RecordError
        First record error, when the policy is `abort`.
    """
    rows = load_rows(input_path)
    log.info("Loaded input", extra={"path": str(input_path), "rows": len(rows)})

    with profile_block(str(input_path)) as profile:
        result = process_rows(rows, on_error=on_error, strict_client_match=strict_client_match)
    result.stats.profile = profile

    log.info("Run complete", extra=result.stats.as_dict())
    return result


def _fold(
    items: Iterable[tuple],
    on_error: Optional[ErrorPolicy],
    strict_client_match: Optional[bool],
    ledger: Optional[TransactionLedger],
    accounts: Optional[AccountTable],
) -> PipelineResult:
    settings = get_settings()
    policy = ErrorPolicy(on_error or settings.on_error)
    strict = settings.strict_client_match if strict_client_match is None else strict_client_match

    ledger = ledger if ledger is not None else TransactionLedger()
    accounts = accounts if accounts is not None else AccountTable()
    stats = RunStats()

    for row, record in items:
        stats.records += 1
        try:
            if record is None:
                record = decode(row)
            outcome = apply(record, ledger, accounts, strict_client_match=strict)
        except RecordError as exc:
            if exc.line is None and row is not None:
                exc.line = row.line
            stats.errors += 1
            if policy is ErrorPolicy.ABORT:
                log.error("Record rejected, aborting run", extra={"error": str(exc)})
                raise
            log.warning(f"Record skipped: {exc}", extra={"line": exc.line})
            continue

        if outcome.applied:
            stats.applied += 1
        else:
            stats.ignored += 1
            if outcome.reason is not None:
                stats.ignored_reasons[outcome.reason.value] += 1

    return PipelineResult(accounts=accounts, ledger=ledger, stats=stats)


__all__ = [
    "PipelineResult",
    "RunStats",
    "process_transactions",
    "process_rows",
    "run_pipeline",
]
