"""
Transaction ledger: every deposit and withdrawal the processor accepted,
keyed by transaction id, so later disputes can reference them.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from payments_engine.domain.models import LedgerEntry
from payments_engine.errors import DuplicateTransactionError


class TransactionLedger:
    """In-memory tx id -> `LedgerEntry` mapping. Entries are never evicted."""

    def __init__(self) -> None:
        self._entries: Dict[int, LedgerEntry] = {}

    def lookup(self, tx_id: int) -> Optional[LedgerEntry]:
        """Return the live entry for `tx_id`, or None if it was never accepted."""
        return self._entries.get(tx_id)

    def insert(self, tx_id: int, entry: LedgerEntry) -> None:
        if tx_id in self._entries:
            raise DuplicateTransactionError(tx_id)
        self._entries[tx_id] = entry

    def items(self) -> Iterator[Tuple[int, LedgerEntry]]:
        return iter(self._entries.items())

    def __contains__(self, tx_id: object) -> bool:
        return tx_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)


__all__ = ["TransactionLedger"]
