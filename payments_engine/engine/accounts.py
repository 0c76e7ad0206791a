"""
Account table: client id -> `Account`, created lazily on first reference.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from payments_engine.domain.models import Account


class AccountTable:
    def __init__(self) -> None:
        self._accounts: Dict[int, Account] = {}

    def get_or_create(self, client_id: int) -> Account:
        """Return the client's account, creating a zeroed, unlocked one if needed."""
        account = self._accounts.get(client_id)
        if account is None:
            account = Account(client_id=client_id)
            self._accounts[client_id] = account
        return account

    def get(self, client_id: int) -> Optional[Account]:
        return self._accounts.get(client_id)

    def snapshot(self) -> List[Account]:
        """Accounts ordered by client id."""
        return [self._accounts[client_id] for client_id in sorted(self._accounts)]

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(self.snapshot())


__all__ = ["AccountTable"]
