"""
Pytest configuration for the payments engine.

Provides fixtures for:
- Isolated settings (environment overrides cleared, cache reset)
- Fresh ledger and account table containers
- Writing CSV transaction logs into a temporary directory
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Generator

import pytest

from payments_engine.config import get_settings
from payments_engine.engine import AccountTable, TransactionLedger

SETTINGS_ENV_VARS = (
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "ON_ERROR",
    "STRICT_CLIENT_MATCH",
    "OUTPUT_FORMAT",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Run every test against default settings.

    Tests that need overrides set environment variables and call
    `get_settings.cache_clear()` themselves.
    """
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """The CLI reconfigures root logging; put the original handlers back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def ledger() -> TransactionLedger:
    return TransactionLedger()


@pytest.fixture
def accounts() -> AccountTable:
    return AccountTable()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory writing a transaction log and returning its path.

    Lines are joined with newlines; a header is prepended unless `header=None`.
    """

    def _write(*lines: str, header: str | None = "type, client, tx, amount", name: str = "transactions.csv") -> Path:
        path = tmp_path / name
        body = list(lines) if header is None else [header, *lines]
        path.write_text("\n".join(body) + "\n", encoding="utf-8")
        return path

    return _write
