"""
Abstract writer interfaces for the payments engine.

Concrete writers (csv, table, json) implement `AccountWriter` and render the
final account snapshot to a text stream. Writers own all formatting: field
naming and order, rounding to four decimal places and boolean spelling.
"""

from __future__ import annotations

import abc
from decimal import Decimal
from typing import IO, Iterable, Protocol, runtime_checkable

from payments_engine.domain.models import Account

HEADER = ("client", "available", "held", "total", "locked")


@runtime_checkable
class AccountWriter(Protocol):
    """
    Common interface all report writers implement.

    Attributes
    ----------
    name : str
        Format identifier used by the CLI (`--format`).
    description : str
        A human-friendly summary of the output.
    """

    name: str
    description: str

    def write(self, accounts: Iterable[Account], stream: IO[str]) -> None:
        """
        Render `accounts` to `stream`.

        Parameters
        ----------
        accounts : Iterable[Account]
            Accounts in the order they should appear.
        stream : IO[str]
            Destination text stream (stdout for the CLI).
        """
        ...


class AbstractAccountWriter(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses should set `name` and `description` and implement `write`.
    """

    name: str
    description: str

    @abc.abstractmethod
    def write(self, accounts: Iterable[Account], stream: IO[str]) -> None:  # pragma: no cover - interface only
        """Render the accounts."""
        raise NotImplementedError


def format_amount(value: Decimal) -> str:
    """Fixed four-decimal rendering of an already rounded amount."""
    if value.is_zero():
        value = abs(value)
    return f"{value:.4f}"


__all__ = ["HEADER", "AccountWriter", "AbstractAccountWriter", "format_amount"]
