"""
Rich table writer for reading balances in a terminal.
"""

from __future__ import annotations

from typing import IO, Iterable

from rich import box
from rich.console import Console
from rich.table import Table

from payments_engine.domain.models import Account
from payments_engine.writers.abstract import AbstractAccountWriter, format_amount


class TableWriter(AbstractAccountWriter):
    name: str = "table"
    description: str = "Human-readable rich table."

    def write(self, accounts: Iterable[Account], stream: IO[str]) -> None:
        console = Console(file=stream)
        table = Table(title="Client Accounts", box=box.ROUNDED, caption="Sorted by client id")

        table.add_column("Client", style="cyan", justify="right", no_wrap=True)
        table.add_column("Available", justify="right", style="green")
        table.add_column("Held", justify="right", style="yellow")
        table.add_column("Total", justify="right", style="bold green")
        table.add_column("Locked", justify="center", style="red")

        count = 0
        for account in accounts:
            row = account.rounded()
            table.add_row(
                str(row["client"]),
                format_amount(row["available"]),
                format_amount(row["held"]),
                format_amount(row["total"]),
                "yes" if row["locked"] else "no",
            )
            count += 1

        if not count:
            console.print("[yellow]No accounts to display.[/yellow]")
            return
        console.print(table)


__all__ = ["TableWriter"]
