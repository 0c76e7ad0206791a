"""
CSV writer: the canonical output, one row per client.

    client,available,held,total,locked
    1,1.5000,0.0000,1.5000,false
"""

from __future__ import annotations

import csv
from typing import IO, Iterable

from payments_engine.domain.models import Account
from payments_engine.writers.abstract import HEADER, AbstractAccountWriter, format_amount


class CsvWriter(AbstractAccountWriter):
    name: str = "csv"
    description: str = "Comma separated rows with a header (default)."

    def write(self, accounts: Iterable[Account], stream: IO[str]) -> None:
        writer = csv.writer(stream, lineterminator="\n")
        writer.writerow(HEADER)
        for account in accounts:
            row = account.rounded()
            writer.writerow(
                [
                    row["client"],
                    format_amount(row["available"]),
                    format_amount(row["held"]),
                    format_amount(row["total"]),
                    str(row["locked"]).lower(),
                ]
            )


__all__ = ["CsvWriter"]
