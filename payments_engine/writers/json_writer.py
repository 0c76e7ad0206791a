"""
JSON writer: a list of account objects with amounts as strings, so no
precision is lost to float conversion.
"""

from __future__ import annotations

import json
from typing import IO, Iterable

from payments_engine.domain.models import Account
from payments_engine.writers.abstract import AbstractAccountWriter, format_amount


class JsonWriter(AbstractAccountWriter):
    name: str = "json"
    description: str = "JSON array of accounts; amounts as 4-decimal strings."

    def write(self, accounts: Iterable[Account], stream: IO[str]) -> None:
        payload = []
        for account in accounts:
            row = account.rounded()
            payload.append(
                {
                    "client": row["client"],
                    "available": format_amount(row["available"]),
                    "held": format_amount(row["held"]),
                    "total": format_amount(row["total"]),
                    "locked": row["locked"],
                }
            )
        json.dump(payload, stream, indent=2)
        stream.write("\n")


__all__ = ["JsonWriter"]
