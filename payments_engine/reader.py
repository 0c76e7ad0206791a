"""
CSV record reader.

Input files carry a header row naming at least `type`, `client` and `tx`
(`amount` is optional for files without deposits or withdrawals). Whitespace
around headers and values is ignored, type names are case-insensitive, and an
empty amount means "no amount". Rows are loaded fully into memory before
processing; decoding into `Transaction` happens per row so that a malformed
row can be skipped under the pipeline's error policy.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import IO, List, NamedTuple, Sequence

from pydantic import ValidationError

from payments_engine.domain.models import Transaction
from payments_engine.errors import InputError, MalformedRecordError

REQUIRED_COLUMNS = ("type", "client", "tx")


class CsvRow(NamedTuple):
    line: int
    values: dict[str, str]
    extra: Sequence[str] = ()


def read_rows(stream: IO[str]) -> List[CsvRow]:
    """Read every data row from an open text stream."""
    reader = csv.reader(stream)
    header: List[str] = []
    for raw in reader:
        if any(cell.strip() for cell in raw):
            header = [cell.strip().lower() for cell in raw]
            break
    if not header:
        raise InputError("input has no header row")
    missing = [name for name in REQUIRED_COLUMNS if name not in header]
    if missing:
        raise InputError(f"input header is missing column(s): {', '.join(missing)}")

    rows: List[CsvRow] = []
    width = len(header)
    for raw in reader:
        if not any(cell.strip() for cell in raw):
            continue
        cells = [cell.strip() for cell in raw]
        values = dict(zip(header, cells))
        rows.append(CsvRow(line=reader.line_num, values=values, extra=cells[width:]))
    return rows


def load_rows(path: Path | str) -> List[CsvRow]:
    """Open `path` and read all of its data rows."""
    try:
        with open(path, "r", newline="", encoding="utf-8-sig") as f:
            return read_rows(f)
    except OSError as exc:
        raise InputError(f"cannot read {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise InputError(f"{path} is not valid UTF-8 text: {exc.reason} at byte {exc.start}") from exc
    except csv.Error as exc:
        raise InputError(f"cannot parse {path} as CSV: {exc}") from exc


def decode(row: CsvRow) -> Transaction:
    """
    Decode one row into a `Transaction`.

    Raises
    ------
    MalformedRecordError
        Unknown type, non-numeric or out-of-range ids, an unparseable amount,
        or stray trailing columns.
    """
    if any(row.extra):
        raise MalformedRecordError(f"unexpected extra columns {list(row.extra)!r}", line=row.line)

    amount = row.values.get("amount") or None
    try:
        return Transaction.model_validate(
            {
                "type": row.values.get("type", "").lower(),
                "client": row.values.get("client"),
                "tx": row.values.get("tx"),
                "amount": amount,
            }
        )
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise MalformedRecordError(problems, line=row.line) from exc


__all__ = ["CsvRow", "read_rows", "load_rows", "decode"]
