"""
Synthetic transaction log generator for the payments engine.

Implements deterministic pseudo-random record generation and CSV emission.
Withdrawals are only generated for clients holding deposits, and disputes,
resolves and chargebacks reference earlier transactions of the same client
so a replay exercises the whole dispute lifecycle.
"""

from __future__ import annotations

import csv
import random
import sys
import tempfile
import time
from decimal import Decimal
from pathlib import Path

import typer

from payments_engine.domain.models import AMOUNT_PLACES, TransactionType

app = typer.Typer(help="Generate a synthetic transaction log (CSV).")

# deposit, withdrawal, dispute, resolve, chargeback
TYPE_WEIGHTS = (60, 30, 5, 3, 2)
TYPES = (
    TransactionType.DEPOSIT,
    TransactionType.WITHDRAWAL,
    TransactionType.DISPUTE,
    TransactionType.RESOLVE,
    TransactionType.CHARGEBACK,
)


def _random_amount(rng: random.Random, low: float = 1.0, high: float = 10_000.0) -> Decimal:
    return Decimal(f"{rng.uniform(low, high):.{AMOUNT_PLACES}f}")


def _generate_rows_csv(csv_path: Path, rows: int, clients: int, batch_size: int, seed: int) -> int:
    """Write `rows` records to `csv_path`; returns the number written."""
    rng = random.Random(seed)
    deposits: dict[int, list[int]] = {}
    disputed: dict[int, list[int]] = {}
    next_tx = 1
    written = 0

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(["type", "client", "tx", "amount"])

        buffer: list[list[str]] = []
        while written < rows:
            kind = rng.choices(TYPES, weights=TYPE_WEIGHTS, k=1)[0]
            client = rng.randint(1, clients)
            client_deposits = deposits.setdefault(client, [])
            client_disputes = disputed.setdefault(client, [])

            if kind is TransactionType.WITHDRAWAL and not client_deposits:
                kind = TransactionType.DEPOSIT
            if kind is TransactionType.DISPUTE and not client_deposits:
                kind = TransactionType.DEPOSIT
            if kind in (TransactionType.RESOLVE, TransactionType.CHARGEBACK) and not client_disputes:
                kind = TransactionType.DEPOSIT

            if kind is TransactionType.DEPOSIT:
                buffer.append([kind.value, str(client), str(next_tx), str(_random_amount(rng))])
                client_deposits.append(next_tx)
                next_tx += 1
            elif kind is TransactionType.WITHDRAWAL:
                amount = _random_amount(rng) / 2
                buffer.append([kind.value, str(client), str(next_tx), f"{amount:.{AMOUNT_PLACES}f}"])
                next_tx += 1
            elif kind is TransactionType.DISPUTE:
                tx = rng.choice(client_deposits)
                buffer.append([kind.value, str(client), str(tx), ""])
                client_disputes.append(tx)
            else:
                tx = client_disputes.pop(rng.randrange(len(client_disputes)))
                buffer.append([kind.value, str(client), str(tx), ""])

            written += 1
            if len(buffer) >= batch_size:
                writer.writerows(buffer)
                buffer.clear()
        if buffer:
            writer.writerows(buffer)
    return written


@app.command()
def main(
    rows: int = typer.Option(
        10_000,
        "--rows",
        "-r",
        help="Number of records to generate.",
    ),
    clients: int = typer.Option(
        100,
        "--clients",
        "-c",
        min=1,
        max=65_535,
        help="Number of distinct client ids.",
    ),
    batch_size: int = typer.Option(
        10_000,
        "--batch-size",
        "-b",
        help="Batch size for CSV buffering during generation.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output path (if omitted, a temp file will be used).",
    ),
) -> None:
    """
    Generate a synthetic transaction log.
    """
    start = time.perf_counter()
    if output:
        csv_path = output
        csv_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        tmpdir = Path(tempfile.mkdtemp(prefix="payments_csv_"))
        csv_path = tmpdir / "transactions.csv"

    typer.echo(f"Generating {rows:,} records for {clients:,} clients -> {csv_path} (seed={seed})")
    _generate_rows_csv(csv_path, rows=rows, clients=clients, batch_size=batch_size, seed=seed)
    duration = time.perf_counter() - start
    typer.echo(f"CSV generation completed in {duration:.2f}s ({rows / duration:,.0f} rows/s)")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
