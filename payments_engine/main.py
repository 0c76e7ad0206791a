from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from payments_engine.config import ErrorPolicy, get_settings
from payments_engine.errors import InputError, RecordError
from payments_engine.pipeline import run_pipeline
from payments_engine.reporter import print_run_stats
from payments_engine.utils.logging import configure_logging
from payments_engine.writers import available_formats, get_writer

app = typer.Typer(help="Payments engine: replay a transaction log into client balances.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} | log_level={settings.log_level} json_logs={settings.log_json} | "
        f"on_error={settings.on_error.value} strict_client_match={settings.strict_client_match} | "
        f"format={settings.output_format}"
    )


@app.command()
def formats() -> None:
    """
    List available output formats.
    """
    typer.echo("Available formats: " + ", ".join(available_formats()))


@app.command()
def process(
    input_path: Path = typer.Argument(..., help="CSV transaction log (type, client, tx, amount)."),
    output_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format (csv, table, json). Defaults to OUTPUT_FORMAT.",
    ),
    on_error: Optional[ErrorPolicy] = typer.Option(
        None,
        "--on-error",
        help="What to do with a malformed record: skip it or abort the run. Defaults to ON_ERROR.",
    ),
    strict_client_match: Optional[bool] = typer.Option(
        None,
        "--strict-client-match/--no-strict-client-match",
        help="Ignore disputes filed by a client other than the transaction's owner.",
    ),
    stats: bool = typer.Option(
        False,
        "--stats",
        help="Print run statistics to stderr.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override LOG_LEVEL for this run.",
    ),
) -> None:
    """
    Process a transaction log and write the final account balances to stdout.
    """
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, json_logs=settings.log_json)

    fmt = output_format or settings.output_format
    try:
        writer = get_writer(fmt)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--format") from exc

    try:
        result = run_pipeline(input_path, on_error=on_error, strict_client_match=strict_client_match)
    except (InputError, RecordError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    writer.write(result.snapshot(), sys.stdout)
    if stats:
        print_run_stats(result.stats)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
