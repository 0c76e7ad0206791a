from __future__ import annotations

from typing import IO, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from payments_engine.pipeline import RunStats


def _format_memory(mem_bytes: Optional[int]) -> str:
    if not mem_bytes:
        return "N/A"
    mem_gb = mem_bytes / (1024**3)
    if mem_gb >= 1:
        return f"{mem_gb:.1f}GB"
    return f"{mem_bytes / (1024**2):.2f}MB"


def print_run_stats(stats: RunStats, stream: Optional[IO[str]] = None) -> None:
    """
    Render run statistics as a rich table.

    Goes to stderr unless a stream is given, so it never mixes with the
    account report on stdout.
    """
    console = Console(file=stream, stderr=stream is None)

    table = Table(title="Run Statistics", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="magenta")

    table.add_row("Records", f"{stats.records:,}")
    table.add_row("Applied", f"{stats.applied:,}")
    table.add_row("Ignored", f"{stats.ignored:,}")
    for reason, count in sorted(stats.ignored_reasons.items()):
        table.add_row(f"  {reason}", f"{count:,}")
    table.add_row("Errors", f"{stats.errors:,}", style="red" if stats.errors else None)

    profile = stats.profile
    if profile is not None:
        throughput = stats.records / profile.duration_seconds if profile.duration_seconds else 0.0
        table.add_row("Duration (s)", f"{profile.duration_seconds:.3f}")
        table.add_row("Throughput (records/s)", f"{throughput:,.2f}")
        table.add_row("Peak Memory", _format_memory(profile.peak_rss_bytes))
        cpu = f"{profile.cpu_percent:.1f}" if profile.cpu_percent is not None else "N/A"
        table.add_row("CPU %", cpu)

    console.print(table)


__all__ = ["print_run_stats"]
