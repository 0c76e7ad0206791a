"""
Writers package for the payments engine.

Re-exports the writer interfaces and concrete writers, plus the format
registry used by the CLI.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from payments_engine.writers.abstract import AbstractAccountWriter, AccountWriter
from payments_engine.writers.csv_writer import CsvWriter
from payments_engine.writers.json_writer import JsonWriter
from payments_engine.writers.table_writer import TableWriter


def _writer_factories() -> Dict[str, Callable[[], AccountWriter]]:
    """Registry of available output formats."""
    return {
        "csv": lambda: CsvWriter(),
        "json": lambda: JsonWriter(),
        "table": lambda: TableWriter(),
    }


def available_formats() -> List[str]:
    """List available output format names."""
    return sorted(_writer_factories().keys())


def get_writer(name: str) -> AccountWriter:
    factories = _writer_factories()
    if name not in factories:
        raise ValueError(f"Unknown format '{name}'. Available: {', '.join(available_formats())}")
    return factories[name]()


__all__ = [
    # Abstracts
    "AccountWriter",
    "AbstractAccountWriter",
    # Concrete writers
    "CsvWriter",
    "JsonWriter",
    "TableWriter",
    # Registry
    "available_formats",
    "get_writer",
]
