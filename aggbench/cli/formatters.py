"""Renderers for command output: Rich tables for people, JSON Lines for pipes."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from numbers import Real
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

FORMAT_NAMES = ("table", "jsonl")

# Columns holding values already expressed in percent.
PERCENT_COLUMNS = frozenset({"win_rate", "median_vs_best"})

Rows = Sequence[Mapping[str, object]]


def _columns_for(rows: Rows, columns: Sequence[str] | None) -> list[str]:
    if columns:
        return list(columns)
    return list(rows[0].keys()) if rows else []


class OutputFormatter:
    """Write a batch of rows to a text stream."""

    name: str

    def render(self, rows: Rows, *, stream: TextIO, columns: Sequence[str] | None = None, title: str | None = None) -> None:
        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    name: str = "table"
    no_color: bool = False
    precision: int = 4
    percent_columns: frozenset[str] = field(default=PERCENT_COLUMNS)

    def render(self, rows: Rows, *, stream: TextIO, columns: Sequence[str] | None = None, title: str | None = None) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        names = _columns_for(rows, columns)
        if not rows:
            console.print("No trades available.")
            return

        table = Table(box=SIMPLE, title=title, header_style="" if self.no_color else "bold")
        for name in names:
            numeric = all(isinstance(row.get(name), Real) and not isinstance(row.get(name), bool) for row in rows)
            table.add_column(name, justify="right" if numeric else "left")
        for row in rows:
            table.add_row(*(self.cell(name, row.get(name)) for name in names))
        console.print(table)

    def cell(self, column: str, value: object) -> str:
        """Text shown for ``value`` in ``column``."""

        if value is None:
            return "-"
        if isinstance(value, float):
            if column in self.percent_columns:
                return f"{value:.2f}%"
            return f"{value:.{self.precision}f}"
        if isinstance(value, (list, tuple)):
            return ", ".join(map(str, value))
        return str(value)


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """One JSON object per row, restricted to ``columns`` when they are given."""

    name: str = "jsonl"

    def render(self, rows: Rows, *, stream: TextIO, columns: Sequence[str] | None = None, title: str | None = None) -> None:
        for row in rows:
            if columns:
                row = {column: row.get(column) for column in columns}
            stream.write(json.dumps(row, ensure_ascii=False, default=str))
            stream.write("\n")
        stream.flush()


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    msg = f"Unsupported format '{name}'. Available formats: {', '.join(FORMAT_NAMES)}."
    raise ValueError(msg)


__all__ = ["FORMAT_NAMES", "JSONLFormatter", "OutputFormatter", "PERCENT_COLUMNS", "TableFormatter", "create_formatter"]
