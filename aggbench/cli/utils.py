"""Utility helpers shared across CLI commands."""

from __future__ import annotations

import json
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence, TextIO

import typer

from aggbench.core.config.settings import ConfigManager, Settings
from aggbench.core.data.sources import LoadResult, load_trades
from aggbench.core.exceptions.base import AggBenchError, ConfigurationError, DataFormatError, SourceLoadError
from aggbench.core.models.enums import Chain, TradeSize
from aggbench.core.services.filters import TradeFilter

from .constants import SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .formatters import OutputFormatter, create_formatter


@dataclass(slots=True)
class CLIOptions:
    """Resolved options derived from the Typer context."""

    format: str = "table"
    output_path: Path | None = None
    no_color: bool = False


def get_cli_options(ctx: typer.Context) -> CLIOptions:
    """Extract :class:`CLIOptions` from the Typer context object."""

    ctx.ensure_object(dict)
    data = ctx.obj or {}
    return CLIOptions(
        format=str(data.get("format", "table")),
        output_path=data.get("output_path"),
        no_color=bool(data.get("no_color", False)),
    )


def prepare_output(ctx: typer.Context) -> tuple[OutputFormatter, TextIO, ExitStack, CLIOptions]:
    """Resolve formatter and writable stream for the current command."""

    options = get_cli_options(ctx)
    formatter = create_formatter(options.format, no_color=options.no_color)

    stack = ExitStack()
    stream: TextIO
    if options.output_path is not None:
        try:
            stream = stack.enter_context(open(options.output_path, "w", encoding="utf-8"))
        except OSError as exc:
            stack.close()
            emit_error(f"Unable to open '{options.output_path}': {exc}", "OUTPUT_WRITE_ERROR")
            raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc
    else:
        stream = sys.stdout

    return formatter, stream, stack, options


def emit_error(message: str, code: str, *, details: Mapping[str, object] | None = None) -> None:
    """Print a structured error payload to stderr."""

    payload: dict[str, object] = {"code": code, "message": message}
    if details:
        payload["details"] = _sanitize_details(details)
    typer.echo(json.dumps(payload, ensure_ascii=False, default=str), err=True)


def fail(error: AggBenchError) -> typer.Exit:
    """Report ``error`` and return the exit matching its kind, ready to raise."""

    emit_error(error.message, error.error_code, details=error.details)
    if isinstance(error, (ConfigurationError, DataFormatError, SourceLoadError)):
        return typer.Exit(code=VALIDATION_EXIT_CODE)
    return typer.Exit(code=SYSTEM_EXIT_CODE)


def _sanitize_details(details: Mapping[str, object]) -> Mapping[str, object]:
    sanitized: dict[str, object] = {}
    for key, value in details.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            sanitized[key] = value
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            sanitized[key] = [str(item) for item in value]
        else:
            sanitized[key] = str(value)
    return sanitized


def get_settings(ctx: typer.Context) -> Settings:
    """Settings resolved once per invocation and cached on the context."""

    ctx.ensure_object(dict)
    settings = ctx.obj.get("settings")
    if settings is None:
        try:
            settings = ConfigManager().get_config()
        except ConfigurationError as error:
            raise fail(error) from error
        ctx.obj["settings"] = settings
    return settings


def load_from_directory(ctx: typer.Context, data_dir: Path | None) -> LoadResult:
    """Load trades from ``data_dir`` or the configured data directory."""

    settings = get_settings(ctx)
    directory = data_dir if data_dir is not None else Path(settings.data.data_dir)
    try:
        return load_trades(directory, files=settings.data)
    except AggBenchError as error:
        raise fail(error) from error


def parse_chain(value: str) -> Chain:
    for chain in Chain:
        if chain.value.lower() == value.strip().lower():
            return chain
    allowed = ", ".join(chain.value for chain in Chain)
    raise typer.BadParameter(f"Unsupported chain '{value}'. Allowed values: {allowed}", param_hint="--chain")


def parse_trade_size(value: str, param_hint: str) -> TradeSize:
    """Accept either a bucket label (``50K``, ``1M``) or its USD amount."""

    normalized = value.strip().upper()
    for size in TradeSize:
        if normalized in (size.label, str(size.value)):
            return size
    allowed = ", ".join(size.label for size in TradeSize)
    raise typer.BadParameter(f"Unsupported trade size '{value}'. Allowed values: {allowed}", param_hint=param_hint)


def build_trade_filter(
    chains: Sequence[str] | None,
    pairs: Sequence[str] | None,
    aggregators: Sequence[str] | None,
    min_size: str,
    max_size: str,
) -> TradeFilter:
    lower = parse_trade_size(min_size, "--min-size")
    upper = parse_trade_size(max_size, "--max-size")
    if lower > upper:
        raise typer.BadParameter("--min-size must not exceed --max-size", param_hint="--min-size")
    return TradeFilter(
        chains=frozenset(parse_chain(chain) for chain in chains or ()),
        pairs=frozenset(pairs or ()),
        aggregators=frozenset(aggregators or ()),
        min_size=lower,
        max_size=upper,
    )


__all__ = [
    "CLIOptions",
    "build_trade_filter",
    "emit_error",
    "fail",
    "get_cli_options",
    "get_settings",
    "load_from_directory",
    "parse_chain",
    "parse_trade_size",
    "prepare_output",
]
