"""Trade commands: transform raw exports and resolve data directories."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

import typer

from aggbench.core.data.sources import LoadResult, load_file
from aggbench.core.exceptions.base import AggBenchError
from aggbench.core.models.trade import Trade
from aggbench.core.services.metrics import best_price, winning_aggregators

from .utils import fail, load_from_directory, prepare_output

trades_app = typer.Typer(help="Trade operations.")

DEFAULT_COLUMNS = [
    "id",
    "timestamp",
    "chain",
    "pair",
    "size",
    "quotes",
    "best_price",
    "winners",
]


def register(app: typer.Typer) -> None:
    """Register the trades command group on the provided application."""

    app.add_typer(trades_app, name="trades", help="Build and inspect grouped trades")


@trades_app.command("transform")
def transform_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="CSV, TSV or JSON export."),
) -> None:
    """Parse a raw quote export and emit the cleaned, grouped trades."""

    try:
        loaded = load_file(path)
    except AggBenchError as error:
        raise fail(error) from error
    _render_trades(ctx, loaded)


@trades_app.command("load")
def load_command(
    ctx: typer.Context,
    data_dir: Path | None = typer.Argument(None, file_okay=False, help="Directory holding quotes.csv, quotes.json or trades.json."),
) -> None:
    """Resolve a data directory the way the HTTP surface does and emit its trades."""

    _render_trades(ctx, load_from_directory(ctx, data_dir))


def _render_trades(ctx: typer.Context, loaded: LoadResult) -> None:
    formatter, stream, stack, options = prepare_output(ctx)
    try:
        if options.format == "jsonl":
            formatter.render(loaded.to_wire(), stream=stream)
        else:
            title = f"{len(loaded.trades)} trades from {loaded.source.value}" if loaded.source else None
            formatter.render(list(_trade_rows(loaded.trades)), stream=stream, columns=DEFAULT_COLUMNS, title=title)
    finally:
        stack.close()


def _trade_rows(trades: Iterable[Trade]) -> Iterable[Mapping[str, object]]:
    for trade in trades:
        yield {
            "id": trade.id,
            "timestamp": trade.timestamp,
            "chain": trade.chain.value,
            "pair": trade.pair.key,
            "size": trade.trade_size.label,
            "quotes": len(trade.quotes),
            "best_price": best_price(trade.quotes),
            "winners": winning_aggregators(trade.quotes),
        }


__all__ = ["register", "trades_app"]
