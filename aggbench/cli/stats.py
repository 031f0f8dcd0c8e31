"""Statistics commands over the trades of a data directory."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

import typer

from aggbench.core.models.trade import Trade
from aggbench.core.services.filters import apply_filters, available_chains, available_pairs
from aggbench.core.services.stats import (
    Distribution,
    GroupBy,
    chain_win_rate,
    efficiency_distribution,
    latency_stats,
    median_vs_best,
    price_difference_distribution,
    win_rates,
)

from .utils import build_trade_filter, load_from_directory, prepare_output

stats_app = typer.Typer(help="Aggregator statistics.")

DATA_DIR_ARGUMENT = typer.Argument(None, file_okay=False, help="Data directory; defaults to the configured one.")
CHAIN_OPTION = typer.Option(None, "--chain", help="Only trades on this chain (repeatable).")
PAIR_OPTION = typer.Option(None, "--pair", help="Only this token pair, e.g. WETH-USDC (repeatable).")
AGGREGATOR_OPTION = typer.Option(None, "--aggregator", help="Only trades quoted by this aggregator (repeatable).")
MIN_SIZE_OPTION = typer.Option("10K", "--min-size", help="Smallest trade size bucket.", show_default=True)
MAX_SIZE_OPTION = typer.Option("1M", "--max-size", help="Largest trade size bucket.", show_default=True)

DISTRIBUTION_COLUMNS = ["aggregator", "group", "count", "min", "q1", "median", "q3", "max"]


def register(app: typer.Typer) -> None:
    """Register the stats command group on the provided application."""

    app.add_typer(stats_app, name="stats", help="Compare aggregators across trades")


def _filtered_trades(
    ctx: typer.Context,
    data_dir: Path | None,
    chains: Sequence[str] | None,
    pairs: Sequence[str] | None,
    aggregators: Sequence[str] | None,
    min_size: str,
    max_size: str,
) -> list[Trade]:
    trade_filter = build_trade_filter(chains, pairs, aggregators, min_size, max_size)
    loaded = load_from_directory(ctx, data_dir)
    return apply_filters(loaded.trades, trade_filter)


def _render(
    ctx: typer.Context,
    rows: Sequence[Mapping[str, object]],
    columns: Sequence[str],
    title: str,
) -> None:
    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        formatter.render(rows, stream=stream, columns=columns, title=title)
    finally:
        stack.close()


def _distribution_rows(distributions: Sequence[Distribution]) -> list[dict[str, object]]:
    return [distribution.to_wire() for distribution in distributions]


@stats_app.command("win-rate")
def win_rate_command(
    ctx: typer.Context,
    data_dir: Path | None = DATA_DIR_ARGUMENT,
    chain: list[str] | None = CHAIN_OPTION,
    pair: list[str] | None = PAIR_OPTION,
    aggregator: list[str] | None = AGGREGATOR_OPTION,
    min_size: str = MIN_SIZE_OPTION,
    max_size: str = MAX_SIZE_OPTION,
) -> None:
    """How often each aggregator quoted the best price (ties count for everyone tied)."""

    trades = _filtered_trades(ctx, data_dir, chain, pair, aggregator, min_size, max_size)
    rows = [item.to_wire() for item in win_rates(trades)]
    rows.sort(key=lambda row: -float(row["win_rate"]))
    _render(ctx, rows, ["aggregator", "wins", "total", "win_rate"], f"Win rate over {len(trades)} trades")


@stats_app.command("latency")
def latency_command(
    ctx: typer.Context,
    data_dir: Path | None = DATA_DIR_ARGUMENT,
    chain: list[str] | None = CHAIN_OPTION,
    pair: list[str] | None = PAIR_OPTION,
    aggregator: list[str] | None = AGGREGATOR_OPTION,
    min_size: str = MIN_SIZE_OPTION,
    max_size: str = MAX_SIZE_OPTION,
) -> None:
    """Average, median and p95 quote latency per aggregator, in milliseconds."""

    trades = _filtered_trades(ctx, data_dir, chain, pair, aggregator, min_size, max_size)
    rows = [item.to_wire() for item in latency_stats(trades)]
    _render(ctx, rows, ["aggregator", "average", "median", "p95"], f"Latency over {len(trades)} trades")


@stats_app.command("median-vs-best")
def median_vs_best_command(
    ctx: typer.Context,
    data_dir: Path | None = DATA_DIR_ARGUMENT,
    chain: list[str] | None = CHAIN_OPTION,
    pair: list[str] | None = PAIR_OPTION,
    aggregator: list[str] | None = AGGREGATOR_OPTION,
    min_size: str = MIN_SIZE_OPTION,
    max_size: str = MAX_SIZE_OPTION,
) -> None:
    """Percentage gap between each aggregator's median price and the median best price."""

    trades = _filtered_trades(ctx, data_dir, chain, pair, aggregator, min_size, max_size)
    rows = [item.to_wire() for item in median_vs_best(trades)]
    _render(ctx, rows, ["aggregator", "median_vs_best"], f"Median vs best over {len(trades)} trades")


@stats_app.command("efficiency")
def efficiency_command(
    ctx: typer.Context,
    data_dir: Path | None = DATA_DIR_ARGUMENT,
    chain: list[str] | None = CHAIN_OPTION,
    pair: list[str] | None = PAIR_OPTION,
    aggregator: list[str] | None = AGGREGATOR_OPTION,
    min_size: str = MIN_SIZE_OPTION,
    max_size: str = MAX_SIZE_OPTION,
) -> None:
    """Quartiles of quote efficiency per aggregator."""

    trades = _filtered_trades(ctx, data_dir, chain, pair, aggregator, min_size, max_size)
    rows = _distribution_rows(efficiency_distribution(trades))
    _render(ctx, rows, DISTRIBUTION_COLUMNS, f"Efficiency over {len(trades)} trades")


@stats_app.command("price-diff")
def price_difference_command(
    ctx: typer.Context,
    data_dir: Path | None = DATA_DIR_ARGUMENT,
    group_by: GroupBy | None = typer.Option(None, "--group-by", help="Split by chain, pair or size."),
    chain: list[str] | None = CHAIN_OPTION,
    pair: list[str] | None = PAIR_OPTION,
    aggregator: list[str] | None = AGGREGATOR_OPTION,
    min_size: str = MIN_SIZE_OPTION,
    max_size: str = MAX_SIZE_OPTION,
) -> None:
    """Quartiles of each aggregator's percentage gap to the best price."""

    trades = _filtered_trades(ctx, data_dir, chain, pair, aggregator, min_size, max_size)
    distributions = price_difference_distribution(trades, group_by=group_by, aggregators=aggregator)
    _render(ctx, _distribution_rows(distributions), DISTRIBUTION_COLUMNS, f"Price difference over {len(trades)} trades")


@stats_app.command("chains")
def chains_command(
    ctx: typer.Context,
    data_dir: Path | None = DATA_DIR_ARGUMENT,
    chain: list[str] | None = CHAIN_OPTION,
    pair: list[str] | None = PAIR_OPTION,
    aggregator: list[str] | None = AGGREGATOR_OPTION,
    min_size: str = MIN_SIZE_OPTION,
    max_size: str = MAX_SIZE_OPTION,
) -> None:
    """Tie-aware win rate per chain and token pair."""

    trades = _filtered_trades(ctx, data_dir, chain, pair, aggregator, min_size, max_size)
    rows: list[dict[str, object]] = []
    for chain_value in available_chains(trades):
        for token_pair in available_pairs(trades):
            on_pair = [trade for trade in trades if trade.chain == chain_value and trade.pair.key == token_pair.key]
            if not on_pair:
                continue
            rows.append(
                {
                    "chain": chain_value.value,
                    "pair": token_pair.key,
                    "trades": len(on_pair),
                    "win_rate": chain_win_rate(trades, chain_value, token_pair.key),
                }
            )
    _render(ctx, rows, ["chain", "pair", "trades", "win_rate"], f"Chain win rate over {len(trades)} trades")


__all__ = ["register", "stats_app"]
