"""Aggregate statistics consumed by reporting and visualisation code."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum

from pydantic import Field

from aggbench.core.models.base import WireModel
from aggbench.core.models.enums import Chain
from aggbench.core.models.trade import Quote, Trade
from aggbench.core.services.metrics import (
    average_latency,
    best_price,
    calculate_efficiency,
    calculate_price_difference,
    calculate_quartiles,
    median,
    median_latency,
    p95_latency,
    winning_aggregators,
)


class GroupBy(str, Enum):
    """Dimensions a distribution can be split along."""

    CHAIN = "chain"
    PAIR = "pair"
    SIZE = "size"


class AggregatorWinRate(WireModel):
    aggregator: str
    wins: int
    total: int
    win_rate: float


class MedianVsBest(WireModel):
    aggregator: str
    median_vs_best: float


class LatencyStats(WireModel):
    aggregator: str
    average: float
    median: float
    p95: float


class Distribution(WireModel):
    """Box-plot summary of one aggregator's values, optionally within a group."""

    aggregator: str
    group: str | None = None
    count: int
    min: float
    q1: float
    median: float
    q3: float
    max: float

    @property
    def label(self) -> str:
        if self.group is None:
            return self.aggregator
        return f"{self.aggregator} - {self.group}"


class StatsReport(WireModel):
    """Everything the dashboard needs for one filtered trade set."""

    trade_count: int
    latest_timestamp: str | None = None
    win_rates: list[AggregatorWinRate] = Field(default_factory=list)
    median_vs_best: list[MedianVsBest] = Field(default_factory=list)
    latency: list[LatencyStats] = Field(default_factory=list)
    efficiency: list[Distribution] = Field(default_factory=list)


def _percentage(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100


def win_rates(trades: Sequence[Trade]) -> list[AggregatorWinRate]:
    """Share of participations in which each aggregator quoted the best price."""

    counts: dict[str, list[int]] = {}
    for trade in trades:
        if not trade.quotes:
            continue
        winners = set(winning_aggregators(trade.quotes))
        for quote in trade.quotes:
            tally = counts.setdefault(quote.aggregator, [0, 0])
            tally[1] += 1
            if quote.aggregator in winners:
                tally[0] += 1
    return [
        AggregatorWinRate(aggregator=name, wins=wins, total=total, win_rate=_percentage(wins, total))
        for name, (wins, total) in counts.items()
    ]


def median_vs_best(trades: Sequence[Trade]) -> list[MedianVsBest]:
    """How far each aggregator's median price sits above the median best price it faced."""

    prices: dict[str, list[float]] = {}
    bests: dict[str, list[float]] = {}
    for trade in trades:
        if not trade.quotes:
            continue
        best = best_price(trade.quotes)
        for quote in trade.quotes:
            prices.setdefault(quote.aggregator, []).append(quote.price)
            bests.setdefault(quote.aggregator, []).append(best)

    results: list[MedianVsBest] = []
    for name, observed in prices.items():
        typical = median(observed)
        typical_best = median(bests[name])
        gap = (typical - typical_best) / typical_best * 100 if typical_best > 0 else 0.0
        results.append(MedianVsBest(aggregator=name, median_vs_best=gap))
    return results


def _quotes_by_aggregator(trades: Sequence[Trade]) -> dict[str, list[Quote]]:
    grouped: dict[str, list[Quote]] = {}
    for trade in trades:
        for quote in trade.quotes:
            grouped.setdefault(quote.aggregator, []).append(quote)
    return grouped


def latency_stats(trades: Sequence[Trade]) -> list[LatencyStats]:
    return [
        LatencyStats(
            aggregator=name,
            average=average_latency(quotes),
            median=median_latency(quotes),
            p95=p95_latency(quotes),
        )
        for name, quotes in _quotes_by_aggregator(trades).items()
    ]


def _distribution(aggregator: str, values: Sequence[float], group: str | None = None) -> Distribution:
    summary = calculate_quartiles(values)
    return Distribution(
        aggregator=aggregator,
        group=group,
        count=len(values),
        min=summary.min,
        q1=summary.q1,
        median=summary.median,
        q3=summary.q3,
        max=summary.max,
    )


def efficiency_distribution(trades: Sequence[Trade]) -> list[Distribution]:
    """Per-aggregator spread of stored efficiency, derived from prices where none was stored."""

    values: dict[str, list[float]] = {}
    for trade in trades:
        if not trade.quotes:
            continue
        best = best_price(trade.quotes)
        for quote in trade.quotes:
            efficiency = quote.efficiency or calculate_efficiency(quote.price, best)
            values.setdefault(quote.aggregator, []).append(efficiency)
    return [_distribution(name, observed) for name, observed in values.items()]


_GROUP_KEYS: dict[GroupBy, Callable[[Trade], str]] = {
    GroupBy.CHAIN: lambda trade: trade.chain.value,
    GroupBy.PAIR: lambda trade: trade.pair.key,
    GroupBy.SIZE: lambda trade: str(int(trade.trade_size)),
}


def price_difference_distribution(
    trades: Sequence[Trade],
    group_by: GroupBy | None = None,
    aggregators: Sequence[str] | None = None,
) -> list[Distribution]:
    """Spread of each aggregator's percentage gap to the best price, optionally per group."""

    key_of = _GROUP_KEYS.get(group_by) if group_by is not None else None
    wanted = set(aggregators) if aggregators else None
    values: dict[tuple[str | None, str], list[float]] = {}
    for trade in trades:
        if not trade.quotes:
            continue
        group = key_of(trade) if key_of is not None else None
        best = best_price(trade.quotes)
        for quote in trade.quotes:
            if wanted is not None and quote.aggregator not in wanted:
                continue
            values.setdefault((group, quote.aggregator), []).append(
                calculate_price_difference(quote.price, best)
            )
    return [_distribution(name, observed, group) for (group, name), observed in values.items()]


def chain_win_rate(trades: Sequence[Trade], chain: Chain, pair_key: str | None = None) -> float:
    """Winners per quote on ``chain`` (optionally one pair), as a percentage."""

    winners = 0
    quote_count = 0
    for trade in trades:
        if trade.chain != chain:
            continue
        if pair_key is not None and trade.pair.key != pair_key:
            continue
        winners += len(winning_aggregators(trade.quotes))
        quote_count += len(trade.quotes)
    return _percentage(winners, quote_count)


def latest_timestamp(trades: Sequence[Trade]) -> str | None:
    if not trades:
        return None
    return max(trade.timestamp for trade in trades)


def summarize(trades: Sequence[Trade]) -> StatsReport:
    return StatsReport(
        trade_count=len(trades),
        latest_timestamp=latest_timestamp(trades),
        win_rates=win_rates(trades),
        median_vs_best=median_vs_best(trades),
        latency=latency_stats(trades),
        efficiency=efficiency_distribution(trades),
    )


__all__ = [
    "AggregatorWinRate",
    "Distribution",
    "GroupBy",
    "LatencyStats",
    "MedianVsBest",
    "StatsReport",
    "chain_win_rate",
    "efficiency_distribution",
    "latency_stats",
    "latest_timestamp",
    "median_vs_best",
    "price_difference_distribution",
    "summarize",
    "win_rates",
]
