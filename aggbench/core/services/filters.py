"""Slicing of trade lists by chain, pair, notional bucket and aggregator."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from aggbench.core.models.enums import Chain, TradeSize
from aggbench.core.models.trade import Pair, Trade


class TradeFilter(BaseModel):
    """Criteria a trade must meet; empty collections match everything."""

    model_config = ConfigDict(frozen=True)

    chains: frozenset[Chain] = Field(default_factory=frozenset)
    pairs: frozenset[str] = Field(default_factory=frozenset)
    min_size: TradeSize = TradeSize.SIZE_10K
    max_size: TradeSize = TradeSize.SIZE_1M
    aggregators: frozenset[str] = Field(default_factory=frozenset)

    @model_validator(mode="after")
    def _check_size_range(self) -> TradeFilter:
        if self.min_size > self.max_size:
            raise ValueError("min_size must not exceed max_size")
        return self

    def matches(self, trade: Trade) -> bool:
        if self.chains and trade.chain not in self.chains:
            return False
        if self.pairs and trade.pair.key not in self.pairs:
            return False
        if trade.trade_size < self.min_size or trade.trade_size > self.max_size:
            return False
        if self.aggregators and not any(quote.aggregator in self.aggregators for quote in trade.quotes):
            return False
        return True


def apply_filters(trades: Iterable[Trade], trade_filter: TradeFilter | None = None) -> list[Trade]:
    """Trades matching ``trade_filter``, in input order."""

    if trade_filter is None:
        return list(trades)
    return [trade for trade in trades if trade_filter.matches(trade)]


def available_pairs(trades: Sequence[Trade]) -> list[Pair]:
    """Distinct token pairs in first-seen order."""

    seen: dict[str, Pair] = {}
    for trade in trades:
        seen.setdefault(trade.pair.key, trade.pair)
    return list(seen.values())


def available_aggregators(trades: Sequence[Trade]) -> list[str]:
    """Distinct aggregator names in first-seen order."""

    seen: dict[str, None] = {}
    for trade in trades:
        for quote in trade.quotes:
            seen.setdefault(quote.aggregator, None)
    return list(seen)


def available_chains(trades: Sequence[Trade]) -> list[Chain]:
    seen: dict[Chain, None] = {}
    for trade in trades:
        seen.setdefault(trade.chain, None)
    return list(seen)


__all__ = [
    "TradeFilter",
    "apply_filters",
    "available_aggregators",
    "available_chains",
    "available_pairs",
]
