"""Stateless price and latency metrics over a trade's quotes.

Every function here is total: empty input yields ``0`` (or ``False``) and no
function raises on a zero denominator.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from math import ceil

from aggbench.core.models.trade import Quote


def median(values: Sequence[float]) -> float:
    """Standard median; ``0`` for an empty sequence."""

    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def best_price(quotes: Sequence[Quote]) -> float:
    """Lowest price among ``quotes``."""

    if not quotes:
        return 0.0
    return min(quote.price for quote in quotes)


def median_price(quotes: Sequence[Quote]) -> float:
    return median([quote.price for quote in quotes])


def median_latency(quotes: Sequence[Quote]) -> float:
    return median([quote.latency_ms for quote in quotes])


def average_latency(quotes: Sequence[Quote]) -> float:
    if not quotes:
        return 0.0
    return sum(quote.latency_ms for quote in quotes) / len(quotes)


def p95_latency(quotes: Sequence[Quote]) -> float:
    """Nearest-rank 95th percentile latency."""

    if not quotes:
        return 0.0
    ordered = sorted(quote.latency_ms for quote in quotes)
    index = ceil(len(ordered) * 0.95) - 1
    return ordered[max(0, index)]


def calculate_efficiency(price: float, best: float) -> float:
    """``best / price * 100``.

    Derived from prices, so it can disagree with the upstream efficiency stored
    on each :class:`Quote`.
    """

    if best == 0 or price == 0:
        return 0.0
    return best / price * 100


def calculate_price_difference(price: float, best: float) -> float:
    """Percentage by which ``price`` sits above ``best``."""

    if best == 0:
        return 0.0
    return (price - best) / best * 100


def winning_aggregators(quotes: Sequence[Quote]) -> list[str]:
    """Aggregators whose price equals the best price exactly; ties all win."""

    if not quotes:
        return []
    best = best_price(quotes)
    return [quote.aggregator for quote in quotes if quote.price == best]


def did_aggregator_win(aggregator: str, quotes: Sequence[Quote]) -> bool:
    """True when ``aggregator``'s quote matches the trade's best price exactly."""

    if not quotes:
        return False
    best = best_price(quotes)
    for quote in quotes:
        if quote.aggregator == aggregator:
            return quote.price == best
    return False


@dataclass(frozen=True)
class Quartiles:
    """Five-number summary used for box plots."""

    min: float
    q1: float
    median: float
    q3: float
    max: float


def calculate_quartiles(values: Sequence[float]) -> Quartiles:
    """Five-number summary with quartiles taken as medians of the lower/upper halves."""

    if not values:
        return Quartiles(0.0, 0.0, 0.0, 0.0, 0.0)
    ordered = sorted(values)
    count = len(ordered)
    lower_half = ordered[: count // 2]
    upper_half = ordered[ceil(count / 2) :]
    return Quartiles(
        min=ordered[0],
        q1=median(lower_half) if lower_half else ordered[0],
        median=median(ordered),
        q3=median(upper_half) if upper_half else ordered[-1],
        max=ordered[-1],
    )


__all__ = [
    "Quartiles",
    "average_latency",
    "best_price",
    "calculate_efficiency",
    "calculate_price_difference",
    "calculate_quartiles",
    "did_aggregator_win",
    "median",
    "median_latency",
    "median_price",
    "p95_latency",
    "winning_aggregators",
]
