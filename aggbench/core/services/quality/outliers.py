"""Per-trade statistical rejection of implausible quotes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from math import floor

from aggbench.core.config.pipeline import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from aggbench.core.models.trade import Quote
from aggbench.core.services.metrics import median


@dataclass(frozen=True)
class IQRBounds:
    """Quartiles and acceptance bounds of one value series."""

    q1: float
    q3: float
    lower: float
    upper: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def is_outside(self, value: float) -> bool:
        return value < self.lower or value > self.upper


def iqr_bounds(values: Sequence[float], multiplier: float = 2.5) -> IQRBounds | None:
    """Index-based (non interpolated) quartiles widened by ``multiplier`` IQRs."""

    if not values:
        return None
    ordered = sorted(values)
    count = len(ordered)
    q1 = ordered[floor(count * 0.25)]
    q3 = ordered[floor(count * 0.75)]
    spread = q3 - q1
    return IQRBounds(q1=q1, q3=q3, lower=q1 - multiplier * spread, upper=q3 + multiplier * spread)


def calculate_outliers(
    values: Sequence[float],
    multiplier: float = 2.5,
    min_sample: int = 4,
) -> set[float]:
    """Return the values lying strictly outside the IQR bounds.

    Matching downstream is by value, so every occurrence of a flagged value is
    treated as an outlier.
    """

    if len(values) < min_sample:
        return set()
    bounds = iqr_bounds(values, multiplier)
    if bounds is None:
        return set()
    return {value for value in values if bounds.is_outside(value)}


def _median_deviation(price: float, median_price: float) -> float:
    if median_price <= 0:
        return 0.0
    return abs((price - median_price) / median_price)


def filter_outliers(
    quotes: Sequence[Quote],
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> tuple[Quote, ...]:
    """Drop price/efficiency IQR outliers, slow quotes and quotes far from the median price.

    Trades with fewer than ``config.min_outlier_sample`` quotes are returned
    unchanged. The result may be empty; see :func:`apply_outlier_filter`.
    """

    if len(quotes) < config.min_outlier_sample:
        return tuple(quotes)

    prices = [quote.price for quote in quotes]
    price_outliers = calculate_outliers(prices, config.iqr_multiplier, config.min_outlier_sample)
    efficiency_outliers = calculate_outliers(
        [quote.efficiency for quote in quotes],
        config.iqr_multiplier,
        config.min_outlier_sample,
    )
    median_price = median(prices)

    kept: list[Quote] = []
    for quote in quotes:
        if quote.price in price_outliers:
            continue
        if quote.efficiency in efficiency_outliers:
            continue
        if quote.latency_ms > config.max_latency_ms:
            continue
        if _median_deviation(quote.price, median_price) > config.max_median_deviation:
            continue
        kept.append(quote)
    return tuple(kept)


@dataclass(frozen=True)
class OutlierFilterResult:
    """Quotes retained for a trade plus how the filter behaved."""

    quotes: tuple[Quote, ...]
    removed: int
    fell_back: bool


def apply_outlier_filter(
    quotes: Sequence[Quote],
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> OutlierFilterResult:
    """Filter ``quotes`` but never return an empty set: an emptied trade keeps its originals."""

    original = tuple(quotes)
    filtered = filter_outliers(original, config)
    if not filtered:
        return OutlierFilterResult(quotes=original, removed=0, fell_back=bool(original))
    return OutlierFilterResult(quotes=filtered, removed=len(original) - len(filtered), fell_back=False)


__all__ = [
    "IQRBounds",
    "OutlierFilterResult",
    "apply_outlier_filter",
    "calculate_outliers",
    "filter_outliers",
    "iqr_bounds",
]
