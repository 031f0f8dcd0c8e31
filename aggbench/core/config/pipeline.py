"""Immutable rule set driving the quote transformation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from aggbench.core.exceptions.base import ConfigurationError
from aggbench.core.models.enums import Chain, TradeSize

DEFAULT_EXCLUDED_AGGREGATORS = frozenset(
    {
        "oogabooga",
        "test",
        "test_aggregator",
        "debug",
        "mock",
    }
)

DEFAULT_STABLECOINS = frozenset({"USDC", "USDT", "DAI", "USDD", "BUSD", "TUSD", "FRAX", "LUSD"})

DEFAULT_CHAIN_MAP: Mapping[str, Chain] = MappingProxyType(
    {
        "Mainnet": Chain.ETHEREUM,
        "Ethereum": Chain.ETHEREUM,
        "Base": Chain.BASE,
        "Arbitrum": Chain.ARBITRUM,
        "Polygon": Chain.POLYGON,
        "Monad": Chain.MONAD,
        "HyperEVM": Chain.HYPEREVM,
    }
)

DEFAULT_TRADE_SIZES: tuple[TradeSize, ...] = tuple(TradeSize)


@dataclass(slots=True, frozen=True)
class PipelineConfig:
    """Rules applied while validating, grouping and filtering quotes.

    Instances are frozen; use :meth:`with_overrides` to derive a variant.
    """

    excluded_aggregators: frozenset[str] = DEFAULT_EXCLUDED_AGGREGATORS
    min_efficiency: float = 95.0
    max_efficiency: float = 101.0
    stablecoins: frozenset[str] = DEFAULT_STABLECOINS
    chain_map: Mapping[str, Chain] = field(default_factory=lambda: DEFAULT_CHAIN_MAP)
    default_chain: Chain = Chain.ETHEREUM
    trade_sizes: tuple[TradeSize, ...] = DEFAULT_TRADE_SIZES
    iqr_multiplier: float = 2.5
    min_outlier_sample: int = 4
    max_latency_ms: float = 30_000.0
    max_median_deviation: float = 0.10

    def __post_init__(self) -> None:
        if self.min_efficiency > self.max_efficiency:
            raise ConfigurationError("min_efficiency must not exceed max_efficiency")
        if not self.trade_sizes:
            raise ConfigurationError("trade_sizes must contain at least one bucket")
        try:
            sizes = tuple(TradeSize(size) for size in self.trade_sizes)
        except ValueError as exc:
            raise ConfigurationError(f"unsupported trade size: {exc}") from exc
        if list(sizes) != sorted(sizes):
            raise ConfigurationError("trade_sizes must be sorted ascending")
        if self.iqr_multiplier < 0:
            raise ConfigurationError("iqr_multiplier must be non-negative")
        if self.min_outlier_sample < 1:
            raise ConfigurationError("min_outlier_sample must be positive")
        # normalise user supplied collections so the instance stays immutable
        object.__setattr__(
            self,
            "excluded_aggregators",
            frozenset(name.strip().lower() for name in self.excluded_aggregators),
        )
        object.__setattr__(self, "stablecoins", frozenset(self.stablecoins))
        if not isinstance(self.chain_map, MappingProxyType):
            object.__setattr__(self, "chain_map", MappingProxyType(dict(self.chain_map)))
        object.__setattr__(self, "trade_sizes", sizes)

    def with_overrides(self, **overrides: Any) -> PipelineConfig:
        """Return a copy with ``overrides`` applied."""

        unknown = set(overrides) - set(self.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(
                f"unknown pipeline options: {', '.join(sorted(unknown))}",
                details={"unknown": sorted(unknown)},
            )
        return replace(self, **overrides)


DEFAULT_PIPELINE_CONFIG = PipelineConfig()


__all__ = [
    "DEFAULT_CHAIN_MAP",
    "DEFAULT_EXCLUDED_AGGREGATORS",
    "DEFAULT_PIPELINE_CONFIG",
    "DEFAULT_STABLECOINS",
    "DEFAULT_TRADE_SIZES",
    "PipelineConfig",
]
