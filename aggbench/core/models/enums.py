"""Chain, pair and trade-size enumerations."""

from enum import Enum, IntEnum


class Chain(str, Enum):
    """Canonical chains quotes are collected on."""

    MONAD = "Monad"
    HYPEREVM = "HyperEVM"
    BASE = "Base"
    ARBITRUM = "Arbitrum"
    ETHEREUM = "Ethereum"
    POLYGON = "Polygon"


class PairType(str, Enum):
    """Classification of a token pair by stablecoin membership."""

    NATIVE_STABLE = "Native-Stable"
    STABLE_STABLE = "Stable-Stable"


class TradeSize(IntEnum):
    """USD notional buckets a trade is snapped to."""

    SIZE_10K = 10_000
    SIZE_50K = 50_000
    SIZE_100K = 100_000
    SIZE_250K = 250_000
    SIZE_500K = 500_000
    SIZE_1M = 1_000_000

    @property
    def label(self) -> str:
        if self.value >= 1_000_000:
            return f"{self.value // 1_000_000}M"
        return f"{self.value // 1_000}K"


__all__ = ["Chain", "PairType", "TradeSize"]
