"""Domain models."""

from aggbench.core.models.base import WireModel
from aggbench.core.models.enums import Chain, PairType, TradeSize
from aggbench.core.models.trade import Pair, Quote, Trade

__all__ = [
    "Chain",
    "Pair",
    "PairType",
    "Quote",
    "Trade",
    "TradeSize",
    "WireModel",
]
