"""Trade and quote models exchanged with the reporting layer."""

from __future__ import annotations

from pydantic import Field

from aggbench.core.models.base import WireModel
from aggbench.core.models.enums import Chain, PairType, TradeSize


class Pair(WireModel):
    """Token pair a trade swaps across."""

    token_in: str = Field(alias="tokenIn")
    token_out: str = Field(alias="tokenOut")
    pair_type: PairType = Field(alias="pairType")

    @property
    def key(self) -> str:
        return f"{self.token_in}-{self.token_out}"


class Quote(WireModel):
    """One aggregator's cleaned offer within a trade."""

    aggregator: str
    price: float
    efficiency: float
    latency_ms: float
    expected_amount: float = Field(default=0.0, alias="expectedAmount")


class Trade(WireModel):
    """All quotes competing for the same timestamp, chain, pair and notional."""

    id: str
    chain: Chain
    pair: Pair
    trade_size: TradeSize = Field(alias="tradeSize")
    token_in: str = Field(alias="tokenIn")
    quotes: tuple[Quote, ...]
    timestamp: str


__all__ = ["Pair", "Quote", "Trade"]
