"""Bucketing of validated quote rows into trades."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from math import isfinite

from aggbench.core.config.pipeline import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from aggbench.core.data.ingestion.models import RawRecord
from aggbench.core.data.ingestion.validator import ValidatedRecord
from aggbench.core.models.enums import Chain, PairType, TradeSize
from aggbench.core.models.trade import Pair, Quote, Trade

TRADE_ID_PREFIX = "trade-"


def normalize_chain(chain: str, chain_name: str = "", config: PipelineConfig = DEFAULT_PIPELINE_CONFIG) -> Chain:
    """Map a chain name onto its canonical chain; unknown names fall back to the default."""

    key = chain_name or chain
    return config.chain_map.get(key, config.default_chain)


def determine_pair_type(
    token_in: str,
    token_out: str,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> PairType:
    if token_in in config.stablecoins and token_out in config.stablecoins:
        return PairType.STABLE_STABLE
    return PairType.NATIVE_STABLE


def round_to_trade_size(usd_amount: float, config: PipelineConfig = DEFAULT_PIPELINE_CONFIG) -> TradeSize:
    """Snap a USD notional to the closest bucket; ties keep the smaller bucket."""

    sizes = config.trade_sizes
    closest = sizes[0]
    min_diff = abs(usd_amount - sizes[0])
    for size in sizes:
        diff = abs(usd_amount - size)
        if diff < min_diff:
            min_diff = diff
            closest = size
    return TradeSize(closest)


def _safe_ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def compute_price(record: RawRecord) -> float:
    """Output per input, from USD amounts when both are positive, else from token amounts."""

    if record.to_amount_usd > 0 and record.from_amount_usd > 0:
        return _safe_ratio(record.to_amount_usd, record.from_amount_usd)
    return _safe_ratio(record.expected_amount, record.token_amount)


def format_amount(value: float) -> str:
    """Render a notional the way the exports print numbers (``10000`` not ``10000.0``)."""

    if isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(value)


def grouping_key(record: RawRecord, chain: Chain) -> str:
    return "-".join(
        (
            record.timestamp,
            chain.value,
            record.from_token,
            record.to_token,
            format_amount(record.usd_amount),
        )
    )


def format_trade_id(sequence: int) -> str:
    return f"{TRADE_ID_PREFIX}{sequence:03d}"


@dataclass(slots=True)
class TradeDraft:
    """A trade still collecting quotes while the batch is being grouped."""

    timestamp: str
    chain: Chain
    pair: Pair
    trade_size: TradeSize
    token_in: str
    quotes: list[Quote] = field(default_factory=list)

    def finalize(self, trade_id: str, quotes: Sequence[Quote] | None = None) -> Trade:
        """Freeze the draft into a :class:`Trade` with ``quotes`` (defaults to all collected)."""

        return Trade(
            id=trade_id,
            chain=self.chain,
            pair=self.pair,
            trade_size=self.trade_size,
            token_in=self.token_in,
            quotes=tuple(self.quotes if quotes is None else quotes),
            timestamp=self.timestamp,
        )


def build_quote(validated: ValidatedRecord) -> Quote:
    record = validated.record
    return Quote(
        aggregator=record.project,
        price=compute_price(record),
        efficiency=validated.efficiency,
        latency_ms=record.latency_ms,
        expected_amount=record.expected_amount,
    )


def group_records(
    validated: Iterable[ValidatedRecord],
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> dict[str, TradeDraft]:
    """Group accepted rows by (timestamp, chain, tokens, notional).

    The returned dict keeps first-insertion order, which is the order trade ids
    are later assigned in.
    """

    drafts: dict[str, TradeDraft] = {}
    for item in validated:
        record = item.record
        chain = normalize_chain(record.chain, record.chain_name, config)
        key = grouping_key(record, chain)

        draft = drafts.get(key)
        if draft is None:
            draft = TradeDraft(
                timestamp=record.timestamp,
                chain=chain,
                pair=Pair(
                    token_in=record.from_token,
                    token_out=record.to_token,
                    pair_type=determine_pair_type(record.from_token, record.to_token, config),
                ),
                trade_size=round_to_trade_size(record.usd_amount, config),
                token_in=record.from_token,
            )
            drafts[key] = draft

        draft.quotes.append(build_quote(item))
    return drafts


__all__ = [
    "TRADE_ID_PREFIX",
    "TradeDraft",
    "build_quote",
    "compute_price",
    "determine_pair_type",
    "format_amount",
    "format_trade_id",
    "group_records",
    "grouping_key",
    "normalize_chain",
    "round_to_trade_size",
]
