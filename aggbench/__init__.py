"""aggbench - DEX 聚合器报价基准分析

将逐报价的原始基准记录清洗、分组为多报价交易，并计算胜率、价格效率与延迟等对比统计。
"""

from aggbench.core.config import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from aggbench.core.data import LoadResult, load_trades
from aggbench.core.data.ingestion import (
    RawRecord,
    TransformResult,
    parse_delimited,
    transform_raw_data,
    transform_records,
)
from aggbench.core.models import Chain, Pair, PairType, Quote, Trade, TradeSize
from aggbench.core.services import StatsReport, TradeFilter, apply_filters, summarize

__version__ = "0.1.0"

__all__ = [
    "Chain",
    "DEFAULT_PIPELINE_CONFIG",
    "LoadResult",
    "Pair",
    "PairType",
    "PipelineConfig",
    "Quote",
    "RawRecord",
    "StatsReport",
    "Trade",
    "TradeFilter",
    "TradeSize",
    "__version__",
    "apply_filters",
    "load_trades",
    "parse_delimited",
    "summarize",
    "transform_raw_data",
    "transform_records",
]
