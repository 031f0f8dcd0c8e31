"""Pipeline turning raw quote rows into cleaned, grouped trades."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from time import perf_counter

from loguru import logger

from aggbench.core.config.pipeline import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from aggbench.core.data.ingestion.grouping import format_trade_id, group_records
from aggbench.core.data.ingestion.models import RawRecord
from aggbench.core.data.ingestion.validator import ValidationIssue, validate_batch
from aggbench.core.models.trade import Trade
from aggbench.core.services.quality.outliers import apply_outlier_filter


@dataclass(slots=True, frozen=True)
class FailureSummary:
    """Aggregated rejection counts grouped by validation code."""

    code: str
    count: int


@dataclass(slots=True, frozen=True)
class TransformResult:
    """Trades produced by one pipeline run plus what was dropped along the way."""

    trades: tuple[Trade, ...]
    input_rows: int
    rejected_rows: int
    fail_reasons: tuple[FailureSummary, ...]
    issues: tuple[ValidationIssue, ...]
    outliers_removed: int
    fallback_trades: tuple[str, ...]
    duration_ms: float

    @property
    def quote_count(self) -> int:
        return sum(len(trade.quotes) for trade in self.trades)


def _summarise(counter: Counter[str]) -> tuple[FailureSummary, ...]:
    summaries = [FailureSummary(code=code, count=count) for code, count in counter.items()]
    summaries.sort(key=lambda item: (-item.count, item.code))
    return tuple(summaries)


def transform_records(
    records: Iterable[RawRecord],
    config: PipelineConfig | None = None,
) -> TransformResult:
    """Validate, group and outlier-filter ``records``.

    Trade ids are assigned from ``trade-001`` in the order each trade's first
    row was seen. A trade whose quotes would all be filtered out keeps its
    unfiltered quotes and is reported in ``fallback_trades``.
    """

    config = config or DEFAULT_PIPELINE_CONFIG
    batch = list(records)
    start = perf_counter()

    validated, issues = validate_batch(batch, config)
    drafts = group_records(validated, config)
    logger.debug("Grouped quotes", accepted=len(validated), trades=len(drafts))

    trades: list[Trade] = []
    fallback_trades: list[str] = []
    outliers_removed = 0
    for sequence, draft in enumerate(drafts.values(), start=1):
        trade_id = format_trade_id(sequence)
        outcome = apply_outlier_filter(draft.quotes, config)
        if outcome.fell_back:
            fallback_trades.append(trade_id)
            logger.warning(
                "Outlier filter removed every quote; keeping originals",
                trade_id=trade_id,
                quotes=len(draft.quotes),
            )
        outliers_removed += outcome.removed
        trades.append(draft.finalize(trade_id, outcome.quotes))

    duration_ms = (perf_counter() - start) * 1000
    result = TransformResult(
        trades=tuple(trades),
        input_rows=len(batch),
        rejected_rows=len(issues),
        fail_reasons=_summarise(Counter(issue.code for issue in issues)),
        issues=tuple(issues),
        outliers_removed=outliers_removed,
        fallback_trades=tuple(fallback_trades),
        duration_ms=duration_ms,
    )
    logger.info(
        "Transformed quote batch",
        input_rows=result.input_rows,
        rejected_rows=result.rejected_rows,
        trades=len(result.trades),
        outliers_removed=outliers_removed,
        fallback_trades=len(fallback_trades),
        duration_ms=round(duration_ms, 3),
    )
    return result


def transform_raw_data(
    records: Iterable[RawRecord],
    config: PipelineConfig | None = None,
) -> list[Trade]:
    """Shortcut for :func:`transform_records` returning only the trades."""

    return list(transform_records(records, config).trades)


__all__ = ["FailureSummary", "TransformResult", "transform_raw_data", "transform_records"]
