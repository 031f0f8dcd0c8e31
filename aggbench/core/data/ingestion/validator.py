"""Per-row acceptance rules applied before quotes are grouped into trades."""

from __future__ import annotations

from collections.abc import Sequence  # noqa: TC003
from dataclasses import dataclass

from aggbench.core.config.pipeline import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from aggbench.core.data.ingestion.models import RawRecord, lenient_float


@dataclass(slots=True, frozen=True)
class ValidationIssue:
    """Represents a single reason a raw row was rejected."""

    index: int
    field: str
    code: str
    message: str


@dataclass(slots=True)
class ValidatedRecord:
    """Container mapping an input index to its accepted record."""

    index: int
    record: RawRecord
    efficiency: float


def parse_efficiency(text: str) -> float:
    """Parse a serialised percentage such as ``"99.94%"``; unparsable text yields 0."""

    return lenient_float(text.replace("%", "", 1).strip())


def normalize_aggregator(name: str) -> str:
    return name.strip().lower()


def is_excluded_aggregator(name: str, config: PipelineConfig = DEFAULT_PIPELINE_CONFIG) -> bool:
    return normalize_aggregator(name) in config.excluded_aggregators


def is_efficiency_in_range(efficiency: float, config: PipelineConfig = DEFAULT_PIPELINE_CONFIG) -> bool:
    return config.min_efficiency <= efficiency <= config.max_efficiency


def is_valid_quote(
    efficiency: float,
    aggregator: str,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> bool:
    """Accept a quote unless its aggregator is excluded or its efficiency is implausible."""

    if is_excluded_aggregator(aggregator, config):
        return False
    return is_efficiency_in_range(efficiency, config)


def validate_batch(
    records: Sequence[RawRecord],
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> tuple[list[ValidatedRecord], list[ValidationIssue]]:
    """Split a batch into accepted records and the issues of the rejected ones."""

    issues: list[ValidationIssue] = []
    validated: list[ValidatedRecord] = []

    for index, record in enumerate(records):
        efficiency = parse_efficiency(record.efficiency)

        if is_excluded_aggregator(record.project, config):
            issues.append(
                ValidationIssue(
                    index=index,
                    field="project",
                    code="EXCLUDED_AGGREGATOR",
                    message=f"aggregator {record.project!r} is excluded",
                )
            )
            continue

        if not is_efficiency_in_range(efficiency, config):
            issues.append(
                ValidationIssue(
                    index=index,
                    field="efficiency",
                    code="EFFICIENCY_OUT_OF_RANGE",
                    message=(
                        f"efficiency {efficiency} outside "
                        f"[{config.min_efficiency}, {config.max_efficiency}]"
                    ),
                )
            )
            continue

        validated.append(ValidatedRecord(index=index, record=record, efficiency=efficiency))

    return validated, issues


__all__ = [
    "ValidatedRecord",
    "ValidationIssue",
    "is_efficiency_in_range",
    "is_excluded_aggregator",
    "is_valid_quote",
    "normalize_aggregator",
    "parse_efficiency",
    "validate_batch",
]
