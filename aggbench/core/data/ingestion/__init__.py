"""Raw quote ingestion: parsing, validation, grouping and the transform pipeline."""

from __future__ import annotations

from aggbench.core.data.ingestion.models import RawRecord
from aggbench.core.data.ingestion.parser import coerce_records, parse_delimited
from aggbench.core.data.ingestion.service import (
    FailureSummary,
    TransformResult,
    transform_raw_data,
    transform_records,
)
from aggbench.core.data.ingestion.validator import ValidationIssue, is_valid_quote, parse_efficiency

__all__ = [
    "FailureSummary",
    "RawRecord",
    "TransformResult",
    "ValidationIssue",
    "coerce_records",
    "is_valid_quote",
    "parse_delimited",
    "parse_efficiency",
    "transform_raw_data",
    "transform_records",
]
