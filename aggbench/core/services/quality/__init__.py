"""Quote quality checks."""

from aggbench.core.services.quality.outliers import (
    OutlierFilterResult,
    apply_outlier_filter,
    calculate_outliers,
    filter_outliers,
)

__all__ = ["OutlierFilterResult", "apply_outlier_filter", "calculate_outliers", "filter_outliers"]
