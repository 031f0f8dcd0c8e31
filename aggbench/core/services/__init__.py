"""Services module - metrics, filtering and statistics over trades."""

from aggbench.core.services.filters import TradeFilter, apply_filters
from aggbench.core.services.stats import StatsReport, summarize

__all__ = [
    "StatsReport",
    "TradeFilter",
    "apply_filters",
    "summarize",
]
