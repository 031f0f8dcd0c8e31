"""Logging utilities for pipeline runs and the service surfaces."""

from aggbench.core.logging.config import LogConfig
from aggbench.core.logging.logger import (
    StructuredLogger,
    configure_logging,
    current_trace_id,
    get_logger,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "StructuredLogger",
    "configure_logging",
    "current_trace_id",
    "get_logger",
    "log_context",
    "logger",
]
