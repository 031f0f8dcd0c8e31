"""Exception handling module."""

from aggbench.core.exceptions.base import (
    AggBenchError,
    ConfigurationError,
    DataFormatError,
    SourceLoadError,
)
from aggbench.core.exceptions.codes import ErrorCode
from aggbench.core.exceptions.messages import (
    ErrorMessageTemplate,
    format_error_response,
    format_load_failure,
)

__all__ = [
    "AggBenchError",
    "ConfigurationError",
    "DataFormatError",
    "ErrorCode",
    "ErrorMessageTemplate",
    "SourceLoadError",
    "format_error_response",
    "format_load_failure",
]
