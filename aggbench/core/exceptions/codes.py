"""Standardised error codes."""

from enum import Enum


class ErrorCode(str, Enum):
    """错误代码枚举."""

    # 通用错误
    GENERAL_ERROR = "GENERAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # 数据相关错误
    DATA_FORMAT_ERROR = "DATA_FORMAT_ERROR"
    SOURCE_LOAD_ERROR = "SOURCE_LOAD_ERROR"


__all__ = ["ErrorCode"]
