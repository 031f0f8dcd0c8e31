"""aggbench核心异常类."""

from typing import Any


class AggBenchError(Exception):
    """aggbench基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: str = "GENERAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(AggBenchError):
    """配置异常."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)


class DataFormatError(AggBenchError):
    """输入数据结构损坏 (无法解析的顶层容器)."""

    def __init__(
        self,
        message: str,
        format_name: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if format_name:
            super_details["format"] = format_name
        super().__init__(message, "DATA_FORMAT_ERROR", super_details)
        self.format_name = format_name


class SourceLoadError(AggBenchError):
    """数据源读取或解析失败."""

    def __init__(
        self,
        message: str,
        path: str,
        source_kind: str,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["path"] = path
        super_details["source"] = source_kind
        super().__init__(message, "SOURCE_LOAD_ERROR", super_details)
        self.path = path
        self.source_kind = source_kind
