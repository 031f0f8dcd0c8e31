"""标准化错误消息模板."""

import traceback
from typing import Any

from aggbench.core.exceptions.base import AggBenchError
from aggbench.core.exceptions.codes import ErrorCode


class ErrorMessageTemplate:
    """错误消息模板管理器."""

    _templates: dict[ErrorCode, str] = {
        ErrorCode.GENERAL_ERROR: "An unknown error occurred",
        ErrorCode.VALIDATION_ERROR: "Validation failed: {details}",
    }

    @classmethod
    def get_message(cls, error_code: ErrorCode, **kwargs: Any) -> str:
        """获取标准化错误消息.

        Args:
            error_code: 错误代码
            **kwargs: 模板变量

        Returns:
            格式化后的错误消息
        """
        template = cls._templates.get(error_code, cls._templates[ErrorCode.GENERAL_ERROR])
        try:
            return template.format(**kwargs)
        except KeyError:
            # 如果缺少模板变量，返回带错误代码的通用消息
            return f"{cls._templates[ErrorCode.GENERAL_ERROR]} (code: {error_code.value})"


def format_error_response(error_code: ErrorCode, message: str | None = None, **kwargs: Any) -> dict[str, Any]:
    """格式化错误响应.

    Args:
        error_code: 错误代码
        message: 自定义错误消息(可选)
        **kwargs: 额外的错误详情

    Returns:
        标准化的错误响应字典
    """
    if message is None:
        message = ErrorMessageTemplate.get_message(error_code, **kwargs)

    return {
        "error": {
            "code": error_code.value,
            "message": message,
            "details": kwargs,
        }
    }


def format_load_failure(error: Exception, *, include_details: bool) -> dict[str, Any]:
    """Build the payload returned when trade data cannot be loaded.

    The traceback is only attached when ``include_details`` is set, which the
    web layer ties to development mode.
    """

    message = error.message if isinstance(error, AggBenchError) else str(error)
    payload: dict[str, Any] = {
        "error": "Failed to load data",
        "message": message or "Unknown error",
    }
    if isinstance(error, AggBenchError):
        payload["code"] = error.error_code
    if include_details:
        payload["details"] = "".join(traceback.format_exception(error))
    return payload
