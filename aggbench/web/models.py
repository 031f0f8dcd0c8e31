"""
Web API 响应模型
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LoadFailure(BaseModel):
    """数据加载失败时的响应格式"""

    error: str = Field("Failed to load data", description="错误类型")
    message: str = Field(..., description="错误消息")
    code: str | None = Field(None, description="错误代码")
    details: str | None = Field(None, description="调用栈, 仅开发模式返回")


class HealthStatus(BaseModel):
    """健康检查响应"""

    status: str = Field(..., description="系统状态")
    version: str = Field(..., description="系统版本")
    environment: str = Field(..., description="运行环境")
    uptime: float = Field(..., description="运行时间(秒)")
    data_dir: str = Field(..., description="数据目录")
    timestamp: datetime = Field(default_factory=_utcnow, description="检查时间戳")
