"""
健康检查路由
"""

import time
from pathlib import Path

from fastapi import APIRouter, Request

from aggbench import __version__
from aggbench.web.models import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def health_check(request: Request) -> HealthStatus:
    """
    基础健康检查

    数据目录缺失时状态为 degraded, 服务本身仍可响应
    """
    settings = request.app.state.settings
    data_dir = Path(settings.data.data_dir)
    return HealthStatus(
        status="healthy" if data_dir.is_dir() else "degraded",
        version=__version__,
        environment=settings.server.environment,
        uptime=time.monotonic() - request.app.state.start_time,
        data_dir=str(data_dir),
    )
