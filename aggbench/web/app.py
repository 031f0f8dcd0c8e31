"""
FastAPI 应用工厂和配置
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aggbench import __version__
from aggbench.core.config import ConfigManager, Settings
from aggbench.core.exceptions import AggBenchError, ErrorCode, format_error_response
from aggbench.core.logging import configure_logging
from aggbench.web.routes import data_router, health_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理"""
    logging_config = app.state.settings.logging
    configure_logging(
        logging_config.level,
        file_output=bool(logging_config.file),
        file_path=logging_config.file,
    )
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """创建 FastAPI 应用实例

    Args:
        settings: 运行配置, 为 None 时由 ConfigManager 从配置文件与环境变量加载
    """
    app = FastAPI(
        title="aggbench",
        description="DEX 聚合器报价基准数据与统计",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings or ConfigManager().get_config()
    app.state.start_time = time.monotonic()

    _setup_middleware(app)
    _setup_routes(app)
    _setup_exception_handlers(app)
    return app


def _setup_middleware(app: FastAPI) -> None:
    """配置中间件"""

    # 可视化前端独立部署, 只读接口允许跨域
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )


def _setup_routes(app: FastAPI) -> None:
    """注册路由"""
    app.include_router(data_router, prefix="/api", tags=["data"])
    app.include_router(health_router, prefix="/api", tags=["health"])


def _setup_exception_handlers(app: FastAPI) -> None:
    """配置异常处理器"""

    @app.exception_handler(AggBenchError)
    async def aggbench_exception_handler(request: Request, exc: AggBenchError) -> JSONResponse:
        """处理 aggbench 自定义异常"""
        return JSONResponse(
            status_code=400,
            content=format_error_response(_error_code(exc.error_code), exc.message, **exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """处理查询参数校验失败"""
        problems = "; ".join(_describe(error) for error in exc.errors())
        return JSONResponse(
            status_code=422,
            content=format_error_response(ErrorCode.VALIDATION_ERROR, details=problems),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """处理 HTTP 异常"""
        if exc.status_code == 422:
            content = format_error_response(ErrorCode.VALIDATION_ERROR, details=str(exc.detail))
        else:
            content = format_error_response(ErrorCode.GENERAL_ERROR, str(exc.detail), status_code=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=content)


def _describe(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "query")
    return f"{location}: {error.get('msg', 'invalid value')}"


def _error_code(value: str) -> ErrorCode:
    try:
        return ErrorCode(value)
    except ValueError:
        return ErrorCode.GENERAL_ERROR
