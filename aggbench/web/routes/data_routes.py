"""
交易数据与统计路由
"""

from pathlib import Path

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from aggbench.core.config.settings import Settings
from aggbench.core.data.sources import LoadResult, load_trades
from aggbench.core.exceptions import format_load_failure
from aggbench.core.models.enums import Chain, TradeSize
from aggbench.core.services.filters import TradeFilter, apply_filters
from aggbench.core.services.stats import StatsReport, summarize
from aggbench.web.models import LoadFailure

router = APIRouter()


def _load(settings: Settings) -> LoadResult:
    return load_trades(Path(settings.data.data_dir), files=settings.data)


def _failure(exc: Exception, settings: Settings) -> JSONResponse:
    logger.opt(exception=exc).error("Error reading data")
    payload = format_load_failure(exc, include_details=settings.server.is_development)
    return JSONResponse(
        status_code=500,
        content=LoadFailure(**payload).model_dump(exclude_none=True),
    )


@router.get("/data", responses={500: {"model": LoadFailure}})
def get_data(request: Request) -> JSONResponse:
    """
    获取全部交易

    依次尝试 quotes.csv, quotes.json 与 trades.json; 均不存在时返回空列表
    """
    settings: Settings = request.app.state.settings
    try:
        loaded = _load(settings)
    except Exception as exc:
        return _failure(exc, settings)
    return JSONResponse(content=loaded.to_wire())


@router.get("/stats", response_model=StatsReport, responses={500: {"model": LoadFailure}})
def get_stats(
    request: Request,
    chain: list[Chain] = Query(default=[]),
    pair: list[str] = Query(default=[]),
    aggregator: list[str] = Query(default=[]),
    min_size: int = Query(TradeSize.SIZE_10K.value),
    max_size: int = Query(TradeSize.SIZE_1M.value),
) -> JSONResponse:
    """
    按筛选条件汇总聚合器统计
    """
    try:
        trade_filter = TradeFilter(
            chains=frozenset(chain),
            pairs=frozenset(pair),
            aggregators=frozenset(aggregator),
            min_size=TradeSize(min_size),
            max_size=TradeSize(max_size),
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail="min_size must not exceed max_size") from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"unsupported trade size: {exc}") from exc

    settings: Settings = request.app.state.settings
    try:
        loaded = _load(settings)
    except Exception as exc:
        return _failure(exc, settings)
    report = summarize(apply_filters(loaded.trades, trade_filter))
    return JSONResponse(content=report.to_wire())
