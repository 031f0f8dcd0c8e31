"""
Web API 路由模块
"""

from aggbench.web.routes.data_routes import router as data_router
from aggbench.web.routes.health_routes import router as health_router

__all__ = ["data_router", "health_router"]
