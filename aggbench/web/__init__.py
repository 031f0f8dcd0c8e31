"""
aggbench Web 服务模块
"""

from aggbench.web.app import create_app

__all__ = ["create_app"]
