"""
Web 服务启动脚本
"""

import uvicorn

from aggbench.core.config import ConfigManager


def aggbench_main() -> None:
    """启动 FastAPI Web 服务"""

    server = ConfigManager().get_config().server
    uvicorn.run(
        "aggbench.web.app:create_app",
        factory=True,
        host=server.host,
        port=server.port,
        reload=server.reload,
        log_level="info",
    )


if __name__ == "__main__":
    aggbench_main()
