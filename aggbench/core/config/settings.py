"""配置管理模块 - 处理aggbench服务与命令行的运行配置"""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from aggbench.core.exceptions.base import ConfigurationError

DEVELOPMENT_ENVIRONMENTS = frozenset({"development", "dev", "local"})


@dataclass
class DataConfig:
    """数据目录配置"""

    data_dir: str = "data"
    csv_filename: str = "quotes.csv"
    json_filename: str = "quotes.json"
    legacy_filename: str = "trades.json"


@dataclass
class ServerConfig:
    """Web 服务配置"""

    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    environment: str = "production"

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() in DEVELOPMENT_ENVIRONMENTS


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None


@dataclass
class Settings:
    """aggbench主配置"""

    data: DataConfig = field(default_factory=DataConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "Settings":
        """从字典创建配置"""
        try:
            data_config = DataConfig(**config_dict.get("data", {}))
            server_config = ServerConfig(**config_dict.get("server", {}))
            logging_config = LoggingConfig(**config_dict.get("logging", {}))
        except TypeError as exc:
            raise ConfigurationError(f"invalid configuration: {exc}") from exc

        return cls(data=data_config, server=server_config, logging=logging_config)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "data": asdict(self.data),
            "server": asdict(self.server),
            "logging": asdict(self.logging),
        }


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
            use_env: 是否应用环境变量覆盖
        """
        self.config_path = config_path or Path.home() / ".aggbench" / "config.toml"
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> Settings:
        """加载配置"""
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                # 如果配置文件有问题，使用默认配置
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                config_dict = {}

        if self.use_env:
            _deep_update(config_dict, load_config_from_env())
        return Settings.from_dict(config_dict)

    def get_config(self) -> Settings:
        """获取当前配置"""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """更新配置"""
        config_dict = self.config.to_dict()
        _deep_update(config_dict, updates)
        self.config = Settings.from_dict(config_dict)


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    """深度更新字典"""
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


def get_default_config() -> Settings:
    """获取默认配置"""
    return Settings()


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置"""
    config: dict[str, Any] = {}

    # 数据配置
    data_config: dict[str, Any] = {}
    aggbench_data_dir = os.getenv("AGGBENCH_DATA_DIR")
    if aggbench_data_dir:
        data_config["data_dir"] = aggbench_data_dir

    if data_config:
        config["data"] = data_config

    # 服务配置
    server_config: dict[str, Any] = {}
    aggbench_env = os.getenv("AGGBENCH_ENV")
    if aggbench_env is not None:
        server_config["environment"] = aggbench_env
    aggbench_host = os.getenv("AGGBENCH_HOST")
    if aggbench_host is not None:
        server_config["host"] = aggbench_host
    aggbench_port = os.getenv("AGGBENCH_PORT")
    if aggbench_port is not None:
        try:
            server_config["port"] = int(aggbench_port)
        except ValueError as exc:
            raise ConfigurationError(f"AGGBENCH_PORT must be an integer, got {aggbench_port!r}") from exc
    aggbench_reload = os.getenv("AGGBENCH_RELOAD")
    if aggbench_reload is not None:
        server_config["reload"] = aggbench_reload.lower() == "true"

    if server_config:
        config["server"] = server_config

    # 日志配置
    logging_config: dict[str, Any] = {}
    aggbench_logging_level = os.getenv("AGGBENCH_LOGGING_LEVEL")
    if aggbench_logging_level is not None:
        logging_config["level"] = aggbench_logging_level
    aggbench_logging_file = os.getenv("AGGBENCH_LOGGING_FILE")
    if aggbench_logging_file is not None:
        logging_config["file"] = aggbench_logging_file

    if logging_config:
        config["logging"] = logging_config

    return config
