"""Configuration management module."""

from aggbench.core.config.pipeline import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from aggbench.core.config.settings import (
    ConfigManager,
    DataConfig,
    LoggingConfig,
    ServerConfig,
    Settings,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "DEFAULT_PIPELINE_CONFIG",
    "DataConfig",
    "LoggingConfig",
    "PipelineConfig",
    "ServerConfig",
    "Settings",
    "get_default_config",
    "load_config_from_env",
]
