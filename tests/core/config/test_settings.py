from __future__ import annotations

from pathlib import Path

import pytest

from aggbench.core.config import ConfigManager, Settings, get_default_config, load_config_from_env
from aggbench.core.exceptions import ConfigurationError


def test_default_settings() -> None:
    settings = get_default_config()

    assert settings.data.data_dir == "data"
    assert settings.data.csv_filename == "quotes.csv"
    assert settings.server.port == 8000
    assert not settings.server.is_development
    assert settings.logging.level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGGBENCH_DATA_DIR", "/srv/quotes")
    monkeypatch.setenv("AGGBENCH_ENV", "development")
    monkeypatch.setenv("AGGBENCH_PORT", "9100")
    monkeypatch.setenv("AGGBENCH_LOGGING_LEVEL", "DEBUG")

    config = load_config_from_env()
    settings = ConfigManager(Path("/nonexistent/config.toml")).get_config()

    assert config["data"] == {"data_dir": "/srv/quotes"}
    assert settings.data.data_dir == "/srv/quotes"
    assert settings.server.port == 9100
    assert settings.server.is_development
    assert settings.logging.level == "DEBUG"


def test_invalid_port_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGGBENCH_PORT", "eighty")

    with pytest.raises(ConfigurationError):
        load_config_from_env()


def test_config_file_is_loaded_and_env_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        '[data]\ndata_dir = "/from/file"\n\n[server]\nport = 9000\nenvironment = "dev"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("AGGBENCH_PORT", "9200")

    settings = ConfigManager(config_path).get_config()

    assert settings.data.data_dir == "/from/file"
    assert settings.server.port == 9200
    assert settings.server.is_development


def test_broken_config_file_falls_back_to_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("[data\n", encoding="utf-8")

    settings = ConfigManager(config_path, use_env=False).get_config()

    assert settings == Settings()


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigurationError):
        Settings.from_dict({"server": {"colour": "blue"}})


def test_update_config_round_trips_through_dict(tmp_path: Path) -> None:
    manager = ConfigManager(tmp_path / "missing.toml", use_env=False)

    manager.update_config(server={"environment": "local"})

    assert manager.get_config().server.is_development
    assert manager.get_config().to_dict()["server"]["environment"] == "local"


def test_logging_section_holds_only_level_and_file() -> None:
    assert Settings().to_dict()["logging"] == {"level": "INFO", "file": None}

    with pytest.raises(ConfigurationError):
        Settings.from_dict({"logging": {"serialize": False}})
