"""Pytest configuration for the aggbench test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from loguru import logger

_ENV_VARS = (
    "AGGBENCH_DATA_DIR",
    "AGGBENCH_ENV",
    "AGGBENCH_HOST",
    "AGGBENCH_PORT",
    "AGGBENCH_RELOAD",
    "AGGBENCH_LOGGING_LEVEL",
    "AGGBENCH_LOGGING_FILE",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep the user's config file and AGGBENCH_* variables out of every test."""

    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logger() -> Iterator[None]:
    """Drop sinks bound to per-test streams once the test is over."""

    yield
    logger.remove()
