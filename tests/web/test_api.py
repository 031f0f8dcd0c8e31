from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from aggbench.core.config import DataConfig, ServerConfig, Settings
from aggbench.web.app import create_app

HEADER = (
    "timestamp,chain,chain_name,from_token,to_token,usd_amount,token_amount,"
    "project,expected_amount,efficiency,latency_ms,from_amount_usd,to_amount_usd"
)


def _row(project: str, expected: float, timestamp: str, chain_name: str = "Base") -> str:
    return f"{timestamp},0,{chain_name},WETH,USDC,10000,1,{project},{expected},99.5%,120,0,0"


def _client(data_dir: Path, environment: str = "production") -> TestClient:
    settings = Settings(data=DataConfig(data_dir=str(data_dir)), server=ServerConfig(environment=environment))
    return TestClient(create_app(settings))


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    rows = [
        _row("odos", 100, "t1"),
        _row("kyber", 101, "t1"),
        _row("odos", 99, "t2", chain_name="Arbitrum"),
    ]
    (tmp_path / "quotes.csv").write_text("\n".join([HEADER, *rows]), encoding="utf-8")
    return tmp_path


def test_data_returns_wire_trades(data_dir: Path) -> None:
    response = _client(data_dir).get("/api/data")

    assert response.status_code == 200
    trades = response.json()
    assert [trade["id"] for trade in trades] == ["trade-001", "trade-002"]
    assert trades[0]["pair"] == {"tokenIn": "WETH", "tokenOut": "USDC", "pairType": "Native-Stable"}
    assert trades[1]["chain"] == "Arbitrum"


def test_data_without_sources_is_an_empty_list(tmp_path: Path) -> None:
    response = _client(tmp_path).get("/api/data")

    assert response.status_code == 200
    assert response.json() == []


def test_load_failure_hides_details_in_production(tmp_path: Path) -> None:
    (tmp_path / "trades.json").write_text(json.dumps({"not": "a list"}), encoding="utf-8")

    response = _client(tmp_path).get("/api/data")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to load data"
    assert body["message"] == "trades.json must contain a JSON array"
    assert body["code"] == "SOURCE_LOAD_ERROR"
    assert "details" not in body


def test_load_failure_shows_traceback_in_development(tmp_path: Path) -> None:
    (tmp_path / "quotes.json").write_text("[{", encoding="utf-8")

    response = _client(tmp_path, environment="development").get("/api/data")

    assert response.status_code == 500
    assert "SourceLoadError" in response.json()["details"]


def test_stats_summarises_filtered_trades(data_dir: Path) -> None:
    client = _client(data_dir)

    everything = client.get("/api/stats").json()
    base_only = client.get("/api/stats", params={"chain": "Base"}).json()

    assert everything["trade_count"] == 2
    assert everything["latest_timestamp"] == "t2"
    assert base_only["trade_count"] == 1
    rates = {item["aggregator"]: item["win_rate"] for item in base_only["win_rates"]}
    assert rates == {"odos": 100.0, "kyber": 0.0}


def test_stats_rejects_inverted_size_range(data_dir: Path) -> None:
    response = _client(data_dir).get("/api/stats", params={"min_size": 1_000_000, "max_size": 10_000})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert response.json()["error"]["message"] == "Validation failed: min_size must not exceed max_size"


def test_stats_rejects_unknown_size(data_dir: Path) -> None:
    response = _client(data_dir).get("/api/stats", params={"min_size": 12_345})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_stats_load_failure(tmp_path: Path) -> None:
    (tmp_path / "quotes.json").write_text("nope", encoding="utf-8")

    response = _client(tmp_path).get("/api/stats")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to load data"


def test_health(data_dir: Path, tmp_path: Path) -> None:
    healthy = _client(data_dir).get("/api/health").json()
    degraded = _client(tmp_path / "missing").get("/api/health").json()

    assert healthy["status"] == "healthy"
    assert healthy["environment"] == "production"
    assert degraded["status"] == "degraded"


def test_settings_come_from_environment(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGGBENCH_DATA_DIR", str(data_dir))
    monkeypatch.setenv("AGGBENCH_ENV", "dev")

    app = create_app()

    assert app.state.settings.data.data_dir == str(data_dir)
    assert app.state.settings.server.is_development
    assert len(TestClient(app).get("/api/data").json()) == 2


def test_non_finite_numbers_are_served_as_null(tmp_path: Path) -> None:
    row = "t1,0,Base,WETH,USDC,10000,1,odos,100,99.5%,Infinity,0,0"
    (tmp_path / "quotes.csv").write_text("\n".join([HEADER, row]), encoding="utf-8")
    client = _client(tmp_path)

    data = client.get("/api/data")
    stats = client.get("/api/stats")

    assert data.status_code == 200
    (trade,) = data.json()
    assert trade["quotes"][0]["latency_ms"] is None
    assert trade["quotes"][0]["price"] == 100.0
    assert stats.status_code == 200
    assert stats.json()["latency"] == [{"aggregator": "odos", "average": None, "median": None, "p95": None}]


def test_legacy_trades_are_served_as_read(tmp_path: Path) -> None:
    known = {
        "id": "trade-001",
        "chain": "Base",
        "pair": {"tokenIn": "WETH", "tokenOut": "USDC", "pairType": "Native-Stable"},
        "tradeSize": 10000,
        "tokenIn": "WETH",
        "quotes": [{"aggregator": "odos", "price": 100, "efficiency": 99, "latency_ms": 120, "expectedAmount": 1}],
        "timestamp": "t1",
    }
    unknown = known | {"id": "trade-002", "chain": "Solana", "tradeSize": 25000, "venue": "jupiter"}
    (tmp_path / "trades.json").write_text(json.dumps([known, unknown]), encoding="utf-8")
    client = _client(tmp_path)

    data = client.get("/api/data")
    stats = client.get("/api/stats")

    assert data.status_code == 200
    assert data.json() == [known, unknown]
    assert stats.status_code == 200
    assert stats.json()["trade_count"] == 1


def test_stats_rejects_unknown_chain(data_dir: Path) -> None:
    response = _client(data_dir).get("/api/stats", params={"chain": "Solana"})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"].startswith("Validation failed: chain")
