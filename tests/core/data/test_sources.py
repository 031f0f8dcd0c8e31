from __future__ import annotations

import json
from pathlib import Path

import pytest

from aggbench.core.config.settings import DataConfig
from aggbench.core.data.sources import SourceKind, load_file, load_trades
from aggbench.core.exceptions import SourceLoadError

HEADER = (
    "timestamp,chain,chain_name,from_token,to_token,usd_amount,token_amount,"
    "project,expected_amount,efficiency,latency_ms,from_amount_usd,to_amount_usd"
)


def _csv(*rows: str) -> str:
    return "\n".join([HEADER, *rows]) + "\n"


def _row(project: str, expected: float, timestamp: str = "2024-05-01T00:00:00Z") -> str:
    return f"{timestamp},8453,Base,WETH,USDC,10000,1,{project},{expected},99.5%,120,0,0"


def _raw_json_record(project: str, expected: float) -> dict[str, object]:
    return {
        "timestamp": "2024-05-01T00:00:00Z",
        "chain": "1",
        "chain_name": "Mainnet",
        "from_token": "USDC",
        "to_token": "USDT",
        "usd_amount": 50000,
        "token_amount": 50000,
        "project": project,
        "expectedAmount": expected,
        "efficiency": "99.9%",
        "latency_ms": 80,
        "from_amount_usd": 50000,
        "to_amount_usd": 49990,
    }


def _legacy_trade() -> dict[str, object]:
    return {
        "id": "trade-legacy",
        "chain": "Polygon",
        "pair": {"tokenIn": "WMATIC", "tokenOut": "USDC", "pairType": "Native-Stable"},
        "tradeSize": 100000,
        "tokenIn": "WMATIC",
        "quotes": [
            {"aggregator": "odos", "price": 0.71, "efficiency": 99.2, "latency_ms": 140, "expectedAmount": 70}
        ],
        "timestamp": "2024-04-30T12:00:00Z",
    }


def test_missing_sources_yield_an_empty_result(tmp_path: Path) -> None:
    result = load_trades(tmp_path)

    assert result.trades == ()
    assert not result.found
    assert result.source is None


def test_csv_source_is_transformed(tmp_path: Path) -> None:
    (tmp_path / "quotes.csv").write_text(_csv(_row("odos", 100), _row("kyber", 101)), encoding="utf-8")

    result = load_trades(tmp_path)

    assert result.source is SourceKind.CSV
    assert result.path == tmp_path / "quotes.csv"
    (trade,) = result.trades
    assert trade.id == "trade-001"
    assert [quote.aggregator for quote in trade.quotes] == ["odos", "kyber"]
    assert result.transform is not None
    assert result.transform.input_rows == 2


def test_csv_wins_over_json_sources(tmp_path: Path) -> None:
    (tmp_path / "quotes.csv").write_text(_csv(_row("odos", 100)), encoding="utf-8")
    (tmp_path / "quotes.json").write_text(json.dumps([_raw_json_record("kyber", 1)]), encoding="utf-8")
    (tmp_path / "trades.json").write_text(json.dumps([_legacy_trade()]), encoding="utf-8")

    assert load_trades(tmp_path).source is SourceKind.CSV


def test_raw_json_source_is_transformed(tmp_path: Path) -> None:
    records = [_raw_json_record("odos", 49990), _raw_json_record("mock", 49990)]
    (tmp_path / "quotes.json").write_text(json.dumps(records), encoding="utf-8")
    (tmp_path / "trades.json").write_text(json.dumps([_legacy_trade()]), encoding="utf-8")

    result = load_trades(tmp_path)

    assert result.source is SourceKind.JSON
    (trade,) = result.trades
    assert trade.chain.value == "Ethereum"
    assert trade.pair.pair_type.value == "Stable-Stable"
    assert trade.trade_size == 50000
    assert trade.quotes[0].price == pytest.approx(0.9998)
    assert result.transform is not None
    assert result.transform.rejected_rows == 1


def test_legacy_trades_are_returned_untouched(tmp_path: Path) -> None:
    (tmp_path / "trades.json").write_text(json.dumps([_legacy_trade()]), encoding="utf-8")

    result = load_trades(tmp_path)

    assert result.source is SourceKind.LEGACY
    assert result.transform is None
    (trade,) = result.trades
    assert trade.id == "trade-legacy"
    assert trade.to_wire() == _legacy_trade() | {
        "quotes": [{"aggregator": "odos", "price": 0.71, "efficiency": 99.2, "latency_ms": 140.0, "expectedAmount": 70.0}]
    }


def test_legacy_trades_outside_the_schema_are_kept_as_read(tmp_path: Path) -> None:
    unknown = _legacy_trade() | {"id": "trade-solana", "chain": "Solana", "tradeSize": 25000, "venue": "jupiter"}
    (tmp_path / "trades.json").write_text(json.dumps([_legacy_trade(), unknown]), encoding="utf-8")

    result = load_trades(tmp_path)

    assert result.source is SourceKind.LEGACY
    assert [trade.id for trade in result.trades] == ["trade-legacy"]
    assert result.to_wire() == [_legacy_trade(), unknown]


def test_transformed_sources_serialise_their_trades(tmp_path: Path) -> None:
    (tmp_path / "quotes.csv").write_text(_csv(_row("odos", 100)), encoding="utf-8")

    result = load_trades(tmp_path)

    assert result.to_wire() == [trade.to_wire() for trade in result.trades]


def test_empty_csv_is_not_an_error(tmp_path: Path) -> None:
    (tmp_path / "quotes.csv").write_text(HEADER + "\n", encoding="utf-8")

    result = load_trades(tmp_path)

    assert result.source is SourceKind.CSV
    assert result.trades == ()


@pytest.mark.parametrize(
    ("filename", "content", "kind"),
    [
        ("quotes.json", "{not json", "json"),
        ("quotes.json", json.dumps({"rows": []}), "json"),
        ("quotes.json", json.dumps([1, 2]), "json"),
        ("trades.json", json.dumps({"id": "broken"}), "legacy"),
        ("trades.json", "[NaN]", "legacy"),
        ("trades.json", "[", "legacy"),
    ],
)
def test_broken_sources_raise(tmp_path: Path, filename: str, content: str, kind: str) -> None:
    (tmp_path / filename).write_text(content, encoding="utf-8")

    with pytest.raises(SourceLoadError) as excinfo:
        load_trades(tmp_path)

    assert excinfo.value.source_kind == kind
    assert excinfo.value.path == str(tmp_path / filename)
    assert excinfo.value.error_code == "SOURCE_LOAD_ERROR"


def test_undecodable_csv_raises(tmp_path: Path) -> None:
    (tmp_path / "quotes.csv").write_bytes(b"\xff\xfe\x00garbage")

    with pytest.raises(SourceLoadError) as excinfo:
        load_trades(tmp_path)

    assert excinfo.value.source_kind == "csv"


def test_custom_file_names(tmp_path: Path) -> None:
    (tmp_path / "run.tsv").write_text(_csv(_row("odos", 100)).replace(",", "\t"), encoding="utf-8")

    result = load_trades(tmp_path, files=DataConfig(csv_filename="run.tsv"))

    assert result.source is SourceKind.CSV
    assert len(result.trades) == 1


def test_load_file_dispatches_on_suffix(tmp_path: Path) -> None:
    json_path = tmp_path / "export.json"
    json_path.write_text(json.dumps([_raw_json_record("odos", 49990)]), encoding="utf-8")
    csv_path = tmp_path / "export.txt"
    csv_path.write_text(_csv(_row("odos", 100)), encoding="utf-8")

    assert load_file(json_path).source is SourceKind.JSON
    assert load_file(csv_path).source is SourceKind.CSV
