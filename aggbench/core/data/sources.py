"""Resolution of the trade data file inside a data directory."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from aggbench.core.config.pipeline import PipelineConfig
from aggbench.core.config.settings import DataConfig
from aggbench.core.data.ingestion.parser import coerce_records, parse_delimited
from aggbench.core.data.ingestion.service import TransformResult, transform_records
from aggbench.core.exceptions.base import DataFormatError, SourceLoadError
from aggbench.core.logging import log_context
from aggbench.core.models.trade import Trade


class SourceKind(str, Enum):
    """Kinds of file a data directory may hold, in lookup order."""

    CSV = "csv"
    JSON = "json"
    LEGACY = "legacy"


@dataclass(slots=True, frozen=True)
class LoadResult:
    """Trades loaded from a data directory and where they came from."""

    trades: tuple[Trade, ...]
    source: SourceKind | None = None
    path: Path | None = None
    transform: TransformResult | None = None
    legacy_items: tuple[Any, ...] | None = None

    @property
    def found(self) -> bool:
        return self.source is not None

    def to_wire(self) -> list[Any]:
        """JSON-ready trade list; legacy items are passed through exactly as read."""

        if self.legacy_items is not None:
            return list(self.legacy_items)
        return [trade.to_wire() for trade in self.trades]


def _read_text(path: Path, kind: SourceKind) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceLoadError(f"cannot read {path.name}: {exc}", path=str(path), source_kind=kind.value) from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _read_json_list(path: Path, kind: SourceKind) -> list[Any]:
    text = _read_text(path, kind)
    try:
        payload = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise SourceLoadError(
            f"invalid JSON in {path.name}: {exc.msg}",
            path=str(path),
            source_kind=kind.value,
            details={"line": exc.lineno, "column": exc.colno},
        ) from exc
    except ValueError as exc:
        raise SourceLoadError(f"invalid JSON in {path.name}: {exc}", path=str(path), source_kind=kind.value) from exc
    if not isinstance(payload, list):
        raise SourceLoadError(
            f"{path.name} must contain a JSON array",
            path=str(path),
            source_kind=kind.value,
            details={"type": type(payload).__name__},
        )
    return payload


def _load_csv(path: Path, config: PipelineConfig | None) -> LoadResult:
    records = parse_delimited(_read_text(path, SourceKind.CSV))
    if not records:
        logger.warning("Delimited source parsed but no rows found", source="csv", path=str(path))
    result = transform_records(records, config)
    return LoadResult(trades=result.trades, source=SourceKind.CSV, path=path, transform=result)


def _load_json(path: Path, config: PipelineConfig | None) -> LoadResult:
    items = _read_json_list(path, SourceKind.JSON)
    try:
        records = coerce_records(items)
    except DataFormatError as exc:
        raise SourceLoadError(
            exc.message,
            path=str(path),
            source_kind=SourceKind.JSON.value,
            details=dict(exc.details),
        ) from exc
    result = transform_records(records, config)
    return LoadResult(trades=result.trades, source=SourceKind.JSON, path=path, transform=result)


def _load_legacy(path: Path) -> LoadResult:
    items = _read_json_list(path, SourceKind.LEGACY)
    trades: list[Trade] = []
    skipped = 0
    for item in items:
        try:
            trades.append(Trade.model_validate(item))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.warning(
            "Legacy trades outside the known schema are served as-is but left out of statistics",
            source=SourceKind.LEGACY.value,
            skipped=skipped,
            path=str(path),
        )
    return LoadResult(trades=tuple(trades), source=SourceKind.LEGACY, path=path, legacy_items=tuple(items))


def load_file(path: str | Path, config: PipelineConfig | None = None) -> LoadResult:
    """Transform a single raw export: JSON when the suffix says so, delimited text otherwise."""

    source = Path(path)
    if source.suffix.lower() == ".json":
        return _load_json(source, config)
    return _load_csv(source, config)


def load_trades(
    data_dir: str | Path,
    config: PipelineConfig | None = None,
    *,
    files: DataConfig | None = None,
) -> LoadResult:
    """Load trades from the first source present in ``data_dir``.

    ``quotes.csv`` wins over ``quotes.json``, which wins over the already
    grouped ``trades.json``. A directory holding none of them yields an empty
    result; a file that exists but cannot be read or decoded raises
    :class:`SourceLoadError`.
    """

    files = files or DataConfig()
    root = Path(data_dir)

    csv_path = root / files.csv_filename
    json_path = root / files.json_filename
    legacy_path = root / files.legacy_filename

    with log_context(data_dir=str(root)):
        try:
            if csv_path.exists():
                loaded = _load_csv(csv_path, config)
            elif json_path.exists():
                loaded = _load_json(json_path, config)
            elif legacy_path.exists():
                loaded = _load_legacy(legacy_path)
            else:
                logger.warning("No data files found", path=str(root))
                return LoadResult(trades=())
        except SourceLoadError as exc:
            logger.error("Failed to load trade data", error_code=exc.error_code, **exc.details)
            raise

        logger.info(
            "Loaded trades",
            source=loaded.source.value if loaded.source else None,
            trades=len(loaded.trades),
            path=str(loaded.path),
        )
    return loaded


__all__ = ["LoadResult", "SourceKind", "load_file", "load_trades"]
