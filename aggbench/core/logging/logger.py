"""JSON-lines logging on top of loguru with per-run trace ids.

Every record carries a ``trace_id``. Records emitted inside :func:`log_context`
share the trace id of that block and inherit its extra fields. ``source``,
``trade_id`` and ``error_code`` are promoted to top-level keys so log readers
can filter a pipeline run by data source or by trade without digging into the
free-form ``context`` object.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Iterator
from uuid import uuid4

from loguru import logger

from aggbench.core.logging.config import LogConfig

if TYPE_CHECKING:
    from loguru import Logger, Message, Record

PROMOTED_KEYS = ("source", "trade_id", "error_code")

_trace_id: ContextVar[str | None] = ContextVar("aggbench_trace_id", default=None)
_bound_fields: ContextVar[dict[str, Any] | None] = ContextVar("aggbench_log_fields", default=None)


def current_trace_id() -> str:
    """Trace id of the active context; one is minted when none is active."""

    trace_id = _trace_id.get()
    if trace_id is None:
        trace_id = uuid4().hex
        _trace_id.set(trace_id)
    return trace_id


def _patch_record(record: Record) -> None:
    extra = record["extra"]
    if extra.get("trace_id"):
        _trace_id.set(extra["trace_id"])
    else:
        extra["trace_id"] = current_trace_id()

    for key, value in (_bound_fields.get() or {}).items():
        if extra.get(key) is None:
            extra[key] = value


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def render_record(record: Record) -> str:
    """Serialise a loguru record to one JSON line (without the newline)."""

    extra = record["extra"]
    payload: dict[str, Any] = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "trace_id": extra.get("trace_id"),
    }
    for key in PROMOTED_KEYS:
        payload[key] = extra.get(key)

    context = {key: value for key, value in extra.items() if key != "trace_id" and key not in PROMOTED_KEYS}
    if context:
        payload["context"] = context

    exception = record["exception"]
    if exception is not None and exception.type is not None:
        payload["exception"] = {"type": exception.type.__name__, "message": str(exception.value)}
    return json.dumps(payload, default=_encode, ensure_ascii=False)


class JsonLinesSink:
    """Write each record as a JSON line to a stream, or append it to a file."""

    def __init__(self, target: IO[str] | str | Path) -> None:
        self._path: Path | None = None
        self._stream: IO[str] | None = None
        if isinstance(target, (str, Path)):
            self._path = Path(target)
            self._path.parent.mkdir(parents=True, exist_ok=True)
        else:
            self._stream = target

    def __call__(self, message: Message) -> None:
        line = render_record(message.record) + "\n"
        if self._path is not None:
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(line)
        elif self._stream is not None:
            self._stream.write(line)
            self._stream.flush()


def _apply(config: LogConfig) -> None:
    level = config.level.upper()
    handlers: list[dict[str, Any]] = []
    if config.console_output:
        handlers.append({"sink": JsonLinesSink(config.console_stream or sys.stderr), "level": level})
    if config.file_output and config.file_path:
        handlers.append({"sink": JsonLinesSink(config.file_path), "level": level})
    logger.configure(handlers=handlers, patcher=_patch_record, extra=dict(config.extra))


def configure_logging(level: str = "INFO", **kwargs: Any) -> None:
    """Replace every loguru sink with JSON-lines sinks at ``level``."""

    _apply(LogConfig(level=level, **kwargs))


class StructuredLogger:
    """Holds a :class:`LogConfig` and keeps loguru configured from it."""

    def __init__(self, config: LogConfig | None = None) -> None:
        self.config = config or LogConfig()
        _apply(self.config)
        self.logger: Logger = logger

    def configure(self, **kwargs: Any) -> None:
        self.config = self.config.model_copy(update=kwargs)
        _apply(self.config)

    @contextmanager
    def context(self, *, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
        with log_context(trace_id=trace_id, **fields) as active:
            yield active


def get_logger(name: str | None = None) -> Logger:
    """Return the shared logger, bound to ``name`` when given."""

    if name:
        return logger.bind(logger_name=name)
    return logger


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Run the block under one trace id, attaching ``fields`` to every record in it.

    Nested contexts inherit the outer fields and override them key by key.
    """

    fields_token = _bound_fields.set({**(_bound_fields.get() or {}), **fields})
    trace_token = _trace_id.set(trace_id or uuid4().hex)
    try:
        yield _trace_id.get() or ""
    finally:
        _trace_id.reset(trace_token)
        _bound_fields.reset(fields_token)


__all__ = [
    "JsonLinesSink",
    "PROMOTED_KEYS",
    "StructuredLogger",
    "configure_logging",
    "current_trace_id",
    "get_logger",
    "log_context",
    "logger",
    "render_record",
]
