"""Data models supporting raw quote ingestion."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields

_NUMBER_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

STRING_FIELDS = ("timestamp", "chain", "chain_name", "from_token", "to_token", "project")
NUMERIC_FIELDS = (
    "usd_amount",
    "token_amount",
    "expected_amount",
    "latency_ms",
    "from_amount_usd",
    "to_amount_usd",
)
DEFAULT_EFFICIENCY = "0%"

# wire names that differ from the attribute names
_FIELD_ALIASES = {"expected_amount": "expectedAmount"}


def lenient_float(value: object) -> float:
    """Parse the leading number of ``value``; anything unparsable becomes ``0.0``.

    Mirrors how the upstream exports were read: ``"12.5ms"`` -> 12.5,
    ``"abc"`` -> 0.0, ``None`` -> 0.0. Booleans are not numbers here.
    """

    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value).lstrip())
        if match is None:
            return 0.0
        number = float(match.group(0))
    if number != number:  # NaN
        return 0.0
    return number


@dataclass(slots=True)
class RawRecord:
    """One aggregator's quote for one attempted swap at one instant."""

    timestamp: str
    chain: str
    chain_name: str
    from_token: str
    to_token: str
    usd_amount: float
    token_amount: float
    project: str
    expected_amount: float
    efficiency: str
    latency_ms: float
    from_amount_usd: float
    to_amount_usd: float

    @classmethod
    def from_mapping(cls, row: Mapping[str, object]) -> RawRecord:
        """Build a record from a loosely typed mapping, defaulting what is missing."""

        values: dict[str, object] = {}
        for name in STRING_FIELDS:
            value = row.get(name)
            values[name] = str(value) if value else ""
        for name in NUMERIC_FIELDS:
            raw = row.get(name)
            if raw is None and name in _FIELD_ALIASES:
                raw = row.get(_FIELD_ALIASES[name])
            values[name] = lenient_float(raw)
        efficiency = row.get("efficiency")
        values["efficiency"] = str(efficiency) if efficiency else DEFAULT_EFFICIENCY
        return cls(**values)  # type: ignore[arg-type]

    def to_mapping(self) -> dict[str, object]:
        """Return the record keyed by its wire field names."""

        payload: dict[str, object] = {}
        for item in fields(self):
            payload[_FIELD_ALIASES.get(item.name, item.name)] = getattr(self, item.name)
        return payload


__all__ = ["DEFAULT_EFFICIENCY", "NUMERIC_FIELDS", "RawRecord", "STRING_FIELDS", "lenient_float"]
