"""Base model for everything serialised to JSON consumers."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict


class WireModel(BaseModel):
    """Frozen model whose JSON form writes non-finite floats as ``null``.

    Lenient parsing lets ``"Infinity"`` through as ``inf``; strict JSON
    encoders (the HTTP layer, JSON Lines output) reject it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, ser_json_inf_nan="null")

    def to_wire(self) -> dict[str, Any]:
        """Plain JSON-compatible dict with the aliased (camelCase) keys."""

        return json.loads(self.model_dump_json(by_alias=True))


__all__ = ["WireModel"]
