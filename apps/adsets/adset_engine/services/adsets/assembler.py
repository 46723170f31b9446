from __future__ import annotations

import enum
import json
from typing import Any, Mapping

# Nested documents the Marketing API expects as JSON strings in a form body.
JSON_FIELDS = frozenset(
    {"targeting", "promoted_object", "frequency_control_specs", "attribution_spec"}
)


def _encode(key: str, value: Any) -> str | None:
    if value is None:
        return None
    if key in JSON_FIELDS or isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"))
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def assemble_payload(*parts: Mapping[str, Any]) -> dict[str, str]:
    """Merge partial documents into a flat form payload.

    Later parts win on key collisions.  Keys whose value is ``None`` or an
    empty/whitespace string after encoding are dropped.
    """
    merged: dict[str, Any] = {}
    for part in parts:
        merged.update(part)

    payload: dict[str, str] = {}
    for key, value in merged.items():
        encoded = _encode(key, value)
        if encoded is None or not encoded.strip():
            continue
        payload[key] = encoded
    return payload
