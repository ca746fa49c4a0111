"""JSON helpers: canonical serialization and typed accessors over parsed trees."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional


def dump_json(value: Any) -> str:
    """Serialize ``value`` to compact JSON text, preserving key order."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def parse_json_or_none(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return None


def parse_json_object_or_none(text: str) -> Optional[Dict[str, Any]]:
    value = parse_json_or_none(text)
    return value if isinstance(value, dict) else None


def as_string_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def as_string_list_or_none(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        return None
    return list(value)


def as_string_list_coerce_or_none(value: Any) -> Optional[List[str]]:
    """Like ``as_string_list_or_none`` but a lone string becomes a one-item list."""
    if isinstance(value, str):
        return [value]
    return as_string_list_or_none(value)


def as_timestamp_or_none(value: Any) -> Optional[datetime]:
    """Interpret integral seconds since the epoch as an aware UTC datetime."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def get_string(mapping: Optional[Mapping[str, Any]], name: str) -> Optional[str]:
    if mapping is None:
        return None
    return as_string_or_none(mapping.get(name))
