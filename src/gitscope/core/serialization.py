"""Conversion of history models to JSON-ready data."""

from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any


def _serialize_datetimes(obj: Any) -> Any:
    """Recursively convert datetime objects to ISO-8601 strings."""
    if isinstance(obj, dict):
        return {k: _serialize_datetimes(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize_datetimes(v) for v in obj]
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def to_wire(obj: Any) -> Any:
    """Dataclass models, and lists or dicts holding them, as JSON-ready data."""
    if isinstance(obj, dict):
        return {k: to_wire(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_wire(item) for item in obj]
    if is_dataclass(obj) and not isinstance(obj, type):
        return _serialize_datetimes(asdict(obj))
    return _serialize_datetimes(obj)
