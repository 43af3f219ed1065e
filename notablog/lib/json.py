"""Central JSON utilities using orjson."""

from __future__ import annotations

from typing import Any

import orjson

# orjson.JSONDecodeError subclasses ValueError
JSONDecodeError = orjson.JSONDecodeError


def dumps(obj: Any) -> str:
    """Dump object to JSON string. Raises TypeError for unsupported types."""
    return orjson.dumps(obj).decode("utf-8")


def loads(obj: str | bytes) -> Any:
    """Load object from JSON string or bytes."""
    return orjson.loads(obj)


__all__ = ["JSONDecodeError", "dumps", "loads"]
