"""
Cache key derivation.

Scalars are their own cache key, None becomes "null" and structured
values become a compact canonical JSON string.
"""
import dataclasses
import json
import math
from collections.abc import Hashable, Mapping
from datetime import date, datetime, time
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel

from .types import CacheKey

_SCALARS = (bool, int, float, str, bytes)
_STRUCTURED = (Mapping, list, tuple, set, frozenset, BaseModel)

_NAN_KEY = float("nan")
"""Shared NaN object; the store matches it by identity."""


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _json_default(value: Any) -> Any:
    """Fallback encoder for values json does not handle natively."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return repr(value)


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), default=_json_default)


def _tag_key(key: Any, sort_keys: bool) -> str:
    """Render a mapping key as a string that carries its type."""
    if isinstance(key, str):
        return f"str:{key}"
    return f"{type(key).__name__}:{_dumps(_canonical(key, sort_keys))}"


def _canonical_mapping(value: Mapping, sort_keys: bool) -> Dict[str, Any]:
    # Plain string keys stay as they are; if any key is not a string,
    # every key is tagged with its type so 1 and "1" stay apart.
    tagged = not all(isinstance(key, str) for key in value)
    pairs: List[Tuple[str, Any]] = [
        (_tag_key(key, sort_keys) if tagged else key, _canonical(item, sort_keys))
        for key, item in value.items()
    ]
    if sort_keys:
        pairs.sort(key=lambda pair: pair[0])
    return dict(pairs)


def _canonical(value: Any, sort_keys: bool) -> Any:
    """Convert a value to JSON-ready data with a deterministic layout."""
    if isinstance(value, BaseModel):
        return _canonical(value.model_dump(mode="json"), sort_keys)
    if _is_dataclass_instance(value):
        return _canonical(dataclasses.asdict(value), sort_keys)
    if isinstance(value, Mapping):
        return _canonical_mapping(value, sort_keys)
    if isinstance(value, (list, tuple)):
        return [_canonical(item, sort_keys) for item in value]
    if isinstance(value, (set, frozenset)):
        items = [_canonical(item, sort_keys) for item in value]
        return sorted(items, key=_dumps)
    return value


def serialize_key(value: Any, sort_keys: bool = True) -> str:
    """
    Serialize a structured value to compact JSON.

    Mapping keys that are not all strings are written as "<type>:<key>"
    (e.g. "int:1", "tuple:[1,2]"), so keys of different types never merge
    and mixed key types can still be sorted.

    Args:
        value: The value to serialize
        sort_keys: Sort mapping keys so field order does not matter

    Returns:
        The JSON text, e.g. '{"id":0}'
    """
    return _dumps(_canonical(value, sort_keys))


def build_cache_key(request_key: Any, sort_keys: bool = True) -> CacheKey:
    """
    Derive the cache key for a request key.

    Args:
        request_key: Any value passed to DataLoader.get()
        sort_keys: Whether mapping keys are sorted in the serialization

    Returns:
        The request key itself for scalars and other hashable objects,
        "null" for None, and canonical JSON for structured values.
        Every NaN maps to one shared NaN object.
    """
    if request_key is None:
        return "null"
    if isinstance(request_key, float) and math.isnan(request_key):
        return _NAN_KEY
    if isinstance(request_key, _SCALARS):
        return request_key
    if isinstance(request_key, _STRUCTURED) or _is_dataclass_instance(request_key):
        return serialize_key(request_key, sort_keys)
    if isinstance(request_key, Hashable):
        return request_key
    return serialize_key(request_key, sort_keys)
