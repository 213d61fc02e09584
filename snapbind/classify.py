"""
Value Classification
====================

Sorts every value found in a document into one closed set of kinds before the
extraction walker decides what to do with it. Classification is done once per
value, by type, and memoized per concrete type.

Priority order (first match wins):

1. ``None``                                  -> NULL
2. dates, times, Timestamp, GeoPoint          -> OPAQUE (never walked into)
3. DocumentReference                          -> REFERENCE
4. list, tuple                                -> ARRAY
5. any Mapping                                -> CONTAINER
6. anything else                              -> SCALAR
"""

import threading
from collections.abc import Mapping
from datetime import date, time
from enum import Enum
from typing import Any, List, Type

from cachetools import LRUCache

from .values import DocumentReference, GeoPoint, Timestamp


class ValueKind(Enum):
    """Closed classification of document values."""

    NULL = "null"
    OPAQUE = "opaque"
    REFERENCE = "reference"
    ARRAY = "array"
    CONTAINER = "container"
    SCALAR = "scalar"


# datetime.datetime is a subclass of date
_OPAQUE_TYPES: List[Type] = [date, time, Timestamp, GeoPoint]

_KIND_CACHE: LRUCache = LRUCache(maxsize=512)
_KIND_LOCK = threading.RLock()


def _classify_type(value_type: Type) -> ValueKind:
    if issubclass(value_type, tuple(_OPAQUE_TYPES)):
        return ValueKind.OPAQUE
    if issubclass(value_type, DocumentReference):
        return ValueKind.REFERENCE
    if issubclass(value_type, (list, tuple)):
        return ValueKind.ARRAY
    if issubclass(value_type, Mapping):
        return ValueKind.CONTAINER
    return ValueKind.SCALAR


def classify(value: Any) -> ValueKind:
    """
    Classify a document value.

    Args:
        value: Any value found in a document

    Returns:
        The value's kind
    """
    if value is None:
        return ValueKind.NULL

    value_type = type(value)
    with _KIND_LOCK:
        kind = _KIND_CACHE.get(value_type)
        if kind is None:
            kind = _classify_type(value_type)
            _KIND_CACHE[value_type] = kind
    return kind


def is_container(value: Any) -> bool:
    """True for mappings that can be decomposed field by field."""
    return classify(value) is ValueKind.CONTAINER


def register_opaque_type(value_type: Type) -> None:
    """
    Treat ``value_type`` (and its subclasses) as an opaque leaf value.

    Useful for store SDK types that should be copied whole rather than
    walked into.
    """
    with _KIND_LOCK:
        if value_type not in _OPAQUE_TYPES:
            _OPAQUE_TYPES.append(value_type)
        _KIND_CACHE.clear()
