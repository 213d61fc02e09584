"""Unit tests for value classification."""

from collections import OrderedDict
from datetime import date, datetime, time

import pytest

from snapbind import (
    Document,
    DocumentReference,
    GeoPoint,
    Timestamp,
    ValueKind,
    classify,
    is_container,
    register_opaque_type,
)


@pytest.mark.unit
@pytest.mark.classify
@pytest.mark.parametrize(
    "value, kind",
    [
        (None, ValueKind.NULL),
        (Timestamp(1), ValueKind.OPAQUE),
        (GeoPoint(1.0, 2.0), ValueKind.OPAQUE),
        (datetime(2024, 1, 1), ValueKind.OPAQUE),
        (date(2024, 1, 1), ValueKind.OPAQUE),
        (time(12, 0), ValueKind.OPAQUE),
        (DocumentReference("/a/b"), ValueKind.REFERENCE),
        ([1, 2], ValueKind.ARRAY),
        ({"a": 1}, ValueKind.CONTAINER),
        (Document(a=1), ValueKind.CONTAINER),
        (OrderedDict(a=1), ValueKind.CONTAINER),
        ("text", ValueKind.SCALAR),
        (3.5, ValueKind.SCALAR),
        (False, ValueKind.SCALAR),
        ((1, 2), ValueKind.ARRAY),
        (b"raw", ValueKind.SCALAR),
    ],
)
def test_classify(value, kind):
    assert classify(value) is kind


@pytest.mark.unit
@pytest.mark.classify
def test_only_mappings_are_containers():
    """Lists are arrays, not decomposable containers"""
    assert is_container({"a": 1})
    assert not is_container([{"a": 1}])
    assert not is_container(None)


@pytest.mark.unit
@pytest.mark.classify
def test_registered_opaque_type_is_not_walked():
    """Types registered as opaque win over their container behaviour"""

    class Blob(dict):
        pass

    assert classify(Blob()) is ValueKind.CONTAINER

    register_opaque_type(Blob)

    assert classify(Blob()) is ValueKind.OPAQUE


@pytest.mark.unit
@pytest.mark.classify
def test_classify_from_many_threads():
    """Concurrent classification of fresh types gives consistent kinds"""
    from concurrent.futures import ThreadPoolExecutor

    types = [type(f"Custom{i}", (dict if i % 2 else object,), {}) for i in range(200)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        kinds = list(pool.map(lambda t: classify(t()), types * 4))

    expected = [
        ValueKind.CONTAINER if i % 2 else ValueKind.SCALAR for i in range(200)
    ] * 4
    assert kinds == expected
