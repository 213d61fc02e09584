"""Unit tests for the default document converter."""

import pytest

from snapbind import (
    DOCUMENT_ID,
    DOCUMENT_METADATA,
    DOCUMENT_REF,
    DefaultDocumentConverter,
    Document,
    SnapshotMetadata,
)


@pytest.mark.unit
@pytest.mark.converter
def test_from_storage_of_missing_document_is_none(converter, document_snapshot):
    assert converter.from_storage(document_snapshot("/users/ghost")) is None


@pytest.mark.unit
@pytest.mark.converter
def test_from_storage_attaches_identity_metadata_and_ref(converter, document_snapshot):
    """Decoded documents carry hidden id, metadata and back-reference"""
    # Arrange
    snapshot = document_snapshot("/users/ada", {"name": "ada"}, from_cache=True)

    # Act
    record = converter.from_storage(snapshot)

    # Assert
    assert isinstance(record, Document)
    assert record == {"name": "ada"}
    assert record[DOCUMENT_ID] == "ada"
    assert record[DOCUMENT_METADATA] == SnapshotMetadata(from_cache=True)
    assert record[DOCUMENT_REF] is snapshot.ref
    assert list(record) == ["name"]


@pytest.mark.unit
@pytest.mark.converter
def test_from_storage_forwards_options(converter, document_snapshot):
    snapshot = document_snapshot("/users/ada", {"name": "ada"})
    options = {"server_timestamps": "estimate"}

    converter.from_storage(snapshot, options)

    assert snapshot.received_options is options


@pytest.mark.unit
@pytest.mark.converter
def test_to_storage_is_identity_without_metadata(converter, document_snapshot):
    """Writing a record back only exposes its regular fields"""
    record = converter.from_storage(document_snapshot("/users/ada", {"name": "ada"}))

    stored = converter.to_storage(record)

    assert stored is record
    assert dict(stored.items()) == {"name": "ada"}


@pytest.mark.unit
@pytest.mark.converter
def test_default_converters_compare_equal():
    """Any two default converters are interchangeable"""
    assert DefaultDocumentConverter() == DefaultDocumentConverter()


@pytest.mark.unit
@pytest.mark.converter
@pytest.mark.edge_case
def test_from_storage_of_cached_document_does_not_raise(converter, document_snapshot):
    """Snapshots that return the same Document each time can be decoded twice"""
    # Arrange
    snapshot = document_snapshot("/users/ada", {"name": "ada"})
    cached = Document({"name": "ada"})
    snapshot.data = lambda options=None: cached
    first = converter.from_storage(snapshot)

    # Act
    second = converter.from_storage(snapshot)

    # Assert
    assert first is cached
    assert second == {"name": "ada"}
    assert second[DOCUMENT_ID] == "ada"
    assert second[DOCUMENT_REF] is snapshot.ref
