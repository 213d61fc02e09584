"""Integration tests running snapbind the way a binder drives it, snapshot after snapshot."""

import pytest

from snapbind import (
    DOCUMENT_ID,
    DocumentReference,
    SubscriptionEntry,
    create_record_from_snapshot,
    extract_refs,
    index_for_key,
)


class MiniBinder:
    """
    Smallest binder that exercises the extraction contract.

    Keeps the current data, resolves every new reference from an in-memory
    table of documents and binds the resolved value into the tree.
    """

    def __init__(self, documents, converter, options):
        self.documents = documents
        self.converter = converter
        self.options = options
        self.data = None
        self.subscriptions = {}

    def on_snapshot(self, snapshot):
        record = self.converter.from_storage(snapshot)
        data, refs = extract_refs(record, self.data, self.subscriptions, self.options)
        for sub_key, ref in refs.items():
            if sub_key not in self.subscriptions:
                resolved = ref.converter.from_storage(self.documents[ref.path])
                self.subscriptions[sub_key] = SubscriptionEntry(
                    ref.path, lambda value=resolved: value
                )
                data[sub_key] = resolved
        self.data = data
        return data


@pytest.fixture
def documents(document_snapshot):
    return {
        "/users/1": document_snapshot("/users/1", {"name": "bob"}),
        "/users/2": document_snapshot("/users/2", {"name": "eve"}),
    }


@pytest.mark.integration
@pytest.mark.extract
@pytest.mark.converter
def test_bound_reference_survives_document_updates(
    documents, converter, options, document_snapshot
):
    """Once bound, a reference keeps the same resolved object across snapshots"""
    # Arrange
    binder = MiniBinder(documents, converter, options)
    owner = DocumentReference("/users/1")

    # Act - first snapshot binds the owner
    first = binder.on_snapshot(
        document_snapshot("/posts/1", {"title": "hi", "owner": owner})
    )
    bob = first["owner"]

    # Act - second snapshot changes an unrelated field
    second = binder.on_snapshot(
        document_snapshot("/posts/1", {"title": "hello", "owner": owner})
    )

    # Assert
    assert bob == {"name": "bob"}
    assert bob[DOCUMENT_ID] == "1"
    assert second["title"] == "hello"
    assert second["owner"] is bob
    assert second[DOCUMENT_ID] == "1"
    assert list(binder.subscriptions) == ["owner"]


@pytest.mark.integration
@pytest.mark.extract
def test_unchanged_nested_data_keeps_identity_across_snapshots(
    documents, converter, options, document_snapshot
):
    """Nested data that did not change is not rebuilt between snapshots"""
    # Arrange
    binder = MiniBinder(documents, converter, options)
    payload = {"settings": {"theme": "dark"}, "tags": ["a", "b"], "views": 1}

    # Act
    first = binder.on_snapshot(document_snapshot("/posts/1", payload))
    second = binder.on_snapshot(
        document_snapshot("/posts/1", {**payload, "views": 2})
    )

    # Assert
    assert second["views"] == 2
    assert second["settings"] is first["settings"]
    assert second["tags"] is first["tags"]


@pytest.mark.integration
@pytest.mark.realtime
def test_keyed_list_is_maintained_from_child_snapshots(data_snapshot):
    """Records from child snapshots can be located and replaced by key"""
    # Arrange
    records = [
        create_record_from_snapshot(data_snapshot(key, {"score": score}))
        for key, score in [("ada", 3), ("bob", 5), ("eve", 1)]
    ]

    # Act - "bob" changed
    updated = create_record_from_snapshot(data_snapshot("bob", {"score": 8}))
    records[index_for_key(records, "bob")] = updated

    # Act - "eve" was removed
    del records[index_for_key(records, "eve")]

    # Assert
    assert [r[".key"] for r in records] == ["ada", "bob"]
    assert records[1] == {"score": 8}
    assert index_for_key(records, "eve") == -1
