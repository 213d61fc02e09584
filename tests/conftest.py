"""
Shared pytest fixtures and configuration for snapbind tests.
"""

import pytest

from snapbind import (
    DefaultDocumentConverter,
    DocumentReference,
    ExtractOptions,
    SubscriptionEntry,
)
from tests.utils import FakeDataSnapshot, FakeDocumentSnapshot


@pytest.fixture
def converter():
    """The converter references get when they have none of their own."""
    return DefaultDocumentConverter()


@pytest.fixture
def options(converter):
    """Extraction options using the default converter."""
    return ExtractOptions(converter=converter)


@pytest.fixture
def user_ref():
    """Reference to /users/1 without a converter."""
    return DocumentReference("/users/1")


@pytest.fixture
def subscription():
    """Factory for registry entries resolving to a fixed value."""

    def make(path, value):
        return SubscriptionEntry(path=path, data=lambda: value)

    return make


@pytest.fixture
def data_snapshot():
    """Factory for realtime-tree snapshots."""
    return FakeDataSnapshot


@pytest.fixture
def document_snapshot():
    """Factory for document-store snapshots."""
    return FakeDocumentSnapshot
