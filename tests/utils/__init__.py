"""
Test utilities for snapbind.

In-memory stand-ins for the snapshot objects that store SDKs hand to the
normalizer and the document converter.
"""

from .snapshots import FakeDataSnapshot, FakeDocumentSnapshot

__all__ = [
    "FakeDataSnapshot",
    "FakeDocumentSnapshot",
]
