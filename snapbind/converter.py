"""
Document Converters
===================

A converter is the adapter pair a document reference uses to turn a raw
snapshot into a record and a record back into storable data. References that
do not carry their own converter are given the default one when they are
extracted from a document tree.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from .record import Document, as_document, decorate

DOCUMENT_ID = ".id"
DOCUMENT_METADATA = ".metadata"
DOCUMENT_REF = ".ref"


class DocumentSnapshot(Protocol):
    """What the converter reads from a document-store snapshot."""

    id: str
    ref: Any
    metadata: Any

    def exists(self) -> bool: ...

    def data(self, options: Optional[Any] = None) -> Optional[Mapping]: ...


class DocumentConverter(Protocol):
    """Adapter pair between stored data and in-memory records."""

    def to_storage(self, data: Any) -> Any: ...

    def from_storage(
        self, snapshot: DocumentSnapshot, options: Optional[Any] = None
    ) -> Optional[Any]: ...


@dataclass(frozen=True)
class DefaultDocumentConverter:
    """
    Converter used for references without one of their own.

    ``from_storage`` decodes the snapshot and attaches its id, metadata and
    reference as hidden fields. ``to_storage`` returns the record unchanged:
    hidden fields are not part of a Document's items, so they are never
    written back.
    """

    def to_storage(self, data: Any) -> Any:
        return data

    def from_storage(
        self, snapshot: DocumentSnapshot, options: Optional[Any] = None
    ) -> Optional[Document]:
        if not snapshot.exists():
            return None

        record = as_document(snapshot.data(options) or {})
        return decorate(
            record,
            {
                DOCUMENT_ID: snapshot.id,
                DOCUMENT_METADATA: snapshot.metadata,
                DOCUMENT_REF: snapshot.ref,
            },
        )
