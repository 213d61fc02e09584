"""
snapbind - Snapshot normalization and reference extraction

Turns document-store snapshots into plain data trees and pulls embedded
document references out of them, so a binder can resolve each reference on
its own and keep object identity stable across updates.
"""

# Classification of document values
from .classify import ValueKind, classify, is_container, register_opaque_type

# Converters for the document store
from .converter import (
    DOCUMENT_ID,
    DOCUMENT_METADATA,
    DOCUMENT_REF,
    DefaultDocumentConverter,
    DocumentConverter,
    DocumentSnapshot,
)

# Reference extraction (the walker)
from .extract import ExtractionResult, ExtractOptions, extract_refs

# Realtime-tree records
from .realtime import (
    RECORD_KEY,
    RECORD_PRIORITY,
    RECORD_REF,
    RECORD_SIZE,
    VALUE_FIELD,
    DatabaseSnapshotSerializer,
    DataSnapshot,
    create_record_from_snapshot,
    index_for_key,
)

# Data model
from .record import (
    HOLE,
    Document,
    HiddenFields,
    ReadOnlyFieldError,
    RecordList,
    as_document,
    as_record,
    copy_hidden_fields,
    decorate,
    hidden_fields,
)
from .subscriptions import SubscriptionEntry, index_by_path
from .values import DocumentReference, GeoPoint, SnapshotMetadata, Timestamp

__all__ = [
    # Data model
    "Document",
    "RecordList",
    "HiddenFields",
    "HOLE",
    "as_document",
    "as_record",
    "copy_hidden_fields",
    "decorate",
    "hidden_fields",
    # Values
    "DocumentReference",
    "GeoPoint",
    "SnapshotMetadata",
    "Timestamp",
    # Classification
    "ValueKind",
    "classify",
    "is_container",
    "register_opaque_type",
    # Subscriptions
    "SubscriptionEntry",
    "index_by_path",
    # Extraction
    "ExtractOptions",
    "ExtractionResult",
    "extract_refs",
    # Realtime-tree records
    "DataSnapshot",
    "DatabaseSnapshotSerializer",
    "create_record_from_snapshot",
    "index_for_key",
    "RECORD_KEY",
    "RECORD_PRIORITY",
    "RECORD_REF",
    "RECORD_SIZE",
    "VALUE_FIELD",
    # Document converters
    "DocumentConverter",
    "DocumentSnapshot",
    "DefaultDocumentConverter",
    "DOCUMENT_ID",
    "DOCUMENT_METADATA",
    "DOCUMENT_REF",
    # Exceptions
    "ReadOnlyFieldError",
]
