"""
Realtime Tree Records
=====================

Turns realtime-tree snapshots into records and finds records by key inside
ordered lists of them.

Every record carries four read-only metadata fields:

- ``.key``: last segment of the snapshot's location (``None`` at the root)
- ``.priority``: the node's priority
- ``.ref``: the node's location
- ``.size``: number of children

Store field names cannot contain ``.``, so these names never collide with
data. When a snapshot holds a container (a mapping, or a list for nodes whose
children have sequential integer keys), the container itself is returned
with the metadata attached as hidden fields; a list becomes a
``RecordList``. When it holds a scalar, the scalar is wrapped in a new
record under ``$value`` with the metadata as regular fields, which keeps
the wrapper readable when printed.
"""

from collections.abc import Mapping
from typing import Any, Callable, List, Optional, Protocol, Union

from .classify import is_container
from .record import Document, RecordList, as_record, decorate

RECORD_KEY = ".key"
RECORD_PRIORITY = ".priority"
RECORD_REF = ".ref"
RECORD_SIZE = ".size"
VALUE_FIELD = "$value"

_MISSING = object()


class DataSnapshot(Protocol):
    """What the normalizer reads from a realtime-tree snapshot."""

    key: Optional[str]
    priority: Union[str, float, None]
    ref: Any
    size: int

    def exists(self) -> bool: ...

    def val(self) -> Any: ...


DatabaseSnapshotSerializer = Callable[
    [DataSnapshot], Optional[Union[Document, RecordList]]
]


def create_record_from_snapshot(
    snapshot: DataSnapshot,
) -> Optional[Union[Document, RecordList]]:
    """
    Convert a snapshot into a record with metadata fields.

    Args:
        snapshot: Realtime-tree snapshot

    Returns:
        None if nothing exists at the snapshot's location, else a Document
        (or RecordList) carrying ``.key``, ``.priority``, ``.ref`` and ``.size``
    """
    if not snapshot.exists():
        return None

    value = snapshot.val()
    metadata = {
        RECORD_KEY: snapshot.key,
        RECORD_PRIORITY: snapshot.priority,
        RECORD_REF: snapshot.ref,
        RECORD_SIZE: snapshot.size,
    }

    if is_container(value) or isinstance(value, list):
        return decorate(as_record(value), metadata)

    return Document({VALUE_FIELD: value, **metadata})


def index_for_key(records: List[Mapping], key: Union[str, int, None]) -> int:
    """
    Find the position of the record whose ``.key`` is ``key``.

    Args:
        records: Ordered records
        key: Key to look for

    Returns:
        Index of the first match, or -1
    """
    for i, record in enumerate(records):
        if record.get(RECORD_KEY, _MISSING) == key:
            return i
    return -1
