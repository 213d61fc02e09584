"""
Store Value Types
=================

Leaf value types that appear inside store documents:

- ``Timestamp``: a point in time with nanosecond precision
- ``GeoPoint``: a latitude/longitude pair
- ``SnapshotMetadata``: how a document snapshot was produced
- ``DocumentReference``: a handle to another document's location

Timestamps and geo points are opaque: they are copied as a whole and never
walked into. References are the values the extraction walker pulls out of a
document tree.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

_NANOS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class Timestamp:
    """Seconds and nanoseconds since the Unix epoch (UTC)."""

    seconds: int
    nanoseconds: int = 0

    def __post_init__(self):
        if not 0 <= self.nanoseconds < _NANOS_PER_SECOND:
            raise ValueError(
                f"Timestamp nanoseconds out of range: {self.nanoseconds}"
            )

    @classmethod
    def from_datetime(cls, value: datetime) -> "Timestamp":
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - datetime(1970, 1, 1, tzinfo=timezone.utc)
        seconds = delta.days * 86400 + delta.seconds
        return cls(seconds, delta.microseconds * 1000)

    def to_datetime(self) -> datetime:
        base = datetime.fromtimestamp(self.seconds, tz=timezone.utc)
        return base.replace(microsecond=self.nanoseconds // 1000)

    def to_millis(self) -> int:
        return self.seconds * 1000 + self.nanoseconds // 1_000_000


@dataclass(frozen=True)
class GeoPoint:
    """A geographic location."""

    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be in [-90, 90], got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be in [-180, 180], got {self.longitude}"
            )


@dataclass(frozen=True)
class SnapshotMetadata:
    """Metadata about the state of a document snapshot."""

    has_pending_writes: bool = False
    from_cache: bool = False


class DocumentReference:
    """
    Handle to a document location.

    A reference only names its target. The document it points to (its
    resolved value) is fetched and bound elsewhere.

    Attributes:
        path: Slash-separated location of the target document
        converter: Optional adapter used to decode the target's snapshots
    """

    type = "document"

    def __init__(self, path: str, converter: Optional[Any] = None):
        self.path = path
        self.converter = converter

    @property
    def id(self) -> str:
        """Last segment of the path."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    def with_converter(self, converter: Optional[Any]) -> "DocumentReference":
        """Return a reference to the same path that decodes with ``converter``."""
        return DocumentReference(self.path, converter)

    def __eq__(self, other):
        if not isinstance(other, DocumentReference):
            return NotImplemented
        return self.path == other.path and self.converter == other.converter

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        if self.converter is None:
            return f"DocumentReference({self.path!r})"
        return f"DocumentReference({self.path!r}, converter={self.converter!r})"
