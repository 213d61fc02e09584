"""
Document Records - Mappings with Hidden Metadata Fields
=======================================================

This module provides the data model shared by every part of snapbind: a
``Document`` is an insertion-ordered ``dict`` of store fields plus a small
side-channel of *hidden* fields that carry read-only metadata such as the
record key or the snapshot it came from.

Hidden fields behave like non-enumerable properties:

- They never show up when iterating, in ``keys()``/``items()``, in ``len()``
  or in equality checks, so generic field-by-field code never sees them.
- Direct access (``doc[".key"]`` or ``doc.get(".key")``) does find them.
- They are read-only once defined.

Usage:
    doc = Document(name="ada")
    doc.define_hidden(".key", "ada")

    list(doc)        # ["name"]
    doc[".key"]      # "ada"

Arrays are plain lists. An index that has not been filled holds the ``HOLE``
sentinel, which keeps positions aligned without pretending the slot is
``None``. A store node that decodes to a sequence becomes a ``RecordList``,
which carries hidden fields the same way a ``Document`` does.
"""

from typing import Any, Dict, Mapping

# ============================================================================
# EXCEPTIONS
# ============================================================================


class ReadOnlyFieldError(TypeError):
    """Raised when a hidden metadata field is written, redefined or deleted."""

    pass


# ============================================================================
# SENTINELS
# ============================================================================


class _HOLE:
    """Sentinel for an unset array index."""

    def __repr__(self):
        return "HOLE"

    def __bool__(self):
        return False


HOLE = _HOLE()


_MISSING = object()


# ============================================================================
# HIDDEN FIELDS
# ============================================================================


class HiddenFields:
    """
    Read-only hidden field side-channel shared by Document and RecordList.

    Subclasses call ``_init_hidden()`` from ``__init__`` and implement
    ``_claims_field()`` for names that are already taken by regular fields.
    """

    def _init_hidden(self) -> None:
        self._hidden: Dict[str, Any] = {}

    def _claims_field(self, name: str) -> bool:
        return False

    def define_hidden(self, name: str, value: Any) -> None:
        """
        Attach a read-only hidden field.

        Args:
            name: Field name, usually dot-prefixed (e.g. ``".key"``)
            value: Field value

        Raises:
            ReadOnlyFieldError: If ``name`` is already a hidden or regular field
        """
        if name in self._hidden:
            raise ReadOnlyFieldError(f"Hidden field '{name}' is already defined")
        if self._claims_field(name):
            raise ReadOnlyFieldError(
                f"Cannot hide '{name}': it is already a regular field"
            )
        self._hidden[name] = value

    def has_hidden(self, name: str) -> bool:
        """Check whether ``name`` is a hidden field."""
        return name in self._hidden

    def hidden_fields(self) -> Dict[str, Any]:
        """Return a copy of the hidden fields, in definition order."""
        return dict(self._hidden)

    def _plain(self) -> Any:
        raise NotImplementedError

    def __reduce__(self):
        # regular contents go through __init__, hidden fields through state
        return (self.__class__, (self._plain(),), {"_hidden": dict(self._hidden)})


# ============================================================================
# DOCUMENT
# ============================================================================


class Document(HiddenFields, dict):
    """
    A store document: regular fields plus read-only hidden fields.

    Regular fields use the normal ``dict`` API. Hidden fields are attached
    with ``define_hidden()`` and are only reachable through direct lookup.
    A name can be either a regular field or a hidden field, never both.
    """

    def __init__(self, *args, **kwargs):
        dict.__init__(self, *args, **kwargs)
        self._init_hidden()

    def _claims_field(self, name: str) -> bool:
        return dict.__contains__(self, name)

    def _plain(self) -> dict:
        return dict(self)

    def __getitem__(self, key):
        try:
            return dict.__getitem__(self, key)
        except KeyError:
            if key in self._hidden:
                return self._hidden[key]
            raise

    def __setitem__(self, key, value):
        if key in self._hidden:
            raise ReadOnlyFieldError(f"Field '{key}' is read-only metadata")
        dict.__setitem__(self, key, value)

    def __delitem__(self, key):
        if key in self._hidden:
            raise ReadOnlyFieldError(f"Field '{key}' is read-only metadata")
        dict.__delitem__(self, key)

    def get(self, key, default=None):
        value = dict.get(self, key, _MISSING)
        if value is _MISSING:
            return self._hidden.get(key, default)
        return value

    def setdefault(self, key, default=None):
        if key in self._hidden:
            return self._hidden[key]
        return dict.setdefault(self, key, default)

    def update(self, *args, **kwargs):
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def __repr__(self):
        if not self._hidden:
            return f"Document({dict.__repr__(self)})"
        return f"Document({dict.__repr__(self)}, hidden={self._hidden!r})"


class RecordList(HiddenFields, list):
    """
    A store node whose children decode to a sequence.

    Behaves like a list. Hidden fields are reached with string lookups
    (``items[".key"]`` or ``items.get(".key")``); integer indices and
    slices are ordinary list access.
    """

    def __init__(self, *args):
        list.__init__(self, *args)
        self._init_hidden()

    def _plain(self) -> list:
        return list(self)

    def __getitem__(self, index):
        if isinstance(index, str):
            try:
                return self._hidden[index]
            except KeyError:
                raise KeyError(index) from None
        return list.__getitem__(self, index)

    def get(self, name: str, default=None):
        return self._hidden.get(name, default)

    def __repr__(self):
        if not self._hidden:
            return f"RecordList({list.__repr__(self)})"
        return f"RecordList({list.__repr__(self)}, hidden={self._hidden!r})"


def hidden_fields(value: Any) -> Dict[str, Any]:
    """Hidden fields of ``value``, or an empty dict for plain values."""
    if isinstance(value, HiddenFields):
        return value.hidden_fields()
    return {}


def copy_hidden_fields(source: Any, target: HiddenFields) -> None:
    """Copy every hidden field of ``source`` onto ``target`` verbatim."""
    for name, value in hidden_fields(source).items():
        target.define_hidden(name, value)


def as_document(value: Mapping) -> Document:
    """
    Return ``value`` if it already is a Document, else a Document copy of it.

    Plain mappings cannot carry hidden fields, so decorating one requires a
    Document with the same fields.
    """
    if isinstance(value, Document):
        return value
    return Document(value)


def as_record(value: Any) -> HiddenFields:
    """Like ``as_document``, but lists become a RecordList."""
    if isinstance(value, HiddenFields):
        return value
    if isinstance(value, list):
        return RecordList(value)
    return Document(value)


def decorate(record: HiddenFields, fields: Dict[str, Any]) -> HiddenFields:
    """
    Attach ``fields`` to ``record`` as hidden fields.

    The record is decorated in place unless one of the names is already taken
    on it (for instance when a cached snapshot hands out the same record
    twice). In that case a copy is decorated instead, keeping the record's
    other hidden fields and dropping regular fields with those names.

    Returns:
        The decorated record
    """
    if any(
        record.has_hidden(name) or record._claims_field(name) for name in fields
    ):
        if isinstance(record, Document):
            fresh: HiddenFields = Document(
                (key, value) for key, value in record.items() if key not in fields
            )
        else:
            fresh = type(record)(record)
        for name, value in record.hidden_fields().items():
            if name not in fields:
                fresh.define_hidden(name, value)
        record = fresh

    for name, value in fields.items():
        record.define_hidden(name, value)
    return record
