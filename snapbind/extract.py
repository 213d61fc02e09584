"""
Reference Extraction
====================

Decomposes a document tree into a reference-free data tree and a flat map of
the references it contained, so the references can be resolved independently
and bound back in later.

The walk runs in lock-step with the previous result for the same document
(``old_doc``). Positions that already have an active subscription keep the
value that was bound there last time. All other reference positions get the
reference's path as a placeholder.

Example:
    owner = DocumentReference("/users/1")
    data, refs = extract_refs({"name": "a", "owner": owner})

    data  # Document({"name": "a", "owner": "/users/1"})
    refs  # {"owner": DocumentReference("/users/1", converter=...)}

Subscription keys are built from the traversal path: a reference at
``doc["team"]["lead"]`` has key ``"team.lead"``, the third element of
``doc["tags"]`` has key ``"tags.2"``.

Rules per value (see ``classify``):

- NULL, OPAQUE, SCALAR: copied as-is
- REFERENCE: bound value or path placeholder, and recorded in ``refs``
- ARRAY: walked element-wise into a list of the same length; unset
  positions stay ``HOLE``. Tuples come back as tuples of the same type, a
  ``RecordList`` as a ``RecordList`` with its hidden fields
- CONTAINER: walked field-wise into a fresh nested ``Document``

Hidden fields of every walked container are copied onto its output before
any regular field is written. When ``share_unchanged`` is on, a nested
container whose rebuilt contents match the previous tree is replaced by the
previous tree's node, so unchanged subtrees keep their identity across calls.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import AbstractSet, Any, Dict, Iterable, NamedTuple, Optional, Tuple

from .classify import ValueKind, classify, is_container
from .converter import DefaultDocumentConverter
from .record import (
    HOLE,
    Document,
    HiddenFields,
    RecordList,
    copy_hidden_fields,
    hidden_fields,
)
from .subscriptions import index_by_path
from .values import DocumentReference, Timestamp

_MISSING = object()

# leaf types whose == implies the values are interchangeable
_EXACT_TYPES = (str, int, bool, bytes, Timestamp)


@dataclass
class ExtractOptions:
    """
    Configuration for ``extract_refs``.

    Attributes:
        converter: Converter given to references that lack one. ``None``
            leaves such references unchanged.
        share_unchanged: Reuse the previous tree's nested containers when
            their contents did not change
    """

    converter: Optional[Any] = field(default_factory=DefaultDocumentConverter)
    share_unchanged: bool = True


class ExtractionResult(NamedTuple):
    """Reference-free data tree and the references taken out of it."""

    data: Any
    refs: Dict[str, DocumentReference]


def _field(container: Any, key: Any) -> Any:
    """Value stored at ``key`` in ``container``, or ``_MISSING``."""
    if isinstance(container, (list, tuple)):
        if isinstance(key, int) and 0 <= key < len(container):
            value = container[key]
            return _MISSING if value is HOLE else value
        return _MISSING
    if isinstance(container, Mapping) and key in container:
        return container[key]
    return _MISSING


def _fields(source: Any) -> Iterable[Tuple[Any, Any]]:
    if isinstance(source, (list, tuple)):
        return [(i, v) for i, v in enumerate(source) if v is not HOLE]
    return list(source.items())


def _same_value(new: Any, old: Any) -> bool:
    if new is old:
        return True
    if type(new) is not type(old):
        return False
    if type(new) in _EXACT_TYPES:
        return new == old
    if type(new) is float:
        # 0.0 == -0.0
        return new == old and math.copysign(1.0, new) == math.copysign(1.0, old)
    return False


def _unchanged(fresh: Any, old: Any) -> bool:
    """True when ``old`` can stand in for the freshly built ``fresh``."""
    if type(fresh) is not type(old):
        return False
    if isinstance(fresh, (list, tuple)):
        same_fields = len(fresh) == len(old) and all(
            _same_value(a, b) for a, b in zip(fresh, old)
        )
    else:
        same_fields = list(fresh.keys()) == list(old.keys()) and all(
            _same_value(fresh[key], old[key]) for key in fresh
        )
    return same_fields and hidden_fields(fresh) == hidden_fields(old)


def _rebuild_tuple(items: tuple, values: list) -> tuple:
    """A tuple of the same type as ``items`` holding ``values``."""
    make = getattr(type(items), "_make", None)
    if make is not None:
        return make(values)
    return tuple(values)


class _RefWalker:
    """
    One extraction pass.

    Holds the inputs shared by every recursion level and the flat ``refs``
    map being collected. Each call to ``walk`` fills exactly one output node.
    """

    def __init__(self, subscriptions: Mapping[str, Any], options: ExtractOptions):
        self.subscriptions = subscriptions
        self.options = options
        self.by_path = index_by_path(subscriptions)
        self.refs: Dict[str, DocumentReference] = {}

    def walk(
        self,
        source: Any,
        old: Any,
        path: str,
        target: Any,
        locked: AbstractSet[int] = frozenset(),
    ) -> None:
        """
        Fill ``target`` from ``source``.

        Args:
            source: Container or list being decomposed
            old: Previous output at the same position (any shape, may be missing)
            path: Subscription key prefix for this level
            target: Output node to fill (Document or pre-sized list)
            locked: List indices already holding a resolved value
        """
        if isinstance(target, HiddenFields):
            copy_hidden_fields(source, target)

        for key, value in _fields(source):
            kind = classify(value)
            if kind is ValueKind.REFERENCE:
                self._extract_reference(key, value, old, path, target, key in locked)
            elif kind is ValueKind.ARRAY:
                target[key] = self._extract_array(
                    value, _field(old, key), f"{path}{key}."
                )
            elif kind is ValueKind.CONTAINER:
                old_value = _field(old, key)
                nested = Document()
                self.walk(value, old_value, f"{path}{key}.", nested)
                target[key] = self._share(nested, old_value)
            else:
                target[key] = value

    def _extract_reference(
        self,
        key: Any,
        ref: DocumentReference,
        old: Any,
        path: str,
        target: Any,
        locked: bool,
    ) -> None:
        sub_key = f"{path}{key}"
        if not locked:
            if sub_key in self.subscriptions:
                # already bound: keep what was bound last time
                value = _field(old, key)
                if value is _MISSING:
                    value = self.subscriptions[sub_key].data()
            else:
                value = ref.path
            target[key] = value
        self.refs[sub_key] = self._with_default_converter(ref)

    def _extract_array(self, items: Any, old_value: Any, path: str) -> Any:
        out = [HOLE] * len(items)
        if isinstance(items, RecordList):
            out = RecordList(out)
        locked = set()
        for index, item in enumerate(items):
            if classify(item) is ValueKind.REFERENCE and item.path in self.by_path:
                out[index] = self.by_path[item.path]
                locked.add(index)

        # without a previous list the partially filled output is the scaffold
        scaffold = old_value if isinstance(old_value, (list, tuple)) else out
        self.walk(items, scaffold, path, out, locked)
        if isinstance(items, tuple):
            return self._share(_rebuild_tuple(items, out), old_value)
        return self._share(out, old_value)

    def _share(self, fresh: Any, old: Any) -> Any:
        if self.options.share_unchanged and _unchanged(fresh, old):
            return old
        return fresh

    def _with_default_converter(self, ref: DocumentReference) -> DocumentReference:
        if ref.converter is not None or self.options.converter is None:
            return ref
        return ref.with_converter(self.options.converter)


def extract_refs(
    doc: Any,
    old_doc: Any = None,
    subscriptions: Optional[Mapping[str, Any]] = None,
    options: Optional[ExtractOptions] = None,
) -> ExtractionResult:
    """
    Split ``doc`` into reference-free data and a map of its references.

    Args:
        doc: Document to decompose. Anything that is not a mapping is
            returned unchanged with no references.
        old_doc: Previous ``data`` produced for the same document, if any
        subscriptions: Active subscriptions, keyed by subscription key.
            Each entry exposes ``path`` and ``data()``.
        options: Extraction configuration (defaults to ``ExtractOptions()``)

    Returns:
        ExtractionResult(data, refs). ``refs`` maps subscription key to the
        reference found there, carrying a converter.

    Neither ``doc``, ``old_doc`` nor ``subscriptions`` is modified.
    """
    if not is_container(doc):
        logging.debug(f"extract_refs: passing through {type(doc).__name__} value")
        return ExtractionResult(doc, {})

    walker = _RefWalker(
        subscriptions if subscriptions is not None else {},
        options if options is not None else ExtractOptions(),
    )
    data = Document()
    walker.walk(doc, old_doc, "", data)
    return ExtractionResult(data, walker.refs)
