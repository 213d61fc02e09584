"""
Subscription Registry Helpers
=============================

The binder that resolves references keeps a registry of active
subscriptions, keyed by *subscription key* (the position of a reference in
its owning document). Each entry knows the *path* of the document it targets
and can return the last value resolved for it.

``index_by_path()`` turns that registry into a lookup by target path, which
is what the extraction walker needs to fill array slots whose references
already point at a resolved document.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional


@dataclass
class SubscriptionEntry:
    """
    One active subscription in the binder's registry.

    Attributes:
        path: Location of the referenced document
        data: Zero-argument callable returning the last resolved value (or None)
    """

    path: str
    data: Callable[[], Optional[Any]]


def index_by_path(subscriptions: Mapping[str, Any]) -> Dict[str, Optional[Any]]:
    """
    Map each subscription's target path to its currently resolved value.

    ``data()`` is called exactly once per entry, in registry order. When two
    entries target the same path the later one wins.

    Args:
        subscriptions: Mapping of subscription key -> entry with ``path`` and ``data()``

    Returns:
        Dict of path -> resolved value
    """
    by_path: Dict[str, Optional[Any]] = {}
    for sub_key, sub in subscriptions.items():
        value = sub.data()
        if sub.path in by_path and by_path[sub.path] is not value:
            logging.debug(
                f"Subscription '{sub_key}' shadows another subscription to '{sub.path}'"
            )
        by_path[sub.path] = value
    return by_path
