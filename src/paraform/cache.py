"""Explicit geometry memo.

Each slot (typically one per part kind) holds at most one entry, keyed by
the value-hashable tuple of everything its geometry depends on.  A lookup
with a different key rebuilds and discards the superseded entry; a lookup
with an equal key never rebuilds, whatever else has changed.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)


class GeometryCache:

    def __init__(self):
        self._entries: Dict[Hashable, Tuple[Hashable, Any]] = {}
        self.builds: Counter = Counter()

    def get(self, slot: Hashable, key: Hashable, build: Callable[[], Any]) -> Any:
        entry = self._entries.get(slot)
        if entry is not None and entry[0] == key:
            return entry[1]
        logger.debug("building %s for key %r", slot, key)
        value = build()
        self._entries[slot] = (key, value)
        self.builds[slot] += 1
        return value

    def peek(self, slot: Hashable) -> Optional[Any]:
        entry = self._entries.get(slot)
        return entry[1] if entry is not None else None

    def invalidate(self, slot: Optional[Hashable] = None) -> None:
        if slot is None:
            self._entries.clear()
        else:
            self._entries.pop(slot, None)

    def __len__(self) -> int:
        return len(self._entries)


def freeze(value) -> Hashable:
    """Turn nested dicts and lists into a hashable key; floats are kept
    exact so any change of value is a change of key."""
    if isinstance(value, dict):
        return tuple(sorted((k, freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


__all__ = ['GeometryCache', 'freeze']
