"""Parts, per-part overrides and selection.

A shape family's output is a flat, ordered list of :class:`Part` records.
Each part has a kind drawn from the family's own ``Enum`` (the closed set
of things that family builds) and an independent override record.
Geometry is built once per kind and shared, so some override fields
(the bevel ones) must stay equal across all parts of a kind; those are
listed in ``shared_fields`` and :meth:`PartSet.update_overrides`
propagates them.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartOverrides:
    scale_x: float = 1.0
    scale_y: float = 1.0
    scale_z: float = 1.0
    bevel_radius: float = 0.0
    bevel_segments: int = 1

    def replace(self, **partial) -> "PartOverrides":
        unknown = set(partial) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ValueError(f'unknown override fields: {sorted(unknown)}')
        if 'bevel_segments' in partial:
            partial['bevel_segments'] = max(1, int(round(partial['bevel_segments'])))
        return dataclasses.replace(self, **partial)

    @property
    def scale(self) -> Tuple[float, float, float]:
        return (self.scale_x, self.scale_y, self.scale_z)

    def as_dict(self) -> Dict[str, float]:
        return dataclasses.asdict(self)


BEVEL_FIELDS: FrozenSet[str] = frozenset({'bevel_radius', 'bevel_segments'})


@dataclass(frozen=True)
class Part:
    id: str
    kind: Enum
    index: int = 0
    overrides: PartOverrides = field(default_factory=PartOverrides)


class PartSet:
    """Ordered parts plus the current selection."""

    def __init__(self, parts: Iterable[Part] = (),
                 shared_fields: Iterable[str] = BEVEL_FIELDS):
        self.shared_fields = frozenset(shared_fields)
        self._parts: List[Part] = []
        self._selected: FrozenSet[str] = frozenset()
        self.reset(parts)

    def __iter__(self) -> Iterator[Part]:
        return iter(self._parts)

    def __len__(self) -> int:
        return len(self._parts)

    def __contains__(self, part_id: object) -> bool:
        return any(p.id == part_id for p in self._parts)

    def ids(self) -> List[str]:
        return [p.id for p in self._parts]

    def get(self, part_id: str) -> Optional[Part]:
        for p in self._parts:
            if p.id == part_id:
                return p
        return None

    def of_kind(self, kind: Enum) -> List[Part]:
        return [p for p in self._parts if p.kind is kind]

    def has_kind(self, kind: Enum) -> bool:
        return any(p.kind is kind for p in self._parts)

    def overrides(self, part_id: str) -> Optional[PartOverrides]:
        p = self.get(part_id)
        return p.overrides if p is not None else None

    def all_overrides(self) -> Dict[str, PartOverrides]:
        return {p.id: p.overrides for p in self._parts}

    def kind_overrides(self, kind: Enum, default: PartOverrides) -> PartOverrides:
        """Overrides of the first part of ``kind``; shared fields are
        equal across the kind, so this is where shared geometry reads
        them from."""
        parts = self.of_kind(kind)
        return parts[0].overrides if parts else default

    # selection

    @property
    def selected(self) -> FrozenSet[str]:
        return self._selected

    def select(self, part_id: str, multi: bool = False) -> FrozenSet[str]:
        """Click semantics: with ``multi`` toggle membership; otherwise a
        click on the sole selected part clears the selection and any
        other click selects only ``part_id``.  Unknown ids are ignored."""
        if part_id not in self:
            logger.debug("ignoring selection of unknown part %r", part_id)
            return self._selected
        if multi:
            self._selected = self._selected ^ {part_id}
        elif self._selected == {part_id}:
            self._selected = frozenset()
        else:
            self._selected = frozenset({part_id})
        return self._selected

    def clear_selection(self) -> None:
        self._selected = frozenset()

    # mutation

    def reset(self, parts: Iterable[Part]) -> None:
        parts = list(parts)
        ids = [p.id for p in parts]
        if len(set(ids)) != len(ids):
            raise ValueError('duplicate part ids')
        self._parts = parts
        self._selected = frozenset()

    def delete(self, ids: Iterable[str]) -> List[str]:
        ids = set(ids)
        removed = [p.id for p in self._parts if p.id in ids]
        self._parts = [p for p in self._parts if p.id not in ids]
        self._selected = self._selected - ids
        return removed

    def delete_selected(self) -> List[str]:
        if not self._selected:
            return []
        return self.delete(self._selected)

    def update_overrides(self, ids: Iterable[str], **partial) -> None:
        """Apply ``partial`` to the parts in ``ids``.  Fields in
        ``shared_fields`` are also applied to every other part of the
        same kind as an updated part."""
        ids = set(ids)
        shared = {k: v for k, v in partial.items() if k in self.shared_fields}
        kinds = {p.kind for p in self._parts if p.id in ids} if shared else set()
        updated = []
        for p in self._parts:
            if p.id in ids:
                p = dataclasses.replace(p, overrides=p.overrides.replace(**partial))
            elif p.kind in kinds:
                p = dataclasses.replace(p, overrides=p.overrides.replace(**shared))
            updated.append(p)
        self._parts = updated


__all__ = ['PartOverrides', 'Part', 'PartSet', 'BEVEL_FIELDS']
