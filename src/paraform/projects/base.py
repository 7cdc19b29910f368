"""Common machinery for shape families.

A family subclasses :class:`ProjectModel` and supplies its parameter
schema, its part kinds, how to build one solid per kind, and where each
part goes.  The base class owns the parameter map, the part list, the
per-kind geometry cache and the failure policy: a kind whose build
raises, or yields non-finite or empty geometry, is replaced by a box
covering its nominal bounds and a warning with the parameter snapshot is
logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, Hashable, List, Mapping, Optional, Sequence, Tuple

from paraform.cache import GeometryCache, freeze
from paraform.csg import Evaluator
from paraform.geom import point
from paraform.geom3d import (
    bboxsize,
    boxsolid,
    isemptysolid,
    isfinitesolid,
    solidbbox,
    transformsolid,
)
from paraform.params import ParamSchema
from paraform.parts import Part, PartOverrides, PartSet
from paraform.xform import Matrix, Scale, Translation, compose

logger = logging.getLogger(__name__)


@dataclass
class AssemblyPart:
    id: str
    kind: Enum
    solid: list


@dataclass
class Assembly:
    """World-space solids of every present part, in part order."""

    project: str
    parts: List[AssemblyPart] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.parts)

    def ids(self) -> List[str]:
        return [p.id for p in self.parts]

    def solids(self) -> List[list]:
        return [p.solid for p in self.parts]

    def get(self, part_id: str) -> Optional[AssemblyPart]:
        for p in self.parts:
            if p.id == part_id:
                return p
        return None

    def bbox(self):
        boxes = [solidbbox(p.solid) for p in self.parts if not isemptysolid(p.solid)]
        if not boxes:
            return []
        return [point(*[min(b[0][i] for b in boxes) for i in range(3)]),
                point(*[max(b[1][i] for b in boxes) for i in range(3)])]


class ProjectModel:
    """Base class of the shape families."""

    project_id: ClassVar[str] = ''
    schema: ClassVar[ParamSchema]
    #: parameters whose change regenerates the part list
    cardinality_keys: ClassVar[FrozenSet[str]] = frozenset()
    #: parameters each kind's geometry depends on
    dependencies: ClassVar[Mapping[Enum, Tuple[str, ...]]] = {}
    default_overrides: ClassVar[PartOverrides] = PartOverrides()

    def __init__(self, params: Optional[Mapping[str, float]] = None,
                 evaluator: Optional[Evaluator] = None):
        self.params: Dict[str, float] = self.schema.normalize(params)
        self.evaluator = evaluator or Evaluator()
        self.cache = GeometryCache()
        self.parts = PartSet(self.make_parts())

    # family hooks

    def make_parts(self) -> List[Part]:
        raise NotImplementedError

    def build_kind(self, kind: Enum, overrides: PartOverrides) -> Optional[list]:
        """Solid for ``kind`` in its part frame, or ``None`` for no
        geometry."""
        raise NotImplementedError

    def nominal_bounds(self, kind: Enum):
        """Bounding box used for the placeholder when ``kind`` fails."""
        raise NotImplementedError

    def placement(self, part: Part) -> Optional[Matrix]:
        return None

    def model_offset(self) -> Tuple[float, float, float]:
        return (0.0, 0.0, 0.0)

    # parameters

    def set_params(self, **updates: float) -> FrozenSet[str]:
        """Apply parameter updates; returns the keys whose value changed.
        A change to a cardinality key rebuilds the part list, which also
        clears the selection; any other change leaves the parts alone."""
        new = self.schema.normalize(updates, base=self.params)
        changed = frozenset(k for k in new if new[k] != self.params.get(k))
        self.params = new
        if changed & self.cardinality_keys:
            logger.debug("%s: %s changed, regenerating parts",
                         self.project_id, sorted(changed & self.cardinality_keys))
            self.parts.reset(self.make_parts())
        return changed

    # geometry

    def part(self, part_id: str) -> Part:
        part = self.parts.get(part_id)
        if part is None:
            raise KeyError(f'no part {part_id!r} in {self.project_id}')
        return part

    def kind_overrides(self, kind: Enum) -> PartOverrides:
        return self.parts.kind_overrides(kind, self.default_overrides)

    def geometry_key(self, kind: Enum) -> Hashable:
        keys = self.dependencies.get(kind, tuple(self.schema.keys()))
        ov = self.kind_overrides(kind)
        return (freeze([self.params[k] for k in keys]),
                ov.bevel_radius, ov.bevel_segments)

    def kind_geometry(self, kind: Enum) -> Optional[list]:
        return self.cache.get(kind, self.geometry_key(kind), lambda: self._build_guarded(kind))

    def part_geometry(self, part_id: str) -> Optional[list]:
        """Shared, unscaled geometry of a part in its own frame."""
        return self.kind_geometry(self.part(part_id).kind)

    def base_dimensions(self, part_id: str) -> Optional[Tuple[float, float, float]]:
        sld = self.part_geometry(part_id)
        if sld is None or isemptysolid(sld):
            return None
        return bboxsize(solidbbox(sld))

    def _build_guarded(self, kind: Enum) -> Optional[list]:
        ov = self.kind_overrides(kind)
        try:
            sld = self.build_kind(kind, ov)
            if sld is None:
                return None
            if not isfinitesolid(sld):
                raise ValueError('non-finite vertices')
            if isemptysolid(sld):
                raise ValueError('empty solid')
            return sld
        except Exception as exc:
            logger.warning("%s: building %s failed (%s); substituting bounding box; params=%s",
                           self.project_id, kind.name, exc, dict(self.params))
            return boxsolid(self.nominal_bounds(kind),
                            ['procedure', f'{self.project_id}.fallback({kind.name})'])

    def world_transform(self, part: Part) -> Matrix:
        """Override scale in the part frame, then the part placement,
        then the model offset."""
        return compose(Translation(list(self.model_offset())),
                       self.placement(part),
                       Scale(*part.overrides.scale))

    def assemble(self) -> Assembly:
        assembly = Assembly(self.project_id)
        for part in self.parts:
            sld = self.kind_geometry(part.kind)
            if sld is None:
                continue
            assembly.parts.append(
                AssemblyPart(part.id, part.kind, transformsolid(sld, self.world_transform(part))))
        return assembly

    # selection and overrides

    @property
    def selected(self) -> FrozenSet[str]:
        return self.parts.selected

    def select(self, part_id: str, multi: bool = False) -> FrozenSet[str]:
        return self.parts.select(part_id, multi)

    def clear_selection(self) -> None:
        self.parts.clear_selection()

    def delete_selected(self) -> List[str]:
        return self.parts.delete_selected()

    def delete(self, ids: Sequence[str]) -> List[str]:
        return self.parts.delete(ids)

    def update_overrides(self, ids, **partial) -> None:
        self.parts.update_overrides(ids, **partial)


__all__ = ['Assembly', 'AssemblyPart', 'ProjectModel']
