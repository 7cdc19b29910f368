"""Sequential CSG evaluation with a best-effort failure policy.

An evaluation starts from one operand and folds a list of
``(brush, operation)`` steps into it; step N's output is step N+1's left
operand.  Each step hands two world-space solids to the configured
boolean engine and receives a newly built solid; nothing is mutated in
place.

Interactive callers must always get something they can draw, so by
default a failed evaluation is logged and replaced by a box covering the
operands.  Callers with a different policy (the infill generator returns
no geometry at all) pass ``fallback=False`` and catch :class:`CSGError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from paraform.errors import CSGError
from paraform.geom import point, vstr
from paraform.geom3d import (
    boxsolid,
    computeVertexNormals,
    isemptysolid,
    isfinitesolid,
    issolid,
    mergesurfaces,
    solid_boolean,
    solidbbox,
    transformsolid,
)
from paraform.xform import Matrix

logger = logging.getLogger(__name__)


class Operation(Enum):
    ADDITION = 'union'
    SUBTRACTION = 'difference'
    INTERSECTION = 'intersection'


@dataclass
class Brush:
    """A CSG operand: a solid in its local frame plus the transform that
    places it in world space."""

    solid: list
    transform: Optional[Matrix] = None

    def world(self) -> list:
        if self.transform is None:
            return self.solid
        return transformsolid(self.solid, self.transform)


Step = Tuple[Any, Operation]


def _brush(x) -> Brush:
    if isinstance(x, Brush):
        return x
    if issolid(x):
        return Brush(x)
    raise ValueError(f'bad CSG operand: {type(x).__name__}')


def finalize(sld: list) -> list:
    """Collapse the surfaces of ``sld`` into one, drop any metadata and
    recompute vertex normals from the final faces."""
    surf = computeVertexNormals(mergesurfaces(sld[1]))
    surfs = [surf] if surf[3] else []
    return ['solid', surfs, list(sld[2]), list(sld[3])]


def _bbox_union(boxes):
    lo = [min(b[0][i] for b in boxes) for i in range(3)]
    hi = [max(b[1][i] for b in boxes) for i in range(3)]
    return [point(*lo), point(*hi)]


def fallback_solid(operands: Iterable[list]) -> list:
    """Box covering the finite, non-empty ``operands``; a unit cube at
    the origin when there are none."""
    boxes = []
    for sld in operands:
        if issolid(sld) and not isemptysolid(sld) and isfinitesolid(sld):
            boxes.append(solidbbox(sld))
    if not boxes:
        return boxsolid([point(-0.5, -0.5, -0.5), point(0.5, 0.5, 0.5)],
                        ['procedure', 'csg.fallback(unit)'])
    box = _bbox_union(boxes)
    return boxsolid(box, ['procedure', 'csg.fallback({}, {})'.format(vstr(box[0]), vstr(box[1]))])


class Evaluator:
    """Runs CSG step lists against one boolean engine.

    ``engine`` is an ``engine`` or ``engine:backend`` string; ``None``
    uses ``PARAFORM_BOOLEAN_ENGINE``.
    """

    def __init__(self, engine: Optional[str] = None):
        self.engine = engine

    def combine(self, a, b, op: Operation, *, fallback: bool = True,
                context: Optional[Mapping[str, Any]] = None) -> list:
        return self.evaluate(a, [(b, op)], fallback=fallback, context=context)

    def evaluate(self, first, steps: Sequence[Step], *, fallback: bool = True,
                 context: Optional[Mapping[str, Any]] = None) -> list:
        """Fold ``steps`` into ``first`` and return the finalised solid.

        ``context`` (typically the parameter snapshot of the calling
        builder) is included in the warning logged on failure.
        """
        worlds: List[list] = []
        step = 0
        op: Optional[Operation] = None
        try:
            result = _brush(first).world()
            worlds.append(result)
            if not isfinitesolid(result):
                raise ValueError('non-finite vertices in first operand')
            for step, (operand, op) in enumerate(steps, start=1):
                if not isinstance(op, Operation):
                    raise ValueError(f'bad CSG operation {op!r}')
                other = _brush(operand).world()
                worlds.append(other)
                if not isfinitesolid(other):
                    raise ValueError(f'non-finite vertices in operand {step}')
                result = solid_boolean(result, other, op.value, engine=self.engine)
                if isemptysolid(result):
                    raise ValueError(f'{op.name} produced an empty solid')
            return finalize(result)
        except Exception as exc:
            opname = op.name if op is not None else None
            boxes = []
            for w in worlds:
                try:
                    boxes.append([vstr(p) for p in solidbbox(w)])
                except Exception:
                    boxes.append(None)
            logger.warning("CSG evaluation failed at step %d (%s): %s; operand bboxes=%s; context=%s",
                           step, opname, exc, boxes, dict(context or {}))
            if not fallback:
                raise CSGError(f'CSG evaluation failed at step {step}: {exc}',
                               step=step, operation=opname) from exc
            return fallback_solid(worlds)


def union_all(solids: Sequence, *, evaluator: Optional[Evaluator] = None, **kwargs) -> list:
    """Union a non-empty sequence of operands left to right."""
    if not solids:
        raise ValueError('union_all needs at least one operand')
    evaluator = evaluator or Evaluator()
    return evaluator.evaluate(solids[0], [(s, Operation.ADDITION) for s in solids[1:]], **kwargs)


__all__ = ['Operation', 'Brush', 'Evaluator', 'finalize', 'fallback_solid', 'union_all']
