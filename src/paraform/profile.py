"""Planar profiles: an outer boundary plus holes.

A :class:`Profile` is the cross-section handed to
:func:`paraform.geom3d_util.extrude`.  Construction normalises the
loops so that downstream code can rely on the winding convention (outer
counter-clockwise, holes clockwise) without re-checking it.  Geometric
validity (finite coordinates, simple outer loop, contained holes) is only
checked by :meth:`Profile.validate`, because builders driven by sliders
produce degenerate profiles routinely and the caller decides what to do
about them.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence

from paraform.errors import ProfileError
from paraform.geom import (
    epsilon,
    isInsidePolyXY,
    isSimplePolyXY,
    point,
    signedAreaXY,
)

Loop = List[list]


def _clean_loop(points: Iterable[Sequence[float]]) -> Loop:
    loop: Loop = []
    for pt in points:
        p = point(float(pt[0]), float(pt[1]))
        if loop and abs(loop[-1][0] - p[0]) <= epsilon and abs(loop[-1][1] - p[1]) <= epsilon:
            continue
        loop.append(p)
    if len(loop) > 1 and abs(loop[0][0] - loop[-1][0]) <= epsilon \
            and abs(loop[0][1] - loop[-1][1]) <= epsilon:
        loop.pop()
    return loop


def _oriented(loop: Loop, *, ccw: bool) -> Loop:
    if len(loop) < 3:
        return loop
    area = signedAreaXY(loop)
    if (ccw and area < 0) or (not ccw and area > 0):
        loop = list(reversed(loop))
    return loop


def _loop_bbox(loop: Loop):
    xs = [p[0] for p in loop]
    ys = [p[1] for p in loop]
    return min(xs), min(ys), max(xs), max(ys)


class Profile:
    """Outer loop (CCW) with zero or more hole loops (CW)."""

    def __init__(self, outer: Iterable[Sequence[float]],
                 holes: Iterable[Iterable[Sequence[float]]] = ()):
        self.outer: Loop = _oriented(_clean_loop(outer), ccw=True)
        self.holes: List[Loop] = [_oriented(_clean_loop(h), ccw=False) for h in holes]

    def __repr__(self) -> str:
        return f"Profile(outer={len(self.outer)} pts, holes={len(self.holes)})"

    def loops(self) -> List[Loop]:
        return [self.outer] + self.holes

    def bbox(self):
        """Return ``[(xmin, ymin), (xmax, ymax)]`` of the outer loop."""
        if not self.outer:
            raise ValueError('empty profile has no bounding box')
        x0, y0, x1, y1 = _loop_bbox(self.outer)
        return [(x0, y0), (x1, y1)]

    def area(self) -> float:
        return signedAreaXY(self.outer) + sum(signedAreaXY(h) for h in self.holes)

    def translated(self, dx: float, dy: float) -> "Profile":
        shift = lambda loop: [[p[0] + dx, p[1] + dy] for p in loop]
        return Profile(shift(self.outer), [shift(h) for h in self.holes])

    def validate(self) -> "Profile":
        """Raise :class:`ProfileError` unless the profile can be extruded.

        Returns ``self`` so builders can write ``return Profile(...).validate()``.
        """
        for loop in self.loops():
            for p in loop:
                if not (math.isfinite(p[0]) and math.isfinite(p[1])):
                    raise ProfileError('non-finite coordinate in profile')
        if len(self.outer) < 3 or abs(signedAreaXY(self.outer)) < epsilon:
            raise ProfileError('degenerate outer loop')
        if not isSimplePolyXY(self.outer):
            raise ProfileError('outer loop is self-intersecting')

        boxes = []
        for i, hole in enumerate(self.holes):
            if len(hole) < 3 or abs(signedAreaXY(hole)) < epsilon:
                raise ProfileError(f'degenerate hole {i}')
            for p in hole:
                if not isInsidePolyXY(self.outer, p):
                    raise ProfileError(f'hole {i} escapes the outer loop')
            boxes.append((_loop_bbox(hole), i))

        # sweep on xmin so only holes with overlapping boxes are compared
        boxes.sort(key=lambda b: b[0][0])
        for a in range(len(boxes)):
            (ax0, ay0, ax1, ay1), ia = boxes[a]
            for b in range(a + 1, len(boxes)):
                (bx0, by0, bx1, by1), ib = boxes[b]
                if bx0 > ax1:
                    break
                if by0 > ay1 or by1 < ay0:
                    continue
                ha, hb = self.holes[ia], self.holes[ib]
                if any(isInsidePolyXY(ha, p) for p in hb) or \
                        any(isInsidePolyXY(hb, p) for p in ha):
                    raise ProfileError(f'holes {ia} and {ib} overlap')
        return self


__all__ = ['Profile', 'Loop']
