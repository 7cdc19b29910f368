"""Triangulation of planar profiles.

We delegate to ``mapbox-earcut`` (the ear clipping implementation used by
Mapbox GL).  This module only normalises loop input into the flat vertex
array and ring-end indices earcut expects, and hands back index triples
into that array so that extrusion can reuse vertex indices for the caps.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import numpy as np

import mapbox_earcut as _earcut

from paraform.geom import epsilon

Point2D = Tuple[float, float]


def triangulate_loops(outer: Sequence[Sequence[float]],
                      holes: Iterable[Sequence[Sequence[float]]] | None = None
                      ) -> Tuple[List[Point2D], List[Tuple[int, int, int]]]:
    """Triangulate ``outer`` minus ``holes``.

    Returns ``(points, triangles)`` where ``points`` is the outer loop
    followed by each hole loop, in input order, and ``triangles`` are index
    triples into ``points``.  Loops are used as given apart from dropping
    repeated points, so callers that need index correspondence must pass
    already-cleaned loops.  Winding of the returned triangles is whatever
    earcut produces; callers orient them against the cap normal.
    """

    if holes is None:
        holes = []

    point_map: List[Point2D] = []
    ring_ends: List[int] = []

    outer_loop = _prepare_loop(outer)
    if len(outer_loop) < 3:
        return [], []
    point_map.extend(outer_loop)
    ring_ends.append(len(point_map))

    for hole in holes:
        loop = _prepare_loop(hole)
        if len(loop) < 3:
            continue
        point_map.extend(loop)
        ring_ends.append(len(point_map))

    vertices = np.asarray(point_map, dtype=np.float64).reshape(-1, 2)
    rings = np.asarray(ring_ends, dtype=np.uint32)
    indices = _earcut.triangulate_float64(vertices, rings)
    triangles = [(int(indices[i]), int(indices[i + 1]), int(indices[i + 2]))
                 for i in range(0, len(indices), 3)]
    return point_map, triangles


def triangulate_polygon(outer: Sequence[Sequence[float]],
                        holes: Iterable[Sequence[Sequence[float]]] | None = None
                        ) -> List[List[Point2D]]:
    """Return triangles covering ``outer`` minus any ``holes`` as lists of
    three ``(x, y)`` pairs."""

    points, triangles = triangulate_loops(outer, holes)
    return [[points[a], points[b], points[c]] for a, b, c in triangles]


def _prepare_loop(points: Sequence[Sequence[float]]) -> List[Point2D]:
    loop: List[Point2D] = []
    for pt in points:
        x, y = float(pt[0]), float(pt[1])
        if loop and _near(loop[-1], (x, y)):
            continue
        loop.append((x, y))
    if len(loop) > 1 and _near(loop[0], loop[-1]):
        loop.pop()
    return loop


def _near(p1: Point2D, p2: Point2D) -> bool:
    return abs(p1[0] - p2[0]) <= epsilon and abs(p1[1] - p2[1]) <= epsilon


__all__ = ['triangulate_loops', 'triangulate_polygon']
