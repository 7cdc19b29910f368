"""Validation helpers for paraform geometry.

These back the winding and closure properties the builders promise, and
the export-time decision of whether a part is fit to write.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence

from paraform.geom import epsilon, signedAreaXY


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


def profile_winding(profile) -> CheckResult:
    """Outer loop counter-clockwise, every hole clockwise."""

    warnings: List[str] = []
    if signedAreaXY(profile.outer) <= 0:
        warnings.append('outer loop is not counter-clockwise')
    for i, hole in enumerate(profile.holes):
        if signedAreaXY(hole) >= 0:
            warnings.append(f'hole {i} is not clockwise')
    return CheckResult(not warnings, warnings)


def _edge_key(a, b):
    return (a, b) if a < b else (b, a)


def _vkey(p):
    return (round(p[0] / epsilon), round(p[1] / epsilon), round(p[2] / epsilon))


def solid_watertight(sld: Sequence) -> CheckResult:
    """Every edge (matched by vertex position) is used by exactly two
    faces, once in each direction.  The second condition catches faces
    whose winding disagrees with their neighbours."""

    from paraform.geom3d import issolid

    if not issolid(sld):
        raise ValueError('solid_watertight expects a solid')

    undirected: Counter = Counter()
    directed: Counter = Counter()
    for surf in sld[1]:
        verts = surf[1]
        for face in surf[3]:
            keys = [_vkey(verts[i]) for i in face]
            for a, b in ((keys[0], keys[1]), (keys[1], keys[2]), (keys[2], keys[0])):
                if a == b:
                    continue
                undirected[_edge_key(a, b)] += 1
                directed[(a, b)] += 1

    warnings: List[str] = []
    boundary = sum(1 for c in undirected.values() if c == 1)
    invalid = sum(1 for c in undirected.values() if c > 2)
    flipped = sum(1 for c in directed.values() if c > 1)
    if boundary:
        warnings.append(f'{boundary} boundary edges detected')
    if invalid:
        warnings.append(f'{invalid} edges with multiplicity >2')
    if flipped:
        warnings.append(f'{flipped} edges traversed twice in the same direction')
    return CheckResult(not warnings, warnings)


def outward_normals(sld: Sequence) -> CheckResult:
    """Closed solid whose faces wind outward (positive signed volume)."""

    from paraform.geom3d import signedvolumeof

    result = solid_watertight(sld)
    if not result:
        return result
    if signedvolumeof(sld) <= 0:
        return CheckResult(False, ['faces wind inward'])
    return CheckResult(True, [])


__all__ = [
    'CheckResult',
    'profile_winding',
    'solid_watertight',
    'outward_normals',
]
