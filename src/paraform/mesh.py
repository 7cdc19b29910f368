"""Triangulated views of paraform surfaces and solids."""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence, Tuple

from paraform.geom3d import issolid, issurface
from paraform.geometry_utils import to_vec3, triangle_normal

Vec3 = Tuple[float, float, float]
TriTuple = Tuple[Vec3, Vec3, Vec3, Vec3]


def mesh_view(obj: Sequence) -> Iterator[TriTuple]:
    """Yield triangles for a surface or solid as ``(normal, v0, v1, v2)``.

    Normals are unit face normals taken from the winding.  Vertices are
    ``(x, y, z)`` tuples.  Degenerate (zero-area) faces are skipped.
    """

    surfaces: Iterable[Sequence]
    if issurface(obj):
        surfaces = [obj]
    elif issolid(obj):
        surfaces = obj[1]
    else:
        raise ValueError("mesh_view expects a surface or solid")

    for surf in surfaces:
        verts = surf[1]
        for face in surf[3]:
            if len(face) != 3:
                continue
            v0 = to_vec3(verts[face[0]])
            v1 = to_vec3(verts[face[1]])
            v2 = to_vec3(verts[face[2]])
            normal = triangle_normal(v0, v1, v2)
            if normal is None:
                continue
            yield normal, v0, v1, v2


def triangle_count(obj: Sequence) -> int:
    return sum(1 for _ in mesh_view(obj))
