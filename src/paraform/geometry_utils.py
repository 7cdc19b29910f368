"""Triangle helpers shared by the exporters and validators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from paraform.geom import cross, epsilon, mag

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle representation in XYZ space."""

    normal: Vec3
    v0: Vec3
    v1: Vec3
    v2: Vec3


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point/vector as a tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def triangle_normal(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    ax, ay, az = v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2]
    bx, by, bz = v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2]
    n = cross([ax, ay, az, 1.0], [bx, by, bz, 1.0])
    length = mag(n)
    if length <= epsilon * epsilon:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


def triangle_area(v0: Vec3, v1: Vec3, v2: Vec3) -> float:
    ax, ay, az = v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2]
    bx, by, bz = v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2]
    return 0.5 * mag(cross([ax, ay, az, 1.0], [bx, by, bz, 1.0]))


def transform_vec3(v: Vec3, rows: Sequence[Sequence[float]], translate: bool = True) -> Vec3:
    """Apply the 4x4 row-major matrix ``rows`` to ``v``.  With
    ``translate=False`` only the linear part is applied."""

    w = 1.0 if translate else 0.0
    return (rows[0][0] * v[0] + rows[0][1] * v[1] + rows[0][2] * v[2] + rows[0][3] * w,
            rows[1][0] * v[0] + rows[1][1] * v[1] + rows[1][2] * v[2] + rows[1][3] * w,
            rows[2][0] * v[0] + rows[2][1] * v[1] + rows[2][2] * v[2] + rows[2][3] * w)


def triangles_from_mesh(mesh: Iterable[Tuple[Vec3, Vec3, Vec3, Vec3]]) -> Iterable[Triangle]:
    """Convert ``mesh_view`` output into ``Triangle`` instances."""

    for normal, v0, v1, v2 in mesh:
        yield Triangle(normal=normal, v0=v0, v1=v1, v2=v2)


__all__ = [
    "Triangle",
    "Vec3",
    "to_vec3",
    "triangle_normal",
    "triangle_area",
    "transform_vec3",
    "triangles_from_mesh",
]
