"""Trimesh-backed boolean engine for paraform solids.

Solids are converted to ``trimesh.Trimesh`` instances, combined with
:mod:`trimesh.boolean` and converted back.  The default backend is
``manifold`` (the ``manifold3d`` package), which needs each operand to be a
single closed manifold.  Operands built by plain geometry merges, such as
the strip lattice of the triangle infill, consist of several overlapping
bodies; those are unioned into one manifold first.
"""

from __future__ import annotations

import logging

import numpy as np
import trimesh

from paraform.geom3d import computeVertexNormals

logger = logging.getLogger(__name__)

ENGINE_NAME = "trimesh"
DEFAULT_BACKEND = "manifold"

OPERATIONS = ('union', 'intersection', 'difference')


def engines_available() -> set[str]:
    """Return the set of trimesh boolean backends that are operational."""

    return set(trimesh.boolean.engines_available)


def solid_to_mesh(sld) -> trimesh.Trimesh:
    """Weld the faces of every surface of ``sld`` into one trimesh mesh.

    Vertices are deduplicated on coordinates rounded to 1e-9 so that
    surfaces sharing a seam become edge-connected.
    """

    vertex_map: dict[tuple[float, float, float], int] = {}
    verts = []
    faces = []
    for surf in sld[1]:
        points = surf[1]
        for face in surf[3]:
            face_inds = []
            for i in face:
                pt = points[i]
                key = (round(pt[0], 9), round(pt[1], 9), round(pt[2], 9))
                idx = vertex_map.get(key)
                if idx is None:
                    idx = len(verts)
                    vertex_map[key] = idx
                    verts.append([pt[0], pt[1], pt[2]])
                face_inds.append(idx)
            if len(set(face_inds)) == 3:
                faces.append(face_inds)

    if not faces:
        return trimesh.Trimesh(vertices=np.zeros((0, 3)),
                               faces=np.zeros((0, 3), dtype=np.int64), process=False)

    mesh = trimesh.Trimesh(vertices=np.asarray(verts, dtype=float),
                           faces=np.asarray(faces, dtype=np.int64), process=False)
    mesh.remove_unreferenced_vertices()
    return mesh


def mesh_to_solid(mesh: trimesh.Trimesh, construction: list) -> list:
    """Convert ``mesh`` into a single-surface solid with recomputed
    vertex normals."""

    if mesh is None or len(mesh.faces) == 0:
        return ['solid', [], [], construction]
    verts = [[float(v[0]), float(v[1]), float(v[2]), 1.0] for v in mesh.vertices]
    faces = [[int(f[0]), int(f[1]), int(f[2])] for f in mesh.faces]
    surf = computeVertexNormals(['surface', verts, [None] * len(verts), faces, [], []])
    return ['solid', [surf], [], construction]


def _as_single_body(mesh: trimesh.Trimesh, backend: str) -> trimesh.Trimesh:
    if len(mesh.faces) == 0 or mesh.body_count <= 1:
        return mesh
    bodies = mesh.split(only_watertight=False)
    logger.debug("unioning %d bodies before boolean", len(bodies))
    return trimesh.boolean.union(bodies, engine=backend, check_volume=False)


def solid_boolean(a, b, operation: str, *, backend: str | None = None):
    """Perform a boolean between ``a`` and ``b`` using trimesh."""

    op = operation.lower()
    if op not in OPERATIONS:
        raise ValueError(f"unsupported boolean operation '{operation}' for trimesh engine")

    backend = backend or DEFAULT_BACKEND
    available = engines_available()
    if backend not in available:
        raise RuntimeError(
            f"trimesh backend '{backend}' is not available (available: {sorted(available)})"
        )

    construction = ['boolean', f'{backend}:{op}']
    try:
        mesh_a = _as_single_body(solid_to_mesh(a), backend)
        mesh_b = _as_single_body(solid_to_mesh(b), backend)

        if len(mesh_a.faces) == 0 or len(mesh_b.faces) == 0:
            # trimesh rejects empty operands; resolve them directly
            if op == 'union':
                result = mesh_b if len(mesh_a.faces) == 0 else mesh_a
            elif op == 'difference':
                result = mesh_a
            else:
                result = None
        elif op == 'union':
            result = trimesh.boolean.union([mesh_a, mesh_b], engine=backend, check_volume=False)
        elif op == 'intersection':
            result = trimesh.boolean.intersection([mesh_a, mesh_b], engine=backend, check_volume=False)
        else:
            result = trimesh.boolean.difference([mesh_a, mesh_b], engine=backend, check_volume=False)
    except Exception as exc:
        raise RuntimeError(f"trimesh boolean operation failed: {exc}") from exc

    return mesh_to_solid(result, construction)


__all__ = ['ENGINE_NAME', 'DEFAULT_BACKEND', 'engines_available',
           'solid_boolean', 'solid_to_mesh', 'mesh_to_solid']
