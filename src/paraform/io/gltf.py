"""Binary glTF (GLB) export through a trimesh scene."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence, Tuple, Union

import trimesh

from paraform.boolean.trimesh_engine import solid_to_mesh
from paraform.errors import ExportError

logger = logging.getLogger(__name__)

Named = Tuple[str, list]


def _named_solids(parts) -> Iterable[Named]:
    if hasattr(parts, 'parts'):
        parts = parts.parts
    for i, p in enumerate(parts):
        if hasattr(p, 'solid'):
            yield p.id, p.solid
        elif isinstance(p, tuple):
            yield p
        else:
            yield f'part-{i}', p


def build_scene(parts: Union[Sequence, object], scale: float = 1.0) -> trimesh.Scene:
    """One scene node per part, named by part id, with coordinates
    multiplied by ``scale``."""
    scene = trimesh.Scene()
    for name, sld in _named_solids(parts):
        mesh = solid_to_mesh(sld)
        if len(mesh.faces) == 0:
            logger.debug("skipping empty part %s", name)
            continue
        if scale != 1.0:
            mesh.apply_scale(scale)
        scene.add_geometry(mesh, node_name=name, geom_name=name)
    return scene


def write_glb(parts, path_or_file, scale: float = 1.0) -> int:
    """Write ``parts`` (an :class:`~paraform.projects.base.Assembly`, or
    solids, or ``(name, solid)`` pairs) as GLB; returns the node count."""
    scene = build_scene(parts, scale)
    if not scene.geometry:
        raise ExportError('nothing to export: every part is empty')
    data = scene.export(file_type='glb')
    if hasattr(path_or_file, 'write'):
        path_or_file.write(data)
    else:
        try:
            with open(path_or_file, 'wb') as f:
                f.write(data)
        except OSError as exc:
            raise ExportError(f'cannot write GLB to {path_or_file}: {exc}') from exc
    return len(scene.geometry)


__all__ = ['build_scene', 'write_glb']
