"""Assembly export with unit scaling and axis conversion.

Models are Y-up.  STL consumers (slicers) expect Z-up millimetres, so STL
export rotates +90 degrees about X and scales to millimetres; glTF is
Y-up in metres, so GLB export only scales.  Parts whose solid is empty,
non-finite or encloses no volume are left out of both.
"""

from __future__ import annotations

import logging
from typing import List

from paraform.geom import epsilon
from paraform.geom3d import isemptysolid, isfinitesolid, signedvolumeof, transformsolid
from paraform.io.gltf import write_glb
from paraform.io.stl import write_stl
from paraform.units import glb_scale_factor, stl_scale_factor
from paraform.xform import Rotation, Scale, compose

logger = logging.getLogger(__name__)


def exportable(sld: list) -> bool:
    return (not isemptysolid(sld) and isfinitesolid(sld)
            and abs(signedvolumeof(sld)) > epsilon)


def _filtered(assembly) -> List:
    keep = []
    for part in assembly.parts:
        if exportable(part.solid):
            keep.append(part)
        else:
            logger.warning("%s: leaving degenerate part %s out of the export",
                           assembly.project, part.id)
    return keep


def stl_transform(unit):
    return compose(Scale(stl_scale_factor(unit)), Rotation([1, 0, 0], 90))


def export_stl(assembly, path_or_file, unit='mm', *, binary: bool = True) -> int:
    """Write every exportable part of ``assembly`` into one STL; returns
    the triangle count."""
    mat = stl_transform(unit)
    solids = [transformsolid(p.solid, mat) for p in _filtered(assembly)]
    count = write_stl(solids, path_or_file, binary=binary, name=assembly.project)
    logger.info("wrote %d triangles from %d parts", count, len(solids))
    return count


def export_glb(assembly, path_or_file, unit='mm') -> int:
    """Write every exportable part of ``assembly`` as a GLB node; returns
    the node count."""
    parts = [(p.id, p.solid) for p in _filtered(assembly)]
    count = write_glb(parts, path_or_file, scale=glb_scale_factor(unit))
    logger.info("wrote %d nodes", count)
    return count


__all__ = ['exportable', 'stl_transform', 'export_stl', 'export_glb']
