"""Procedural infill: honeycomb and triangular lattices clipped to a
boundary.

Both patterns follow the same recipe.  The target boundary is grown
radially by a margin of one to two cells, a slab covering that grown
region is built, the pattern's negative space is cut out of it (or, for
the triangle grid, the slab *is* the merged strip lattice), and the
result is intersected with the boundary extruded to the target depth.

The lattice is anchored so that row 0 is flush with one edge of the
boundary: ``Anchor.FROM_START`` puts it on the minimum-y edge of the
boundary's bounding box, ``Anchor.FROM_END`` on the maximum-y edge.
Horizontally the lattice is centred on the bounding box.  For the
isosceles triangles the frame families use, these are the base, the apex
and the axis of symmetry.

Every failure degrades to ``None`` (no infill); the frame the infill
sits in stays valid on its own.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Mapping, Optional, Sequence, Tuple

from paraform.csg import Evaluator, Operation
from paraform.errors import CSGError
from paraform.geom import (
    isInsideRegionXY,
    offsetFromCentroidXY,
    point,
    polybbox,
)
from paraform.geom3d import mergesolids, transformsolid
from paraform.geom3d_util import extrude, prism
from paraform.profile import Profile
from paraform.xform import Rotation, Translation, compose

logger = logging.getLogger(__name__)

## extra slab depth so that the clip faces never coincide with the slab faces
SLAB_EPSILON = 0.02

## hole radii at or below this leave the slab solid
MIN_HOLE_RADIUS = 0.01

HONEYCOMB_MARGIN = 1.5
TRIANGLE_MARGIN = 2.0

## strip families of the triangle grid, in degrees
STRIP_ANGLES = (0.0, 60.0, -60.0)


class InfillPattern(IntEnum):
    NONE = 0
    HONEYCOMB = 1
    TRIANGLE = 2


class Anchor(IntEnum):
    FROM_START = 0
    FROM_END = 1


@dataclass(frozen=True)
class InfillConfig:
    pattern: InfillPattern = InfillPattern.NONE
    cell_size: float = 0.6
    wall_thickness: float = 0.08
    anchor: Anchor = Anchor.FROM_START

    @classmethod
    def from_params(cls, params: Mapping[str, float], *,
                    pattern_key: str = 'fillPattern',
                    cell_key: str = 'cellSize',
                    wall_key: str = 'infillWallThickness',
                    anchor_key: str = 'patternOrigin') -> "InfillConfig":
        return cls(pattern=InfillPattern(int(params[pattern_key])),
                   cell_size=float(params[cell_key]),
                   wall_thickness=float(params[wall_key]),
                   anchor=Anchor(int(params[anchor_key])))


def hex_hole_radius(cell: float, wall: float) -> float:
    """Circumradius of the hexagonal holes that leaves a wall of
    ``wall`` between the flats of neighbouring holes on a grid of pitch
    ``sqrt(3) * cell``."""
    return cell - wall / math.sqrt(3.0)


def _bbox2(loop) -> Tuple[float, float, float, float]:
    box = polybbox(loop)
    return box[0][0], box[0][1], box[1][0], box[1][1]


def anchor_point(boundary: Sequence, anchor: Anchor) -> Tuple[float, float]:
    x0, y0, x1, y1 = _bbox2(boundary)
    return (x0 + x1) / 2.0, (y1 if anchor is Anchor.FROM_END else y0)


def expanded_region(boundary: Sequence, cell: float, margin: float) -> List[list]:
    return offsetFromCentroidXY(boundary, cell * margin)


## honeycomb
## ---------

def honeycomb_centers(boundary: Sequence, cell: float, anchor: Anchor = Anchor.FROM_START,
                      margin: float = HONEYCOMB_MARGIN) -> List[Tuple[float, float]]:
    """Hole centres of the anchored hex grid that fall inside the
    expanded boundary, row by row from the bottom."""
    region = expanded_region(boundary, cell, margin)
    minX, minY, maxX, maxY = _bbox2(region)
    ax, ay = anchor_point(boundary, anchor)

    sx = math.sqrt(3.0) * cell
    sy = 1.5 * cell
    rows_down = math.ceil((ay - minY) / sy) + 2
    rows_up = math.ceil((maxY - ay) / sy) + 2
    cols_half = math.ceil((maxX - minX) / sx) + 2

    centers = []
    for row in range(-rows_down, rows_up + 1):
        cy = ay + row * sy
        if cy < minY - cell or cy > maxY + cell:
            continue
        shift = sx / 2.0 if row % 2 == 1 else 0.0
        for col in range(-cols_half, cols_half + 1):
            cx = ax + col * sx + shift
            if isInsideRegionXY(region, (cx, cy)):
                centers.append((cx, cy))
    return centers


def hexagon(center: Tuple[float, float], radius: float) -> List[list]:
    """pointy-topped hexagon, vertices at 30 + 60k degrees"""
    return [point(center[0] + radius * math.cos(math.pi / 6.0 + i * math.pi / 3.0),
                  center[1] + radius * math.sin(math.pi / 6.0 + i * math.pi / 3.0))
            for i in range(6)]


def _slab_outline(region, cell: float) -> List[list]:
    minX, minY, maxX, maxY = _bbox2(region)
    # padded by a cell so every hole lies strictly inside
    return [point(minX - cell, minY - cell), point(maxX + cell, minY - cell),
            point(maxX + cell, maxY + cell), point(minX - cell, maxY + cell)]


def honeycomb_profile(boundary: Sequence, cell: float, wall: float,
                      anchor: Anchor = Anchor.FROM_START,
                      margin: float = HONEYCOMB_MARGIN,
                      centers: Optional[Sequence] = None) -> Profile:
    """Slab outline over the expanded boundary with one hexagonal hole
    per grid centre.  No holes when :func:`hex_hole_radius` is too
    small.

    ``centers`` may carry the grid :func:`honeycomb_centers` already
    produced for the same arguments.
    """
    region = expanded_region(boundary, cell, margin)
    outline = _slab_outline(region, cell)
    radius = hex_hole_radius(cell, wall)
    if radius <= MIN_HOLE_RADIUS:
        return Profile(outline)
    if centers is None:
        centers = honeycomb_centers(boundary, cell, anchor, margin)
    return Profile(outline, [hexagon(c, radius) for c in centers])


def honeycomb_slab(boundary: Sequence, cell: float, wall: float, depth: float,
                   anchor: Anchor = Anchor.FROM_START,
                   margin: float = HONEYCOMB_MARGIN,
                   centers: Optional[Sequence] = None) -> list:
    prof = honeycomb_profile(boundary, cell, wall, anchor, margin, centers)
    return extrude(prof.validate(), depth + SLAB_EPSILON)


## triangle grid
## -------------

def _band_span(region: Sequence, nx: float, ny: float, tx: float, ty: float,
               offset: float, half: float) -> Optional[Tuple[float, float]]:
    """Extent along ``(tx, ty)`` of the part of ``region`` within
    ``half`` of the line ``n.p == offset``, or ``None`` when the band
    misses the region."""
    ts = []
    n = len(region)
    for i in range(n):
        p = region[i]
        q = region[(i + 1) % n]
        sp = p[0] * nx + p[1] * ny - offset
        sq = q[0] * nx + q[1] * ny - offset
        tp = p[0] * tx + p[1] * ty
        tq = q[0] * tx + q[1] * ty
        if abs(sp) <= half:
            ts.append(tp)
        for edge in (-half, half):
            if (sp - edge) * (sq - edge) < 0:
                ts.append(tp + (edge - sp) / (sq - sp) * (tq - tp))
    if not ts:
        return None
    return min(ts), max(ts)


def triangle_strips(boundary: Sequence, cell: float, wall: float, depth: float,
                    anchor: Anchor = Anchor.FROM_START,
                    margin: float = TRIANGLE_MARGIN) -> List[list]:
    """Thin boxes along three families of parallel lines (0, 60 and -60
    degrees) spaced ``cell`` apart, every family passing through the
    anchor point.  Lines that miss the expanded region are dropped and
    the rest are cut to their chord through it, overrunning each end by
    ``wall``."""
    region = expanded_region(boundary, cell, margin)
    ax, ay = anchor_point(boundary, anchor)
    slab_depth = depth + SLAB_EPSILON
    half = wall / 2.0

    strips = []
    for deg in STRIP_ANGLES:
        theta = math.radians(deg)
        tx, ty = math.cos(theta), math.sin(theta)
        nx, ny = -ty, tx
        anchor_proj = ax * nx + ay * ny
        projs = [p[0] * nx + p[1] * ny for p in region]
        kmin = math.ceil((min(projs) - wall - anchor_proj) / cell)
        kmax = math.floor((max(projs) + wall - anchor_proj) / cell)
        rot = Rotation([0, 0, 1], deg)
        for k in range(kmin, kmax + 1):
            offset = anchor_proj + k * cell
            span = _band_span(region, nx, ny, tx, ty, offset, half)
            if span is None:
                continue
            t0, t1 = span[0] - wall, span[1] + wall
            along = (t0 + t1) / 2.0
            cx = offset * nx + along * tx
            cy = offset * ny + along * ty
            strip = prism(t1 - t0, wall, slab_depth)
            strips.append(transformsolid(strip, compose(Translation([cx, cy, 0]), rot)))
    return strips


def triangle_slab(boundary: Sequence, cell: float, wall: float, depth: float,
                  anchor: Anchor = Anchor.FROM_START,
                  margin: float = TRIANGLE_MARGIN) -> list:
    """Plain geometry merge of :func:`triangle_strips`; the strips
    overlap, and the boolean engine resolves that when the slab is
    clipped."""
    strips = triangle_strips(boundary, cell, wall, depth, anchor, margin)
    if not strips:
        raise ValueError('triangle grid produced no strips')
    return mergesolids(strips, ['procedure', f'triangle_slab({cell},{wall},{depth})'])


## clipping
## --------

def generate_infill(boundary: Sequence, config: InfillConfig, depth: float,
                    outset: float = 0.0, *,
                    evaluator: Optional[Evaluator] = None) -> Optional[list]:
    """Infill solid for ``boundary`` (a loop of points), centred on z=0
    like the extrusions it fills, or ``None``.

    ``outset`` grows the clip boundary radially so the infill overlaps
    the surrounding walls.
    """
    if config.pattern is InfillPattern.NONE:
        return None

    snapshot = {'pattern': config.pattern.name, 'cell_size': config.cell_size,
                'wall_thickness': config.wall_thickness, 'anchor': config.anchor.name,
                'depth': depth, 'outset': outset}
    try:
        if config.pattern is InfillPattern.HONEYCOMB:
            radius = hex_hole_radius(config.cell_size, config.wall_thickness)
            centers = honeycomb_centers(boundary, config.cell_size, config.anchor)
            if radius > MIN_HOLE_RADIUS and not centers:
                logger.info("no honeycomb cells fit the boundary: %s", snapshot)
                return None
            slab = honeycomb_slab(boundary, config.cell_size, config.wall_thickness,
                                  depth, config.anchor, centers=centers)
        else:
            slab = triangle_slab(boundary, config.cell_size, config.wall_thickness,
                                 depth, config.anchor)
        clip = extrude(Profile(offsetFromCentroidXY(boundary, outset)).validate(), depth)
    except ValueError as exc:
        logger.warning("infill pattern construction failed: %s; params=%s", exc, snapshot)
        return None

    evaluator = evaluator or Evaluator()
    try:
        return evaluator.combine(clip, slab, Operation.INTERSECTION,
                                 fallback=False, context=snapshot)
    except CSGError:
        return None


__all__ = ['InfillPattern', 'Anchor', 'InfillConfig', 'hex_hole_radius',
           'anchor_point', 'expanded_region', 'honeycomb_centers', 'hexagon',
           'honeycomb_profile', 'honeycomb_slab', 'triangle_strips', 'triangle_slab',
           'generate_infill']
