"""Triangle Infill: a triangular frame whose void is filled with a
printable lattice.

The frame is the outer triangle with the inner triangle cut out, both
straight-edged.  The infill part is produced by
:func:`paraform.infill.generate_infill` against the inner triangle grown
by a fraction of the wall, so that the lattice runs into the frame walls.
With ``fillPattern`` set to None, or when no lattice fits, the infill
part has no geometry and the frame is shown alone.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Mapping

from paraform.geom import lineLineIntersect, point, polybbox
from paraform.geom3d_util import extrude
from paraform.infill import InfillConfig, generate_infill
from paraform.params import ParamDef, ParamOption, ParamSchema, UnitType
from paraform.parts import Part, PartOverrides
from paraform.profile import Profile
from paraform.projects.base import ProjectModel

## the clip triangle is grown by this fraction of the wall thickness
INFILL_OUTSET = 0.3


class TrianglePart(Enum):
    FRAME = 'frame'
    INFILL = 'infill'


SCHEMA = ParamSchema([
    ParamDef('baseWidth', 'Base Width', 2, 10, 0.1, 5.0, 'Triangle'),
    ParamDef('triangleHeight', 'Height', 2, 12, 0.1, 6.0, 'Triangle'),
    ParamDef('wallThickness', 'Wall Thickness', 0.1, 1, 0.05, 0.3, 'Triangle'),
    ParamDef('depth', 'Depth', 0.2, 3, 0.1, 1.0, 'Triangle'),
    ParamDef('fillPattern', 'Fill Pattern', 0, 2, 1, 1, 'Infill', UnitType.COUNT,
             (ParamOption(0, 'None'), ParamOption(1, 'Honeycomb'), ParamOption(2, 'Triangle'))),
    ParamDef('patternOrigin', 'Pattern Origin', 0, 1, 1, 0, 'Infill', UnitType.COUNT,
             (ParamOption(0, 'From Bottom'), ParamOption(1, 'From Top'))),
    ParamDef('cellSize', 'Cell Size', 0.3, 2.0, 0.05, 0.6, 'Infill'),
    ParamDef('infillWallThickness', 'Infill Wall Thickness', 0.02, 0.3, 0.01, 0.08, 'Infill'),
])


def _offset_triangle(hw: float, H: float, d: float) -> List[list]:
    """Centre-line triangle with every edge moved ``d`` along its outward
    normal (inward for negative ``d``), corners by ``lineLineIntersect``."""
    leg = math.hypot(hw, H)
    rnx, rny = H / leg, hw / leg
    right_dir = (-hw, H)
    left_dir = (hw, H)
    base = (point(0, -d), (1, 0))
    right = (point(hw + d * rnx, d * rny), right_dir)
    left = (point(-hw - d * rnx, d * rny), left_dir)
    return [lineLineIntersect(*base, *left), lineLineIntersect(*base, *right),
            lineLineIntersect(*right, *left)]


def outer_triangle(hw: float, H: float, T: float) -> List[list]:
    return _offset_triangle(hw, H, T / 2.0)


def inner_triangle(hw: float, H: float, T: float) -> List[list]:
    return _offset_triangle(hw, H, -T / 2.0)


def frame_profile(p: Mapping[str, float]) -> Profile:
    hw = p['baseWidth'] / 2.0
    H = p['triangleHeight']
    T = p['wallThickness']
    return Profile(outer_triangle(hw, H, T), [inner_triangle(hw, H, T)])


class TriangleInfill(ProjectModel):
    project_id = 'triangle-infill'
    schema = SCHEMA
    dependencies = {
        TrianglePart.FRAME: ('baseWidth', 'triangleHeight', 'wallThickness', 'depth'),
        TrianglePart.INFILL: ('baseWidth', 'triangleHeight', 'wallThickness', 'depth',
                              'fillPattern', 'patternOrigin', 'cellSize',
                              'infillWallThickness'),
    }
    default_overrides = PartOverrides(bevel_radius=0.4, bevel_segments=3)

    def make_parts(self) -> List[Part]:
        return [Part('frame', TrianglePart.FRAME, 0, self.default_overrides),
                Part('infill', TrianglePart.INFILL, 0, self.default_overrides)]

    def build_kind(self, kind: TrianglePart, overrides: PartOverrides):
        p = self.params
        if kind is TrianglePart.FRAME:
            bevel = overrides.bevel_radius * p['wallThickness'] * 0.25
            return extrude(frame_profile(p).validate(), p['depth'], bevel_size=bevel,
                           bevel_segments=overrides.bevel_segments)
        elif kind is TrianglePart.INFILL:
            hw = p['baseWidth'] / 2.0
            T = p['wallThickness']
            return generate_infill(inner_triangle(hw, p['triangleHeight'], T),
                                   InfillConfig.from_params(p), p['depth'],
                                   outset=INFILL_OUTSET * T, evaluator=self.evaluator)
        raise ValueError(f'unknown triangle infill part kind {kind!r}')

    def nominal_bounds(self, kind: TrianglePart):
        p = self.params
        hw = p['baseWidth'] / 2.0
        H = p['triangleHeight']
        T = p['wallThickness']
        d2 = p['depth'] / 2.0
        if kind is TrianglePart.INFILL:
            lo, hi = polybbox(inner_triangle(hw, H, T))
        else:
            lo, hi = polybbox(outer_triangle(hw, H, T))
        return [point(lo[0], lo[1], -d2), point(hi[0], hi[1], d2)]

    def model_offset(self):
        return (0.0, -self.params['triangleHeight'] / 3.0, 0.0)


__all__ = ['TrianglePart', 'TriangleInfill', 'frame_profile', 'inner_triangle',
           'outer_triangle', 'SCHEMA']
