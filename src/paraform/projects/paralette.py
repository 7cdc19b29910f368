"""Paralette: an A-shaped training frame with a grip tube through its apex.

The frame is a flat plate.  Its outline is the triangle of the bar
centre lines offset outward by half the bar thickness, with a foot
rounded into each bottom corner and a disc of ``discRadius`` blended
over the apex; the inner void is the triangle offset inward, with
rounded corners, and the grip bore is punched at the disc centre.

``frameStyle`` 1 builds the same frame from round primitives instead
(capsule bars, a disc and two foot cylinders), which gives a bar-and-node
look at the cost of several boolean steps.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Mapping

from paraform.csg import Brush, Operation
from paraform.geom import (
    arcPointsXY,
    circleLoopXY,
    filletArc,
    lineCircleIntersect,
    lineLineIntersect,
    point,
    roundedPolygonPath,
)
from paraform.geom3d_util import capsule, conic, extrude, tube
from paraform.params import ParamDef, ParamOption, ParamSchema, UnitType
from paraform.parts import Part, PartOverrides
from paraform.profile import Profile
from paraform.projects.base import ProjectModel
from paraform.xform import Rotation, Scale, Translation, compose

FOOT_FILLET_SEGMENTS = 12
DISC_SEGMENTS = 24
INNER_FILLET_SEGMENTS = 10
GRIP_BORE_SEGMENTS = 32

## inner void apex stays this fraction of the disc radius below the disc centre
APEX_CLEARANCE = 0.8

## leg and bar primitives run past their joints by this fraction of the
## joint radius
JOINT_EXTENSION = 0.5


class ParalettePart(Enum):
    FRAME = 'frame'
    GRIP = 'grip'


class FrameStyle(Enum):
    PLATE = 0
    PRIMITIVES = 1


SCHEMA = ParamSchema([
    ParamDef('baseWidth', 'Base Width', 1, 10, 0.1, 5.5, 'Triangle'),
    ParamDef('triangleHeight', 'Triangle Height', 2, 12, 0.1, 5.0, 'Triangle'),
    ParamDef('barThickness', 'Bar Thickness', 0.2, 1.5, 0.05, 0.55, 'Triangle'),
    ParamDef('depth', 'Depth', 0.3, 4, 0.1, 0.8, 'Triangle'),
    ParamDef('frameStyle', 'Frame Style', 0, 1, 1, 0, 'Triangle', UnitType.COUNT,
             (ParamOption(0, 'Plate'), ParamOption(1, 'Primitives'))),
    ParamDef('discRadius', 'Disc Radius', 0.3, 2.5, 0.05, 0.75, 'Grip'),
    ParamDef('gripDiameter', 'Grip Diameter', 0.2, 2.0, 0.05, 0.8, 'Grip'),
    ParamDef('gripExtension', 'Grip Extension', 0, 2, 0.05, 0.35, 'Grip'),
    ParamDef('footRadius', 'Foot Radius', 0.1, 1.5, 0.05, 0.18, 'Feet'),
    ParamDef('footHeight', 'Foot Height', 0.1, 0.8, 0.05, 0.12, 'Feet'),
])


def _legs(hw: float, H: float):
    """outward unit normals of the right and left legs"""
    leg = math.hypot(hw, H)
    return (H / leg, hw / leg), (-H / leg, hw / leg)


def frame_profile(p: Mapping[str, float]) -> Profile:
    """Plate outline of the frame, apex disc centred on ``(0, H)``."""
    hw = p['baseWidth'] / 2.0
    H = p['triangleHeight']
    T = p['barThickness']
    ht = T / 2.0
    foot_r = p['footRadius']
    foot_h = p['footHeight']
    disc_r = p['discRadius']

    right_dir = (-hw, H)
    left_dir = (hw, H)
    (rnx, rny), (lnx, lny) = _legs(hw, H)

    base_bottom = (point(0, -ht), (1, 0))
    base_top = (point(0, ht), (1, 0))
    right_out = (point(hw + ht * rnx, ht * rny), right_dir)
    left_out = (point(-hw + ht * lnx, ht * lny), left_dir)
    right_in = (point(hw - ht * rnx, -ht * rny), right_dir)
    left_in = (point(-hw - ht * lnx, -ht * lny), left_dir)

    outer_br = lineLineIntersect(*base_bottom, *right_out)
    outer_bl = lineLineIntersect(*base_bottom, *left_out)
    inner_br = lineLineIntersect(*base_top, *right_in)
    inner_bl = lineLineIntersect(*base_top, *left_in)
    apex = lineLineIntersect(*right_in, *left_in)
    apex_y = min(apex[1], H - disc_r * APEX_CLEARANCE)

    # feet flare out below the bottom corners and return along the base
    flare = foot_h * (hw / H) + foot_r * 0.5
    back = foot_r * 2.5
    lf = point(outer_bl[0] - flare, outer_bl[1] - foot_h)
    rf = point(outer_br[0] + flare, outer_br[1] - foot_h)
    lr = point(outer_bl[0] + back, outer_bl[1])
    rr = point(outer_br[0] - back, outer_br[1])

    disc = point(0, H)
    right_hit = lineCircleIntersect(outer_br, right_dir, disc, disc_r)
    left_hit = lineCircleIntersect(outer_bl, left_dir, disc, disc_r)
    rh = right_hit if right_hit is not None else point(outer_br[0], H)
    lh = left_hit if left_hit is not None else point(outer_bl[0], H)

    outer = filletArc(lh, lf, lr, foot_r, FOOT_FILLET_SEGMENTS)
    outer += [lr, rr]
    outer += filletArc(rr, rf, rh, foot_r, FOOT_FILLET_SEGMENTS)
    outer.append(rh)
    if right_hit is not None and left_hit is not None:
        start = math.atan2(right_hit[1] - H, right_hit[0])
        end = math.atan2(left_hit[1] - H, left_hit[0])
        if end <= start:
            end += 2.0 * math.pi
        outer += arcPointsXY(disc, disc_r, start, end, DISC_SEGMENTS)
    outer.append(lh)

    inner = roundedPolygonPath([(inner_bl[0], inner_bl[1], T * 0.5),
                                (inner_br[0], inner_br[1], T * 0.5),
                                (apex[0], apex_y, T * 0.3)], INNER_FILLET_SEGMENTS)
    bore = circleLoopXY(disc, p['gripDiameter'] / 2.0, GRIP_BORE_SEGMENTS)
    return Profile(outer, [inner, bore])


class Paralette(ProjectModel):
    project_id = 'paralette'
    schema = SCHEMA
    dependencies = {
        ParalettePart.FRAME: ('baseWidth', 'triangleHeight', 'barThickness', 'depth',
                              'frameStyle', 'discRadius', 'gripDiameter',
                              'footRadius', 'footHeight'),
        ParalettePart.GRIP: ('depth', 'gripDiameter', 'gripExtension'),
    }
    default_overrides = PartOverrides(bevel_radius=0.8, bevel_segments=3)

    def make_parts(self) -> List[Part]:
        return [Part('frame', ParalettePart.FRAME, 0, self.default_overrides),
                Part('grip', ParalettePart.GRIP, 0, self.default_overrides)]

    def build_kind(self, kind: ParalettePart, overrides: PartOverrides):
        p = self.params
        if kind is ParalettePart.FRAME:
            if FrameStyle(int(p['frameStyle'])) is FrameStyle.PRIMITIVES:
                return self.primitive_frame()
            bevel = overrides.bevel_radius * min(p['barThickness'], p['depth']) * 0.25
            return extrude(frame_profile(p).validate(), p['depth'], bevel_size=bevel,
                           bevel_segments=overrides.bevel_segments)
        elif kind is ParalettePart.GRIP:
            outer = p['gripDiameter'] / 2.0
            return tube(outer, outer * 0.6, p['depth'] + 2.0 * p['gripExtension'])
        raise ValueError(f'unknown paralette part kind {kind!r}')

    def primitive_frame(self) -> list:
        """Bars, disc and feet unioned, grip bore subtracted."""
        p = self.params
        hw = p['baseWidth'] / 2.0
        H = p['triangleHeight']
        T = p['barThickness']
        depth = p['depth']
        r = T / 2.0
        ext = JOINT_EXTENSION * r
        # capsules are round; flatten them to the plate depth
        flatten = Scale(depth / T, 1, 1)

        def bar(x0, y0, x1, y1):
            length = math.hypot(x1 - x0, y1 - y0) + 2.0 * ext
            ang = math.degrees(math.atan2(y1 - y0, x1 - x0))
            return Brush(capsule(r, length),
                         compose(Translation([(x0 + x1) / 2.0, (y0 + y1) / 2.0, 0]),
                                 Rotation([0, 0, 1], ang),
                                 Rotation([0, 1, 0], 90),
                                 flatten))

        disc = Brush(conic(p['discRadius'], p['discRadius'], depth), Translation([0, H, 0]))
        foot = conic(p['footRadius'], p['footRadius'], depth)
        steps = [(bar(hw, 0, 0, H), Operation.ADDITION),
                 (bar(-hw, 0, hw, 0), Operation.ADDITION),
                 (disc, Operation.ADDITION),
                 (Brush(foot, Translation([-hw, -p['footHeight'], 0])), Operation.ADDITION),
                 (Brush(foot, Translation([hw, -p['footHeight'], 0])), Operation.ADDITION)]
        bore_r = p['gripDiameter'] / 2.0
        steps.append((Brush(conic(bore_r, bore_r, depth * 2.0), Translation([0, H, 0])),
                      Operation.SUBTRACTION))
        return self.evaluator.evaluate(bar(-hw, 0, 0, H), steps, context=dict(p))

    def nominal_bounds(self, kind: ParalettePart):
        p = self.params
        if kind is ParalettePart.GRIP:
            outer = p['gripDiameter'] / 2.0
            h2 = p['depth'] / 2.0 + p['gripExtension']
            return [point(-outer, -outer, -h2), point(outer, outer, h2)]
        w2 = p['baseWidth'] / 2.0
        H = p['triangleHeight']
        d2 = p['depth'] / 2.0
        return [point(-w2, 0, -d2), point(w2, H, d2)]

    def placement(self, part: Part):
        if part.kind is ParalettePart.FRAME:
            return None
        elif part.kind is ParalettePart.GRIP:
            return Translation([0, self.params['triangleHeight'], 0])
        raise ValueError(f'unknown paralette part kind {part.kind!r}')

    def model_offset(self):
        return (0.0, -self.params['triangleHeight'] / 2.0, 0.0)


__all__ = ['ParalettePart', 'FrameStyle', 'Paralette', 'frame_profile', 'SCHEMA']
