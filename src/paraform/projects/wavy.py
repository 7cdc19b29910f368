"""Wavy Structure: a two-tier base plate carrying two crossed families of
wavy fins.

The fin outline is the dual-cosine wave ``h(t) = avg + A cos(4 pi t) +
B cos(2 pi t)`` over the fin length, sampled 100 times.  X-fins span the
width and are spread along the depth, Z-fins span the depth and are
spread along the width.  ``finCount`` sets both family sizes, so it is
the one parameter that changes the part list.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List

from paraform.csg import Operation
from paraform.geom import point
from paraform.geom3d_util import extrude, prism
from paraform.params import ParamDef, ParamSchema, UnitType
from paraform.parts import Part, PartOverrides
from paraform.profile import Profile
from paraform.projects.base import ProjectModel
from paraform.xform import Rotation, Translation, compose

WAVE_SAMPLES = 100

## fin heights are floored here so the outline never folds onto its base
MIN_WAVE_HEIGHT = 1e-3


class WavyPart(Enum):
    BASE = 'base'
    X_FIN = 'x'
    Z_FIN = 'z'


def wave_height(x: float, width: float, avg: float, a: float, b: float) -> float:
    t = x / width
    return max(MIN_WAVE_HEIGHT,
               avg + a * math.cos(4.0 * math.pi * t) + b * math.cos(2.0 * math.pi * t))


def fin_profile(width: float, avg: float, a: float, b: float) -> Profile:
    """Outline from the origin up the left end, along the wave and down
    the right end; the base edge closes it."""
    pts = [point(0.0, 0.0)]
    for i in range(WAVE_SAMPLES + 1):
        x = width * i / WAVE_SAMPLES
        pts.append(point(x, wave_height(x, width, avg, a, b)))
    pts.append(point(width, 0.0))
    return Profile(pts)


SCHEMA = ParamSchema([
    ParamDef('baseWidth', 'Base Width', 1, 8, 0.1, 3.5, 'Dimensions'),
    ParamDef('baseDepth', 'Base Depth', 1, 8, 0.1, 2.8, 'Dimensions'),
    ParamDef('baseHeight', 'Base Height', 0.05, 0.5, 0.01, 0.2, 'Dimensions'),
    ParamDef('finCount', 'Fin Count', 2, 12, 1, 6, 'Counts & Spacing', UnitType.COUNT),
    ParamDef('finThickness', 'Fin Thickness', 0.02, 0.3, 0.01, 0.09, 'Counts & Spacing'),
    ParamDef('waveAvg', 'Wave Average Height', 0.5, 3, 0.05, 1.25, 'Wave Profile'),
    ParamDef('waveA', 'Wave Amplitude A', 0, 1, 0.01, 0.35, 'Wave Profile'),
    ParamDef('waveB', 'Wave Amplitude B', 0, 1, 0.01, 0.4, 'Wave Profile'),
])


class WavyStructure(ProjectModel):
    project_id = 'wavy-structure'
    schema = SCHEMA
    cardinality_keys = frozenset({'finCount'})
    dependencies = {
        WavyPart.BASE: ('baseWidth', 'baseDepth', 'baseHeight'),
        WavyPart.X_FIN: ('baseWidth', 'finThickness', 'waveAvg', 'waveA', 'waveB'),
        WavyPart.Z_FIN: ('baseDepth', 'finThickness', 'waveAvg', 'waveA', 'waveB'),
    }
    default_overrides = PartOverrides(bevel_radius=0.0, bevel_segments=1)

    @property
    def fin_count(self) -> int:
        return int(self.params['finCount'])

    def make_parts(self) -> List[Part]:
        parts = [Part('base', WavyPart.BASE, 0, self.default_overrides)]
        parts += [Part(f'xfin-{i}', WavyPart.X_FIN, i, self.default_overrides)
                  for i in range(self.fin_count)]
        parts += [Part(f'zfin-{i}', WavyPart.Z_FIN, i, self.default_overrides)
                  for i in range(self.fin_count)]
        return parts

    def build_kind(self, kind: WavyPart, overrides: PartOverrides):
        p = self.params
        if kind is WavyPart.BASE:
            h = p['baseHeight']
            lower = prism(p['baseWidth'] + 0.12, h * 0.5, p['baseDepth'] + 0.12,
                          point(0, h * 0.25, 0))
            upper = prism(p['baseWidth'] + 0.04, h * 0.5, p['baseDepth'] + 0.04,
                          point(0, h * 0.75, 0))
            return self.evaluator.evaluate(lower, [(upper, Operation.ADDITION)],
                                           context=dict(p))
        elif kind is WavyPart.X_FIN or kind is WavyPart.Z_FIN:
            length = p['baseWidth'] if kind is WavyPart.X_FIN else p['baseDepth']
            prof = fin_profile(length, p['waveAvg'], p['waveA'], p['waveB']).validate()
            bevel = overrides.bevel_radius * p['finThickness'] * 0.5
            return extrude(prof, p['finThickness'], bevel_size=bevel,
                           bevel_segments=overrides.bevel_segments)
        raise ValueError(f'unknown wavy part kind {kind!r}')

    def nominal_bounds(self, kind: WavyPart):
        p = self.params
        if kind is WavyPart.BASE:
            w2 = (p['baseWidth'] + 0.12) / 2
            d2 = (p['baseDepth'] + 0.12) / 2
            return [point(-w2, 0, -d2), point(w2, p['baseHeight'], d2)]
        length = p['baseWidth'] if kind is WavyPart.X_FIN else p['baseDepth']
        top = p['waveAvg'] + p['waveA'] + p['waveB']
        t2 = p['finThickness'] / 2
        return [point(0, 0, -t2), point(length, top, t2)]

    def spacing(self, kind: WavyPart) -> float:
        span = self.params['baseDepth'] if kind is WavyPart.X_FIN else self.params['baseWidth']
        return span / ((self.fin_count - 1) or 1)

    def placement(self, part: Part):
        p = self.params
        if part.kind is WavyPart.BASE:
            return None
        elif part.kind is WavyPart.X_FIN:
            z = -p['baseDepth'] / 2 + part.index * self.spacing(WavyPart.X_FIN)
            return Translation([-p['baseWidth'] / 2, p['baseHeight'], z])
        elif part.kind is WavyPart.Z_FIN:
            x = -p['baseWidth'] / 2 + part.index * self.spacing(WavyPart.Z_FIN)
            return compose(Translation([x, p['baseHeight'], p['baseDepth'] / 2]),
                           Rotation([0, 1, 0], 90))
        raise ValueError(f'unknown wavy part kind {part.kind!r}')


__all__ = ['WavyPart', 'WavyStructure', 'wave_height', 'fin_profile', 'SCHEMA']
