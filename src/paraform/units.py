"""Working units at the boundary.

Geometry is unit-agnostic: one model unit is whatever the caller works
in.  These helpers convert displayed parameter values between unit
systems and give the scale factors exporters apply to coordinates.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping

from paraform.params import ParamDef, ParamSchema, UnitType


class UnitSystem(Enum):
    MM = 'mm'
    CM = 'cm'


## working units per millimetre
MM_TO: Dict[UnitSystem, float] = {
    UnitSystem.MM: 1.0,
    UnitSystem.CM: 0.1,
}


def _unit(u) -> UnitSystem:
    return u if isinstance(u, UnitSystem) else UnitSystem(str(u).lower())


def unit_suffix(unit_type: UnitType, unit) -> str:
    if unit_type is UnitType.LENGTH:
        return _unit(unit).value
    if unit_type is UnitType.ANGLE:
        return '\N{DEGREE SIGN}'
    return ''


def convert_value(value: float, unit_type: UnitType, src, dst) -> float:
    """Convert ``value`` between unit systems; only lengths change."""
    src, dst = _unit(src), _unit(dst)
    if unit_type is not UnitType.LENGTH or src is dst:
        return value
    return value / MM_TO[src] * MM_TO[dst]


def convert_params(params: Mapping[str, float], schema: ParamSchema, src, dst) -> Dict[str, float]:
    converted = dict(params)
    if _unit(src) is _unit(dst):
        return converted
    for d in schema:
        if d.unit is UnitType.LENGTH and d.key in converted:
            converted[d.key] = convert_value(converted[d.key], UnitType.LENGTH, src, dst)
    return converted


def scale_param_def(d: ParamDef, unit) -> ParamDef:
    """Rescale a definition authored in millimetres for display in ``unit``."""
    unit = _unit(unit)
    if d.unit is not UnitType.LENGTH or unit is UnitSystem.MM:
        return d
    return ParamSchema([d]).scaled(MM_TO[unit])[d.key]


def stl_scale_factor(unit) -> float:
    """Model coordinates to millimetres, which slicers expect."""
    return 1.0 / MM_TO[_unit(unit)]


def glb_scale_factor(unit) -> float:
    """Model coordinates to metres, which glTF expects."""
    return (1.0 / MM_TO[_unit(unit)]) * 0.001


__all__ = ['UnitSystem', 'MM_TO', 'unit_suffix', 'convert_value', 'convert_params',
           'scale_param_def', 'stl_scale_factor', 'glb_scale_factor']
