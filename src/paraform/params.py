"""Parameter schemas.

A shape family declares its parameters as :class:`ParamDef` entries.  The
schema is the only gate between user input and the geometry core: values
are clamped to their declared range here, count and enumerated values are
rounded, and the builders downstream trust what they receive.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class UnitType(Enum):
    LENGTH = 'length'
    ANGLE = 'angle'
    COUNT = 'count'
    RATIO = 'ratio'


@dataclass(frozen=True)
class ParamOption:
    value: int
    label: str


@dataclass(frozen=True)
class ParamDef:
    key: str
    label: str
    min: float
    max: float
    step: float
    default: float
    group: str = ''
    unit: UnitType = UnitType.LENGTH
    options: Tuple[ParamOption, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError(f'bad range for parameter {self.key!r}: {self.min} > {self.max}')

    @property
    def is_discrete(self) -> bool:
        return self.unit is UnitType.COUNT or bool(self.options)

    def clamp(self, value: float) -> float:
        """Clamp ``value`` into ``[min, max]``; discrete parameters are
        rounded to the nearest integer (or the nearest option).
        Non-finite input falls back to the default."""
        value = float(value)
        if not math.isfinite(value):
            logger.debug("non-finite value for %s replaced by default", self.key)
            value = float(self.default)
        value = min(max(value, self.min), self.max)
        if self.options:
            return min((o.value for o in self.options), key=lambda v: abs(v - value))
        if self.unit is UnitType.COUNT:
            # round half up, then re-clamp against fractional bounds
            n = math.floor(value + 0.5)
            return int(min(max(n, math.ceil(self.min)), math.floor(self.max)))
        return value

    def option_label(self, value: float) -> Optional[str]:
        for o in self.options:
            if o.value == value:
                return o.label
        return None


class ParamSchema:
    """Ordered collection of :class:`ParamDef` keyed by name."""

    def __init__(self, defs: Iterable[ParamDef]):
        self._defs: Dict[str, ParamDef] = {}
        for d in defs:
            if d.key in self._defs:
                raise ValueError(f'duplicate parameter {d.key!r}')
            self._defs[d.key] = d

    def __getitem__(self, key: str) -> ParamDef:
        return self._defs[key]

    def __contains__(self, key: object) -> bool:
        return key in self._defs

    def __iter__(self) -> Iterator[ParamDef]:
        return iter(self._defs.values())

    def __len__(self) -> int:
        return len(self._defs)

    def keys(self):
        return self._defs.keys()

    @property
    def defaults(self) -> Dict[str, float]:
        return {d.key: d.clamp(d.default) for d in self}

    def groups(self) -> Dict[str, list]:
        out: Dict[str, list] = {}
        for d in self:
            out.setdefault(d.group, []).append(d)
        return out

    def normalize(self, values: Optional[Mapping[str, float]] = None,
                  base: Optional[Mapping[str, float]] = None) -> Dict[str, float]:
        """Return a complete, clamped parameter map.

        Keys missing from ``values`` come from ``base`` (or the defaults).
        Unknown keys are dropped.
        """
        result = dict(base) if base is not None else self.defaults
        for key, value in (values or {}).items():
            d = self._defs.get(key)
            if d is None:
                logger.debug("ignoring unknown parameter %r", key)
                continue
            result[key] = d.clamp(value)
        return {d.key: d.clamp(result.get(d.key, d.default)) for d in self}

    def scaled(self, factor: float) -> "ParamSchema":
        """Schema with every LENGTH range and default multiplied by ``factor``."""
        return ParamSchema(
            replace(d, min=d.min * factor, max=d.max * factor,
                    step=d.step * factor, default=d.default * factor)
            if d.unit is UnitType.LENGTH else d
            for d in self)


def parse_assignment(text: str) -> Tuple[str, float]:
    """Parse ``name=value`` as typed on the command line."""
    if '=' not in text:
        raise ValueError(f"parameter override must be name=value, got {text!r}")
    key, raw = text.split('=', 1)
    key = key.strip()
    try:
        return key, float(raw)
    except ValueError as exc:
        raise ValueError(f"parameter {key!r} needs a numeric value, got {raw!r}") from exc


__all__ = ['UnitType', 'ParamOption', 'ParamDef', 'ParamSchema', 'parse_assignment']
