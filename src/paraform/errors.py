"""Exception hierarchy for paraform.

Geometry helpers keep raising plain ``ValueError`` for malformed
arguments.  The classes here mark failures that callers are expected to
catch and turn into a fallback (a bounding-box placeholder, a missing
infill) rather than letting them reach the viewer.
"""

from __future__ import annotations


class ParaformError(Exception):
    """Base class for paraform-specific failures."""


class ProfileError(ParaformError, ValueError):
    """A planar profile is malformed (non-finite, self-intersecting,
    holes escaping the outer boundary, ...)."""


class CSGError(ParaformError, RuntimeError):
    """A boolean evaluation could not produce a usable solid."""

    def __init__(self, message: str, *, step: int | None = None,
                 operation: str | None = None):
        super().__init__(message)
        self.step = step
        self.operation = operation


class ExportError(ParaformError):
    """An assembly could not be written to the requested format."""


__all__ = ['ParaformError', 'ProfileError', 'CSGError', 'ExportError']
