# -*- coding: utf-8 -*-
"""paraform: parametric shape families, profile extrusion, CSG and infill
for 3D-printable parts."""

from importlib.metadata import PackageNotFoundError, version


try:
    __version__ = version("paraform")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"
