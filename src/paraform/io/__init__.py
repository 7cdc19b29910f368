"""Mesh file I/O for paraform."""

from .export import export_glb, export_stl
from .gltf import write_glb
from .stl import read_stl, write_stl

__all__ = ['write_stl', 'read_stl', 'write_glb', 'export_stl', 'export_glb']
