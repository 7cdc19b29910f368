"""STL reading and writing for paraform surfaces and solids."""

from __future__ import annotations

import re
import struct
from typing import Iterable, List, Sequence, Tuple

from paraform.errors import ExportError
from paraform.geom import point, vect
from paraform.geom3d import computeVertexNormals, issolid, issurface
from paraform.geometry_utils import Triangle, triangles_from_mesh
from paraform.mesh import mesh_view

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')
_RECORD_SIZE = _STRUCT_TRIANGLE.size
_VERTEX_TOL = 1e-9

_NUM = r'([-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)'
_FACET = re.compile(
    r'facet\s+normal\s+' + r'\s+'.join([_NUM] * 3) + r'\s+outer\s+loop\s+'
    + r'\s+'.join([r'vertex\s+' + r'\s+'.join([_NUM] * 3)] * 3)
    + r'\s+endloop\s+endfacet', re.IGNORECASE)


def _triangles(objs) -> List[Triangle]:
    """Triangles of a surface, a solid, or a sequence of solids."""
    if issurface(objs) or issolid(objs):
        objs = [objs]
    tris: List[Triangle] = []
    for obj in objs:
        tris.extend(triangles_from_mesh(mesh_view(obj)))
    return tris


def write_stl(obj: Sequence, path_or_file, *, binary: bool = True, name: str = 'paraform') -> int:
    """Write ``obj`` (a surface, a solid, or a list of solids) to STL and
    return the number of triangles written.

    ``path_or_file`` can be a filesystem path or an open stream (binary
    for binary STL, text for ASCII).
    """
    triangles = _triangles(obj)
    if hasattr(path_or_file, 'write'):
        _emit(triangles, path_or_file, binary, name)
    else:
        try:
            with open(path_or_file, 'wb' if binary else 'w',
                      **({} if binary else {'encoding': 'ascii'})) as stream:
                _emit(triangles, stream, binary, name)
        except OSError as exc:
            raise ExportError(f'cannot write STL to {path_or_file}: {exc}') from exc
    return len(triangles)


def _emit(triangles: List[Triangle], stream, binary: bool, name: str) -> None:
    if binary:
        header = name[:_HEADER_SIZE].encode('ascii', errors='replace').ljust(_HEADER_SIZE, b' ')
        stream.write(header)
        stream.write(struct.pack('<I', len(triangles)))
        for tri in triangles:
            stream.write(_STRUCT_TRIANGLE.pack(*tri.normal, *tri.v0, *tri.v1, *tri.v2, 0))
        return

    print(f"solid {name}", file=stream)
    for tri in triangles:
        print("  facet normal {:.6e} {:.6e} {:.6e}".format(*tri.normal), file=stream)
        print("    outer loop", file=stream)
        for v in (tri.v0, tri.v1, tri.v2):
            print("      vertex {:.6e} {:.6e} {:.6e}".format(*v), file=stream)
        print("    endloop", file=stream)
        print("  endfacet", file=stream)
    print(f"endsolid {name}", file=stream)


## import
## ------

def _is_binary_stl(data: bytes) -> bool:
    """Binary STL is an 80 byte header, a triangle count and 50 bytes per
    triangle; ASCII starts with ``solid``, but so do some binary headers,
    so the size decides."""
    if len(data) < _HEADER_SIZE + 4:
        return False
    count = struct.unpack('<I', data[_HEADER_SIZE:_HEADER_SIZE + 4])[0]
    if len(data) == _HEADER_SIZE + 4 + count * _RECORD_SIZE:
        return True
    return not data[:_HEADER_SIZE].lstrip().lower().startswith(b'solid')


def _parse_binary(data: bytes) -> List[Triangle]:
    count = struct.unpack('<I', data[_HEADER_SIZE:_HEADER_SIZE + 4])[0]
    tris = []
    offset = _HEADER_SIZE + 4
    for _ in range(count):
        if offset + _RECORD_SIZE > len(data):
            raise ValueError('truncated binary STL')
        v = _STRUCT_TRIANGLE.unpack_from(data, offset)
        tris.append(Triangle(normal=v[0:3], v0=v[3:6], v1=v[6:9], v2=v[9:12]))
        offset += _RECORD_SIZE
    return tris


def _parse_ascii(text: str) -> List[Triangle]:
    tris = []
    for m in _FACET.finditer(text):
        f = [float(g) for g in m.groups()]
        tris.append(Triangle(normal=tuple(f[0:3]), v0=tuple(f[3:6]),
                             v1=tuple(f[6:9]), v2=tuple(f[9:12])))
    return tris


def _vertex_key(v: Tuple[float, float, float]) -> Tuple[int, int, int]:
    s = 1.0 / _VERTEX_TOL
    return (int(round(v[0] * s)), int(round(v[1] * s)), int(round(v[2] * s)))


def _to_solid(triangles: Iterable[Triangle]) -> list:
    """Welded single-surface solid with area weighted vertex normals."""
    verts: list = []
    index = {}
    faces = []
    for tri in triangles:
        face = []
        for v in (tri.v0, tri.v1, tri.v2):
            key = _vertex_key(v)
            if key not in index:
                index[key] = len(verts)
                verts.append(point(v[0], v[1], v[2]))
            face.append(index[key])
        if len(set(face)) == 3:
            faces.append(face)
    if not faces:
        return ['solid', [], [], ['import', 'stl']]
    surf = computeVertexNormals(['surface', verts, [vect(0, 0, 1, 0)] * len(verts), faces, [], []])
    return ['solid', [surf], [], ['import', 'stl']]


def read_stl(path_or_file) -> list:
    """Read ASCII or binary STL into a single-surface solid."""
    if hasattr(path_or_file, 'read'):
        data = path_or_file.read()
        if isinstance(data, str):
            data = data.encode('utf-8')
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()
    if _is_binary_stl(data):
        tris = _parse_binary(data)
    else:
        tris = _parse_ascii(data.decode('utf-8', errors='replace'))
    return _to_solid(tris)


__all__ = ['write_stl', 'read_stl']
