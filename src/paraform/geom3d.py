## geom3d, triangulated surface and solid support for paraform
## started from the yapCAD geom3d module by Richard W. DeVaul

"""
==============================================================
geom3d -- functional triangulated solids for paraform
==============================================================

``paraform.geom`` covers points, vectors and planar loops.  This module
adds explicit, triangulated two-dimensional surfaces and the closed
solids bounded by them, plus the handful of whole-solid operations the
shape families need: rigid and scaling transforms, merging, closure and
volume checks, normal recomputation and the bounding-box placeholder
used when a build fails.

Structures
==========

surfaces
--------

``surface = ['surface',vertices,normals,faces,boundary,holes]``, where:

           ``vertices`` is a list of ``paraform.geom`` points,

           ``normals`` is a list of direction vectors (w=0) of the same
           length as ``vertices``,

           ``faces`` is a list of index triples, wound counter-clockwise
           when seen from outside the solid,

           ``boundary`` is a list of indices for the vertices that form
           the outer perimeter of the surface, or [] if the surface is
           closed,

           ``holes`` is a (potentially empty) list of index lists, one
           per hole perimeter.

An optional seventh element carries a metadata dictionary.

solids
------

``solid = ['solid', surfaces, material, construction]``, where:

           ``surfaces`` is a list of surfaces that together enclose a
           volume.  Each surface acts as one material group; the CSG
           evaluator collapses them into one when it finalises a result,

           ``material`` is a (possibly empty) list of material data,

           ``construction`` is a (possibly empty) list recording how the
           solid was made, e.g. ``['procedure', 'extrude(...)']``.

Empty solids are legal; they are the natural result of an
intersection of disjoint operands.

Example usage::

    from paraform.geom3d_util import prism
    from paraform.geom3d import issolidclosed, volumeof

    cube = prism(2, 2, 2)
    if issolidclosed(cube):
        vol = volumeof(cube)  # 8.0
"""

from paraform.geom import *
import paraform.xform as xform

def surface(*args):
    """given a surface or a list of surface parameters as arguments,
    return a conforming surface representation.  Checks arguments
    for data-type correctness.
    """
    if len(args) == 0:
        return ['surface',[],[],[],[],[] ]
    if len(args) == 1:
        if issurface(args[0],fast=False):
            return deepcopy(args[0])
    if len(args) >= 3 and len(args) <= 6:
        vrts = args[0]
        nrms = args[1]
        facs = args[2]
        bndr = []
        hle = []
        metadata = None

        if not (isinstance(vrts,list) and isinstance(nrms,list)
                and isinstance(facs,list) and len(vrts) == len(nrms)):
            raise ValueError('bad arguments to surface')

        for item in args[3:]:
            if isinstance(item, dict):
                if metadata is not None:
                    raise ValueError('multiple metadata dictionaries passed to surface')
                metadata = item
            elif isinstance(item, list):
                if not bndr:
                    bndr = item
                elif not hle:
                    hle = item
                else:
                    raise ValueError('too many list arguments passed to surface')
            else:
                raise ValueError('bad arguments to surface')

        surf = ['surface',vrts,nrms,facs,bndr,hle]
        if metadata is not None:
            surf.append(metadata)
        if issurface(surf,fast=False):
            return surf
    raise ValueError('bad arguments to surface')

def issurface(s,fast=True):
    """
    Check to see if ``s`` is a valid surface.
    """
    if not isinstance(s,list) or len(s) not in (6,7) or s[0] != 'surface':
        return False
    if fast:
        return True

    verts = s[1]
    norms = s[2]
    faces = s[3]
    if not (isinstance(verts,list) and isinstance(norms,list)
            and len(verts) == len(norms)):
        return False
    n = len(verts)
    for face in faces:
        if len(face) != 3:
            return False
        for i in face:
            if not isinstance(i,int) or i < 0 or i >= n:
                return False
    for i in s[4]:
        if not isinstance(i,int) or i < 0 or i >= n:
            return False
    if len(s) == 7 and not isinstance(s[6], dict):
        return False
    return True

def surfacebbox(s):
    """return bounding box for surface"""
    if not issurface(s):
        raise ValueError('bad surface passed to surfacebbox')
    return polybbox(s[1])

def translatesurface(s,delta):
    """ return a translated copy of the surface"""
    s2 = deepcopy(s)
    if close(mag(delta),0.0):
        return s2
    for i in range(len(s2[1])):
        s2[1][i] = add(s2[1][i],delta)
    return s2

def transformsurface(s,mat):
    """return a copy of the surface with vertices transformed by ``mat``.
    Normals go through the inverse transpose and are renormalised;
    mirroring transforms also reverse the face winding so faces keep
    pointing outward."""
    nmat = mat.normalmatrix()
    s2 = deepcopy(s)
    verts = []
    for v in s[1]:
        p = mat.mul([v[0],v[1],v[2],1.0])
        verts.append([p[0],p[1],p[2],1.0])
    norms = []
    for n in s[2]:
        m = nmat.mul([n[0],n[1],n[2],0.0])
        l = mag(m)
        if l > epsilon:
            norms.append([m[0]/l,m[1]/l,m[2]/l,0.0])
        else:
            norms.append([0.0,0.0,0.0,0.0])
    s2[1] = verts
    s2[2] = norms
    if mat.determinant3() < 0:
        s2[3] = [[f[0],f[2],f[1]] for f in s2[3]]
    return s2

def mergesurfaces(surfs):
    """concatenate surfaces into a single surface, offsetting face
    indices.  Boundary and hole data is dropped, as is metadata."""
    verts = []
    norms = []
    faces = []
    for s in surfs:
        base = len(verts)
        verts.extend(deepcopy(s[1]))
        norms.extend(deepcopy(s[2]))
        faces.extend([[f[0]+base,f[1]+base,f[2]+base] for f in s[3]])
    return ['surface',verts,norms,faces,[],[]]

def computeVertexNormals(s):
    """Recompute the per-vertex normals of surface ``s`` in place from
    its faces, weighting each face normal by its area.  Vertices that
    no face references get a zero normal.  Returns ``s``."""
    verts = s[1]
    acc = [[0.0,0.0,0.0] for _ in verts]
    for f in s[3]:
        p0,p1,p2 = verts[f[0]],verts[f[1]],verts[f[2]]
        # unnormalised cross product is area weighted
        c = cross(sub(p1,p0),sub(p2,p0))
        for i in f:
            acc[i][0] += c[0]
            acc[i][1] += c[1]
            acc[i][2] += c[2]
    norms = []
    for a in acc:
        l = sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])
        if l > epsilon*epsilon:
            norms.append([a[0]/l,a[1]/l,a[2]/l,0.0])
        else:
            norms.append([0.0,0.0,0.0,0.0])
    s[2] = norms
    return s


def solid(*args):
    """given a solid or a list of solid parameters as arguments,
    return a conforming solid representation.  Checks arguments
    for data-type correctness.
    """
    if len(args) == 0 or (len(args) == 1 and args[0] == []):
        # empty solid, which is legal because we must support
        # empty results of CSG operations
        return ['solid',[],[],[] ]

    if len(args) == 1 and issolid(args[0],fast=False):
        return deepcopy(args[0])

    if len(args) >= 1 and len(args) <= 4:
        if not isinstance(args[0],list):
            raise ValueError('bad arguments to solid')
        for srf in args[0]:
            if not issurface(srf):
                raise ValueError('bad arguments to solid')

        surfaces = args[0]
        material = []
        construction = []
        metadata = None

        for item in args[1:]:
            if isinstance(item, dict):
                if metadata is not None:
                    raise ValueError('multiple metadata dictionaries passed to solid')
                metadata = item
            elif isinstance(item, list):
                if material == []:
                    material = item
                elif construction == []:
                    construction = item
                else:
                    raise ValueError('too many list arguments passed to solid')
            else:
                raise ValueError('bad arguments to solid')

        sld = ['solid', surfaces, material, construction]
        if metadata is not None:
            sld.append(metadata)
        return sld

    raise ValueError('bad arguments to solid')

def issolid(s,fast=True):
    """
    Check to see if ``s`` is a solid.  NOTE: this function only determines
    if the data structure is correct, it does not verify that the collection
    of surfaces completely bounds a volume of space without holes
    """
    if not isinstance(s,list) or len(s) not in (4,5) or s[0] != 'solid':
        return False
    if fast:
        return True
    for surf in s[1]:
        if not issurface(surf,fast=False):
            return False
    if not (isinstance(s[2],list) and isinstance(s[3],list)):
        return False
    if len(s) == 5 and not isinstance(s[4], dict):
        return False
    return True

def isemptysolid(s):
    return issolid(s) and all(len(surf[3]) == 0 for surf in s[1])

def solidbbox(sld):
    if not issolid(sld):
        raise ValueError('bad argument to solidbbox')

    box = []
    for surf in sld[1]:
        if not surf[1]:
            continue
        sb = surfacebbox(surf)
        if not box:
            box = sb
        else:
            box = [point(min(box[0][0], sb[0][0]),
                         min(box[0][1], sb[0][1]),
                         min(box[0][2], sb[0][2])),
                   point(max(box[1][0], sb[1][0]),
                         max(box[1][1], sb[1][1]),
                         max(box[1][2], sb[1][2]))]
    return box

def bboxsize(box):
    """ extents ``(dx, dy, dz)`` of a bounding box, zeros for ``[]``"""
    if not box:
        return (0.0,0.0,0.0)
    return (box[1][0]-box[0][0],box[1][1]-box[0][1],box[1][2]-box[0][2])

def isfinitesolid(x):
    """ True if every vertex of solid ``x`` has finite coordinates"""
    for surf in x[1]:
        for v in surf[1]:
            if not isfinitepoint(v):
                return False
    return True

def _withsurfaces(x,surfs,construction=None):
    s2 = ['solid',surfs,deepcopy(x[2]),deepcopy(x[3])]
    if construction is not None:
        s2[3] = construction
    if len(x) == 5:
        s2.append(deepcopy(x[4]))
    return s2

def translatesolid(x,delta):
    if not issolid(x):
        raise ValueError('bad solid passed to translatesolid')
    return _withsurfaces(x,[translatesurface(s,delta) for s in x[1]])

def transformsolid(x,mat):
    if not issolid(x):
        raise ValueError('bad solid passed to transformsolid')
    if mat is None or mat.isidentity():
        return deepcopy(x)
    return _withsurfaces(x,[transformsurface(s,mat) for s in x[1]])

def rotatesolid(x,ang,cent=point(0,0,0),axis=point(0,0,1.0)):
    """rotate solid ``x`` by ``ang`` degrees about ``axis`` through ``cent``"""
    if not issolid(x):
        raise ValueError('bad solid passed to rotatesolid')
    if close(ang,0.0):
        return deepcopy(x)
    mat = xform.compose(xform.Translation(cent),
                        xform.Rotation(axis,ang),
                        xform.Translation(cent,inverse=True))
    return transformsolid(x,mat)

def scalesolid(x,sx,sy=None,sz=None,cent=point(0,0,0)):
    """non-uniformly scale solid ``x`` about ``cent``"""
    if not issolid(x):
        raise ValueError('bad solid passed to scalesolid')
    if sy is None or sz is None:
        sy = sz = sx
    if close(sx,1.0) and close(sy,1.0) and close(sz,1.0):
        return deepcopy(x)
    mat = xform.compose(xform.Translation(cent),
                        xform.Scale(sx,sy,sz),
                        xform.Translation(cent,inverse=True))
    return transformsolid(x,mat)

def mergesolids(solids,construction=None):
    """Plain geometry merge of ``solids`` into one solid whose surface
    list is the concatenation of theirs.  No boolean evaluation takes
    place, so overlapping inputs stay overlapping."""
    surfs = []
    for s in solids:
        if not issolid(s):
            raise ValueError('bad solid passed to mergesolids')
        surfs.extend(deepcopy(s[1]))
    if construction is None:
        construction = ['procedure','mergesolids({})'.format(len(solids))]
    return ['solid',surfs,[],construction]

def boxsolid(box,construction=None):
    """Axis-aligned box solid filling bounding box ``box``.  This is the
    placeholder substituted for any part whose construction fails."""
    x0,y0,z0 = box[0][0],box[0][1],box[0][2]
    x1,y1,z1 = box[1][0],box[1][1],box[1][2]
    verts = [point(x0,y0,z0),point(x1,y0,z0),point(x1,y1,z0),point(x0,y1,z0),
             point(x0,y0,z1),point(x1,y0,z1),point(x1,y1,z1),point(x0,y1,z1)]
    faces = [[0,2,1],[0,3,2],   # -z
             [4,5,6],[4,6,7],   # +z
             [0,1,5],[0,5,4],   # -y
             [2,3,7],[2,7,6],   # +y
             [1,2,6],[1,6,5],   # +x
             [0,4,7],[0,7,3]]   # -x
    surf = computeVertexNormals(['surface',verts,[None]*8,faces,[],[]])
    if construction is None:
        construction = ['procedure','boxsolid({}, {})'.format(vstr(box[0]),vstr(box[1]))]
    return ['solid',[surf],[],construction]

def _point_to_key(p):
    return (round(p[0] / epsilon) * epsilon,
            round(p[1] / epsilon) * epsilon,
            round(p[2] / epsilon) * epsilon)

def _canonical_edge_key(p1, p2):
    k1 = _point_to_key(p1)
    k2 = _point_to_key(p2)
    return (min(k1, k2), max(k1, k2))

def issolidclosed(x):
    """
    Check if solid ``x`` is topologically closed: every edge, identified
    by vertex position rather than index, is shared by exactly two faces
    across all surfaces.  Empty solids are trivially closed.

    Raises ``ValueError`` if ``x`` is not a valid solid.
    """
    if not issolid(x, fast=False):
        raise ValueError('invalid solid passed to issolidclosed')

    edge_count = {}
    for surf in x[1]:
        vertices = surf[1]
        for face in surf[3]:
            p0 = vertices[face[0]]
            p1 = vertices[face[1]]
            p2 = vertices[face[2]]
            for edge in (_canonical_edge_key(p0, p1),
                         _canonical_edge_key(p1, p2),
                         _canonical_edge_key(p2, p0)):
                edge_count[edge] = edge_count.get(edge, 0) + 1

    for count in edge_count.values():
        if count != 2:
            return False
    return True

def signedvolumeof(x):
    """divergence-theorem volume of solid ``x``; positive when faces are
    wound outward.  No closure check."""
    total_volume = 0.0
    for surf in x[1]:
        vertices = surf[1]
        for face in surf[3]:
            p0 = vertices[face[0]]
            p1 = vertices[face[1]]
            p2 = vertices[face[2]]
            total_volume += dot(p0, cross(sub(p1, p0), sub(p2, p0))) / 6.0
    return total_volume

def volumeof(x):
    """
    Volume enclosed by a closed solid, computed with the divergence
    theorem over its faces.

    Raises ``ValueError`` if ``x`` is not a valid, closed solid.
    """
    if not issolid(x, fast=False):
        raise ValueError('invalid solid passed to volumeof')
    if not issolidclosed(x):
        raise ValueError('solid must be topologically closed to compute volume')
    return abs(signedvolumeof(x))

def solid_boolean(a, b, operation, *, engine=None):
    """Combine solids ``a`` and ``b`` with ``operation`` (``'union'``,
    ``'intersection'`` or ``'difference'``) using the named boolean
    engine, or the configured default."""
    from paraform.boolean import get_engine
    from paraform.config import load_settings

    selected_raw = engine or load_settings().boolean_engine
    backend = None
    if ':' in selected_raw:
        selected, backend = selected_raw.split(':', 1)
    else:
        selected = selected_raw
    return get_engine(selected).solid_boolean(a, b, operation, backend=backend)
