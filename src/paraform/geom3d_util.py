## geom3d_util, solid primitives and profile extrusion for paraform
## started from the yapCAD geom3d_util module by Richard W. DeVaul

"""Solid primitives and profile extrusion.

Every constructor returns a single-surface closed solid, centred on the
origin with its main axis along z, and records its call in the solid's
construction list.  Shape families position the results with
``paraform.geom3d.transformsolid``.

``extrude`` is the workhorse: it sweeps a :class:`paraform.profile.Profile`
along z with an optional quarter-round bevel on both faces.  The
round-bodied primitives (``conic``, ``capsule``, ``tube``) are lathes of
an ``(r, z)`` outline.
"""

from paraform.geom import *
from paraform.geom3d import boxsolid, computeVertexNormals
from paraform.profile import Profile
from paraform.triangulator import triangulate_loops

## miter vectors longer than this (in units of the offset) are clamped
MAX_MITER = 3.0

## corner radius of the core rectangle of a rounded box, as a
## fraction of the edge radius
ROUNDEDBOX_CORE = 0.05


def _arc_segments(segments):
    if segments is not None:
        return int(segments)
    from paraform.config import load_settings
    return load_settings().arc_segments

def _finish(verts,faces,call):
    surf = computeVertexNormals(['surface',verts,[None]*len(verts),faces,[],[]])
    return ['solid',[surf],[],['procedure',call]]

# make a rectangular prism, return a solid
def prism(length,width,height,center=point(0,0,0)):
    """make an axis-aligned box solid of the given dimensions centred on
    ``center``"""
    call = f"paraform.geom3d_util.prism({length},{width},{height},{vstr(center)})"
    if length <= 0 or width <= 0 or height <= 0:
        raise ValueError('bad dimensions passed to prism')
    h = [length/2.0,width/2.0,height/2.0]
    lo = point(center[0]-h[0],center[1]-h[1],center[2]-h[2])
    hi = point(center[0]+h[0],center[1]+h[1],center[2]+h[2])
    return boxsolid([lo,hi],['procedure',call])


## lathes
## ------

def lathe(profile_rz,segments=None,call=None):
    """Revolve an ``(r, z)`` outline about the z axis.

    The outline is closed implicitly.  Outlines whose first and last
    points lie on the axis (``r == 0``) produce a solid of revolution
    with poles; outlines clear of the axis produce a ring.  Winding is
    normalised so faces point outward whichever way the outline runs.
    Vertices that land on the axis are welded, so the result is closed.
    """
    segments = _arc_segments(segments)
    if segments < 3:
        raise ValueError('lathe needs at least three segments')
    prof = [(max(0.0,float(p[0])),float(p[1])) for p in profile_rz]
    if len(prof) < 2:
        raise ValueError('lathe needs at least two outline points')
    if signedAreaXY(prof) < 0:
        prof.reverse()
    if call is None:
        call = f"paraform.geom3d_util.lathe({len(prof)} pts,{segments})"

    closed = not (prof[0][0] <= epsilon and prof[-1][0] <= epsilon)
    verts = []
    keys = {}
    grid = []
    for i in range(segments):
        a = pi2*i/segments
        ca,sa = cos(a),sin(a)
        row = []
        for r,z in prof:
            p = (r*ca,r*sa,z) if r > epsilon else (0.0,0.0,z)
            k = (round(p[0],9),round(p[1],9),round(p[2],9))
            idx = keys.get(k)
            if idx is None:
                idx = len(verts)
                keys[k] = idx
                verts.append(point(p[0],p[1],p[2]))
            row.append(idx)
        grid.append(row)

    n = len(prof)
    spans = n if closed else n-1
    faces = []
    for i in range(segments):
        i1 = (i+1)%segments
        for j in range(spans):
            j1 = (j+1)%n
            for f in ([grid[i][j],grid[i1][j],grid[i1][j1]],
                      [grid[i][j],grid[i1][j1],grid[i][j1]]):
                if len(set(f)) == 3:
                    faces.append(f)
    return _finish(verts,faces,call)

def conic(baser,topr,height,segments=None):
    """Make a cylinder (``baser == topr``), conic frustum or cone along
    z, centred on the origin."""
    call = f"paraform.geom3d_util.conic({baser},{topr},{height},{segments})"
    if baser < 0 or topr < 0 or (baser < epsilon and topr < epsilon):
        raise ValueError('bad radii passed to conic')
    if height <= epsilon:
        raise ValueError('bad height passed to conic')
    h2 = height/2.0
    prof = [(0.0,-h2)]
    if baser > epsilon:
        prof.append((baser,-h2))
    if topr > epsilon:
        prof.append((topr,h2))
    prof.append((0.0,h2))
    return lathe(prof,segments,call)

def capsule(radius,length,capsegs=6,radial=None):
    """Cylinder of ``radius`` and straight ``length`` along z with
    hemispherical caps; the total length is ``length + 2*radius``.
    ``capsegs`` is the number of arc segments in each quarter round."""
    call = f"paraform.geom3d_util.capsule({radius},{length},{capsegs},{radial})"
    if radius <= epsilon or length < 0:
        raise ValueError('bad dimensions passed to capsule')
    capsegs = max(1,int(capsegs))
    h2 = length/2.0
    prof = []
    for k in range(capsegs+1):
        a = -pi/2.0 + (pi/2.0)*k/capsegs
        prof.append((radius*cos(a),-h2+radius*sin(a)))
    for k in range(capsegs+1):
        a = (pi/2.0)*k/capsegs
        prof.append((radius*cos(a),h2+radius*sin(a)))
    prof[0] = (0.0,prof[0][1])
    prof[-1] = (0.0,prof[-1][1])
    if length <= epsilon:
        # equator points coincide
        del prof[capsegs+1]
    return lathe(prof,radial,call)

def tube(outer_radius,inner_radius,length,segments=None):
    """Open-ended tube along z, centred on the origin."""
    call = f"paraform.geom3d_util.tube({outer_radius},{inner_radius},{length},{segments})"
    if inner_radius <= epsilon or outer_radius <= inner_radius + epsilon:
        raise ValueError('bad radii passed to tube')
    if length <= epsilon:
        raise ValueError('bad length passed to tube')
    h2 = length/2.0
    prof = [(inner_radius,-h2),(outer_radius,-h2),
            (outer_radius,h2),(inner_radius,h2)]
    return lathe(prof,segments,call)


## extrusion
## ---------

def _miters(loop):
    """per-vertex offset directions: the right-hand normals of the two
    adjacent edges, averaged and stretched so that both edges move by
    one unit.  For a CCW outer loop this points out of the profile, for
    a CW hole it points into the hole."""
    n = len(loop)
    result = []
    for i in range(n):
        p0 = loop[(i+n-1)%n]
        p1 = loop[i]
        p2 = loop[(i+1)%n]
        e1 = (p1[0]-p0[0],p1[1]-p0[1])
        e2 = (p2[0]-p1[0],p2[1]-p1[1])
        l1 = sqrt(e1[0]*e1[0]+e1[1]*e1[1])
        l2 = sqrt(e2[0]*e2[0]+e2[1]*e2[1])
        n1 = (e1[1]/l1,-e1[0]/l1) if l1 > epsilon else None
        n2 = (e2[1]/l2,-e2[0]/l2) if l2 > epsilon else None
        if n1 is None:
            n1 = n2
        if n2 is None:
            n2 = n1
        if n1 is None:
            result.append((0.0,0.0))
            continue
        mx = n1[0]+n2[0]
        my = n1[1]+n2[1]
        ml = sqrt(mx*mx+my*my)
        if ml < epsilon:
            # hairpin vertex
            result.append(n1)
            continue
        mx /= ml
        my /= ml
        c = mx*n1[0]+my*n1[1]
        s = 1.0/c if c > 1.0/MAX_MITER else MAX_MITER
        result.append((mx*s,my*s))
    return result

def _bevel_layers(depth,bevel_size,bevel_thickness,bevel_segments):
    """``(z, offset)`` pairs from bottom cap to top cap"""
    if bevel_size <= 0 or bevel_thickness <= 0 or bevel_segments < 1:
        return [(0.0,0.0),(depth,0.0)]
    layers = []
    for k in range(bevel_segments+1):
        t = k/bevel_segments
        layers.append((-bevel_thickness*cos(t*pi/2.0),bevel_size*sin(t*pi/2.0)))
    for k in range(bevel_segments,-1,-1):
        t = k/bevel_segments
        layers.append((depth+bevel_thickness*cos(t*pi/2.0),bevel_size*sin(t*pi/2.0)))
    return layers

def extrude(profile,depth,bevel_size=0.0,bevel_thickness=None,bevel_segments=3):
    """Sweep ``profile`` along +z by ``depth`` and centre the result on
    z=0.

    With a positive ``bevel_size`` both faces get a quarter-round bevel
    of ``bevel_segments`` steps (one step is a chamfer).  The cap faces
    keep the profile outline and sit ``bevel_thickness`` (default
    ``bevel_size``) beyond the nominal faces; the body between them is
    the profile grown by ``bevel_size``.  The centring translation is
    ``-depth/2`` whatever the bevel, because the bevel is symmetric.

    Raises ``ValueError`` for a non-positive depth or an empty profile.
    Geometric validity of the profile is the caller's business; see
    :meth:`paraform.profile.Profile.validate`.
    """
    if not isinstance(profile,Profile):
        profile = Profile(profile)
    if not (depth > epsilon):
        raise ValueError('bad depth passed to extrude: {}'.format(depth))
    if bevel_thickness is None:
        bevel_thickness = bevel_size
    bevel_segments = int(bevel_segments)
    call = "paraform.geom3d_util.extrude({!r},{},{},{},{})".format(
        profile,depth,bevel_size,bevel_thickness,bevel_segments)

    outer = profile.outer
    holes = [h for h in profile.holes if len(h) >= 3]
    if len(outer) < 3:
        raise ValueError('empty profile passed to extrude')

    points,tris = triangulate_loops(outer,holes)
    loops = [outer] + holes
    N = sum(len(l) for l in loops)
    if len(points) != N:
        raise ValueError('profile loops contain repeated points')

    layers = _bevel_layers(depth,bevel_size,bevel_thickness,bevel_segments)
    miters = [_miters(l) for l in loops]
    zoff = -depth/2.0

    verts = []
    for z,off in layers:
        for loop,mit in zip(loops,miters):
            for p,m in zip(loop,mit):
                verts.append(point(p[0]+off*m[0],p[1]+off*m[1],z+zoff))

    faces = []
    starts = []
    s = 0
    for l in loops:
        starts.append(s)
        s += len(l)
    for L in range(len(layers)-1):
        lo = L*N
        hi = (L+1)*N
        for loop,start in zip(loops,starts):
            n = len(loop)
            for i in range(n):
                a0 = lo+start+i
                a1 = lo+start+(i+1)%n
                b0 = hi+start+i
                b1 = hi+start+(i+1)%n
                faces.append([a0,a1,b1])
                faces.append([a0,b1,b0])

    top = (len(layers)-1)*N
    for a,b,c in tris:
        area = (points[b][0]-points[a][0])*(points[c][1]-points[a][1]) - \
            (points[c][0]-points[a][0])*(points[b][1]-points[a][1])
        if abs(area) < epsilon*epsilon:
            continue
        if area > 0:
            faces.append([top+a,top+b,top+c])
            faces.append([a,c,b])
        else:
            faces.append([top+a,top+c,top+b])
            faces.append([a,b,c])

    return _finish(verts,faces,call)

def roundedbox(length,width,height,radius,segments=4):
    """Box with every edge rounded by ``radius`` (clamped to just under
    half the smallest dimension), built as a bevelled extrusion of a
    rounded rectangle."""
    call = f"paraform.geom3d_util.roundedbox({length},{width},{height},{radius},{segments})"
    if length <= 0 or width <= 0 or height <= 0:
        raise ValueError('bad dimensions passed to roundedbox')
    r = min(radius,0.49*min(length,width,height))
    if r <= MIN_FILLET_RADIUS:
        return prism(length,width,height)
    core = r*ROUNDEDBOX_CORE
    l2 = length/2.0 - r
    w2 = width/2.0 - r
    corners = [(-l2,-w2,core),(l2,-w2,core),(l2,w2,core),(-l2,w2,core)]
    prof = Profile(roundedPolygonPath(corners,segments))
    sld = extrude(prof,height-2.0*r,bevel_size=r,bevel_thickness=r,
                  bevel_segments=segments)
    sld[3] = ['procedure',call]
    return sld
