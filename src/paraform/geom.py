## foundational computational geometry for paraform
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## Copyright (c) 2025 paraform contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""foundational computational geometry for **paraform**

====================
OVERVIEW
====================

The paraform.geom module provides the vector core and the planar
primitives that the profile builders are assembled from: line-line
and line-circle intersection, inside testing, winding, and rounded
(filleted) polygon construction.

vectors and points
==================

Vectors are lists of four numbers, ``[x,y,z,w]``.  Points lie in the
w=1 hyperplane, direction vectors (normals) in w=0.  Planar geometry
lives in the z=0 plane, and the XY-suffixed functions ignore z.

``vect()`` makes a vector out of just about any plausible set of
arguments, ``point()`` does the same but insists on w > 0: ::

   p1 = point(0,0)
   p2 = point(2.0,-2.0,5.0)
   n  = vect(0,0,1,0)

degenerate inputs
=================

The planar primitives never raise on degenerate geometry.  Each has a
documented deterministic fallback: parallel lines intersect at the
midpoint of their anchor points, a ray that misses a circle yields
``None``, and a fillet that cannot be realised leaves the sharp vertex
in place.  Callers driven by interactive sliders depend on this.

loops
=====

A loop is a list of points with no repeated closing point.  Outer
boundaries wind counter-clockwise (positive signed area), holes wind
clockwise.
"""

from math import *
import copy

## constants
epsilon=0.000005
pi2 = 2.0*pi

## determinant magnitude below which two lines are treated as parallel
PARALLEL_TOL = 1e-10

## fillet radii at or below this are emitted as sharp vertices
MIN_FILLET_RADIUS = 0.001

## fraction of the geometric maximum a fillet radius may reach
FILLET_CLAMP = 0.9

## CCW sweeps larger than this are treated as a flat (colinear) vertex
MAX_FILLET_SWEEP = pi*1.95

## operations on scalars
## -----------------------

def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

def close(a,b):
    """ are two scalars the same within epsilon
    """
    return abs(a-b) < epsilon


## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif isinstance(a,(tuple,list)):
        for i in range(min(4,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

def vclose(a,b):
    """ are two vectors the same within epsilon"""
    return close(mag(sub(a,b)),0)

def isvect(x):
    """
    check to see if argument is a proper vector for our purposes
    """
    return isinstance(x,list) and len(x) == 4 and isgoodnum(x[0]) and isgoodnum(x[1]) and isgoodnum(x[2]) and isgoodnum(x[3])

## R^3 -> R^3 functions: ignore w component
## ------------------------------------------------
def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ''a'' times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

def cross(a,b):
    """Compute the cross product of a x b, assuming that both fall into
    the w=1 hyperplane
    """
    return [ a[1]*b[2] - a[2]*b[1],
             a[2]*b[0] - a[0]*b[2],
             a[0]*b[1] - a[1]*b[0],
             1.0 ]

def scale4(a,c):
    """ 4 vector ``a`` times scalar ``c``"""
    return [a[0]*c,a[1]*c,a[2]*c,a[3]*c]

## R^3 -> R functions -- ignore w component
## ----------------------------------------
def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

deepcopy = copy.deepcopy

def vstr(a):
    """ format a vector or list of vectors compactly, falling back to
    ``str()`` for anything else
    """
    if isvect(a):
        if abs(a[3]-1.0) > epsilon:
            return "[{}, {}, {}, {}]".format(a[0],a[1],a[2],a[3])
        elif abs(a[2]) > epsilon:
            return "[{}, {}, {}]".format(a[0],a[1],a[2])
        else:
            return "[{}, {}]".format(a[0],a[1])
    if isinstance(a,list) and a and all(isvect(x) for x in a):
        return "[" + ", ".join(vstr(x) for x in a) + "]"
    return str(a)


## points
## --------------------

def point(x=False,y=False,z=False,w=False):
    """Point creation from point or scalars"""
    if ispoint(x):
        return deepcopy(x)
    if isinstance(x,(tuple,list)) and not isinstance(x,bool):
        return point(*[float(c) for c in x[:3]])
    r = [0,0,0,1]
    if isgoodnum(x):
        r[0]=x
        if isgoodnum(y):
            r[1]=y
            if isgoodnum(z):
                r[2]=z
                if isgoodnum(w):
                    r[3]=w
    if r[3] > 0:
        return r
    else:
        raise ValueError('bad w argument to point()')

def ispoint(x):
    """ is it a point?"""
    return isvect(x) and x[3] > 0.0

def isfinitepoint(p):
    """ are the x, y and z coordinates of ``p`` all finite?"""
    return isfinite(p[0]) and isfinite(p[1]) and isfinite(p[2])

def polybbox(a):
    """ compute the 3D bounding box of a list of points """
    if len(a) == 0:
        raise ValueError('empty point list passed to polybbox')
    xs = [p[0] for p in a]
    ys = [p[1] for p in a]
    zs = [p[2] if len(p) > 2 else 0.0 for p in a]
    return [point(min(xs),min(ys),min(zs)),point(max(xs),max(ys),max(zs))]


## planar intersection primitives
## ------------------------------

def lineLineIntersect(p1,d1,p2,d2):
    """Intersect the infinite line through ``p1`` with direction ``d1``
    with the infinite line through ``p2`` with direction ``d2``.

    When the lines are parallel (determinant magnitude below
    ``PARALLEL_TOL``) the midpoint of ``p1`` and ``p2`` is returned.
    This is an approximation callers must tolerate for near-parallel
    edges; it is never an error.
    """
    det = d1[0]*d2[1] - d1[1]*d2[0]
    if abs(det) < PARALLEL_TOL:
        return point((p1[0]+p2[0])/2.0,(p1[1]+p2[1])/2.0)
    dx = p2[0]-p1[0]
    dy = p2[1]-p1[1]
    t = (dx*d2[1] - dy*d2[0])/det
    return point(p1[0]+t*d1[0],p1[1]+t*d1[1])

def lineCircleIntersect(origin,direction,center,radius):
    """Intersect the ray ``origin + t*direction`` with the circle of
    ``radius`` about ``center``.

    Returns ``None`` when there is no real intersection.  Of the two
    roots, the one at positive ``t`` along the ray is preferred; if the
    nearer root is non-positive the farther one is used.
    """
    ex = origin[0]-center[0]
    ey = origin[1]-center[1]
    a = direction[0]*direction[0] + direction[1]*direction[1]
    if a < PARALLEL_TOL:
        return None
    b = 2.0*(ex*direction[0] + ey*direction[1])
    c = ex*ex + ey*ey - radius*radius
    disc = b*b - 4.0*a*c
    if disc < 0:
        return None
    sq = sqrt(disc)
    t1 = (-b - sq)/(2.0*a)
    t2 = (-b + sq)/(2.0*a)
    t = t1 if t1 > 0 else t2
    return point(origin[0]+t*direction[0],origin[1]+t*direction[1])


## inside testing and winding
## --------------------------

def isInsideTriangleXY(p,tri):
    """Sign-consistency inside test of point ``p`` against the triangle
    ``tri`` (three points, either winding).  Points on the boundary
    count as inside.  This is the cheap cull used before generating
    infill cell geometry.
    """
    v0,v1,v2 = tri[0],tri[1],tri[2]
    d1 = (p[0]-v1[0])*(v0[1]-v1[1]) - (v0[0]-v1[0])*(p[1]-v1[1])
    d2 = (p[0]-v2[0])*(v1[1]-v2[1]) - (v1[0]-v2[0])*(p[1]-v2[1])
    d3 = (p[0]-v0[0])*(v2[1]-v0[1]) - (v2[0]-v0[0])*(p[1]-v0[1])
    hasNeg = d1 < 0 or d2 < 0 or d3 < 0
    hasPos = d1 > 0 or d2 > 0 or d3 > 0
    return not (hasNeg and hasPos)

def isInsidePolyXY(poly,p):
    """even-odd crossing test of point ``p`` against the simple polygon
    ``poly``"""
    inside = False
    n = len(poly)
    j = n-1
    for i in range(n):
        xi,yi = poly[i][0],poly[i][1]
        xj,yj = poly[j][0],poly[j][1]
        if (yi > p[1]) != (yj > p[1]):
            xcross = (xj-xi)*(p[1]-yi)/(yj-yi) + xi
            if p[0] < xcross:
                inside = not inside
        j = i
    return inside

def isInsideRegionXY(poly,p):
    """dispatch to the triangle test for three-vertex regions, the
    crossing test otherwise"""
    if len(poly) == 3:
        return isInsideTriangleXY(p,poly)
    return isInsidePolyXY(poly,p)

def signedAreaXY(loop):
    """ signed area of a loop, positive for counter-clockwise winding"""
    total = 0.0
    n = len(loop)
    for i in range(n):
        x0,y0 = loop[i][0],loop[i][1]
        x1,y1 = loop[(i+1)%n][0],loop[(i+1)%n][1]
        total += x0*y1 - x1*y0
    return total/2.0

def isCCW(loop):
    return signedAreaXY(loop) > 0.0

def centroidXY(loop):
    """ vertex centroid (not area centroid) of a loop"""
    n = len(loop)
    return point(sum(p[0] for p in loop)/n,sum(p[1] for p in loop)/n)

def _orient(a,b,c):
    v = (b[0]-a[0])*(c[1]-a[1]) - (b[1]-a[1])*(c[0]-a[0])
    if abs(v) < epsilon*epsilon:
        return 0
    return 1 if v > 0 else -1

def _onSegment(a,b,p):
    return (min(a[0],b[0]) - epsilon <= p[0] <= max(a[0],b[0]) + epsilon and
            min(a[1],b[1]) - epsilon <= p[1] <= max(a[1],b[1]) + epsilon)

def segmentsIntersectXY(a,b,c,d):
    """ do closed segments ``ab`` and ``cd`` touch or cross?"""
    o1 = _orient(a,b,c)
    o2 = _orient(a,b,d)
    o3 = _orient(c,d,a)
    o4 = _orient(c,d,b)
    if o1 != o2 and o3 != o4:
        return True
    if o1 == 0 and _onSegment(a,b,c):
        return True
    if o2 == 0 and _onSegment(a,b,d):
        return True
    if o3 == 0 and _onSegment(c,d,a):
        return True
    if o4 == 0 and _onSegment(c,d,b):
        return True
    return False

def isSimplePolyXY(loop):
    """ True if no two non-adjacent edges of ``loop`` intersect"""
    n = len(loop)
    if n < 3:
        return False
    for i in range(n):
        a,b = loop[i],loop[(i+1)%n]
        for j in range(i+1,n):
            if j == i or (j+1)%n == i or j == (i+1)%n:
                continue
            c,d = loop[j],loop[(j+1)%n]
            if segmentsIntersectXY(a,b,c,d):
                return False
    return True

def offsetFromCentroidXY(loop,offset):
    """Move every vertex of ``loop`` radially away from the vertex
    centroid by ``offset`` (toward it when ``offset`` is negative).
    For the star-shaped regions used as infill boundaries this grows
    or shrinks the region while preserving its vertex count.
    """
    c = centroidXY(loop)
    result = []
    for p in loop:
        dx = p[0]-c[0]
        dy = p[1]-c[1]
        d = sqrt(dx*dx + dy*dy)
        if d < epsilon:
            result.append(point(p[0],p[1]))
            continue
        result.append(point(p[0] + dx*offset/d,p[1] + dy*offset/d))
    return result


## arcs and fillets
## ----------------

def arcPointsXY(center,radius,start,end,segments):
    """sample ``segments+1`` points on the arc from angle ``start`` to
    ``end`` (radians, sweep sign taken from ``end - start``)"""
    pts = []
    for s in range(segments+1):
        a = start + (end-start)*(s/segments)
        pts.append(point(center[0] + radius*cos(a),center[1] + radius*sin(a)))
    return pts

def circleLoopXY(center,radius,segments,ccw=True):
    """closed circle loop of ``segments`` points without a repeated
    closing point"""
    pts = []
    for i in range(segments):
        a = pi2*i/segments
        if not ccw:
            a = -a
        pts.append(point(center[0] + radius*cos(a),center[1] + radius*sin(a)))
    return pts

def filletArc(prev,curr,nxt,radius,segments):
    """Replace the vertex ``curr`` (between ``prev`` and ``nxt``) with a
    fillet arc of ``radius``, returned as a list of points.

    The radius is clamped to ``FILLET_CLAMP`` of the largest radius
    whose tangent points still lie on both adjacent edges, so the arc
    never overshoots the edges it replaces.  The arc sweeps counter
    clockwise about its centre, as required for a CCW outer contour.
    A radius at or below ``MIN_FILLET_RADIUS``, a degenerate edge, or a
    degenerate bisector (colinear edges) leaves the sharp vertex.
    """
    sharp = [point(curr[0],curr[1])]
    if radius <= MIN_FILLET_RADIUS:
        return sharp

    dpx = prev[0]-curr[0]
    dpy = prev[1]-curr[1]
    dnx = nxt[0]-curr[0]
    dny = nxt[1]-curr[1]
    dpLen = sqrt(dpx*dpx + dpy*dpy)
    dnLen = sqrt(dnx*dnx + dny*dny)
    if dpLen < epsilon or dnLen < epsilon:
        return sharp

    dpnx = dpx/dpLen
    dpny = dpy/dpLen
    dnnx = dnx/dnLen
    dnny = dny/dnLen

    bisx = dpnx + dnnx
    bisy = dpny + dnny
    bisLen = sqrt(bisx*bisx + bisy*bisy)
    if bisLen < PARALLEL_TOL:
        return sharp

    cosang = max(-1.0,min(1.0,dpnx*dnnx + dpny*dnny))
    half = acos(cosang)/2.0
    if half < PARALLEL_TOL:
        return sharp

    maxR = min(dpLen,dnLen)*tan(half)*FILLET_CLAMP
    r = min(radius,maxR)

    tanDist = r/tan(half)
    tpx = curr[0] + tanDist*dpnx
    tpy = curr[1] + tanDist*dpny
    tnx = curr[0] + tanDist*dnnx
    tny = curr[1] + tanDist*dnny

    inset = r/sin(half)
    cx = curr[0] + inset*bisx/bisLen
    cy = curr[1] + inset*bisy/bisLen

    start = atan2(tpy-cy,tpx-cx)
    end = atan2(tny-cy,tnx-cx)
    sweep = end - start
    if sweep <= 0:
        sweep += pi2
    if sweep > MAX_FILLET_SWEEP:
        sweep = 0.0

    return arcPointsXY(point(cx,cy),r,start,start+sweep,segments)

def roundedPolygonPath(vertices,segments=8):
    """Build a rounded polygon outline from ``vertices``, a sequence of
    ``(x, y, r)`` triples in counter-clockwise order, where ``r`` is the
    fillet radius requested at that vertex.  Each filleted vertex
    contributes ``segments+1`` points, sharp vertices one point.
    """
    n = len(vertices)
    pts = []
    for i in range(n):
        prev = vertices[(i+n-1)%n]
        curr = vertices[i]
        nxt = vertices[(i+1)%n]
        pts.extend(filletArc(prev,curr,nxt,curr[2],segments))
    return pts
