import math

import pytest

from paraform.geom import (
    circleLoopXY,
    filletArc,
    isCCW,
    isInsideTriangleXY,
    isInsidePolyXY,
    isSimplePolyXY,
    lineCircleIntersect,
    lineLineIntersect,
    offsetFromCentroidXY,
    point,
    roundedPolygonPath,
    signedAreaXY,
    vclose,
)


def test_line_line_intersect_crossing():
    p = lineLineIntersect(point(0, 0), (1, 0), point(2, -3), (0, 1))
    assert vclose(p, point(2, 0))


def test_line_line_intersect_parallel_returns_midpoint():
    p = lineLineIntersect(point(0, 0), (1, 0), point(4, 2), (2, 0))
    assert vclose(p, point(2, 1))


def test_line_circle_intersect_prefers_forward_root():
    hit = lineCircleIntersect(point(-5, 0), (1, 0), point(0, 0), 1.0)
    assert vclose(hit, point(-1, 0))

    # starting inside the circle the near root is behind the origin
    hit = lineCircleIntersect(point(0, 0), (1, 0), point(0, 0), 1.0)
    assert vclose(hit, point(1, 0))


def test_line_circle_intersect_miss():
    assert lineCircleIntersect(point(-5, 2), (1, 0), point(0, 0), 1.0) is None


def test_inside_triangle_includes_boundary():
    tri = [point(0, 0), point(4, 0), point(0, 4)]
    assert isInsideTriangleXY((1, 1), tri)
    assert isInsideTriangleXY((2, 0), tri)
    assert not isInsideTriangleXY((3, 3), tri)
    # either winding
    assert isInsideTriangleXY((1, 1), list(reversed(tri)))


def test_inside_poly_crossing_rule():
    square = [point(0, 0), point(2, 0), point(2, 2), point(0, 2)]
    assert isInsidePolyXY(square, (1, 1))
    assert not isInsidePolyXY(square, (3, 1))


def test_signed_area_and_winding():
    square = [point(0, 0), point(2, 0), point(2, 2), point(0, 2)]
    assert signedAreaXY(square) == pytest.approx(4.0)
    assert isCCW(square)
    assert signedAreaXY(list(reversed(square))) == pytest.approx(-4.0)


def test_simple_poly_detects_bowtie():
    bowtie = [point(0, 0), point(2, 2), point(2, 0), point(0, 2)]
    assert not isSimplePolyXY(bowtie)
    assert isSimplePolyXY([point(0, 0), point(2, 0), point(2, 2), point(0, 2)])


def test_circle_loop_orientation():
    ccw = circleLoopXY(point(1, 1), 2.0, 16)
    cw = circleLoopXY(point(1, 1), 2.0, 16, ccw=False)
    assert len(ccw) == 16
    assert signedAreaXY(ccw) > 0
    assert signedAreaXY(cw) < 0
    assert signedAreaXY(ccw) == pytest.approx(0.5 * 16 * 4.0 * math.sin(2 * math.pi / 16))


def test_offset_from_centroid_grows_radially():
    tri = [point(-1, 0), point(1, 0), point(0, 3)]
    grown = offsetFromCentroidXY(tri, 0.5)
    assert len(grown) == 3
    assert signedAreaXY(grown) > signedAreaXY(tri)
    c = (0.0, 1.0)
    for p, q in zip(tri, grown):
        d0 = math.hypot(p[0] - c[0], p[1] - c[1])
        d1 = math.hypot(q[0] - c[0], q[1] - c[1])
        assert d1 == pytest.approx(d0 + 0.5)


# fillets
# -------

def test_fillet_zero_radius_keeps_vertex():
    pts = filletArc(point(0, 1), point(0, 0), point(1, 0), 0.0, 8)
    assert len(pts) == 1
    assert vclose(pts[0], point(0, 0))


def test_fillet_colinear_keeps_vertex():
    pts = filletArc(point(0, 0), point(1, 0), point(2, 0), 0.3, 8)
    assert len(pts) == 1
    assert vclose(pts[0], point(1, 0))


def test_fillet_right_angle_geometry():
    pts = filletArc(point(0, 1), point(0, 0), point(1, 0), 0.25, 4)
    assert len(pts) == 5
    # tangent points on both edges, every point on the fillet circle
    assert vclose(pts[0], point(0, 0.25))
    assert vclose(pts[-1], point(0.25, 0))
    for p in pts:
        assert math.hypot(p[0] - 0.25, p[1] - 0.25) == pytest.approx(0.25)


@pytest.mark.parametrize('radius', [0.0, 0.05, 0.2, 0.45, 1.0, 10.0])
def test_rounded_square_stays_in_hull(radius):
    verts = [(0, 0, radius), (1, 0, radius), (1, 1, radius), (0, 1, radius)]
    pts = roundedPolygonPath(verts, 6)
    for p in pts:
        assert -1e-9 <= p[0] <= 1 + 1e-9
        assert -1e-9 <= p[1] <= 1 + 1e-9
    assert signedAreaXY(pts) > 0


def test_rounded_polygon_point_count():
    verts = [(0, 0, 0.2), (3, 0, 0.0), (0, 3, 0.2)]
    pts = roundedPolygonPath(verts, 5)
    assert len(pts) == 6 + 1 + 6


def test_rounded_polygon_clamps_large_radius():
    # the clamp keeps the tangent points at 90% of the shorter edge
    verts = [(0, 0, 5.0), (1, 0, 5.0), (1, 1, 5.0), (0, 1, 5.0)]
    pts = roundedPolygonPath(verts, 4)
    assert vclose(pts[0], point(0, 0.9))
    assert vclose(pts[4], point(0.9, 0))
