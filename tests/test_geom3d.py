import math

import pytest

from paraform.geom import point
from paraform.geom3d import (
    bboxsize,
    boxsolid,
    isemptysolid,
    isfinitesolid,
    issolid,
    issolidclosed,
    mergesolids,
    rotatesolid,
    scalesolid,
    signedvolumeof,
    solidbbox,
    transformsolid,
    translatesolid,
    volumeof,
)
from paraform.geom3d_util import capsule, conic, extrude, lathe, prism, roundedbox, tube
from paraform.geometry_checks import outward_normals, solid_watertight
from paraform.profile import Profile
from paraform.xform import Rotation, Scale, Translation, compose


def _square(x0, y0, size):
    return [point(x0, y0), point(x0 + size, y0), point(x0 + size, y0 + size), point(x0, y0 + size)]


def _ngon_area(n, r):
    return 0.5 * n * r * r * math.sin(2 * math.pi / n)


def _assert_box(box, lo, hi, tol=1e-9):
    for i in range(3):
        assert box[0][i] == pytest.approx(lo[i], abs=tol)
        assert box[1][i] == pytest.approx(hi[i], abs=tol)


# extrusion
# ---------

def test_extrude_square_is_centred_and_closed():
    sld = extrude(Profile(_square(0, 0, 2)), 2.0)
    assert issolid(sld, fast=False)
    _assert_box(solidbbox(sld), (0, 0, -1), (2, 2, 1))
    assert len(sld[1][0][3]) == 12
    assert outward_normals(sld)
    assert volumeof(sld) == pytest.approx(8.0)


def test_extrude_accepts_point_list():
    sld = extrude(_square(0, 0, 1), 1.0)
    assert volumeof(sld) == pytest.approx(1.0)


def test_extrude_with_hole():
    prof = Profile(_square(0, 0, 4), [_square(1, 1, 2)])
    sld = extrude(prof, 1.0)
    assert solid_watertight(sld)
    assert outward_normals(sld)
    assert volumeof(sld) == pytest.approx(12.0)


def test_extrude_bevel_grows_outline_and_faces():
    sld = extrude(Profile(_square(0, 0, 2)), 1.0, bevel_size=0.1, bevel_segments=3)
    _assert_box(solidbbox(sld), (-0.1, -0.1, -0.6), (2.1, 2.1, 0.6))
    assert outward_normals(sld)


def test_extrude_bevel_keeps_centre_whatever_the_bevel():
    for bevel in (0.0, 0.05, 0.2):
        sld = extrude(Profile(_square(0, 0, 2)), 1.0, bevel_size=bevel)
        box = solidbbox(sld)
        assert (box[0][2] + box[1][2]) / 2.0 == pytest.approx(0.0, abs=1e-12)


def test_extrude_chamfer_layer_count():
    sld = extrude(Profile(_square(0, 0, 2)), 1.0, bevel_size=0.1, bevel_segments=1)
    # bottom cap, bottom bevel, top bevel, top cap
    assert len(sld[1][0][1]) == 4 * 4


def test_extrude_bevel_shrinks_holes():
    prof = Profile(_square(0, 0, 4), [_square(1, 1, 2)])
    sld = extrude(prof, 1.0, bevel_size=0.1)
    assert solid_watertight(sld)
    verts = sld[1][0][1]
    # the hole corner at full bevel sits inside the nominal hole
    assert any(abs(v[0] - 1.1) < 1e-9 and abs(v[1] - 1.1) < 1e-9 for v in verts)
    assert not any(1.1 + 1e-9 < v[0] < 2.9 - 1e-9 and 1.1 + 1e-9 < v[1] < 2.9 - 1e-9 for v in verts)


@pytest.mark.parametrize('depth', [0.0, -1.0])
def test_extrude_rejects_bad_depth(depth):
    with pytest.raises(ValueError):
        extrude(Profile(_square(0, 0, 1)), depth)


def test_extrude_rejects_empty_profile():
    with pytest.raises(ValueError):
        extrude(Profile([point(0, 0), point(1, 0)]), 1.0)


# primitives
# ----------

def test_prism():
    sld = prism(2, 4, 6, point(1, 1, 1))
    _assert_box(solidbbox(sld), (0, -1, -2), (2, 3, 4))
    assert volumeof(sld) == pytest.approx(48.0)
    with pytest.raises(ValueError):
        prism(0, 1, 1)


def test_boxsolid_outward():
    sld = boxsolid([point(-1, -1, -1), point(1, 2, 3)])
    assert outward_normals(sld)
    assert signedvolumeof(sld) == pytest.approx(2 * 3 * 4)


def test_conic_cylinder_volume():
    sld = conic(1.5, 1.5, 2.0, segments=32)
    assert outward_normals(sld)
    assert volumeof(sld) == pytest.approx(_ngon_area(32, 1.5) * 2.0)
    _assert_box(solidbbox(sld), (-1.5, -1.5, -1.0), (1.5, 1.5, 1.0))


def test_conic_cone_and_frustum():
    cone = conic(1.0, 0.0, 3.0, segments=24)
    assert issolidclosed(cone)
    assert volumeof(cone) == pytest.approx(_ngon_area(24, 1.0) * 3.0 / 3.0)
    frustum = conic(2.0, 1.0, 1.0, segments=24)
    assert outward_normals(frustum)
    with pytest.raises(ValueError):
        conic(0.0, 0.0, 1.0)


def test_capsule_extent():
    sld = capsule(0.5, 2.0, capsegs=4, radial=16)
    assert outward_normals(sld)
    box = solidbbox(sld)
    assert box[0][2] == pytest.approx(-1.5)
    assert box[1][2] == pytest.approx(1.5)


def test_capsule_zero_length_is_sphere():
    sld = capsule(1.0, 0.0, capsegs=6, radial=16)
    assert issolidclosed(sld)
    assert bboxsize(solidbbox(sld))[2] == pytest.approx(2.0)


def test_tube_volume():
    sld = tube(1.0, 0.5, 2.0, segments=24)
    assert outward_normals(sld)
    expected = (_ngon_area(24, 1.0) - _ngon_area(24, 0.5)) * 2.0
    assert volumeof(sld) == pytest.approx(expected)
    with pytest.raises(ValueError):
        tube(0.5, 1.0, 2.0)


def test_lathe_outline_direction_does_not_matter():
    outline = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.5, 2.0), (0.0, 2.0)]
    a = lathe(outline, 16)
    b = lathe(list(reversed(outline)), 16)
    assert outward_normals(a)
    assert outward_normals(b)
    assert volumeof(a) == pytest.approx(volumeof(b))


def test_roundedbox_keeps_dimensions():
    sld = roundedbox(4.0, 3.0, 2.0, 0.3, segments=3)
    assert solid_watertight(sld)
    assert bboxsize(solidbbox(sld)) == pytest.approx((4.0, 3.0, 2.0))
    assert volumeof(sld) < 4.0 * 3.0 * 2.0


# transforms
# ----------

def test_rotate_swaps_extents():
    sld = rotatesolid(prism(4, 2, 1), 90)
    assert bboxsize(solidbbox(sld)) == pytest.approx((2, 4, 1))


def test_transform_with_mirror_keeps_outward_faces():
    sld = transformsolid(prism(1, 2, 3), Scale(-1, 1, 1))
    assert outward_normals(sld)


def test_compose_applies_right_to_left():
    mat = compose(Translation([5, 0, 0]), Rotation([0, 0, 1], 90))
    sld = transformsolid(prism(2, 2, 2, point(2, 0, 0)), mat)
    _assert_box(solidbbox(sld), (4, 1, -1), (6, 3, 1), tol=1e-9)


def test_translate_scale_merge():
    a = translatesolid(prism(1, 1, 1), point(3, 0, 0))
    _assert_box(solidbbox(a), (2.5, -0.5, -0.5), (3.5, 0.5, 0.5))
    b = scalesolid(prism(1, 1, 1), 2, 1, 1)
    assert bboxsize(solidbbox(b)) == pytest.approx((2, 1, 1))
    merged = mergesolids([a, b])
    assert len(merged[1]) == 2
    assert not isemptysolid(merged)


def test_isfinitesolid():
    sld = prism(1, 1, 1)
    assert isfinitesolid(sld)
    sld[1][0][1][0] = [math.inf, 0, 0, 1]
    assert not isfinitesolid(sld)
