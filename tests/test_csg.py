import copy
import logging
import math

import pytest

from paraform.csg import Brush, Evaluator, Operation, fallback_solid, finalize, union_all
from paraform.errors import CSGError
from paraform.geom import point
from paraform.geom3d import bboxsize, mergesolids, solidbbox, volumeof
from paraform.geom3d_util import prism
from paraform.geometry_checks import outward_normals, solid_watertight
from paraform.xform import Translation


def _box_at(x, y=0.0, z=0.0, size=2.0):
    return Brush(prism(size, size, size), Translation([x, y, z]))


def test_brush_world_applies_transform():
    sld = _box_at(3.0).world()
    box = solidbbox(sld)
    assert box[0][0] == pytest.approx(2.0)
    assert box[1][0] == pytest.approx(4.0)


def test_finalize_merges_surfaces():
    merged = mergesolids([prism(1, 1, 1), _box_at(5.0).world()])
    assert len(merged[1]) == 2
    out = finalize(merged)
    assert len(out[1]) == 1
    assert len(out[1][0][3]) == 24


def test_fallback_solid_covers_operands():
    sld = fallback_solid([prism(2, 2, 2), _box_at(4.0).world()])
    box = solidbbox(sld)
    assert box[0][0] == pytest.approx(-1.0)
    assert box[1][0] == pytest.approx(5.0)
    assert sld[3][0] == 'procedure'


def test_fallback_solid_without_operands_is_unit_cube():
    sld = fallback_solid([])
    assert bboxsize(solidbbox(sld)) == pytest.approx((1, 1, 1))


def test_unknown_engine_falls_back_to_box(caplog):
    evaluator = Evaluator('bogus')
    with caplog.at_level(logging.WARNING, logger='paraform.csg'):
        sld = evaluator.combine(prism(2, 2, 2), _box_at(3.0), Operation.ADDITION,
                                context={'width': 2.0})
    box = solidbbox(sld)
    assert box[0][0] == pytest.approx(-1.0)
    assert box[1][0] == pytest.approx(4.0)
    assert 'csg.fallback' in sld[3][1]
    assert 'width' in caplog.text


def test_failure_without_fallback_raises():
    evaluator = Evaluator('bogus')
    with pytest.raises(CSGError) as info:
        evaluator.combine(prism(2, 2, 2), _box_at(1.0), Operation.SUBTRACTION, fallback=False)
    assert info.value.step == 1
    assert info.value.operation == 'SUBTRACTION'


def test_non_finite_operand_falls_back():
    bad = prism(1, 1, 1)
    bad[1][0][1][0] = [math.nan, 0.0, 0.0, 1.0]
    sld = Evaluator().combine(prism(2, 2, 2), bad, Operation.ADDITION)
    # only the finite operand contributes to the placeholder
    assert bboxsize(solidbbox(sld)) == pytest.approx((2, 2, 2))


def test_bad_operand_type_falls_back():
    sld = Evaluator().combine(prism(2, 2, 2), 'not a solid', Operation.ADDITION)
    assert bboxsize(solidbbox(sld)) == pytest.approx((2, 2, 2))


def test_union_all_needs_operands():
    with pytest.raises(ValueError):
        union_all([])


@pytest.mark.slow
def test_union_of_overlapping_boxes():
    sld = union_all([prism(2, 2, 2), _box_at(1.0)])
    assert solid_watertight(sld)
    assert outward_normals(sld)
    assert volumeof(sld) == pytest.approx(12.0)


@pytest.mark.slow
def test_difference_and_intersection():
    evaluator = Evaluator()
    cut = evaluator.combine(prism(2, 2, 2), prism(1, 1, 4), Operation.SUBTRACTION)
    assert volumeof(cut) == pytest.approx(6.0)
    common = evaluator.combine(prism(2, 2, 2), _box_at(1.0), Operation.INTERSECTION)
    assert volumeof(common) == pytest.approx(4.0)


@pytest.mark.slow
def test_sequential_steps_chain():
    sld = Evaluator().evaluate(prism(4, 4, 1), [
        (_box_at(0.0, size=1.0), Operation.SUBTRACTION),
        (Brush(prism(1, 1, 1), Translation([0, 0, 1])), Operation.ADDITION),
    ])
    assert volumeof(sld) == pytest.approx(16.0 - 1.0 + 1.0)
    box = solidbbox(sld)
    assert box[1][2] == pytest.approx(1.5)


@pytest.mark.slow
def test_union_with_itself_keeps_bbox():
    a = prism(2, 3, 4, point(1, 1, 1))
    sld = union_all([a, prism(2, 3, 4, point(1, 1, 1))])
    assert bboxsize(solidbbox(sld)) == pytest.approx((2, 3, 4))


@pytest.mark.slow
def test_disjoint_intersection_falls_back(caplog):
    with caplog.at_level(logging.WARNING):
        sld = Evaluator().combine(prism(1, 1, 1), _box_at(10.0), Operation.INTERSECTION)
    assert 'csg.fallback' in sld[3][1]
    assert 'empty' in caplog.text


@pytest.mark.slow
def test_intersection_with_itself_keeps_bbox():
    a = prism(2, 3, 4, point(1, 1, 1))
    sld = Evaluator().combine(a, copy.deepcopy(a), Operation.INTERSECTION)
    assert 'fallback' not in str(sld[3])
    for got, want in zip(solidbbox(sld), solidbbox(a)):
        assert got == pytest.approx(want)
    assert volumeof(sld) == pytest.approx(24.0)
