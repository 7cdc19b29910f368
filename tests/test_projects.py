import logging
import math

import pytest

from paraform.csg import Evaluator
from paraform.geom3d import bboxsize, issolidclosed, solidbbox, volumeof
from paraform.geometry_checks import outward_normals, profile_winding
from paraform.infill import honeycomb_profile
from paraform.projects import PROJECTS, get_project, list_projects
from paraform.projects.paralette import Paralette, ParalettePart, frame_profile
from paraform.projects.triangle_infill import (
    TriangleInfill,
    TrianglePart,
    inner_triangle,
    outer_triangle,
)
from paraform.projects.triangle_infill import frame_profile as triangle_frame_profile
from paraform.projects.wavy import WavyPart, WavyStructure, fin_profile, wave_height


def test_registry():
    assert list(PROJECTS) == ['wavy-structure', 'paralette', 'triangle-infill']
    assert [p.id for p in list_projects()] == list(PROJECTS)
    assert get_project('paralette').model is Paralette
    with pytest.raises(KeyError, match='wavy-structure'):
        get_project('teapot')


def test_create_normalizes_params():
    model = get_project('wavy-structure').create({'finCount': 40, 'bogus': 1})
    assert model.params['finCount'] == 12
    assert 'bogus' not in model.params


# wavy structure
# --------------

def test_wave_height_is_floored():
    assert wave_height(0.0, 1.0, 1.25, 0.35, 0.4) == pytest.approx(2.0)
    assert wave_height(0.5, 1.0, 0.5, 1.0, 0.0) == pytest.approx(1.5)
    assert wave_height(0.25, 1.0, 0.5, 1.0, 0.0) == pytest.approx(1e-3)


def test_fin_profile_is_valid():
    prof = fin_profile(3.5, 1.25, 0.35, 0.4).validate()
    assert len(prof.outer) == 103
    box = prof.bbox()
    assert box[0] == pytest.approx((0.0, 0.0))
    assert box[1][0] == pytest.approx(3.5)


def test_wavy_parts():
    model = WavyStructure()
    ids = model.parts.ids()
    assert len(ids) == 13
    assert ids[0] == 'base'
    assert ids[1:7] == [f'xfin-{i}' for i in range(6)]
    assert ids[7:] == [f'zfin-{i}' for i in range(6)]


def test_fin_count_change_regenerates_parts():
    model = WavyStructure()
    model.select('xfin-2')
    changed = model.set_params(finCount=8)
    assert changed == {'finCount'}
    assert len(model.parts) == 17
    assert model.selected == frozenset()


def test_other_change_keeps_parts():
    model = WavyStructure()
    model.select('xfin-2')
    model.update_overrides(['zfin-1'], scale_y=2.0)
    model.set_params(waveA=0.5)
    assert len(model.parts) == 13
    assert model.selected == {'xfin-2'}
    assert model.parts.overrides('zfin-1').scale_y == 2.0


def test_set_params_reports_only_changes():
    model = WavyStructure()
    assert model.set_params(waveA=0.35) == frozenset()
    assert model.set_params(waveA=0.6, waveB=0.4) == {'waveA'}


def test_fin_geometry_is_cached_per_kind():
    model = WavyStructure()
    first = model.part_geometry('xfin-0')
    assert model.part_geometry('xfin-5') is first
    assert model.cache.builds[WavyPart.X_FIN] == 1

    model.select('xfin-1')
    model.update_overrides(['xfin-1'], scale_x=1.5)
    model.part_geometry('xfin-1')
    assert model.cache.builds[WavyPart.X_FIN] == 1

    model.set_params(waveA=0.5)
    model.part_geometry('xfin-1')
    assert model.cache.builds[WavyPart.X_FIN] == 2

    model.set_params(baseDepth=3.0)
    model.part_geometry('xfin-1')
    model.part_geometry('zfin-1')
    assert model.cache.builds[WavyPart.X_FIN] == 2
    assert model.cache.builds[WavyPart.Z_FIN] == 1


def test_bevel_change_rebuilds_kind():
    model = WavyStructure()
    model.part_geometry('zfin-0')
    model.update_overrides(['zfin-3'], bevel_radius=0.5)
    sld = model.part_geometry('zfin-0')
    assert model.cache.builds[WavyPart.Z_FIN] == 2
    thickness = model.params['finThickness']
    assert bboxsize(solidbbox(sld))[2] == pytest.approx(thickness * 1.5)


def test_fin_placement():
    model = WavyStructure(evaluator=Evaluator('bogus'))
    assembly = model.assemble()
    assert len(assembly) == 13
    W, D, h = 3.5, 2.8, 0.2

    xfin = solidbbox(assembly.get('xfin-0').solid)
    assert xfin[0][0] == pytest.approx(-W / 2)
    assert xfin[1][0] == pytest.approx(W / 2)
    assert xfin[0][1] == pytest.approx(h)
    assert (xfin[0][2] + xfin[1][2]) / 2 == pytest.approx(-D / 2)

    zfin = solidbbox(assembly.get('zfin-5').solid)
    assert zfin[0][2] == pytest.approx(-D / 2)
    assert zfin[1][2] == pytest.approx(D / 2)
    assert (zfin[0][0] + zfin[1][0]) / 2 == pytest.approx(W / 2)


def test_deleted_parts_are_not_assembled():
    model = WavyStructure(evaluator=Evaluator('bogus'))
    model.delete(['xfin-0', 'zfin-0'])
    assert 'xfin-0' not in model.assemble().ids()
    assert len(model.assemble()) == 11


@pytest.mark.slow
def test_wavy_base_is_stepped():
    model = WavyStructure()
    sld = model.part_geometry('base')
    assert outward_normals(sld)
    W, D, h = 3.5, 2.8, 0.2
    expected = (W + 0.12) * (D + 0.12) * h / 2 + (W + 0.04) * (D + 0.04) * h / 2
    assert volumeof(sld) == pytest.approx(expected, rel=1e-6)


# paralette
# ---------

def test_default_frame_profile_validates():
    prof = frame_profile(Paralette.schema.defaults).validate()
    assert len(prof.holes) == 2


def test_default_frame_is_an_extrusion():
    model = Paralette()
    sld = model.part_geometry('frame')
    assert sld[3][1].startswith('paraform.geom3d_util.extrude')
    assert issolidclosed(sld)


def test_oversized_grip_falls_back_to_box(caplog):
    model = Paralette({'gripDiameter': 2.0})
    with caplog.at_level(logging.WARNING, logger='paraform.projects.base'):
        sld = model.part_geometry('frame')
    assert sld[3] == ['procedure', 'paralette.fallback(FRAME)']
    assert 'gripDiameter' in caplog.text
    box = solidbbox(sld)
    assert box[0][0] == pytest.approx(-2.75)
    assert box[1][1] == pytest.approx(5.0)


def test_grip_tube():
    model = Paralette()
    assert model.base_dimensions('grip') == pytest.approx((0.8, 0.8, 1.5))
    assembly = model.assemble()
    grip = solidbbox(assembly.get('grip').solid)
    # the grip sits at the apex, and the model is centred on half the height
    assert (grip[0][1] + grip[1][1]) / 2 == pytest.approx(2.5)


@pytest.mark.slow
def test_primitive_frame():
    model = Paralette({'frameStyle': 1})
    sld = model.part_geometry('frame')
    assert 'fallback' not in str(sld[3])
    dims = bboxsize(solidbbox(sld))
    assert dims[2] == pytest.approx(0.8, rel=1e-6)


# triangle infill
# ---------------

def _flat_triangle(**params):
    model = TriangleInfill(dict({'fillPattern': 0}, **params))
    model.update_overrides(['frame'], bevel_radius=0.0)
    return model


def test_triangle_frame_dimensions():
    model = _flat_triangle()
    assert model.base_dimensions('frame') == pytest.approx((5.45, 6.54, 1.0))
    assert model.base_dimensions('infill') is None


def test_triangle_frame_default_bevel():
    model = TriangleInfill({'fillPattern': 0})
    dims = model.base_dimensions('frame')
    assert dims[2] == pytest.approx(1.06)


def test_no_infill_leaves_frame_alone():
    model = _flat_triangle()
    assembly = model.assemble()
    assert assembly.ids() == ['frame']
    box = assembly.bbox()
    assert box[0][1] == pytest.approx(-0.15 - 2.0)


def test_scale_override_stretches_world_geometry():
    model = _flat_triangle()
    model.update_overrides(['frame'], scale_x=2.0)
    world = model.assemble().get('frame').solid
    assert bboxsize(solidbbox(world))[0] == pytest.approx(10.9)
    # shared geometry stays unscaled
    assert model.base_dimensions('frame')[0] == pytest.approx(5.45)


@pytest.mark.slow
def test_honeycomb_infill_part():
    model = TriangleInfill()
    assert model.kind_geometry(TrianglePart.INFILL) is not None
    assert model.assemble().ids() == ['frame', 'infill']


def test_frame_walls_keep_their_thickness():
    hw, H, T = 5.0, 2.0, 1.0
    outer = outer_triangle(hw, H, T)
    inner = inner_triangle(hw, H, T)
    assert outer[0][1] - inner[0][1] == pytest.approx(-T)
    (ax, ay), (bx, by) = outer[1][:2], outer[2][:2]
    px, py = inner[1][:2]
    leg = math.hypot(bx - ax, by - ay)
    gap = abs((bx - ax) * (py - ay) - (by - ay) * (px - ax)) / leg
    assert gap == pytest.approx(T)


def test_short_wide_frame_is_not_a_fallback():
    model = _flat_triangle(baseWidth=10.0, triangleHeight=2.0, wallThickness=1.0)
    sld = model.part_geometry('frame')
    assert 'fallback' not in str(sld[3])
    assert issolidclosed(sld)


# properties shared by every family
# ---------------------------------

def test_profile_builders_wind_consistently():
    profiles = [
        frame_profile(Paralette.schema.defaults),
        triangle_frame_profile(TriangleInfill.schema.defaults),
        fin_profile(3.5, 1.25, 0.35, 0.4),
        honeycomb_profile(inner_triangle(2.5, 6.0, 0.3), 0.6, 0.08),
    ]
    for prof in profiles:
        result = profile_winding(prof)
        assert result, result.warnings
    assert profiles[3].holes


def _mesh(model):
    assembly = model.assemble()
    return [(part.id, [surf[1] for surf in part.solid[1]]) for part in assembly.parts]


def test_paralette_builds_are_repeatable():
    assert _mesh(Paralette()) == _mesh(Paralette())


@pytest.mark.slow
@pytest.mark.parametrize('family', [TriangleInfill, WavyStructure])
def test_csg_builds_are_repeatable(family):
    first = _mesh(family())
    assert first
    assert first == _mesh(family())
