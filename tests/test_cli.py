import logging

import pytest

from paraform.__main__ import build_parser, main
from paraform.geom3d import volumeof
from paraform.io import read_stl


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("paraform")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_list(capsys):
    assert main(['list']) == 0
    out = capsys.readouterr().out
    for project_id in ('wavy-structure', 'paralette', 'triangle-infill'):
        assert project_id in out


def test_params(capsys):
    assert main(['params', 'triangle-infill', '--unit', 'cm']) == 0
    out = capsys.readouterr().out
    assert '[Infill]' in out
    assert '1=Honeycomb' in out
    assert 'cm' in out


def test_unknown_project(capsys):
    assert main(['params', 'teapot']) == 2
    assert 'unknown project' in capsys.readouterr().err


def test_unknown_parameter(capsys):
    assert main(['build', 'paralette', '--param', 'wingspan=3']) == 2
    assert 'wingspan' in capsys.readouterr().err


def test_bad_parameter_value(capsys):
    assert main(['build', 'paralette', '--param', 'depth=deep']) == 2
    assert 'numeric' in capsys.readouterr().err


def test_build_prints_dimensions(capsys):
    args = ['build', 'triangle-infill', '-p', 'fillPattern=0',
            '--override', 'frame:bevel_radius=0']
    assert main(args) == 0
    out = capsys.readouterr().out
    assert 'Triangle Infill: 1 parts' in out
    assert '5.450 x 6.540 x 1.000 mm' in out
    assert '(no geometry)' in out


def test_build_stl(tmp_path, capsys):
    path = tmp_path / 'frame.stl'
    args = ['build', 'paralette', '--delete', 'frame', '--output', str(path)]
    assert main(args) == 0
    assert 'Exported' in capsys.readouterr().out
    assert volumeof(read_stl(path)) > 0


def test_build_glb(tmp_path):
    path = tmp_path / 'frame.glb'
    assert main(['build', 'triangle-infill', '-p', 'fillPattern=0', '-o', str(path)]) == 0
    assert path.read_bytes()[:4] == b'glTF'


def test_build_rejects_unknown_format(tmp_path, capsys):
    path = tmp_path / 'frame.obj'
    assert main(['build', 'triangle-infill', '-p', 'fillPattern=0', '-o', str(path)]) == 2
    assert 'unknown output format' in capsys.readouterr().err


def test_delete_unknown_part(capsys):
    assert main(['build', 'paralette', '--delete', 'wheel']) == 2
    assert 'wheel' in capsys.readouterr().err


def test_bad_override(capsys):
    assert main(['build', 'paralette', '--override', 'frame:colour=1']) == 2
    assert main(['build', 'paralette', '--override', 'wheel:scale_x=2']) == 2


def test_parser_requires_action():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
