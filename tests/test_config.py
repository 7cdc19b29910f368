import logging

import pytest

from paraform.config import DEFAULT_ARC_SEGMENTS, load_settings
from paraform.geom3d_util import conic
from paraform.logging_config import setup_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('PARAFORM_BOOLEAN_ENGINE', 'PARAFORM_LOG_LEVEL', 'PARAFORM_ARC_SEGMENTS'):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.boolean_engine == 'trimesh:manifold'
    assert settings.log_level == 'WARNING'
    assert settings.arc_segments == DEFAULT_ARC_SEGMENTS


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv('PARAFORM_BOOLEAN_ENGINE', 'trimesh')
    monkeypatch.setenv('PARAFORM_LOG_LEVEL', 'debug')
    monkeypatch.setenv('PARAFORM_ARC_SEGMENTS', '48')
    settings = load_settings()
    assert settings.boolean_engine == 'trimesh'
    assert settings.log_level == 'DEBUG'
    assert settings.arc_segments == 48


@pytest.mark.parametrize('raw', ['many', '4'])
def test_bad_arc_segments(monkeypatch, raw):
    monkeypatch.setenv('PARAFORM_ARC_SEGMENTS', raw)
    with pytest.raises(ValueError, match='PARAFORM_ARC_SEGMENTS'):
        load_settings()


def test_arc_segments_drive_round_primitives(monkeypatch):
    monkeypatch.setenv('PARAFORM_ARC_SEGMENTS', '12')
    sld = conic(1.0, 1.0, 1.0)
    # two poles plus a base and a top ring
    assert len(sld[1][0][1]) == 2 + 2 * 12


def test_setup_logging(tmp_path):
    log_file = tmp_path / 'paraform.log'
    logger = setup_logging('info', str(log_file))
    try:
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 2
        logging.getLogger('paraform.test').info('hello from the test')
        for handler in logger.handlers:
            handler.flush()
        assert 'hello from the test' in log_file.read_text()
        # a second call replaces the handlers
        setup_logging(logging.WARNING)
        assert len(logger.handlers) == 1
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)


def test_setup_logging_closes_replaced_file(tmp_path):
    logger = setup_logging(logging.DEBUG, str(tmp_path / 'first.log'))
    try:
        old = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(old) == 1
        setup_logging('warning')
        assert old[0].stream is None
        assert old[0] not in logger.handlers
        assert 'DEBUG' in (tmp_path / 'first.log').read_text()
    finally:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)


def test_setup_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        setup_logging('chatty')
