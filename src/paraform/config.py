"""Runtime settings read from the environment.

``PARAFORM_BOOLEAN_ENGINE``
    ``engine`` or ``engine:backend`` used for CSG, default
    ``trimesh:manifold``.
``PARAFORM_LOG_LEVEL``
    level name handed to :func:`paraform.logging_config.setup_logging`
    by the command line tool, default ``WARNING``.
``PARAFORM_ARC_SEGMENTS``
    segment count for full circles (bores, discs, lathe revolutions),
    default 24.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BOOLEAN_ENGINE = 'trimesh:manifold'
DEFAULT_LOG_LEVEL = 'WARNING'
DEFAULT_ARC_SEGMENTS = 24


@dataclass(frozen=True)
class Settings:
    boolean_engine: str = DEFAULT_BOOLEAN_ENGINE
    log_level: str = DEFAULT_LOG_LEVEL
    arc_segments: int = DEFAULT_ARC_SEGMENTS


def _env_int(name: str, default: int, minimum: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f'{name} must be an integer, got {raw!r}') from exc
    if value < minimum:
        raise ValueError(f'{name} must be at least {minimum}, got {value}')
    return value


def load_settings() -> Settings:
    """Read settings from the environment.  Called on each use so that
    tests can change the environment with ``monkeypatch``."""
    engine = os.environ.get('PARAFORM_BOOLEAN_ENGINE', '').strip() or DEFAULT_BOOLEAN_ENGINE
    level = os.environ.get('PARAFORM_LOG_LEVEL', '').strip().upper() or DEFAULT_LOG_LEVEL
    return Settings(boolean_engine=engine,
                    log_level=level,
                    arc_segments=_env_int('PARAFORM_ARC_SEGMENTS', DEFAULT_ARC_SEGMENTS, 8))


__all__ = ['Settings', 'load_settings', 'DEFAULT_BOOLEAN_ENGINE',
           'DEFAULT_LOG_LEVEL', 'DEFAULT_ARC_SEGMENTS']
