"""Handlers for the ``paraform`` logger.

Library modules only create module-level loggers under ``paraform``;
attaching handlers is left to applications, with :func:`setup_logging`
doing it for the command line.
"""
import logging
import sys
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f'unknown log level {level!r}')
    return value


def setup_logging(level: Union[int, str] = logging.WARNING,
                  log_file: Optional[str] = None) -> logging.Logger:
    """Route the ``paraform`` logger to stderr, and to ``log_file`` when
    given, at ``level`` (a number or a name such as ``"debug"``).

    Handlers from an earlier call are closed and replaced.
    """
    level = _resolve_level(level)
    logger = logging.getLogger('paraform')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug('logging at %s%s', logging.getLevelName(level),
                 f' to {log_file}' if log_file else '')
    return logger
