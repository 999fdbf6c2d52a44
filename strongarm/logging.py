"""
Package logger.

Every module logs through ``strongarm.logging.logger``. Tile builds log
each step at debug level, terminal rebinding as a warning and failed
builds as errors::

    import strongarm
    strongarm.set_log_level('DEBUG')    # follow a build step by step
    strongarm.set_log_level('SILENT')   # nothing at all
"""

import logging

logger = logging.getLogger('strongarm')
logger.setLevel(logging.INFO)

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setLevel(logging.DEBUG)
    _handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(_handler)

SILENT = logging.CRITICAL + 1


def set_log_level(level: str | int) -> None:
    """
    Set the package log level.

    Args:
        level: A logging level name ('DEBUG', 'INFO', 'WARNING', 'ERROR',
            'CRITICAL'), 'SILENT', or a numeric level
    """
    if isinstance(level, str):
        name = level.upper()
        level = SILENT if name == 'SILENT' else logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f'Unknown log level {name}')
    logger.setLevel(level)
