"""Package-wide logging for citygraph.

All modules log through children of the ``citygraph`` logger, obtained with
``get_logger(__name__)``. The parent logger owns the only handler; children
stay at NOTSET and inherit its level. The initial level comes from the
``CITYGRAPH_LOG_LEVEL`` environment variable (a level name such as
``DEBUG``), falling back to INFO with a warning on stderr when the name
is unknown.
"""

import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "citygraph"
LOG_LEVEL_ENV = "CITYGRAPH_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def parse_level(level: Union[int, str]) -> int:
    """Return the numeric logging level for ``level``.

    Args:
        level: A numeric level or a case-insensitive level name.

    Raises:
        ValueError: If the name is not a known logging level.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level {level!r}")
    return value


def _level_from_env() -> int:
    raw = os.environ.get(LOG_LEVEL_ENV)
    if not raw:
        return logging.INFO
    try:
        return parse_level(raw)
    except ValueError:
        print(
            f"citygraph: ignoring invalid {LOG_LEVEL_ENV}={raw!r}, using INFO",
            file=sys.stderr,
        )
        return logging.INFO


def setup_root_logger(
    level: Optional[Union[int, str]] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach the single handler to the ``citygraph`` logger.

    Only the first call has an effect until ``reset_logging()`` runs.

    Args:
        level: Initial level; defaults to ``CITYGRAPH_LOG_LEVEL`` or INFO.
        format_string: Record format; defaults to ``DEFAULT_FORMAT``.
        handler: Destination; defaults to a stdout StreamHandler.
    """
    global _configured

    if _configured:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(_level_from_env() if level is None else parse_level(level))
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Records still reach the stdlib root so pytest's caplog can see them
    root_logger.propagate = True

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger that defers to the ``citygraph`` level."""
    setup_root_logger()

    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: Union[int, str]) -> None:
    """Change the level of the ``citygraph`` logger and its handlers.

    Args:
        level: Numeric level or level name, e.g. ``logging.DEBUG`` or ``"debug"``.
    """
    setup_root_logger()

    numeric = parse_level(level)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(numeric)
    for handler in root_logger.handlers:
        handler.setLevel(numeric)


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the handler and level so the next call reconfigures from scratch."""
    global _configured
    _configured = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
