"""Logging helpers for descentkit.

All loggers live under the ``descentkit`` namespace, write to stderr and do
not propagate to the root logger. Optimizers accept an explicit logger through
their configuration; these helpers only provide the default sink.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

_NAMESPACE = "descentkit"
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_default_level = logging.WARNING
_loggers: dict[str, logging.Logger] = {}


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def _qualified_name(name: Optional[str]) -> str:
    if not name:
        return _NAMESPACE
    if name == _NAMESPACE or name.startswith(_NAMESPACE + "."):
        return name
    return f"{_NAMESPACE}.{name}"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached descentkit logger for ``name``.

    Args:
        name: Usually ``__name__`` of the calling module. Names outside the
            ``descentkit`` namespace are nested under it.

    Returns:
        A configured :class:`logging.Logger`.

    Example:
        >>> from descentkit.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("step accepted")
    """
    logger_name = _qualified_name(name)
    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(_default_level)
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_default_level)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of every descentkit logger created so far and later.

    Args:
        level: A ``logging`` level constant or its name (``"DEBUG"``, ...).
    """
    global _default_level
    level = _coerce_level(level)
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    _default_level = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Replace the handlers of all descentkit loggers.

    Args:
        level: Logging level (default: WARNING).
        format_string: Record format. Defaults to
            ``"[%(levelname)s] %(name)s: %(message)s"``.
        stream: Output stream (default: ``sys.stderr``).
    """
    global _default_level
    level = _coerce_level(level)
    formatter = logging.Formatter(format_string or _DEFAULT_FORMAT)
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    _default_level = level


__all__ = ["configure_logging", "get_logger", "set_log_level"]
