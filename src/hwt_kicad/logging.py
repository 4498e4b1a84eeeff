"""
Logging configuration for hwt-kicad.

Every module logs through ``logging.getLogger(__name__)`` under the
``hwt_kicad`` package logger, which is silent by default. Skipped elements
are reported at WARNING and per-import summaries at DEBUG.
"""

import logging

_logger = logging.getLogger("hwt_kicad")
_logger.addHandler(logging.NullHandler())  # Default: no output

DEFAULT_FORMAT = "[%(levelname)s] %(message)s"


def enable_verbose(level: str = "INFO", format: str = None) -> None:
    """Enable verbose logging for debugging.

    Args:
        level: Logging level - "DEBUG", "INFO", "WARNING", "ERROR"
        format: Optional custom format string

    Example:
        enable_verbose("DEBUG")
        sheet = import_schematic(text)   # logs skipped elements and a summary
        disable_verbose()
    """
    _logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper()))
    handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    _logger.addHandler(handler)


def disable_verbose() -> None:
    """Disable verbose logging."""
    _logger.setLevel(logging.WARNING)
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)


def get_logger() -> logging.Logger:
    """The package logger."""
    return _logger
