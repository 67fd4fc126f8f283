"""Logging setup for the code generation pipeline.

Modules get their logger with ``get_logger(__name__)``; the CLI decides the
level with ``configure_logging``.
"""

import logging
import sys

_LOGGER_NAME = "kong_codegen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child logger under the kong_codegen hierarchy.

    "kong_codegen.generator.translator" becomes "kong_codegen.translator".
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    short = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{_LOGGER_NAME}.{short}")


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the kong_codegen logger.

    verbose -> DEBUG, default -> INFO, quiet -> WARNING.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    # Drop handlers bound to an earlier sys.stderr
    for old in list(root_logger.handlers):
        root_logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_MessageFormatter())
    root_logger.addHandler(handler)
    root_logger.propagate = False


class _MessageFormatter(logging.Formatter):
    """Emit the message with a level tag for anything above INFO."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno > logging.INFO:
            return f"[{record.levelname}] {message}"
        return message
