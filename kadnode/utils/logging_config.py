"""Logging configuration for KadNode.

Console output goes to stderr through Rich when stderr is a terminal and
through a plain formatter otherwise.
"""

from __future__ import annotations

import logging
import logging.config
import sys
from typing import TYPE_CHECKING, Any

from kadnode.utils.rich_logging import create_rich_handler

if TYPE_CHECKING:  # pragma: no cover
    from kadnode.models import Verbosity

ROOT_LOGGER = "kadnode"

# --verbosity keyword to logging level
VERBOSITY_TO_LOGGING: dict[str, int] = {
    "quiet": logging.ERROR,
    "verbose": logging.INFO,
    "debug": logging.DEBUG,
}


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the kadnode namespace."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def logging_level(verbosity: Verbosity | str) -> int:
    """Map a verbosity level to a logging level."""
    return VERBOSITY_TO_LOGGING[getattr(verbosity, "value", verbosity)]


def setup_logging(verbosity: Verbosity | str, use_rich: bool | None = None) -> None:
    """Set up console logging for the given verbosity.

    Safe to call again once the final verbosity is known; handlers are
    replaced, not added.

    Args:
        verbosity: quiet, verbose or debug
        use_rich: Force Rich on or off; defaults to stderr being a terminal

    """
    level = logging_level(verbosity)
    if use_rich is None:
        use_rich = sys.stderr.isatty()

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "%(asctime)s %(levelname)s %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "simple",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            ROOT_LOGGER: {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }
    logging.config.dictConfig(logging_config)

    if use_rich:
        kadnode_logger = logging.getLogger(ROOT_LOGGER)
        for handler in list(kadnode_logger.handlers):
            kadnode_logger.removeHandler(handler)
        kadnode_logger.addHandler(create_rich_handler(level=level))
