"""Process-level logging setup for the service and the measure runner."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
_CONFIGURED_LEVEL: Optional[int] = None


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a single stderr handler to the ``birds_nest`` logger.

    The level comes from ``level``, else ``BIRDS_NEST_LOG_LEVEL``, else INFO.
    Calling again with the same level is a no-op.
    """
    global _CONFIGURED_LEVEL

    name = (level or os.getenv("BIRDS_NEST_LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"log level must be a logging level name, got {name!r}")
    if resolved == _CONFIGURED_LEVEL:
        return

    package_logger = logging.getLogger("birds_nest")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_birds_nest", False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._birds_nest = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(resolved)
    _CONFIGURED_LEVEL = resolved
