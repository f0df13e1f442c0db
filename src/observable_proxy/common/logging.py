"""Level control for the package's own loggers."""

from __future__ import annotations

import logging
from typing import Final

PACKAGE_LOGGER: Final[str] = "observable_proxy"


def configure_logging(*, level: int | str | None = None) -> logging.Logger:
    """Set the level of the ``observable_proxy`` logger tree and return its root.

    Only the level changes. Handlers and formatting stay with the application, so
    ``level=None`` leaves the logger untouched. Level names are case-insensitive.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
