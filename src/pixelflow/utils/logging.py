"""Logging helpers for pixelflow."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import LOG_LEVEL

_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    """Return the package-level logger configured for pixelflow."""

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("pixelflow")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(LOG_LEVEL)
    return _LOGGER
