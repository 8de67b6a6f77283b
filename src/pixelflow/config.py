"""Package-wide defaults.

Values are plain module constants so callers can read them without touching
any runtime state.  A couple of them may be overridden from the environment,
which keeps headless batch jobs configurable without code changes.
"""

from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        return default


DEFAULT_GAMMA = 2.2
"""Gamma used by ``GammaLog``/``GammaLin`` when none is given."""

DEFAULT_TYPE_NAME = "f32"
"""Storage type used by :class:`~pixelflow.core.image.Image` when none is given."""

DEFAULT_LAYOUT_NAME = "rgb"
"""Color layout used by :class:`~pixelflow.core.image.Image` when none is given."""

DEFAULT_ASYNC_MODE = "row"
"""Unit of work advanced by one cooperative ``step()`` call (``"row"`` or ``"pixel"``)."""

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Level applied to the ``pixelflow`` logger; unknown names fall back to WARNING.
LOG_LEVEL = os.environ.get("PIXELFLOW_LOG_LEVEL", "WARNING").strip().upper()
if LOG_LEVEL not in _LOG_LEVELS:
    LOG_LEVEL = "WARNING"

DEFAULT_WORKERS = _env_int("PIXELFLOW_WORKERS", 1)
"""Thread count used by pipelines that do not request one explicitly."""
