"""In-memory adapters between :class:`~pixelflow.core.image.Image` and other libraries.

``pixelflow.interop.pillow`` covers Pillow.  ``pixelflow.interop.qt`` covers
``QImage`` and is imported explicitly so that Qt is only loaded by callers
that need it.
"""

from __future__ import annotations

from .pillow import from_pil, pil_mode, to_pil

__all__ = ["from_pil", "pil_mode", "to_pil"]
