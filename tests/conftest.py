import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make the package importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pixelflow.core.image import Image  # noqa: E402


def make_gradient(width: int, height: int, type="f32", layout="rgb") -> Image:
    """Return a deterministic image whose channels vary with position."""

    image = Image((width, height), type, layout)
    ys, xs = np.mgrid[0:height, 0:width]
    values = np.empty((height, width, image.channels), dtype=np.float64)
    for c in range(image.channels):
        values[:, :, c] = ((xs + 2 * ys + 3 * c) % 7) / 6.0
    image.array[...] = image.type.from_normalized(values)
    return image


@pytest.fixture
def gradient():
    """Factory fixture for :func:`make_gradient`."""

    return make_gradient


@pytest.fixture
def rgb_image():
    return make_gradient(6, 4)
