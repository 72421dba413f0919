import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from domain.dtos import Color


def _bgra(hex_color: str, width: int, height: int, alpha: int = 255) -> np.ndarray:
    c = Color.from_hex(hex_color)
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[...] = (c.b, c.g, c.r, alpha)
    return img


@pytest.fixture()
def solid_image():
    """Factory: solid_image("#1E3A8A", w, h, alpha=255) -> BGRA array."""
    return _bgra


@pytest.fixture()
def striped_image():
    """Factory: horizontal bands, [("#hex", rows), ...] -> BGRA array of the given width."""
    def make(bands, width: int = 100) -> np.ndarray:
        return np.concatenate([_bgra(h, width, rows) for h, rows in bands], axis=0)
    return make
