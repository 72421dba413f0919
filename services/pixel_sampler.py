from __future__ import annotations
from typing import Iterator, Optional, Tuple

import cv2
import numpy as np

from domain.errors import DecodeError

ALPHA_THRESHOLD = 128

Pixel = Tuple[int, int, int, int]

class PixelSampler:
    """Reads a BGRA image at bounded resolution and yields opaque RGBA pixels.

    With an explicit ``stride`` every ``stride``-th pixel of the reduced image is
    read, otherwise the stride is chosen so roughly ``sample_budget`` pixels are
    visited. Pixels with alpha below 128 are skipped so transparent logo
    backgrounds do not pull the palette toward black.
    """

    def __init__(self, max_size: int = 400, sample_budget: int = 1000, stride: Optional[int] = None) -> None:
        self.max_size = max_size
        self.sample_budget = sample_budget
        self.stride = stride

    @classmethod
    def simple(cls) -> "PixelSampler":
        return cls(max_size=200, stride=4)

    def sample(self, image_bgra: np.ndarray) -> Iterator[Pixel]:
        # validate now, iterate lazily
        if image_bgra.ndim != 3 or image_bgra.shape[2] != 4:
            raise DecodeError(f"expected BGRA image, got shape={image_bgra.shape}")
        h, w = image_bgra.shape[:2]
        if h == 0 or w == 0:
            raise DecodeError("image has zero dimensions (not loaded)")
        small = self.downscale(image_bgra)
        return self._iter_pixels(small)

    def downscale(self, img: np.ndarray) -> np.ndarray:
        h, w = img.shape[:2]
        scale = min(1.0, self.max_size / max(h, w))
        if scale >= 1.0:
            return img
        nw, nh = max(1, int(w * scale)), max(1, int(h * scale))
        return cv2.resize(img, (nw, nh), interpolation=cv2.INTER_AREA)

    def stride_for(self, total: int) -> int:
        if self.stride is not None:
            return max(1, self.stride)
        return max(1, total // self.sample_budget)

    def _iter_pixels(self, small: np.ndarray) -> Iterator[Pixel]:
        flat = small.reshape(-1, 4)
        picked = flat[::self.stride_for(len(flat))]
        opaque = picked[picked[:, 3] >= ALPHA_THRESHOLD]
        for b, g, r, a in opaque.tolist():
            yield r, g, b, a
