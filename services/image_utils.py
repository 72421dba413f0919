import numpy as np
import cv2
from PIL import Image

from domain.errors import DecodeError

def bytes_to_bgra(b: bytes) -> np.ndarray:
    """Decode PNG/JPEG/WebP bytes into an (H, W, 4) BGRA array, alpha kept."""
    arr = np.asarray(bytearray(b), dtype=np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_UNCHANGED) if arr.size else None
    if img is None:
        raise DecodeError("image bytes could not be decoded")
    return to_bgra(img)

def to_bgra(img: np.ndarray) -> np.ndarray:
    if img.ndim not in (2, 3) or img.shape[0] == 0 or img.shape[1] == 0:
        raise DecodeError(f"image has no pixels: shape={img.shape}")
    if img.dtype != np.uint8:
        # 16-bit PNGs come back as uint16
        img = (img / 257).astype(np.uint8) if img.dtype == np.uint16 else img.astype(np.uint8)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGRA)
    channels = img.shape[2]
    if channels == 4:
        return img
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2BGRA)
    if channels == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2BGRA)
    raise DecodeError(f"unsupported channel count: {channels}")

def bgra_to_pil(img: np.ndarray) -> Image.Image:
    return Image.fromarray(cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA))
