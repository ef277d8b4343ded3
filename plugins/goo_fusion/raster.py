"""
Raster and Mask containers

A raster is a (H, W, 4) uint8 numpy array holding R, G, B, A. A mask is a
(H, W) uint8 array where 0 selects image A, 255 selects image B and values
in between interpolate. Pixel (x, y) lives at ``raster[y, x]``.

Every kernel in this package takes rasters as read-only input and returns a
freshly allocated raster, so the caller can keep the previous buffer alive
until it swaps the new one in.
"""

import numpy as np
from PIL import Image

from .presets import MASK_INITIAL


def new_raster(width, height, color=(0, 0, 0, 0)):
    """Allocate a raster filled with one RGBA color (transparent black)."""
    _check_size(width, height)
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[:] = np.asarray(color, dtype=np.uint8)
    return out


def new_mask(width, height, value=MASK_INITIAL):
    """Allocate a uniform mask (128 = even mix of A and B)."""
    _check_size(width, height)
    if not 0 <= value <= 255:
        raise ValueError(f"mask value must be in [0, 255], got {value}")
    return np.full((height, width), value, dtype=np.uint8)


def as_raster(array):
    """Return a fresh RGBA uint8 copy of *array*.

    Accepts (H, W, 3) or (H, W, 4) arrays, either uint8 or float in [0, 1].
    RGB input gets an opaque alpha channel.
    """
    arr = np.asarray(array)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"raster must be (H, W, 3) or (H, W, 4), got {arr.shape}")
    _check_size(arr.shape[1], arr.shape[0])
    if arr.dtype != np.uint8:
        arr = to_uint8(np.asarray(arr, dtype=np.float64) * 255.0)
    if arr.shape[2] == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        return np.concatenate([arr, alpha], axis=2)
    return arr.copy()


def check_raster(raster, name="raster"):
    """Reject anything that is not a non-empty (H, W, 4) uint8 array."""
    if not isinstance(raster, np.ndarray) or raster.dtype != np.uint8:
        raise ValueError(f"{name} must be a uint8 numpy array")
    if raster.ndim != 3 or raster.shape[2] != 4:
        raise ValueError(f"{name} must have shape (H, W, 4), got {raster.shape}")
    _check_size(raster.shape[1], raster.shape[0], name)


def check_mask(mask, name="mask"):
    """Reject anything that is not a non-empty (H, W) uint8 array."""
    if not isinstance(mask, np.ndarray) or mask.dtype != np.uint8:
        raise ValueError(f"{name} must be a uint8 numpy array")
    if mask.ndim != 2:
        raise ValueError(f"{name} must have shape (H, W), got {mask.shape}")
    _check_size(mask.shape[1], mask.shape[0], name)


def require_same_shape(a, b, what="images"):
    """Dimension mismatch is a precondition violation, never a silent crop."""
    if a.shape[:2] != b.shape[:2]:
        raise ValueError(
            f"{what} must share dimensions: "
            f"{a.shape[1]}x{a.shape[0]} vs {b.shape[1]}x{b.shape[0]}"
        )


def to_uint8(values):
    """Round float channel values back to the 0-255 storage range."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def flip(raster, horizontal=True):
    """Mirror a raster horizontally (default) or vertically."""
    check_raster(raster)
    axis = 1 if horizontal else 0
    return np.flip(raster, axis=axis).copy()


def fit_to_canvas(raster, size):
    """Scale *raster* to cover a size x size canvas and crop the top-left.

    Aspect ratio is preserved while expanding, so the shorter side lands on
    *size* and the overflow of the longer side is cropped away.
    """
    check_raster(raster)
    if isinstance(size, int):
        size = (size, size)
    width, height = size
    _check_size(width, height, "canvas")
    h, w = raster.shape[:2]
    scale = max(width / w, height / h)
    new_w = max(width, int(round(w * scale)))
    new_h = max(height, int(round(h * scale)))
    img = Image.fromarray(np.ascontiguousarray(raster))
    img = img.resize((new_w, new_h), Image.LANCZOS)
    return np.asarray(img, dtype=np.uint8)[:height, :width].copy()


def fit_inside(raster, size):
    """Scale *raster* to fit inside a size x size box, keeping aspect ratio."""
    check_raster(raster)
    if isinstance(size, int):
        size = (size, size)
    width, height = size
    _check_size(width, height, "box")
    h, w = raster.shape[:2]
    scale = min(width / w, height / h)
    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))
    img = Image.fromarray(np.ascontiguousarray(raster))
    img = img.resize((new_w, new_h), Image.LANCZOS)
    return np.asarray(img, dtype=np.uint8).copy()


def _check_size(width, height, name="raster"):
    if width <= 0 or height <= 0:
        raise ValueError(f"{name} must be non-empty, got {width}x{height}")
