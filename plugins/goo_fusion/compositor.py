"""
Two-Image Compositor and Mask Tools

Blend modes (closed set, see BlendMode):
  - SCALAR: uniform mix, channel = a * (1 - t) + b * t
  - MASK:   per-pixel mix, t = mask / 255
  - WARPED: uniform mix where image B is read through a sinusoidal
            coordinate ripple, giving a wavy seam between the faces

Mask tools (each returns a new mask, the input is left as it was):
  - paint_mask:  feathered radial dab toward 0 (A) or 255 (B)
  - smear_mask:  drag a patch of the mask along the stroke (drag trail)
  - smooth_mask: downsample/upsample blur of a patch, softly composited
"""

import enum
import inspect
import math

import numpy as np
from scipy.ndimage import uniform_filter, zoom

from .falloff import distance_field
from .presets import SMEAR_OPACITY, SMOOTH_OPACITY, WARP_PERIOD, WARP_PHASE_RATE
from .raster import check_mask, check_raster, require_same_shape, to_uint8
from .sampler import sample_many


class BlendMode(str, enum.Enum):
    """The closed set of blend modes."""
    SCALAR = "scalar"
    MASK = "mask"
    WARPED = "warped"


def blend_mode(value):
    """Coerce a BlendMode or its (case-insensitive) name to a BlendMode."""
    if isinstance(value, BlendMode):
        return value
    try:
        return BlendMode(str(value).lower())
    except ValueError:
        names = ", ".join(m.value for m in BlendMode)
        raise ValueError(f"Unknown blend mode {value!r}; expected one of: {names}") from None


def _check_pair(image_a, image_b):
    check_raster(image_a, "image_a")
    check_raster(image_b, "image_b")
    require_same_shape(image_a, image_b, "image_a and image_b")


def _check_amount(amount, name="amount"):
    if not 0.0 <= amount <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {amount}")


def _mix(a, b, t):
    return a.astype(np.float64) * (1.0 - t) + b.astype(np.float64) * t


# ---------------------------------------------------------------------------
# Blends
# ---------------------------------------------------------------------------

def blend_scalar(image_a, image_b, amount):
    """Uniform blend: 0 returns image A, 1 returns image B."""
    _check_pair(image_a, image_b)
    _check_amount(amount)
    return to_uint8(_mix(image_a, image_b, float(amount)))


def blend_mask(image_a, image_b, mask):
    """Per-pixel blend weighted by mask / 255 (0 = A, 255 = B)."""
    _check_pair(image_a, image_b)
    check_mask(mask)
    require_same_shape(image_a, mask, "mask and images")
    t = (mask.astype(np.float64) / 255.0)[..., None]
    return to_uint8(_mix(image_a, image_b, t))


def blend_warped(image_a, image_b, amount, warp_amount, time,
                 phase_rate=WARP_PHASE_RATE, period=WARP_PERIOD, dest=None):
    """Uniform blend with image B read through a rippled coordinate field.

    For destination (x, y) image B is read at::

        xx = trunc(x + warp_amount * sin(2 pi y / period + time * phase_rate))
        yy = trunc(y + warp_amount * cos(2 pi x / period + time * phase_rate))

    When (xx, yy) falls outside the canvas the destination pixel keeps its
    prior content, taken from *dest* (default: image A).
    """
    _check_pair(image_a, image_b)
    _check_amount(amount)
    if warp_amount < 0:
        raise ValueError(f"warp_amount must be >= 0, got {warp_amount}")
    if period <= 0:
        raise ValueError(f"period must be > 0, got {period}")
    if dest is None:
        out = image_a.copy()
    else:
        check_raster(dest, "dest")
        require_same_shape(image_a, dest, "dest and images")
        out = dest.copy()

    h, w = image_a.shape[:2]
    Y, X = np.mgrid[0:h, 0:w]
    shift = time * phase_rate
    xx = np.trunc(X + warp_amount * np.sin(2.0 * math.pi * Y / period + shift)).astype(np.int64)
    yy = np.trunc(Y + warp_amount * np.cos(2.0 * math.pi * X / period + shift)).astype(np.int64)
    valid = (xx >= 0) & (xx < w) & (yy >= 0) & (yy < h)

    out[valid] = to_uint8(_mix(image_a[valid], image_b[yy[valid], xx[valid]], float(amount)))
    return out


def draw_over(base, layer, opacity=1.0):
    """Source-over draw of *layer* onto *base* at a global opacity.

    Layer alpha scales the coverage, so transparent layer pixels leave the
    base as it was. Over an opaque base the result stays opaque.
    """
    _check_pair(base, layer)
    _check_amount(opacity, "opacity")
    a_s = layer[..., 3:].astype(np.float64) / 255.0 * float(opacity)
    a_b = base[..., 3:].astype(np.float64) / 255.0
    a_out = a_s + a_b * (1.0 - a_s)
    rgb = layer[..., :3] * a_s + base[..., :3] * (a_b * (1.0 - a_s))
    rgb = np.divide(rgb, a_out, out=np.zeros_like(rgb), where=a_out > 0)
    return to_uint8(np.concatenate([rgb, a_out * 255.0], axis=-1))


_BLENDS = {
    BlendMode.SCALAR: blend_scalar,
    BlendMode.MASK: blend_mask,
    BlendMode.WARPED: blend_warped,
}


def blend(image_a, image_b, mode, **params):
    """Dispatch to one of the blend modes.

    Examples:
        blend(a, b, "scalar", amount=0.5)
        blend(a, b, BlendMode.MASK, mask=m)
        blend(a, b, "warped", amount=0.5, warp_amount=10, time=3)
    """
    kernel = _BLENDS[blend_mode(mode)]
    try:
        inspect.signature(kernel).bind(image_a, image_b, **params)
    except TypeError as exc:
        raise ValueError(f"Bad parameters for {kernel.__name__}: {exc}") from None
    return kernel(image_a, image_b, **params)


# ---------------------------------------------------------------------------
# Mask tools
# ---------------------------------------------------------------------------

def _clip_area(area, width, height):
    """Clip an (x, y, w, h) rect to the canvas. Returns (x0, y0, x1, y1)."""
    x, y, w, h = (int(round(v)) for v in area)
    if w <= 0 or h <= 0:
        raise ValueError(f"area must have positive size, got {w}x{h}")
    return max(0, x), max(0, y), min(width, x + w), min(height, y + h)


def brush_area(center, radius):
    """The (x, y, w, h) square a round brush of *radius* covers."""
    size = int(round(radius * 2))
    return (int(round(center[0] - radius)), int(round(center[1] - radius)), size, size)


def paint_mask(mask, center, radius, target):
    """Feathered radial dab toward *target* (0 paints A, 255 paints B).

    The dab is a linear radial gradient from *target* at the center to the
    mask's existing value at the rim, so repeated dabs melt into earlier
    strokes without leaving rings.
    """
    check_mask(mask)
    if radius <= 0:
        raise ValueError(f"radius must be > 0, got {radius}")
    if not 0 <= target <= 255:
        raise ValueError(f"target must be in [0, 255], got {target}")
    h, w = mask.shape
    cx, cy = float(center[0]), float(center[1])

    out = mask.copy()
    x0, y0, x1, y1 = _clip_area(brush_area((cx, cy), radius), w, h)
    # brush_area rounds; widen by a pixel so the rim is never cut
    x0, y0 = max(0, x0 - 1), max(0, y0 - 1)
    x1, y1 = min(w, x1 + 1), min(h, y1 + 1)
    if x0 >= x1 or y0 >= y1:
        return out

    dist = distance_field(x1 - x0, y1 - y0, cx - x0, cy - y0)
    inside = dist < radius
    weight = 1.0 - dist[inside] / radius
    region = out[y0:y1, x0:x1]
    existing = region[inside].astype(np.float64)
    region[inside] = to_uint8(existing + (float(target) - existing) * weight)
    return out


def smear_mask(mask, area, offset, opacity=SMEAR_OPACITY):
    """Copy the *area* patch, shift it by *offset* and composite it back.

    The patch is resampled bilinearly, so fractional offsets and the patch
    rim are antialiased. Parts of *area* outside the canvas are ignored.
    """
    check_mask(mask)
    _check_amount(opacity, "opacity")
    h, w = mask.shape
    px0, py0, px1, py1 = _clip_area(area, w, h)
    out = mask.copy()
    if px0 >= px1 or py0 >= py1:
        return out
    ox, oy = float(offset[0]), float(offset[1])

    # Destination bounding box of the shifted patch
    dx0 = max(0, int(math.floor(px0 + ox)))
    dy0 = max(0, int(math.floor(py0 + oy)))
    dx1 = min(w, int(math.ceil(px1 - 1 + ox)) + 1)
    dy1 = min(h, int(math.ceil(py1 - 1 + oy)) + 1)
    if dx0 >= dx1 or dy0 >= dy1:
        return out

    patch = mask[py0:py1, px0:px1].astype(np.float64)
    Y, X = np.mgrid[dy0:dy1, dx0:dx1]
    src_x = X - ox - px0
    src_y = Y - oy - py0
    # Premultiplied: value * coverage, with coverage fading at the patch rim
    value = sample_many(patch, src_x, src_y)
    coverage = sample_many(np.ones_like(patch), src_x, src_y)

    alpha = opacity * coverage
    dst = out[dy0:dy1, dx0:dx1].astype(np.float64)
    out[dy0:dy1, dx0:dx1] = to_uint8(dst * (1.0 - alpha) + opacity * value)
    return out


def smooth_mask(mask, area, target_size, opacity=SMOOTH_OPACITY):
    """Blur the *area* patch by shrinking it to *target_size* and back.

    The shrink is box filtered, the enlarge is bilinear, and the blurred
    patch is composited over the mask at *opacity*.
    """
    check_mask(mask)
    _check_amount(opacity, "opacity")
    if isinstance(target_size, (int, float)):
        target_size = (target_size, target_size)
    tw, th = int(target_size[0]), int(target_size[1])
    if tw < 1 or th < 1:
        raise ValueError(f"target_size must be >= 1, got {target_size}")
    h, w = mask.shape
    x0, y0, x1, y1 = _clip_area(area, w, h)
    out = mask.copy()
    if x0 >= x1 or y0 >= y1:
        return out

    patch = mask[y0:y1, x0:x1].astype(np.float64)
    ph, pw = patch.shape
    th, tw = min(th, ph), min(tw, pw)
    box = (max(1, int(round(ph / th))), max(1, int(round(pw / tw))))
    small = _resize(uniform_filter(patch, size=box, mode="nearest"), (th, tw))
    blurred = _resize(small, (ph, pw))

    out[y0:y1, x0:x1] = to_uint8(patch * (1.0 - opacity) + blurred * opacity)
    return out


def _resize(plane, shape):
    """Bilinear resize of a 2D plane to exactly *shape*."""
    h, w = shape
    factors = (h / plane.shape[0], w / plane.shape[1])
    result = zoom(plane, factors, order=1, mode="nearest")[:h, :w]
    pad_h, pad_w = h - result.shape[0], w - result.shape[1]
    if pad_h > 0 or pad_w > 0:
        result = np.pad(result, ((0, pad_h), (0, pad_w)), mode="edge")
    return result
