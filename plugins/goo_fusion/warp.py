"""
Goo Warp Brushes

Five displacement-field brushes in the spirit of Kai's Power Goo. Every
pixel within ``radius`` of the stroke center is resampled from a displaced
source coordinate:

    source = coord - offset
    offset = kernel(coord - center, direction) * smoothstep influence

  - Smear:  push along the stroke direction
  - Ungoo:  pull against the stroke direction (undoes a smear)
  - Grow:   push radially outward
  - Shrink: pull radially inward
  - Pinch:  pull toward the center proportionally to the distance

Pixels outside the radius are copied unchanged. The input raster is never
modified, so a stroke's output can feed the next stroke.

Also holds the Goovie ripple, a whole-image radial sine warp used by the
animated fusion room.
"""

import enum

import numpy as np

from .falloff import influence
from .presets import PINCH_SCALE, GOOVIE_WAVELENGTH, GOOVIE_RATE, GOOVIE_SCALE
from .raster import check_raster, new_raster, to_uint8
from .sampler import sample_many


class BrushKind(str, enum.Enum):
    """The closed set of goo brushes."""
    SMEAR = "smear"
    GROW = "grow"
    SHRINK = "shrink"
    PINCH = "pinch"
    UNGOO = "ungoo"


BRUSH_ORDER = [BrushKind.SMEAR, BrushKind.GROW, BrushKind.SHRINK,
               BrushKind.PINCH, BrushKind.UNGOO]


def brush_kind(value):
    """Coerce a BrushKind or its (case-insensitive) name to a BrushKind."""
    if isinstance(value, BrushKind):
        return value
    try:
        return BrushKind(str(value).lower())
    except ValueError:
        names = ", ".join(k.value for k in BrushKind)
        raise ValueError(f"Unknown brush {value!r}; expected one of: {names}") from None


class BrushParams:
    """Per-stroke brush settings (transient, never persisted).

    Args:
        radius: Brush radius in pixels, > 0
        force: Brush strength (0 = identity)
        kind: BrushKind or brush name
        pinch_scale: Distance multiplier for the pinch brush
    """

    def __init__(self, radius=100.0, force=10.0, kind=BrushKind.SMEAR,
                 pinch_scale=PINCH_SCALE):
        if radius <= 0:
            raise ValueError(f"radius must be > 0, got {radius}")
        self.radius = float(radius)
        self.force = float(force)
        self.kind = brush_kind(kind)
        self.pinch_scale = float(pinch_scale)

    def __repr__(self):
        return (f"BrushParams(radius={self.radius}, force={self.force}, "
                f"kind={self.kind.value})")


# ---------------------------------------------------------------------------
# Displacement kernels: (rel_x, rel_y, direction, params, weight) -> (ox, oy)
# ---------------------------------------------------------------------------

def _smear(rel_x, rel_y, direction, params, weight):
    k = params.force / params.radius * weight
    return direction[0] * k, direction[1] * k


def _ungoo(rel_x, rel_y, direction, params, weight):
    ox, oy = _smear(rel_x, rel_y, direction, params, weight)
    return -ox, -oy


def _grow(rel_x, rel_y, direction, params, weight):
    ux, uy = _normalize(rel_x, rel_y)
    k = params.force / params.radius * weight
    return ux * k, uy * k


def _shrink(rel_x, rel_y, direction, params, weight):
    ox, oy = _grow(rel_x, rel_y, direction, params, weight)
    return -ox, -oy


def _pinch(rel_x, rel_y, direction, params, weight):
    k = params.pinch_scale * params.force * weight
    return -rel_x * k, -rel_y * k


_KERNELS = {
    BrushKind.SMEAR: _smear,
    BrushKind.UNGOO: _ungoo,
    BrushKind.GROW: _grow,
    BrushKind.SHRINK: _shrink,
    BrushKind.PINCH: _pinch,
}


def _normalize(vx, vy):
    """Unit vectors; the zero vector stays zero instead of becoming NaN."""
    length = np.hypot(vx, vy)
    safe = np.where(length > 0, length, 1.0)
    return np.where(length > 0, vx / safe, 0.0), np.where(length > 0, vy / safe, 0.0)


def apply_brush(image, center, direction, params):
    """Apply one goo brush step and return the warped raster.

    Args:
        image: (H, W, 4) uint8 raster (read only)
        center: (x, y) stroke center
        direction: (dx, dy) stroke vector (mouse delta)
        params: BrushParams

    Returns:
        New (H, W, 4) uint8 raster
    """
    check_raster(image, "image")
    if not isinstance(params, BrushParams):
        raise ValueError("params must be a BrushParams")
    cx, cy = float(center[0]), float(center[1])
    direction = (float(direction[0]), float(direction[1]))
    h, w = image.shape[:2]
    r = params.radius

    out = image.copy()

    # Only the brush's bounding box can change
    x0 = max(0, int(np.floor(cx - r)))
    x1 = min(w, int(np.ceil(cx + r)) + 1)
    y0 = max(0, int(np.floor(cy - r)))
    y1 = min(h, int(np.ceil(cy + r)) + 1)
    if x0 >= x1 or y0 >= y1:
        return out

    Y, X = np.mgrid[y0:y1, x0:x1]
    rel_x = X - cx
    rel_y = Y - cy
    dist = np.hypot(rel_x, rel_y)
    inside = dist < r
    if not inside.any():
        return out

    rel_x = rel_x[inside]
    rel_y = rel_y[inside]
    weight = influence(dist[inside], r)
    ox, oy = _KERNELS[params.kind](rel_x, rel_y, direction, params, weight)

    src_x = X[inside] - ox
    src_y = Y[inside] - oy
    out[Y[inside], X[inside]] = to_uint8(sample_many(image, src_x, src_y))
    return out


def goovie(image, strength, time, wavelength=GOOVIE_WAVELENGTH,
           rate=GOOVIE_RATE, scale=GOOVIE_SCALE):
    """Radial sine ripple about the canvas center.

    Each pixel reads from ``p + (p - center) * factor * scale`` with
    ``factor = strength * sin(|p - center| / wavelength - time * rate)``,
    truncated to the pixel grid. Sources outside the raster leave the
    destination transparent black.
    """
    check_raster(image, "image")
    if wavelength <= 0:
        raise ValueError(f"wavelength must be > 0, got {wavelength}")
    h, w = image.shape[:2]
    cx, cy = w // 2, h // 2

    Y, X = np.mgrid[0:h, 0:w]
    dir_x = (X - cx).astype(np.float64)
    dir_y = (Y - cy).astype(np.float64)
    dist = np.hypot(dir_x, dir_y)
    factor = strength * np.sin(dist / wavelength - time * rate)

    src_x = np.trunc(X + dir_x * factor * scale).astype(np.int64)
    src_y = np.trunc(Y + dir_y * factor * scale).astype(np.int64)
    valid = (src_x >= 0) & (src_x < w) & (src_y >= 0) & (src_y < h)

    out = new_raster(w, h)
    out[valid] = image[src_y[valid], src_x[valid]]
    return out
