"""
Radial brush falloff.

Influence is 1 at the brush center, 0 at and beyond the radius, and follows
a smoothstep curve in between. The curve has zero slope at both ends, so
the brush boundary leaves no visible ring (a linear falloff does).
"""

import numpy as np


def smoothstep(t):
    """Cubic ease t^2 (3 - 2t) for t in [0, 1]."""
    return t * t * (3.0 - 2.0 * t)


def influence(distance, radius):
    """Brush influence for a distance (scalar or array) from the center.

    Args:
        distance: Distance(s) from the brush center, >= 0
        radius: Brush radius, > 0

    Returns:
        float for scalar input, float64 array otherwise, in [0, 1]
    """
    if radius <= 0:
        raise ValueError(f"radius must be > 0, got {radius}")
    d = np.asarray(distance, dtype=np.float64)
    if np.any(d < 0):
        raise ValueError("distance must be >= 0")
    norm_dist = 1.0 - np.minimum(d / radius, 1.0)
    result = np.clip(smoothstep(norm_dist), 0.0, 1.0)
    if result.ndim == 0:
        return float(result)
    return result


def distance_field(width, height, cx, cy):
    """Euclidean distance of every pixel (x, y) from (cx, cy), shape (H, W)."""
    Y, X = np.ogrid[:height, :width]
    return np.sqrt((X - cx) ** 2 + (Y - cy) ** 2)
