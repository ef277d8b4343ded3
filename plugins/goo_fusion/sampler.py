"""
Bilinear sampling at fractional coordinates.

Each of the four corners around (x, y) that falls outside the raster reads
as transparent black, so warps near the border fade out instead of failing.
At integer coordinates inside the raster the stored value comes back
exactly (the neighbour weights are zero).
"""

import numpy as np
from scipy.ndimage import map_coordinates


def sample_many(raster, xs, ys):
    """Bilinear-sample a raster or mask at arrays of coordinates.

    Args:
        raster: (H, W, C) raster or (H, W) mask
        xs, ys: Same-shape arrays of fractional pixel coordinates

    Returns:
        float64 array of shape xs.shape + (C,) for rasters, xs.shape for masks
    """
    data = np.asarray(raster, dtype=np.float64)
    coords = np.stack([np.asarray(ys, dtype=np.float64),
                       np.asarray(xs, dtype=np.float64)])
    if data.ndim == 2:
        return _interp(data, coords)
    return np.stack([_interp(data[..., c], coords)
                     for c in range(data.shape[2])], axis=-1)


def sample(raster, x, y):
    """Sample one color at (x, y). Returns a float64 array of channel values."""
    return sample_many(raster, np.array([x]), np.array([y]))[0]


def _interp(plane, coords):
    # grid-constant interpolates against cval beyond the edge, which gives
    # the per-corner transparent fallback
    return map_coordinates(plane, coords, order=1, mode="grid-constant",
                           cval=0.0, prefilter=False)
