"""
Tile Spin

Splits a raster into an n x n grid of equal tiles and rotates each tile's
content about the tile's own center. Content rotated past a tile edge is
clipped, never carried into a neighbouring tile; uncovered tile pixels come
out transparent black.

Tile size is ``width // n`` by ``height // n``. When the canvas does not
divide evenly, the remainder strips along the right and bottom edges are
left out of the grid and copied through unrotated.
"""

import math

import numpy as np

from .raster import check_raster, to_uint8
from .sampler import sample_many

_EDGE_EPS = 1e-6


def tile_size(width, height, tiles):
    """(tile_w, tile_h) for an n x n grid; raises when a tile would be empty."""
    if int(tiles) != tiles or tiles < 1:
        raise ValueError(f"tiles must be a positive integer, got {tiles}")
    tiles = int(tiles)
    if tiles > width or tiles > height:
        raise ValueError(f"{tiles}x{tiles} tiles do not fit a {width}x{height} canvas")
    return width // tiles, height // tiles


def spin_tiles(image, angle_deg, tiles):
    """Rotate every tile of an n x n grid by *angle_deg* (clockwise on screen)."""
    check_raster(image, "image")
    h, w = image.shape[:2]
    tw, th = tile_size(w, h, tiles)
    gw, gh = tw * int(tiles), th * int(tiles)

    out = image.copy()

    Y, X = np.mgrid[0:gh, 0:gw]
    ox = (X // tw) * tw
    oy = (Y // th) * th
    cx = ox + (tw - 1) / 2.0
    cy = oy + (th - 1) / 2.0
    u = X - cx
    v = Y - cy

    # Inverse rotation: where did this destination pixel come from
    theta = math.radians(angle_deg)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    src_x = cx + u * cos_t + v * sin_t
    src_y = cy - u * sin_t + v * cos_t

    lo_x, hi_x = ox, ox + tw - 1
    lo_y, hi_y = oy, oy + th - 1
    valid = ((src_x >= lo_x - _EDGE_EPS) & (src_x <= hi_x + _EDGE_EPS) &
             (src_y >= lo_y - _EDGE_EPS) & (src_y <= hi_y + _EDGE_EPS))

    src_x = np.clip(src_x, lo_x, hi_x)[valid]
    src_y = np.clip(src_y, lo_y, hi_y)[valid]

    grid = np.zeros((gh, gw, 4), dtype=np.uint8)
    grid[valid] = to_uint8(sample_many(image, src_x, src_y))
    out[:gh, :gw] = grid
    return out
