"""
Goo / Fusion image deformation and compositing kernels.

Rasters are (H, W, 4) uint8 numpy arrays, masks are (H, W) uint8 arrays.
Every kernel returns a new array and leaves its inputs untouched.
"""

from .compositor import (
    BlendMode, blend, blend_mask, blend_scalar, blend_warped, draw_over,
    paint_mask, smear_mask, smooth_mask,
)
from .falloff import influence
from .fractal import generate
from .raster import as_raster, new_mask, new_raster
from .sampler import sample, sample_many
from .tiles import spin_tiles
from .warp import BrushKind, BrushParams, apply_brush, goovie

__version__ = "0.1.0"
