"""
Escape-Time Fractal Field

Julia-set variant with a time-animated perturbation of the real constant:

    zx' = zx^2 - zy^2 + cx + A * sin(time * rate)
    zy' = 2 zx zy + cy

iterated per pixel until |z|^2 >= 4 or 255 iterations. The iteration count
becomes the gray level. Pixels are independent, so the field is computed
as whole-array numpy steps, optionally split into row bands across threads.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .presets import (
    CANVAS_SIZE, FRACTAL_C, FRACTAL_PERTURB_AMPLITUDE, FRACTAL_PERTURB_RATE,
    FRACTAL_MAX_ITER, FRACTAL_ESCAPE_RADIUS_SQ, FRACTAL_X_SPAN,
)


def complex_grid(width, height, zoom, x_span=FRACTAL_X_SPAN):
    """Map pixel centers to the complex plane, centered and scaled by zoom.

    Returns (zx, zy) float64 arrays of shape (H, W).
    """
    xs = x_span * (np.arange(width) - width // 2) / (0.5 * zoom * width)
    ys = (np.arange(height) - height // 2) / (0.5 * zoom * height)
    zx = np.broadcast_to(xs[None, :], (height, width)).copy()
    zy = np.broadcast_to(ys[:, None], (height, width)).copy()
    return zx, zy


def escape_counts(zx, zy, cr, ci, max_iter=FRACTAL_MAX_ITER,
                  escape=FRACTAL_ESCAPE_RADIUS_SQ):
    """Iteration count per point before |z|^2 reaches *escape*.

    Escaped points drop out of the working set, so late iterations only
    touch the points still bounded.
    """
    shape = zx.shape
    zx = zx.ravel().copy()
    zy = zy.ravel().copy()
    idx = np.arange(zx.size)
    counts = np.zeros(zx.size, dtype=np.int64)

    for _ in range(max_iter):
        alive = zx * zx + zy * zy < escape
        if not alive.all():
            idx = idx[alive]
            zx = zx[alive]
            zy = zy[alive]
            if idx.size == 0:
                break
        zx, zy = zx * zx - zy * zy + cr, 2.0 * zx * zy + ci
        counts[idx] += 1

    return counts.reshape(shape)


def generate(zoom, time, width=CANVAS_SIZE, height=CANVAS_SIZE, c=FRACTAL_C,
             amplitude=FRACTAL_PERTURB_AMPLITUDE, rate=FRACTAL_PERTURB_RATE,
             max_iter=FRACTAL_MAX_ITER, workers=1):
    """Render the fractal as an opaque gray (H, W, 4) uint8 raster.

    Deterministic in (zoom, time, size): identical arguments give
    pixel-identical output, whatever *workers* is.

    Args:
        zoom: Magnification, > 0
        time: Animation tick driving the perturbation
        width, height: Output size
        c: (cx, cy) Julia constant
        amplitude, rate: Perturbation A * sin(time * rate) added to cx
        max_iter: Iteration cap, also the brightest gray level (<= 255)
        workers: Number of threads, each owning a band of rows
    """
    if zoom <= 0:
        raise ValueError(f"zoom must be > 0, got {zoom}")
    if width <= 0 or height <= 0:
        raise ValueError(f"size must be non-empty, got {width}x{height}")
    if not 1 <= max_iter <= 255:
        raise ValueError(f"max_iter must be in [1, 255], got {max_iter}")
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    zx, zy = complex_grid(width, height, zoom)
    cr = c[0] + amplitude * np.sin(time * rate)
    ci = c[1]

    if workers == 1 or height < 2:
        counts = escape_counts(zx, zy, cr, ci, max_iter)
    else:
        bands = np.array_split(np.arange(height), min(workers, height))
        with ThreadPoolExecutor(max_workers=len(bands)) as pool:
            parts = pool.map(
                lambda rows: escape_counts(zx[rows], zy[rows], cr, ci, max_iter),
                bands,
            )
            counts = np.concatenate(list(parts), axis=0)

    gray = counts.astype(np.uint8)
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[..., 0] = gray
    out[..., 1] = gray
    out[..., 2] = gray
    out[..., 3] = 255
    return out
