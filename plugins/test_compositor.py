#!/usr/bin/env python3
"""
Tests for the two-image compositor and the mask tools.

Verifies:
1. Scalar blend endpoints and idempotence on identical inputs
2. Mask blend agrees with scalar blend for constant masks
3. Hard-seam fusion of a red and a blue image
4. Warped blend skips out-of-range reads and matches scalar blend at warp 0
5. Paint / smear / smooth mask tools feather, drag and blur
6. Dimension mismatches and bad parameters are rejected
"""

import numpy as np
import pytest

from goo_fusion.compositor import (
    BlendMode, blend, blend_mask, blend_mode, blend_scalar, blend_warped, draw_over,
    brush_area, paint_mask, smear_mask, smooth_mask,
)
from goo_fusion.raster import new_mask, new_raster


def _noise(w=16, h=12, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8)


def test_scalar_blend_endpoints():
    a, b = _noise(seed=1), _noise(seed=2)
    assert np.array_equal(blend_scalar(a, b, 0.0), a)
    assert np.array_equal(blend_scalar(a, b, 1.0), b)


def test_scalar_blend_idempotent():
    a = _noise(seed=3)
    for t in (0.0, 0.1, 0.37, 0.5, 0.9, 1.0):
        assert np.array_equal(blend_scalar(a, a, t), a), f"blend(A, A, {t}) != A"


def test_scalar_blend_halfway():
    a = new_raster(2, 2, color=(0, 0, 0, 255))
    b = new_raster(2, 2, color=(200, 100, 50, 255))
    out = blend_scalar(a, b, 0.5)
    assert tuple(out[0, 0]) == (100, 50, 25, 255)


def test_mask_blend_constant_masks():
    a, b = _noise(seed=4), _noise(seed=5)
    h, w = a.shape[:2]
    assert np.array_equal(blend_mask(a, b, new_mask(w, h, 0)), blend_scalar(a, b, 0.0))
    assert np.array_equal(blend_mask(a, b, new_mask(w, h, 255)), blend_scalar(a, b, 1.0))


def test_red_blue_hard_seam():
    red = new_raster(4, 4, color=(255, 0, 0, 255))
    blue = new_raster(4, 4, color=(0, 0, 255, 255))
    mask = np.zeros((4, 4), dtype=np.uint8)
    mask[:, 2:] = 255
    out = blend_mask(red, blue, mask)
    assert np.all(out[:, :2] == (255, 0, 0, 255)), "Left half must be pure red"
    assert np.all(out[:, 2:] == (0, 0, 255, 255)), "Right half must be pure blue"


def test_mask_dimension_mismatch_rejected():
    a, b = _noise(), _noise(seed=9)
    with pytest.raises(ValueError, match="dimensions"):
        blend_mask(a, b, new_mask(5, 5))
    with pytest.raises(ValueError, match="dimensions"):
        blend_scalar(a, _noise(w=8), 0.5)


def test_bad_amount_rejected():
    a = _noise()
    with pytest.raises(ValueError):
        blend_scalar(a, a, 1.5)
    with pytest.raises(ValueError):
        blend_warped(a, a, -0.1, 0, 0)
    with pytest.raises(ValueError):
        blend_warped(a, a, 0.5, -1, 0)


def test_warped_blend_without_warp_is_scalar_blend():
    a, b = _noise(seed=6), _noise(seed=7)
    assert np.array_equal(blend_warped(a, b, 0.4, 0.0, 12), blend_scalar(a, b, 0.4))


def test_warped_blend_skips_out_of_range():
    a = new_raster(16, 16, color=(10, 20, 30, 255))
    b = new_raster(16, 16, color=(250, 250, 250, 255))
    dest = new_raster(16, 16, color=(1, 2, 3, 4))
    out = blend_warped(a, b, 1.0, 40.0, 0, dest=dest)
    untouched = np.all(out == (1, 2, 3, 4), axis=-1)
    written = np.all(out == (250, 250, 250, 255), axis=-1)
    assert untouched.any(), "A 40px ripple on a 16px canvas must skip some pixels"
    assert np.all(untouched | written)


def test_warped_blend_is_time_dependent():
    a, b = _noise(32, 32, 1), _noise(32, 32, 2)
    assert not np.array_equal(blend_warped(a, b, 0.5, 5, 0), blend_warped(a, b, 0.5, 5, 40))


def test_blend_dispatch():
    a, b = _noise(seed=1), _noise(seed=2)
    h, w = a.shape[:2]
    assert np.array_equal(blend(a, b, "scalar", amount=0.3), blend_scalar(a, b, 0.3))
    assert np.array_equal(blend(a, b, BlendMode.MASK, mask=new_mask(w, h, 255)), b)
    assert np.array_equal(blend(a, b, "warped", amount=1.0, warp_amount=0, time=0), b)
    with pytest.raises(ValueError, match="Unknown blend mode"):
        blend(a, b, "multiply", amount=0.5)
    assert blend_mode("MASK") is BlendMode.MASK


def test_blend_dispatch_bad_params():
    a = _noise()
    with pytest.raises(ValueError, match="blend_scalar"):
        blend(a, a, "scalar")
    with pytest.raises(ValueError):
        blend(a, a, "mask", amount=0.5)
    with pytest.raises(ValueError):
        blend(a, a, "warped", amount=0.5, warp_amount=1, time=0, zoom=2)


def test_draw_over_transparent_layer_keeps_base():
    base = _noise(seed=4)
    base[..., 3] = 255
    layer = new_raster(16, 12)
    assert np.array_equal(draw_over(base, layer, 0.7), base)


def test_draw_over_opaque_layer():
    base = new_raster(2, 2, color=(0, 0, 0, 255))
    layer = new_raster(2, 2, color=(200, 100, 50, 255))
    out = draw_over(base, layer, 0.5)
    assert tuple(out[0, 0]) == (100, 50, 25, 255)
    half = new_raster(2, 2, color=(200, 100, 50, 102))  # 40% alpha
    out = draw_over(base, half, 0.5)
    assert tuple(out[0, 0]) == (40, 20, 10, 255), "Coverage is alpha times opacity"
    with pytest.raises(ValueError):
        draw_over(base, layer, 1.5)


def test_paint_mask_feathered_dab():
    mask = new_mask(41, 41)
    out = paint_mask(mask, (20, 20), 10, 255)
    assert out[20, 20] == 255, "Center takes the target value"
    assert out[20, 31] == 128, "Outside the radius keeps the prior value"
    assert 128 < out[20, 25] < 255, "Feathered between center and rim"
    assert out[20, 25] > out[20, 28], "Falls off toward the rim"
    assert np.all(mask == 128), "Input mask must not change"


def test_paint_mask_blends_with_prior_strokes():
    mask = new_mask(41, 41)
    first = paint_mask(mask, (20, 20), 10, 0)
    second = paint_mask(first, (24, 20), 10, 0)
    # Outside the second dab the first stroke survives untouched
    assert first[20, 13] != 128
    assert second[20, 13] == first[20, 13]
    # Inside, the second dab pulls further from the first stroke's values
    assert second[20, 22] <= first[20, 22]
    assert second[20, 24] == 0


def test_paint_mask_rejects_bad_input():
    mask = new_mask(8, 8)
    with pytest.raises(ValueError):
        paint_mask(mask, (4, 4), 0, 255)
    with pytest.raises(ValueError):
        paint_mask(mask, (4, 4), 3, 300)
    with pytest.raises(ValueError):
        paint_mask(np.zeros((8, 8, 4), dtype=np.uint8), (4, 4), 3, 0)


def test_smear_mask_zero_offset_keeps_mask():
    rng = np.random.default_rng(3)
    mask = rng.integers(0, 256, size=(20, 20), dtype=np.uint8)
    out = smear_mask(mask, (5, 5, 8, 8), (0, 0))
    assert np.array_equal(out, mask)


def test_smear_mask_drags_trail():
    mask = new_mask(30, 30, 0)
    mask[10:20, 5:10] = 255
    out = smear_mask(mask, (5, 10, 5, 10), (5, 0))
    # Patch shifted right by 5 lands mostly opaque over the black region
    assert out[15, 12] == round(255 * 0.9)
    # Left part of the original patch is outside the shifted copy
    assert out[15, 5] == 255
    # Far away stays untouched
    assert out[2, 2] == 0


def test_smooth_mask_blurs_edges():
    mask = new_mask(20, 20, 0)
    mask[:, 10:] = 255
    out = smooth_mask(mask, (0, 0, 20, 20), 5)
    assert 0 < out[10, 9] < 255 or 0 < out[10, 10] < 255, "Seam should soften"
    assert out[10, 0] == 0 and out[10, 19] == 255, "Far from the seam stays put"


def test_smooth_mask_uniform_unchanged():
    mask = new_mask(20, 20, 77)
    assert np.array_equal(smooth_mask(mask, (3, 3, 10, 10), 4), mask)


def test_mask_tools_clip_to_canvas():
    mask = new_mask(10, 10)
    out = smooth_mask(mask, (-5, -5, 8, 8), 2)
    assert out.shape == mask.shape
    out = smear_mask(mask, (50, 50, 4, 4), (1, 1))
    assert np.array_equal(out, mask)


def test_brush_area():
    assert brush_area((50, 40), 10) == (40, 30, 20, 20)


if __name__ == "__main__":
    print("\n=== Testing compositor ===\n")
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"  ✓ {name}")
    print("\n✓ All tests passed!\n")
