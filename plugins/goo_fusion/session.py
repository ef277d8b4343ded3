"""
Caller-owned demo state

The kernels in this package are stateless. These classes hold what the
original demo windows kept in their widgets (current image, mask, tool,
slider values, animation tick) and turn positions and slider values into
kernel calls. They do no event handling and no drawing: a UI layer feeds
them coordinates and displays whatever raster they hold.

Usage:
    from goo_fusion.session import GooCanvas
    canvas = GooCanvas(image, brush="grow")
    canvas.press(120, 80)
    canvas.drag(130, 84)
    frame = canvas.current
"""

import enum
import logging

import numpy as np

from .compositor import blend_mask, blend_warped, brush_area, draw_over
from .compositor import paint_mask, smear_mask, smooth_mask
from .fractal import generate
from .presets import (
    CANVAS_SIZE, FUSION_CANVAS_SIZE, PAINT_A_VALUE, PAINT_B_VALUE,
    ROOM_LAYER_OPACITY, ROOM_TILES, slider_defaults,
)
from .raster import check_raster, fit_inside, fit_to_canvas, flip, new_mask, new_raster
from .raster import require_same_shape
from .tiles import spin_tiles
from .warp import BrushKind, BrushParams, apply_brush, brush_kind, goovie

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Goo canvas
# ---------------------------------------------------------------------------

class GooCanvas:
    """Single-image goo warping with continuous multi-stroke accumulation.

    Args:
        image: (H, W, 4) uint8 source raster
        radius: Brush radius in pixels
        force: Brush strength
        brush: BrushKind or brush name
    """

    def __init__(self, image, radius=100.0, force=10.0, brush=BrushKind.SMEAR):
        check_raster(image, "image")
        self.original = image.copy()
        self.current = image.copy()
        self.params = BrushParams(radius=radius, force=force, kind=brush)
        self.last_pos = None
        self.strokes = 0

    def set_brush(self, brush):
        self.params.kind = brush_kind(brush)

    def set_radius(self, radius):
        self.params = BrushParams(radius, self.params.force, self.params.kind,
                                  self.params.pinch_scale)

    def set_force(self, force):
        self.params.force = float(force)

    def press(self, x, y):
        """Anchor a stroke at (x, y)."""
        self.last_pos = (float(x), float(y))

    def drag(self, x, y):
        """Warp from the anchor along the drag vector, then move the anchor.

        Returns True if the image changed.
        """
        if self.last_pos is None:
            logger.warning("drag without press at (%s, %s); anchoring there", x, y)
            self.press(x, y)
            return False
        dx = float(x) - self.last_pos[0]
        dy = float(y) - self.last_pos[1]
        if dx == 0 and dy == 0:
            return False
        self.current = apply_brush(self.current, self.last_pos, (dx, dy), self.params)
        self.last_pos = (float(x), float(y))
        self.strokes += 1
        logger.debug("goo %s stroke #%d -> (%s, %s)",
                     self.params.kind.value, self.strokes, x, y)
        return True

    def release(self):
        self.last_pos = None

    def reset(self):
        """Throw away all strokes."""
        self.current = self.original.copy()
        self.strokes = 0


# ---------------------------------------------------------------------------
# Fusion canvas
# ---------------------------------------------------------------------------

class MaskTool(str, enum.Enum):
    """Mask tools of the fusion canvas."""
    PAINT_A = "paint_a"
    PAINT_B = "paint_b"
    SMEAR = "smear"
    SMOOTH = "smooth"


def mask_tool(value):
    """Coerce a MaskTool or its name to a MaskTool."""
    if isinstance(value, MaskTool):
        return value
    try:
        return MaskTool(str(value).lower())
    except ValueError:
        names = ", ".join(t.value for t in MaskTool)
        raise ValueError(f"Unknown tool {value!r}; expected one of: {names}") from None


_PAINT_TARGETS = {MaskTool.PAINT_A: PAINT_A_VALUE, MaskTool.PAINT_B: PAINT_B_VALUE}


class FusionCanvas:
    """Two-face fusion driven by a hand-painted mask.

    Args:
        image_a, image_b: (H, W, 4) uint8 rasters of equal size
        radius: Tool radius in pixels
        tool: MaskTool or tool name
    """

    def __init__(self, image_a, image_b, radius=50.0, tool=MaskTool.PAINT_A):
        check_raster(image_a, "image_a")
        check_raster(image_b, "image_b")
        require_same_shape(image_a, image_b, "image_a and image_b")
        if radius <= 0:
            raise ValueError(f"radius must be > 0, got {radius}")
        self.image_a = image_a.copy()
        self.image_b = image_b.copy()
        h, w = image_a.shape[:2]
        self.mask = new_mask(w, h)
        self.radius = float(radius)
        self.tool = mask_tool(tool)
        self.last_pos = None
        self.fusion = None
        self.update_fusion()

    @classmethod
    def from_sources(cls, image_a, image_b, box=FUSION_CANVAS_SIZE, **kwargs):
        """Fit A inside a box and B to A's size, the way the demo loaded them.

        B is fitted inside A's bounds and then placed on an opaque black
        canvas of A's size, so mismatched aspect ratios still line up.
        """
        a = fit_inside(image_a, box)
        h, w = a.shape[:2]
        b_fit = fit_inside(image_b, (w, h))
        b = new_raster(w, h, color=(0, 0, 0, 255))
        b[:b_fit.shape[0], :b_fit.shape[1]] = b_fit
        return cls(a, b, **kwargs)

    def set_tool(self, tool):
        self.tool = mask_tool(tool)

    def set_radius(self, radius):
        if radius <= 0:
            raise ValueError(f"radius must be > 0, got {radius}")
        self.radius = float(radius)

    def update_fusion(self):
        self.fusion = blend_mask(self.image_a, self.image_b, self.mask)
        return self.fusion

    def press(self, x, y):
        """Start a stroke: dab or smooth at (x, y)."""
        self.last_pos = (float(x), float(y))
        self._apply_tool((float(x), float(y)))

    def drag(self, x, y):
        """Continue a stroke. The smear tool drags the mask along the motion."""
        pos = (float(x), float(y))
        if self.tool is MaskTool.SMEAR:
            if self.last_pos is None:
                self.last_pos = pos
                return
            delta = (pos[0] - self.last_pos[0], pos[1] - self.last_pos[1])
            if abs(delta[0]) + abs(delta[1]) < 1:
                return
            area = brush_area(self.last_pos, self.radius)
            self.mask = smear_mask(self.mask, area, delta)
            self.update_fusion()
            self.last_pos = pos
            return
        self._apply_tool(pos)
        self.last_pos = pos

    def release(self):
        self.last_pos = None

    def _apply_tool(self, pos):
        if self.tool is MaskTool.SMOOTH:
            area = brush_area(pos, self.radius)
            self.mask = smooth_mask(self.mask, area, max(1, int(self.radius)))
        elif self.tool in _PAINT_TARGETS:
            self.mask = paint_mask(self.mask, pos, self.radius, _PAINT_TARGETS[self.tool])
        else:
            return
        logger.debug("fusion %s at %s", self.tool.value, pos)
        self.update_fusion()

    def flip_a(self, horizontal=True):
        self.image_a = flip(self.image_a, horizontal)
        self.update_fusion()

    def flip_b(self, horizontal=True):
        self.image_b = flip(self.image_b, horizontal)
        self.update_fusion()


# ---------------------------------------------------------------------------
# Fusion room
# ---------------------------------------------------------------------------

class FusionRoom:
    """Animated fusion room: warped blend + fractal + tile spin + goovie.

    Each render() is one timer tick of the original demo::

        fused   = warped blend of A and B
        fractal = escape-time field at the current zoom
        combo   = fractal with the tile-spun fusion drawn over it at 0.7
        frame   = goovie ripple of combo

    Slider values live in ``self.blend`` (0-1), ``self.zoom`` (> 0),
    ``self.spin`` (degrees) and ``self.warp`` (>= 0).

    Args:
        image_a, image_b: Source rasters, fitted to a size x size canvas
        size: Canvas edge length
        tiles: Tile grid for the spin layer
        workers: Threads for the fractal field
    """

    def __init__(self, image_a, image_b, size=CANVAS_SIZE, tiles=ROOM_TILES,
                 layer_opacity=ROOM_LAYER_OPACITY, workers=1):
        self.size = int(size)
        self.image_a = fit_to_canvas(image_a, self.size)
        self.image_b = fit_to_canvas(image_b, self.size)
        self.tiles = tiles
        self.layer_opacity = layer_opacity
        self.workers = workers
        self.time = 0
        defaults = slider_defaults("room")
        self.blend = defaults["blend"]
        self.zoom = defaults["zoom"]
        self.spin = defaults["spin"]
        self.warp = defaults["warp"]

    def set_params(self, blend=None, zoom=None, spin=None, warp=None):
        """Update slider values; None leaves a value as it is."""
        if blend is not None:
            if not 0.0 <= blend <= 1.0:
                raise ValueError(f"blend must be in [0, 1], got {blend}")
            self.blend = float(blend)
        if zoom is not None:
            if zoom <= 0:
                raise ValueError(f"zoom must be > 0, got {zoom}")
            self.zoom = float(zoom)
        if spin is not None:
            self.spin = float(spin)
        if warp is not None:
            if warp < 0:
                raise ValueError(f"warp must be >= 0, got {warp}")
            self.warp = float(warp)

    def get_params(self):
        return {"blend": self.blend, "zoom": self.zoom,
                "spin": self.spin, "warp": self.warp, "time": self.time}

    def compose(self, time):
        """Build the frame for tick *time* without advancing the clock."""
        fused = blend_warped(self.image_a, self.image_b, self.blend, self.warp, time)
        fractal = generate(self.zoom, time, self.size, self.size, workers=self.workers)
        spun = spin_tiles(fused, self.spin + time, self.tiles)
        combo = draw_over(fractal, spun, self.layer_opacity)
        return goovie(combo, self.warp, time)

    def render(self):
        """Render the current tick as an RGBA raster and advance the clock."""
        frame = self.compose(self.time)
        logger.debug("room tick %d %s", self.time, self.get_params())
        self.time += 1
        return frame

    def render_float(self):
        """Like render(), as (H, W, 3) float32 in [0, 1]."""
        frame = self.render()
        return frame[..., :3].astype(np.float32) / 255.0

    def reset_clock(self):
        self.time = 0
