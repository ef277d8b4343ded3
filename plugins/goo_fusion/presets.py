"""
Goo / Fusion Parameter Presets

Numeric constants and slider definitions for the three demos:
  - goo:    interactive warp brushes over a single image
  - fusion: mask painting between two face images
  - room:   animated fusion + fractal + tile spin + goovie ripple

The constants were picked by eye in the original demos. Keep the values
as they are for visual compatibility; every kernel takes them as keyword
arguments so a caller can override them per call.
"""

# =====================================================================
# CANVAS
# =====================================================================
CANVAS_SIZE = 512          # FusionRoom render size (square)
FUSION_CANVAS_SIZE = 400   # FusionCanvas source images fit inside this box
MASK_INITIAL = 128         # 128 = even mix of A and B

# Mask paint targets
PAINT_A_VALUE = 0
PAINT_B_VALUE = 255

# =====================================================================
# BRUSHES / MASK TOOLS
# =====================================================================
PINCH_SCALE = 0.01
SMEAR_OPACITY = 0.9        # drag trail instead of a hard overwrite
SMOOTH_OPACITY = 0.7       # soft blend of the blurred patch

# =====================================================================
# FUSION WARP (rippling seam between the two faces)
# =====================================================================
WARP_PERIOD = 128.0
WARP_PHASE_RATE = 0.05

# =====================================================================
# FRACTAL (Julia variant with an animated perturbation)
# =====================================================================
FRACTAL_C = (-0.7, 0.27015)
FRACTAL_PERTURB_AMPLITUDE = 0.1
FRACTAL_PERTURB_RATE = 0.05
FRACTAL_MAX_ITER = 255
FRACTAL_ESCAPE_RADIUS_SQ = 4.0
FRACTAL_X_SPAN = 1.5

# =====================================================================
# GOOVIE (whole-image radial ripple)
# =====================================================================
GOOVIE_WAVELENGTH = 20.0
GOOVIE_RATE = 0.1
GOOVIE_SCALE = 0.01

# =====================================================================
# ROOM COMPOSITE
# =====================================================================
ROOM_LAYER_OPACITY = 0.7   # spun fusion drawn over the fractal
ROOM_TILES = 4


# Slider definitions mirror the original control panels. Each entry:
#   {"key": "radius", "label": "Radius", "min": 10, "max": 200, "default": 100}
# "scale" converts the integer slider position into the kernel value.
SLIDER_DEFS = {
    "goo": [
        {"key": "radius", "label": "Radius", "min": 10, "max": 200, "default": 100},
        {"key": "force", "label": "Force", "min": 1, "max": 50, "default": 10},
    ],
    "fusion": [
        {"key": "radius", "label": "Brush Radius", "min": 10, "max": 100, "default": 50},
    ],
    "room": [
        {"key": "blend", "label": "Blend", "min": 0, "max": 100, "default": 0,
         "scale": 0.01},
        {"key": "zoom", "label": "Zoom", "min": 1, "max": 100, "default": 1},
        {"key": "spin", "label": "Spin", "min": 0, "max": 360, "default": 0},
        {"key": "warp", "label": "Warp", "min": 0, "max": 50, "default": 0},
    ],
}


def get_slider_defs(demo):
    """Return the slider definitions for a demo (empty list if unknown)."""
    return SLIDER_DEFS.get(demo, [])


def slider_defaults(demo):
    """Return {key: default kernel value} for a demo's sliders."""
    return {d["key"]: d["default"] * d.get("scale", 1)
            for d in get_slider_defs(demo)}


def slider_value(demo, key, position):
    """Convert an integer slider position into the kernel parameter value.

    The position is clamped to the slider's range first, the same way the
    original QSlider widgets never report values outside their range.
    """
    for d in get_slider_defs(demo):
        if d["key"] == key:
            position = max(d["min"], min(d["max"], position))
            return position * d.get("scale", 1)
    raise ValueError(f"Unknown slider {key!r} for demo {demo!r}")
