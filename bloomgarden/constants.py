"""Constants for the BloomGarden sketch."""

from __future__ import annotations

# Surface defaults (pixels)
DEFAULT_WIDTH: int = 800
DEFAULT_HEIGHT: int = 600

# Frame loop
FRAME_INTERVAL_MS: int = 16

# Per-tick increments
SPROUT_STEP = 0.025
LEAF_GROWTH_STEP = 0.02
BUD_GROWTH_STEP = 0.015
IDLE_ROTATION_STEP = 0.0005

# Flower shape
STEM_EXTRA = 30.0  # stem reaches a bit past the click point
MIN_STEM_HEIGHT = 30.0
SWAY_AMPLITUDE = 4.0
LEAF_MIN_STEM = 50.0
STEM_WIDTH = 2.5

# Particles leave the top / re-enter the bottom this far outside the surface.
PARTICLE_MARGIN = 10.0

# Colours as (r, g, b, alpha 0..1)
PALETTE = {
    "yellow": {
        "petal": (255, 223, 0, 0.65),
        "petal_light": (255, 240, 150, 0.7),
        "petal_dark": (200, 170, 0, 0.5),
        "center": (180, 130, 20, 0.7),
    },
    "green": {
        "petal": (50, 205, 50, 0.6),
        "petal_light": (144, 238, 144, 0.7),
        "petal_dark": (34, 139, 34, 0.5),
        "center": (60, 120, 60, 0.7),
    },
    "stem": (60, 140, 60, 0.5),
    "leaf": (80, 180, 80, 0.45),
    "leaf_vein": (60, 120, 60, 0.3),
    "bud": (100, 180, 100, 0.6),
    "center_dot": (255, 255, 200, 0.5),
}

PARTICLE_COLORS = {
    "gold": (255, 230, 100),
    "green": (120, 220, 120),
}

RIPPLE_COLORS = {
    "gold": (255, 223, 0, 0.3),
    "green": (100, 220, 100, 0.3),
}
RIPPLE_DURATION_MS = 800

# Background gradient (top, bottom)
SKY_TOP = "#0f1a12"
SKY_BOTTOM = "#1f3322"

# Overlay texts
INTRO_TEXT = "Click anywhere to plant a flower"
COUNTER_LABEL = "Flowers"
COUNTER_SHOW_DELAY_MS = 400
