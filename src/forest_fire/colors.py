"""Colour definitions handed to the renderer with cell notifications.

The engine never draws anything. It only decides which colour a cell should
have and ships it as an RGB tuple.
"""

from typing import Tuple

# Type alias for RGB color tuples
Color = Tuple[int, int, int]

# ============================================================================
# TREE COLORS (one is picked per tree to simulate different species)
# ============================================================================

TREE_COLORS: Tuple[Color, ...] = (
    (0, 128, 0),        # green (pine)
    (0, 100, 0),        # darkgreen (oak)
    (154, 205, 50),     # yellowgreen (beech)
    (34, 139, 34),      # forestgreen (fir)
)

# ============================================================================
# CELL STATE COLORS
# ============================================================================

BURNING_COLOR: Color = (255, 0, 0)                  # red
BURNED_COLOR: Color = (128, 128, 128)               # gray (ash)
LIGHTNING_COLOR: Color = (173, 216, 230)            # lightblue


def adjust_color_by_elevation(color: Color, elevation: float) -> Color:
    """Low ground renders at half brightness, peaks at full brightness."""
    factor = 0.5 + 0.5 * elevation
    return tuple(min(max(int(channel * factor), 0), 255) for channel in color)
