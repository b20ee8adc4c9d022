"""
UI/view constants centralized for reuse across view modules.

Presentation tuning only; none of these values are part of a share code.
"""

from __future__ import annotations

# Door opening animation
HINGE_ANGLE_DEG: float = 160.0
OPEN_ANIMATION_MS: int = 650

# Coalesce resize bursts into one re-measure per event-loop pass
MEASURE_DEBOUNCE_MS: int = 0

# Share-code fields are refreshed at most this often while editing
CODE_REFRESH_DEBOUNCE_MS: int = 200

# Canvas colours (RGBA)
CANVAS_BACKDROP_RGBA: tuple[int, int, int, int] = (24, 26, 32, 255)
BOARD_FALLBACK_RGBA: tuple[int, int, int, int] = (40, 56, 84, 255)
DOOR_INTERIOR_RGBA: tuple[int, int, int, int] = (10, 10, 14, 200)
DOOR_BACK_RGBA: tuple[int, int, int, int] = (230, 230, 230, 255)
LOCKED_OVERLAY_RGBA: tuple[int, int, int, int] = (0, 0, 0, 40)
SELECTION_RGBA: tuple[int, int, int, int] = (255, 196, 0, 255)

# Outline colours per style
OUTLINE_THIN_RGBA: tuple[int, int, int, int] = (255, 255, 255, 230)
OUTLINE_THICK_RGBA: tuple[int, int, int, int] = (0, 0, 0, 46)
OUTLINE_DOUBLE_RGBA: tuple[int, int, int, int] = (255, 255, 255, 204)
OUTLINE_GLOW_RGBA: tuple[int, int, int, int] = (255, 255, 255, 153)

# Label font size as a fraction of the door's display height
LABEL_FONT_RATIO: float = 0.35

# Edit form ranges
DOOR_SIZE_RANGE: tuple[int, int] = (20, 1000)
BORDER_RADIUS_RANGE: tuple[int, int] = (0, 48)
SIDEBAR_WIDTH_PX: int = 320
