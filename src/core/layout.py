# src/core/layout.py - v1
"""Fixed spritesheet layout: frame size, sheet dimensions, animation rows.

Every generated sheet uses this one layout. Each animation occupies a
horizontal band starting at its vertical offset; the band height is the
number of directional rows the animation has times FRAME_SIZE.
"""

from __future__ import annotations

FRAME_SIZE = 64
FRAMES_PER_ROW = 13
TOTAL_ROWS = 54

SHEET_WIDTH = FRAME_SIZE * FRAMES_PER_ROW  # 832
SHEET_HEIGHT = FRAME_SIZE * TOTAL_ROWS  # 3456

# Insertion order is the drawing order.
ANIMATION_OFFSETS: dict[str, int] = {
    "spellcast": 0 * FRAME_SIZE,
    "thrust": 4 * FRAME_SIZE,
    "walk": 8 * FRAME_SIZE,
    "slash": 12 * FRAME_SIZE,
    "shoot": 16 * FRAME_SIZE,
    "hurt": 20 * FRAME_SIZE,
    "climb": 21 * FRAME_SIZE,
    "idle": 22 * FRAME_SIZE,
    "jump": 26 * FRAME_SIZE,
    "sit": 30 * FRAME_SIZE,
    "emote": 34 * FRAME_SIZE,
    "run": 38 * FRAME_SIZE,
    "combat_idle": 42 * FRAME_SIZE,
    "backslash": 46 * FRAME_SIZE,
    "halfslash": 50 * FRAME_SIZE,
}


def animation_rows() -> list[tuple[str, int]]:
    """Return (animation_name, y_offset) pairs in drawing order."""
    return list(ANIMATION_OFFSETS.items())


def sheet_size() -> tuple[int, int]:
    return SHEET_WIDTH, SHEET_HEIGHT
