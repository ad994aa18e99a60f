"""
GridCache — ui/renderer.py
TCOD Renderer: root console and map painting helpers.
=====================================================
Version:     0.1
Stack:       Python 3.11+ | tcod | NumPy
"""

from __future__ import annotations
from typing import Optional, Tuple

import numpy as np
import tcod

Color = Tuple[int, int, int]

MAP_BACKGROUND: Color = (12, 24, 12)

class Renderer:
    """
    Manages the tcod root console and rendering loop.
    The bottom `hud_rows` rows are reserved for status text; the rest is map.
    """
    def __init__(self, width: int, height: int, title: str = "GridCache", hud_rows: int = 3):
        self.width = width
        self.height = height
        self.title = title
        self.hud_rows = hud_rows
        self.root_console = tcod.console.Console(width, height)
        self.context: Optional[tcod.context.Context] = None

    @property
    def map_height(self) -> int:
        return self.height - self.hud_rows

    def clear(self) -> None:
        """Clear the console with black."""
        self.root_console.clear()

    def fill_map_background(self, color: Color = MAP_BACKGROUND) -> None:
        """Paints the map area (everything above the HUD) in one colour."""
        self.root_console.bg[: self.map_height] = np.array(color, dtype=np.uint8)

    def draw_tile(self, sx: int, sy: int, char: str, fg: Color, bg: Optional[Color] = None) -> None:
        """Draws one map tile; off-map coordinates are ignored."""
        if not (0 <= sx < self.width and 0 <= sy < self.map_height):
            return
        self.root_console.print(sx, sy, char, fg=fg, bg=bg)

    def present(self, context: tcod.context.Context) -> None:
        """Present the current console to the screen."""
        context.present(self.root_console)
