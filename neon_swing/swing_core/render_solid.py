"""
Solid Renderer
==============

Fast numpy-based renderer for headless play and image observations.
Draws the scrolling grid, anchors, rope, player and a short velocity trail.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
import numpy as np

from neon_swing.swing_core.config_loader import GameConfig, get_config

# Spacing of the background grid in world units
GRID_SIZE = 100
TRAIL_TICKS = 5


class SolidRenderer:
    """
    Renders the game as flat shapes into an RGB array.

    World coordinates are shifted by the camera offset and scaled so the
    viewport fills the output image.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        # Neon palette
        self._bg_color = np.array([10, 10, 12], dtype=np.uint8)
        self._grid_color = np.array([26, 26, 26], dtype=np.uint8)
        self._anchor_color = np.array([51, 51, 51], dtype=np.uint8)
        self._active_color = np.array([0, 242, 255], dtype=np.uint8)
        self._player_color = np.array([255, 255, 255], dtype=np.uint8)

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        scale_x = width / render_data["viewport_width"]
        scale_y = height / render_data["viewport_height"]
        camera_x = render_data["camera_x"]

        def to_img(x: float, y: float):
            return int((x - camera_x) * scale_x), int(y * scale_y)

        # Vertical grid lines scroll with the camera
        offset = -(camera_x % GRID_SIZE)
        grid_x = offset
        while grid_x < render_data["viewport_width"]:
            col = int(grid_x * scale_x)
            if 0 <= col < width:
                img[:, col] = self._grid_color
            grid_x += GRID_SIZE

        anchor_radius = max(1, int(6 * scale_x))
        for anchor in render_data["anchors"]:
            cx, cy = to_img(anchor["x"], anchor["y"])
            color = self._active_color if anchor["attached"] else self._anchor_color
            self._draw_circle(img, cx, cy, anchor_radius, color)

        rope = render_data.get("rope")
        if rope is not None:
            ax, ay = to_img(*rope["anchor"])
            px, py = to_img(*rope["player"])
            self._draw_line(img, ax, ay, px, py, self._active_color)

        px, py = render_data["player"]
        prev_x, prev_y = render_data["previous_position"]
        trail_x = px - (px - prev_x) * TRAIL_TICKS
        trail_y = py - (py - prev_y) * TRAIL_TICKS
        self._draw_line(img, *to_img(px, py), *to_img(trail_x, trail_y), self._player_color)

        cx, cy = to_img(px, py)
        self._draw_circle(img, cx, cy, max(1, int(10 * scale_x)), self._player_color)

        return img

    def _draw_circle(
        self,
        img: np.ndarray,
        cx: int,
        cy: int,
        radius: int,
        color: np.ndarray
    ) -> None:
        """Draw a filled circle using numpy."""
        height, width = img.shape[:2]

        # Calculate bounding box
        y_min = max(0, cy - radius)
        y_max = min(height, cy + radius + 1)
        x_min = max(0, cx - radius)
        x_max = min(width, cx + radius + 1)

        if y_min >= y_max or x_min >= x_max:
            return

        yy, xx = np.meshgrid(
            np.arange(y_min, y_max),
            np.arange(x_min, x_max),
            indexing='ij'
        )
        mask = (xx - cx)**2 + (yy - cy)**2 <= radius**2
        img[y_min:y_max, x_min:x_max][mask] = color

    def _draw_line(
        self,
        img: np.ndarray,
        x0: int,
        y0: int,
        x1: int,
        y1: int,
        color: np.ndarray
    ) -> None:
        """Draw a one-pixel line by sampling points along the segment."""
        height, width = img.shape[:2]

        steps = max(abs(x1 - x0), abs(y1 - y0)) + 1
        xs = np.rint(np.linspace(x0, x1, steps)).astype(np.int64)
        ys = np.rint(np.linspace(y0, y1, steps)).astype(np.int64)

        inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
        img[ys[inside], xs[inside]] = color

    def close(self) -> None:
        """Clean up resources (no-op for solid renderer)."""
        pass
