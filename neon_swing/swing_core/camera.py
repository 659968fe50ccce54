"""
Camera Tracker
==============

Exponentially smoothed horizontal offset that trails the player.
"""

from __future__ import annotations

from typing import Optional

from neon_swing.swing_core.config_loader import GameConfig, get_config


class CameraTracker:
    """Horizontal camera following the player with a fixed lead."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._lead_offset = config.camera.lead_offset
        self._smoothing = config.camera.smoothing
        self._x: float = 0.0

    @property
    def x(self) -> float:
        """Current camera offset in world units."""
        return self._x

    def update(self, player_x: float) -> float:
        """Move the camera a fraction of the way toward its target and return it."""
        self._x += (player_x - self._x - self._lead_offset) * self._smoothing
        return self._x

    def reset(self) -> None:
        self._x = 0.0
