"""
Game Rules
==========

Viewport tracking and the out-of-bounds checks that end a game.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from neon_swing.swing_core.config_loader import GameConfig, get_config


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


@dataclass
class Viewport:
    """Visible area in pixels. The host can resize it at any time."""
    width: int
    height: int

    def resize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)


class TerminationRules:
    """
    Handles game termination conditions.

    - Fell: below the viewport bottom plus a margin
    - Flew off: above a fixed negative limit
    """

    def __init__(self, viewport: Viewport, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.

        Args:
            viewport: Shared viewport; its current height is read on every check.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._viewport = viewport
        self._bottom_margin = config.bounds.bottom_margin
        self._top_limit = config.bounds.top_limit

    @property
    def floor_y(self) -> float:
        """Y beyond which the player has fallen out."""
        return self._viewport.height + self._bottom_margin

    @property
    def ceiling_y(self) -> float:
        """Y above which the player has flown out."""
        return self._top_limit

    def check_termination(self, player_y: float) -> TerminationResult:
        """
        Check the player's height against both limits.

        Args:
            player_y: Current player y (+y is down).

        Returns:
            TerminationResult indicating game state.
        """
        if player_y > self.floor_y:
            return TerminationResult.game_over("fell")

        if player_y < self.ceiling_y:
            return TerminationResult.game_over("flew_off")

        return TerminationResult.none()
