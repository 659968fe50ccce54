"""
Scoring System
==============

Converts horizontal distance into a score that never decreases.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from neon_swing.swing_core.config_loader import GameConfig, get_config


@dataclass
class ScoreEvent:
    """Record of a score increase."""
    previous: int
    score: int

    @property
    def delta(self) -> int:
        return self.score - self.previous

    def __repr__(self) -> str:
        return f"ScoreEvent({self.previous} -> {self.score})"


class ScoreTracker:
    """
    Tracks the distance score of a session.

    Score is floor(x / distance_per_point) of the furthest point reached.
    Moving backward never lowers it.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._distance_per_point = config.scoring.distance_per_point
        self._score: int = 0

    @property
    def score(self) -> int:
        """Current score."""
        return self._score

    def score_for(self, player_x: float) -> int:
        """Score a player at this x would earn."""
        return math.floor(player_x / self._distance_per_point)

    def update(self, player_x: float) -> Optional[ScoreEvent]:
        """
        Raise the score if the player is further than ever before.

        Args:
            player_x: Current player x.

        Returns:
            ScoreEvent if the score changed, None otherwise.
        """
        candidate = self.score_for(player_x)
        if candidate <= self._score:
            return None

        event = ScoreEvent(previous=self._score, score=candidate)
        self._score = candidate
        return event

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
