"""
High Score Store
================

Persists a single integer high score in a small JSON file.

Storage problems never reach the game: reads fall back to 0 and failed
writes are dropped with a warning, leaving a session-only high score.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from neon_swing.swing_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


class HighScoreStore:
    """
    JSON-backed key/value store for the high score.

    With no path the store is session-only and keeps the value in memory.
    """

    def __init__(self, path: Optional[str] = None, key: str = "rope-high-score"):
        """
        Initialize store.

        Args:
            path: JSON file location. None keeps the score in memory only.
            key: Key the score is stored under.
        """
        self._path = Path(os.path.expanduser(path)) if path else None
        self._key = key
        self._memory: int = 0

    @classmethod
    def from_config(cls, config: Optional[GameConfig] = None) -> "HighScoreStore":
        """Build the store described by the highscore config section."""
        if config is None:
            config = get_config()
        return cls(path=config.highscore.path, key=config.highscore.key)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def key(self) -> str:
        return self._key

    def _read_all(self) -> dict:
        with open(self._path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self._path}")
        return data

    def load(self) -> int:
        """
        Read the stored high score.

        Returns:
            Stored score, or 0 if missing or unreadable.
        """
        if self._path is None:
            return self._memory

        try:
            if not self._path.exists():
                return 0
            value = int(self._read_all().get(self._key, 0))
        except (OSError, ValueError, TypeError, OverflowError) as e:
            logger.warning("Could not read high score from %s: %s", self._path, e)
            return 0

        return max(0, value)

    def save(self, score: int) -> bool:
        """
        Write a new high score.

        Other keys already in the file are preserved.

        Args:
            score: Score to store.

        Returns:
            True if the score was written, False if the write was dropped.
        """
        self._memory = int(score)
        if self._path is None:
            return True

        data = {}
        try:
            if self._path.exists():
                data = self._read_all()
        except (OSError, ValueError) as e:
            logger.warning("Overwriting unreadable high score file %s: %s", self._path, e)

        data[self._key] = int(score)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning("Could not save high score to %s: %s", self._path, e)
            return False

        return True
