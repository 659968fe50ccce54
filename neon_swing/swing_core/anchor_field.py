"""
Anchor Field
============

Procedural supply of rope anchors: a seeded initial layout, forward extension
as the player advances, and bounded-size pruning from the far side.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from pymunk import Vec2d

from neon_swing.swing_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anchor:
    """A fixed pivot point the rope can attach to."""
    uid: int
    position: Vec2d
    active: bool = True

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y


class AnchorField:
    """
    Ordered sequence of anchors, ascending in x.

    Generation only ever appends to the right, so insertion order is spatial
    order. All randomness comes from a private random.Random so a seed
    reproduces the exact layout.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize an empty anchor field.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._cfg = config.anchors
        self._rng = random.Random(seed)
        self._anchors: List[Anchor] = []
        self._next_uid = 0

    def __len__(self) -> int:
        return len(self._anchors)

    def __iter__(self) -> Iterator[Anchor]:
        return iter(self._anchors)

    def __getitem__(self, index: int) -> Anchor:
        return self._anchors[index]

    @property
    def anchors(self) -> Tuple[Anchor, ...]:
        """Immutable view of the current anchors."""
        return tuple(self._anchors)

    @property
    def last(self) -> Optional[Anchor]:
        """Right-most anchor, or None if the field is empty."""
        return self._anchors[-1] if self._anchors else None

    def _make_anchor(self, x: float) -> Anchor:
        y = self._rng.uniform(self._cfg.y_min, self._cfg.y_max)
        anchor = Anchor(uid=self._next_uid, position=Vec2d(x, y))
        self._next_uid += 1
        return anchor

    def _jitter(self, amount: float) -> float:
        return self._rng.uniform(-amount, amount)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Clear the field and regenerate the initial layout.

        Args:
            seed: New random seed. Keeps current RNG stream if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._anchors = []
        self.generate_initial()

    def clear(self) -> None:
        """Remove every anchor."""
        self._anchors = []

    def generate_initial(self) -> None:
        """Append the fixed-size initial layout starting at the configured offset."""
        cfg = self._cfg
        for i in range(cfg.initial_count):
            x = cfg.initial_offset + i * cfg.spacing + self._jitter(cfg.initial_jitter)
            self._anchors.append(self._make_anchor(x))

    def extend(self, player_x: float) -> Optional[Anchor]:
        """
        Spawn one anchor past the last if the player is close enough to it.

        Args:
            player_x: Current player x.

        Returns:
            The new anchor, or None if nothing was spawned.
        """
        last = self.last
        if last is None:
            return None
        if player_x <= last.x - self._cfg.spawn_trigger_distance:
            return None

        x = last.x + self._cfg.spacing + self._jitter(self._cfg.extend_jitter)
        anchor = self._make_anchor(x)
        self._anchors.append(anchor)
        logger.debug("Spawned anchor %d at (%.1f, %.1f)", anchor.uid, anchor.x, anchor.y)
        return anchor

    def prune(self, retain_uid: Optional[int] = None) -> int:
        """
        Drop the oldest anchors once the field grows past the threshold.

        Keeps the most recent prune_keep anchors. An anchor whose uid is
        retain_uid survives even when it falls outside that tail; it stays in
        front of the tail so ordering is unchanged.

        Args:
            retain_uid: Uid of the anchor the rope is attached to, if any.

        Returns:
            Number of anchors removed.
        """
        if len(self._anchors) <= self._cfg.prune_threshold:
            return 0

        cut = len(self._anchors) - self._cfg.prune_keep
        kept = self._anchors[cut:]

        if retain_uid is not None:
            for anchor in self._anchors[:cut]:
                if anchor.uid == retain_uid:
                    kept.insert(0, anchor)
                    break

        removed = len(self._anchors) - len(kept)
        self._anchors = kept
        logger.debug("Pruned %d anchors, %d remain", removed, len(kept))
        return removed

    def get(self, uid: int) -> Optional[Anchor]:
        """Look up a resident anchor by uid."""
        for anchor in self._anchors:
            if anchor.uid == uid:
                return anchor
        return None

    def contains(self, uid: int) -> bool:
        """True if the anchor with this uid is still in the field."""
        return self.get(uid) is not None

    def nearest_ahead(self, x: float) -> Optional[Anchor]:
        """
        Anchor strictly to the right of x with the smallest horizontal gap.

        Ties go to the first anchor in sequence order.

        Args:
            x: Reference x (the player's).

        Returns:
            The closest anchor ahead, or None if none is ahead.
        """
        ahead = [a for a in self._anchors if a.x > x]
        if not ahead:
            return None
        return min(ahead, key=lambda a: abs(a.x - x))

    def replace(self, positions: List[Tuple[float, float]]) -> None:
        """
        Replace the field with anchors at explicit positions (tools and tests).

        Args:
            positions: (x, y) pairs in ascending x order.
        """
        self._anchors = []
        for x, y in positions:
            self._anchors.append(Anchor(uid=self._next_uid, position=Vec2d(x, y)))
            self._next_uid += 1
