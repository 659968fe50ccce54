"""
Physics World
=============

Verlet integration of the player point mass and the one-sided rope constraint.

Coordinates are screen space: +x to the right, +y points down, so gravity is
a positive vertical term.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from pymunk import Vec2d

from neon_swing.swing_core.config_loader import GameConfig, get_config


@dataclass
class PlayerBody:
    """
    Point mass tracked by current and previous position.

    Velocity is derived from the position history and never stored.
    """
    position: Vec2d
    previous_position: Vec2d

    @property
    def velocity(self) -> Vec2d:
        """Implicit per-tick velocity."""
        return self.position - self.previous_position

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y


@dataclass(frozen=True)
class RopeAttachment:
    """
    Active rope: the anchor it hangs from and its fixed length.

    The anchor is referenced by uid so the anchor field can check residency
    before evicting anything.
    """
    anchor_uid: int
    length: float


def integrate(
    position: Vec2d,
    previous_position: Vec2d,
    gravity: float,
    friction: float
) -> Tuple[Vec2d, Vec2d]:
    """
    Advance one Verlet step.

    Args:
        position: Current position.
        previous_position: Position one tick ago.
        gravity: Vertical acceleration per tick.
        friction: Velocity damping factor.

    Returns:
        (new_position, new_previous_position) tuple.
    """
    velocity = (position - previous_position) * friction
    new_previous = position
    new_position = position + velocity + Vec2d(0.0, gravity)
    return new_position, new_previous


def apply_rope_constraint(
    position: Vec2d,
    anchor_position: Vec2d,
    length: float
) -> Vec2d:
    """
    Clamp a position onto the rope circle if it is beyond the rope length.

    Slack ropes (distance <= length) leave the position untouched. A position
    exactly on the anchor has no direction to project along and is also left
    untouched for this tick.

    Args:
        position: Post-integration position.
        anchor_position: Rope pivot.
        length: Rope length captured at attach time.

    Returns:
        Corrected position.
    """
    delta = position - anchor_position
    distance = delta.length

    if distance <= length or distance == 0.0:
        return position

    direction = delta / distance
    return anchor_position + direction * length


class PhysicsWorld:
    """
    Owns the player body and the rope attachment.

    One call to step() integrates the body and resolves the rope constraint
    against the anchor the caller resolved from the attachment.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize physics world.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._gravity = config.physics.gravity
        self._friction = config.physics.friction

        self._player = PlayerBody(
            position=Vec2d(*config.player.start_position),
            previous_position=Vec2d(*config.player.start_previous_position)
        )
        self._attachment: Optional[RopeAttachment] = None

    @property
    def player(self) -> PlayerBody:
        """The player body."""
        return self._player

    @property
    def attachment(self) -> Optional[RopeAttachment]:
        """Active rope attachment, or None when swinging free."""
        return self._attachment

    @property
    def is_attached(self) -> bool:
        """Whether the player hangs from a rope."""
        return self._attachment is not None

    def reset(self) -> None:
        """Place the player at its start position and drop the rope."""
        player_cfg = self._config.player
        self._player.position = Vec2d(*player_cfg.start_position)
        self._player.previous_position = Vec2d(*player_cfg.start_previous_position)
        self._attachment = None

    def set_player_state(
        self,
        position: Tuple[float, float],
        previous_position: Optional[Tuple[float, float]] = None
    ) -> None:
        """
        Place the player directly (tools and tests).

        Args:
            position: New position.
            previous_position: New previous position. Defaults to position (at rest).
        """
        if previous_position is None:
            previous_position = position
        self._player.position = Vec2d(*position)
        self._player.previous_position = Vec2d(*previous_position)

    def attach(self, anchor_uid: int, anchor_position: Vec2d) -> RopeAttachment:
        """
        Attach the rope to an anchor.

        The rope length is the current distance to the anchor and stays fixed
        until the rope is released.
        """
        length = (self._player.position - anchor_position).length
        self._attachment = RopeAttachment(anchor_uid=anchor_uid, length=length)
        return self._attachment

    def detach(self) -> None:
        """Release the rope."""
        self._attachment = None

    def step(self, anchor_position: Optional[Vec2d] = None) -> None:
        """
        Advance the player by one tick.

        Args:
            anchor_position: Position of the attached anchor. Ignored when no
                rope is attached.
        """
        position, previous = integrate(
            self._player.position,
            self._player.previous_position,
            self._gravity,
            self._friction
        )

        if self._attachment is not None and anchor_position is not None:
            position = apply_rope_constraint(position, anchor_position, self._attachment.length)

        self._player.previous_position = previous
        self._player.position = position
