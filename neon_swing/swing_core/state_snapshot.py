"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
Anchor coordinates are relative to the player so observations are
translation invariant along the endless course.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING
import numpy as np

from neon_swing.swing_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from neon_swing.swing_core.anchor_field import AnchorField
    from neon_swing.swing_core.physics_world import PhysicsWorld


@dataclass
class GameSnapshot:
    """
    Complete game state snapshot.

    Anchor arrays are fixed-size with masking for variable anchor counts.
    """
    # Player
    player_x: float
    player_y: float
    player_vx: float
    player_vy: float

    # Rope
    attached: int          # 1 if the rope is attached
    rope_length: float     # 0 when detached
    attached_index: int    # Slot of the attached anchor, -1 when detached

    # Session
    camera_x: float
    score: int
    status: int            # Index into GameStatus
    ticks: int
    anchor_count: int

    # Anchor arrays (fixed size, padded)
    anchor_dx: np.ndarray      # (MAX_ANCHORS,) float32, anchor x - player x
    anchor_dy: np.ndarray      # (MAX_ANCHORS,) float32, anchor y - player y
    anchor_mask: np.ndarray    # (MAX_ANCHORS,) bool

    # Optional image
    board_rgb: Optional[np.ndarray] = None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            "player_x": np.array(self.player_x, dtype=np.float32),
            "player_y": np.array(self.player_y, dtype=np.float32),
            "player_vx": np.array(self.player_vx, dtype=np.float32),
            "player_vy": np.array(self.player_vy, dtype=np.float32),
            "attached": np.array(self.attached, dtype=np.int32),
            "rope_length": np.array(self.rope_length, dtype=np.float32),
            "attached_index": np.array(self.attached_index, dtype=np.int32),
            "camera_x": np.array(self.camera_x, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "anchor_count": np.array(self.anchor_count, dtype=np.int32),
            "anchor_dx": self.anchor_dx,
            "anchor_dy": self.anchor_dy,
            "anchor_mask": self.anchor_mask,
        }

        if self.board_rgb is not None:
            obs["board_rgb"] = self.board_rgb

        return obs


class SnapshotBuilder:
    """Builds game state snapshots."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_anchors = config.observation.max_anchors

    @property
    def max_anchors(self) -> int:
        return self._max_anchors

    def build(
        self,
        physics: "PhysicsWorld",
        anchors: "AnchorField",
        camera_x: float,
        score: int,
        status_index: int,
        ticks: int,
        board_rgb: Optional[np.ndarray] = None
    ) -> GameSnapshot:
        """
        Build a snapshot from the current state.

        Args:
            physics: Physics world (player and rope).
            anchors: Anchor field.
            camera_x: Camera offset.
            score: Current score.
            status_index: Index of the game status.
            ticks: Ticks simulated this game.
            board_rgb: Optional rendered image.

        Returns:
            GameSnapshot with fresh arrays.
        """
        player = physics.player
        velocity = player.velocity
        attachment = physics.attachment

        anchor_dx = np.zeros(self._max_anchors, dtype=np.float32)
        anchor_dy = np.zeros(self._max_anchors, dtype=np.float32)
        anchor_mask = np.zeros(self._max_anchors, dtype=bool)

        attached_index = -1
        count = min(len(anchors), self._max_anchors)
        for i in range(count):
            anchor = anchors[i]
            anchor_dx[i] = anchor.x - player.x
            anchor_dy[i] = anchor.y - player.y
            anchor_mask[i] = True
            if attachment is not None and anchor.uid == attachment.anchor_uid:
                attached_index = i

        return GameSnapshot(
            player_x=float(player.x),
            player_y=float(player.y),
            player_vx=float(velocity.x),
            player_vy=float(velocity.y),
            attached=1 if attachment is not None else 0,
            rope_length=float(attachment.length) if attachment is not None else 0.0,
            attached_index=attached_index,
            camera_x=float(camera_x),
            score=int(score),
            status=int(status_index),
            ticks=int(ticks),
            anchor_count=count,
            anchor_dx=anchor_dx,
            anchor_dy=anchor_dy,
            anchor_mask=anchor_mask,
            board_rgb=board_rgb
        )
