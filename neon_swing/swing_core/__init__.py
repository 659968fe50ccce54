"""
Swing Core - The simulation behind the game.

This module provides the core game simulation, a Gymnasium environment
wrapper, and all supporting systems (physics, anchors, camera, scoring).

Main exports:
- CoreGame: Game simulation and state machine
- GameStatus: START / PLAYING / GAMEOVER
- SwingEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
- HighScoreStore: Persistent high score
"""

from neon_swing.swing_core.config_loader import GameConfig, load_config
from neon_swing.swing_core.anchor_field import Anchor, AnchorField
from neon_swing.swing_core.physics_world import PhysicsWorld, RopeAttachment
from neon_swing.swing_core.highscore_store import HighScoreStore
from neon_swing.swing_core.game import CoreGame, GameSession, GameStatus, TapAction
from neon_swing.swing_core.env_gym import SwingEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Anchor",
    "AnchorField",
    "PhysicsWorld",
    "RopeAttachment",
    "HighScoreStore",
    "CoreGame",
    "GameSession",
    "GameStatus",
    "TapAction",
    "SwingEnv",
]
