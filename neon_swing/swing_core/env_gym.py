"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the swing game.
One env step is one game tick, optionally preceded by a tap.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from neon_swing.swing_core.config_loader import GameConfig, load_config
from neon_swing.swing_core.game import CoreGame, TapAction
from neon_swing.swing_core.highscore_store import HighScoreStore
from neon_swing.swing_core.state_snapshot import GameSnapshot

logger = logging.getLogger(__name__)

ACTION_WAIT = 0
ACTION_TAP = 1


class SwingEnv(gym.Env):
    """
    Rope swing game as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = do nothing, 1 = tap (attach to nearest anchor ahead,
        or release the rope).

    Observation Space:
        Dict with player state, rope state and padded anchor arrays relative
        to the player.

    Reward:
        Score gained this tick.

    Episode ends (terminated) when the player leaves the bounds, or is
    truncated after caps.max_ticks ticks.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
    ):
        """
        Initialize swing environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            image_obs: If True, include board_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._image_obs = image_obs
        self._img_width = image_width or self._config.observation.image_width
        self._img_height = image_height or self._config.observation.image_height

        # Training runs never touch the player's persistent high score
        self._game = CoreGame(config=self._config, store=HighScoreStore(path=None))

        self._renderer = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        logger.debug(
            "SwingEnv initialized: viewport %dx%d, max anchors %d",
            self._config.viewport.width,
            self._config.viewport.height,
            self._config.observation.max_anchors
        )

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_anchors = self._config.observation.max_anchors

        def scalar(low=-np.inf, high=np.inf, dtype=np.float32):
            return spaces.Box(low=low, high=high, shape=(), dtype=dtype)

        obs_dict = {
            "player_x": scalar(),
            "player_y": scalar(),
            "player_vx": scalar(),
            "player_vy": scalar(),
            "attached": spaces.Discrete(2),
            "rope_length": scalar(low=0.0),
            "attached_index": scalar(low=-1, high=max_anchors - 1, dtype=np.int32),
            "camera_x": scalar(),
            "score": scalar(low=0, high=np.iinfo(np.int64).max, dtype=np.int64),
            "anchor_count": scalar(low=0, high=max_anchors, dtype=np.int32),
            "anchor_dx": spaces.Box(low=-np.inf, high=np.inf, shape=(max_anchors,), dtype=np.float32),
            "anchor_dy": spaces.Box(low=-np.inf, high=np.inf, shape=(max_anchors,), dtype=np.float32),
            "anchor_mask": spaces.MultiBinary(max_anchors),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a new game.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.reset(seed=seed)
        self._game.start()

        obs = self._snapshot_to_obs(self._game.build_snapshot())
        info = self._game.get_info()
        info["delta_score"] = 0
        info["tap"] = TapAction.IGNORED.value

        return obs, info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one tick.

        Args:
            action: 0 to wait, 1 to tap before the tick.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)

        tap = TapAction.IGNORED
        if action == ACTION_TAP:
            tap = self._game.tap()

        result = self._game.tick()

        obs = self._snapshot_to_obs(self._game.build_snapshot())
        reward = float(result.delta_score)
        terminated = self._game.is_over
        truncated = not terminated and self._game.ticks >= self._config.caps.max_ticks

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["tap"] = tap.value

        if result.terminated:
            logger.debug("Episode terminated: %s (score %d)", result.termination_reason, self._game.score)

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        if self._image_obs:
            snapshot.board_rgb = self._render_to_array()
        return snapshot.to_obs_dict()

    def _render_to_array(self) -> np.ndarray:
        """Render the game to an RGB array."""
        if self._renderer is None:
            from neon_swing.swing_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

        return self._renderer.render(
            self._game.get_render_data(),
            self._img_width,
            self._img_height
        )

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
