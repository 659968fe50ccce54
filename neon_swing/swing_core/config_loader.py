"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhysicsConfig:
    """Verlet integration parameters."""
    gravity: float    # Added to vertical displacement per tick (+y is down)
    friction: float   # Velocity damping factor in (0, 1]


@dataclass(frozen=True)
class PlayerConfig:
    """Initial player placement at the start of every game."""
    start_x: float
    start_y: float
    start_prev_x: float
    start_prev_y: float

    @property
    def start_position(self) -> Tuple[float, float]:
        return (self.start_x, self.start_y)

    @property
    def start_previous_position(self) -> Tuple[float, float]:
        return (self.start_prev_x, self.start_prev_y)


@dataclass(frozen=True)
class AnchorConfig:
    """Procedural anchor generation and pruning."""
    initial_count: int
    initial_offset: float
    spacing: float
    initial_jitter: float
    extend_jitter: float
    y_min: float
    y_max: float
    spawn_trigger_distance: float
    prune_threshold: int
    prune_keep: int


@dataclass(frozen=True)
class CameraConfig:
    """Camera smoothing parameters."""
    lead_offset: float
    smoothing: float


@dataclass(frozen=True)
class ScoringConfig:
    """Distance-to-score conversion."""
    distance_per_point: float


@dataclass(frozen=True)
class BoundsConfig:
    """Out-of-bounds limits that end the game."""
    bottom_margin: float  # Pixels below the viewport bottom
    top_limit: float      # Absolute y above which the player is lost


@dataclass(frozen=True)
class ViewportConfig:
    """Default viewport size (the host may resize at runtime)."""
    width: int
    height: int


@dataclass(frozen=True)
class CommentaryConfig:
    """Flavor text shown by the UI."""
    title: str
    playing: str
    game_over: Tuple[str, ...]


@dataclass(frozen=True)
class HighScoreConfig:
    """Persistent high score location."""
    key: str
    path: Optional[str]


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits for automated play."""
    max_ticks: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_anchors: int
    image_width: int
    image_height: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    physics: PhysicsConfig
    player: PlayerConfig
    anchors: AnchorConfig
    camera: CameraConfig
    scoring: ScoringConfig
    bounds: BoundsConfig
    viewport: ViewportConfig
    commentary: CommentaryConfig
    highscore: HighScoreConfig
    caps: CapsConfig
    observation: ObservationConfig


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if not 0.0 < config.physics.friction <= 1.0:
        raise ValueError(f"physics.friction must be in (0, 1], got {config.physics.friction}")

    anchors = config.anchors
    if anchors.initial_count < 1:
        raise ValueError(f"anchors.initial_count must be >= 1, got {anchors.initial_count}")

    if anchors.spacing <= 0:
        raise ValueError(f"anchors.spacing must be positive, got {anchors.spacing}")

    # Jitter larger than half the spacing could reorder anchors
    max_jitter = max(anchors.initial_jitter, anchors.extend_jitter)
    if max_jitter < 0 or max_jitter * 2 >= anchors.spacing:
        raise ValueError(
            f"anchor jitter ({max_jitter}) must be non-negative and below half "
            f"the spacing ({anchors.spacing})"
        )

    if anchors.y_min > anchors.y_max:
        raise ValueError(f"anchors.y_min ({anchors.y_min}) exceeds anchors.y_max ({anchors.y_max})")

    if not 1 <= anchors.prune_keep < anchors.prune_threshold:
        raise ValueError(
            f"anchors.prune_keep ({anchors.prune_keep}) must be in "
            f"[1, prune_threshold={anchors.prune_threshold})"
        )

    if not 0.0 < config.camera.smoothing <= 1.0:
        raise ValueError(f"camera.smoothing must be in (0, 1], got {config.camera.smoothing}")

    if config.scoring.distance_per_point <= 0:
        raise ValueError(
            f"scoring.distance_per_point must be positive, got {config.scoring.distance_per_point}"
        )

    if config.viewport.width <= 0 or config.viewport.height <= 0:
        raise ValueError(
            f"viewport must be positive, got {config.viewport.width}x{config.viewport.height}"
        )

    if not config.commentary.game_over:
        raise ValueError("commentary.game_over must contain at least one line")

    # The field never holds more than prune_threshold anchors between ticks
    if config.observation.max_anchors < anchors.prune_threshold:
        raise ValueError(
            f"observation.max_anchors ({config.observation.max_anchors}) must be at least "
            f"anchors.prune_threshold ({anchors.prune_threshold})"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        friction=float(physics_data["friction"])
    )

    player_data = raw["player"]
    player = PlayerConfig(
        start_x=float(player_data["start_x"]),
        start_y=float(player_data["start_y"]),
        start_prev_x=float(player_data["start_prev_x"]),
        start_prev_y=float(player_data["start_prev_y"])
    )

    anchor_data = raw["anchors"]
    anchors = AnchorConfig(
        initial_count=int(anchor_data["initial_count"]),
        initial_offset=float(anchor_data["initial_offset"]),
        spacing=float(anchor_data["spacing"]),
        initial_jitter=float(anchor_data.get("initial_jitter", 50.0)),
        extend_jitter=float(anchor_data.get("extend_jitter", 75.0)),
        y_min=float(anchor_data["y_min"]),
        y_max=float(anchor_data["y_max"]),
        spawn_trigger_distance=float(anchor_data["spawn_trigger_distance"]),
        prune_threshold=int(anchor_data["prune_threshold"]),
        prune_keep=int(anchor_data["prune_keep"])
    )

    camera_data = raw["camera"]
    camera = CameraConfig(
        lead_offset=float(camera_data["lead_offset"]),
        smoothing=float(camera_data["smoothing"])
    )

    scoring = ScoringConfig(
        distance_per_point=float(raw["scoring"]["distance_per_point"])
    )

    bounds_data = raw["bounds"]
    bounds = BoundsConfig(
        bottom_margin=float(bounds_data["bottom_margin"]),
        top_limit=float(bounds_data["top_limit"])
    )

    viewport_data = raw["viewport"]
    viewport = ViewportConfig(
        width=int(viewport_data["width"]),
        height=int(viewport_data["height"])
    )

    commentary_data = raw["commentary"]
    commentary = CommentaryConfig(
        title=str(commentary_data.get("title", "")),
        playing=str(commentary_data["playing"]),
        game_over=tuple(str(line) for line in commentary_data["game_over"])
    )

    # Optional sections
    hs_data = raw.get("highscore", {})
    hs_path = hs_data.get("path")
    highscore = HighScoreConfig(
        key=str(hs_data.get("key", "rope-high-score")),
        path=str(hs_path) if hs_path else None
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 36000))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_anchors=int(obs_data.get("max_anchors", 24)),
        image_width=int(obs_data.get("image_width", 320)),
        image_height=int(obs_data.get("image_height", 180))
    )

    config = GameConfig(
        physics=physics,
        player=player,
        anchors=anchors,
        camera=camera,
        scoring=scoring,
        bounds=bounds,
        viewport=viewport,
        commentary=commentary,
        highscore=highscore,
        caps=caps,
        observation=observation
    )

    _validate_config(config)
    logger.debug("Loaded config from %s", config_path)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
