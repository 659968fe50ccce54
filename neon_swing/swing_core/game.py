"""
Core Game
=========

Main game orchestrator combining physics, anchors, camera, scoring and rules
behind the START / PLAYING / GAMEOVER state machine.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from neon_swing.swing_core.anchor_field import Anchor, AnchorField
from neon_swing.swing_core.camera import CameraTracker
from neon_swing.swing_core.config_loader import GameConfig, get_config
from neon_swing.swing_core.highscore_store import HighScoreStore
from neon_swing.swing_core.physics_world import PhysicsWorld, PlayerBody, RopeAttachment
from neon_swing.swing_core.rules import TerminationRules, Viewport
from neon_swing.swing_core.scoring import ScoreTracker
from neon_swing.swing_core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    START = "START"
    PLAYING = "PLAYING"
    GAMEOVER = "GAMEOVER"


class TapAction(Enum):
    ATTACHED = "attached"
    DETACHED = "detached"
    IGNORED = "ignored"


@dataclass
class GameSession:
    """Values the UI displays. One live session per game, reset on every start."""
    score: int = 0
    high_score: int = 0
    status: GameStatus = GameStatus.START
    commentary: str = ""


@dataclass
class TickResult:
    """Result of a single simulation tick."""
    status: GameStatus
    delta_score: int
    terminated: bool
    termination_reason: str
    spawned: Optional[Anchor]
    pruned: int


# Called with the name of the session field that changed
ChangeCallback = Callable[[str, GameSession], None]


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Physics world (player body + rope)
    - Anchor field
    - Camera
    - Scoring
    - Bounds rules
    - High score persistence

    One tick = integrate, constrain, camera, extend/prune, score, bounds check.
    Taps and start/restart commands are applied between ticks.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        store: Optional[HighScoreStore] = None,
        on_change: Optional[ChangeCallback] = None
    ):
        """
        Initialize game in the START state.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for anchor layout and commentary.
            store: High score store. Built from config if None.
            on_change: Optional callback notified of session field changes.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._on_change = on_change
        self._store = store if store is not None else HighScoreStore.from_config(config)

        # Initialize subsystems
        self._viewport = Viewport(config.viewport.width, config.viewport.height)
        self._physics = PhysicsWorld(config)
        self._anchors = AnchorField(config, seed)
        self._camera = CameraTracker(config)
        self._scorer = ScoreTracker(config)
        self._rules = TerminationRules(self._viewport, config)
        self._snapshot_builder = SnapshotBuilder(config)
        self._commentary_rng = random.Random(seed)
        # Seed to apply at the next new game; None continues the current streams
        self._pending_seed: Optional[int] = None

        # Game state
        self._session = GameSession(
            high_score=self._store.load(),
            commentary=config.commentary.title
        )
        self._ticks: int = 0
        self._termination_reason: str = ""

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def session(self) -> GameSession:
        """Live session values shown by the UI."""
        return self._session

    @property
    def status(self) -> GameStatus:
        """Current state machine status."""
        return self._session.status

    @property
    def score(self) -> int:
        """Score of the current game."""
        return self._session.score

    @property
    def high_score(self) -> int:
        """Best score seen, loaded from the store at startup."""
        return self._session.high_score

    @property
    def commentary(self) -> str:
        """Commentary line currently shown."""
        return self._session.commentary

    @property
    def is_playing(self) -> bool:
        """Whether the game is in the PLAYING state."""
        return self._session.status is GameStatus.PLAYING

    @property
    def is_over(self) -> bool:
        """Whether the game is in the GAMEOVER state."""
        return self._session.status is GameStatus.GAMEOVER

    @property
    def termination_reason(self) -> str:
        """Reason for the last game over, or empty string."""
        return self._termination_reason

    @property
    def ticks(self) -> int:
        """Ticks simulated in the current game."""
        return self._ticks

    @property
    def physics(self) -> PhysicsWorld:
        """Physics world holding the player and rope."""
        return self._physics

    @property
    def player(self) -> PlayerBody:
        """The player body."""
        return self._physics.player

    @property
    def attachment(self) -> Optional[RopeAttachment]:
        """Active rope attachment, or None."""
        return self._physics.attachment

    @property
    def anchors(self) -> AnchorField:
        """Anchor field."""
        return self._anchors

    @property
    def camera_x(self) -> float:
        """Horizontal camera offset in world units."""
        return self._camera.x

    @property
    def viewport(self) -> Viewport:
        """Viewport used for bounds checks and rendering."""
        return self._viewport

    @property
    def store(self) -> HighScoreStore:
        """High score store."""
        return self._store

    def _notify(self, field_name: str) -> None:
        if self._on_change is not None:
            self._on_change(field_name, self._session)

    def _set_status(self, status: GameStatus) -> None:
        self._session.status = status
        self._notify("status")

    def _set_commentary(self, text: str) -> None:
        self._session.commentary = text
        self._notify("commentary")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Return to the START state, keeping the high score.

        Args:
            seed: New random seed, applied when the next game starts. The
                current random streams continue if None.

        Returns:
            Snapshot of the (idle) game.
        """
        if seed is not None:
            self._seed = seed
            self._pending_seed = seed

        self._physics.reset()
        self._anchors.clear()
        self._camera.reset()
        self._scorer.reset()
        self._ticks = 0
        self._termination_reason = ""

        self._session.score = 0
        self._notify("score")
        self._set_commentary(self._config.commentary.title)
        self._set_status(GameStatus.START)
        return self.build_snapshot()

    def start(self) -> bool:
        """
        Begin a new game from the title or game over screen.

        Returns:
            True if a new game started, False if ignored in the current state.
        """
        if self._session.status is GameStatus.PLAYING:
            logger.debug("Ignoring start while playing")
            return False
        self._new_game()
        return True

    def restart(self) -> bool:
        """
        Begin a new game after a game over.

        Returns:
            True if a new game started, False if ignored in the current state.
        """
        if self._session.status is not GameStatus.GAMEOVER:
            logger.debug("Ignoring restart in state %s", self._session.status.value)
            return False
        self._new_game()
        return True

    def tap(self) -> TapAction:
        """
        Attach to the nearest anchor ahead, or release the rope if attached.

        Returns:
            What the tap did.
        """
        if self._session.status is not GameStatus.PLAYING:
            return TapAction.IGNORED

        if self._physics.is_attached:
            self._physics.detach()
            return TapAction.DETACHED

        player = self._physics.player
        anchor = self._anchors.nearest_ahead(player.x)
        if anchor is None:
            return TapAction.IGNORED

        attachment = self._physics.attach(anchor.uid, anchor.position)
        logger.debug("Attached to anchor %d (length %.1f)", anchor.uid, attachment.length)
        return TapAction.ATTACHED

    def handle_event(self, event: str) -> bool:
        """
        Dispatch a named input event ("tap", "start" or "restart").

        Unknown events are ignored.

        Returns:
            True if the event changed anything.
        """
        if event == "tap":
            return self.tap() is not TapAction.IGNORED
        if event == "start":
            return self.start()
        if event == "restart":
            return self.restart()
        logger.debug("Ignoring unknown event %r", event)
        return False

    def resize(self, width: int, height: int) -> None:
        """Resize the viewport without touching simulation state."""
        self._viewport.resize(width, height)

    def _new_game(self) -> None:
        """Re-initialize all core state and enter PLAYING."""
        seed, self._pending_seed = self._pending_seed, None
        if seed is not None:
            self._commentary_rng = random.Random(seed)

        self._physics.reset()
        self._camera.reset()
        self._anchors.reset(seed)
        self._scorer.reset()
        self._ticks = 0
        self._termination_reason = ""

        self._session.score = 0
        self._notify("score")
        self._set_commentary(self._config.commentary.playing)
        self._set_status(GameStatus.PLAYING)
        logger.info("Game started (seed=%s, anchors=%d)", self._seed, len(self._anchors))

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> TickResult:
        """
        Advance the simulation by one tick.

        Does nothing unless the game is PLAYING.

        Returns:
            TickResult describing what happened.
        """
        if self._session.status is not GameStatus.PLAYING:
            return TickResult(
                status=self._session.status,
                delta_score=0,
                terminated=self.is_over,
                termination_reason=self._termination_reason,
                spawned=None,
                pruned=0
            )

        self._ticks += 1

        # Resolve the rope pivot from the field
        anchor_position = None
        attachment = self._physics.attachment
        if attachment is not None:
            anchor = self._anchors.get(attachment.anchor_uid)
            if anchor is None:
                self._physics.detach()
            else:
                anchor_position = anchor.position

        self._physics.step(anchor_position)
        player = self._physics.player

        self._camera.update(player.x)

        spawned = self._anchors.extend(player.x)
        attachment = self._physics.attachment
        pruned = self._anchors.prune(
            retain_uid=attachment.anchor_uid if attachment is not None else None
        )

        delta_score = 0
        score_event = self._scorer.update(player.x)
        if score_event is not None:
            delta_score = score_event.delta
            self._session.score = score_event.score
            self._notify("score")

        term_result = self._rules.check_termination(player.y)
        if term_result.terminated:
            self._game_over(term_result.reason)

        return TickResult(
            status=self._session.status,
            delta_score=delta_score,
            terminated=term_result.terminated,
            termination_reason=term_result.reason,
            spawned=spawned,
            pruned=pruned
        )

    def _game_over(self, reason: str) -> None:
        """Enter GAMEOVER: persist a new high score and pick a commentary line."""
        self._termination_reason = reason
        self._session.status = GameStatus.GAMEOVER

        if self._session.score > self._session.high_score:
            self._session.high_score = self._session.score
            self._store.save(self._session.score)
            self._notify("high_score")

        self._set_commentary(self._commentary_rng.choice(self._config.commentary.game_over))
        self._notify("status")
        logger.info(
            "Game over (%s) after %d ticks: score=%d high_score=%d",
            reason, self._ticks, self._session.score, self._session.high_score
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def build_snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            physics=self._physics,
            anchors=self._anchors,
            camera_x=self._camera.x,
            score=self._session.score,
            status_index=list(GameStatus).index(self._session.status),
            ticks=self._ticks
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._session.score,
            "high_score": self._session.high_score,
            "status": self._session.status.value,
            "ticks": self._ticks,
            "attached": self._physics.is_attached,
            "anchor_count": len(self._anchors),
            "camera_x": self._camera.x,
            "terminated_reason": self._termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with player, anchors, rope, camera and session info.
        """
        player = self._physics.player
        attachment = self._physics.attachment
        attached_uid = attachment.anchor_uid if attachment is not None else None

        anchors_data = []
        rope = None
        for anchor in self._anchors:
            is_attached = anchor.uid == attached_uid
            anchors_data.append({
                "uid": anchor.uid,
                "x": anchor.x,
                "y": anchor.y,
                "attached": is_attached,
            })
            if is_attached:
                rope = {
                    "anchor": (anchor.x, anchor.y),
                    "player": (player.x, player.y),
                    "length": attachment.length,
                }

        return {
            "viewport_width": self._viewport.width,
            "viewport_height": self._viewport.height,
            "camera_x": self._camera.x,
            "player": (player.x, player.y),
            "previous_position": (player.previous_position.x, player.previous_position.y),
            "anchors": anchors_data,
            "rope": rope,
            "status": self._session.status.value,
            "score": self._session.score,
            "high_score": self._session.high_score,
            "commentary": self._session.commentary,
        }
