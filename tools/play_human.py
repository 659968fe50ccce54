"""
Human Play Mode
================

Play the rope swing game interactively with real-time physics.

Controls:
    - Click/Space: Hook the nearest anchor ahead, or let go
    - Enter: Start / retry
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

import pygame

from neon_swing.logging_config import setup_logging
from neon_swing.swing_core.config_loader import load_config, GameConfig
from neon_swing.swing_core.game import CoreGame, GameSession, GameStatus
from neon_swing.swing_core.highscore_store import HighScoreStore

logger = logging.getLogger("neon_swing.tools.play_human")

GRID_SIZE = 100
TRAIL_TICKS = 5
DEFAULT_HIGHSCORE_FILE = "~/.neon_swing/highscore.json"


class SwingRenderer:
    """
    Neon renderer for human play mode.
    Draws the world, HUD and the start / game over panels.
    """

    def __init__(self, config: GameConfig):
        """Initialize renderer with the neon palette."""
        self._config = config

        # Colors
        self._bg = (10, 10, 12)
        self._grid = (26, 26, 26)
        self._anchor = (51, 51, 51)
        self._neon = (0, 242, 255)
        self._white = (255, 255, 255)
        self._text_dim = (140, 140, 150)
        self._panel = (20, 20, 28)

        # Fonts
        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 64)
        self._font_large = pygame.font.Font(None, 40)
        self._font_medium = pygame.font.Font(None, 28)
        self._font_small = pygame.font.Font(None, 22)

        self._button_rect: Optional[pygame.Rect] = None

    @property
    def button_rect(self) -> Optional[pygame.Rect]:
        """Screen rect of the PLAY / RETRY button, if a panel is shown."""
        return self._button_rect

    def render(self, screen: pygame.Surface, render_data: dict) -> None:
        """Render a full frame."""
        screen.fill(self._bg)
        camera_x = render_data["camera_x"]

        self._draw_grid(screen, camera_x)
        self._draw_anchors(screen, render_data, camera_x)
        self._draw_rope(screen, render_data, camera_x)
        self._draw_player(screen, render_data, camera_x)
        self._draw_hud(screen, render_data)

        status = render_data["status"]
        if status == GameStatus.PLAYING.value:
            self._button_rect = None
            self._draw_controls_help(screen)
        else:
            self._draw_panel(screen, render_data)

    def _draw_grid(self, screen: pygame.Surface, camera_x: float) -> None:
        width, height = screen.get_size()
        x = -(camera_x % GRID_SIZE)
        while x < width:
            pygame.draw.line(screen, self._grid, (int(x), 0), (int(x), height), 1)
            x += GRID_SIZE

    def _draw_anchors(self, screen: pygame.Surface, render_data: dict, camera_x: float) -> None:
        for anchor in render_data["anchors"]:
            pos = (int(anchor["x"] - camera_x), int(anchor["y"]))
            if anchor["attached"]:
                pygame.draw.circle(screen, (0, 80, 90), pos, 12)
                pygame.draw.circle(screen, self._neon, pos, 6)
            else:
                pygame.draw.circle(screen, self._anchor, pos, 6)

    def _draw_rope(self, screen: pygame.Surface, render_data: dict, camera_x: float) -> None:
        rope = render_data["rope"]
        if rope is None:
            return
        ax, ay = rope["anchor"]
        px, py = rope["player"]
        start = (int(ax - camera_x), int(ay))
        end = (int(px - camera_x), int(py))
        pygame.draw.line(screen, (0, 70, 80), start, end, 8)
        pygame.draw.line(screen, self._neon, start, end, 3)

    def _draw_player(self, screen: pygame.Surface, render_data: dict, camera_x: float) -> None:
        px, py = render_data["player"]
        prev_x, prev_y = render_data["previous_position"]
        trail_x = px - (px - prev_x) * TRAIL_TICKS
        trail_y = py - (py - prev_y) * TRAIL_TICKS

        pos = (int(px - camera_x), int(py))
        pygame.draw.line(screen, self._white, pos, (int(trail_x - camera_x), int(trail_y)), 2)
        pygame.draw.circle(screen, self._white, pos, 10)

    def _draw_hud(self, screen: pygame.Surface, render_data: dict) -> None:
        width, _ = screen.get_size()

        score = self._font_large.render(f"{render_data['score']}m", True, self._white)
        screen.blit(score, (20, 16))

        best = self._font_small.render(f"BEST {render_data['high_score']}m", True, self._text_dim)
        screen.blit(best, (width - best.get_width() - 20, 22))

        commentary = self._font_medium.render(f'"{render_data["commentary"]}"', True, self._neon)
        screen.blit(commentary, ((width - commentary.get_width()) // 2, 20))

    def _draw_controls_help(self, screen: pygame.Surface) -> None:
        width, height = screen.get_size()
        text = self._font_small.render("Click / Space: hook or release", True, self._text_dim)
        screen.blit(text, ((width - text.get_width()) // 2, height - 36))

    def _draw_panel(self, screen: pygame.Surface, render_data: dict) -> None:
        """Draw the start or game over panel with its button."""
        width, height = screen.get_size()
        is_start = render_data["status"] == GameStatus.START.value

        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        screen.blit(overlay, (0, 0))

        panel = pygame.Rect(0, 0, 420, 260)
        panel.center = (width // 2, height // 2)
        pygame.draw.rect(screen, self._panel, panel, border_radius=12)
        pygame.draw.rect(screen, self._neon, panel, 2, border_radius=12)

        title = "NEON SWING" if is_start else "GAME OVER"
        title_surf = self._font_huge.render(title, True, self._white)
        screen.blit(title_surf, (panel.centerx - title_surf.get_width() // 2, panel.top + 30))

        if not is_start:
            dist = self._font_medium.render(f"Distance: {render_data['score']}m", True, self._text_dim)
            screen.blit(dist, (panel.centerx - dist.get_width() // 2, panel.top + 100))

        button = pygame.Rect(0, 0, 160, 50)
        button.center = (panel.centerx, panel.bottom - 60)
        pygame.draw.rect(screen, self._neon, button, border_radius=8)
        label = self._font_large.render("PLAY" if is_start else "RETRY", True, self._bg)
        screen.blit(label, (button.centerx - label.get_width() // 2, button.centery - label.get_height() // 2))
        self._button_rect = button


class HumanPlayer:
    """Interactive game session with a pygame window."""

    def __init__(
        self,
        config: GameConfig,
        seed: Optional[int] = None,
        window_width: int = 1280,
        window_height: int = 720,
        target_fps: int = 60,
        highscore_file: Optional[str] = None
    ):
        pygame.init()
        pygame.display.set_caption("Neon Swing")

        self._config = config
        self._target_fps = target_fps
        self._screen = pygame.display.set_mode((window_width, window_height), pygame.RESIZABLE)
        self._clock = pygame.time.Clock()
        self._running = True

        if highscore_file is None:
            highscore_file = config.highscore.path or DEFAULT_HIGHSCORE_FILE
        store = HighScoreStore(path=highscore_file, key=config.highscore.key)

        self._game = CoreGame(config=config, seed=seed, store=store, on_change=self._on_change)
        self._game.resize(window_width, window_height)
        self._renderer = SwingRenderer(config)

    def _on_change(self, field_name: str, session: GameSession) -> None:
        if field_name == "high_score":
            logger.info("New high score: %dm", session.high_score)
        elif field_name == "status" and session.status is GameStatus.GAMEOVER:
            logger.info("Distance: %dm - %s", session.score, session.commentary)

    def run(self) -> int:
        """Run the game loop. Returns the high score."""
        while self._running:
            self._handle_events()
            self._game.tick()
            self._renderer.render(self._screen, self._game.get_render_data())
            pygame.display.flip()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.high_score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                self._screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self._game.resize(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_SPACE:
                    self._game.handle_event("tap")
                elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                    self._press_button()

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self._game.is_playing:
                    self._game.handle_event("tap")
                else:
                    button = self._renderer.button_rect
                    if button is not None and button.collidepoint(event.pos):
                        self._press_button()

    def _press_button(self) -> None:
        """Start from the title panel, retry from the game over panel."""
        if self._game.status is GameStatus.START:
            self._game.handle_event("start")
        elif self._game.status is GameStatus.GAMEOVER:
            self._game.handle_event("restart")


def main():
    parser = argparse.ArgumentParser(description="Play Neon Swing interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=1280, help="Window width (default: 1280)")
    parser.add_argument("--height", type=int, default=720, help="Window height (default: 720)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--highscore-file", type=str, default=None, help=f"High score JSON file (default: {DEFAULT_HIGHSCORE_FILE})")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")

    args = parser.parse_args()
    setup_logging(getattr(logging, args.log_level.upper(), logging.INFO))

    config = load_config()
    player = HumanPlayer(
        config=config,
        seed=args.seed,
        window_width=args.width,
        window_height=args.height,
        target_fps=args.fps,
        highscore_file=args.highscore_file
    )
    best = player.run()
    print(f"\nBest distance: {best}m")
    return 0


if __name__ == "__main__":
    sys.exit(main())
