"""
Human Play Mode
================

Play Gift Rush in a pygame window.

Controls:
    - Right / D: Load the bottom gift (accept)
    - Left / A: Skip the bottom gift (reject)
    - Space / Enter: Start, next round, restart after game over
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT] [--verbose]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from gift_rush.gift_core.config_loader import load_config, GameConfig
from gift_rush.gift_core.game import FrameInput, GameManager, GameState
from gift_rush.gift_core.gift_catalog import GiftCatalog, GiftCategory, load_templates
from gift_rush.gift_core.state_snapshot import GameSnapshot, SnapshotBuilder, LANE_FALLING

logger = logging.getLogger(__name__)


class GiftRenderer:
    """
    Draws a GameSnapshot: gifts, particles, HUD and fade overlay.
    """

    def __init__(
        self,
        config: GameConfig,
        catalog: GiftCatalog,
        window_width: int,
        window_height: int
    ):
        self._config = config
        self._catalog = catalog
        self._window_width = window_width
        self._window_height = window_height

        # Colors
        self._bg = (24, 28, 48)
        self._floor = (70, 60, 90)
        self._text = (245, 240, 230)
        self._text_dim = (170, 165, 180)
        self._ok = (90, 210, 120)
        self._bad = (230, 80, 80)
        self._warning = (255, 210, 80)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 72)
        self._font_large = pygame.font.Font(None, 42)
        self._font_medium = pygame.font.Font(None, 28)
        self._font_small = pygame.font.Font(None, 20)

        self._scale = min(
            window_width / config.viewport.width,
            window_height / config.viewport.height
        )

    def _to_screen(self, x: float, y: float, shift: Tuple[float, float]) -> Tuple[int, int]:
        return (int((x + shift[0]) * self._scale), int((y + shift[1]) * self._scale))

    def render(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        """Render the complete scene."""
        screen.fill(self._bg)
        shift = snapshot.camera_shift

        floor_y = self._to_screen(0, self._config.floor_y, shift)[1]
        pygame.draw.line(screen, self._floor, (0, floor_y), (self._window_width, floor_y), 4)

        self._draw_spawn_warning(screen, snapshot)
        self._draw_gifts(screen, snapshot, shift)
        self._draw_particles(screen, snapshot, shift)
        self._draw_hud(screen, snapshot)
        self._draw_fade(screen, snapshot)

        # Banners sit above the fade so prompts stay readable on a dark screen
        if snapshot.state == GameState.INITIAL_SCREEN.value:
            self._draw_banner(screen, "GIFT RUSH", "Press SPACE to start")
        elif snapshot.state == GameState.SHOW_ROUND_RESULT.value:
            self._draw_banner(
                screen,
                f"{snapshot.last_matches} / {len(snapshot.needed_order)} correct",
                f"-{snapshot.last_penalty} lives. Press SPACE for the next round"
            )
        elif snapshot.state == GameState.GAME_OVER.value:
            self._draw_banner(screen, "GAME OVER", "Press SPACE to restart")

    def _draw_spawn_warning(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        """Blink an arrow above the spawn point while the intro plays."""
        if snapshot.intro_frames <= 0 or snapshot.intro_frames % 6 < 3:
            return
        cx = int(self._config.viewport.width / 2 * self._scale)
        pygame.draw.polygon(screen, self._warning, [(cx - 14, 4), (cx + 14, 4), (cx, 22)])

    def _draw_gifts(
        self,
        screen: pygame.Surface,
        snapshot: GameSnapshot,
        shift: Tuple[float, float]
    ) -> None:
        for i in range(snapshot.gift_count):
            category = GiftCategory(int(snapshot.gift_category[i]))
            x, y = self._to_screen(snapshot.gift_x[i], snapshot.gift_y[i], shift)
            w = int(snapshot.gift_w[i] * self._scale)
            h = int(snapshot.gift_h[i] * self._scale)
            rect = pygame.Rect(x, y, w, h)

            pygame.draw.rect(screen, self._catalog.color_of(category), rect, border_radius=6)
            # Ribbon
            pygame.draw.rect(screen, self._text, (rect.centerx - 3, rect.top, 6, rect.height))
            if snapshot.gift_lane[i] == LANE_FALLING and snapshot.gift_movable[i]:
                pygame.draw.rect(screen, self._warning, rect, width=3, border_radius=6)

    def _draw_particles(
        self,
        screen: pygame.Surface,
        snapshot: GameSnapshot,
        shift: Tuple[float, float]
    ) -> None:
        for i in range(snapshot.particle_count):
            size = max(1, int(snapshot.particle_size[i] * self._scale))
            surface = pygame.Surface((size * 2, size * 2), pygame.SRCALPHA)
            pygame.draw.circle(
                surface, (255, 255, 255, int(snapshot.particle_alpha[i])), (size, size), size
            )
            x, y = self._to_screen(snapshot.particle_x[i], snapshot.particle_y[i], shift)
            screen.blit(surface, (x - size, y - size))

    def _draw_hud(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        lives = self._font_medium.render(f"Lives: {snapshot.lives}", True, self._text)
        screen.blit(lives, (16, 12))
        round_text = self._font_medium.render(f"Round {snapshot.round_number}", True, self._text_dim)
        screen.blit(round_text, (16, 40))

        # Needed order, loaded slots greyed out
        x = self._window_width - 16
        for slot in range(len(snapshot.needed_order) - 1, -1, -1):
            category = GiftCategory(snapshot.needed_order[slot])
            x -= 34
            color = self._catalog.color_of(category)
            if slot < snapshot.chosen_count:
                color = tuple(c // 3 for c in color)
            pygame.draw.rect(screen, color, (x, 14, 28, 28), border_radius=4)

        # Stack fill meter
        meter_w = int(200 * snapshot.stack_fill)
        color = self._bad if snapshot.stack_fill > 0.75 else self._ok
        pygame.draw.rect(screen, self._text_dim, (16, 70, 200, 8), width=1)
        pygame.draw.rect(screen, color, (16, 70, meter_w, 8))

    def _draw_banner(self, screen: pygame.Surface, title: str, subtitle: str) -> None:
        title_surf = self._font_huge.render(title, True, self._text)
        sub_surf = self._font_medium.render(subtitle, True, self._text_dim)
        cy = self._window_height // 2
        screen.blit(title_surf, ((self._window_width - title_surf.get_width()) // 2, cy - 60))
        screen.blit(sub_surf, ((self._window_width - sub_surf.get_width()) // 2, cy + 10))

    def _draw_fade(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        alpha = int(snapshot.fade_alpha * 255)
        if alpha <= 0:
            return
        overlay = pygame.Surface((self._window_width, self._window_height), pygame.SRCALPHA)
        overlay.fill((*snapshot.fade_color, alpha))
        screen.blit(overlay, (0, 0))


class HumanPlayer:
    """
    Runs the pygame loop: poll keys into a FrameInput, update, render.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        window_width: Optional[int] = None,
        window_height: Optional[int] = None,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps
        window_width = window_width or config.viewport.width
        window_height = window_height or config.viewport.height

        catalog = load_templates()
        self._game = GameManager(config=config, catalog=catalog, seed=seed)
        self._snapshots = SnapshotBuilder(config)

        pygame.init()
        self._screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption("Gift Rush")
        self._clock = pygame.time.Clock()

        self._renderer = GiftRenderer(config, catalog, window_width, window_height)

    def run(self) -> int:
        """Run the game loop. Returns the number of rounds reached."""
        logger.info("Right/D load, Left/A skip, Space next, ESC quit")

        while self._game.running:
            dt = self._clock.tick(self._target_fps) / 1000.0
            self._game.update(dt, self._poll_input())
            self._renderer.render(self._screen, self._snapshots.build(self._game))
            pygame.display.flip()

        pygame.quit()
        return self._game.round_number

    def _poll_input(self) -> FrameInput:
        """Collect this frame's key presses."""
        inputs = FrameInput()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                inputs.quit = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    inputs.quit = True
                elif event.key in (pygame.K_RIGHT, pygame.K_d):
                    inputs.accept = True
                elif event.key in (pygame.K_LEFT, pygame.K_a):
                    inputs.reject = True
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    inputs.advance = True
        return inputs


def main():
    parser = argparse.ArgumentParser(description="Play Gift Rush interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=None, help="Window width (default: viewport)")
    parser.add_argument("--height", type=int, default=None, help="Window height (default: viewport)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--verbose", action="store_true", help="Log per-frame details")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        player = HumanPlayer(
            config=load_config(),
            seed=args.seed,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps
        )
        rounds = player.run()
        logger.info("Reached round %d", rounds)
        return 0
    except ImportError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
