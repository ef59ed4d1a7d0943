"""
Core Game
=========

Session state and the top-level state machine that sequences rounds.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from gift_rush.gift_core.camera_shake import CameraShake
from gift_rush.gift_core.config_loader import GameConfig, get_config
from gift_rush.gift_core.gift_catalog import GiftCatalog, get_catalog
from gift_rush.gift_core.round_controller import Round
from gift_rush.gift_core.rules import DifficultyCurve, RoundRules, draw_needed_order
from gift_rush.gift_core.scoring import RoundResult, ScoreTracker, score_round
from gift_rush.gift_core.screen_fade import FadeKind, ScreenFade

logger = logging.getLogger(__name__)


class GameState(Enum):
    INITIAL_SCREEN = "initial_screen"
    PREPARE_ROUND = "prepare_round"
    ON_ROUND = "on_round"
    CHECK_ROUND_RESULT = "check_round_result"
    SHOW_ROUND_RESULT = "show_round_result"
    GAME_OVER = "game_over"


@dataclass
class FrameInput:
    """Edge-triggered signals raised during one frame."""
    accept: bool = False
    reject: bool = False
    advance: bool = False
    quit: bool = False


class GameManager:
    """
    Main game session.

    Owns every piece of mutable state: the active round, difficulty
    parameters, lives, camera shake and screen fade. One call to
    ``update`` runs one frame and at most one state handler.

    States:
        initial_screen -> prepare_round -> on_round -> check_round_result
        -> show_round_result -> prepare_round | game_over
        game_over -> initial_screen (on reset)
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        catalog: Optional[GiftCatalog] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize game session.

        Args:
            config: Game configuration. Uses default if None.
            catalog: Gift templates. Uses default if None.
            seed: Random seed for reproducibility.
        """
        if config is None:
            config = get_config()
        if catalog is None:
            catalog = get_catalog()

        self._config = config
        self._catalog = catalog
        self._seed = seed
        self._rng = random.Random(seed)

        # Subsystems
        self._curve = DifficultyCurve(config)
        self._rules = RoundRules(config)
        self._scorer = ScoreTracker()
        self.camera = CameraShake(config)
        self.fade: Optional[ScreenFade] = None

        # Fixed session parameters
        self.initial_spawn_interval = config.spawn.initial_interval
        self.initial_fall_speed_increment = config.fall.initial_increment
        self.max_frame_dt = config.frame.max_dt

        self.running: bool = True
        self.dt: float = 0.0
        self.frame_count: int = 0

        self._handlers: Dict[GameState, Callable[[FrameInput], None]] = {
            GameState.INITIAL_SCREEN: self._initial_screen,
            GameState.PREPARE_ROUND: self._prepare_round,
            GameState.ON_ROUND: self._on_round,
            GameState.CHECK_ROUND_RESULT: self._check_round_result,
            GameState.SHOW_ROUND_RESULT: self._show_round_result,
            GameState.GAME_OVER: self._game_over,
        }

        self._reset_session()

    def _reset_session(self) -> None:
        """Return every session counter to its initial value."""
        self.state = GameState.INITIAL_SCREEN
        self.round_number: int = 0
        self.round: Optional[Round] = None
        self.lives: int = self._config.round.initial_lives
        self.spawn_interval: float = self.initial_spawn_interval
        self.fall_speed_increment: float = self.initial_fall_speed_increment
        self.last_result: Optional[RoundResult] = None
        self._round_end_reason: str = ""
        self._scorer.reset()
        self.camera.stop()

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def catalog(self) -> GiftCatalog:
        return self._catalog

    @property
    def scorer(self) -> ScoreTracker:
        return self._scorer

    @property
    def rng(self) -> random.Random:
        return self._rng

    @property
    def is_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    @property
    def fade_alpha(self) -> float:
        """Current fade alpha, 0 when no fade is active."""
        return self.fade.alpha if self.fade is not None else 0.0

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the session to the initial screen.

        Args:
            seed: New random seed. Keeps current RNG if None.
        """
        if seed is not None:
            self._seed = seed
            self._rng = random.Random(seed)
        self._reset_session()
        self.fade = None

    def start_fade(
        self,
        kind: FadeKind,
        duration: Optional[float] = None,
        color: Optional[Tuple[int, int, int]] = None,
        on_complete: Optional[Callable[[], None]] = None
    ) -> ScreenFade:
        """Replace the active fade with a new one."""
        self.fade = ScreenFade(
            kind,
            duration if duration is not None else self._config.fade.duration,
            color if color is not None else self._config.fade.color,
            on_complete
        )
        return self.fade

    def _enter(self, state: GameState) -> None:
        logger.info("State %s -> %s", self.state.value, state.value)
        self.state = state

    # ---- State handlers ----

    def _initial_screen(self, inputs: FrameInput) -> None:
        if inputs.advance:
            self.start_fade(FadeKind.OUT)
            self._enter(GameState.PREPARE_ROUND)

    def _prepare_round(self, inputs: FrameInput) -> None:
        if self.lives <= 0:
            self.start_fade(FadeKind.IN, on_complete=self.camera.stop)
            self._enter(GameState.GAME_OVER)
            return

        self.round_number += 1
        params = self._curve.params_for(self.round_number)
        self.fall_speed_increment = params.fall_speed_increment
        self.spawn_interval = params.spawn_interval

        needed = draw_needed_order(self._rng, self._config.round.target_length)
        self.round = Round(needed, params, self._rng, self._config)
        self._round_end_reason = ""
        logger.info(
            "Round %d: increment=%.2f interval=%.2f needed=%s",
            self.round_number, params.fall_speed_increment, params.spawn_interval,
            [c.name for c in needed]
        )
        self._enter(GameState.ON_ROUND)

    def _on_round(self, inputs: FrameInput) -> None:
        events = self.round.update(self.dt, accept=inputs.accept, reject=inputs.reject)
        if events:
            self.camera.trigger()
        self.camera.update(self.dt, self._rng)

        end = self._rules.check_round_end(self.round)
        if end.complete:
            logger.debug("Round %d ended: %s", self.round_number, end.reason)
            self._round_end_reason = end.reason
            self._enter(GameState.CHECK_ROUND_RESULT)

    def _check_round_result(self, inputs: FrameInput) -> None:
        result = score_round(
            self.round.chosen_categories,
            self.round.needed_order,
            round_number=self.round_number,
            overflow=self._round_end_reason == "overflow"
        )
        self._scorer.record(result)
        self.last_result = result
        self.lives -= result.penalty
        self._enter(GameState.SHOW_ROUND_RESULT)

    def _show_round_result(self, inputs: FrameInput) -> None:
        if inputs.advance:
            self.start_fade(FadeKind.IN_OUT, on_complete=self.camera.stop)
            self._enter(GameState.PREPARE_ROUND)

    def _game_over(self, inputs: FrameInput) -> None:
        if inputs.advance:
            logger.info(
                "Game over after %d rounds, %d gifts loaded correctly",
                self.round_number, self._scorer.total_matches
            )
            self._enter(GameState.INITIAL_SCREEN)
            self._reset_session()
            self.start_fade(FadeKind.OUT)

    # ---- Frame ----

    def update(self, dt: float, inputs: Optional[FrameInput] = None) -> GameState:
        """
        Run one frame.

        Args:
            dt: Seconds since the previous frame. Clamped to [0, max_frame_dt].
            inputs: Signals raised this frame. No signals if None.

        Returns:
            State after the frame.
        """
        if inputs is None:
            inputs = FrameInput()
        if inputs.quit:
            self.running = False
            return self.state

        # A long frame must not carry a gift past the one below it
        self.dt = max(0.0, min(self.max_frame_dt, dt))
        self.frame_count += 1
        self._handlers[self.state](inputs)

        if self.fade is not None:
            self.fade.update(self.dt)
        return self.state
