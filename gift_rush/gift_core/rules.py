"""
Game Rules
==========

Handles the difficulty curve, target order draws, and round completion.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

from gift_rush.gift_core.config_loader import GameConfig, get_config
from gift_rush.gift_core.gift_catalog import GiftCategory

if TYPE_CHECKING:
    from gift_rush.gift_core.round_controller import Round


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class RoundParams:
    """Per-round difficulty."""
    round_number: int
    fall_speed_increment: float
    spawn_interval: float


@dataclass
class RoundEndResult:
    """Result of a round completion check."""
    complete: bool
    reason: str

    @staticmethod
    def none() -> "RoundEndResult":
        return RoundEndResult(False, "")

    @staticmethod
    def all_selected() -> "RoundEndResult":
        return RoundEndResult(True, "all_selected")

    @staticmethod
    def overflow() -> "RoundEndResult":
        return RoundEndResult(True, "overflow")


class DifficultyCurve:
    """
    Maps a round number to fall speed and spawn interval.

    Both follow ln(round), clamped:
    - increment = clamp(initial + growth * ln(n), min, max)
    - interval  = clamp(initial - growth * ln(n), min, max)
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize difficulty curve.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._fall = config.fall
        self._spawn = config.spawn

    def fall_speed_increment(self, round_number: int) -> float:
        log_n = math.log(max(1, round_number))
        raw = self._fall.initial_increment + self._fall.growth * log_n
        return clamp(raw, self._fall.min_increment, self._fall.max_increment)

    def spawn_interval(self, round_number: int) -> float:
        log_n = math.log(max(1, round_number))
        raw = self._spawn.initial_interval - self._spawn.growth * log_n
        return clamp(raw, self._spawn.min_interval, self._spawn.max_interval)

    def params_for(self, round_number: int) -> RoundParams:
        """
        Compute difficulty for a round.

        Args:
            round_number: 1-indexed round number.

        Returns:
            RoundParams for the round.
        """
        return RoundParams(
            round_number=round_number,
            fall_speed_increment=self.fall_speed_increment(round_number),
            spawn_interval=self.spawn_interval(round_number)
        )


def draw_needed_order(rng: random.Random, length: int) -> Tuple[GiftCategory, ...]:
    """Draw the target order uniformly, with repetition."""
    categories = list(GiftCategory)
    return tuple(rng.choice(categories) for _ in range(length))


class RoundRules:
    """
    Round completion conditions.

    - All selected: every needed gift has been loaded and left the screen
    - Overflow: the falling stack reached the fullness threshold
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize round rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._overflow_threshold = config.round.overflow_threshold

    @property
    def overflow_threshold(self) -> int:
        return self._overflow_threshold

    def check_round_end(self, round_: "Round") -> RoundEndResult:
        """Check whether the active round is over."""
        if round_.all_selected:
            return RoundEndResult.all_selected()
        if len(round_.falling) >= self._overflow_threshold:
            return RoundEndResult.overflow()
        return RoundEndResult.none()
