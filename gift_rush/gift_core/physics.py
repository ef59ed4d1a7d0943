"""
Gift Physics
============

Gift bodies, rectangle overlap, fall integration, and stack / floor
collision resolution.

Gifts in the falling list are ordered oldest first. New gifts spawn on top
and stack downward, so list order doubles as stack order: each gift only
collides with its immediate predecessor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from gift_rush.gift_core.config_loader import GameConfig, get_config
from gift_rush.gift_core.gift_catalog import GiftCategory


class ChoiceState(Enum):
    """Player decision on a gift."""
    UNSELECTED = -1
    IGNORED = 0
    CHOSEN = 1


@dataclass
class Gift:
    """
    A gift box in the play area.

    Position is the top-left corner, screen coordinates (y grows downward).
    """
    x: float
    y: float
    width: float
    height: float
    category: GiftCategory
    vx: float = 0.0
    vy: float = 0.0
    movable: bool = False
    choice: ChoiceState = ChoiceState.UNSELECTED
    off_screen: bool = False
    floor_shake_done: bool = False
    stack_shake_done: bool = False

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    @property
    def is_selectable(self) -> bool:
        """True if the player can choose this gift right now."""
        return self.movable and self.choice is ChoiceState.UNSELECTED


@dataclass
class ImpactEvent:
    """A gift hit the floor or the gift below it."""
    kind: str                   # "floor" or "stack"
    left_x: float
    right_x: float
    bottom_y: float

    @staticmethod
    def from_gift(kind: str, gift: Gift) -> "ImpactEvent":
        return ImpactEvent(kind, gift.x, gift.right, gift.bottom)


def overlap_rect(a: Gift, b: Gift) -> Tuple[float, float]:
    """
    Axis-aligned intersection of two gifts.

    Returns:
        (width, height) of the intersection, (0, 0) if they don't intersect.
    """
    w = min(a.right, b.right) - max(a.x, b.x)
    h = min(a.bottom, b.bottom) - max(a.y, b.y)
    if w <= 0 or h <= 0:
        return (0.0, 0.0)
    return (w, h)


class GiftPhysics:
    """
    Integrates and resolves the falling gift stack.

    Handles:
    - Fall integration with clamped speed
    - Stack collision against the immediate predecessor
    - Floor contact (gift becomes movable)
    - Settle pass against gifts already leaving on the floor row
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize physics.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._floor_y = config.floor_y
        self._max_speed = config.fall.max_speed
        self._scale_by_dt = config.fall.scale_by_dt
        self._reference_fps = config.fall.reference_fps

    @property
    def floor_y(self) -> float:
        return self._floor_y

    def integrate(self, gift: Gift, dt: float, increment: float) -> None:
        """
        Advance one gift's fall.

        The increment is added once per frame unless scale_by_dt is set,
        in which case it is treated as a rate at reference_fps.
        """
        if self._scale_by_dt:
            increment = increment * self._reference_fps * dt
        gift.vy = max(0.0, min(self._max_speed, gift.vy + increment))
        gift.y += gift.vy * dt

    def resolve_stack_collision(self, gift: Gift, below: Gift) -> bool:
        """
        Push a gift up out of the gift below it.

        Returns:
            True on the first contact for this gift (one-shot impact).
        """
        _, overlap_h = overlap_rect(gift, below)
        if overlap_h <= 0:
            return False

        gift.y -= overlap_h
        if gift.stack_shake_done:
            return False
        gift.stack_shake_done = True
        return True

    def resolve_floor_collision(self, gift: Gift) -> bool:
        """
        Rest a gift on the floor once its bottom edge reaches it.

        Returns:
            True on the first floor contact for this gift.
        """
        if gift.bottom < self._floor_y:
            return False

        gift.y = self._floor_y - gift.height
        gift.vy = 0.0
        gift.movable = True
        if gift.floor_shake_done:
            return False
        gift.floor_shake_done = True
        return True

    def step(
        self,
        falling: List[Gift],
        dt: float,
        increment: float,
        hold_newest: bool = False
    ) -> List[ImpactEvent]:
        """
        Integrate and collide every falling gift.

        Args:
            falling: Falling gifts, oldest first.
            dt: Frame delta time.
            increment: Per-frame fall speed increment for this round.
            hold_newest: Keep the newest gift still (spawn intro playing).

        Returns:
            Impact events raised this frame.
        """
        events: List[ImpactEvent] = []
        newest = len(falling) - 1

        for i, gift in enumerate(falling):
            if hold_newest and i == newest:
                gift.vy = 0.0
            else:
                self.integrate(gift, dt, increment)

            # The oldest gift has nothing below it but the floor
            if i > 0 and self.resolve_stack_collision(gift, falling[i - 1]):
                events.append(ImpactEvent.from_gift("stack", gift))

            if self.resolve_floor_collision(gift):
                events.append(ImpactEvent.from_gift("floor", gift))

        return events

    def settle_against(self, falling: List[Gift], obstacles: Iterable[Gift]) -> None:
        """Push falling gifts up so they clear every obstacle."""
        obstacles = list(obstacles)
        if not obstacles:
            return
        for gift in falling:
            for other in obstacles:
                _, overlap_h = overlap_rect(gift, other)
                if overlap_h > 0:
                    gift.y -= overlap_h
