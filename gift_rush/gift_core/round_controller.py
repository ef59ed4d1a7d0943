"""
Round Controller
================

Owns one round: the falling / chosen / ignored gift lists, the spawn timer,
the physics pass, player choices, exit lanes, and the round's particles.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

from gift_rush.gift_core.config_loader import GameConfig, get_config
from gift_rush.gift_core.gift_catalog import GiftCategory
from gift_rush.gift_core.particles import ParticleSystem
from gift_rush.gift_core.physics import ChoiceState, Gift, GiftPhysics, ImpactEvent
from gift_rush.gift_core.rules import RoundParams

logger = logging.getLogger(__name__)


class Round:
    """
    A single round of play.

    Every spawned gift lives in exactly one of ``falling``, ``chosen`` or
    ``ignored``. Moving a gift appends it to the destination list and
    removes it from ``falling`` in the same step.

    Per frame (``update``): spawn -> integrate/collide -> capture choices ->
    exit lanes -> particles.
    """

    def __init__(
        self,
        needed_order: Sequence[GiftCategory],
        params: RoundParams,
        rng: random.Random,
        config: Optional[GameConfig] = None
    ):
        """
        Initialize a round.

        Args:
            needed_order: Target categories, in loading order.
            params: Difficulty for this round.
            rng: Random source shared with the session.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng
        self._physics = GiftPhysics(config)
        self.params = params
        self.needed_order: Tuple[GiftCategory, ...] = tuple(needed_order)

        self.falling: List[Gift] = []
        self.chosen: List[Gift] = []
        self.ignored: List[Gift] = []
        self.particles = ParticleSystem(config)

        self.spawned_count: int = 0
        self.intro_frames: int = 0
        # Start full so the first gift drops on the first frame
        self._spawn_elapsed: float = params.spawn_interval

    @property
    def target_length(self) -> int:
        return len(self.needed_order)

    @property
    def can_choose(self) -> bool:
        """True while fewer than the needed number of gifts are chosen."""
        return len(self.chosen) < self.target_length

    @property
    def all_selected(self) -> bool:
        """True once every needed gift is chosen and off-screen."""
        if len(self.chosen) < self.target_length:
            return False
        return all(gift.off_screen for gift in self.chosen[:self.target_length])

    @property
    def chosen_categories(self) -> Tuple[GiftCategory, ...]:
        return tuple(gift.category for gift in self.chosen)

    @property
    def gift_count(self) -> int:
        return len(self.falling) + len(self.chosen) + len(self.ignored)

    @property
    def spawn_elapsed(self) -> float:
        return self._spawn_elapsed

    def spawn_gift(self, category: Optional[GiftCategory] = None) -> Gift:
        """
        Append a new gift at the top centre of the play area.

        Args:
            category: Gift category. Random if None.

        Returns:
            The spawned gift.
        """
        if category is None:
            category = self._rng.choice(list(GiftCategory))

        gift = Gift(
            x=self._config.spawn_x,
            y=0.0,
            width=self._config.gift.width,
            height=self._config.gift.height,
            category=category
        )
        self.falling.append(gift)
        self.spawned_count += 1
        self.intro_frames = self._config.spawn.intro_frames
        logger.debug("Spawned %s gift (%d this round)", category.name, self.spawned_count)
        return gift

    def _advance_spawner(self, dt: float) -> None:
        self._spawn_elapsed += dt
        if self._spawn_elapsed >= self.params.spawn_interval:
            self._spawn_elapsed = 0.0
            self.spawn_gift()

    def _step_physics(self, dt: float) -> List[ImpactEvent]:
        events = self._physics.step(
            self.falling,
            dt,
            self.params.fall_speed_increment,
            hold_newest=self.intro_frames > 0
        )
        if self.intro_frames > 0:
            self.intro_frames -= 1

        # Chosen / ignored gifts share the floor row on their way out
        self._physics.settle_against(self.falling, self.chosen + self.ignored)

        for event in events:
            self.particles.burst(event.left_x, event.right_x, event.bottom_y, self._rng)
        return events

    def _move_gift(self, index: int, choice: ChoiceState) -> None:
        gift = self.falling[index]
        gift.choice = choice
        if choice is ChoiceState.CHOSEN:
            self.chosen.append(gift)
        else:
            self.ignored.append(gift)
        del self.falling[index]
        logger.debug("Gift %s -> %s", gift.category.name, choice.name.lower())

    def _capture_choices(self, accept: bool, reject: bool) -> None:
        """Hand the accept / reject signal to the first selectable gift."""
        if accept:
            signal = ChoiceState.CHOSEN
        elif reject:
            signal = ChoiceState.IGNORED
        else:
            return
        if not self.can_choose:
            return

        # Stop at the move; no index past the removal is visited
        for i, gift in enumerate(self.falling):
            if gift.is_selectable:
                self._move_gift(i, signal)
                break

    def _advance_exit_lanes(self, dt: float) -> None:
        speed = self._config.gift.exit_speed
        width = self._config.viewport.width

        for gift in self.chosen:
            if gift.off_screen:
                continue
            gift.vx = speed
            gift.x += gift.vx * dt
            if gift.x > width:
                gift.off_screen = True

        for gift in self.ignored:
            if gift.off_screen:
                continue
            gift.vx = -speed
            gift.x += gift.vx * dt
            if gift.right < 0:
                gift.off_screen = True

    def update(self, dt: float, accept: bool = False, reject: bool = False) -> List[ImpactEvent]:
        """
        Advance the round by one frame.

        Args:
            dt: Frame delta time in seconds.
            accept: Accept signal raised this frame.
            reject: Reject signal raised this frame.

        Returns:
            Impact events raised this frame (for camera shake).
        """
        self._advance_spawner(dt)
        events = self._step_physics(dt)
        self._capture_choices(accept, reject)
        self._advance_exit_lanes(dt)
        self.particles.update(dt)
        return events
