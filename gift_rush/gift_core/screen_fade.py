"""
Screen Fade
===========

Time-driven full-screen alpha transitions with an optional completion
callback.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)


class FadeKind(Enum):
    IN = "in"              # transparent -> opaque
    OUT = "out"            # opaque -> transparent
    IN_OUT = "in_out"      # transparent -> opaque -> transparent
    OUT_IN = "out_in"      # opaque -> transparent -> opaque


class FadePhase(Enum):
    FADING_IN = "fading_in"
    FADING_OUT = "fading_out"


class ScreenFade:
    """
    A single fade animation.

    ``lifetime`` is the total duration. Round-trip kinds split it into two
    equal phases; when a phase ends the phase flips and ``elapsed`` restarts
    from zero.

    The completion callback fires exactly once, when the screen becomes
    fully covered for the last time:
    - IN: at the end
    - OUT: at the end
    - IN_OUT: at the midpoint
    - OUT_IN: at the end
    """

    def __init__(
        self,
        kind: FadeKind,
        lifetime: float,
        color: Tuple[int, int, int] = (0, 0, 0),
        on_complete: Optional[Callable[[], None]] = None
    ):
        if lifetime <= 0:
            raise ValueError(f"Fade lifetime must be positive, got {lifetime}")

        self.kind = kind
        self.lifetime = lifetime
        self.color = color
        self._on_complete = on_complete
        self._callback_fired = False
        self._finished = False

        if kind in (FadeKind.IN, FadeKind.IN_OUT):
            self.phase = FadePhase.FADING_IN
        else:
            self.phase = FadePhase.FADING_OUT
        self.elapsed = 0.0
        self.alpha = self._compute_alpha()

    @property
    def is_round_trip(self) -> bool:
        return self.kind in (FadeKind.IN_OUT, FadeKind.OUT_IN)

    @property
    def phase_length(self) -> float:
        """Duration of one phase."""
        if self.is_round_trip:
            return self.lifetime / 2.0
        return self.lifetime

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def callback_fired(self) -> bool:
        return self._callback_fired

    @property
    def alpha_byte(self) -> int:
        """Alpha scaled to 0-255 for renderers."""
        return int(round(self.alpha * 255))

    def _compute_alpha(self) -> float:
        t = self.elapsed / self.phase_length
        if self.phase is FadePhase.FADING_OUT:
            t = 1.0 - t
        return max(0.0, min(1.0, t))

    def _fire(self) -> None:
        if self._callback_fired:
            return
        self._callback_fired = True
        if self._on_complete is not None:
            self._on_complete()

    def _end_phase(self) -> None:
        """Handle reaching the end of the current phase."""
        if not self.is_round_trip:
            self._fire()
            self._finished = True
            return

        first_phase = (
            (self.kind is FadeKind.IN_OUT and self.phase is FadePhase.FADING_IN)
            or (self.kind is FadeKind.OUT_IN and self.phase is FadePhase.FADING_OUT)
        )
        if first_phase:
            if self.kind is FadeKind.IN_OUT:
                self._fire()
            self.phase = (
                FadePhase.FADING_OUT if self.phase is FadePhase.FADING_IN
                else FadePhase.FADING_IN
            )
            self.elapsed = 0.0
            return

        if self.kind is FadeKind.OUT_IN:
            self._fire()
        self._finished = True

    def update(self, dt: float) -> None:
        """Advance the fade by one frame."""
        if self._finished:
            return

        if self.elapsed <= self.phase_length:
            self.elapsed += dt
        self.alpha = self._compute_alpha()

        if self.elapsed >= self.phase_length:
            logger.debug("Fade %s reached end of %s", self.kind.value, self.phase.value)
            self._end_phase()
