"""
Camera Shake
============

Jitters the camera offset for a short time after an impact.
"""

from __future__ import annotations

import random
from typing import Optional, Tuple

from gift_rush.gift_core.config_loader import GameConfig, get_config


class CameraShake:
    """
    Bounded countdown that perturbs the camera offset.

    Re-triggering while shaking restarts the countdown; triggers never stack.
    The offset rests at the viewport centre when not shaking.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        intensity: Optional[float] = None
    ):
        """
        Initialize camera shake.

        Args:
            config: Game configuration. Uses default if None.
            intensity: Vertical jitter range. Uses config value if None.
        """
        if config is None:
            config = get_config()

        self._duration = config.shake.duration
        self._jitter_x = config.shake.jitter_x
        self.intensity = config.shake.intensity if intensity is None else intensity
        self._center: Tuple[float, float] = config.viewport.center
        self._timer: float = 0.0
        self._offset: Tuple[float, float] = self._center

    @property
    def offset(self) -> Tuple[float, float]:
        """Current camera offset."""
        return self._offset

    @property
    def center(self) -> Tuple[float, float]:
        return self._center

    @property
    def timer(self) -> float:
        """Remaining shake time in seconds."""
        return self._timer

    @property
    def is_shaking(self) -> bool:
        return self._timer > 0

    def trigger(self) -> None:
        """Start (or restart) the shake."""
        self._timer = self._duration

    def stop(self) -> None:
        """End any shake and recentre the camera."""
        self._timer = 0.0
        self._offset = self._center

    def update(self, dt: float, rng: random.Random) -> None:
        """Advance the shake by one frame."""
        if self._timer > 0:
            cx, cy = self._center
            self._offset = (
                cx + rng.uniform(-self._jitter_x, self._jitter_x),
                cy + rng.uniform(-self.intensity, self.intensity)
            )
            self._timer -= dt
        else:
            self._offset = self._center
