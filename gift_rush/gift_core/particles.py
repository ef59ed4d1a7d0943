"""
Particle System
===============

Short-lived decorative particles spawned where a gift lands.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional

from gift_rush.gift_core.config_loader import GameConfig, get_config


@dataclass
class Particle:
    """A single burst particle."""
    x: float
    y: float
    vx: float
    vy: float
    lifetime: float
    size: float


class ParticleSystem:
    """
    Owns the particle list of one round.

    Bursts spawn a fixed number of particles at each lower corner of an
    impacting gift. Particles drift downward and die when their lifetime
    runs out.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize particle system.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config.particles
        self._particles: List[Particle] = []

    def __len__(self) -> int:
        return len(self._particles)

    @property
    def particles(self) -> List[Particle]:
        """Live particles (do not mutate)."""
        return self._particles

    def _spawn(self, x: float, y: float, rng: random.Random) -> Particle:
        cfg = self._config
        particle = Particle(
            x=x,
            y=y,
            vx=rng.uniform(*cfg.velocity_x),
            vy=rng.uniform(*cfg.velocity_y),
            lifetime=rng.uniform(*cfg.lifetime),
            size=rng.uniform(*cfg.size)
        )
        self._particles.append(particle)
        return particle

    def burst(self, left_x: float, right_x: float, y: float, rng: random.Random) -> None:
        """
        Spawn a burst at both lower corners of a gift.

        Args:
            left_x: Left edge of the gift.
            right_x: Right edge of the gift.
            y: Bottom edge of the gift.
            rng: Random source.
        """
        for _ in range(self._config.per_side):
            self._spawn(left_x, y, rng)
        for _ in range(self._config.per_side):
            self._spawn(right_x, y, rng)

    def update(self, dt: float) -> None:
        """Age, remove and move particles."""
        bias = self._config.gravity_bias
        # Walk backwards while deleting
        for i in range(len(self._particles) - 1, -1, -1):
            particle = self._particles[i]
            particle.lifetime -= dt
            if particle.lifetime <= 0:
                del self._particles[i]
                continue
            particle.x += particle.vx * dt
            particle.y += particle.vy * dt
            particle.vy += bias

    def alpha(self, particle: Particle) -> int:
        """Render alpha (0-255) derived from remaining lifetime."""
        max_lifetime = self._config.lifetime[1]
        t = particle.lifetime / max_lifetime
        return int(255 * max(0.0, min(1.0, t)))

    def clear(self) -> None:
        self._particles.clear()
