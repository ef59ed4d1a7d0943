"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class ViewportConfig:
    """Play area size in pixels."""
    width: int
    height: int

    @property
    def center(self) -> Tuple[float, float]:
        return (self.width / 2.0, self.height / 2.0)


@dataclass(frozen=True)
class GiftConfig:
    """Gift box geometry and exit lane speed."""
    width: float
    height: float
    exit_speed: float            # Horizontal speed once chosen or ignored


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn timing parameters."""
    initial_interval: float      # Raw interval before clamping (round 1)
    growth: float                # Interval shrinks by growth * ln(round)
    min_interval: float
    max_interval: float
    intro_frames: int            # Frames the newest gift is held still


@dataclass(frozen=True)
class FallConfig:
    """Fall speed parameters."""
    initial_increment: float     # Raw per-frame increment before clamping
    growth: float                # Increment grows by growth * ln(round)
    min_increment: float
    max_increment: float
    max_speed: float
    scale_by_dt: bool            # False keeps the literal per-frame increment
    reference_fps: float


@dataclass(frozen=True)
class RoundConfig:
    """Round size and life budget."""
    target_length: int           # Gifts to load per round
    overflow_threshold: int      # Falling gifts that end the round
    initial_lives: int


@dataclass(frozen=True)
class ParticleConfig:
    """Impact burst parameters."""
    per_side: int
    velocity_x: Tuple[float, float]
    velocity_y: Tuple[float, float]
    lifetime: Tuple[float, float]
    size: Tuple[float, float]
    gravity_bias: float


@dataclass(frozen=True)
class ShakeConfig:
    """Camera shake parameters."""
    duration: float
    jitter_x: float
    intensity: float


@dataclass(frozen=True)
class FadeConfig:
    """Screen fade defaults."""
    duration: float
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class FrameConfig:
    """Frame timing."""
    max_dt: float                # Longest frame the simulation will step


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    viewport: ViewportConfig
    gift: GiftConfig
    spawn: SpawnConfig
    fall: FallConfig
    round: RoundConfig
    particles: ParticleConfig
    shake: ShakeConfig
    fade: FadeConfig
    frame: FrameConfig

    @property
    def floor_y(self) -> float:
        """Y coordinate of the floor (bottom of the viewport)."""
        return float(self.viewport.height)

    @property
    def spawn_x(self) -> float:
        """Left edge of a freshly spawned gift (top centre)."""
        return (self.viewport.width - self.gift.width) / 2.0


def _parse_range(data: List, name: str) -> Tuple[float, float]:
    """Parse a [low, high] pair from YAML."""
    if len(data) != 2:
        raise ValueError(f"{name} must have 2 values [low, high], got {data}")
    return (float(data[0]), float(data[1]))


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.viewport.width <= 0 or config.viewport.height <= 0:
        raise ValueError(
            f"Viewport must be positive, got {config.viewport.width}x{config.viewport.height}"
        )

    if config.gift.width <= 0 or config.gift.height <= 0:
        raise ValueError(f"Gift size must be positive, got {config.gift.width}x{config.gift.height}")

    if config.gift.width > config.viewport.width:
        raise ValueError("Gift width exceeds viewport width")

    # Clamp bounds must not be inverted
    if config.spawn.min_interval > config.spawn.max_interval:
        raise ValueError(
            f"spawn.min_interval ({config.spawn.min_interval}) exceeds "
            f"spawn.max_interval ({config.spawn.max_interval})"
        )
    if config.spawn.min_interval <= 0:
        raise ValueError("spawn.min_interval must be positive")
    if config.fall.min_increment > config.fall.max_increment:
        raise ValueError(
            f"fall.min_increment ({config.fall.min_increment}) exceeds "
            f"fall.max_increment ({config.fall.max_increment})"
        )

    if config.round.target_length < 1:
        raise ValueError("round.target_length must be at least 1")
    if config.round.overflow_threshold < 1:
        raise ValueError("round.overflow_threshold must be at least 1")

    for name in ("velocity_x", "velocity_y", "lifetime", "size"):
        low, high = getattr(config.particles, name)
        if low > high:
            raise ValueError(f"particles.{name} range is inverted: [{low}, {high}]")
    if config.particles.lifetime[1] <= 0:
        raise ValueError("particles.lifetime upper bound must be positive")

    if config.fade.duration <= 0:
        raise ValueError("fade.duration must be positive")

    if config.frame.max_dt <= 0:
        raise ValueError("frame.max_dt must be positive")
    # A gift may not travel a full gift height in one frame
    if config.fall.max_speed * config.frame.max_dt >= config.gift.height:
        raise ValueError(
            f"fall.max_speed * frame.max_dt ({config.fall.max_speed * config.frame.max_dt}) "
            f"must be below gift.height ({config.gift.height})"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    viewport_data = raw["viewport"]
    viewport = ViewportConfig(
        width=int(viewport_data["width"]),
        height=int(viewport_data["height"])
    )

    gift_data = raw["gift"]
    gift = GiftConfig(
        width=float(gift_data["width"]),
        height=float(gift_data["height"]),
        exit_speed=float(gift_data.get("exit_speed", 900.0))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        initial_interval=float(spawn_data["initial_interval"]),
        growth=float(spawn_data["growth"]),
        min_interval=float(spawn_data.get("min_interval", 0.5)),
        max_interval=float(spawn_data.get("max_interval", 5.0)),
        intro_frames=int(spawn_data.get("intro_frames", 0))
    )

    fall_data = raw["fall"]
    fall = FallConfig(
        initial_increment=float(fall_data["initial_increment"]),
        growth=float(fall_data["growth"]),
        min_increment=float(fall_data.get("min_increment", 7.0)),
        max_increment=float(fall_data.get("max_increment", 25.0)),
        max_speed=float(fall_data["max_speed"]),
        scale_by_dt=bool(fall_data.get("scale_by_dt", False)),
        reference_fps=float(fall_data.get("reference_fps", 60))
    )

    round_data = raw["round"]
    round_config = RoundConfig(
        target_length=int(round_data.get("target_length", 5)),
        overflow_threshold=int(round_data.get("overflow_threshold", 14)),
        initial_lives=int(round_data["initial_lives"])
    )

    particle_data = raw["particles"]
    particles = ParticleConfig(
        per_side=int(particle_data.get("per_side", 30)),
        velocity_x=_parse_range(particle_data["velocity_x"], "particles.velocity_x"),
        velocity_y=_parse_range(particle_data["velocity_y"], "particles.velocity_y"),
        lifetime=_parse_range(particle_data["lifetime"], "particles.lifetime"),
        size=_parse_range(particle_data["size"], "particles.size"),
        gravity_bias=float(particle_data.get("gravity_bias", 0.0))
    )

    shake_data = raw["shake"]
    shake = ShakeConfig(
        duration=float(shake_data["duration"]),
        jitter_x=float(shake_data.get("jitter_x", 4.0)),
        intensity=float(shake_data.get("intensity", 8.0))
    )

    # Fade section is optional
    fade_data = raw.get("fade", {})
    fade = FadeConfig(
        duration=float(fade_data.get("duration", 0.6)),
        color=_parse_color(fade_data.get("color", [0, 0, 0]))
    )

    frame_data = raw.get("frame", {})
    frame = FrameConfig(
        max_dt=float(frame_data.get("max_dt", 0.05))
    )

    config = GameConfig(
        viewport=viewport,
        gift=gift,
        spawn=spawn,
        fall=fall,
        round=round_config,
        particles=particles,
        shake=shake,
        fade=fade,
        frame=frame
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
