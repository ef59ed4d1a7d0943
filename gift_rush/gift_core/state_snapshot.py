"""
State Snapshot
==============

Packs the per-frame game state into numpy arrays for renderers.
The core never draws; front-ends read a snapshot each frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from gift_rush.gift_core.config_loader import GameConfig, get_config
from gift_rush.gift_core.physics import Gift

if TYPE_CHECKING:
    from gift_rush.gift_core.game import GameManager

# Lane codes for gift_lane
LANE_FALLING = 0
LANE_CHOSEN = 1
LANE_IGNORED = 2


@dataclass
class GameSnapshot:
    """
    Read-only view of one frame.

    Gift and particle arrays are variable length; index i of every gift_*
    array describes the same gift.
    """
    state: str
    round_number: int
    lives: int
    needed_order: Tuple[int, ...]         # Category values, loading order
    chosen_count: int
    intro_frames: int
    stack_fill: float                     # len(falling) / overflow threshold

    # Gifts
    gift_x: np.ndarray                    # (N,) float32
    gift_y: np.ndarray                    # (N,) float32
    gift_w: np.ndarray                    # (N,) float32
    gift_h: np.ndarray                    # (N,) float32
    gift_category: np.ndarray             # (N,) int16
    gift_lane: np.ndarray                 # (N,) int8
    gift_movable: np.ndarray              # (N,) bool

    # Particles
    particle_x: np.ndarray                # (M,) float32
    particle_y: np.ndarray                # (M,) float32
    particle_size: np.ndarray             # (M,) float32
    particle_alpha: np.ndarray            # (M,) uint8

    # Camera and fade
    camera_offset: Tuple[float, float]
    camera_center: Tuple[float, float]
    fade_alpha: float
    fade_color: Tuple[int, int, int]

    # Last scored round, if any
    last_matches: int = -1
    last_penalty: int = -1

    @property
    def gift_count(self) -> int:
        return int(self.gift_x.shape[0])

    @property
    def particle_count(self) -> int:
        return int(self.particle_x.shape[0])

    @property
    def camera_shift(self) -> Tuple[float, float]:
        """Offset relative to the resting camera position."""
        return (
            self.camera_offset[0] - self.camera_center[0],
            self.camera_offset[1] - self.camera_center[1]
        )

    def to_render_dict(self) -> Dict[str, Any]:
        """Plain-Python view for renderers."""
        gifts = []
        for i in range(self.gift_count):
            gifts.append({
                "x": float(self.gift_x[i]),
                "y": float(self.gift_y[i]),
                "w": float(self.gift_w[i]),
                "h": float(self.gift_h[i]),
                "category": int(self.gift_category[i]),
                "lane": int(self.gift_lane[i]),
                "movable": bool(self.gift_movable[i]),
            })
        particles = [
            (float(x), float(y), float(s), int(a))
            for x, y, s, a in zip(self.particle_x, self.particle_y,
                                  self.particle_size, self.particle_alpha)
        ]
        return {
            "state": self.state,
            "round_number": self.round_number,
            "lives": self.lives,
            "needed_order": list(self.needed_order),
            "chosen_count": self.chosen_count,
            "intro_frames": self.intro_frames,
            "stack_fill": self.stack_fill,
            "gifts": gifts,
            "particles": particles,
            "camera_shift": self.camera_shift,
            "fade_alpha": self.fade_alpha,
            "fade_color": self.fade_color,
            "last_matches": self.last_matches,
            "last_penalty": self.last_penalty,
        }


class SnapshotBuilder:
    """Builds per-frame snapshots from a GameManager."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._overflow_threshold = config.round.overflow_threshold

    def _pack_gifts(self, lanes: List[Tuple[int, List[Gift]]]) -> Dict[str, np.ndarray]:
        gifts = [(lane, gift) for lane, group in lanes for gift in group]
        count = len(gifts)

        arrays = {
            "gift_x": np.zeros(count, dtype=np.float32),
            "gift_y": np.zeros(count, dtype=np.float32),
            "gift_w": np.zeros(count, dtype=np.float32),
            "gift_h": np.zeros(count, dtype=np.float32),
            "gift_category": np.zeros(count, dtype=np.int16),
            "gift_lane": np.zeros(count, dtype=np.int8),
            "gift_movable": np.zeros(count, dtype=bool),
        }
        for i, (lane, gift) in enumerate(gifts):
            arrays["gift_x"][i] = gift.x
            arrays["gift_y"][i] = gift.y
            arrays["gift_w"][i] = gift.width
            arrays["gift_h"][i] = gift.height
            arrays["gift_category"][i] = gift.category.value
            arrays["gift_lane"][i] = lane
            arrays["gift_movable"][i] = gift.movable
        return arrays

    def build(self, game: "GameManager") -> GameSnapshot:
        """Build a snapshot from current game state."""
        round_ = game.round

        if round_ is not None:
            gift_arrays = self._pack_gifts([
                (LANE_FALLING, round_.falling),
                (LANE_CHOSEN, round_.chosen),
                (LANE_IGNORED, round_.ignored),
            ])
            particles = round_.particles.particles
            particle_alpha = np.array(
                [round_.particles.alpha(p) for p in particles], dtype=np.uint8
            )
            needed = tuple(c.value for c in round_.needed_order)
            chosen_count = len(round_.chosen)
            intro_frames = round_.intro_frames
            stack_fill = min(1.0, len(round_.falling) / self._overflow_threshold)
        else:
            gift_arrays = self._pack_gifts([])
            particles = []
            particle_alpha = np.zeros(0, dtype=np.uint8)
            needed = ()
            chosen_count = 0
            intro_frames = 0
            stack_fill = 0.0

        last = game.last_result
        fade_color = game.fade.color if game.fade is not None else self._config.fade.color

        return GameSnapshot(
            state=game.state.value,
            round_number=game.round_number,
            lives=game.lives,
            needed_order=needed,
            chosen_count=chosen_count,
            intro_frames=intro_frames,
            stack_fill=stack_fill,
            particle_x=np.array([p.x for p in particles], dtype=np.float32),
            particle_y=np.array([p.y for p in particles], dtype=np.float32),
            particle_size=np.array([p.size for p in particles], dtype=np.float32),
            particle_alpha=particle_alpha,
            camera_offset=game.camera.offset,
            camera_center=game.camera.center,
            fade_alpha=game.fade_alpha,
            fade_color=fade_color,
            last_matches=last.matches if last is not None else -1,
            last_penalty=last.penalty if last is not None else -1,
            **gift_arrays
        )
