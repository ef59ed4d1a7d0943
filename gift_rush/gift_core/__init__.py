"""
Gift Core - The per-frame game simulation.

Main exports:
- GameManager: Session state machine (rounds, lives, effects)
- FrameInput: Signals raised during one frame
- Round: One round's gifts, spawning, physics and choices
- GameSnapshot / SnapshotBuilder: Render sink
- GameConfig: Configuration loaded from game_config.yaml
- GiftCatalog: Category -> display template lookup
"""

from gift_rush.gift_core.config_loader import GameConfig, load_config
from gift_rush.gift_core.gift_catalog import GiftCategory, GiftTemplate, GiftCatalog, load_templates
from gift_rush.gift_core.physics import Gift, ChoiceState, ImpactEvent
from gift_rush.gift_core.particles import Particle, ParticleSystem
from gift_rush.gift_core.camera_shake import CameraShake
from gift_rush.gift_core.screen_fade import FadeKind, FadePhase, ScreenFade
from gift_rush.gift_core.round_controller import Round
from gift_rush.gift_core.scoring import RoundResult, ScoreTracker, score_round
from gift_rush.gift_core.game import GameManager, GameState, FrameInput
from gift_rush.gift_core.state_snapshot import GameSnapshot, SnapshotBuilder

__all__ = [
    "GameConfig",
    "load_config",
    "GiftCategory",
    "GiftTemplate",
    "GiftCatalog",
    "load_templates",
    "Gift",
    "ChoiceState",
    "ImpactEvent",
    "Particle",
    "ParticleSystem",
    "CameraShake",
    "FadeKind",
    "FadePhase",
    "ScreenFade",
    "Round",
    "RoundResult",
    "ScoreTracker",
    "score_round",
    "GameManager",
    "GameState",
    "FrameInput",
    "GameSnapshot",
    "SnapshotBuilder",
]
