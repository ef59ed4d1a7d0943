"""
Tests for gift physics and collision resolution.
"""

import dataclasses

import pytest

from gift_rush.gift_core.config_loader import load_config
from gift_rush.gift_core.gift_catalog import GiftCategory
from gift_rush.gift_core.physics import Gift, GiftPhysics, overlap_rect


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def physics(config):
    return GiftPhysics(config)


def make_gift(config, x=None, y=0.0):
    if x is None:
        x = config.spawn_x
    return Gift(
        x=x,
        y=y,
        width=config.gift.width,
        height=config.gift.height,
        category=GiftCategory.RED
    )


class TestOverlap:
    """Test rectangle intersection."""

    def test_overlapping_gifts(self, config):
        a = make_gift(config, x=0, y=0)
        b = make_gift(config, x=20, y=30)

        w, h = overlap_rect(a, b)

        assert w == pytest.approx(config.gift.width - 20)
        assert h == pytest.approx(config.gift.height - 30)

    def test_separate_gifts(self, config):
        a = make_gift(config, x=0, y=0)
        b = make_gift(config, x=0, y=config.gift.height + 1)

        assert overlap_rect(a, b) == (0.0, 0.0)

    def test_touching_edges_do_not_overlap(self, config):
        a = make_gift(config, x=0, y=0)
        b = make_gift(config, x=0, y=config.gift.height)

        assert overlap_rect(a, b) == (0.0, 0.0)


class TestFallIntegration:
    """Test per-frame fall integration."""

    def test_increment_is_per_frame(self, physics, config):
        """The increment is added once per frame regardless of dt."""
        gift = make_gift(config, y=100.0)

        physics.integrate(gift, dt=0.0, increment=7.0)

        assert gift.vy == pytest.approx(7.0)
        assert gift.y == pytest.approx(100.0)

    def test_speed_is_clamped(self, physics, config):
        gift = make_gift(config)

        for _ in range(500):
            physics.integrate(gift, dt=0.0, increment=25.0)

        assert gift.vy == pytest.approx(config.fall.max_speed)

    def test_position_uses_velocity(self, physics, config):
        gift = make_gift(config, y=0.0)
        gift.vy = 100.0

        physics.integrate(gift, dt=0.5, increment=10.0)

        assert gift.vy == pytest.approx(110.0)
        assert gift.y == pytest.approx(55.0)

    def test_scale_by_dt_option(self, config):
        """With scale_by_dt the increment becomes a rate at reference_fps."""
        scaled = dataclasses.replace(
            config, fall=dataclasses.replace(config.fall, scale_by_dt=True)
        )
        physics = GiftPhysics(scaled)
        gift = make_gift(config)

        physics.integrate(gift, dt=0.5, increment=2.0)

        assert gift.vy == pytest.approx(2.0 * config.fall.reference_fps * 0.5)


class TestStackCollision:
    """Test collision against the gift below."""

    def test_push_up_by_overlap(self, physics, config):
        below = make_gift(config, y=config.floor_y - config.gift.height)
        above = make_gift(config, y=below.y - config.gift.height + 10)

        hit = physics.resolve_stack_collision(above, below)

        assert hit
        assert above.bottom == pytest.approx(below.y)

    def test_impact_is_one_shot(self, physics, config):
        """Sustained overlap keeps resolving but only reports one impact."""
        below = make_gift(config, y=config.floor_y - config.gift.height)
        above = make_gift(config, y=below.y - config.gift.height + 10)

        assert physics.resolve_stack_collision(above, below)

        for _ in range(5):
            above.y += 8
            assert not physics.resolve_stack_collision(above, below)
            assert above.bottom == pytest.approx(below.y)

    def test_no_overlap_no_push(self, physics, config):
        below = make_gift(config, y=500)
        above = make_gift(config, y=100)

        assert not physics.resolve_stack_collision(above, below)
        assert above.y == 100
        assert not above.stack_shake_done


class TestFloorCollision:
    """Test floor contact."""

    def test_gift_rests_on_floor(self, physics, config):
        gift = make_gift(config, y=config.floor_y)
        gift.vy = 300.0

        hit = physics.resolve_floor_collision(gift)

        assert hit
        assert gift.bottom == pytest.approx(config.floor_y)
        assert gift.vy == 0.0
        assert gift.movable

    def test_floor_impact_is_one_shot(self, physics, config):
        gift = make_gift(config, y=config.floor_y)

        assert physics.resolve_floor_collision(gift)
        gift.y += 5
        assert not physics.resolve_floor_collision(gift)
        assert gift.bottom == pytest.approx(config.floor_y)

    def test_airborne_gift_not_movable(self, physics, config):
        gift = make_gift(config, y=10)

        assert not physics.resolve_floor_collision(gift)
        assert not gift.movable


class TestStep:
    """Test the full falling-list pass."""

    def test_stack_settles_with_single_impacts(self, physics, config):
        """Two stacked gifts raise exactly one floor and one stack impact."""
        below = make_gift(config, y=config.floor_y - config.gift.height)
        above = make_gift(config, y=config.floor_y - 3 * config.gift.height)
        falling = [below, above]

        events = []
        for _ in range(300):
            events.extend(physics.step(falling, 1 / 60, 7.0))

        kinds = [e.kind for e in events]
        assert kinds.count("floor") == 1
        assert kinds.count("stack") == 1
        assert above.bottom == pytest.approx(below.y)
        assert below.movable
        assert not above.movable

    def test_only_predecessor_is_tested(self, physics, config):
        """A gift ignores gifts other than its immediate predecessor."""
        bottom = make_gift(config, y=config.floor_y - config.gift.height)
        middle = make_gift(config, x=0, y=0)
        top = make_gift(config, y=bottom.y - 10)
        falling = [bottom, middle, top]

        physics.step(falling, 0.0, 0.0)

        # top overlaps bottom, but its predecessor (middle) is far away
        assert top.y == pytest.approx(bottom.y - 10)

    def test_hold_newest(self, physics, config):
        gift = make_gift(config, y=0.0)
        gift.vy = 50.0

        physics.step([gift], 1 / 60, 7.0, hold_newest=True)

        assert gift.vy == 0.0
        assert gift.y == 0.0

    def test_impact_event_corners(self, physics, config):
        gift = make_gift(config, y=config.floor_y)

        events = physics.step([gift], 0.0, 0.0)

        assert len(events) == 1
        assert events[0].kind == "floor"
        assert events[0].left_x == gift.x
        assert events[0].right_x == gift.right
        assert events[0].bottom_y == pytest.approx(config.floor_y)


class TestSettleAgainst:
    """Test the secondary settle pass."""

    def test_pushed_above_obstacle(self, physics, config):
        obstacle = make_gift(config, y=config.floor_y - config.gift.height)
        gift = make_gift(config, x=obstacle.x + 30, y=obstacle.y - 20)

        physics.settle_against([gift], [obstacle])

        assert gift.bottom == pytest.approx(obstacle.y)

    def test_no_obstacles(self, physics, config):
        gift = make_gift(config, y=300)

        physics.settle_against([gift], [])

        assert gift.y == 300
