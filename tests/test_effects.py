"""
Tests for particles, camera shake, and screen fades.
"""

import random

import pytest

from gift_rush.gift_core.camera_shake import CameraShake
from gift_rush.gift_core.config_loader import load_config
from gift_rush.gift_core.particles import Particle, ParticleSystem
from gift_rush.gift_core.screen_fade import FadeKind, FadePhase, ScreenFade


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def particles(config):
    return ParticleSystem(config)


@pytest.fixture
def camera(config):
    return CameraShake(config)


def make_particle(lifetime, x=0.0, y=0.0, vx=0.0, vy=0.0):
    return Particle(x=x, y=y, vx=vx, vy=vy, lifetime=lifetime, size=3.0)


class TestParticleSystem:
    """Test burst spawning and particle lifetime."""

    def test_burst_spawns_both_corners(self, particles, config, rng):
        particles.burst(100.0, 220.0, 700.0, rng)

        per_side = config.particles.per_side
        assert len(particles) == 2 * per_side
        assert all(p.x == 100.0 for p in particles.particles[:per_side])
        assert all(p.x == 220.0 for p in particles.particles[per_side:])
        assert all(p.y == 700.0 for p in particles.particles)

    def test_burst_ranges(self, particles, config, rng):
        particles.burst(0.0, 10.0, 0.0, rng)
        cfg = config.particles

        for p in particles.particles:
            assert cfg.velocity_x[0] <= p.vx <= cfg.velocity_x[1]
            assert cfg.velocity_y[0] <= p.vy <= cfg.velocity_y[1]
            assert cfg.lifetime[0] <= p.lifetime <= cfg.lifetime[1]
            assert cfg.size[0] <= p.size <= cfg.size[1]

    def test_removed_when_lifetime_equals_dt(self, particles):
        particles.particles.append(make_particle(lifetime=0.25))

        particles.update(0.25)

        assert len(particles) == 0

    def test_survivor_moves_and_drifts(self, particles, config):
        particles.particles.append(make_particle(lifetime=1.0, vx=10.0, vy=-20.0))

        particles.update(0.5)

        p = particles.particles[0]
        assert p.lifetime == pytest.approx(0.5)
        assert p.x == pytest.approx(5.0)
        assert p.y == pytest.approx(-10.0)
        assert p.vy == pytest.approx(-20.0 + config.particles.gravity_bias)

    def test_removal_keeps_survivor_order(self, particles):
        lifetimes = [0.1, 1.0, 0.1, 0.1, 2.0, 0.1, 3.0]
        for i, lifetime in enumerate(lifetimes):
            particles.particles.append(make_particle(lifetime=lifetime, x=float(i)))

        particles.update(0.1)

        assert [p.x for p in particles.particles] == [1.0, 4.0, 6.0]

    def test_zero_dt_is_noop_for_lifetime(self, particles):
        particles.particles.append(make_particle(lifetime=0.5))

        particles.update(0.0)

        assert particles.particles[0].lifetime == 0.5

    def test_alpha_clamped(self, particles, config):
        assert particles.alpha(make_particle(lifetime=10.0)) == 255
        assert particles.alpha(make_particle(lifetime=-1.0)) == 0
        half = config.particles.lifetime[1] / 2
        assert particles.alpha(make_particle(lifetime=half)) == 127

    def test_clear(self, particles, rng):
        particles.burst(0.0, 10.0, 0.0, rng)
        particles.clear()

        assert len(particles) == 0


class TestCameraShake:
    """Test camera shake countdown."""

    def test_rests_at_center(self, camera, config, rng):
        camera.update(1 / 60, rng)

        assert camera.offset == config.viewport.center
        assert not camera.is_shaking

    def test_shake_within_ranges(self, camera, config, rng):
        camera.trigger()
        cx, cy = config.viewport.center

        for _ in range(5):
            camera.update(0.01, rng)
            x, y = camera.offset
            assert abs(x - cx) <= config.shake.jitter_x
            assert abs(y - cy) <= config.shake.intensity

    def test_returns_to_center(self, camera, config, rng):
        camera.trigger()
        frames = 0
        while camera.is_shaking:
            camera.update(1 / 60, rng)
            frames += 1
            assert frames < 1000

        camera.update(1 / 60, rng)

        assert camera.offset == config.viewport.center

    def test_retrigger_restarts(self, camera, config, rng):
        camera.trigger()
        camera.update(0.1, rng)
        camera.trigger()

        assert camera.timer == pytest.approx(config.shake.duration)

    def test_custom_intensity(self, config, rng):
        camera = CameraShake(config, intensity=0.0)
        camera.trigger()
        camera.update(0.01, rng)

        assert camera.offset[1] == config.viewport.center[1]

    def test_stop(self, camera, config, rng):
        camera.trigger()
        camera.update(0.01, rng)
        camera.stop()

        assert not camera.is_shaking
        assert camera.offset == config.viewport.center


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


class TestScreenFade:
    """Test fade kinds and completion callbacks."""

    def test_in_out_round_trip(self):
        counter = Counter()
        fade = ScreenFade(FadeKind.IN_OUT, 1.0, on_complete=counter)
        assert fade.alpha == 0.0

        alphas = []
        for _ in range(4):
            fade.update(0.125)
            alphas.append(fade.alpha)

        assert alphas == sorted(alphas)
        assert alphas[-1] == pytest.approx(1.0)
        assert counter.calls == 1
        assert fade.phase is FadePhase.FADING_OUT
        assert fade.elapsed == 0.0

        for _ in range(3):
            fade.update(0.125)
            assert counter.calls == 1
            assert not fade.finished

        fade.update(0.125)

        assert fade.alpha == pytest.approx(0.0)
        assert fade.finished
        assert counter.calls == 1

    def test_out_in_fires_at_end(self):
        counter = Counter()
        fade = ScreenFade(FadeKind.OUT_IN, 1.0, on_complete=counter)
        assert fade.alpha == 1.0

        for _ in range(4):
            fade.update(0.125)
        assert fade.alpha == pytest.approx(0.0)
        assert fade.phase is FadePhase.FADING_IN
        assert counter.calls == 0

        for _ in range(4):
            fade.update(0.125)
        assert fade.alpha == pytest.approx(1.0)
        assert counter.calls == 1
        assert fade.finished

    def test_fade_in_single(self):
        counter = Counter()
        fade = ScreenFade(FadeKind.IN, 0.5, on_complete=counter)

        fade.update(0.25)
        assert fade.alpha == pytest.approx(0.5)
        fade.update(0.25)
        assert fade.alpha == pytest.approx(1.0)
        assert counter.calls == 1

        for _ in range(10):
            fade.update(0.25)
        assert counter.calls == 1
        assert fade.alpha == pytest.approx(1.0)

    def test_fade_out_without_callback(self):
        fade = ScreenFade(FadeKind.OUT, 0.5)

        fade.update(0.5)

        assert fade.alpha == pytest.approx(0.0)
        assert fade.finished

    def test_overshoot_is_clamped(self):
        counter = Counter()
        fade = ScreenFade(FadeKind.IN, 0.5, on_complete=counter)

        fade.update(10.0)

        assert fade.alpha == 1.0
        assert counter.calls == 1

    def test_zero_dt(self):
        fade = ScreenFade(FadeKind.IN, 0.5)

        fade.update(0.0)

        assert fade.alpha == 0.0
        assert not fade.finished

    def test_alpha_byte(self):
        fade = ScreenFade(FadeKind.OUT, 1.0)

        assert fade.alpha_byte == 255

    def test_invalid_lifetime(self):
        with pytest.raises(ValueError):
            ScreenFade(FadeKind.IN, 0.0)
