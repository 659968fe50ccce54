"""
Tests for distance scoring, camera smoothing and bounds rules.
"""

import pytest

from neon_swing.swing_core.config_loader import load_config
from neon_swing.swing_core.camera import CameraTracker
from neon_swing.swing_core.rules import TerminationRules, Viewport
from neon_swing.swing_core.scoring import ScoreTracker


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def scorer(config):
    return ScoreTracker(config)


@pytest.fixture
def camera(config):
    return CameraTracker(config)


class TestScoreTracker:
    """Test distance scoring."""

    def test_floor_of_distance(self, scorer):
        event = scorer.update(1299.0)

        assert scorer.score == 12
        assert event.previous == 0
        assert event.delta == 12

    def test_no_event_without_progress(self, scorer):
        scorer.update(500.0)

        assert scorer.update(550.0) is None
        assert scorer.update(100.0) is None
        assert scorer.score == 5

    def test_negative_x_scores_nothing(self, scorer):
        assert scorer.update(-350.0) is None
        assert scorer.score == 0

    def test_reset(self, scorer):
        scorer.update(900.0)
        scorer.reset()
        assert scorer.score == 0


class TestCameraTracker:
    """Test camera smoothing."""

    def test_single_update(self, camera, config):
        x = camera.update(1000.0)

        assert x == pytest.approx((1000.0 - config.camera.lead_offset) * config.camera.smoothing)

    def test_converges_to_lead(self, camera, config):
        """A stationary player pulls the camera to player x minus the lead."""
        for _ in range(500):
            camera.update(2000.0)

        assert camera.x == pytest.approx(2000.0 - config.camera.lead_offset, abs=1e-6)

    def test_reset(self, camera):
        camera.update(1000.0)
        camera.reset()
        assert camera.x == 0.0


class TestTerminationRules:
    """Test out-of-bounds checks."""

    def test_inside_bounds(self, config):
        rules = TerminationRules(Viewport(800, 600), config)
        assert not rules.check_termination(300.0).terminated

    def test_below_floor(self, config):
        rules = TerminationRules(Viewport(800, 600), config)

        result = rules.check_termination(600 + config.bounds.bottom_margin + 1)

        assert result.terminated
        assert result.reason == "fell"

    def test_above_ceiling(self, config):
        rules = TerminationRules(Viewport(800, 600), config)

        result = rules.check_termination(config.bounds.top_limit - 1)

        assert result.terminated
        assert result.reason == "flew_off"

    def test_floor_follows_resize(self, config):
        viewport = Viewport(800, 600)
        rules = TerminationRules(viewport, config)

        viewport.resize(800, 1000)

        assert rules.floor_y == 1000 + config.bounds.bottom_margin
        assert not rules.check_termination(900.0).terminated
