"""
Tests for procedural anchor generation and pruning.
"""

import pytest

from neon_swing.swing_core.config_loader import load_config
from neon_swing.swing_core.anchor_field import AnchorField


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def field(config):
    f = AnchorField(config, seed=42)
    f.reset()
    return f


def _positions(field):
    return [(a.x, a.y) for a in field]


class TestInitialLayout:
    """Test the layout generated at game start."""

    def test_initial_count(self, field, config):
        assert len(field) == config.anchors.initial_count

    def test_initial_spacing_and_band(self, field, config):
        """Anchors sit on the spacing grid within jitter, inside the y band."""
        cfg = config.anchors
        for i, anchor in enumerate(field):
            base_x = cfg.initial_offset + i * cfg.spacing
            assert base_x - cfg.initial_jitter <= anchor.x <= base_x + cfg.initial_jitter
            assert cfg.y_min <= anchor.y <= cfg.y_max
            assert anchor.active

    def test_ascending_x(self, field):
        xs = [a.x for a in field]
        assert xs == sorted(xs)

    def test_deterministic_with_seed(self, config):
        """Same seed should produce the same layout."""
        f1 = AnchorField(config, seed=7)
        f2 = AnchorField(config, seed=7)
        f1.reset()
        f2.reset()

        assert _positions(f1) == _positions(f2)

    def test_different_seeds_differ(self, config):
        f1 = AnchorField(config, seed=7)
        f2 = AnchorField(config, seed=8)
        f1.reset()
        f2.reset()

        assert _positions(f1) != _positions(f2)

    def test_reset_with_seed_restores_layout(self, config):
        field = AnchorField(config, seed=3)
        field.reset()
        first = _positions(field)

        field.reset(seed=3)

        assert _positions(field) == first

    def test_uids_unique(self, field):
        for _ in range(30):
            field.extend(field.last.x)
        uids = [a.uid for a in field]
        assert len(uids) == len(set(uids))


class TestExtension:
    """Test forward generation."""

    def test_no_spawn_when_far(self, field, config):
        """Nothing spawns while the player is beyond the trigger distance."""
        far_x = field.last.x - config.anchors.spawn_trigger_distance - 1

        assert field.extend(far_x) is None
        assert len(field) == config.anchors.initial_count

    def test_spawn_when_close(self, field, config):
        """One anchor spawns past the last once the player is close enough."""
        cfg = config.anchors
        last = field.last
        near_x = last.x - cfg.spawn_trigger_distance + 1

        spawned = field.extend(near_x)

        assert spawned is not None
        assert field.last is spawned
        assert last.x + cfg.spacing - cfg.extend_jitter <= spawned.x <= last.x + cfg.spacing + cfg.extend_jitter
        assert cfg.y_min <= spawned.y <= cfg.y_max
        assert len(field) == cfg.initial_count + 1

    def test_one_spawn_per_call(self, field, config):
        """Even far ahead of the field, each call spawns exactly one anchor."""
        field.extend(1e9)
        assert len(field) == config.anchors.initial_count + 1

    def test_empty_field_does_not_extend(self, config):
        field = AnchorField(config, seed=1)
        assert field.extend(0.0) is None
        assert len(field) == 0


class TestPruning:
    """Test bounded-size pruning."""

    def test_prune_keeps_most_recent(self, config):
        """25 anchors prune down to the last 15 in order."""
        field = AnchorField(config, seed=1)
        field.replace([(i * 100.0, 150.0) for i in range(25)])
        original = list(field)

        removed = field.prune()

        assert removed == 10
        assert len(field) == config.anchors.prune_keep
        assert list(field) == original[10:25]

    def test_no_prune_at_threshold(self, config):
        field = AnchorField(config, seed=1)
        field.replace([(i * 100.0, 150.0) for i in range(config.anchors.prune_threshold)])

        assert field.prune() == 0
        assert len(field) == config.anchors.prune_threshold

    def test_prune_retains_attached_anchor(self, config):
        """The attached anchor survives pruning, ahead of the kept tail."""
        field = AnchorField(config, seed=1)
        field.replace([(i * 100.0, 150.0) for i in range(25)])
        original = list(field)
        attached = original[3]

        field.prune(retain_uid=attached.uid)

        assert field.contains(attached.uid)
        assert list(field) == [attached] + original[10:25]
        xs = [a.x for a in field]
        assert xs == sorted(xs)

    def test_retained_anchor_already_in_tail(self, config):
        field = AnchorField(config, seed=1)
        field.replace([(i * 100.0, 150.0) for i in range(25)])
        original = list(field)

        field.prune(retain_uid=original[20].uid)

        assert list(field) == original[10:25]


class TestNearestAhead:
    """Test anchor selection for attaching."""

    def test_selects_nearest_ahead(self, config):
        """Anchors at 50, 150, 500 with player at 100 selects 150."""
        field = AnchorField(config, seed=1)
        field.replace([(50.0, 150.0), (150.0, 150.0), (500.0, 150.0)])

        anchor = field.nearest_ahead(100.0)

        assert anchor.x == 150.0

    def test_strictly_ahead(self, config):
        """An anchor level with the player is not eligible."""
        field = AnchorField(config, seed=1)
        field.replace([(100.0, 150.0), (400.0, 150.0)])

        assert field.nearest_ahead(100.0).x == 400.0

    def test_none_ahead(self, config):
        field = AnchorField(config, seed=1)
        field.replace([(50.0, 150.0)])

        assert field.nearest_ahead(100.0) is None

    def test_tie_goes_to_first(self, config):
        field = AnchorField(config, seed=1)
        field.replace([(200.0, 120.0), (200.0, 220.0)])

        assert field.nearest_ahead(100.0) is field[0]

    def test_get_by_uid(self, field):
        anchor = field[4]
        assert field.get(anchor.uid) is anchor
        assert field.get(-1) is None
