"""
Tests for configuration loading and validation.
"""

from pathlib import Path

import pytest
import yaml

from neon_swing.swing_core import config_loader
from neon_swing.swing_core.config_loader import load_config


@pytest.fixture
def raw_config():
    path = Path(config_loader.__file__).resolve().parent.parent / "game_config.yaml"
    with open(path, "r") as f:
        return yaml.safe_load(f)


def _write(tmp_path, raw):
    path = tmp_path / "game_config.yaml"
    path.write_text(yaml.safe_dump(raw))
    return str(path)


class TestLoadConfig:
    """Test loading the bundled configuration."""

    def test_default_values(self):
        config = load_config()

        assert config.physics.gravity == 0.25
        assert config.physics.friction == 0.995
        assert config.anchors.initial_count == 10
        assert config.anchors.spacing == 400.0
        assert config.anchors.prune_threshold == 20
        assert config.anchors.prune_keep == 15
        assert config.camera.lead_offset == 200.0
        assert config.scoring.distance_per_point == 100.0
        assert config.highscore.key == "rope-high-score"
        assert config.highscore.path is None
        assert len(config.commentary.game_over) == 10

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_get_config_is_cached(self):
        assert config_loader.get_config() is config_loader.get_config()

    def test_optional_sections_default(self, tmp_path, raw_config):
        del raw_config["caps"]
        del raw_config["highscore"]

        config = load_config(_write(tmp_path, raw_config))

        assert config.caps.max_ticks == 36000
        assert config.highscore.path is None


class TestValidation:
    """Test rejection of inconsistent values."""

    @pytest.mark.parametrize("section,key,value", [
        ("physics", "friction", 1.5),
        ("physics", "friction", 0.0),
        ("anchors", "prune_keep", 25),
        ("anchors", "y_min", 400.0),
        ("anchors", "extend_jitter", 250.0),
        ("camera", "smoothing", 0.0),
        ("scoring", "distance_per_point", 0),
        ("observation", "max_anchors", 5),
    ])
    def test_invalid_values(self, tmp_path, raw_config, section, key, value):
        raw_config[section][key] = value

        with pytest.raises(ValueError):
            load_config(_write(tmp_path, raw_config))

    def test_empty_commentary_pool(self, tmp_path, raw_config):
        raw_config["commentary"]["game_over"] = []

        with pytest.raises(ValueError):
            load_config(_write(tmp_path, raw_config))


class TestLoggingSetup:
    """Test the package logger configuration."""

    def test_setup_logging_writes_file(self, tmp_path):
        import logging
        from neon_swing.logging_config import setup_logging

        log_file = tmp_path / "swing.log"
        setup_logging(logging.DEBUG, str(log_file))
        logging.getLogger("neon_swing.swing_core.game").info("hello swing")

        logger = logging.getLogger("neon_swing")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "hello swing" in log_file.read_text()

        # Calling again replaces handlers instead of stacking them
        setup_logging(logging.INFO)
        assert len(logger.handlers) == 1
        logger.handlers.clear()
