"""Tests for TunerConfig and JSON persistence."""

import json

import pytest

from guitar_tuner.config import TunerConfig, load_config, save_config
from guitar_tuner.errors import ConfigError
from guitar_tuner.notes import STANDARD_TUNING, GuitarNote


class TestDefaults:
    def test_documented_defaults(self):
        config = TunerConfig()
        assert config.coarse_min_hz == 50.0
        assert config.coarse_max_hz == 350.0
        assert config.coarse_step_hz == 5.0
        assert config.fine_range_hz == 10.0
        assert config.fine_step_hz == 1.0
        assert config.pre_emphasis == 0.85
        assert config.min_rms == 0.002
        assert config.peak_threshold == 0.5
        assert config.match_threshold_cents == 100.0
        assert config.history_size == 4
        assert config.quorum == 3
        assert config.in_tune_cents == 10.0
        assert config.full_scale == 2**23 - 1
        assert config.notes == STANDARD_TUNING

    def test_frozen(self):
        config = TunerConfig()
        with pytest.raises(AttributeError):
            config.quorum = 2


class TestValidation:
    @pytest.mark.parametrize(
        "changes",
        [
            {"sample_rate": 0},
            {"frame_length": 1},
            {"coarse_step_hz": 0},
            {"fine_step_hz": -1.0},
            {"coarse_min_hz": 400.0},
            {"coarse_max_hz": 30000.0},
            {"pre_emphasis": 1.0},
            {"pre_emphasis": -0.1},
            {"min_rms": -1.0},
            {"quorum": 5},
            {"quorum": 0},
            {"history_size": 0},
            {"notes": ()},
            {"notes": (("E2", 0.0),)},
        ],
    )
    def test_rejected(self, changes):
        with pytest.raises(ConfigError):
            TunerConfig(**changes)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            TunerConfig(sample_rate=-1)

    def test_replace(self):
        config = TunerConfig().replace(quorum=2, in_tune_cents=5.0)
        assert config.quorum == 2
        assert config.in_tune_cents == 5.0

    def test_replace_unknown_option(self):
        with pytest.raises(ConfigError):
            TunerConfig().replace(volume=11)

    def test_notes_converted(self):
        config = TunerConfig(notes=[["D2", 73.42], ["A2", 110.0]])
        assert config.notes == (GuitarNote("D2", 73.42), GuitarNote("A2", 110.0))


class TestPersistence:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / "tuner.json"
        config = TunerConfig(sample_rate=48000, pre_emphasis=0.9, quorum=2)
        save_config(config, path)

        assert load_config(path) == config

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "tuner.json"
        path.write_text(json.dumps({"frame_length": 2048}))
        config = load_config(path)
        assert config.frame_length == 2048
        assert config.sample_rate == TunerConfig().sample_rate

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "tuner.json"
        path.write_text(json.dumps({"gain": 3}))
        with pytest.raises(ConfigError, match="gain"):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "tuner.json"
        path.write_text(json.dumps({"quorum": 9}))
        with pytest.raises(ConfigError):
            load_config(path)

    def test_wrong_type(self, tmp_path):
        path = tmp_path / "tuner.json"
        path.write_text(json.dumps({"sample_rate": "fast"}))
        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "tuner.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "absent.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "tuner.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(path)
