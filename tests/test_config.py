"""Tests for configuration validation and loading."""

import json

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chordscribe.config import AnalysisConfig, SynthesisConfig, load_config
from chordscribe.core import ConfigurationError


class TestAnalysisConfig:
    """Tests for analysis settings."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.frame_size == 4096
        assert config.hop_size == 2048
        assert config.min_chord_duration == 0.5
        assert config.workers == 1

    @pytest.mark.parametrize("kwargs", [
        {"frame_size": 0},
        {"hop_size": 0},
        {"frame_size": 1024, "hop_size": 2048},
        {"min_chord_duration": -0.1},
        {"reference_frequency": 0.0},
        {"min_frequency": 5000.0, "max_frequency": 40.0},
        {"noise_floor": -1.0},
        {"workers": 0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            AnalysisConfig(**kwargs)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            AnalysisConfig(hop_size=-1)

    def test_frame_times(self):
        config = AnalysisConfig(frame_size=4, hop_size=2)
        assert config.frame_times(0, 10) == (0.0, 0.2)
        assert config.frame_times(3, 10) == pytest.approx((0.6, 0.8))


class TestSynthesisConfig:
    """Tests for synthesis settings."""

    def test_chord_velocity(self):
        assert SynthesisConfig().chord_velocity == 0.8
        assert SynthesisConfig(melody=True).chord_velocity == 0.6

    @pytest.mark.parametrize("kwargs", [
        {"velocity": 1.5},
        {"melody_velocity": -0.1},
        {"max_sub_beat": 0.0},
        {"articulation": 0.0},
        {"tempo": 0.0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            SynthesisConfig(**kwargs)


class TestLoadConfig:
    """Tests for JSON and environment configuration."""

    def test_defaults_without_sources(self):
        analysis, synthesis = load_config(environ={})
        assert analysis == AnalysisConfig()
        assert synthesis == SynthesisConfig()

    def test_json_file(self, tmp_path):
        path = tmp_path / "chordscribe.json"
        path.write_text(json.dumps({
            "analysis": {"hop_size": 1024, "min_chord_duration": 1.0},
            "synthesis": {"melody": True, "tempo": 96},
        }))

        analysis, synthesis = load_config(str(path), environ={})

        assert analysis.hop_size == 1024
        assert analysis.min_chord_duration == 1.0
        assert analysis.frame_size == 4096
        assert synthesis.melody is True
        assert synthesis.tempo == 96.0

    def test_environment_overrides_file(self, tmp_path):
        path = tmp_path / "chordscribe.json"
        path.write_text(json.dumps({"analysis": {"hop_size": 1024}}))
        environ = {
            "CHORDSCRIBE_ANALYSIS_HOP_SIZE": "512",
            "CHORDSCRIBE_ANALYSIS_WORKERS": "4",
            "CHORDSCRIBE_SYNTHESIS_MELODY": "yes",
            "UNRELATED": "1",
        }

        analysis, synthesis = load_config(str(path), environ=environ)

        assert analysis.hop_size == 512
        assert analysis.workers == 4
        assert synthesis.melody is True

    def test_unknown_keys_are_ignored(self, tmp_path, caplog):
        path = tmp_path / "chordscribe.json"
        path.write_text(json.dumps({"analysis": {"window": "hamming"}}))

        analysis, _ = load_config(str(path), environ={})

        assert analysis == AnalysisConfig()
        assert "window" in caplog.text

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.json"), environ={})

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_config(str(path), environ={})

    def test_invalid_value(self):
        with pytest.raises(ConfigurationError):
            load_config(environ={"CHORDSCRIBE_ANALYSIS_FRAME_SIZE": "big"})

    def test_values_are_validated(self):
        with pytest.raises(ConfigurationError):
            load_config(environ={"CHORDSCRIBE_ANALYSIS_HOP_SIZE": "8192"})
