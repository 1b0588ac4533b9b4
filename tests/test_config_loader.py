"""
Unit tests for befw.config.loader module.

Tests TOML loading, unknown section warnings and layered merging.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

import pytest

from befw.config.base import EnrichmentConfig
from befw.config.exceptions import ValidationError
from befw.config.loader import (
    KNOWN_SECTIONS,
    deep_merge,
    load_config,
    load_config_layers,
    load_experiment,
)

CONFIGS = Path(__file__).parents[1] / "configs"


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_nested_sections(self):
        """deep_merge recursively merges sections."""
        base = {"sweep": {"K_start": 1.0, "K_stop": 40.0}}
        override = {"sweep": {"K_stop": 10.0, "on_error": "skip"}}
        assert deep_merge(base, override) == {
            "sweep": {"K_start": 1.0, "K_stop": 10.0, "on_error": "skip"}
        }

    def test_merge_non_overlapping_sections(self):
        """deep_merge keeps sections found in either dictionary."""
        result = deep_merge({"foodweb": {"S": 10}}, {"simulation": {"tmax": 100}})
        assert result == {"foodweb": {"S": 10}, "simulation": {"tmax": 100}}

    def test_merge_replaces_lists(self):
        """deep_merge replaces lists instead of concatenating."""
        assert deep_merge({"K": [1, 2, 3]}, {"K": [4, 5]}) == {"K": [4, 5]}

    def test_merge_scalar_over_dict(self):
        """deep_merge can replace a section with a scalar."""
        assert deep_merge({"value": {"nested": 1}}, {"value": 42}) == {"value": 42}

    def test_merge_does_not_modify_original(self):
        """deep_merge leaves its inputs untouched."""
        base = {"foodweb": {"S": 10}}
        override = {"foodweb": {"S": 20}}
        deep_merge(base, override)
        assert base == {"foodweb": {"S": 10}}
        assert override == {"foodweb": {"S": 20}}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_valid_toml(self, tmp_path):
        """load_config parses a TOML file into nested dicts."""
        path = tmp_path / "experiment.toml"
        path.write_text(
            '[foodweb]\nmodel = "cascade"\nS = 12\n\n[sweep]\nK_stop = 5.0\n'
        )

        config = load_config(path)
        assert config == {
            "foodweb": {"model": "cascade", "S": 12},
            "sweep": {"K_stop": 5.0},
        }

    def test_accepts_string_path(self, tmp_path):
        """load_config accepts string paths."""
        path = tmp_path / "experiment.toml"
        path.write_text("[simulation]\ntmax = 100.0\n")
        assert load_config(str(path))["simulation"]["tmax"] == 100.0

    def test_unknown_sections_warn(self, tmp_path, caplog):
        """Unknown top-level keys are reported but kept."""
        path = tmp_path / "experiment.toml"
        path.write_text("[foodweb]\nS = 5\n\n[plotting]\ndpi = 300\n")

        with caplog.at_level(logging.WARNING, logger="befw.config.loader"):
            config = load_config(path)

        assert "Unknown configuration keys" in caplog.text
        assert "plotting" in caplog.text
        assert config["plotting"] == {"dpi": 300}

    def test_known_sections_do_not_warn(self, tmp_path, caplog):
        """Every documented section loads silently."""
        path = tmp_path / "experiment.toml"
        path.write_text("".join(f"[{name}]\n" for name in sorted(KNOWN_SECTIONS)))

        with caplog.at_level(logging.WARNING, logger="befw.config.loader"):
            load_config(path)

        assert caplog.records == []

    def test_file_not_found(self, tmp_path):
        """load_config raises FileNotFoundError for missing files."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        """load_config raises on malformed TOML."""
        path = tmp_path / "broken.toml"
        path.write_text("[foodweb\nS = 5\n")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_config(path)

    def test_shipped_configuration(self):
        """The bundled enrichment experiment loads."""
        config = load_config(CONFIGS / "enrichment.toml")
        assert config["foodweb"]["model"] == "niche"
        assert config["sweep"]["K_stop"] == 40.0


class TestLoadConfigLayers:
    """Tests for load_config_layers function."""

    def test_empty(self):
        """No paths give an empty configuration."""
        assert load_config_layers() == {}

    def test_later_layers_override(self, tmp_path):
        """Later files take precedence over earlier ones."""
        defaults = tmp_path / "defaults.toml"
        defaults.write_text("[foodweb]\nS = 10\nC = 0.15\n\n[sweep]\nK_stop = 40.0\n")
        experiment = tmp_path / "experiment.toml"
        experiment.write_text("[foodweb]\nS = 20\n")

        config = load_config_layers(defaults, experiment)
        assert config == {"foodweb": {"S": 20, "C": 0.15}, "sweep": {"K_stop": 40.0}}

    def test_override_shipped_configuration(self, tmp_path):
        """An experiment can shorten the bundled sweep."""
        override = tmp_path / "short.toml"
        override.write_text("[sweep]\nK_stop = 3.0\n")

        config = load_config_layers(CONFIGS / "enrichment.toml", override)
        assert config["sweep"]["K_start"] == 1.0
        assert config["sweep"]["K_stop"] == 3.0
        assert config["schema"]["name"] == "niche-enrichment"


class TestLoadExperiment:
    """Tests for load_experiment function."""

    def test_shipped_experiment(self):
        """The bundled file gives a validated configuration."""
        config = load_experiment(CONFIGS / "enrichment.toml")
        assert isinstance(config, EnrichmentConfig)
        assert config.name == "niche-enrichment"
        assert config.foodweb.S == 10

    def test_layered_experiment(self, tmp_path):
        """Overrides are applied before validation."""
        override = tmp_path / "short.toml"
        override.write_text(
            "[sweep]\nK_stop = 3.0\n\n[simulation]\ntmax = 50.0\nlast = 10\n"
        )
        config = load_experiment(CONFIGS / "enrichment.toml", override)
        assert config.sweep.K_range().tolist() == [1.0, 2.0, 3.0]
        assert config.simulation.tmax == 50.0

    def test_invalid_override(self, tmp_path):
        """Invalid merged values raise ValidationError."""
        override = tmp_path / "bad.toml"
        override.write_text("[functional_response]\nh = 5.0\n")
        with pytest.raises(ValidationError):
            load_experiment(CONFIGS / "enrichment.toml", override)
