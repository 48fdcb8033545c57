"""Tests for the configuration loader."""

import pytest

from topreco.config import (
    ConfigCycleError,
    ConfigError,
    ConfigIncludeError,
    load_config,
    load_config_file,
)
from topreco.config.load import deep_merge


class TestConfigLoader:
    """Test suite for the YAML configuration loader."""

    def test_basic_load(self, tmp_path):
        """Test basic YAML loading without any special features."""
        config_file = tmp_path / "basic.yaml"
        config_file.write_text(
            """
ranker:
  name: chi2
jet_selection:
  min_pt: 30.
  max_abs_eta: 2.4
"""
        )

        cfg = load_config_file(str(config_file))

        assert cfg["ranker"]["name"] == "chi2"
        assert cfg["jet_selection"]["min_pt"] == 30.0
        assert cfg["jet_selection"]["max_abs_eta"] == 2.4

    def test_include(self, tmp_path):
        """Test including another YAML file at the top level."""
        base_config = tmp_path / "base.yaml"
        base_config.write_text(
            """
ranker:
  name: chi2
  terms:
    - {expression: mass_w_had, mean: 80.4, variance: 10.}
jet_selection:
  min_pt: 20.
  max_abs_eta: 2.4
"""
        )

        main_config = tmp_path / "main.yaml"
        main_config.write_text(
            """
include: base.yaml

jet_selection:
  min_pt: 30.
"""
        )

        cfg = load_config_file(str(main_config))

        assert "include" not in cfg
        assert cfg["ranker"]["name"] == "chi2"
        assert cfg["jet_selection"]["min_pt"] == 30.0
        assert cfg["jet_selection"]["max_abs_eta"] == 2.4

    def test_include_list(self, tmp_path):
        """Test including several files, later ones taking precedence."""
        (tmp_path / "a.yaml").write_text("ranker: {name: chi2}\nvalue: 1\n")
        (tmp_path / "b.yaml").write_text("value: 2\n")
        (tmp_path / "main.yaml").write_text("include: [a.yaml, b.yaml]\n")

        cfg = load_config_file(str(tmp_path / "main.yaml"))
        assert cfg == {"ranker": {"name": "chi2"}, "value": 2}

    def test_nested_include(self, tmp_path):
        """Test includes relative to the including file."""
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / "tables.yaml").write_text("nu_likelihood: {edges: [0., 1.], values: [1.]}\n")
        (sub / "ranker.yaml").write_text("include: tables.yaml\nname: likelihood\n")

        cfg = load_config_file(str(sub / "ranker.yaml"))
        assert cfg["name"] == "likelihood"
        assert cfg["nu_likelihood"]["edges"] == [0.0, 1.0]

    def test_string(self, tmp_path):
        """Test loading from a string with includes relative to a directory."""
        (tmp_path / "base.yaml").write_text("ranker: {name: likelihood}\n")
        cfg = load_config("include: base.yaml\njet_selection: {min_pt: 25.}\n", str(tmp_path))
        assert cfg["ranker"]["name"] == "likelihood"
        assert cfg["jet_selection"]["min_pt"] == 25.0

    def test_missing_include(self, tmp_path):
        """Test that a missing include is reported."""
        (tmp_path / "main.yaml").write_text("include: missing.yaml\n")
        with pytest.raises(ConfigIncludeError):
            load_config_file(str(tmp_path / "main.yaml"))

    def test_cycle(self, tmp_path):
        """Test that include cycles are detected."""
        (tmp_path / "a.yaml").write_text("include: b.yaml\n")
        (tmp_path / "b.yaml").write_text("include: a.yaml\n")
        with pytest.raises(ConfigCycleError) as excinfo:
            load_config_file(str(tmp_path / "a.yaml"))

        assert len(excinfo.value.cycle_path) == 3

    def test_invalid(self):
        """Test that non-mapping and malformed documents are rejected."""
        with pytest.raises(ConfigError):
            load_config("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config("ranker: {name: chi2\n")

    def test_empty(self):
        """Test that an empty document is an empty configuration."""
        assert load_config("") == {}

    def test_deep_merge(self):
        """Test that merging does not modify its inputs."""
        base = {"a": {"b": 1, "c": 2}}
        merged = deep_merge(base, {"a": {"c": 3}, "d": 4})
        assert merged == {"a": {"b": 1, "c": 3}, "d": 4}
        assert base == {"a": {"b": 1, "c": 2}}
