"""Tests for run parameters."""

from dataclasses import FrozenInstanceError

import pytest

from shearmd.config import RunConfig, load_run_config
from shearmd.errors import ConfigurationError


class TestRunConfig:
    """Test RunConfig validation."""

    def test_defaults(self):
        """Test default parameter values."""
        config = RunConfig()
        assert config.nblock == 10
        assert config.nstep == 1000
        assert config.r_cut == 2.5
        assert config.dt == 0.005
        assert config.strain_rate == 0.01
        assert config.total_steps == 10000

    def test_integer_floats_converted(self):
        """Test that integer values for float parameters become floats."""
        config = RunConfig(r_cut=2, strain_rate=0)
        assert isinstance(config.r_cut, float)
        assert isinstance(config.strain_rate, float)

    def test_config_is_immutable(self):
        """Test that parameters cannot change after construction."""
        config = RunConfig()
        with pytest.raises(FrozenInstanceError):
            config.dt = 0.01

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"nblock": 0},
            {"nstep": -5},
            {"nblock": 2.5},
            {"nstep": True},
            {"r_cut": 0.0},
            {"dt": -0.001},
            {"dt": float("nan")},
            {"strain_rate": float("inf")},
            {"strain_rate": "fast"},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Test that invalid parameters raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            RunConfig(**kwargs)

    def test_negative_strain_rate_allowed(self):
        """Test that shear may run in either direction."""
        assert RunConfig(strain_rate=-0.1).strain_rate == -0.1

    def test_configuration_error_is_value_error(self):
        """Test that ConfigurationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            RunConfig(nblock=0)

    def test_from_mapping(self):
        """Test building from a flat mapping."""
        config = RunConfig.from_mapping({"nblock": 3, "dt": 0.001})
        assert config.nblock == 3
        assert config.dt == 0.001
        assert config.nstep == 1000

    def test_from_mapping_run_section(self):
        """Test building from a nested run section."""
        config = RunConfig.from_mapping({"run": {"nstep": 7}})
        assert config.nstep == 7

    def test_from_mapping_unknown_key(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigurationError, match="timestep"):
            RunConfig.from_mapping({"timestep": 0.01})

    def test_to_dict(self):
        """Test conversion to a plain dictionary."""
        config = RunConfig(nblock=2)
        assert config.to_dict() == {
            "nblock": 2,
            "nstep": 1000,
            "r_cut": 2.5,
            "dt": 0.005,
            "strain_rate": 0.01,
        }


class TestLoadRunConfig:
    """Test loading run parameters from YAML."""

    def test_no_file(self):
        """Test that defaults are used without a file."""
        assert load_run_config() == RunConfig()

    def test_top_level_keys(self, tmp_path):
        """Test a file with top-level keys."""
        path = tmp_path / "run.yaml"
        path.write_text("nblock: 4\nnstep: 20\nstrain_rate: 0.05\n")
        config = load_run_config(path)
        assert config.nblock == 4
        assert config.nstep == 20
        assert config.strain_rate == 0.05

    def test_run_section(self, tmp_path):
        """Test a file with a run section."""
        path = tmp_path / "run.yaml"
        path.write_text("run:\n  r_cut: 2.0\n  dt: 0.002\n")
        config = load_run_config(path)
        assert config.r_cut == 2.0
        assert config.dt == 0.002

    def test_empty_file(self, tmp_path):
        """Test that an empty file gives defaults."""
        path = tmp_path / "run.yaml"
        path.write_text("")
        assert load_run_config(path) == RunConfig()

    def test_overrides(self, tmp_path):
        """Test that overrides beat the file and None overrides are ignored."""
        path = tmp_path / "run.yaml"
        path.write_text("nblock: 4\nnstep: 20\n")
        config = load_run_config(path, nblock=8, nstep=None)
        assert config.nblock == 8
        assert config.nstep == 20

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            load_run_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test that unparsable YAML raises ConfigurationError."""
        path = tmp_path / "run.yaml"
        path.write_text("nblock: [1, 2\n")
        with pytest.raises(ConfigurationError):
            load_run_config(path)

    def test_non_mapping(self, tmp_path):
        """Test that a YAML list is rejected."""
        path = tmp_path / "run.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError):
            load_run_config(path)

    def test_invalid_value_in_file(self, tmp_path):
        """Test that invalid values in the file are rejected."""
        path = tmp_path / "run.yaml"
        path.write_text("dt: -1.0\n")
        with pytest.raises(ConfigurationError):
            load_run_config(path)
