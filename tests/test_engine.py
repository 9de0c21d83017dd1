"""Tests for ShearFlowEngine and reporters."""

import io

import numpy as np
import pytest

from shearmd.config import RunConfig
from shearmd.engines import (
    BlockAverageReporter,
    CallbackReporter,
    ConfigurationReporter,
    ObservableSeriesReporter,
    ShearFlowEngine,
    StateReporter,
)
from shearmd.errors import ConfigurationError, OverlapError
from shearmd.forcefields import LennardJonesForce
from shearmd.io import read_configuration


@pytest.fixture
def lj_config():
    """Short sheared run fitting the lattice box."""
    return RunConfig(nblock=3, nstep=5, r_cut=2.0, dt=0.005, strain_rate=0.1)


@pytest.fixture
def lj_engine(lattice_state, lattice_box, lj_config):
    """Engine over the lattice with Lennard-Jones forces."""
    return ShearFlowEngine(lattice_state, lattice_box, lj_config, LennardJonesForce())


class TestEngineSetup:
    """Test engine construction."""

    def test_initial_forces_and_observables(self, lj_engine):
        """Test that forces and observables are ready before the first step."""
        assert np.any(lj_engine.state.forces != 0.0)
        assert set(lj_engine.observables) == set(lj_engine.calculator.names)
        assert lj_engine.state.step == 0

    def test_cutoff_too_large(self, lattice_state, lattice_box):
        """Test that a cutoff beyond half the box is rejected."""
        config = RunConfig(r_cut=2.5)
        with pytest.raises(ConfigurationError):
            ShearFlowEngine(lattice_state, lattice_box, config, LennardJonesForce())

    def test_initial_overlap(self, two_particle_state, two_particle_box, overlap_on_call):
        """Test that an overlapping start configuration is rejected."""
        with pytest.raises(OverlapError) as excinfo:
            ShearFlowEngine(
                two_particle_state, two_particle_box, RunConfig(), overlap_on_call(1)
            )
        assert excinfo.value.stage == "initial"
        assert str(excinfo.value) == "Overlap in initial configuration"


class TestEngineRun:
    """Test full runs."""

    def test_run_steps_and_strain(self, lj_engine, lj_config):
        """Test step count, time and accumulated strain."""
        state = lj_engine.run()
        assert state.step == lj_config.total_steps
        assert state.time == pytest.approx(lj_config.total_steps * lj_config.dt)
        assert state.strain == pytest.approx(
            lj_config.total_steps * lj_config.dt * lj_config.strain_rate
        )

    def test_kinetic_temperature_constant(self, lj_engine):
        """Test that the kinetic temperature never changes."""
        series = ObservableSeriesReporter()
        lj_engine.add_reporter(series)
        initial = lj_engine.observables["T kinetic"]
        lj_engine.run()
        np.testing.assert_allclose(series.series("T kinetic"), initial, rtol=1e-10)

    def test_block_statistics(self, lj_engine, lj_config):
        """Test that every block is averaged."""
        lj_engine.run()
        result = lj_engine.averages.result()
        assert result["n_blocks"] == lj_config.nblock
        assert result["n_frames"] == lj_config.total_steps

    def test_writes_snapshots(self, lj_engine, lattice_box, lj_config, tmp_path):
        """Test that block and final configurations are written."""
        reporter = ConfigurationReporter(lattice_box, lj_config.nblock, tmp_path)
        lj_engine.add_reporter(reporter)
        state = lj_engine.run()

        names = [path.name for path in reporter.written]
        assert names == ["cnf.001", "cnf.002", "cnf.003", "cnf.out"]
        frame = read_configuration(tmp_path / "cnf.out")
        assert frame["n_atoms"] == state.n_atoms
        np.testing.assert_allclose(
            frame["positions"], state.physical_positions(lattice_box), atol=1e-9
        )

    def test_callback_stops_run(self, lj_engine, tmp_path, lattice_box, lj_config):
        """Test that a callback returning True ends the run cleanly."""
        reporter = ConfigurationReporter(lattice_box, lj_config.nblock, tmp_path)
        lj_engine.add_reporter(reporter)
        state = lj_engine.run(callback=lambda engine: engine.state.step >= 7)
        assert state.step == 7
        assert lj_engine.averages.n_blocks == 2
        assert (tmp_path / "cnf.out").exists()

    def test_callback_reporter(self, lj_engine, lj_config):
        """Test that callback reporters see every step."""
        seen = []
        lj_engine.add_reporter(CallbackReporter(lambda state, obs: seen.append(state.step)))
        lj_engine.run()
        assert seen == list(range(1, lj_config.total_steps + 1))

    def test_state_reporter(self, lj_engine):
        """Test the tabular per-step output."""
        out = io.StringIO()
        lj_engine.add_reporter(StateReporter(frequency=5, file=out))
        lj_engine.run()
        lines = out.getvalue().splitlines()
        assert lines[0].split("\t")[:3] == ["Step", "Time", "Strain"]
        assert [line.split("\t")[0] for line in lines[1:]] == ["5", "10", "15"]

    def test_block_average_reporter(self, lj_engine):
        """Test the block table and labelled initial and final values."""
        out = io.StringIO()
        lj_engine.add_reporter(BlockAverageReporter(file=out))
        lj_engine.run()
        text = out.getvalue()
        assert text.startswith("Initial values")
        for label in ("Run averages", "Run errors", "Run fluct", "Final values"):
            assert label in text
        block_rows = [line for line in text.splitlines() if line and line[0] in "123"]
        assert len(block_rows) == 3

    def test_summary(self, lj_engine, lj_config):
        """Test the run summary."""
        lj_engine.run()
        summary = lj_engine.summary()
        assert summary["step"] == lj_config.total_steps
        assert summary["averages"]["n_blocks"] == lj_config.nblock
        assert lj_engine.performance["total_steps"] == lj_config.total_steps


class TestEngineOverlap:
    """Test that overlaps abort the run without a final configuration."""

    def test_overlap_mid_run(
        self, two_particle_state, two_particle_box, overlap_on_call, tmp_path
    ):
        """Test that a mid-run overlap stops stepping and skips cnf.out."""
        config = RunConfig(nblock=1, nstep=5)
        engine = ShearFlowEngine(
            two_particle_state, two_particle_box, config, overlap_on_call(3)
        )
        engine.add_reporter(ConfigurationReporter(two_particle_box, 1, tmp_path))

        with pytest.raises(OverlapError) as excinfo:
            engine.run()

        assert excinfo.value.stage == "in-progress"
        assert engine.state.step == 1
        assert not (tmp_path / "cnf.out").exists()
        assert not (tmp_path / "cnf.001").exists()

    def test_overlap_in_final_configuration(
        self, two_particle_state, two_particle_box, overlap_on_call, tmp_path
    ):
        """Test that a final overlap keeps block snapshots but skips cnf.out."""
        config = RunConfig(nblock=2, nstep=3)
        # One initial call, one per step, then the final check
        provider = overlap_on_call(config.total_steps + 2)
        engine = ShearFlowEngine(two_particle_state, two_particle_box, config, provider)
        engine.add_reporter(ConfigurationReporter(two_particle_box, 2, tmp_path))

        with pytest.raises(OverlapError) as excinfo:
            engine.run()

        assert excinfo.value.stage == "final"
        assert engine.state.step == config.total_steps
        assert (tmp_path / "cnf.001").exists()
        assert (tmp_path / "cnf.002").exists()
        assert not (tmp_path / "cnf.out").exists()
