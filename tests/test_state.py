"""Tests for ShearFlowState."""

import numpy as np
import pytest

from shearmd.system import LeesEdwardsBox, ShearFlowState


class TestStateCreation:
    """Test state construction and validation."""

    def test_direct_construction(self):
        """Test constructing a state from arrays."""
        state = ShearFlowState(
            positions=np.zeros((4, 3)),
            velocities=np.ones((4, 3)),
            forces=np.zeros((4, 3)),
        )
        assert state.n_atoms == 4
        assert state.strain == 0.0
        assert state.step == 0
        assert state.positions.dtype == np.float64

    def test_bad_position_shape(self):
        """Test that positions must be (N, 3)."""
        with pytest.raises(ValueError):
            ShearFlowState(
                positions=np.zeros((4, 2)),
                velocities=np.zeros((4, 2)),
                forces=np.zeros((4, 2)),
            )

    def test_mismatched_velocities(self):
        """Test that velocities must match positions."""
        with pytest.raises(ValueError):
            ShearFlowState(
                positions=np.zeros((4, 3)),
                velocities=np.zeros((3, 3)),
                forces=np.zeros((4, 3)),
            )

    def test_mismatched_forces(self):
        """Test that forces must match positions."""
        with pytest.raises(ValueError):
            ShearFlowState(
                positions=np.zeros((4, 3)),
                velocities=np.zeros((4, 3)),
                forces=np.zeros((5, 3)),
            )


class TestFromConfiguration:
    """Test preparing a state from a physical configuration."""

    def test_positions_in_box_units(self, two_particle_state):
        """Test that positions are divided by the box length."""
        np.testing.assert_allclose(
            two_particle_state.positions, [[0.0, 0.0, 0.0], [0.1, 0.0, 0.0]]
        )

    def test_positions_wrapped(self):
        """Test that positions outside the box are wrapped."""
        box = LeesEdwardsBox(10.0)
        state = ShearFlowState.from_configuration(
            [[6.0, 0.0, -7.0]], [[0.0, 0.0, 0.0]], box
        )
        np.testing.assert_allclose(state.positions, [[-0.4, 0.0, 0.3]], atol=1e-15)

    def test_center_of_mass_velocity_removed(self):
        """Test that net momentum is zeroed."""
        box = LeesEdwardsBox(10.0)
        state = ShearFlowState.from_configuration(
            [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]],
            [[1.0, 1.0, 0.0], [3.0, 1.0, 0.0]],
            box,
        )
        np.testing.assert_allclose(state.velocities, [[-1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        np.testing.assert_allclose(state.center_of_mass_velocity, 0.0, atol=1e-15)

    def test_initial_shear_state(self, two_particle_state):
        """Test that strain, time and step start at zero with zero forces."""
        assert two_particle_state.strain == 0.0
        assert two_particle_state.time == 0.0
        assert two_particle_state.step == 0
        np.testing.assert_array_equal(two_particle_state.forces, 0.0)

    def test_mismatched_velocities(self):
        """Test that velocities must match positions."""
        box = LeesEdwardsBox(10.0)
        with pytest.raises(ValueError):
            ShearFlowState.from_configuration(np.zeros((2, 3)), np.zeros((3, 3)), box)


class TestStateProperties:
    """Test derived state quantities."""

    def test_kinetic_energy(self, two_particle_state):
        """Test kinetic energy with unit masses."""
        assert two_particle_state.velocity_norm_sq == pytest.approx(2.0)
        assert two_particle_state.kinetic_energy == pytest.approx(1.0)

    def test_physical_positions(self, two_particle_state, two_particle_box):
        """Test conversion back to simulation units."""
        np.testing.assert_allclose(
            two_particle_state.physical_positions(two_particle_box),
            [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]],
        )

    def test_copy_is_independent(self, two_particle_state):
        """Test that a copy does not share arrays."""
        copy = two_particle_state.copy()
        copy.positions[0, 0] = 0.3
        copy.velocities[0, 0] = 5.0
        copy.strain = 1.0
        assert two_particle_state.positions[0, 0] == 0.0
        assert two_particle_state.velocities[0, 0] == 1.0
        assert two_particle_state.strain == 0.0
