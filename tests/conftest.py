"""Shared fixtures and force-provider stubs."""

import numpy as np
import pytest

from shearmd.forcefields import ForceProvider, Interaction
from shearmd.system import LeesEdwardsBox, ShearFlowState


class ZeroForce(ForceProvider):
    """Force provider returning zero force and no overlap."""

    def __init__(self):
        self.calls = 0

    def compute(self, state, box, cutoff):
        self.calls += 1
        return np.zeros((state.n_atoms, 3)), Interaction(lap=1.0)


class OverlapOnCall(ForceProvider):
    """Force provider that reports an overlap on the given call (1-based)."""

    def __init__(self, overlap_call):
        self.overlap_call = overlap_call
        self.calls = 0

    def compute(self, state, box, cutoff):
        self.calls += 1
        if self.calls >= self.overlap_call:
            return np.zeros((state.n_atoms, 3)), Interaction(ovr=True)
        return np.zeros((state.n_atoms, 3)), Interaction(lap=1.0)


@pytest.fixture
def two_particle_box():
    """Box of side 10 for the two-particle scenarios."""
    return LeesEdwardsBox(10.0)


@pytest.fixture
def two_particle_state(two_particle_box):
    """Two particles one unit apart moving towards each other along x."""
    return ShearFlowState.from_configuration(
        positions=[[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]],
        velocities=[[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]],
        box=two_particle_box,
    )


@pytest.fixture
def lattice_box():
    """Box holding a 3x3x3 simple cubic lattice with spacing 1.5."""
    return LeesEdwardsBox(4.5)


@pytest.fixture
def lattice_state(lattice_box):
    """Slightly perturbed simple cubic lattice with random velocities."""
    rng = np.random.default_rng(42)
    grid = np.arange(3) * 1.5 - 1.5
    positions = np.array([[x, y, z] for x in grid for y in grid for z in grid])
    positions += rng.uniform(-0.05, 0.05, positions.shape)
    velocities = rng.normal(0.0, 1.0, positions.shape)
    return ShearFlowState.from_configuration(positions, velocities, lattice_box)


@pytest.fixture
def zero_force():
    """Zero-force provider that counts its calls."""
    return ZeroForce()


@pytest.fixture
def overlap_on_call():
    """Factory for providers that overlap from the given call onwards."""
    return OverlapOnCall
