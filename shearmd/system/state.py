"""Particle and shear state of a sheared isokinetic simulation."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .box import LeesEdwardsBox


@dataclass
class ShearFlowState:
    """
    Mutable state owned by a single run.

    Holds the particle store (positions, velocities, forces) and the shear
    state (accumulated strain). All particles have unit mass. Propagators
    modify the arrays in place.

    Attributes:
        positions: Positions in box units, shape (N, 3), each component
            in [-0.5, 0.5) after wrapping.
        velocities: Velocities in simulation units, shape (N, 3).
        forces: Forces from the last force evaluation, shape (N, 3).
        strain: Accumulated strain dr_x/dr_y. Never wrapped.
        time: Current simulation time.
        step: Current step number.
    """

    positions: NDArray[np.floating]
    velocities: NDArray[np.floating]
    forces: NDArray[np.floating]
    strain: float = 0.0
    time: float = 0.0
    step: int = 0

    def __post_init__(self) -> None:
        """Validate and convert arrays."""
        self.positions = np.array(self.positions, dtype=np.float64)
        self.velocities = np.array(self.velocities, dtype=np.float64)
        self.forces = np.array(self.forces, dtype=np.float64)
        self.strain = float(self.strain)

        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (N, 3), got {self.positions.shape}")
        n_atoms = self.positions.shape[0]
        if self.velocities.shape != (n_atoms, 3):
            raise ValueError(
                f"velocities shape {self.velocities.shape} incompatible with "
                f"{n_atoms} atoms"
            )
        if self.forces.shape != (n_atoms, 3):
            raise ValueError(
                f"forces shape {self.forces.shape} incompatible with {n_atoms} atoms"
            )

    @classmethod
    def from_configuration(
        cls,
        positions: ArrayLike,
        velocities: ArrayLike,
        box: LeesEdwardsBox,
    ) -> ShearFlowState:
        """
        Prepare a state from a configuration in physical units.

        Positions are converted to box units and wrapped with zero initial
        strain; the centre-of-mass velocity is removed. Momentum is zeroed
        only here, never during the run.

        Args:
            positions: Physical positions, shape (N, 3).
            velocities: Velocities, shape (N, 3).
            box: Simulation box.

        Returns:
            New ShearFlowState with zero forces.
        """
        r = box.to_box_units(positions)
        if r.ndim != 2 or r.shape[1] != 3:
            raise ValueError(f"positions must have shape (N, 3), got {r.shape}")
        strain = 0.0
        box.wrap_positions(r, strain)

        v = np.array(velocities, dtype=np.float64)
        if v.shape != r.shape:
            raise ValueError(f"velocities shape {v.shape} does not match positions {r.shape}")
        if len(v) > 0:
            v -= v.mean(axis=0)

        return cls(positions=r, velocities=v, forces=np.zeros_like(r), strain=strain)

    @property
    def n_atoms(self) -> int:
        """Return number of particles."""
        return len(self.positions)

    @property
    def velocity_norm_sq(self) -> float:
        """Sum of squared velocities over all particles and components."""
        return float(np.sum(self.velocities**2))

    @property
    def kinetic_energy(self) -> float:
        """Total kinetic energy with unit masses (peculiar velocities)."""
        return 0.5 * self.velocity_norm_sq

    @property
    def center_of_mass_velocity(self) -> NDArray[np.floating]:
        """Return centre-of-mass velocity."""
        return self.velocities.mean(axis=0)

    def physical_positions(self, box: LeesEdwardsBox) -> NDArray[np.floating]:
        """Return positions in simulation units."""
        return box.to_physical(self.positions)

    def copy(self) -> ShearFlowState:
        """Create a deep copy of this state."""
        return ShearFlowState(
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
            forces=self.forces.copy(),
            strain=self.strain,
            time=self.time,
            step=self.step,
        )
