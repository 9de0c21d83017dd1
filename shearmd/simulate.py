"""
Simple high-level simulation API.

This module provides a one-call interface for running a sheared
Lennard-Jones fluid with minimal configuration.

Example:
    >>> from shearmd import simulate
    >>> result = simulate.lj_shear_flow(n_atoms=108, strain_rate=0.05)
    >>> print(result.run_averages["P full"])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from .config import RunConfig
from .engines import ObservableSeriesReporter, ShearFlowEngine
from .forcefields import LennardJonesForce
from .system import LeesEdwardsBox, ShearFlowState


@dataclass
class SimulationResult:
    """Results from a sheared simulation run."""

    # Time series, one entry per step
    times: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    strain: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    observables: dict[str, NDArray[np.floating]] = field(default_factory=dict)

    # Block statistics
    block_averages: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    run_averages: dict[str, float] = field(default_factory=dict)
    run_errors: dict[str, float] = field(default_factory=dict)

    # Final state
    final_state: ShearFlowState | None = None
    final_observables: dict[str, float] = field(default_factory=dict)

    # Metadata
    n_atoms: int = 0
    box_size: float = 0.0
    config: RunConfig | None = None

    @property
    def final_strain(self) -> float:
        """Strain accumulated over the run."""
        return self.final_state.strain if self.final_state is not None else 0.0

    @property
    def kinetic_temperature(self) -> NDArray[np.floating]:
        """Kinetic temperature time series."""
        return self.observables.get("T kinetic", np.array([]))

    def summary(self) -> dict[str, Any]:
        """Run averages and errors side by side."""
        return {
            name: (self.run_averages[name], self.run_errors.get(name, 0.0))
            for name in self.run_averages
        }


def _create_fcc_positions(n_atoms: int, box_length: float) -> NDArray[np.floating]:
    """Create positions on an fcc lattice filling the box, centred on the origin."""
    n_cells = int(np.ceil(round((n_atoms / 4) ** (1 / 3), 6)))
    spacing = box_length / n_cells
    basis = np.array(
        [[0.25, 0.25, 0.25], [0.25, 0.75, 0.75], [0.75, 0.25, 0.75], [0.75, 0.75, 0.25]]
    )

    positions = []
    for ix in range(n_cells):
        for iy in range(n_cells):
            for iz in range(n_cells):
                for b in basis:
                    if len(positions) < n_atoms:
                        positions.append((np.array([ix, iy, iz]) + b) * spacing)

    return np.array(positions) - 0.5 * box_length


def _random_velocities(
    n_atoms: int, temperature: float, rng: np.random.Generator
) -> NDArray[np.floating]:
    """Draw velocities with zero total momentum at the given kinetic temperature."""
    velocities = rng.normal(0.0, np.sqrt(temperature), (n_atoms, 3))
    velocities -= velocities.mean(axis=0)
    kinetic_temperature = np.sum(velocities**2) / (3 * n_atoms - 3)
    return velocities * np.sqrt(temperature / kinetic_temperature)


def lj_shear_flow(
    n_atoms: int = 108,
    temperature: float = 1.0,
    density: float = 0.75,
    strain_rate: float = 0.01,
    nblock: int = 10,
    nstep: int = 100,
    timestep: float = 0.005,
    cutoff: float = 2.5,
    seed: int = 42,
    verbose: bool = True,
) -> SimulationResult:
    """
    Run an isokinetic SLLOD simulation of a sheared Lennard-Jones fluid.

    The system starts from an fcc lattice with random velocities scaled to
    the requested kinetic temperature, which the isokinetic thermostat then
    holds fixed.

    Args:
        n_atoms: Number of atoms (default: 108).
        temperature: Reduced kinetic temperature (default: 1.0).
        density: Reduced number density (default: 0.75).
        strain_rate: Velocity gradient dv_x/dr_y (default: 0.01).
        nblock: Number of averaging blocks (default: 10).
        nstep: Steps per block (default: 100).
        timestep: Integration timestep (default: 0.005).
        cutoff: LJ cutoff distance (default: 2.5).
        seed: Random seed for reproducibility (default: 42).
        verbose: Print progress (default: True).

    Returns:
        SimulationResult with observable time series and block statistics.

    Example:
        >>> result = lj_shear_flow(n_atoms=108, nblock=5, nstep=100)
        >>> print(f"Final strain: {result.final_strain:.4f}")
    """
    rng = np.random.default_rng(seed)
    config = RunConfig(
        nblock=nblock, nstep=nstep, r_cut=cutoff, dt=timestep, strain_rate=strain_rate
    )

    box_length = (n_atoms / density) ** (1 / 3)
    box = LeesEdwardsBox(box_length)
    positions = _create_fcc_positions(n_atoms, box_length)
    velocities = _random_velocities(n_atoms, temperature, rng)
    state = ShearFlowState.from_configuration(positions, velocities, box)

    if verbose:
        print(
            f"Sheared LJ fluid: N={n_atoms}, ρ*={density}, T*={temperature}, "
            f"strain rate={strain_rate}"
        )
        print(f"Running {config.total_steps} steps...", end=" ", flush=True)

    engine = ShearFlowEngine(state, box, config, LennardJonesForce())
    series = ObservableSeriesReporter(frequency=1)
    engine.add_reporter(series)
    final_state = engine.run()

    if verbose:
        print("done")

    stats = engine.averages.result()
    result = SimulationResult(
        times=series.times,
        strain=series.strains,
        observables=series.as_dict(),
        block_averages=stats["block_means"],
        run_averages=stats.get("averages", {}),
        run_errors=stats.get("errors", {}),
        final_state=final_state,
        final_observables=engine.observables,
        n_atoms=n_atoms,
        box_size=box_length,
        config=config,
    )

    if verbose:
        print("\nResults:")
        for name, (avg, err) in result.summary().items():
            print(f"  {name}: {avg:.4f} ± {err:.4f}")

    return result
