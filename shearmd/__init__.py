"""
shearmd - Isokinetic SLLOD molecular dynamics under Lees-Edwards shear.

A fixed number of point particles is integrated at constant volume and
constant kinetic energy inside a continuously sheared periodic box, using
the exactly solvable, time-reversible splitting of Pan et al. (2005).

Quick Start:
    >>> from shearmd import simulate
    >>> result = simulate.lj_shear_flow(n_atoms=108, strain_rate=0.05)
    >>> print(f"Final strain: {result.final_strain:.4f}")
"""

__version__ = "0.1.0"

# High-level APIs
from . import plotting, simulate
from .config import RunConfig, load_run_config
from .engines import ShearFlowEngine
from .errors import (
    ConfigurationError,
    NumericalDegeneracyError,
    OverlapError,
    SimulationError,
)
from .forcefields import ForceProvider, Interaction, LennardJonesForce
from .integrators import IsokineticSLLODIntegrator

# Core components for advanced users
from .system import LeesEdwardsBox, ShearFlowState

__all__ = [
    "simulate",
    "plotting",
    "RunConfig",
    "load_run_config",
    "ShearFlowEngine",
    "IsokineticSLLODIntegrator",
    "LeesEdwardsBox",
    "ShearFlowState",
    "ForceProvider",
    "Interaction",
    "LennardJonesForce",
    "SimulationError",
    "ConfigurationError",
    "OverlapError",
    "NumericalDegeneracyError",
]
