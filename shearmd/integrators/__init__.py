"""Integrator and propagator implementations."""

from .base import Integrator, Propagator
from .propagators import (
    DriftPropagator,
    IsokineticForcePropagator,
    ShearRotationPropagator,
)
from .sllod import IsokineticSLLODIntegrator

__all__ = [
    # Base classes
    "Integrator",
    "Propagator",
    # Propagators
    "DriftPropagator",
    "ShearRotationPropagator",
    "IsokineticForcePropagator",
    # Integrators
    "IsokineticSLLODIntegrator",
]
