"""
Propagators of the isokinetic SLLOD splitting.

Each propagator is the exact solution of one piece of the SLLOD equations of
motion with a Gaussian isokinetic thermostat, so the composed step is
time-reversible and conserves the total kinetic energy to rounding error.

Reference:
    Pan, Ely, McCabe and Isbister, J. Chem. Phys. 122, 094114 (2005).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from ..errors import NumericalDegeneracyError
from .base import Propagator

if TYPE_CHECKING:
    from ..system import LeesEdwardsBox, ShearFlowState


def _velocity_norm_sq(state: ShearFlowState, stage: str) -> float:
    """Return sum of squared velocities, failing fast if it vanishes."""
    norm_sq = float(np.sum(state.velocities**2))
    if not norm_sq > 0.0:
        raise NumericalDegeneracyError(
            f"{stage}: total kinetic energy is zero, isokinetic update undefined"
        )
    return norm_sq


class DriftPropagator(Propagator):
    """
    Boundary/drift propagator (A).

    Algorithm, for increment t and shear increment x = t * strain_rate:
        r_x += x * r_y                      # streaming shift of the image
        r += t * v / box                    # free drift, box units
        strain += x
        r_x -= floor(r_y + 1/2) * strain    # sheared image correction
        r -= floor(r + 1/2)                 # ordinary wrap

    Attributes:
        box: Simulation box.
        strain_rate: Velocity gradient dv_x/dr_y.
    """

    def __init__(self, box: LeesEdwardsBox, strain_rate: float) -> None:
        """
        Initialize drift propagator.

        Args:
            box: Simulation box.
            strain_rate: Velocity gradient dv_x/dr_y.
        """
        self.box = box
        self.strain_rate = strain_rate

    def propagate(self, state: ShearFlowState, t: float) -> None:
        x = t * self.strain_rate
        r = state.positions

        r[:, 0] += x * r[:, 1]
        r += t * state.velocities / self.box.length
        state.strain += x

        self.box.wrap_positions(r, state.strain)


class ShearRotationPropagator(Propagator):
    """
    Thermostat rotation propagator (B1).

    Applies the SLLOD shear kick v_x -= x * v_y and rescales every velocity
    by the factor that restores sum(v^2) exactly:

        C1 = x * sum(v_x v_y) / sum(v^2)
        C2 = x^2 * sum(v_y^2) / sum(v^2)
        v /= sqrt(1 - 2 C1 + C2)

    Attributes:
        strain_rate: Velocity gradient dv_x/dr_y.
    """

    def __init__(self, strain_rate: float) -> None:
        """
        Initialize rotation propagator.

        Args:
            strain_rate: Velocity gradient dv_x/dr_y.
        """
        self.strain_rate = strain_rate

    def propagate(self, state: ShearFlowState, t: float) -> None:
        v = state.velocities
        norm_sq = _velocity_norm_sq(state, "B1 propagator")

        x = t * self.strain_rate
        c1 = x * float(np.sum(v[:, 0] * v[:, 1])) / norm_sq
        c2 = x**2 * float(np.sum(v[:, 1] ** 2)) / norm_sq

        v[:, 0] -= x * v[:, 1]
        v /= math.sqrt(1.0 - 2.0 * c1 + c2)


class IsokineticForcePropagator(Propagator):
    """
    Thermostat force propagator (B2).

    Solves dv/dt = f - zeta(t) v in closed form for fixed forces f, where
    zeta is the Gaussian multiplier keeping sum(v^2) constant:

        alpha = sum(f.v) / sum(v^2)
        beta = sqrt(sum(f^2) / sum(v^2))
        h = (alpha + beta) / (alpha - beta)
        e = exp(-beta t)
        v <- (1 - h) / (e - h/e) * (v + (1 + h - e - h/e) / ((1 - h) beta) * f)

    Forces are read from ``state.forces`` and must belong to the current
    positions.
    """

    def propagate(self, state: ShearFlowState, t: float) -> None:
        v = state.velocities
        f = state.forces
        norm_sq = _velocity_norm_sq(state, "B2 propagator")

        force_sq = float(np.sum(f**2))
        if force_sq == 0.0:
            # beta = 0 limit of the closed form is the identity
            return

        alpha = float(np.sum(f * v)) / norm_sq
        beta = math.sqrt(force_sq / norm_sq)
        if alpha == beta:
            raise NumericalDegeneracyError(
                "B2 propagator: forces parallel to velocities (alpha == beta)"
            )

        h = (alpha + beta) / (alpha - beta)
        try:
            e = math.exp(-beta * t)
            dt_factor = (1.0 + h - e - h / e) / ((1.0 - h) * beta)
            prefactor = (1.0 - h) / (e - h / e)
        except (OverflowError, ZeroDivisionError) as exc:
            raise NumericalDegeneracyError(
                f"B2 propagator: {exc} (alpha={alpha}, beta={beta}, t={t})"
            ) from exc

        if not (math.isfinite(dt_factor) and math.isfinite(prefactor)):
            raise NumericalDegeneracyError(
                f"B2 propagator: non-finite coefficients "
                f"(alpha={alpha}, beta={beta}, t={t})"
            )

        v += dt_factor * f
        v *= prefactor
