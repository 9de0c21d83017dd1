"""Isokinetic SLLOD step driver."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import OverlapError
from .base import Integrator
from .propagators import (
    DriftPropagator,
    IsokineticForcePropagator,
    ShearRotationPropagator,
)

if TYPE_CHECKING:
    from ..config import RunConfig
    from ..forcefields import ForceProvider, Interaction
    from ..system import LeesEdwardsBox, ShearFlowState

logger = logging.getLogger(__name__)


class IsokineticSLLODIntegrator(Integrator):
    """
    SLLOD integrator with a Gaussian isokinetic thermostat.

    One step is the palindromic sequence

        A(dt/2) B1(dt/2) [forces] B2(dt) B1(dt/2) A(dt/2)

    which is time-reversible as a whole. Forces are evaluated exactly once
    per step, on the positions and strain produced by the first half of the
    sequence.

    Attributes:
        config: Run parameters (timestep, strain rate, cutoff).
        box: Simulation box.
        force_provider: Force evaluator.
    """

    def __init__(
        self,
        config: RunConfig,
        box: LeesEdwardsBox,
        force_provider: ForceProvider,
    ) -> None:
        """
        Initialize the integrator.

        Args:
            config: Run parameters.
            box: Simulation box.
            force_provider: Force evaluator.
        """
        self.config = config
        self.box = box
        self.force_provider = force_provider

        self.drift = DriftPropagator(box, config.strain_rate)
        self.rotation = ShearRotationPropagator(config.strain_rate)
        self.force_kick = IsokineticForcePropagator()

    @property
    def timestep(self) -> float:
        """Return the integration timestep."""
        return self.config.dt

    def compute_forces(
        self, state: ShearFlowState, stage: str = "in-progress"
    ) -> Interaction:
        """
        Evaluate forces for the current configuration and store them.

        Args:
            state: Current state; ``state.forces`` is overwritten.
            stage: Label used in the overlap diagnostic.

        Returns:
            Interaction totals.

        Raises:
            OverlapError: If the force provider reports an overlap.
        """
        forces, total = self.force_provider.compute(state, self.box, self.config.r_cut)
        if total.ovr:
            raise OverlapError(stage, step=state.step)
        state.forces = forces
        return total

    def step(self, state: ShearFlowState) -> Interaction:
        """
        Perform one isokinetic SLLOD step in place.

        Args:
            state: Current state.

        Returns:
            Interaction totals at the mid-step force evaluation.

        Raises:
            OverlapError: If the mid-step configuration overlaps. The state
                is left as it was after the first half-step.
            NumericalDegeneracyError: If a thermostat update is undefined.
        """
        dt = self.config.dt

        self.drift.propagate(state, 0.5 * dt)
        self.rotation.propagate(state, 0.5 * dt)

        total = self.compute_forces(state, "in-progress")

        self.force_kick.propagate(state, dt)
        self.rotation.propagate(state, 0.5 * dt)
        self.drift.propagate(state, 0.5 * dt)

        state.step += 1
        state.time += dt

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "step %d: strain=%.8g sum(v^2)=%.12g",
                state.step,
                state.strain,
                state.velocity_norm_sq,
            )
        return total
