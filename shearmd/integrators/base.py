"""Base interfaces for propagators and integrators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..forcefields import Interaction
    from ..system import ShearFlowState


class Propagator(ABC):
    """
    One stage of a symmetric operator-splitting scheme.

    A propagator advances part of the state over a time increment ``t``
    in place. Increments may be negative; propagators used in a reversible
    scheme undo themselves when applied with ``-t``.
    """

    @abstractmethod
    def propagate(self, state: ShearFlowState, t: float) -> None:
        """
        Advance the state in place.

        Args:
            state: State to modify.
            t: Time increment.
        """
        ...


class Integrator(ABC):
    """
    Abstract base class for time integration algorithms.

    Integrators compose propagators and force evaluations into one full
    step and advance the state in place.
    """

    @abstractmethod
    def step(self, state: ShearFlowState) -> Interaction:
        """
        Advance the system by one time step.

        Args:
            state: Current state, modified in place.

        Returns:
            Interaction totals from the force evaluation of this step.
        """
        ...

    @property
    @abstractmethod
    def timestep(self) -> float:
        """Return the integration timestep."""
        ...
