"""Base interface for force providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..system import LeesEdwardsBox, ShearFlowState


@dataclass(frozen=True)
class Interaction:
    """
    Aggregate interaction quantities for one configuration.

    Instances add component-wise, so pair or provider contributions can be
    summed; the overlap flag combines with logical OR.

    Attributes:
        pot: Cut-and-shifted potential energy.
        cut: Cut (but not shifted) potential energy.
        vir: Virial.
        lap: Laplacian of the potential, summed over particles.
        ovr: True if any pair overlaps beyond what the model tolerates.
    """

    pot: float = 0.0
    cut: float = 0.0
    vir: float = 0.0
    lap: float = 0.0
    ovr: bool = False

    def __add__(self, other: Interaction) -> Interaction:
        if not isinstance(other, Interaction):
            return NotImplemented
        return Interaction(
            pot=self.pot + other.pot,
            cut=self.cut + other.cut,
            vir=self.vir + other.vir,
            lap=self.lap + other.lap,
            ovr=self.ovr or other.ovr,
        )


class ForceProvider(ABC):
    """
    Abstract base class for force evaluation.

    The integrator only relies on this contract; the functional form of the
    potential, cutoff handling and long-range corrections are up to the
    implementation. ``compute`` must be a deterministic function of the
    stored positions, the box, the cutoff and the strain, and must not
    modify the state.
    """

    @abstractmethod
    def compute(
        self, state: ShearFlowState, box: LeesEdwardsBox, cutoff: float
    ) -> tuple[NDArray[np.floating], Interaction]:
        """
        Compute forces and interaction totals.

        Args:
            state: Current state; positions in box units, current strain.
            box: Simulation box.
            cutoff: Potential cutoff distance in simulation units.

        Returns:
            Tuple of (forces array of shape (N, 3), Interaction).
        """
        ...

    def potential_lrc(self, density: float, cutoff: float) -> float:
        """Long-range correction to the energy per particle."""
        return 0.0

    def pressure_lrc(self, density: float, cutoff: float) -> float:
        """Long-range correction to the pressure."""
        return 0.0

    def check_cutoff(self, box: LeesEdwardsBox, cutoff: float) -> None:
        """Validate the cutoff against the box (no-op by default)."""

    def describe(self) -> list[str]:
        """Lines describing the model, logged at startup."""
        return [type(self).__name__]
