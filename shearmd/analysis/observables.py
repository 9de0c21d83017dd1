"""Instantaneous thermodynamic observables."""

from __future__ import annotations

import logging
import math
import sys
from typing import TYPE_CHECKING, TextIO

import numpy as np

if TYPE_CHECKING:
    from ..forcefields import ForceProvider, Interaction
    from ..system import LeesEdwardsBox, ShearFlowState

logger = logging.getLogger(__name__)

Observables = dict[str, float]

OBSERVABLE_NAMES = (
    "E/N cut&shifted",
    "P cut&shifted",
    "E/N full",
    "P full",
    "T kinetic",
    "T config",
)


class ObservableCalculator:
    """
    Computes the per-step observables of a sheared isokinetic run.

    With V the volume, rho = N/V, K = sum(v^2)/2 and T = 2K/(3N - 3):

    - E/N cut&shifted: (K + pot) / N
    - P cut&shifted:   rho T + vir / V
    - E/N full:        potential_lrc(rho, r_cut) + (K + cut) / N
    - P full:          pressure_lrc(rho, r_cut) + rho T + vir / V
    - T kinetic:       T
    - T config:        sum(f^2) / lap

    Velocities are taken to be peculiar velocities. Three degrees of freedom
    are removed for momentum conservation.

    Attributes:
        box: Simulation box.
        cutoff: Potential cutoff distance.
        force_provider: Source of the long-range correction functions.
    """

    names = OBSERVABLE_NAMES

    def __init__(
        self, box: LeesEdwardsBox, cutoff: float, force_provider: ForceProvider
    ) -> None:
        self.box = box
        self.cutoff = cutoff
        self.force_provider = force_provider

    def compute(self, state: ShearFlowState, total: Interaction) -> Observables:
        """
        Compute observables without modifying the state.

        Args:
            state: Current state; ``state.forces`` must match ``total``.
            total: Interaction totals for the current configuration.

        Returns:
            Observable values keyed by name, in reporting order.
        """
        n = state.n_atoms
        vol = self.box.volume
        rho = n / vol
        kin = state.kinetic_energy
        fsq = float(np.sum(state.forces**2))
        n_dof = 3 * n - 3
        tmp = 2.0 * kin / n_dof if n_dof > 0 else 0.0
        t_config = fsq / total.lap if total.lap != 0.0 else math.nan

        return {
            "E/N cut&shifted": (kin + total.pot) / n,
            "P cut&shifted": rho * tmp + total.vir / vol,
            "E/N full": self.force_provider.potential_lrc(rho, self.cutoff)
            + (kin + total.cut) / n,
            "P full": self.force_provider.pressure_lrc(rho, self.cutoff)
            + rho * tmp
            + total.vir / vol,
            "T kinetic": tmp,
            "T config": t_config,
        }

    @staticmethod
    def report(
        observables: Observables, label: str, file: TextIO | None = None
    ) -> None:
        """
        Write a labelled block of observable values.

        Args:
            observables: Values from ``compute``.
            label: Heading, e.g. "Initial values".
            file: Output stream (defaults to stdout).
        """
        out = file if file is not None else sys.stdout
        out.write(f"{label}\n")
        for name, value in observables.items():
            out.write(f"{name:<40}{value:15.6f}\n")
        out.flush()
        logger.info(
            "%s: %s",
            label,
            ", ".join(f"{name}={value:.6f}" for name, value in observables.items()),
        )
