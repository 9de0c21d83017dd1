"""Lennard-Jones force implementation under Lees-Edwards boundaries."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError
from .base import ForceProvider, Interaction

if TYPE_CHECKING:
    from ..system import LeesEdwardsBox, ShearFlowState


class LennardJonesForce(ForceProvider):
    """
    Lennard-Jones 12-6 potential in reduced units (sigma = epsilon = 1).

    V(r) = 4 * [r^-12 - r^-6]

    The cut-and-shifted potential drives the dynamics; the cut (not shifted)
    energy is returned alongside so that full thermodynamics can be
    recovered with the long-range corrections.

    Attributes:
        overlap_sr2: Threshold on 1/r^2 above which a pair is an overlap.
    """

    # 1/r^2 threshold, i.e. r < ~0.75 sigma
    OVERLAP_SR2 = 1.77

    def __init__(self, overlap_sr2: float = OVERLAP_SR2) -> None:
        """
        Initialize Lennard-Jones force.

        Args:
            overlap_sr2: Overlap threshold on 1/r^2.
        """
        self.overlap_sr2 = overlap_sr2

    def describe(self) -> list[str]:
        return [
            "Lennard-Jones potential",
            "Cut-and-shifted version for dynamics",
            "Cut (but not shifted) version also calculated",
            "Diameter, sigma = 1",
            "Well depth, epsilon = 1",
        ]

    def check_cutoff(self, box: LeesEdwardsBox, cutoff: float) -> None:
        """Require the cutoff to fit inside half the box."""
        if cutoff > 0.5 * box.length:
            raise ConfigurationError(
                f"Cutoff {cutoff} too large for box length {box.length}"
            )

    def compute(
        self, state: ShearFlowState, box: LeesEdwardsBox, cutoff: float
    ) -> tuple[NDArray[np.floating], Interaction]:
        """
        Compute Lennard-Jones forces and interaction totals.

        All pairs are considered; separations use the sheared minimum image
        convention with the current strain.

        Args:
            state: Current state.
            box: Simulation box.
            cutoff: Cutoff distance in simulation units.

        Returns:
            Tuple of (forces, Interaction). On overlap the forces are zero
            and only the overlap flag is meaningful.
        """
        n = state.n_atoms
        forces = np.zeros((n, 3), dtype=np.float64)
        if n < 2:
            return forces, Interaction()

        i_indices, j_indices = np.triu_indices(n, k=1)

        # Box units until the cutoff test
        dr = box.minimum_image(
            state.positions[i_indices] - state.positions[j_indices], state.strain
        )
        r_sq = np.sum(dr**2, axis=1)
        mask = r_sq < (cutoff / box.length) ** 2
        if not np.any(mask):
            return forces, Interaction()

        i_indices = i_indices[mask]
        j_indices = j_indices[mask]
        dr = dr[mask] * box.length
        r_sq = r_sq[mask] * box.length**2

        sr2 = 1.0 / r_sq
        if np.any(sr2 > self.overlap_sr2):
            return forces, Interaction(ovr=True)

        sr6 = sr2**3
        sr12 = sr6**2
        cut = sr12 - sr6
        vir = cut + sr12
        lap = (22.0 * sr12 - 5.0 * sr6) * sr2

        sr6_cut = 1.0 / cutoff**6
        pot_at_cutoff = sr6_cut**2 - sr6_cut
        pot = cut - pot_at_cutoff

        # Pair force on i due to j
        fij = dr * (vir * sr2)[:, np.newaxis]
        np.add.at(forces, i_indices, fij)
        np.add.at(forces, j_indices, -fij)
        forces *= 24.0

        total = Interaction(
            pot=4.0 * float(np.sum(pot)),
            cut=4.0 * float(np.sum(cut)),
            vir=24.0 / 3.0 * float(np.sum(vir)),
            lap=24.0 * 2.0 * float(np.sum(lap)),
            ovr=False,
        )
        return forces, total

    def potential_lrc(self, density: float, cutoff: float) -> float:
        """Energy per particle beyond the cutoff, assuming uniform density."""
        sr3 = 1.0 / cutoff**3
        return math.pi * ((8.0 / 9.0) * sr3**3 - (8.0 / 3.0) * sr3) * density

    def pressure_lrc(self, density: float, cutoff: float) -> float:
        """Pressure beyond the cutoff, assuming uniform density."""
        sr3 = 1.0 / cutoff**3
        return math.pi * ((32.0 / 9.0) * sr3**3 - (16.0 / 3.0) * sr3) * density**2
