"""Cubic simulation box with Lees-Edwards sheared images."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass(frozen=True)
class LeesEdwardsBox:
    """
    Cubic periodic box whose images in y are displaced in x by the strain.

    Positions handled by this class are in box units (side length 1). The
    periodic copy of the box in row ``k`` along y is shifted by
    ``k * strain`` along x, so wrapping in y must also correct x.

    Attributes:
        length: Box side length in simulation units.
    """

    length: float

    def __post_init__(self) -> None:
        """Validate box length."""
        length = float(self.length)
        if not math.isfinite(length) or length <= 0.0:
            raise ValueError(f"Box length must be positive and finite, got {self.length}")
        object.__setattr__(self, "length", length)

    @property
    def volume(self) -> float:
        """Return box volume."""
        return self.length**3

    def density(self, n_atoms: int) -> float:
        """Return number density for ``n_atoms`` particles."""
        return n_atoms / self.volume

    def to_box_units(self, positions: ArrayLike) -> NDArray[np.floating]:
        """Convert physical positions to box units."""
        return np.asarray(positions, dtype=np.float64) / self.length

    def to_physical(self, positions: ArrayLike) -> NDArray[np.floating]:
        """Convert box-unit positions to physical units."""
        return np.asarray(positions, dtype=np.float64) * self.length

    def wrap_positions(
        self, positions: NDArray[np.floating], strain: float
    ) -> NDArray[np.floating]:
        """
        Wrap box-unit positions into the primary cell, in place.

        The image count n = floor(r + 0.5) is taken once. The x coordinate is
        corrected by n_y times the total strain, then every component is
        wrapped into [-0.5, 0.5). Exact +0.5 ties count as one image so x and
        y move together.

        Args:
            positions: Positions in box units, shape (N, 3). Modified in place.
            strain: Accumulated strain.

        Returns:
            The same array, wrapped.
        """
        positions[:, 0] -= np.floor(positions[:, 1] + 0.5) * strain
        positions -= np.floor(positions + 0.5)
        return positions

    def minimum_image(
        self, dr: NDArray[np.floating], strain: float
    ) -> NDArray[np.floating]:
        """
        Apply the sheared minimum image convention to box-unit separations.

        Args:
            dr: Separation vectors in box units, shape (..., 3).
            strain: Accumulated strain.

        Returns:
            New array of minimum-image separations in box units.
        """
        dr = np.array(dr, dtype=np.float64)
        dr[..., 0] -= np.rint(dr[..., 1]) * strain
        dr -= np.rint(dr)
        return dr
