"""
Plain-text configuration files.

The format is:

    N
    box
    rx ry rz vx vy vz
    ...                  (N lines)

Positions are in simulation units (not box units). Files are named with a
``cnf.`` prefix: ``cnf.inp`` for input, ``cnf.NNN`` after block NNN and
``cnf.out`` at the end of a run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..system import LeesEdwardsBox, ShearFlowState

logger = logging.getLogger(__name__)

CNF_PREFIX = "cnf."
INPUT_TAG = "inp"
OUTPUT_TAG = "out"
SAVE_TAG = "sav"


def block_tag(block: int, n_blocks: int) -> str:
    """
    Return the file tag for the configuration saved after a block.

    Blocks are numbered with three digits while fewer than 1000 blocks are
    run; otherwise every block overwrites the same ``sav`` file.
    """
    if n_blocks < 1000:
        return f"{block:03d}"
    return SAVE_TAG


class ConfigurationReader:
    """
    Reader for configuration files.

    Example:
        with ConfigurationReader("cnf.inp") as reader:
            frame = reader.read()
    """

    def __init__(self, filename: str | Path) -> None:
        """
        Initialize reader.

        Args:
            filename: Input file path.
        """
        self.filename = Path(filename)
        self._file = None

    def open(self) -> None:
        """Open file for reading."""
        try:
            self._file = self.filename.open()
        except OSError as exc:
            raise ConfigurationError(
                f"Cannot open configuration file {self.filename}: {exc}"
            ) from exc

    def close(self) -> None:
        """Close file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> ConfigurationReader:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _parse_header(self) -> tuple[int, float]:
        try:
            n_atoms = int(self._file.readline().split()[0])
            box = float(self._file.readline().split()[0])
        except (IndexError, ValueError) as exc:
            raise ConfigurationError(
                f"Malformed header in configuration file {self.filename}"
            ) from exc
        if n_atoms < 1:
            raise ConfigurationError(
                f"Invalid particle count {n_atoms} in {self.filename}"
            )
        if not box > 0.0:
            raise ConfigurationError(f"Invalid box length {box} in {self.filename}")
        return n_atoms, box

    def read_header(self) -> dict[str, Any]:
        """
        Read only the particle count and box length.

        Returns:
            Dictionary with 'n_atoms' and 'box'.
        """
        if self._file is None:
            raise RuntimeError("File not open.")
        self._file.seek(0)
        n_atoms, box = self._parse_header()
        return {"n_atoms": n_atoms, "box": box}

    def read(self) -> dict[str, Any]:
        """
        Read the full configuration.

        Returns:
            Dictionary with 'n_atoms', 'box', 'positions' (N, 3) and
            'velocities' (N, 3), all in simulation units.

        Raises:
            ConfigurationError: If the file is truncated or malformed.
        """
        if self._file is None:
            raise RuntimeError("File not open.")
        self._file.seek(0)
        n_atoms, box = self._parse_header()

        data = np.zeros((n_atoms, 6), dtype=np.float64)
        for i in range(n_atoms):
            line = self._file.readline()
            parts = line.split()
            if len(parts) < 6:
                raise ConfigurationError(
                    f"Expected 6 values for atom {i + 1} in {self.filename}, "
                    f"got {len(parts)}"
                )
            try:
                data[i] = [float(x) for x in parts[:6]]
            except ValueError as exc:
                raise ConfigurationError(
                    f"Malformed values for atom {i + 1} in {self.filename}"
                ) from exc

        if not np.all(np.isfinite(data)):
            raise ConfigurationError(f"Non-finite values in {self.filename}")

        return {
            "n_atoms": n_atoms,
            "box": box,
            "positions": data[:, :3],
            "velocities": data[:, 3:],
        }


class ConfigurationWriter:
    """
    Writer for configuration files.

    Example:
        with ConfigurationWriter("cnf.out") as writer:
            writer.write(state, box)
    """

    def __init__(self, filename: str | Path, precision: int = 10) -> None:
        """
        Initialize writer.

        Args:
            filename: Output file path.
            precision: Decimal places for coordinates and velocities.
        """
        self.filename = Path(filename)
        self.precision = precision
        self._file = None

    def open(self) -> None:
        """Open file for writing."""
        self._file = self.filename.open("w")

    def close(self) -> None:
        """Close file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> ConfigurationWriter:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def write(self, state: ShearFlowState, box: LeesEdwardsBox) -> None:
        """
        Write the state in simulation units.

        Args:
            state: State to write; positions are converted from box units.
            box: Simulation box.
        """
        if self._file is None:
            raise RuntimeError("File not open. Use context manager or call open().")

        positions = state.physical_positions(box)
        self._file.write(f"{state.n_atoms:15d}\n")
        self._file.write(f"{box.length:15.8f}\n")

        width = self.precision + 5
        fmt = " ".join([f"{{:{width}.{self.precision}f}}"] * 6) + "\n"
        for r, v in zip(positions, state.velocities):
            self._file.write(fmt.format(*r, *v))


def read_configuration(filename: str | Path) -> dict[str, Any]:
    """Read a configuration file; see ConfigurationReader.read."""
    with ConfigurationReader(filename) as reader:
        return reader.read()


def write_configuration(
    filename: str | Path, state: ShearFlowState, box: LeesEdwardsBox
) -> Path:
    """
    Write a configuration file.

    Returns:
        Path of the written file.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    path = Path(filename)
    try:
        with ConfigurationWriter(path) as writer:
            writer.write(state, box)
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot write configuration file {path}: {exc}"
        ) from exc
    logger.info("Wrote configuration %s", path)
    return path
