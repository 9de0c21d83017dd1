"""Reporter implementations for simulation output."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import numpy as np

from ..analysis.observables import ObservableCalculator
from ..io.config_file import CNF_PREFIX, OUTPUT_TAG, block_tag, write_configuration

if TYPE_CHECKING:
    from ..system import LeesEdwardsBox, ShearFlowState


class Reporter(ABC):
    """
    Abstract base class for simulation reporters.

    Reporters are the observable sink of a run: they receive per-step
    observables at their reporting frequency and are told when blocks and
    the run end. They never modify the state.
    """

    @abstractmethod
    def report(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        """
        Generate report for current step.

        Args:
            state: Current simulation state.
            observables: Observable values for this step.
        """
        ...

    @property
    @abstractmethod
    def frequency(self) -> int:
        """Return reporting frequency (every N steps)."""
        ...

    def should_report(self, step: int) -> bool:
        """Check if reporter should run at this step."""
        return step % self.frequency == 0

    def initialize(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        """Called once before the first step with the initial observables."""
        pass

    def end_block(
        self, block: int, state: ShearFlowState, averages: Mapping[str, float]
    ) -> None:
        """Called after each block with the block averages."""
        pass

    def finalize(
        self,
        state: ShearFlowState,
        observables: Mapping[str, float],
        run_statistics: tuple[Mapping[str, float], ...] | None = None,
    ) -> None:
        """Called after a successful run with the final observables."""
        pass


class ReporterGroup:
    """
    Collection of reporters with automatic frequency handling.
    """

    def __init__(self, reporters: list[Reporter] | None = None) -> None:
        """
        Initialize reporter group.

        Args:
            reporters: List of reporters to manage.
        """
        self._reporters: list[Reporter] = reporters if reporters else []

    def add(self, reporter: Reporter) -> None:
        """Add a reporter to the group."""
        self._reporters.append(reporter)

    def remove(self, reporter: Reporter) -> None:
        """Remove a reporter from the group."""
        self._reporters.remove(reporter)

    def __len__(self) -> int:
        return len(self._reporters)

    def initialize(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        """Initialize all reporters."""
        for reporter in self._reporters:
            reporter.initialize(state, observables)

    def report(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        """Run all reporters that should fire at this step."""
        for reporter in self._reporters:
            if reporter.should_report(state.step):
                reporter.report(state, observables)

    def end_block(
        self, block: int, state: ShearFlowState, averages: Mapping[str, float]
    ) -> None:
        """Notify all reporters of a completed block."""
        for reporter in self._reporters:
            reporter.end_block(block, state, averages)

    def finalize(
        self,
        state: ShearFlowState,
        observables: Mapping[str, float],
        run_statistics: tuple[Mapping[str, float], ...] | None = None,
    ) -> None:
        """Finalize all reporters."""
        for reporter in self._reporters:
            reporter.finalize(state, observables, run_statistics)


class StateReporter(Reporter):
    """
    Reporter that prints per-step observables to console or file.

    Outputs step, time, strain and every observable.
    """

    def __init__(
        self,
        frequency: int = 1000,
        file: TextIO | None = None,
        separator: str = "\t",
    ) -> None:
        """
        Initialize state reporter.

        Args:
            frequency: Reporting frequency (every N steps).
            file: Output file (defaults to stdout).
            separator: Field separator.
        """
        self._frequency = frequency
        self._file = file if file is not None else sys.stdout
        self._separator = separator
        self._header_written = False

    @property
    def frequency(self) -> int:
        return self._frequency

    def initialize(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        """Write header."""
        if not self._header_written:
            headers = ["Step", "Time", "Strain", *observables]
            self._file.write(self._separator.join(headers) + "\n")
            self._header_written = True

    def report(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        values = [
            f"{state.step}",
            f"{state.time:.4f}",
            f"{state.strain:.6f}",
            *(f"{value:.6f}" for value in observables.values()),
        ]
        self._file.write(self._separator.join(values) + "\n")
        self._file.flush()


class BlockAverageReporter(Reporter):
    """
    Reporter that prints a table of block averages and run statistics.

    Initial and final observables are printed as labelled blocks before and
    after the table.
    """

    def __init__(self, file: TextIO | None = None, width: int = 15) -> None:
        """
        Initialize block average reporter.

        Args:
            file: Output file (defaults to stdout).
            width: Column width.
        """
        self._file = file if file is not None else sys.stdout
        self._width = width
        self._names: tuple[str, ...] = ()

    @property
    def frequency(self) -> int:
        return 1

    def should_report(self, step: int) -> bool:
        return False

    def report(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        pass

    def _write_row(self, label: str, values: Mapping[str, float]) -> None:
        w = self._width
        cells = "".join(f"{values[name]:{w}.6f}" for name in self._names)
        self._file.write(f"{label:<{w}}{cells}\n")

    def initialize(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        self._names = tuple(observables)
        ObservableCalculator.report(observables, "Initial values", self._file)
        w = self._width
        header = "".join(f"{name:>{w}}" for name in self._names)
        self._file.write("\n" + f"{'Block':<{w}}" + header + "\n")
        self._file.write("-" * (w * (len(self._names) + 1)) + "\n")
        self._file.flush()

    def end_block(
        self, block: int, state: ShearFlowState, averages: Mapping[str, float]
    ) -> None:
        self._write_row(str(block), averages)
        self._file.flush()

    def finalize(
        self,
        state: ShearFlowState,
        observables: Mapping[str, float],
        run_statistics: tuple[Mapping[str, float], ...] | None = None,
    ) -> None:
        if run_statistics is not None:
            averages, errors, fluctuations = run_statistics
            self._file.write("-" * (self._width * (len(self._names) + 1)) + "\n")
            self._write_row("Run averages", averages)
            self._write_row("Run errors", errors)
            self._write_row("Run fluct", fluctuations)
            self._file.write("\n")
        ObservableCalculator.report(observables, "Final values", self._file)
        self._file.flush()


class ConfigurationReporter(Reporter):
    """
    Reporter that saves configuration snapshots.

    Writes ``cnf.NNN`` after every block and ``cnf.out`` after a successful
    run, in simulation units.
    """

    def __init__(
        self,
        box: LeesEdwardsBox,
        n_blocks: int,
        output_dir: str | Path = ".",
    ) -> None:
        """
        Initialize configuration reporter.

        Args:
            box: Simulation box, for unit conversion.
            n_blocks: Number of blocks in the run, for file naming.
            output_dir: Directory receiving the files.
        """
        self._box = box
        self._n_blocks = n_blocks
        self._output_dir = Path(output_dir)
        self._written: list[Path] = []

    @property
    def frequency(self) -> int:
        return 1

    def should_report(self, step: int) -> bool:
        return False

    def report(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        pass

    def end_block(
        self, block: int, state: ShearFlowState, averages: Mapping[str, float]
    ) -> None:
        path = self._output_dir / f"{CNF_PREFIX}{block_tag(block, self._n_blocks)}"
        self._written.append(write_configuration(path, state, self._box))

    def finalize(
        self,
        state: ShearFlowState,
        observables: Mapping[str, float],
        run_statistics: tuple[Mapping[str, float], ...] | None = None,
    ) -> None:
        path = self._output_dir / f"{CNF_PREFIX}{OUTPUT_TAG}"
        self._written.append(write_configuration(path, state, self._box))

    @property
    def written(self) -> list[Path]:
        """Paths written so far, in order."""
        return list(self._written)


class CallbackReporter(Reporter):
    """
    Reporter that calls a user-defined function.

    Allows arbitrary custom reporting logic.
    """

    def __init__(
        self,
        callback: Callable[[ShearFlowState, Mapping[str, float]], None],
        frequency: int = 1,
    ) -> None:
        """
        Initialize callback reporter.

        Args:
            callback: Function to call with (state, observables).
            frequency: Reporting frequency.
        """
        self._callback = callback
        self._frequency = frequency

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        """Call the callback function."""
        self._callback(state, observables)


class ObservableSeriesReporter(Reporter):
    """
    Reporter that records observable time series in memory.
    """

    def __init__(self, frequency: int = 1) -> None:
        """
        Initialize series reporter.

        Args:
            frequency: Reporting frequency.
        """
        self._frequency = frequency
        self._steps: list[int] = []
        self._times: list[float] = []
        self._strains: list[float] = []
        self._values: dict[str, list[float]] = {}

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, state: ShearFlowState, observables: Mapping[str, float]) -> None:
        """Record observables."""
        self._steps.append(state.step)
        self._times.append(state.time)
        self._strains.append(state.strain)
        for name, value in observables.items():
            self._values.setdefault(name, []).append(value)

    @property
    def n_frames(self) -> int:
        """Return number of stored frames."""
        return len(self._steps)

    @property
    def times(self) -> np.ndarray:
        """Return times array."""
        return np.array(self._times)

    @property
    def strains(self) -> np.ndarray:
        """Return strain array."""
        return np.array(self._strains)

    def series(self, name: str) -> np.ndarray:
        """Return the time series of one observable."""
        return np.array(self._values.get(name, []))

    def as_dict(self) -> dict[str, np.ndarray]:
        """Return every observable series keyed by name."""
        return {name: np.array(values) for name, values in self._values.items()}

    def clear(self) -> None:
        """Clear stored data."""
        self._steps.clear()
        self._times.clear()
        self._strains.clear()
        self._values.clear()
