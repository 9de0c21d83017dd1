"""Base classes for run statistics."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class Analyzer(ABC):
    """
    Abstract base class for statistics collected over a run.

    An analyzer summarises observables; it never reads or modifies the
    particle state.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in summaries."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Discard everything accumulated so far."""
        ...

    @abstractmethod
    def result(self) -> dict[str, Any]:
        """
        Collected statistics.

        Returns:
            Dictionary whose keys depend on the analyzer.
        """
        ...


class StreamingAnalyzer(Analyzer):
    """
    Analyzer fed one set of observables per step.

    Only running sums are kept, so memory use does not grow with the
    number of steps.

    Example:
        averages = BlockAverages(ObservableCalculator.names)
        averages.begin_block()
        for _ in range(nstep):
            averages.update(engine.step())
        averages.end_block()
    """

    _n_frames: int = 0

    @abstractmethod
    def update(self, observables: Mapping[str, float]) -> None:
        """
        Add the observables of one step.

        Args:
            observables: Values keyed by observable name.
        """
        ...

    @property
    def n_frames(self) -> int:
        """Number of steps added since the last reset."""
        return self._n_frames
