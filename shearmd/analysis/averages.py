"""Block averaging of per-step observables."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
from numpy.typing import NDArray

from .base import StreamingAnalyzer


class BlockAverages(StreamingAnalyzer):
    """
    Accumulates observables into block averages and run statistics.

    Every step adds one sample to the current block. At the end of a block
    its mean is stored; at the end of the run the mean of the block means is
    reported together with its standard error, estimated from the scatter of
    the block means:

        err = sqrt(var(block means) / (n_blocks - 1))

    The fluctuation (standard deviation of the individual samples over the
    whole run) is reported too.

    Attributes:
        names: Observable names, in reporting order.
    """

    def __init__(self, names: Iterable[str]) -> None:
        """
        Initialize block averager.

        Args:
            names: Observable names to accumulate.
        """
        self.names = tuple(names)
        self.reset()

    @property
    def name(self) -> str:
        """Analyzer name."""
        return "block_averages"

    def reset(self) -> None:
        """Reset all statistics."""
        self._n_frames = 0
        self._block_sum = np.zeros(len(self.names))
        self._block_count = 0
        self._run_sum = np.zeros(len(self.names))
        self._run_sum_sq = np.zeros(len(self.names))
        self._block_means: list[NDArray[np.floating]] = []

    def begin_block(self) -> None:
        """Start a new block, discarding any unfinished samples."""
        self._block_sum = np.zeros(len(self.names))
        self._block_count = 0

    def update(self, observables: Mapping[str, float]) -> None:
        """
        Add one step's observables to the current block.

        Args:
            observables: Values keyed by name; must contain every name.
        """
        values = np.array([observables[name] for name in self.names], dtype=np.float64)
        self._block_sum += values
        self._block_count += 1
        self._run_sum += values
        self._run_sum_sq += values**2
        self._n_frames += 1

    def end_block(self) -> dict[str, float]:
        """
        Close the current block.

        Returns:
            Block means keyed by name.

        Raises:
            RuntimeError: If no samples were added to the block.
        """
        if self._block_count == 0:
            raise RuntimeError("Cannot end a block with no samples")
        means = self._block_sum / self._block_count
        self._block_means.append(means)
        self.begin_block()
        return dict(zip(self.names, means.tolist()))

    @property
    def block_samples(self) -> int:
        """Number of samples in the current, unfinished block."""
        return self._block_count

    @property
    def n_blocks(self) -> int:
        """Number of completed blocks."""
        return len(self._block_means)

    def end_run(self) -> tuple[dict[str, float], dict[str, float], dict[str, float]]:
        """
        Compute run statistics from the completed blocks.

        Returns:
            Tuple of (run averages, standard errors, fluctuations), each
            keyed by name.

        Raises:
            RuntimeError: If no block was completed.
        """
        if not self._block_means:
            raise RuntimeError("Cannot end a run with no completed blocks")

        blocks = np.array(self._block_means)
        averages = blocks.mean(axis=0)
        n_blocks = len(blocks)
        if n_blocks > 1:
            variance = np.maximum(np.mean(blocks**2, axis=0) - averages**2, 0.0)
            errors = np.sqrt(variance / (n_blocks - 1))
        else:
            errors = np.zeros_like(averages)

        sample_mean = self._run_sum / self._n_frames
        fluct = np.sqrt(
            np.maximum(self._run_sum_sq / self._n_frames - sample_mean**2, 0.0)
        )

        return (
            dict(zip(self.names, averages.tolist())),
            dict(zip(self.names, errors.tolist())),
            dict(zip(self.names, fluct.tolist())),
        )

    def result(self) -> dict[str, Any]:
        """
        Get block history and run statistics.

        Returns:
            Dictionary with 'names', 'block_means' (n_blocks, n_names) and,
            if any block is complete, 'averages', 'errors' and
            'fluctuations'.
        """
        results: dict[str, Any] = {
            "names": self.names,
            "n_frames": self._n_frames,
            "n_blocks": self.n_blocks,
            "block_means": np.array(self._block_means).reshape(-1, len(self.names)),
        }
        if self._block_means:
            averages, errors, fluct = self.end_run()
            results["averages"] = averages
            results["errors"] = errors
            results["fluctuations"] = fluct
        return results
