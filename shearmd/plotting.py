"""
Built-in plotting utilities for simulation results.

Example:
    >>> from shearmd import simulate, plotting
    >>> result = simulate.lj_shear_flow(n_atoms=108)
    >>> plotting.observables(result, show=False)
    >>> plotting.save("observables.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .simulate import SimulationResult

# Try to import matplotlib, but don't fail if not available
try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install shearmd[plot]"
        )


def observables(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (12, 9),
) -> None:
    """
    Plot every observable time series, one panel each.

    Run averages are drawn as dashed lines.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    names = list(result.observables)
    n_cols = 2
    n_rows = max(1, int(np.ceil(len(names) / n_cols)))
    fig, axes = plt.subplots(n_rows, n_cols, figsize=figsize, squeeze=False)

    for ax, name in zip(axes.flat, names):
        series = result.observables[name]
        ax.plot(result.times, series, "b-", alpha=0.7, lw=0.5)
        if name in result.run_averages:
            ax.axhline(
                y=result.run_averages[name],
                color="r",
                linestyle="--",
                lw=1.5,
                label=f"Mean = {result.run_averages[name]:.4f}",
            )
            ax.legend()
        ax.set_xlabel("Time (τ)")
        ax.set_ylabel(name)
        ax.grid(True, alpha=0.3)

    for ax in list(axes.flat)[len(names) :]:
        ax.set_visible(False)

    plt.tight_layout()
    if show:
        plt.show()


def block_averages(
    result: SimulationResult,
    name: str = "P full",
    show: bool = True,
    figsize: tuple[float, float] = (8, 5),
) -> None:
    """
    Plot the block averages of one observable with the run average and error.

    Args:
        result: SimulationResult from a simulation.
        name: Observable to plot.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    names = list(result.observables)
    if name not in names or len(result.block_averages) == 0:
        raise ValueError(f"No block averages for observable {name!r}")

    column = result.block_averages[:, names.index(name)]
    blocks = np.arange(1, len(column) + 1)

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(blocks, column, "bo-", lw=1)
    avg = result.run_averages.get(name)
    if avg is not None:
        err = result.run_errors.get(name, 0.0)
        ax.axhline(y=avg, color="r", linestyle="--", label=f"{avg:.4f} ± {err:.4f}")
        ax.fill_between(blocks, avg - err, avg + err, color="r", alpha=0.2)
        ax.legend()
    ax.set_xlabel("Block")
    ax.set_ylabel(name)
    ax.set_title(f"Block averages: {name}")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def strain(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (8, 4),
) -> None:
    """
    Plot accumulated strain against time.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(result.times, result.strain, "k-", lw=1.5)
    ax.set_xlabel("Time (τ)")
    ax.set_ylabel("Strain")
    ax.set_title("Accumulated strain")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure to a file.

    Args:
        filename: Output filename (e.g., "plot.png", "plot.pdf").
        dpi: Resolution in dots per inch.
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")


def show() -> None:
    """Display all pending plots."""
    _check_matplotlib()
    plt.show()
