"""Exception hierarchy for fatal simulation conditions.

Every error raised here ends the run: there is no retry or recovery path,
since a trajectory interrupted mid-step cannot be resumed meaningfully.
"""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for all fatal simulation errors."""


class ConfigurationError(SimulationError, ValueError):
    """Malformed or unreadable run parameters or input configuration."""


class OverlapError(SimulationError):
    """
    The force provider flagged overlapping particle cores.

    Attributes:
        stage: When the overlap was detected: "initial", "in-progress" or "final".
        step: Step counter of the state at detection.
    """

    STAGES = ("initial", "in-progress", "final")

    def __init__(self, stage: str, step: int = 0) -> None:
        if stage not in self.STAGES:
            raise ValueError(f"Unknown overlap stage {stage!r}")
        self.stage = stage
        self.step = step
        if stage == "in-progress":
            message = f"Overlap in configuration at step {step}"
        else:
            message = f"Overlap in {stage} configuration"
        super().__init__(message)


class NumericalDegeneracyError(SimulationError, ArithmeticError):
    """A propagator met a configuration its closed-form update cannot handle."""
