"""Simulation engine and reporters."""

from .engine import ShearFlowEngine
from .reporters import (
    BlockAverageReporter,
    CallbackReporter,
    ConfigurationReporter,
    ObservableSeriesReporter,
    Reporter,
    ReporterGroup,
    StateReporter,
)

__all__ = [
    "ShearFlowEngine",
    "Reporter",
    "ReporterGroup",
    "StateReporter",
    "BlockAverageReporter",
    "ConfigurationReporter",
    "CallbackReporter",
    "ObservableSeriesReporter",
]
