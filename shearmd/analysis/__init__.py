"""Observables and statistics of a sheared run."""

from .averages import BlockAverages
from .base import Analyzer, StreamingAnalyzer
from .observables import OBSERVABLE_NAMES, ObservableCalculator, Observables

__all__ = [
    # Base classes
    "Analyzer",
    "StreamingAnalyzer",
    # Observables
    "OBSERVABLE_NAMES",
    "ObservableCalculator",
    "Observables",
    # Statistics
    "BlockAverages",
]
