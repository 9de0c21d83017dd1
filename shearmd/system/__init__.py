"""System state and box management."""

from .box import LeesEdwardsBox
from .state import ShearFlowState

__all__ = ["LeesEdwardsBox", "ShearFlowState"]
