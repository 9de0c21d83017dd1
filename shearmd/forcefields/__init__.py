"""Force provider implementations."""

from .base import ForceProvider, Interaction
from .lj import LennardJonesForce

__all__ = ["ForceProvider", "Interaction", "LennardJonesForce"]
