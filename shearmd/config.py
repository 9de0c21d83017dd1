"""
Run parameters.

The run configuration is a frozen record built once before the first step
and shared by the integrator, the propagators and the engine. It can be
loaded from a YAML file with either top-level keys or a ``run:`` section:

    run:
      nblock: 10
      nstep: 1000
      r_cut: 2.5
      dt: 0.005
      strain_rate: 0.01

Missing keys keep their defaults.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError


@dataclass(frozen=True)
class RunConfig:
    """
    Immutable run parameters.

    Attributes:
        nblock: Number of averaging blocks.
        nstep: Number of steps per block.
        r_cut: Potential cutoff distance (simulation units).
        dt: Integration timestep.
        strain_rate: Velocity gradient dv_x/dr_y.
    """

    nblock: int = 10
    nstep: int = 1000
    r_cut: float = 2.5
    dt: float = 0.005
    strain_rate: float = 0.01

    def __post_init__(self) -> None:
        """Validate parameter types and ranges."""
        for name in ("nblock", "nstep"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ConfigurationError(f"{name} must be positive, got {value}")

        for name in ("r_cut", "dt", "strain_rate"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, float(value))

        if self.r_cut <= 0.0:
            raise ConfigurationError(f"r_cut must be positive, got {self.r_cut}")
        if self.dt <= 0.0:
            raise ConfigurationError(f"dt must be positive, got {self.dt}")

    @property
    def total_steps(self) -> int:
        """Total number of integration steps in the run."""
        return self.nblock * self.nstep

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> RunConfig:
        """
        Build a configuration from a mapping, rejecting unknown keys.

        Args:
            mapping: Parameter names and values. A nested ``run`` mapping
                is used if present.

        Returns:
            New RunConfig.
        """
        if not isinstance(mapping, Mapping):
            raise ConfigurationError(
                f"Run parameters must be a mapping, got {type(mapping).__name__}"
            )
        if "run" in mapping and isinstance(mapping["run"], Mapping):
            mapping = mapping["run"]

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ConfigurationError(f"Unknown run parameters: {', '.join(unknown)}")

        return cls(**dict(mapping))

    def to_dict(self) -> dict[str, Any]:
        """Return the parameters as a plain dictionary."""
        return asdict(self)


def load_run_config(path: str | Path | None = None, **overrides: Any) -> RunConfig:
    """
    Load run parameters from a YAML file.

    Args:
        path: YAML file. If None, only defaults and overrides are used.
        **overrides: Parameter values taking precedence over the file.
            None values are ignored.

    Returns:
        Validated RunConfig.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or a
            parameter is unknown or invalid.
    """
    data: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except OSError as exc:
            raise ConfigurationError(f"Cannot read run parameters {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Error parsing run parameters {path}: {exc}") from exc

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, Mapping):
            raise ConfigurationError(f"Run parameters in {path} must be a mapping")
        if "run" in loaded and isinstance(loaded["run"], Mapping):
            loaded = loaded["run"]
        data.update(loaded)

    data.update({k: v for k, v in overrides.items() if v is not None})
    return RunConfig.from_mapping(data)
