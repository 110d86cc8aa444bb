"""Centralized configuration for the planner.

All configuration dataclasses for planning runs.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Union

import yaml


@dataclass
class PlannerConfig:
    """Configuration for the plan driver and its search."""

    # Search budget per interpretation
    max_nodes: int = 10000
    require_optimal: bool = True  # Shortest plans only

    # Print progress to stdout
    verbose: bool = False


@dataclass
class LoggingConfig:
    """Configuration for plan trace logging."""

    output_dir: str = "logs"
    save_traces: bool = False  # Write one JSON trace per request
    save_states: bool = True  # Include the replayed state sequence in traces


@dataclass
class RunConfig:
    """Top-level configuration for a planning run."""

    planner: PlannerConfig = field(default_factory=PlannerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "RunConfig":
        """Create from dictionary."""
        d = dict(d or {})
        planner = PlannerConfig(**d.pop("planner", {}) or {})
        logging = LoggingConfig(**d.pop("logging", {}) or {})
        if d:
            raise ValueError(f"Unknown config sections: {sorted(d)}")
        return cls(planner=planner, logging=logging)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "RunConfig":
        """Load from a YAML file."""
        with open(path, "r") as f:
            return cls.from_dict(yaml.safe_load(f) or {})
