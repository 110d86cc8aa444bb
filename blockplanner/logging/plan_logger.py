"""Plan request logging for debugging and offline analysis.

Logs complete request traces: the input world, every interpretation with its
outcome, and optionally the state sequence each plan passes through.
"""

import json
import time
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Optional, Any
import numpy as np

from ..world_model.state import WorldState
from ..world_model.goals import Interpretation
from ..config import RunConfig


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy scalars and arrays."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        return super().default(obj)


@dataclass
class PlanLog:
    """Complete record of one plan request."""

    request_idx: int
    timestamp: str

    config: Dict[str, Any] = field(default_factory=dict)
    world: Dict[str, Any] = field(default_factory=dict)
    n_interpretations: int = 0

    # One entry per interpretation, in input order
    interpretations: List[Dict[str, Any]] = field(default_factory=list)

    # Outcome
    success: bool = False
    failure_reason: Optional[str] = None
    total_time: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


class PlanLogger:
    """Logger for plan request traces.

    Usage:
        logger = PlanLogger("logs/run_001")
        logger.start_request(world, interpretations)
        logger.log_interpretation(0, interpretation, ["p", "r", "d"], nodes_expanded=12)
        logger.log_failure(1, interpretation, "Node budget reached after 10000 expansions")
        logger.end_request(success=True)
    """

    def __init__(
        self,
        output_dir: str,
        config: Optional[RunConfig] = None,
        save_states: bool = True,
    ):
        """Initialize logger.

        Args:
            output_dir: Directory to save request logs.
            config: Run configuration to log.
            save_states: Whether to record the state sequence of each plan.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.config = config
        self.save_states = save_states

        self.current_request: Optional[PlanLog] = None
        self.completed: List[PlanLog] = []
        self._request_count = 0
        self._request_start_time = 0.0

    def start_request(self, world: WorldState, interpretations: List[Interpretation]):
        """Start logging a new plan request."""
        self._request_start_time = time.time()
        self.current_request = PlanLog(
            request_idx=self._request_count,
            timestamp=datetime.now().isoformat(),
            config=self.config.to_dict() if self.config else {},
            world=world.to_dict(),
            n_interpretations=len(interpretations),
        )
        self._request_count += 1

    def log_interpretation(
        self,
        index: int,
        interpretation: Interpretation,
        plan: List[str],
        nodes_expanded: int = 0,
        elapsed: float = 0.0,
        states: Optional[List[Dict[str, Any]]] = None,
    ):
        """Log a successfully planned interpretation.

        Args:
            index: Position of the interpretation in the request.
            interpretation: The interpretation.
            plan: Action tokens.
            nodes_expanded: Search expansions used.
            elapsed: Search time in seconds.
            states: Optional state sequence along the plan.
        """
        if self.current_request is None:
            return

        entry = {
            "index": index,
            "goal": str(interpretation),
            "description": interpretation.description,
            "success": True,
            "plan": list(plan),
            "nodes_expanded": nodes_expanded,
            "elapsed": elapsed,
        }
        if self.save_states and states is not None:
            entry["states"] = states
        self.current_request.interpretations.append(entry)

    def log_failure(
        self,
        index: int,
        interpretation: Interpretation,
        reason: str,
        elapsed: float = 0.0,
    ):
        """Log an interpretation that produced no plan."""
        if self.current_request is None:
            return

        self.current_request.interpretations.append({
            "index": index,
            "goal": str(interpretation),
            "description": interpretation.description,
            "success": False,
            "error": reason,
            "elapsed": elapsed,
        })

    def end_request(
        self,
        success: bool,
        failure_reason: Optional[str] = None,
    ) -> str:
        """End request and save log.

        Returns:
            Path to saved log file.
        """
        if self.current_request is None:
            return ""

        self.current_request.success = success
        self.current_request.failure_reason = failure_reason
        self.current_request.total_time = time.time() - self._request_start_time

        filename = (
            f"plan_{self.current_request.request_idx:04d}_"
            f"{self.current_request.timestamp.replace(':', '-')}.json"
        )
        filepath = self.output_dir / filename
        with open(filepath, "w") as f:
            json.dump(self.current_request.to_dict(), f, indent=2, cls=NumpyEncoder)

        self.completed.append(self.current_request)
        self.current_request = None
        return str(filepath)


class RunSummary:
    """Summary of a full run (multiple requests)."""

    def __init__(self, output_dir: str, config: Optional[RunConfig] = None):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.config = config

        self.requests: List[Dict[str, Any]] = []
        self.start_time = time.time()

    def add_request(self, plan_log: PlanLog):
        """Add request result to summary."""
        self.requests.append({
            "request_idx": plan_log.request_idx,
            "success": plan_log.success,
            "failure_reason": plan_log.failure_reason,
            "total_time": plan_log.total_time,
            "n_interpretations": plan_log.n_interpretations,
            "n_plans": sum(1 for entry in plan_log.interpretations if entry["success"]),
        })

    def save(self) -> Dict[str, Any]:
        """Save run summary."""
        n_success = sum(1 for r in self.requests if r["success"])
        n_total = len(self.requests)
        times = np.array([r["total_time"] for r in self.requests], dtype=float)
        n_plans = np.array([r["n_plans"] for r in self.requests], dtype=int)

        summary = {
            "config": self.config.to_dict() if self.config else {},
            "timestamp": datetime.now().isoformat(),
            "total_requests": n_total,
            "successful_requests": n_success,
            "success_rate": n_success / n_total if n_total > 0 else 0.0,
            "total_run_time": time.time() - self.start_time,
            "mean_request_time": times.mean() if n_total > 0 else 0.0,
            "max_request_time": times.max() if n_total > 0 else 0.0,
            "total_plans": n_plans.sum(),
            "plans_per_request": n_plans,
            "requests": self.requests,
        }

        with open(self.output_dir / "run_summary.json", "w") as f:
            json.dump(summary, f, indent=2, cls=NumpyEncoder)

        return summary
