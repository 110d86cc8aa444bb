"""Planner metrics for tracking search performance.

Tracks outcome of every interpretation attempt:
- Success: A plan was found
- Exhausted: Search ran out of frontier or node budget
- Invalid: The goal named an unimplemented relation
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
import json

import numpy as np


@dataclass
class PlannerMetrics:
    """Track planner performance across requests."""

    # Overall counts
    total_requests: int = 0
    failed_requests: int = 0
    total_attempts: int = 0

    # Per-interpretation outcomes
    plans_found: int = 0
    search_exhausted: int = 0
    budget_reached: int = 0
    invalid_goals: int = 0

    # Raw samples for statistics
    plan_lengths: List[int] = field(default_factory=list)
    nodes_expanded: List[int] = field(default_factory=list)
    search_times: List[float] = field(default_factory=list)

    # First failure kept for debugging
    sample_failure: Optional[Dict[str, Any]] = None

    def record_request(self):
        """Record a new plan request."""
        self.total_requests += 1

    def record_request_failure(self):
        """Record a request that produced no plan or was aborted."""
        self.failed_requests += 1

    def record_attempt(self):
        """Record a new interpretation attempt."""
        self.total_attempts += 1

    def record_success(self, plan_length: int, nodes_expanded: int, elapsed: float = 0.0):
        """Record a found plan."""
        self.plans_found += 1
        self.plan_lengths.append(plan_length)
        self.nodes_expanded.append(nodes_expanded)
        self.search_times.append(elapsed)

    def record_exhausted(self, goal: str, nodes_expanded: int, budget_reached: bool, elapsed: float = 0.0):
        """Record a search that found no goal."""
        self.search_exhausted += 1
        if budget_reached:
            self.budget_reached += 1
        self.nodes_expanded.append(nodes_expanded)
        self.search_times.append(elapsed)
        if self.sample_failure is None:
            self.sample_failure = {
                "goal": goal,
                "nodes_expanded": nodes_expanded,
                "budget_reached": budget_reached,
            }

    def record_invalid(self, goal: str, error: str):
        """Record a goal rejected before search."""
        self.invalid_goals += 1
        if self.sample_failure is None:
            self.sample_failure = {"goal": goal, "error": error}

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics."""
        lengths = np.asarray(self.plan_lengths, dtype=float)
        expanded = np.asarray(self.nodes_expanded, dtype=float)
        times = np.asarray(self.search_times, dtype=float)
        return {
            "total_requests": self.total_requests,
            "total_attempts": self.total_attempts,
            "success_rate": self.plans_found / max(1, self.total_attempts),
            "request_failure_rate": self.failed_requests / max(1, self.total_requests),
            "exhausted": self.search_exhausted,
            "budget_reached": self.budget_reached,
            "invalid_goals": self.invalid_goals,
            "mean_plan_length": float(lengths.mean()) if lengths.size else 0.0,
            "max_plan_length": int(lengths.max()) if lengths.size else 0,
            "mean_nodes_expanded": float(expanded.mean()) if expanded.size else 0.0,
            "p95_nodes_expanded": float(np.percentile(expanded, 95)) if expanded.size else 0.0,
            "total_search_sec": float(times.sum()),
        }

    def print_summary(self):
        """Print human-readable summary."""
        s = self.summary()
        print("\n" + "=" * 60)
        print("PLANNER METRICS SUMMARY")
        print("=" * 60)
        print(f"Requests: {s['total_requests']} ({self.failed_requests} without any plan)")
        print(f"Success Rate: {s['success_rate']:.1%} ({self.plans_found}/{self.total_attempts})")
        print(f"Exhausted: {self.search_exhausted} ({self.budget_reached} hit node budget)")
        print(f"Invalid Goals: {self.invalid_goals}")
        print(f"Plan Length: mean {s['mean_plan_length']:.1f}, max {s['max_plan_length']}")
        print(f"Nodes Expanded: mean {s['mean_nodes_expanded']:.1f}, p95 {s['p95_nodes_expanded']:.1f}")

    def save(self, output_path: str):
        """Save metrics to JSON file."""
        output = {
            "summary": self.summary(),
            "sample_failure": self.sample_failure,
        }

        with open(output_path, "w") as f:
            json.dump(output, f, indent=2, default=str)
