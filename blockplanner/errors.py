"""Planner error taxonomy.

NoPlanFound is the only expected outcome; everything else signals malformed
goals, corrupted states or an internal inconsistency.
"""

from typing import Dict, Optional


class PlannerError(Exception):
    """Base class for all planner errors."""

    name = "Planner.Error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.name}: {self.message}"


class NoPlanFound(PlannerError):
    """Every interpretation failed to reach its goal."""

    name = "Planner.NoPlanFound"

    def __init__(self, failures: Optional[Dict[int, str]] = None):
        self.failures = dict(failures or {})
        message = "Found no plans"
        if self.failures:
            reasons = "; ".join(f"#{idx}: {reason}" for idx, reason in sorted(self.failures.items()))
            message = f"{message} ({reasons})"
        super().__init__(message)


class InvalidRelation(PlannerError):
    """A goal literal names a relation the evaluator does not implement."""

    name = "Planner.InvalidRelation"

    def __init__(self, relation: str):
        self.relation = relation
        super().__init__(f"Unimplemented relation: {relation}")


class InvariantViolation(PlannerError):
    """A state or goal is malformed (e.g. the floor used as the upper operand)."""

    name = "Planner.InvariantViolation"


class UnknownAction(PlannerError):
    """An action label the transition applier does not recognise."""

    name = "Planner.UnknownAction"

    def __init__(self, action):
        self.action = action
        super().__init__(f"Unknown action: {action!r}")


class SearchExhausted(PlannerError):
    """The search ran out of frontier or node budget without reaching a goal."""

    name = "Planner.SearchExhausted"

    def __init__(self, nodes_expanded: int, budget_reached: bool = False):
        self.nodes_expanded = nodes_expanded
        self.budget_reached = budget_reached
        if budget_reached:
            message = f"Node budget reached after {nodes_expanded} expansions"
        else:
            message = f"Search space exhausted after {nodes_expanded} expansions"
        super().__init__(message)
