"""Planning module.

Transition model, relation evaluation, goal/heuristic functions, the search
abstraction and the plan driver.
"""

from .actions import Action, TransitionModel, perform_action
from .relations import height_difference, literal_holds, clause_holds, goal_holds
from .goal_function import compute_goal_function, cost
from .heuristics import compute_heuristic_function
from .search import SearchStrategy, AStarSearch, SearchResult
from .planner import Planner, PlanResult, plan, plan_to_string
from .plan_validator import parse_plan_tokens, validate_plan, validate_plan_semantics
from .planner_metrics import PlannerMetrics

__all__ = [
    "Action",
    "TransitionModel",
    "perform_action",
    "height_difference",
    "literal_holds",
    "clause_holds",
    "goal_holds",
    "compute_goal_function",
    "cost",
    "compute_heuristic_function",
    "SearchStrategy",
    "AStarSearch",
    "SearchResult",
    "Planner",
    "PlanResult",
    "plan",
    "plan_to_string",
    "parse_plan_tokens",
    "validate_plan",
    "validate_plan_semantics",
    "PlannerMetrics",
]
