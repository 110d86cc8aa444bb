"""Goal predicate and transition cost for the search."""

from typing import Callable, Iterable, List, Optional

from ..errors import InvariantViolation
from ..world_model.goals import Literal
from ..world_model.objects import FLOOR
from ..world_model.state import SearchState
from .relations import clause_holds, resolve_relation


GoalPredicate = Callable[[SearchState], bool]


def validate_goal(goal: List[List[Literal]], known_objects: Optional[Iterable[str]] = None):
    """Reject goals naming unimplemented relations or malformed literals.

    Args:
        goal: Disjunction of conjunctive clauses.
        known_objects: If given, every operand must be one of these or the floor.

    Raises:
        InvalidRelation: On the first unsupported relation.
        InvariantViolation: On a literal with the wrong operand count or an
            unknown object.
    """
    for clause in goal:
        for literal in clause:
            resolve_relation(literal)

    if known_objects is None:
        return
    known = set(known_objects)
    known.add(FLOOR)
    for clause in goal:
        for literal in clause:
            unknown = [arg for arg in literal.args if arg not in known]
            if unknown:
                raise InvariantViolation(f"Goal literal {literal} names unknown objects {unknown}")


def compute_goal_function(goal: List[List[Literal]]) -> GoalPredicate:
    """Build the goal test for one interpretation.

    The goal is validated up front, so a bad relation surfaces before any
    node is expanded.
    """
    validate_goal(goal)

    def is_goal(state: SearchState) -> bool:
        for clause in goal:
            if clause_holds(state, clause):
                return True
        return False

    return is_goal


def cost(a: SearchState, b: SearchState) -> int:
    """Every primitive action costs 1."""
    return 1
