"""Default heuristic estimator.

Admissible lower bound on the number of primitive actions left before a goal
holds. Each unsatisfied literal is bounded on its own; a clause needs at
least its most expensive literal and the goal needs at least its cheapest
clause.
"""

from typing import Callable, List

from ..world_model.goals import Literal, Relation
from ..world_model.state import SearchState
from .relations import InColumn, HELD, compute_object_position, literal_holds


Heuristic = Callable[[SearchState], float]


def _objects_above(state: SearchState, name: str) -> int:
    """Objects stacked on top of `name`, or -1 if it is not in a column."""
    position = compute_object_position(state, name)
    if not isinstance(position, InColumn):
        return -1
    return len(state.stacks[position.column]) - position.height - 1


def literal_estimate(state: SearchState, literal: Literal) -> int:
    """Lower bound on actions needed to make a literal hold."""
    if literal_holds(state, literal):
        return 0

    if not literal.polarity:
        return 1

    relation = Relation.lookup(literal.relation)
    subject = literal.args[0]
    # Something else in the gripper must be put down first
    busy = 1 if state.holding is not None and state.holding != subject else 0

    if relation is Relation.HOLDING:
        k = _objects_above(state, subject)
        if k < 0:
            return 1
        # Clear k objects (pick + drop each), then pick the subject
        return busy + 2 * k + 1

    if relation in (Relation.ONTOP, Relation.INSIDE):
        if compute_object_position(state, subject) is HELD:
            return 1
        k = _objects_above(state, subject)
        if k < 0:
            return 1
        # The subject itself has to be moved: clear it, pick it, drop it
        return busy + 2 * k + 2

    return 1


def clause_estimate(state: SearchState, clause: List[Literal]) -> int:
    return max((literal_estimate(state, literal) for literal in clause), default=0)


def compute_heuristic_function(goal: List[List[Literal]]) -> Heuristic:
    """Build the heuristic for one interpretation's goal."""

    def heuristic(state: SearchState) -> float:
        if not goal:
            return 0
        return min(clause_estimate(state, clause) for clause in goal)

    return heuristic
