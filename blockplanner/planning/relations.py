"""Spatial relation evaluation over search states.

Positions are tagged variants: an object is in a column at some height, held
by the gripper, or is the floor itself.
"""

from dataclasses import dataclass
from typing import List, Union

from ..errors import InvalidRelation, InvariantViolation
from ..world_model.goals import Literal, Relation
from ..world_model.objects import FLOOR
from ..world_model.state import SearchState


@dataclass(frozen=True)
class InColumn:
    """Object resting in a column; height 0 is directly on the floor."""

    column: int
    height: int


class Held:
    """Object currently in the gripper."""

    def __repr__(self) -> str:
        return "HELD"


class Floor:
    """The floor itself."""

    def __repr__(self) -> str:
        return "ON_FLOOR"


HELD = Held()
ON_FLOOR = Floor()

Position = Union[InColumn, Held, Floor]


def compute_object_position(state: SearchState, name: str) -> Position:
    """Locate an object in a state.

    Raises:
        InvariantViolation: If the object is nowhere in the state.
    """
    if name == FLOOR:
        return ON_FLOOR
    if state.holding == name:
        return HELD
    for column, stack in enumerate(state.stacks):
        if name in stack:
            return InColumn(column, stack.index(name))
    raise InvariantViolation(f"Object '{name}' is not in the world")


def height_difference(state: SearchState, above: str, below: str) -> int:
    """Number of levels `above` sits over `below`.

    Returns -1 when either object is held or they are in different columns.
    Negative within a column means `below` is physically higher. An object
    resting directly on the floor is one level above it.

    Raises:
        InvariantViolation: If `above` is the floor.
    """
    a = compute_object_position(state, above)
    b = compute_object_position(state, below)

    if a is HELD or b is HELD:
        return -1

    if a is ON_FLOOR:
        raise InvariantViolation("Floor cannot be above anything")

    if b is ON_FLOOR:
        return a.height + 1

    if a.column == b.column:
        return a.height - b.height

    return -1


def _relation_holds(state: SearchState, relation: Relation, args: List[str]) -> bool:
    if relation is Relation.HOLDING:
        return state.holding == args[0]

    if relation in (Relation.ONTOP, Relation.INSIDE):
        return height_difference(state, args[0], args[1]) == 1

    if relation is Relation.ABOVE:
        return height_difference(state, args[0], args[1]) > 0

    if relation is Relation.UNDER:
        # under(x, y) is above(y, x)
        return height_difference(state, args[1], args[0]) > 0

    raise InvalidRelation(relation.value)


def resolve_relation(literal: Literal) -> Relation:
    """Relation of a literal, validated for arity.

    Raises:
        InvalidRelation: If the relation is not implemented.
        InvariantViolation: If the literal has the wrong number of operands.
    """
    relation = Relation.lookup(literal.relation)
    if relation is None:
        raise InvalidRelation(literal.relation)
    arity = 1 if relation is Relation.HOLDING else 2
    if len(literal.args) != arity:
        raise InvariantViolation(
            f"Relation '{literal.relation}' takes {arity} operand(s), got {literal.args}"
        )
    return relation


def literal_holds(state: SearchState, literal: Literal) -> bool:
    """Polarity-adjusted truth of a literal."""
    result = _relation_holds(state, resolve_relation(literal), literal.args)
    return result if literal.polarity else not result


def clause_holds(state: SearchState, clause: List[Literal]) -> bool:
    """A conjunctive clause holds iff all its literals hold."""
    return all(literal_holds(state, literal) for literal in clause)


def goal_holds(state: SearchState, goal: List[List[Literal]]) -> bool:
    """A goal holds iff at least one of its clauses holds."""
    return any(clause_holds(state, clause) for clause in goal)
