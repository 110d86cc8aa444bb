"""World model module for blockplanner.

Provides world/search state representation, object support rules and goal
specification.
"""

from .objects import ObjectDefinition, FLOOR, can_support
from .state import WorldState, SearchState
from .goals import Relation, Literal, Interpretation, parse_goal, parse_literal

__all__ = [
    "ObjectDefinition",
    "FLOOR",
    "can_support",
    "WorldState",
    "SearchState",
    "Relation",
    "Literal",
    "Interpretation",
    "parse_goal",
    "parse_literal",
]
