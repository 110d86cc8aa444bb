"""Goal representation.

A goal is a disjunction of conjunctive clauses over signed literals, as
produced by the command interpreter. One Interpretation carries one goal.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Relation(Enum):
    """Relations the planner knows how to evaluate."""

    HOLDING = "holding"  # Gripper holds x
    ONTOP = "ontop"      # x directly on y
    INSIDE = "inside"    # x directly in y (same test as ONTOP)
    ABOVE = "above"      # x somewhere above y in the same column
    UNDER = "under"      # x somewhere below y in the same column

    @classmethod
    def lookup(cls, name: str) -> Optional["Relation"]:
        """Get relation by name, or None if unsupported."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass
class Literal:
    """Signed relation over object names.

    The relation is kept as the raw interpreter string so unsupported
    relations survive parsing and are reported by the evaluator.
    """

    relation: str
    args: List[str]
    polarity: bool = True

    def __str__(self) -> str:
        sign = "" if self.polarity else "-"
        return f"{sign}{self.relation}({','.join(self.args)})"

    def to_dict(self) -> dict:
        """Serialize in interpreter format."""
        return {"pol": self.polarity, "rel": self.relation, "args": list(self.args)}

    @classmethod
    def from_dict(cls, d: dict) -> "Literal":
        """Create from interpreter format ({"pol", "rel", "args"})."""
        return cls(
            relation=d["rel"],
            args=list(d.get("args", [])),
            polarity=bool(d.get("pol", True)),
        )

    @classmethod
    def holding(cls, obj: str, polarity: bool = True) -> "Literal":
        """Create a holding(obj) literal."""
        return cls(Relation.HOLDING.value, [obj], polarity)

    @classmethod
    def ontop(cls, obj: str, below: str, polarity: bool = True) -> "Literal":
        """Create an ontop(obj, below) literal."""
        return cls(Relation.ONTOP.value, [obj, below], polarity)


@dataclass
class Interpretation:
    """One candidate goal produced by the command interpreter."""

    goal: List[List[Literal]] = field(default_factory=list)
    description: str = ""

    def __str__(self) -> str:
        return goal_to_string(self.goal)

    def to_dict(self) -> dict:
        """Serialize for logging."""
        return {
            "input": self.description,
            "intp": [[lit.to_dict() for lit in clause] for clause in self.goal],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Interpretation":
        """Create from interpreter result format ({"intp": [[...]], "input": ...})."""
        return cls(
            goal=[[Literal.from_dict(lit) for lit in clause] for clause in d.get("intp", [])],
            description=d.get("input", ""),
        )


_LITERAL_PATTERN = re.compile(r"^\s*(-?)\s*([A-Za-z_]\w*)\s*\(([^()]*)\)\s*$")


def parse_literal(text: str) -> Literal:
    """Parse a literal like "ontop(b,floor)" or "-holding(a)".

    Raises:
        ValueError: If the text is not a literal.
    """
    match = _LITERAL_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Could not parse literal: {text!r}")
    sign, relation, raw_args = match.groups()
    args = [arg.strip() for arg in raw_args.split(",") if arg.strip()]
    return Literal(relation=relation, args=args, polarity=(sign != "-"))


def parse_goal(text: str) -> List[List[Literal]]:
    """Parse a goal in text syntax.

    "|" separates conjunctive clauses and "&" separates literals, e.g.
    "ontop(a,b) & holding(c) | ontop(a,floor)".
    """
    if not text or not text.strip():
        raise ValueError("Empty goal")
    return [
        [parse_literal(part) for part in clause.split("&")]
        for clause in text.split("|")
    ]


def goal_to_string(goal: List[List[Literal]]) -> str:
    """Render a goal back into text syntax."""
    return " | ".join(" & ".join(str(lit) for lit in clause) for clause in goal)
