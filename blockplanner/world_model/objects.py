"""Physical object definitions and support rules.

The support predicate decides whether one object may rest on (or inside)
another. It is consulted by the transition model before every put-down onto
a non-empty column.
"""

from dataclasses import dataclass, asdict
from typing import Dict

from ..errors import InvariantViolation


FLOOR = "floor"


@dataclass(frozen=True)
class ObjectDefinition:
    """Physical description of a world object."""

    form: str  # brick, plank, ball, pyramid, box, table, floor
    size: str  # small, large
    color: str = ""

    def to_dict(self) -> dict:
        """Serialize for JSON."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "ObjectDefinition":
        """Create from dictionary."""
        return cls(form=d["form"], size=d["size"], color=d.get("color", ""))


FLOOR_DEFINITION = ObjectDefinition(form="floor", size="large")


def object_definition_for(name: str, objects: Dict[str, ObjectDefinition]) -> ObjectDefinition:
    """Look up the definition of a named object.

    Raises:
        InvariantViolation: If the name is not in the world dictionary.
    """
    if name == FLOOR:
        return FLOOR_DEFINITION
    try:
        return objects[name]
    except KeyError:
        raise InvariantViolation(f"Object '{name}' is not in the world dictionary") from None


def can_support(above: ObjectDefinition, below: ObjectDefinition) -> bool:
    """Check whether `below` can physically support `above`.

    Rules:
    - The floor supports everything.
    - Balls support nothing.
    - Small objects cannot support large objects.
    - Balls must be in boxes or on the floor.
    - Boxes cannot contain pyramids, planks or boxes of the same size.
    - Small boxes cannot rest on small bricks or small pyramids.
    - Large boxes cannot rest on large pyramids.
    """
    if below.form == "floor":
        return True

    if below.form == "ball":
        return False

    if below.size == "small" and above.size == "large":
        return False

    if above.form == "ball" and below.form != "box":
        return False

    if below.form == "box" and above.size == below.size:
        if above.form in ("pyramid", "plank", "box"):
            return False

    if above.form == "box":
        if above.size == "small" and below.size == "small" and below.form in ("brick", "pyramid"):
            return False
        if above.size == "large" and below.size == "large" and below.form == "pyramid":
            return False

    return True
