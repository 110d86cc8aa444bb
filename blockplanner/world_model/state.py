"""Symbolic world state representation.

WorldState is the read-only snapshot handed to the planner by its caller.
SearchState is a point in the planner's search space: gripper column, held
object and per-column stacks. Successor states are always clones, so states
retained by the search engine never change underneath it.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .objects import ObjectDefinition
from ..errors import InvariantViolation


@dataclass
class WorldState:
    """World configuration supplied by the caller.

    Tracks:
    - arm: Column index of the gripper
    - holding: Currently held object (or None)
    - stacks: One list of object names per column, bottom to top
    - objects: Object name → physical definition, used for support checks
    """

    arm: int = 0
    holding: Optional[str] = None
    stacks: List[List[str]] = field(default_factory=list)
    objects: Dict[str, ObjectDefinition] = field(default_factory=dict)

    @property
    def num_stacks(self) -> int:
        """Number of columns in the world."""
        return len(self.stacks)

    def object_names(self) -> List[str]:
        """Names of all placed or held objects."""
        names = [name for stack in self.stacks for name in stack]
        if self.holding is not None:
            names.append(self.holding)
        return names

    def to_dict(self) -> dict:
        """Serialize for JSON/YAML."""
        return {
            "arm": self.arm,
            "holding": self.holding,
            "stacks": [list(stack) for stack in self.stacks],
            "objects": {name: obj.to_dict() for name, obj in self.objects.items()},
        }

    @classmethod
    def from_dict(cls, d: dict) -> "WorldState":
        """Create from the interchange layout.

        Example:
            {"arm": 0, "holding": None, "stacks": [["a", "b"], []],
             "objects": {"a": {"form": "brick", "size": "large", "color": "red"}}}
        """
        return cls(
            arm=int(d.get("arm", 0)),
            holding=d.get("holding"),
            stacks=[list(stack) for stack in d.get("stacks", [])],
            objects={
                name: ObjectDefinition.from_dict(obj)
                for name, obj in (d.get("objects") or {}).items()
            },
        )


@dataclass
class SearchState:
    """A point in the search space.

    Stacks are lists so actions can push/pop on a clone; no action ever
    mutates the state it was applied to.
    """

    arm: int
    holding: Optional[str]
    stacks: List[List[str]]

    @property
    def num_stacks(self) -> int:
        return len(self.stacks)

    @classmethod
    def from_world(cls, world: WorldState) -> "SearchState":
        """Build the start state of a plan computation."""
        state = cls(world.arm, world.holding, [list(stack) for stack in world.stacks])
        if not 0 <= state.arm < state.num_stacks:
            raise InvariantViolation(f"Arm position {state.arm} outside {state.num_stacks} columns")
        state.check_invariant()
        return state

    def clone(self) -> "SearchState":
        """Copy with independent stack lists."""
        return SearchState(self.arm, self.holding, [stack[:] for stack in self.stacks])

    def key(self) -> Tuple:
        """Hashable content key for visited-state bookkeeping."""
        return (self.arm, self.holding, tuple(tuple(stack) for stack in self.stacks))

    def top(self, column: Optional[int] = None) -> Optional[str]:
        """Top object of a column (the arm's column by default)."""
        stack = self.stacks[self.arm if column is None else column]
        return stack[-1] if stack else None

    def all_objects(self) -> List[str]:
        """Every object in the state, held object last."""
        names = [name for stack in self.stacks for name in stack]
        if self.holding is not None:
            names.append(self.holding)
        return names

    def check_invariant(self):
        """Every object is either held or in exactly one stack, never both."""
        for column, stack in enumerate(self.stacks):
            bad = [name for name in stack if not isinstance(name, str) or not name]
            if bad:
                raise InvariantViolation(f"Column {column} holds non-object entries: {bad}")
        if self.holding is not None and not isinstance(self.holding, str):
            raise InvariantViolation(f"Held entry is not an object name: {self.holding!r}")

        counts = Counter(self.all_objects())
        duplicated = sorted(name for name, n in counts.items() if n > 1)
        if duplicated:
            raise InvariantViolation(f"Objects placed more than once: {duplicated}")

    def to_dict(self) -> dict:
        """Serialize for trace logging."""
        return {
            "arm": self.arm,
            "holding": self.holding,
            "stacks": [list(stack) for stack in self.stacks],
        }
