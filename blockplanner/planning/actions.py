"""Primitive gripper actions and the transition model.

Actions are emitted in a fixed order (left, right, pick-up, put-down) so
identical inputs always produce identical search traces.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import InvariantViolation, UnknownAction
from ..world_model.objects import ObjectDefinition, can_support, object_definition_for
from ..world_model.state import SearchState


class Action(Enum):
    """Primitive actions, valued by their serialized token."""

    MOVE_LEFT = "l"
    MOVE_RIGHT = "r"
    PICK_UP = "p"
    PUT_DOWN = "d"

    @property
    def token(self) -> str:
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "Action":
        """Get action by token.

        Raises:
            UnknownAction: If the token names no action.
        """
        try:
            return cls(token)
        except ValueError:
            raise UnknownAction(token) from None


def perform_action(action: Action, state: SearchState) -> SearchState:
    """Apply an action to a clone of the state.

    Legality against the support rules is checked by TransitionModel. An
    action with nothing to act on (moving off the edge, picking from an empty
    column, putting down with an empty gripper) would corrupt the state.

    Raises:
        InvariantViolation: If the action has nothing to act on.
        UnknownAction: If the action is not an Action.
    """
    if not isinstance(action, Action):
        raise UnknownAction(action)

    new_state = state.clone()

    if action is Action.MOVE_LEFT:
        if state.arm <= 0:
            raise InvariantViolation("Cannot move left from the first column")
        new_state.arm = state.arm - 1
    elif action is Action.MOVE_RIGHT:
        if state.arm >= state.num_stacks - 1:
            raise InvariantViolation("Cannot move right from the last column")
        new_state.arm = state.arm + 1
    elif action is Action.PICK_UP:
        if state.holding is not None:
            raise InvariantViolation(f"Cannot pick up while holding {state.holding}")
        if not new_state.stacks[new_state.arm]:
            raise InvariantViolation(f"Nothing to pick up in column {state.arm}")
        new_state.holding = new_state.stacks[new_state.arm].pop()
    elif action is Action.PUT_DOWN:
        if state.holding is None:
            raise InvariantViolation("Nothing held to put down")
        new_state.stacks[new_state.arm].append(new_state.holding)
        new_state.holding = None

    return new_state


SupportPredicate = Callable[[ObjectDefinition, ObjectDefinition], bool]


class TransitionModel:
    """Legal-move generator for one plan computation.

    Holds the caller's object dictionary as read-only lookup context for
    support checks.
    """

    def __init__(
        self,
        objects: Dict[str, ObjectDefinition],
        support: Optional[SupportPredicate] = None,
    ):
        """Initialize transition model.

        Args:
            objects: Object name → definition (not copied, never mutated).
            support: Support predicate, defaults to the block-world rules.
        """
        self.objects = objects
        self.support = support or can_support

    def can_drop(self, holding: str, top: str) -> bool:
        """Check whether the held object may be put down on `top`."""
        above = object_definition_for(holding, self.objects)
        below = object_definition_for(top, self.objects)
        return self.support(above, below)

    def legal_actions(self, state: SearchState) -> List[Action]:
        """Legal actions in emission order."""
        actions = []

        if state.arm > 0:
            actions.append(Action.MOVE_LEFT)
        if state.arm < state.num_stacks - 1:
            actions.append(Action.MOVE_RIGHT)

        top = state.top()
        if state.holding is None:
            if top is not None:
                actions.append(Action.PICK_UP)
        elif top is None or self.can_drop(state.holding, top):
            # Floor support is unconditional
            actions.append(Action.PUT_DOWN)

        return actions

    def neighbours(self, state: SearchState) -> List[Tuple[Action, SearchState]]:
        """Successor (action, state) pairs of a state."""
        return [(action, perform_action(action, state)) for action in self.legal_actions(state)]
