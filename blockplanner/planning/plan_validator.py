"""Plan validation and parsing utilities.

Replays action plans against a world state and catches illegal steps before
a plan is handed to an executor.
"""

from typing import Iterable, List, Optional, Tuple, Union

from ..errors import UnknownAction
from ..world_model.goals import Literal
from ..world_model.state import SearchState, WorldState
from .actions import Action, SupportPredicate, TransitionModel, perform_action
from .relations import goal_holds


def parse_plan_tokens(tokens: Union[str, Iterable[str]]) -> Tuple[Optional[List[Action]], Optional[str]]:
    """Parse action tokens into actions.

    Accepts a token list or a display string such as "p, r, d".

    Returns:
        (actions, error) tuple. If successful, error is None.
    """
    if isinstance(tokens, str):
        tokens = [token.strip() for token in tokens.split(",") if token.strip()]

    actions = []
    for i, token in enumerate(tokens):
        try:
            actions.append(Action.from_token(token))
        except UnknownAction:
            valid = [action.token for action in Action]
            return None, f"Step {i}: Unknown action '{token}'. Valid actions: {valid}"
    return actions, None


def validate_plan(
    actions: List[Action],
    max_plan_length: int = 10000,
) -> Tuple[bool, str]:
    """Structural checks on a plan.

    Checks:
    - Plan is a list of actions
    - Plan length is within bounds
    - No immediately undone moves (left then right, pick then drop)

    Returns:
        (valid, message) tuple
    """
    if not isinstance(actions, list):
        return False, f"Plan must be a list, got {type(actions).__name__}"

    if len(actions) > max_plan_length:
        return False, f"Plan too long: {len(actions)} steps (max {max_plan_length})"

    undo = {
        Action.MOVE_LEFT: Action.MOVE_RIGHT,
        Action.MOVE_RIGHT: Action.MOVE_LEFT,
        Action.PICK_UP: Action.PUT_DOWN,
        Action.PUT_DOWN: Action.PICK_UP,
    }
    for i, action in enumerate(actions):
        if not isinstance(action, Action):
            return False, f"Step {i}: Expected Action, got {type(action).__name__}"
        if i > 0 and undo[actions[i - 1]] is action:
            return False, f"Step {i}: '{action.token}' undoes the previous step"

    return True, "Plan valid"


def validate_plan_semantics(
    actions: List[Action],
    world: WorldState,
    goal: Optional[List[List[Literal]]] = None,
    support: Optional[SupportPredicate] = None,
) -> Tuple[bool, str]:
    """Replay a plan against a world state.

    Additional checks:
    - Every action is legal in the state it is applied to
    - The support invariant holds after every step
    - The final state satisfies the goal, if one is given

    Returns:
        (valid, message) tuple
    """
    transitions = TransitionModel(world.objects, support)
    state = SearchState.from_world(world)

    for i, action in enumerate(actions):
        legal = transitions.legal_actions(state)
        if action not in legal:
            return False, f"Step {i}: '{action.token}' not legal (legal: {[a.token for a in legal]})"
        state = perform_action(action, state)
        state.check_invariant()

    if goal is not None and not goal_holds(state, goal):
        return False, "Final state does not satisfy the goal"

    return True, "Plan semantics valid"


def replay_plan(actions: List[Action], world: WorldState) -> List[SearchState]:
    """States visited by a plan, start state first.

    Support rules are not checked here (see validate_plan_semantics).

    Raises:
        InvariantViolation: If a step has nothing to act on.
    """
    states = [SearchState.from_world(world)]
    for action in actions:
        states.append(perform_action(action, states[-1]))
    return states
