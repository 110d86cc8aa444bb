"""Unit tests for primitive actions and the transition model.

Run with: python -m tests.test_actions
"""

import random
import sys
import os
from collections import Counter

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blockplanner.errors import InvariantViolation, UnknownAction
from blockplanner.planning.actions import Action, TransitionModel, perform_action
from blockplanner.planning.goal_function import cost
from blockplanner.world_model import ObjectDefinition, SearchState


OBJECTS = {
    "a": ObjectDefinition("brick", "large", "green"),
    "b": ObjectDefinition("brick", "small", "white"),
    "c": ObjectDefinition("box", "large", "red"),
    "d": ObjectDefinition("ball", "small", "black"),
    "e": ObjectDefinition("table", "large", "blue"),
}


def tokens(actions):
    return [action.token for action in actions]


def test_action_tokens():
    assert tokens(Action) == ["l", "r", "p", "d"]
    assert Action.from_token("p") is Action.PICK_UP
    with pytest.raises(UnknownAction):
        Action.from_token("x")


def test_legal_actions_empty_gripper():
    """Moves and pick-up, in fixed order."""
    print("\n" + "=" * 60)
    print("TEST: Legal actions with empty gripper")
    print("=" * 60)

    model = TransitionModel(OBJECTS)

    state = SearchState(0, None, [["a", "b"], []])
    assert tokens(model.legal_actions(state)) == ["r", "p"]

    state = SearchState(1, None, [["a", "b"], []])
    assert tokens(model.legal_actions(state)) == ["l"]

    state = SearchState(1, None, [["a"], ["b"], ["c"]])
    assert tokens(model.legal_actions(state)) == ["l", "r", "p"]
    print("✓ Legal actions in order left, right, pick-up")


def test_put_down_on_floor_always_legal():
    model = TransitionModel(OBJECTS)
    state = SearchState(1, "a", [["b"], []])
    assert tokens(model.legal_actions(state)) == ["l", "d"]


def test_put_down_requires_support():
    """Dropping onto an object consults the support predicate."""
    print("\n" + "=" * 60)
    print("TEST: Put-down support check")
    print("=" * 60)

    model = TransitionModel(OBJECTS)

    # Large brick on a small brick
    assert tokens(model.legal_actions(SearchState(0, "a", [["b"], []]))) == ["r"]

    # Small brick on a large brick
    assert tokens(model.legal_actions(SearchState(0, "b", [["a"], []]))) == ["r", "d"]

    # Ball on a table, then into a box
    assert tokens(model.legal_actions(SearchState(0, "d", [["e"], ["c"]]))) == ["r"]
    assert tokens(model.legal_actions(SearchState(1, "d", [["e"], ["c"]]))) == ["l", "d"]
    print("✓ Support rules applied")


def test_custom_support_predicate():
    model = TransitionModel(OBJECTS, support=lambda above, below: False)
    assert tokens(model.legal_actions(SearchState(0, "b", [["a"], []]))) == ["r"]
    # Floor is unconditional even with a restrictive predicate
    assert tokens(model.legal_actions(SearchState(1, "b", [["a"], []]))) == ["l", "d"]


def test_no_pick_up_while_holding():
    model = TransitionModel(OBJECTS)
    state = SearchState(0, "b", [["c"]])
    assert tokens(model.legal_actions(state)) == ["d"]


def test_perform_action_results():
    """Each action has its documented effect."""
    state = SearchState(1, None, [["a"], ["b", "c"], []])

    assert perform_action(Action.MOVE_LEFT, state).arm == 0
    assert perform_action(Action.MOVE_RIGHT, state).arm == 2

    picked = perform_action(Action.PICK_UP, state)
    assert picked.holding == "c"
    assert picked.stacks == [["a"], ["b"], []]

    dropped = perform_action(Action.PUT_DOWN, SearchState(2, "c", [["a"], ["b"], []]))
    assert dropped.holding is None
    assert dropped.stacks == [["a"], ["b"], ["c"]]


def test_perform_action_does_not_mutate_input():
    """Copy-on-write: the input state is left untouched."""
    print("\n" + "=" * 60)
    print("TEST: Actions never mutate their input")
    print("=" * 60)

    state = SearchState(0, None, [["a", "b"], []])
    before = state.key()
    for action in (Action.PICK_UP, Action.MOVE_RIGHT):
        perform_action(action, state)
    assert state.key() == before

    held = SearchState(0, "b", [["a"], []])
    before = held.key()
    perform_action(Action.PUT_DOWN, held)
    assert held.key() == before
    print("✓ Input states unchanged")


def test_perform_action_needs_a_target():
    """Actions with nothing to act on raise instead of corrupting the state."""
    print("\n" + "=" * 60)
    print("TEST: Actions without a target")
    print("=" * 60)

    with pytest.raises(InvariantViolation):
        perform_action(Action.PUT_DOWN, SearchState(0, None, [["a"], []]))
    with pytest.raises(InvariantViolation):
        perform_action(Action.PICK_UP, SearchState(1, None, [["a"], []]))
    with pytest.raises(InvariantViolation):
        perform_action(Action.PICK_UP, SearchState(0, "b", [["a"], []]))
    with pytest.raises(InvariantViolation):
        perform_action(Action.MOVE_LEFT, SearchState(0, None, [["a"], []]))
    with pytest.raises(InvariantViolation):
        perform_action(Action.MOVE_RIGHT, SearchState(1, None, [["a"], []]))
    print("✓ Raised InvariantViolation")


def test_perform_unknown_action():
    with pytest.raises(UnknownAction):
        perform_action("x", SearchState(0, None, [["a"]]))


def test_pick_then_put_restores_column():
    """Pick-up followed by put-down at the same column is a no-op."""
    state = SearchState(0, None, [["a", "b"], ["c"]])
    restored = perform_action(Action.PUT_DOWN, perform_action(Action.PICK_UP, state))
    assert restored.stacks == state.stacks
    assert restored.holding is None
    assert restored.arm == state.arm


def test_neighbours_pairs():
    model = TransitionModel(OBJECTS)
    state = SearchState(0, None, [["a", "b"], []])
    pairs = model.neighbours(state)
    assert [action for action, _ in pairs] == [Action.MOVE_RIGHT, Action.PICK_UP]
    assert pairs[0][1].arm == 1
    assert pairs[1][1].holding == "b"
    assert cost(state, pairs[0][1]) == 1


def test_random_walk_preserves_objects():
    """Every object stays in exactly one place across long action sequences."""
    print("\n" + "=" * 60)
    print("TEST: Support invariant over a random walk")
    print("=" * 60)

    model = TransitionModel(OBJECTS)
    state = SearchState(0, None, [["a", "b"], ["e"], ["c", "d"], []])
    expected = Counter(state.all_objects())
    rng = random.Random(7)

    for _ in range(500):
        neighbours = model.neighbours(state)
        assert neighbours, "every state has at least one move"
        _, state = rng.choice(neighbours)
        state.check_invariant()
        assert Counter(state.all_objects()) == expected
        assert 0 <= state.arm < state.num_stacks
    print("✓ 500 random steps, no object lost or duplicated")


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
