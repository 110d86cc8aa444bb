"""Graph search abstraction and the default A* strategy.

The plan driver only depends on SearchStrategy, so other strategies (IDA*,
weighted A*) can be dropped in without touching transitions or goals.
"""

import heapq
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from ..errors import SearchExhausted


Neighbours = Callable[[Any], List[Tuple[Any, Any]]]
CostFunction = Callable[[Any, Any], float]
Heuristic = Callable[[Any], float]
GoalPredicate = Callable[[Any], bool]


class PathStep:
    """One step of a search path; the start node carries no action."""

    __slots__ = ("action", "state")

    def __init__(self, action, state):
        self.action = action
        self.state = state

    def __iter__(self):
        return iter((self.action, self.state))

    def __repr__(self) -> str:
        return f"PathStep(action={self.action!r}, state={self.state!r})"


@dataclass
class SearchResult:
    """Result of a successful search."""

    path: List[PathStep]
    cost: float
    nodes_expanded: int

    @property
    def actions(self) -> list:
        """Actions along the path, without the start node."""
        return [step.action for step in self.path[1:]]


class SearchStrategy(ABC):
    """Abstract base class for graph search procedures.

    All strategies take the same callbacks, return a SearchResult on success
    and raise SearchExhausted when no goal is reachable within budget.
    """

    @abstractmethod
    def search(
        self,
        neighbours: Neighbours,
        cost: CostFunction,
        heuristic: Heuristic,
        start,
        goal: GoalPredicate,
        require_optimal: bool = True,
        max_nodes: int = 10000,
    ) -> SearchResult:
        """Find a path from start to a goal state.

        Args:
            neighbours: state -> list of (action, successor) pairs.
            cost: (state, successor) -> transition cost.
            heuristic: state -> estimated remaining cost.
            start: Start state.
            goal: state -> whether the state is a goal.
            require_optimal: Whether the path must be cost-optimal.
            max_nodes: Node expansion budget.

        Returns:
            SearchResult whose path starts with the start node.

        Raises:
            SearchExhausted: If no goal was found.
        """
        pass


def _state_key(state) -> Hashable:
    key = getattr(state, "key", None)
    return key() if callable(key) else state


@dataclass(order=True)
class SearchNode:
    f_score: Tuple[float, float, int]
    state: Any = field(compare=False)
    action: Any = field(compare=False)
    parent: Optional["SearchNode"] = field(compare=False)
    g_score: float = field(compare=False, default=0)

    def path(self) -> List[PathStep]:
        steps = []
        node = self
        while node is not None:
            steps.append(PathStep(node.action, node.state))
            node = node.parent
        steps.reverse()
        return steps


class AStarSearch(SearchStrategy):
    """A* over (f, g, insertion order), so ties break deterministically."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def search(
        self,
        neighbours: Neighbours,
        cost: CostFunction,
        heuristic: Heuristic,
        start,
        goal: GoalPredicate,
        require_optimal: bool = True,
        max_nodes: int = 10000,
    ) -> SearchResult:
        counter = 0
        start_node = SearchNode(
            f_score=(heuristic(start), 0, counter),
            state=start,
            action=None,
            parent=None,
            g_score=0,
        )

        if not require_optimal and goal(start):
            return SearchResult(path=start_node.path(), cost=0, nodes_expanded=0)

        frontier = [start_node]
        best_g: Dict[Hashable, float] = {_state_key(start): 0}
        expanded = 0

        while frontier:
            curr = heapq.heappop(frontier)
            g = curr.g_score

            # Stale heap entry
            if best_g.get(_state_key(curr.state), float("inf")) < g:
                continue

            if require_optimal and goal(curr.state):
                if self.verbose:
                    print(f"Goal found after {expanded} expansions, cost {g}")
                return SearchResult(path=curr.path(), cost=g, nodes_expanded=expanded)

            if expanded >= max_nodes:
                if self.verbose:
                    print(f"Node budget of {max_nodes} reached")
                raise SearchExhausted(expanded, budget_reached=True)
            expanded += 1

            for action, next_state in neighbours(curr.state):
                ng = g + cost(curr.state, next_state)
                key = _state_key(next_state)
                if ng >= best_g.get(key, float("inf")):
                    continue
                best_g[key] = ng

                counter += 1
                child = SearchNode(
                    f_score=(ng + heuristic(next_state), ng, counter),
                    state=next_state,
                    action=action,
                    parent=curr,
                    g_score=ng,
                )
                if not require_optimal and goal(next_state):
                    return SearchResult(path=child.path(), cost=ng, nodes_expanded=expanded)
                heapq.heappush(frontier, child)

        if self.verbose:
            print(f"No solution after {expanded} expansions")
        raise SearchExhausted(expanded)
