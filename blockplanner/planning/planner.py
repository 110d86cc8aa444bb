"""Plan driver.

Turns each goal interpretation into a search problem over gripper actions,
runs the search strategy and returns the resulting action sequences.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..config import PlannerConfig
from ..errors import InvalidRelation, NoPlanFound, PlannerError, SearchExhausted
from ..logging.plan_logger import PlanLogger
from ..utils.timing import Timer
from ..world_model.goals import Interpretation, Literal
from ..world_model.state import SearchState, WorldState
from .actions import Action, SupportPredicate, TransitionModel
from .goal_function import compute_goal_function, cost, validate_goal
from .heuristics import Heuristic, compute_heuristic_function
from .planner_metrics import PlannerMetrics
from .search import AStarSearch, SearchResult, SearchStrategy


HeuristicFactory = Callable[[List[List[Literal]]], Heuristic]


@dataclass
class PlanResult:
    """An interpretation together with its resolved plan."""

    interpretation: Interpretation
    plan: List[Action] = field(default_factory=list)
    nodes_expanded: int = 0

    def tokens(self) -> List[str]:
        """Plan as action tokens (l, r, p, d)."""
        return [action.token for action in self.plan]

    def __str__(self) -> str:
        return plan_to_string(self)

    def to_dict(self) -> dict:
        """Serialize for logging."""
        return {
            "interpretation": self.interpretation.to_dict(),
            "plan": self.tokens(),
            "nodes_expanded": self.nodes_expanded,
        }


def plan_to_string(result: PlanResult) -> str:
    """Render a plan for display, e.g. "p, r, d"."""
    return ", ".join(result.tokens())


class Planner:
    """Plans gripper action sequences for goal interpretations.

    Usage:
        planner = Planner(PlannerConfig(max_nodes=5000))
        results = planner.plan(interpretations, world)
        for result in results:
            print(plan_to_string(result))
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        search: Optional[SearchStrategy] = None,
        heuristic_factory: Optional[HeuristicFactory] = None,
        support: Optional[SupportPredicate] = None,
        metrics: Optional[PlannerMetrics] = None,
        logger: Optional[PlanLogger] = None,
    ):
        """Initialize planner.

        Args:
            config: Search budget and verbosity.
            search: Search strategy, A* by default.
            heuristic_factory: goal -> heuristic, the admissible default if None.
            support: Object support predicate for put-down checks.
            metrics: Optional metrics tracker.
            logger: Optional request trace logger.
        """
        self.config = config or PlannerConfig()
        self.search = search or AStarSearch(verbose=self.config.verbose)
        self.heuristic_factory = heuristic_factory or compute_heuristic_function
        self.support = support
        self.metrics = metrics
        self.logger = logger
        self.timer = Timer()

    def plan(self, interpretations: List[Interpretation], world: WorldState) -> List[PlanResult]:
        """Plan every interpretation in order.

        Interpretations whose search is exhausted or whose goal names an
        unimplemented relation are left out of the result. Invariant and
        unknown-action errors abort the whole request.

        Raises:
            NoPlanFound: If no interpretation produced a plan.
            InvalidRelation: If no interpretation produced a plan and at least
                one of them named an unimplemented relation.
        """
        if self.metrics:
            self.metrics.record_request()
        if self.logger:
            self.logger.start_request(world, interpretations)

        results: List[PlanResult] = []
        failures: Dict[int, str] = {}
        invalid: Optional[InvalidRelation] = None

        try:
            for idx, interpretation in enumerate(interpretations):
                if self.metrics:
                    self.metrics.record_attempt()
                label = f"interpretation_{idx}"
                try:
                    with self.timer.measure(label):
                        found = self._search(interpretation.goal, world)
                except SearchExhausted as e:
                    elapsed = self.timer.last(label)
                    failures[idx] = str(e)
                    if self.metrics:
                        self.metrics.record_exhausted(str(interpretation), e.nodes_expanded, e.budget_reached, elapsed)
                    if self.logger:
                        self.logger.log_failure(idx, interpretation, str(e), elapsed)
                    continue
                except InvalidRelation as e:
                    failures[idx] = str(e)
                    invalid = invalid or e
                    if self.metrics:
                        self.metrics.record_invalid(str(interpretation), str(e))
                    if self.logger:
                        self.logger.log_failure(idx, interpretation, str(e))
                    continue

                result = PlanResult(
                    interpretation=interpretation,
                    plan=found.actions,
                    nodes_expanded=found.nodes_expanded,
                )
                results.append(result)

                elapsed = self.timer.last(label)
                if self.config.verbose:
                    print(f"This plan has {len(result.plan)} elements...")
                if self.metrics:
                    self.metrics.record_success(len(result.plan), found.nodes_expanded, elapsed)
                if self.logger:
                    states = None
                    if self.logger.save_states:
                        states = [step.state.to_dict() for step in found.path]
                    self.logger.log_interpretation(
                        idx,
                        interpretation,
                        result.tokens(),
                        nodes_expanded=found.nodes_expanded,
                        elapsed=elapsed,
                        states=states,
                    )
        except PlannerError as e:
            if self.metrics:
                self.metrics.record_request_failure()
            if self.logger:
                self.logger.end_request(success=False, failure_reason=str(e))
            raise

        if not results:
            error = invalid if invalid is not None else NoPlanFound(failures)
            if self.metrics:
                self.metrics.record_request_failure()
            if self.logger:
                self.logger.end_request(success=False, failure_reason=str(error))
            raise error

        if self.logger:
            self.logger.end_request(success=True)
        return results

    def plan_interpretation(self, goal: List[List[Literal]], world: WorldState) -> List[Action]:
        """Plan a single interpretation's goal.

        Raises:
            InvalidRelation: Before any expansion if the goal is malformed.
            SearchExhausted: If no plan exists within the node budget.
        """
        return self._search(goal, world).actions

    def _search(self, goal: List[List[Literal]], world: WorldState) -> SearchResult:
        is_goal = compute_goal_function(goal)
        start = SearchState.from_world(world)
        validate_goal(goal, start.all_objects())
        heuristic = self.heuristic_factory(goal)
        transitions = TransitionModel(world.objects, self.support)

        return self.search.search(
            transitions.neighbours,
            cost,
            heuristic,
            start,
            is_goal,
            require_optimal=self.config.require_optimal,
            max_nodes=self.config.max_nodes,
        )


def plan(
    interpretations: List[Interpretation],
    world: WorldState,
    config: Optional[PlannerConfig] = None,
) -> List[PlanResult]:
    """Plan with a default-configured Planner."""
    return Planner(config).plan(interpretations, world)
