#!/usr/bin/env python3
"""
Plan gripper actions for one or more goal interpretations.

Example:
    python scripts/plan_world.py --world data/worlds/small.yaml \
        --goal "ontop(b,floor)" --goal "holding(a)"
"""

import argparse
import json
import sys
import os
from pathlib import Path

import yaml

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blockplanner.config import RunConfig
from blockplanner.errors import NoPlanFound, PlannerError
from blockplanner.logging import PlanLogger
from blockplanner.planning import Planner, PlannerMetrics, plan_to_string
from blockplanner.world_model import Interpretation, WorldState, parse_goal


def load_world(path: str) -> WorldState:
    """Load a world from a YAML or JSON file."""
    text = Path(path).read_text()
    if path.endswith(".json"):
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    return WorldState.from_dict(data)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Plan gripper actions in a block world")
    parser.add_argument("--world", type=str, required=True, help="World file (YAML or JSON)")
    parser.add_argument("--goal", type=str, action="append", required=True,
                        help="Goal interpretation, e.g. 'ontop(a,b) & holding(c) | ontop(a,floor)'")
    parser.add_argument("--config", type=str, default=None, help="Run config YAML")
    parser.add_argument("--max-nodes", type=int, default=None, help="Node budget per interpretation")
    parser.add_argument("--log-dir", type=str, default=None, help="Write JSON plan traces here")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    config = RunConfig.from_yaml(args.config) if args.config else RunConfig()
    if args.max_nodes is not None:
        config.planner.max_nodes = args.max_nodes
    if args.verbose:
        config.planner.verbose = True
    if args.log_dir:
        config.logging.output_dir = args.log_dir
        config.logging.save_traces = True

    world = load_world(args.world)
    interpretations = [
        Interpretation(goal=parse_goal(text), description=text) for text in args.goal
    ]

    logger = None
    if config.logging.save_traces:
        logger = PlanLogger(config.logging.output_dir, config=config, save_states=config.logging.save_states)
    metrics = PlannerMetrics()
    planner = Planner(config.planner, metrics=metrics, logger=logger)

    try:
        results = planner.plan(interpretations, world)
    except NoPlanFound as e:
        print(str(e))
        return 1
    except PlannerError as e:
        print(str(e))
        return 2

    for result in results:
        print(f"{result.interpretation}: {plan_to_string(result)}")

    if config.planner.verbose:
        metrics.print_summary()
    return 0


if __name__ == "__main__":
    sys.exit(main())
