"""Tests for run configuration, metrics, plan trace logging and the CLI.

Run with: python -m tests.test_config_and_logging
"""

import json
import sys
import os

import pytest
import yaml

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)
sys.path.insert(0, os.path.join(ROOT, "scripts"))

from blockplanner.config import LoggingConfig, PlannerConfig, RunConfig
from blockplanner.errors import NoPlanFound
from blockplanner.logging import PlanLogger, RunSummary
from blockplanner.planning import Planner, PlannerMetrics
from blockplanner.world_model import Interpretation, ObjectDefinition, WorldState, parse_goal

import plan_world


SMALL_WORLD = os.path.join(ROOT, "data", "worlds", "small.yaml")


def make_world() -> WorldState:
    return WorldState(
        arm=0,
        holding=None,
        stacks=[["a", "b"], []],
        objects={
            "a": ObjectDefinition("brick", "large", "green"),
            "b": ObjectDefinition("brick", "large", "red"),
        },
    )


def interpretation(text: str) -> Interpretation:
    return Interpretation(goal=parse_goal(text), description=text)


# ============================================================
# Config
# ============================================================

def test_config_defaults():
    config = RunConfig()
    assert config.planner.max_nodes == 10000
    assert config.planner.require_optimal is True
    assert config.logging.save_traces is False


def test_config_round_trip():
    config = RunConfig(planner=PlannerConfig(max_nodes=50, verbose=True), logging=LoggingConfig(output_dir="out"))
    assert RunConfig.from_dict(config.to_dict()) == config


def test_config_from_yaml(tmp_path):
    """Test loading a YAML run config."""
    print("\n" + "=" * 60)
    print("TEST: RunConfig.from_yaml")
    print("=" * 60)

    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"planner": {"max_nodes": 123}, "logging": {"save_traces": True}}))

    config = RunConfig.from_yaml(path)
    assert config.planner.max_nodes == 123
    assert config.planner.require_optimal is True
    assert config.logging.save_traces is True
    print("✓ Config loaded")


def test_shipped_config_loads():
    config = RunConfig.from_yaml(os.path.join(ROOT, "data", "run_config.yaml"))
    assert config == RunConfig()


def test_config_rejects_unknown_sections():
    with pytest.raises(ValueError):
        RunConfig.from_dict({"skills": {}})


# ============================================================
# Metrics and logging
# ============================================================

def test_metrics_summary():
    metrics = PlannerMetrics()
    planner = Planner(metrics=metrics)
    planner.plan([interpretation("ontop(b,floor)"), interpretation("holding(b)")], make_world())

    summary = metrics.summary()
    assert summary["total_requests"] == 1
    assert summary["total_attempts"] == 2
    assert summary["success_rate"] == 1.0
    assert summary["mean_plan_length"] == 2.0
    assert summary["max_plan_length"] == 3


def test_metrics_save(tmp_path):
    metrics = PlannerMetrics()
    metrics.record_attempt()
    metrics.record_exhausted("ontop(a,b)", nodes_expanded=7, budget_reached=True)
    path = tmp_path / "metrics.json"
    metrics.save(str(path))

    data = json.loads(path.read_text())
    assert data["summary"]["budget_reached"] == 1
    assert data["sample_failure"]["nodes_expanded"] == 7


def test_plan_logger_writes_trace(tmp_path):
    """Each request is saved as one JSON trace."""
    print("\n" + "=" * 60)
    print("TEST: PlanLogger trace")
    print("=" * 60)

    logger = PlanLogger(str(tmp_path), config=RunConfig())
    planner = Planner(logger=logger)
    planner.plan([interpretation("ontop(b,floor)"), interpretation("beside(a,b)")], make_world())

    files = sorted(tmp_path.glob("plan_*.json"))
    assert len(files) == 1
    trace = json.loads(files[0].read_text())

    assert trace["success"] is True
    assert trace["n_interpretations"] == 2
    assert trace["world"]["stacks"] == [["a", "b"], []]
    first, second = trace["interpretations"]
    assert first["plan"] == ["p", "r", "d"]
    assert len(first["states"]) == 4
    assert first["states"][-1]["stacks"] == [["a"], ["b"]]
    assert second["success"] is False
    assert "beside" in second["error"]

    summary = RunSummary(str(tmp_path))
    for plan_log in logger.completed:
        summary.add_request(plan_log)
    saved = summary.save()
    assert saved["total_requests"] == 1
    assert saved["requests"][0]["n_plans"] == 1

    written = json.loads((tmp_path / "run_summary.json").read_text())
    assert written["total_plans"] == 1
    assert written["plans_per_request"] == [1]
    assert written["max_request_time"] >= written["mean_request_time"] >= 0.0
    print(f"✓ Trace written to {files[0].name}")


class RecordingLogger(PlanLogger):
    """Captures the states handed to the logger for each plan."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.received_states = []

    def log_interpretation(self, *args, states=None, **kwargs):
        self.received_states.append(states)
        super().log_interpretation(*args, states=states, **kwargs)


def test_states_built_only_when_saved(tmp_path):
    """The state sequence is only serialized for loggers that keep it."""
    logger = RecordingLogger(str(tmp_path / "without"), save_states=False)
    Planner(logger=logger).plan([interpretation("ontop(b,floor)")], make_world())
    assert logger.received_states == [None]
    trace = json.loads(next((tmp_path / "without").glob("plan_*.json")).read_text())
    assert "states" not in trace["interpretations"][0]

    logger = RecordingLogger(str(tmp_path / "with"))
    Planner(logger=logger).plan([interpretation("ontop(b,floor)")], make_world())
    assert len(logger.received_states[0]) == 4


def test_plan_logger_records_failure(tmp_path):
    logger = PlanLogger(str(tmp_path), save_states=False)
    planner = Planner(PlannerConfig(max_nodes=1), logger=logger)
    with pytest.raises(NoPlanFound):
        planner.plan([interpretation("ontop(a,b)")], make_world())

    trace = json.loads(next(tmp_path.glob("plan_*.json")).read_text())
    assert trace["success"] is False
    assert "Found no plans" in trace["failure_reason"]


# ============================================================
# CLI
# ============================================================

def test_cli_prints_plans(capsys):
    code = plan_world.main(["--world", SMALL_WORLD, "--goal", "holding(e)", "--goal", "ontop(f,floor)"])
    assert code == 0
    out = capsys.readouterr().out.strip().splitlines()
    assert out[0] == "holding(e): p"
    assert out[1].startswith("ontop(f,floor): ")
    assert len(out[1].split(": ")[1].split(", ")) == 6


def test_cli_no_plan(capsys):
    code = plan_world.main(["--world", SMALL_WORLD, "--goal", "ontop(e,f)", "--max-nodes", "50"])
    assert code == 1
    assert "Found no plans" in capsys.readouterr().out


def test_cli_writes_traces(tmp_path, capsys):
    code = plan_world.main(["--world", SMALL_WORLD, "--goal", "holding(e)", "--log-dir", str(tmp_path)])
    assert code == 0
    assert len(list(tmp_path.glob("plan_*.json"))) == 1


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
