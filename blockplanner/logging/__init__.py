"""Logging module for blockplanner.

Provides plan request logging and run tracking.
"""

from .plan_logger import PlanLog, PlanLogger, RunSummary

__all__ = [
    "PlanLog",
    "PlanLogger",
    "RunSummary",
]
