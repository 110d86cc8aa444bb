"""Utility modules for blockplanner."""

from .timing import Timer

__all__ = [
    "Timer",
]
