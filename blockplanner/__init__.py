"""
Block-world gripper planner.

Plans sequences of primitive gripper actions (move left/right, pick up, put
down) that bring a block world into a state satisfying a goal interpretation.
"""

__version__ = "0.1.0"
