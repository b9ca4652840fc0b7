"""
Planner for choosing an execution strategy.

Asks the reasoning service for a mode (DIRECT, PARALLEL, SEQUENTIAL,
LOOP) and ordered agent steps, falling back to a direct plan on failure.
"""

from nexus.planner.planner import plan_execution

__all__ = ["plan_execution"]
