"""
Workflow graph (mode dispatcher).

Plans a request, then runs one of the execution modes:
    PARALLEL   -> fan-out agent tasks, join, synthesize
    SEQUENTIAL -> step pipeline with pause/resume checkpoints
    LOOP       -> draft, critique, refine
    DIRECT     -> single agent call
and finishes with synthesis and evaluation.
"""

from nexus.graph.build import create_workflow_graph
from nexus.graph.config import DEFAULT_CONFIG, WorkflowConfig, get_config
from nexus.graph.orchestrator import Orchestrator, ResumeError, create_orchestrator

__all__ = [
    "create_workflow_graph",
    "DEFAULT_CONFIG",
    "WorkflowConfig",
    "get_config",
    "Orchestrator",
    "ResumeError",
    "create_orchestrator",
]
