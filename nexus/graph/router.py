"""
Routing logic for the workflow graph.

Interprets the plan's execution mode and decides which node runs next.
"""

import logging
from typing import List, Literal, Union

from langgraph.graph import END
from langgraph.types import Send

from nexus.graph.state import WorkflowState
from nexus.shared.contracts.plan import ExecutionMode


logger = logging.getLogger(__name__)

DISPATCH_TARGETS = ["agent_task", "sequential_step", "refinement_loop", "direct", "synthesize"]


def route_entry(state: WorkflowState) -> Literal["restore", "compact"]:
    """Resumed runs skip compaction and planning."""
    return "restore" if state.get("resume_state") is not None else "compact"


def route_by_mode(state: WorkflowState) -> Union[str, List[Send]]:
    """
    Pick the execution branch for the plan.

    Routing logic:
    1. PARALLEL -> one Send per step to agent_task (fan-out)
    2. SEQUENTIAL -> sequential_step, or synthesize if no steps remain
    3. LOOP -> refinement_loop
    4. DIRECT -> direct

    Args:
        state: Current workflow state

    Returns:
        Next node name, or a list of Send packets for the parallel fan-out
    """
    plan = state["plan"]
    session_id = state.get("session_id", "unknown")
    _log = f"[session={session_id}] [graph=workflow] [router=route_by_mode] "

    if plan.mode is ExecutionMode.PARALLEL:
        logger.info(f"{_log}Fanning out to {len(plan.steps)} agent tasks")
        return [
            Send(
                "agent_task",
                {
                    "step": step,
                    "accumulated_context": state["accumulated_context"],
                    "language": state["language"],
                    "events": state["events"],
                },
            )
            for step in plan.steps
        ]

    if plan.mode is ExecutionMode.SEQUENTIAL:
        if state["step_index"] < len(plan.steps):
            logger.info(f"{_log}Routing to 'sequential_step' | step_index={state['step_index']}")
            return "sequential_step"
        logger.info(f"{_log}No steps remain, routing to 'synthesize'")
        return "synthesize"

    if plan.mode is ExecutionMode.LOOP:
        logger.info(f"{_log}Routing to 'refinement_loop'")
        return "refinement_loop"

    if plan.mode is ExecutionMode.DIRECT:
        logger.info(f"{_log}Routing to 'direct'")
        return "direct"

    raise ValueError(f"Plan mode {plan.mode.value} is not executable")


def route_after_step(
    state: WorkflowState,
) -> Literal["sequential_step", "synthesize", "__end__"]:
    """
    After a sequential step: stop on pause, continue while steps remain.
    """
    if state.get("paused_state") is not None:
        return END
    if state["step_index"] < len(state["plan"].steps):
        return "sequential_step"
    return "synthesize"
