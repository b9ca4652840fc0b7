"""
Planner: turns a request plus context into an execution plan.

Planning never fails from the caller's point of view. Any error from the
reasoning service is logged and replaced with a direct orchestrator plan.
"""

import logging
import time

from nexus.prompts.builders import build_planning_context
from nexus.shared.contracts.plan import Plan
from nexus.shared.llm.reasoning import ReasoningService
from nexus.shared.tracing import TraceRecorder


logger = logging.getLogger(__name__)


def plan_execution(
    reasoning: ReasoningService,
    trace: TraceRecorder,
    prompt: str,
    context_summary: str,
    memory_context: str,
    session_id: str = "unknown",
) -> Plan:
    """
    Produce a usable Plan for the request.

    Args:
        reasoning: Reasoning collaborator
        trace: Recorder for the PlanningLatency metric
        prompt: The user's request
        context_summary: Compacted prior conversation
        memory_context: Formatted memory bank snapshot
        session_id: For log correlation

    Returns:
        The planned Plan, or Plan.fallback(prompt) if planning failed.
    """
    _log = f"[session={session_id}] [graph=workflow] [node=plan] "
    context = build_planning_context(prompt, context_summary, memory_context)

    start = time.perf_counter()
    try:
        plan = reasoning.plan(context)
    except Exception as e:
        logger.warning(f"{_log}Planning failed, using fallback plan: {e}")
        return Plan.fallback(prompt)

    trace.record("PlanningLatency", (time.perf_counter() - start) * 1000, "ms")
    logger.info(
        f"{_log}Plan ready | mode={plan.mode.value}, steps={len(plan.steps)}, "
        f"agents={[a.value for a in plan.agents]}"
    )
    return plan
