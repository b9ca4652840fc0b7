"""
Workflow state schema.

Defines the state that flows through the workflow graph: the request,
the plan, the running sequential context and the accumulated outputs.
"""

from typing import Annotated, Dict, List, Optional, TypedDict
import operator

from nexus.shared.contracts.conversation import ConversationTurn
from nexus.shared.contracts.evaluation import EvaluationResult
from nexus.shared.contracts.paused_state import PausedState
from nexus.shared.contracts.plan import AgentDomain, Plan, PlanStep
from nexus.shared.contracts.synthesis import SynthesisResult
from nexus.shared.logging.events import EventChannel


def merge_agent_outputs(
    left: Dict[AgentDomain, str], right: Dict[AgentDomain, str]
) -> Dict[AgentDomain, str]:
    """Merge per domain key; the later write wins for a repeated agent."""
    return {**(left or {}), **(right or {})}


class WorkflowState(TypedDict):
    """
    State schema for the workflow graph.

    agent_outputs and tool_usage use reducers so parallel agent tasks can
    write to them in the same step.
    """

    # Request
    session_id: str
    prompt: str
    prior_turns: List[ConversationTurn]
    language: str
    use_extended_reasoning: bool
    resume_state: Optional[PausedState]

    # Planning
    context_summary: str
    plan: Optional[Plan]

    # Execution
    step_index: int
    accumulated_context: str
    agent_outputs: Annotated[Dict[AgentDomain, str], merge_agent_outputs]
    tool_usage: Annotated[List[str], operator.add]

    # Suspension
    paused_state: Optional[PausedState]
    pause_reason: Optional[str]
    paused_agent: Optional[AgentDomain]

    # Results
    synthesis: Optional[SynthesisResult]
    evaluation: Optional[EvaluationResult]

    # Tracking
    current_phase: str
    events: EventChannel


class AgentTaskState(TypedDict):
    """Payload sent to one parallel agent task."""

    step: PlanStep
    accumulated_context: str
    language: str
    events: EventChannel
