"""
Node functions for the workflow graph.

Each node reads the workflow state, drives one phase (compaction,
planning, one of the execution modes, synthesis, evaluation) and returns
a partial state update.
"""

import logging
from typing import Any, Dict

from nexus.context.compactor import compact_history
from nexus.evaluation.evaluator import evaluate_response
from nexus.executor.agent import AgentExecutionResult, AgentExecutor
from nexus.graph.config import WorkflowConfig
from nexus.graph.state import AgentTaskState, WorkflowState
from nexus.memory.bank import MemoryBank
from nexus.memory.session import SessionService
from nexus.planner.planner import plan_execution
from nexus.shared.contracts.paused_state import PausedState
from nexus.shared.contracts.plan import AgentDomain, ExecutionMode
from nexus.shared.llm.reasoning import ReasoningService
from nexus.shared.logging.config import log_state_transition
from nexus.shared.logging.events import EventChannel
from nexus.shared.tracing import TraceRecorder
from nexus.synthesis.synthesizer import synthesize_response


logger = logging.getLogger(__name__)

SYSTEM = "System"
ORCHESTRATOR = "Orchestrator"


def _ignore_pause(result: AgentExecutionResult, agent: AgentDomain, events: EventChannel) -> None:
    # Suspension is only supported by the sequential pipeline
    if result.is_paused:
        events.publish(
            agent.value,
            f"System: {agent.value} requested a pause; not supported in this mode, continuing.",
        )


class WorkflowNodes:
    """
    Graph nodes bound to the run's collaborators.

    Args:
        reasoning: Reasoning collaborator
        executor: Agent executor
        memory: Shared memory bank
        trace: Metric recorder
        session: Session bookkeeping
        config: Workflow configuration
    """

    def __init__(
        self,
        reasoning: ReasoningService,
        executor: AgentExecutor,
        memory: MemoryBank,
        trace: TraceRecorder,
        session: SessionService,
        config: WorkflowConfig,
    ):
        self.reasoning = reasoning
        self.executor = executor
        self.memory = memory
        self.trace = trace
        self.session = session
        self.config = config

    # ------------------------------------------------------------------
    # Planning phase
    # ------------------------------------------------------------------

    def compact(self, state: WorkflowState) -> Dict[str, Any]:
        summary = compact_history(
            state.get("prior_turns") or [],
            self.reasoning,
            threshold=self.config.compaction_threshold,
            events=state["events"],
        )
        return {"context_summary": summary, "current_phase": "compacted"}

    def plan(self, state: WorkflowState) -> Dict[str, Any]:
        events = state["events"]
        events.publish(ORCHESTRATOR, "Orchestrator: Analyzing request...")

        memory_context = self.memory.formatted()
        plan = plan_execution(
            self.reasoning,
            self.trace,
            state["prompt"],
            state.get("context_summary", ""),
            memory_context,
            session_id=state["session_id"],
        )
        accumulated_context = (
            f"User Query: {state['prompt']}\n"
            f"Session ID: {self.session.session_id}\n"
            f"History Context: {state.get('context_summary', '')}\n"
            f"{memory_context}"
        )
        events.publish(ORCHESTRATOR, f"Orchestrator: Mode {plan.mode.value}.")

        update = {
            "plan": plan,
            "step_index": 0,
            "accumulated_context": accumulated_context,
            "current_phase": "planned",
        }
        log_state_transition("plan_selected", {**state, **update}, {"reasoning": plan.reasoning})
        return update

    def restore(self, state: WorkflowState) -> Dict[str, Any]:
        events = state["events"]
        resume = state["resume_state"]
        events.publish(SYSTEM, "System: Resuming suspended workflow...")
        events.publish(
            SYSTEM,
            f"Resuming at step {resume.step_index + 1} of {len(resume.plan.steps)}",
        )
        return {
            "plan": resume.plan,
            "step_index": resume.step_index,
            "accumulated_context": resume.accumulated_context,
            "agent_outputs": dict(resume.agent_outputs),
            "current_phase": "restored",
        }

    def dispatch(self, state: WorkflowState) -> Dict[str, Any]:
        """Announce the execution branch the router is about to take."""
        events = state["events"]
        plan = state["plan"]

        if plan.mode is ExecutionMode.PARALLEL:
            events.publish(SYSTEM, f"System: Spawning {len(plan.steps)} parallel agents...")
        elif plan.mode is ExecutionMode.SEQUENTIAL:
            events.publish(SYSTEM, "System: Executing sequential workflow...")
            if state["step_index"] >= len(plan.steps):
                events.publish(SYSTEM, "System: Sequential workflow completed.")
        elif plan.mode is ExecutionMode.LOOP:
            events.publish(SYSTEM, "System: Initiating refinement loop...")

        return {"current_phase": f"running_{plan.mode.value.lower()}"}

    # ------------------------------------------------------------------
    # Execution modes
    # ------------------------------------------------------------------

    def agent_task(self, task: AgentTaskState) -> Dict[str, Any]:
        """One branch of the parallel fan-out."""
        step = task["step"]
        events = task["events"]
        result = self.executor.execute(
            step.agent, step.instruction, task["accumulated_context"], task["language"], events
        )
        _ignore_pause(result, step.agent, events)
        return {
            "agent_outputs": {step.agent: result.text},
            "tool_usage": result.tool_usage,
        }

    def parallel_join(self, state: WorkflowState) -> Dict[str, Any]:
        state["events"].publish(SYSTEM, "System: Parallel tasks completed.")
        return {"current_phase": "parallel_joined"}

    def sequential_step(self, state: WorkflowState) -> Dict[str, Any]:
        events = state["events"]
        plan = state["plan"]
        i = state["step_index"]
        step = plan.steps[i]
        agent = step.agent.value

        events.publish(SYSTEM, f"System: [Step {i + 1}/{len(plan.steps)}] Running {agent}...")
        result = self.executor.execute(
            step.agent, step.instruction, state["accumulated_context"], state["language"], events
        )

        if result.is_paused:
            events.publish(agent, f"System: Workflow paused by {agent}.")
            paused_state = PausedState(
                plan=plan,
                step_index=i + 1,
                accumulated_context=(
                    state["accumulated_context"] + f"\n[Paused Step {agent}]: {result.text}"
                ),
                agent_outputs=dict(state.get("agent_outputs") or {}),
            )
            update = {
                "paused_state": paused_state,
                "pause_reason": result.pause_reason,
                "paused_agent": step.agent,
                "tool_usage": result.tool_usage,
                "current_phase": "paused",
            }
            log_state_transition("workflow_paused", {**state, **update}, {"reason": result.pause_reason})
            return update

        if i + 1 >= len(plan.steps):
            events.publish(SYSTEM, "System: Sequential workflow completed.")

        return {
            "agent_outputs": {step.agent: result.text},
            "accumulated_context": (
                state["accumulated_context"] + f"\n[Output from {agent}]: {result.text}"
            ),
            "step_index": i + 1,
            "tool_usage": result.tool_usage,
        }

    def refinement_loop(self, state: WorkflowState) -> Dict[str, Any]:
        """Draft, critique as the orchestrator, then refine."""
        events = state["events"]
        language = state["language"]
        step = state["plan"].steps[0]

        draft = self.executor.execute(
            step.agent, step.instruction, state["accumulated_context"], language, events
        )
        _ignore_pause(draft, step.agent, events)
        critique = self.executor.execute(
            AgentDomain.ORCHESTRATOR, f"Critique: {draft.text}", "", language, events
        )
        _ignore_pause(critique, AgentDomain.ORCHESTRATOR, events)
        refined = self.executor.execute(
            step.agent, f"Refine based on: {critique.text}", f"Draft: {draft.text}", language, events
        )
        _ignore_pause(refined, step.agent, events)

        return {
            "agent_outputs": {step.agent: refined.text},
            "tool_usage": draft.tool_usage + critique.tool_usage + refined.tool_usage,
        }

    def direct(self, state: WorkflowState) -> Dict[str, Any]:
        events = state["events"]
        step = state["plan"].steps[0]
        result = self.executor.execute(
            step.agent, step.instruction, state["accumulated_context"], state["language"], events
        )
        _ignore_pause(result, step.agent, events)
        return {
            "agent_outputs": {step.agent: result.text},
            "tool_usage": result.tool_usage,
        }

    # ------------------------------------------------------------------
    # Synthesis and evaluation
    # ------------------------------------------------------------------

    def synthesize(self, state: WorkflowState) -> Dict[str, Any]:
        state["events"].publish(ORCHESTRATOR, "Orchestrator: Synthesizing final response...")
        synthesis = synthesize_response(
            self.reasoning,
            state["prompt"],
            state.get("agent_outputs") or {},
            state.get("context_summary", ""),
            self.memory.formatted(),
            state.get("tool_usage") or [],
            state["language"],
            extended_reasoning=state.get("use_extended_reasoning", False),
        )
        return {"synthesis": synthesis, "current_phase": "synthesized"}

    def evaluate(self, state: WorkflowState) -> Dict[str, Any]:
        state["events"].publish(SYSTEM, "System: Running Post-Task Evaluation...")
        evaluation = evaluate_response(self.reasoning, state["prompt"], state["synthesis"].response)
        return {"evaluation": evaluation, "current_phase": "done"}
