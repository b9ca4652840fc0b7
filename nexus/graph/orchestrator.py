"""
Workflow entry point.

The Orchestrator owns the process-scoped collaborators (reasoning
service, memory bank, trace recorder, record fetcher, session) and runs
one request through the compiled workflow graph per call.
"""

import logging
import time
from typing import Optional, Sequence

from nexus.executor.agent import AgentExecutor
from nexus.executor.records import RecordFetcher, SimulatedRecordFetcher
from nexus.graph.build import create_workflow_graph
from nexus.graph.config import DEFAULT_CONFIG, WorkflowConfig
from nexus.graph.nodes import WorkflowNodes
from nexus.memory.bank import MemoryBank
from nexus.memory.session import SessionService
from nexus.shared.contracts.conversation import ConversationTurn
from nexus.shared.contracts.paused_state import PausedState
from nexus.shared.contracts.plan import ExecutionMode
from nexus.shared.contracts.result import WorkflowResult
from nexus.shared.contracts.synthesis import Sentiment
from nexus.shared.llm.client import require_api_key
from nexus.shared.llm.reasoning import OpenAIReasoningService, ReasoningService
from nexus.shared.logging.events import EventChannel
from nexus.shared.tracing import TraceRecorder, trace_recorder


logger = logging.getLogger(__name__)


class ResumeError(ValueError):
    """Raised when a checkpoint cannot be resumed."""

    pass


class Orchestrator:
    """
    Runs requests through plan -> execute -> synthesize -> evaluate.

    Args:
        reasoning: Reasoning collaborator
        memory: Memory bank shared by all runs
        trace: Metric recorder (defaults to the process-wide recorder)
        record_fetcher: Record-fetch collaborator
        session: Session bookkeeping
        config: Workflow configuration
        api_key: Credential checked before each run; falls back to OPENAI_API_KEY
    """

    def __init__(
        self,
        reasoning: ReasoningService,
        memory: Optional[MemoryBank] = None,
        trace: Optional[TraceRecorder] = None,
        record_fetcher: Optional[RecordFetcher] = None,
        session: Optional[SessionService] = None,
        config: Optional[WorkflowConfig] = None,
        api_key: Optional[str] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.reasoning = reasoning
        self.memory = memory if memory is not None else MemoryBank(self.config.memory_path)
        self.trace = trace if trace is not None else trace_recorder
        self.record_fetcher = record_fetcher or SimulatedRecordFetcher(
            self.config.record_fetch_latency_s
        )
        self.session = session or SessionService()
        self.api_key = api_key

        self.executor = AgentExecutor(
            reasoning,
            self.memory,
            self.record_fetcher,
            self.trace,
            max_tool_turns=self.config.max_tool_turns,
        )
        self.nodes = WorkflowNodes(
            reasoning, self.executor, self.memory, self.trace, self.session, self.config
        )
        self.graph = create_workflow_graph(self.nodes)

    def run_workflow(
        self,
        prompt: str,
        prior_turns: Optional[Sequence[ConversationTurn]] = None,
        language: Optional[str] = None,
        use_extended_reasoning: bool = False,
        resume_state: Optional[PausedState] = None,
        events: Optional[EventChannel] = None,
    ) -> WorkflowResult:
        """
        Answer one request, or continue a paused sequential run.

        Args:
            prompt: The user's request
            prior_turns: Earlier conversation turns (ignored when resuming)
            language: Target response language
            use_extended_reasoning: Synthesize with the extended reasoning model
            resume_state: Checkpoint returned by an earlier paused run
            events: Channel to publish progress to; a fresh one is created if None

        Returns:
            WorkflowResult; paused_state is set if an agent paused the run.

        Raises:
            MissingCredentialError: If no API key is configured.
            ResumeError: If resume_state is not a sequential checkpoint.
        """
        require_api_key(self.api_key)
        if resume_state is not None and resume_state.plan.mode is not ExecutionMode.SEQUENTIAL:
            raise ResumeError(
                f"Only SEQUENTIAL runs can be resumed, got {resume_state.plan.mode.value}"
            )

        session_id = self.session.session_id
        events = events or EventChannel(session_id)
        _log = f"[session={session_id}] [graph=workflow] [api=run_workflow] "
        logger.info(
            f"{_log}Run starting | resume={resume_state is not None}, "
            f"prior_turns={len(prior_turns or [])}, extended={use_extended_reasoning}"
        )

        overall_start = time.perf_counter()
        initial_state = {
            "session_id": session_id,
            "prompt": prompt,
            "prior_turns": list(prior_turns or []),
            "language": language or self.config.default_language,
            "use_extended_reasoning": use_extended_reasoning,
            "resume_state": resume_state,
            "context_summary": "",
            "plan": None,
            "step_index": 0,
            "accumulated_context": "",
            "agent_outputs": {},
            "tool_usage": [],
            "paused_state": None,
            "pause_reason": None,
            "paused_agent": None,
            "synthesis": None,
            "evaluation": None,
            "current_phase": "planning",
            "events": events,
        }

        final_state = self.graph.invoke(
            initial_state, {"recursion_limit": self.config.recursion_limit}
        )

        paused_state = final_state.get("paused_state")
        if paused_state is not None:
            logger.info(f"{_log}Run paused | next_step={paused_state.step_index}")
            return WorkflowResult(
                response=f"Workflow Paused: {final_state.get('pause_reason')}",
                sentiment=Sentiment.NEUTRAL,
                execution_mode=ExecutionMode.PAUSED,
                active_agents=[final_state["paused_agent"]],
                reasoning=final_state.get("pause_reason"),
                paused_state=paused_state,
                metrics=self.trace.recent(),
            )

        self.trace.record("TotalLatency", (time.perf_counter() - overall_start) * 1000, "ms")

        plan = final_state["plan"]
        synthesis = final_state["synthesis"]
        logger.info(
            f"{_log}Run finished | mode={plan.mode.value}, "
            f"agents={len(final_state.get('agent_outputs') or {})}, "
            f"score={final_state['evaluation'].score}"
        )
        return WorkflowResult(
            response=synthesis.response,
            sentiment=synthesis.sentiment,
            cross_domain_insight=synthesis.cross_domain_insight,
            suggested_action=synthesis.suggested_action,
            tool_calls=synthesis.tool_calls or list(final_state.get("tool_usage") or []),
            chart_data=synthesis.chart_data,
            active_agents=plan.agents,
            execution_mode=plan.mode,
            reasoning=plan.reasoning,
            evaluation=final_state["evaluation"],
            metrics=self.trace.recent(),
        )


def create_orchestrator(
    config: Optional[WorkflowConfig] = None,
    api_key: Optional[str] = None,
) -> Orchestrator:
    """
    Build an Orchestrator backed by OpenAI.

    Args:
        config: Workflow configuration. Uses DEFAULT_CONFIG if not provided.
        api_key: Explicit API key; falls back to OPENAI_API_KEY at run time.

    Returns:
        Orchestrator with the default collaborators.
    """
    config = config or DEFAULT_CONFIG
    reasoning = OpenAIReasoningService(
        api_key=api_key,
        planner_model=config.planner_model,
        agent_model=config.agent_model,
        extended_reasoning_model=config.extended_reasoning_model,
        enable_web_search=config.enable_web_search,
    )
    return Orchestrator(reasoning, config=config, api_key=api_key)
