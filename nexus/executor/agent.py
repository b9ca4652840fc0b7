"""
Agent executor.

Drives one persona through an instruction with a bounded tool-calling
loop. Each resolved tool call costs one turn; the loop stops when the
model stops calling tools, the turn cap is reached, an unrecognized tool
is requested, or the agent pauses the workflow.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from nexus.executor.records import RecordFetcher
from nexus.executor.tools import (
    CODE_EXECUTION,
    TOOL_DECLARATIONS,
    WEB_SEARCH,
    OutcomeKind,
    ToolContext,
    dispatch_tool,
)
from nexus.memory.bank import MemoryBank
from nexus.prompts.builders import build_agent_system_prompt
from nexus.shared.contracts.plan import AgentDomain
from nexus.shared.llm.reasoning import ReasoningService
from nexus.shared.logging.events import EventChannel
from nexus.shared.tracing import TraceRecorder


logger = logging.getLogger(__name__)

DEFAULT_MAX_TOOL_TURNS = 5
COMPLETED_TEXT = "Task Completed."


@dataclass
class AgentExecutionResult:
    """Outcome of one agent invocation."""

    text: str
    is_paused: bool = False
    pause_reason: Optional[str] = None
    tool_usage: List[str] = field(default_factory=list)


class AgentExecutor:
    """
    Runs agent personas against the reasoning service.

    Args:
        reasoning: Reasoning collaborator
        memory: Shared memory bank (read for prompts, written by updateMemory)
        record_fetcher: Record-fetch collaborator for fetchMedicalRecords
        trace: Metric recorder for AgentExecutionTime
        max_tool_turns: Cap on resolved tool calls per invocation
    """

    def __init__(
        self,
        reasoning: ReasoningService,
        memory: MemoryBank,
        record_fetcher: RecordFetcher,
        trace: TraceRecorder,
        max_tool_turns: int = DEFAULT_MAX_TOOL_TURNS,
    ):
        self.reasoning = reasoning
        self.memory = memory
        self.trace = trace
        self.max_tool_turns = max_tool_turns
        self._tool_context = ToolContext(memory=memory, record_fetcher=record_fetcher)

    def _record_time(self, start: float) -> None:
        self.trace.record("AgentExecutionTime", (time.perf_counter() - start) * 1000, "ms")

    def execute(
        self,
        agent: AgentDomain,
        instruction: str,
        context: str,
        language: str,
        events: EventChannel,
    ) -> AgentExecutionResult:
        """
        Run one persona on an instruction.

        Args:
            agent: Persona to run
            instruction: First message of the session
            context: Running context injected into the persona prompt
            language: Target response language
            events: Observability channel for this run

        Returns:
            AgentExecutionResult with the final text and tools used.
        """
        start = time.perf_counter()
        name = agent.value
        _log = f"[session={events.session_id}] [agent={name}] "

        events.publish(name, f'[A2A] {name} -> BROADCAST: "Starting Task: {instruction[:30]}..."')
        events.publish(name, f"[System] Agent {name} powered by {self.reasoning.agent_model} initialized.")

        system_prompt = build_agent_system_prompt(
            agent, context, language, self.memory.formatted()
        )
        session = self.reasoning.start_chat(system_prompt, TOOL_DECLARATIONS)

        tool_usage: List[str] = []
        response = session.send(instruction)

        if response.used_search:
            tool_usage.append(WEB_SEARCH)
            events.publish(name, f'[A2A] {name} -> TOOL: "{WEB_SEARCH}" (Grounding)')
        if response.used_code_execution:
            tool_usage.append(CODE_EXECUTION)
            events.publish(name, f'[A2A] {name} -> TOOL: "{CODE_EXECUTION}"')

        turns = 0
        while response.function_calls and turns < self.max_tool_turns:
            call = response.function_calls[0]
            tool_usage.append(call.name)
            events.publish(name, f'[A2A] {name} -> TOOL: "{call.name}"')

            outcome = dispatch_tool(call, self._tool_context)

            if outcome.kind is OutcomeKind.PAUSE:
                logger.info(f"{_log}Paused on turn {turns + 1} | reason={outcome.pause_reason}")
                self._record_time(start)
                return AgentExecutionResult(
                    text=f"Workflow Paused: {outcome.pause_reason}",
                    is_paused=True,
                    pause_reason=outcome.pause_reason,
                    tool_usage=tool_usage,
                )

            if outcome.kind is OutcomeKind.UNRECOGNIZED:
                events.publish(name, f'[A2A] {name} -> TOOL: "{call.name}" unrecognized, stopping')
                break

            response = session.send_function_response(call, outcome.response)
            turns += 1

        if response.function_calls and turns >= self.max_tool_turns:
            logger.warning(f"{_log}Tool turn cap reached ({self.max_tool_turns})")

        self._record_time(start)
        return AgentExecutionResult(
            text=response.text or COMPLETED_TEXT,
            tool_usage=tool_usage,
        )
