"""
Shared fixtures: a scripted reasoning service and orchestrator factory.

FakeReasoningService never touches the network. Agent sessions are
scripted per persona as lists of AgentTurn; a persona with no script left
answers with a single text turn "<AGENT> output".
"""

import threading
from typing import Any, Dict, List, Optional

import pytest

from nexus.executor.records import SimulatedRecordFetcher
from nexus.graph.config import get_config
from nexus.graph.orchestrator import Orchestrator
from nexus.memory.bank import MemoryBank
from nexus.prompts.templates import AGENT_PROMPTS
from nexus.shared.contracts.evaluation import ScoreVerdict
from nexus.shared.contracts.plan import AgentDomain, ExecutionMode, Plan, PlanStep
from nexus.shared.contracts.synthesis import Sentiment, SynthesisResult
from nexus.shared.llm.reasoning import AgentTurn, ChatSession, FunctionCall, ReasoningService
from nexus.shared.tracing import TraceRecorder


# ============================================================================
# Fakes
# ============================================================================


class FakeChatSession(ChatSession):
    """Replays scripted turns; records everything sent to it."""

    def __init__(self, agent: AgentDomain, system_prompt: str, turns: List[AgentTurn]):
        self.agent = agent
        self.system_prompt = system_prompt
        self._turns = list(turns)
        self.sent: List[str] = []
        self.function_responses: List[tuple] = []

    def _next(self) -> AgentTurn:
        if len(self._turns) > 1:
            return self._turns.pop(0)
        # The last scripted turn repeats
        return self._turns[0]

    def send(self, message: str) -> AgentTurn:
        self.sent.append(message)
        return self._next()

    def send_function_response(self, call: FunctionCall, response: Dict[str, Any]) -> AgentTurn:
        self.function_responses.append((call, response))
        return self._next()


class FakeReasoningService(ReasoningService):
    """
    Scripted ReasoningService.

    Args:
        plan: Plan returned by plan(); defaults to DIRECT/HEALTH
        scripts: Per-agent list of session scripts, consumed one per session
        fail_agents: Agents whose sessions raise on start
        plan_error: Raised by plan() if set
        summary: Text returned by summarize()
        summarize_error: Raised by summarize() if set
        synthesis: Result returned by synthesize()
        synthesis_error: Raised by synthesize() if set
        verdict: Verdict returned by score()
        score_error: Raised by score() if set
    """

    def __init__(
        self,
        plan: Optional[Plan] = None,
        scripts: Optional[Dict[AgentDomain, List[List[AgentTurn]]]] = None,
        fail_agents: Optional[List[AgentDomain]] = None,
        plan_error: Optional[Exception] = None,
        summary: str = "Summary of prior turns.",
        summarize_error: Optional[Exception] = None,
        synthesis: Optional[SynthesisResult] = None,
        synthesis_error: Optional[Exception] = None,
        verdict: Optional[ScoreVerdict] = None,
        score_error: Optional[Exception] = None,
    ):
        self._plan = plan or make_plan(ExecutionMode.DIRECT, AgentDomain.HEALTH)
        self._scripts = {agent: list(s) for agent, s in (scripts or {}).items()}
        self.fail_agents = set(fail_agents or [])
        self.plan_error = plan_error
        self.summary = summary
        self.summarize_error = summarize_error
        self.synthesis = synthesis or SynthesisResult(
            response="Here is your answer.", sentiment=Sentiment.POSITIVE
        )
        self.synthesis_error = synthesis_error
        self.verdict = verdict or ScoreVerdict(score=9, feedback="Relevant and safe.")
        self.score_error = score_error

        self._lock = threading.Lock()
        self.plan_contexts: List[str] = []
        self.sessions: List[FakeChatSession] = []
        self.summarize_calls: List[str] = []
        self.synthesize_calls: List[dict] = []
        self.score_calls: List[tuple] = []

    @property
    def agent_model(self) -> str:
        return "fake-model"

    def plan(self, context: str) -> Plan:
        self.plan_contexts.append(context)
        if self.plan_error is not None:
            raise self.plan_error
        return self._plan

    def start_chat(self, system_prompt: str, tools: List[Dict[str, Any]]) -> ChatSession:
        agent = next(a for a, persona in AGENT_PROMPTS.items() if system_prompt.startswith(persona))
        if agent in self.fail_agents:
            raise RuntimeError(f"{agent.value} session failed")
        with self._lock:
            remaining = self._scripts.get(agent) or []
            turns = remaining.pop(0) if remaining else [AgentTurn(text=f"{agent.value} output")]
            session = FakeChatSession(agent, system_prompt, turns)
            self.sessions.append(session)
        return session

    def summarize(self, transcript: str) -> str:
        self.summarize_calls.append(transcript)
        if self.summarize_error is not None:
            raise self.summarize_error
        return self.summary

    def synthesize(
        self, prompt: str, system_prompt: str, extended_reasoning: bool = False
    ) -> SynthesisResult:
        self.synthesize_calls.append(
            {"prompt": prompt, "system_prompt": system_prompt, "extended_reasoning": extended_reasoning}
        )
        if self.synthesis_error is not None:
            raise self.synthesis_error
        return self.synthesis

    def score(self, query: str, response: str) -> ScoreVerdict:
        self.score_calls.append((query, response))
        if self.score_error is not None:
            raise self.score_error
        return self.verdict

    def sessions_for(self, agent: AgentDomain) -> List[FakeChatSession]:
        return [s for s in self.sessions if s.agent is agent]


# ============================================================================
# Helpers
# ============================================================================


def make_plan(mode: ExecutionMode, *agents: AgentDomain, reasoning: str = "test plan") -> Plan:
    """Plan with one step per agent, instruction 'Task for <AGENT>'."""
    return Plan(
        mode=mode,
        steps=[PlanStep(agent=a, instruction=f"Task for {a.value}") for a in agents],
        reasoning=reasoning,
    )


def tool_turn(name: str, **args) -> AgentTurn:
    """Model turn requesting one tool call."""
    return AgentTurn(function_calls=[FunctionCall(name=name, args=args, call_id=f"call_{name}")])


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def memory():
    return MemoryBank()


@pytest.fixture
def trace():
    return TraceRecorder()


@pytest.fixture
def record_fetcher():
    return SimulatedRecordFetcher(latency_s=0)


@pytest.fixture
def make_orchestrator(memory, trace, record_fetcher):
    """Factory: Orchestrator wired to a fake reasoning service."""

    def _make(reasoning: FakeReasoningService, **overrides) -> Orchestrator:
        kwargs = {
            "memory": memory,
            "trace": trace,
            "record_fetcher": record_fetcher,
            "config": get_config(record_fetch_latency_s=0),
            "api_key": "test-key",
        }
        kwargs.update(overrides)
        return Orchestrator(reasoning, **kwargs)

    return _make
