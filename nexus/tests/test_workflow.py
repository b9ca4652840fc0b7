"""
Tests for the full workflow graph.

Runs the Orchestrator end to end against the scripted reasoning service
in every execution mode, including pause and resume.
"""

import pytest

from nexus.graph.config import DEFAULT_CONFIG, get_config
from nexus.graph.orchestrator import ResumeError
from nexus.graph.router import route_after_step, route_entry
from nexus.shared.contracts.conversation import ConversationTurn
from nexus.shared.contracts.paused_state import PausedState
from nexus.shared.contracts.plan import AgentDomain, ExecutionMode
from nexus.shared.contracts.synthesis import Sentiment, SynthesisResult
from nexus.shared.llm.client import MissingCredentialError
from nexus.shared.llm.reasoning import AgentTurn
from nexus.shared.logging.events import EventChannel

from conftest import FakeReasoningService, make_plan, tool_turn


def _sequential_plan():
    return make_plan(
        ExecutionMode.SEQUENTIAL,
        AgentDomain.HEALTH,
        AgentDomain.EDUCATION,
        AgentDomain.ENVIRONMENT,
    )


# ============================================================================
# TestDirectMode
# ============================================================================


class TestDirectMode:
    """Tests for DIRECT runs."""

    def test_hello(self, make_orchestrator, trace):
        """A simple prompt runs one agent and synthesizes an answer."""
        reasoning = FakeReasoningService(
            plan=make_plan(ExecutionMode.DIRECT, AgentDomain.ORCHESTRATOR),
            scripts={AgentDomain.ORCHESTRATOR: [[AgentTurn(text="Hi! How can I help?")]]},
        )
        result = make_orchestrator(reasoning).run_workflow("hello")

        assert result.is_paused is False
        assert result.execution_mode is ExecutionMode.DIRECT
        assert result.active_agents == [AgentDomain.ORCHESTRATOR]
        assert result.response == "Here is your answer."
        assert result.tool_calls == []
        assert result.evaluation.score == 9
        assert len(reasoning.sessions) == 1
        assert "ORCHESTRATOR Output: Hi! How can I help?" in reasoning.synthesize_calls[0]["prompt"]
        assert "TotalLatency" in [m.name for m in trace.recent(10)]

    def test_planner_failure_runs_fallback(self, make_orchestrator):
        """A planner failure still completes via the fallback plan."""
        reasoning = FakeReasoningService(plan_error=RuntimeError("no JSON"))
        result = make_orchestrator(reasoning).run_workflow("hello")

        assert result.execution_mode is ExecutionMode.DIRECT
        assert result.reasoning == "Fallback."
        assert reasoning.sessions[0].agent is AgentDomain.ORCHESTRATOR
        assert reasoning.sessions[0].sent == ["hello"]

    def test_pause_outside_sequential_is_ignored(self, make_orchestrator):
        """Pause requests outside SEQUENTIAL do not pause the run."""
        reasoning = FakeReasoningService(
            scripts={AgentDomain.HEALTH: [[tool_turn("pauseWorkflow", reason="Wait")]]}
        )
        events = EventChannel("test")
        result = make_orchestrator(reasoning).run_workflow("check", events=events)

        assert result.is_paused is False
        assert "HEALTH Output: Workflow Paused: Wait" in reasoning.synthesize_calls[0]["prompt"]
        assert any("not supported in this mode" in line for line in events.lines())

    def test_tool_calls_fall_back_to_usage(self, make_orchestrator):
        """Tools used by agents fill an empty synthesis tool list."""
        reasoning = FakeReasoningService(
            scripts={
                AgentDomain.HEALTH: [
                    [tool_turn("fetchMedicalRecords", patientId="p1"), AgentTurn(text="ok")]
                ]
            }
        )
        result = make_orchestrator(reasoning).run_workflow("my records")
        assert result.tool_calls == ["fetchMedicalRecords"]

    def test_synthesis_tool_calls_win(self, make_orchestrator):
        """A synthesis tool list is kept as returned."""
        reasoning = FakeReasoningService(
            synthesis=SynthesisResult(
                response="r", sentiment=Sentiment.NEUTRAL, tool_calls=["webSearch"]
            )
        )
        result = make_orchestrator(reasoning).run_workflow("q")
        assert result.tool_calls == ["webSearch"]


# ============================================================================
# TestParallelMode
# ============================================================================


class TestParallelMode:
    """Tests for PARALLEL fan-out."""

    def test_all_agents_run_once(self, make_orchestrator):
        """Each planned agent runs exactly once."""
        reasoning = FakeReasoningService(
            plan=make_plan(
                ExecutionMode.PARALLEL,
                AgentDomain.HEALTH,
                AgentDomain.EDUCATION,
                AgentDomain.ENVIRONMENT,
            )
        )
        events = EventChannel("test")
        result = make_orchestrator(reasoning).run_workflow("plan my week", events=events)

        assert sorted(s.agent.value for s in reasoning.sessions) == [
            "EDUCATION",
            "ENVIRONMENT",
            "HEALTH",
        ]
        prompt = reasoning.synthesize_calls[0]["prompt"]
        for agent in ("HEALTH", "EDUCATION", "ENVIRONMENT"):
            assert f"{agent} Output: {agent} output" in prompt
        assert result.execution_mode is ExecutionMode.PARALLEL
        assert "System: Spawning 3 parallel agents..." in events.lines()
        assert "System: Parallel tasks completed." in events.lines()

    def test_parallel_agents_share_starting_context(self, make_orchestrator):
        """Parallel agents see the same starting context."""
        reasoning = FakeReasoningService(
            plan=make_plan(ExecutionMode.PARALLEL, AgentDomain.HEALTH, AgentDomain.EDUCATION)
        )
        make_orchestrator(reasoning).run_workflow("q")

        for session in reasoning.sessions:
            assert "[Output from" not in session.system_prompt

    def test_one_failure_fails_the_run(self, make_orchestrator):
        """One failing parallel agent fails the run."""
        reasoning = FakeReasoningService(
            plan=make_plan(ExecutionMode.PARALLEL, AgentDomain.HEALTH, AgentDomain.EDUCATION),
            fail_agents=[AgentDomain.EDUCATION],
        )
        with pytest.raises(RuntimeError):
            make_orchestrator(reasoning).run_workflow("q")
        assert reasoning.synthesize_calls == []


# ============================================================================
# TestSequentialMode
# ============================================================================


class TestSequentialMode:
    """Tests for the sequential pipeline, pause and resume."""

    def test_context_accumulates(self, make_orchestrator):
        """Each sequential step sees the previous outputs."""
        reasoning = FakeReasoningService(plan=_sequential_plan())
        result = make_orchestrator(reasoning).run_workflow("q")

        health, education, environment = reasoning.sessions
        assert "[Output from HEALTH]" not in health.system_prompt
        assert "[Output from HEALTH]: HEALTH output" in education.system_prompt
        assert "[Output from EDUCATION]: EDUCATION output" in environment.system_prompt
        assert result.active_agents == [
            AgentDomain.HEALTH,
            AgentDomain.EDUCATION,
            AgentDomain.ENVIRONMENT,
        ]

    def test_pause_returns_checkpoint(self, make_orchestrator):
        """A pause returns a resumable checkpoint."""
        reasoning = FakeReasoningService(
            plan=_sequential_plan(),
            scripts={
                AgentDomain.EDUCATION: [[tool_turn("pauseWorkflow", reason="Confirm the syllabus")]]
            },
        )
        result = make_orchestrator(reasoning).run_workflow("q")

        assert result.is_paused is True
        assert result.execution_mode is ExecutionMode.PAUSED
        assert result.sentiment is Sentiment.NEUTRAL
        assert result.response == "Workflow Paused: Confirm the syllabus"
        assert result.active_agents == [AgentDomain.EDUCATION]
        assert result.evaluation is None

        checkpoint = result.paused_state
        assert checkpoint.step_index == 2
        assert checkpoint.agent_outputs == {AgentDomain.HEALTH: "HEALTH output"}
        assert "[Output from HEALTH]: HEALTH output" in checkpoint.accumulated_context
        assert checkpoint.accumulated_context.endswith(
            "[Paused Step EDUCATION]: Workflow Paused: Confirm the syllabus"
        )
        assert reasoning.sessions_for(AgentDomain.ENVIRONMENT) == []
        assert reasoning.synthesize_calls == []

    def test_resume_runs_only_remaining_steps(self, make_orchestrator):
        """Resuming runs only the steps after the checkpoint."""
        first = FakeReasoningService(
            plan=_sequential_plan(),
            scripts={AgentDomain.EDUCATION: [[tool_turn("pauseWorkflow", reason="Wait")]]},
        )
        paused = make_orchestrator(first).run_workflow("q")
        checkpoint = PausedState.from_json(paused.paused_state.to_json())

        second = FakeReasoningService()
        events = EventChannel("test")
        result = make_orchestrator(second).run_workflow(
            "continue", resume_state=checkpoint, events=events
        )

        assert [s.agent for s in second.sessions] == [AgentDomain.ENVIRONMENT]
        assert second.plan_contexts == []
        assert "[Paused Step EDUCATION]" in second.sessions[0].system_prompt
        prompt = second.synthesize_calls[0]["prompt"]
        assert "HEALTH Output: HEALTH output" in prompt
        assert "ENVIRONMENT Output: ENVIRONMENT output" in prompt
        assert result.execution_mode is ExecutionMode.SEQUENTIAL
        assert "System: Resuming suspended workflow..." in events.lines()

    def test_resume_at_end_goes_to_synthesis(self, make_orchestrator):
        """Resuming past the last step goes straight to synthesis."""
        checkpoint = PausedState(
            plan=make_plan(ExecutionMode.SEQUENTIAL, AgentDomain.HEALTH),
            step_index=1,
            accumulated_context="ctx",
            agent_outputs={},
        )
        reasoning = FakeReasoningService()
        result = make_orchestrator(reasoning).run_workflow("q", resume_state=checkpoint)

        assert reasoning.sessions == []
        assert len(reasoning.synthesize_calls) == 1
        assert result.is_paused is False

    def test_resume_non_sequential_rejected(self, make_orchestrator):
        """Only sequential checkpoints can be resumed."""
        checkpoint = PausedState(
            plan=make_plan(ExecutionMode.PARALLEL, AgentDomain.HEALTH),
            step_index=0,
        )
        reasoning = FakeReasoningService()
        with pytest.raises(ResumeError):
            make_orchestrator(reasoning).run_workflow("q", resume_state=checkpoint)
        assert reasoning.sessions == []


# ============================================================================
# TestLoopMode
# ============================================================================


class TestLoopMode:
    """Tests for the draft/critique/refine loop."""

    def test_three_calls(self, make_orchestrator):
        """Loop mode runs draft, critique and refine."""
        reasoning = FakeReasoningService(
            plan=make_plan(ExecutionMode.LOOP, AgentDomain.EDUCATION),
            scripts={
                AgentDomain.EDUCATION: [[AgentTurn(text="Draft v1")], [AgentTurn(text="Final v2")]],
                AgentDomain.ORCHESTRATOR: [[AgentTurn(text="Add examples")]],
            },
        )
        make_orchestrator(reasoning).run_workflow("teach me fractions")

        draft, critique, refine = reasoning.sessions
        assert (draft.agent, critique.agent, refine.agent) == (
            AgentDomain.EDUCATION,
            AgentDomain.ORCHESTRATOR,
            AgentDomain.EDUCATION,
        )
        assert critique.sent == ["Critique: Draft v1"]
        assert refine.sent == ["Refine based on: Add examples"]
        assert "Context: Draft: Draft v1" in refine.system_prompt
        prompt = reasoning.synthesize_calls[0]["prompt"]
        assert "EDUCATION Output: Final v2" in prompt
        assert "Draft v1" not in prompt


# ============================================================================
# TestRunSetup
# ============================================================================


class TestRunSetup:
    """Tests for credentials, compaction and evaluation wiring."""

    def test_missing_credential_fails_before_work(self, make_orchestrator, monkeypatch):
        """A missing key fails before any reasoning call."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        reasoning = FakeReasoningService()
        with pytest.raises(MissingCredentialError):
            make_orchestrator(reasoning, api_key=None).run_workflow("q")
        assert reasoning.plan_contexts == []

    def test_long_history_compacted(self, make_orchestrator):
        """Long history is summarized before planning."""
        turns = [ConversationTurn(role="user", text=f"t{i}") for i in range(7)]
        reasoning = FakeReasoningService(summary="Compact summary")
        make_orchestrator(reasoning).run_workflow("q", prior_turns=turns)

        assert len(reasoning.summarize_calls) == 1
        assert "Compact summary" in reasoning.plan_contexts[0]

    def test_short_history_verbatim(self, make_orchestrator):
        """Short history is passed through verbatim."""
        turns = [ConversationTurn(role="user", text=f"t{i}") for i in range(6)]
        reasoning = FakeReasoningService()
        make_orchestrator(reasoning).run_workflow("q", prior_turns=turns)

        assert reasoning.summarize_calls == []
        assert "USER: t5" in reasoning.plan_contexts[0]

    def test_synthesis_failure_fails_run(self, make_orchestrator):
        """A synthesis failure fails the run."""
        reasoning = FakeReasoningService(synthesis_error=RuntimeError("bad"))
        with pytest.raises(RuntimeError):
            make_orchestrator(reasoning).run_workflow("q")

    def test_scoring_failure_uses_default(self, make_orchestrator):
        """A scoring failure keeps the run with the default evaluation."""
        reasoning = FakeReasoningService(score_error=RuntimeError("down"))
        result = make_orchestrator(reasoning).run_workflow("q")
        assert result.evaluation.score == 8
        assert result.evaluation.feedback == "Evaluation service unavailable."

    def test_extended_reasoning_forwarded(self, make_orchestrator):
        """The extended reasoning flag reaches synthesis."""
        reasoning = FakeReasoningService()
        make_orchestrator(reasoning).run_workflow("q", use_extended_reasoning=True)
        assert reasoning.synthesize_calls[0]["extended_reasoning"] is True


# ============================================================================
# TestRouting
# ============================================================================


class TestRouting:
    """Tests for the routing functions."""

    def test_route_entry(self):
        """Entry routing chooses compaction or resume."""
        assert route_entry({"resume_state": None}) == "compact"
        checkpoint = PausedState(plan=_sequential_plan(), step_index=1)
        assert route_entry({"resume_state": checkpoint}) == "restore"

    def test_route_after_step(self):
        """Sequential routing advances, pauses or synthesizes."""
        plan = _sequential_plan()
        assert route_after_step({"paused_state": None, "step_index": 1, "plan": plan}) == "sequential_step"
        assert route_after_step({"paused_state": None, "step_index": 3, "plan": plan}) == "synthesize"
        checkpoint = PausedState(plan=plan, step_index=1)
        assert route_after_step({"paused_state": checkpoint, "step_index": 0, "plan": plan}) == "__end__"


# ============================================================================
# TestWorkflowConfig
# ============================================================================


class TestWorkflowConfig:
    """Tests for configuration overrides."""

    def test_defaults(self):
        """Omitted overrides keep the default configuration."""
        assert get_config() == DEFAULT_CONFIG

    def test_zero_overrides_are_kept(self):
        """An explicit zero is an override, not a request for the default."""
        config = get_config(max_tool_turns=0, recursion_limit=0, compaction_threshold=0)
        assert config.max_tool_turns == 0
        assert config.recursion_limit == 0
        assert config.compaction_threshold == 0
