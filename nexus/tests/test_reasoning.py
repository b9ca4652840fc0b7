"""
Tests for the OpenAI-backed reasoning service.

Uses a stub client whose chat.completions.create records each request and
returns canned assistant messages, so no network calls are made.
"""

import json
from types import SimpleNamespace

import pytest

from nexus.shared.contracts.plan import AgentDomain, ExecutionMode
from nexus.shared.contracts.synthesis import Sentiment
from nexus.shared.llm.reasoning import FunctionCall, OpenAIReasoningService


TOOLS = [
    {
        "type": "function",
        "function": {
            "name": "fetchMedicalRecords",
            "parameters": {"type": "object", "properties": {"patientId": {"type": "string"}}},
        },
    }
]


class StubCompletions:
    def __init__(self, replies):
        self._replies = list(replies)
        self.requests = []

    def create(self, **kwargs):
        # Snapshot the history; the session keeps appending to the same list
        kwargs["messages"] = list(kwargs["messages"])
        self.requests.append(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=self._replies.pop(0))])


def _message(content=None, tool_calls=None, annotations=None):
    return SimpleNamespace(content=content, tool_calls=tool_calls, annotations=annotations)


def _tool_call(name, arguments, call_id="call_1"):
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


def _make_service(*replies, **kwargs):
    completions = StubCompletions(replies)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIReasoningService(client=client, **kwargs), completions


# ============================================================================
# TestOpenAIChatSession
# ============================================================================


class TestOpenAIChatSession:
    """Tests for tool-enabled chat sessions."""

    def test_tool_call_mapped_to_function_call(self):
        """Tool calls become FunctionCalls carrying the call id."""
        service, completions = _make_service(
            _message(tool_calls=[_tool_call("fetchMedicalRecords", '{"patientId": "p1"}')]),
            agent_model="agent-model",
        )
        session = service.start_chat("You are a health agent.", TOOLS)

        turn = session.send("Check my vitals")

        assert turn.function_calls == [
            FunctionCall(name="fetchMedicalRecords", args={"patientId": "p1"}, call_id="call_1")
        ]
        assert turn.used_search is False
        assert turn.used_code_execution is False

        request = completions.requests[0]
        assert request["model"] == "agent-model"
        assert request["tools"] == TOOLS
        assert request["parallel_tool_calls"] is False
        assert "web_search_options" not in request
        assert request["messages"] == [
            {"role": "system", "content": "You are a health agent."},
            {"role": "user", "content": "Check my vitals"},
        ]

    @pytest.mark.parametrize("arguments", ["{not json", "[1, 2]", '"text"', "", None])
    def test_malformed_arguments_become_empty(self, arguments):
        """Unparseable or non-object tool arguments are replaced with {}."""
        service, _ = _make_service(
            _message(tool_calls=[_tool_call("fetchMedicalRecords", arguments)])
        )
        turn = service.start_chat("persona", TOOLS).send("hi")
        assert turn.function_calls[0].args == {}

    def test_url_citation_reports_search(self):
        """A url_citation annotation marks the turn as grounded by search."""
        service, _ = _make_service(
            _message(
                content="AQI is 40.",
                annotations=[SimpleNamespace(type="url_citation")],
            )
        )
        turn = service.start_chat("persona", TOOLS).send("AQI?")

        assert turn.text == "AQI is 40."
        assert turn.used_search is True
        assert turn.function_calls == []

    def test_function_response_carries_call_id(self):
        """The tool result answers the assistant call with the same id."""
        service, completions = _make_service(
            _message(tool_calls=[_tool_call("fetchMedicalRecords", '{"patientId": "p1"}', "call_7")]),
            _message(content="Your records look fine."),
        )
        session = service.start_chat("persona", TOOLS)
        call = session.send("Check my records").function_calls[0]

        turn = session.send_function_response(call, {"status": 200, "data": "ok"})

        assert turn.text == "Your records look fine."
        history = completions.requests[1]["messages"]
        assert history[2] == {
            "role": "assistant",
            "content": "",
            "tool_calls": [
                {
                    "id": "call_7",
                    "type": "function",
                    "function": {
                        "name": "fetchMedicalRecords",
                        "arguments": '{"patientId": "p1"}',
                    },
                }
            ],
        }
        assert history[3]["role"] == "tool"
        assert history[3]["tool_call_id"] == "call_7"
        assert json.loads(history[3]["content"]) == {"status": 200, "data": "ok"}
        assert session.messages[-1] == {"role": "assistant", "content": "Your records look fine."}

    def test_web_search_option(self):
        """Enabling web search requests it on every agent turn."""
        service, completions = _make_service(_message(content="ok"), enable_web_search=True)
        service.start_chat("persona", TOOLS).send("hi")
        assert completions.requests[0]["web_search_options"] == {}


# ============================================================================
# TestOpenAIReasoningService
# ============================================================================


class TestOpenAIReasoningService:
    """Tests for planning, synthesis, summarization and scoring requests."""

    SYNTHESIS = json.dumps(
        {"response": "All good.", "sentiment": "POSITIVE", "tool_calls": ["webSearch"]}
    )

    def test_plan(self):
        """Planning uses the planner model in JSON mode and parses the plan."""
        reply = {
            "mode": "PARALLEL",
            "reasoning": "independent",
            "steps": [
                {"agent": "HEALTH", "instruction": "Check run"},
                {"agent": "ENVIRONMENT", "instruction": "Check AQI"},
            ],
        }
        service, completions = _make_service(
            _message(content=json.dumps(reply)), planner_model="planner-model"
        )

        plan = service.plan("Current Request: Run and AQI?")

        assert plan.mode is ExecutionMode.PARALLEL
        assert [s.agent for s in plan.steps] == [AgentDomain.HEALTH, AgentDomain.ENVIRONMENT]
        request = completions.requests[0]
        assert request["model"] == "planner-model"
        assert request["response_format"] == {"type": "json_object"}

    def test_synthesize_uses_agent_model(self):
        """Default synthesis runs on the agent model without extra reasoning."""
        service, completions = _make_service(
            _message(content=self.SYNTHESIS),
            agent_model="agent-model",
            extended_reasoning_model="reasoning-model",
        )

        result = service.synthesize("Agent outputs", "You are the synthesizer.")

        assert result.sentiment is Sentiment.POSITIVE
        assert result.tool_calls == ["webSearch"]
        request = completions.requests[0]
        assert request["model"] == "agent-model"
        assert "reasoning_effort" not in request
        assert request["response_format"] == {"type": "json_object"}
        assert request["messages"] == [
            {"role": "system", "content": "You are the synthesizer."},
            {"role": "user", "content": "Agent outputs"},
        ]

    def test_synthesize_extended_reasoning(self):
        """Extended reasoning switches model and asks for high effort."""
        service, completions = _make_service(
            _message(content=self.SYNTHESIS),
            agent_model="agent-model",
            extended_reasoning_model="reasoning-model",
        )

        service.synthesize("Agent outputs", "sys", extended_reasoning=True)

        request = completions.requests[0]
        assert request["model"] == "reasoning-model"
        assert request["reasoning_effort"] == "high"

    def test_summarize_returns_text(self):
        """Summaries come back as stripped plain text."""
        service, completions = _make_service(_message(content="  User wants sleep tips.\n"))

        assert service.summarize("USER: hi") == "User wants sleep tips."
        assert "response_format" not in completions.requests[0]

    def test_score(self):
        """Scoring parses the verdict from JSON."""
        service, _ = _make_service(_message(content='{"score": 7, "feedback": "Decent."}'))

        verdict = service.score("q", "a")

        assert verdict.score == 7
        assert verdict.feedback == "Decent."
