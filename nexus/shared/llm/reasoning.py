"""
Reasoning service interface and its OpenAI implementation.

The orchestrator talks to the reasoning collaborator only through
ReasoningService: structured planning, tool-enabled chat sessions,
summarization, synthesis and scoring. Tests substitute a scripted fake.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import OpenAI

from nexus.prompts.builders import (
    build_evaluation_prompt,
    build_planning_prompt,
    build_summary_prompt,
)
from nexus.shared.contracts.evaluation import ScoreVerdict
from nexus.shared.contracts.plan import Plan
from nexus.shared.contracts.synthesis import SynthesisResult
from nexus.shared.llm.client import (
    call_llm,
    call_llm_with_tools,
    get_cached_client,
    get_llm_response,
)
from nexus.shared.llm.parsing import parse_structured_response


logger = logging.getLogger(__name__)


@dataclass
class FunctionCall:
    """A tool call requested by the model."""

    name: str
    args: Dict[str, Any] = field(default_factory=dict)
    call_id: Optional[str] = None


@dataclass
class AgentTurn:
    """
    One model response inside an agent chat session.

    used_search and used_code_execution report built-in tool signals that
    the reasoning service resolved on its own.
    """

    text: Optional[str] = None
    function_calls: List[FunctionCall] = field(default_factory=list)
    used_search: bool = False
    used_code_execution: bool = False


class ChatSession(ABC):
    """A stateful, tool-enabled conversation with one persona."""

    @abstractmethod
    def send(self, message: str) -> AgentTurn:
        """Send a user message and return the model's turn."""

    @abstractmethod
    def send_function_response(self, call: FunctionCall, response: Dict[str, Any]) -> AgentTurn:
        """Resolve a pending tool call and return the model's next turn."""


class ReasoningService(ABC):
    """Capability contract the orchestrator requires from the reasoning collaborator."""

    @abstractmethod
    def plan(self, context: str) -> Plan:
        """Choose an execution mode and steps for the planning context."""

    @abstractmethod
    def start_chat(self, system_prompt: str, tools: List[Dict[str, Any]]) -> ChatSession:
        """Open a chat session configured with a persona prompt and tool set."""

    @abstractmethod
    def summarize(self, transcript: str) -> str:
        """Summarize a conversation transcript into retained facts and goals."""

    @abstractmethod
    def synthesize(
        self, prompt: str, system_prompt: str, extended_reasoning: bool = False
    ) -> SynthesisResult:
        """Merge agent outputs into the structured final answer."""

    @abstractmethod
    def score(self, query: str, response: str) -> ScoreVerdict:
        """Score a response 0-10 for relevance, accuracy and safety."""

    @property
    def agent_model(self) -> str:
        """Model name reported when an agent session is initialized."""
        return "unknown"


# ============================================================================
# OpenAI implementation
# ============================================================================


def _assistant_entry(message) -> Dict[str, Any]:
    """Convert an assistant message back into a request message dict."""
    entry: Dict[str, Any] = {"role": "assistant", "content": message.content or ""}
    if message.tool_calls:
        entry["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {
                    "name": call.function.name,
                    "arguments": call.function.arguments,
                },
            }
            for call in message.tool_calls
        ]
    return entry


def _parse_arguments(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Discarding malformed tool arguments: {raw[:200]}")
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _to_agent_turn(message) -> AgentTurn:
    calls = [
        FunctionCall(
            name=call.function.name,
            args=_parse_arguments(call.function.arguments),
            call_id=call.id,
        )
        for call in (message.tool_calls or [])
    ]
    annotations = getattr(message, "annotations", None) or []
    used_search = any(getattr(a, "type", None) == "url_citation" for a in annotations)
    # Chat Completions exposes no code-interpreter signal
    return AgentTurn(
        text=message.content,
        function_calls=calls,
        used_search=used_search,
        used_code_execution=False,
    )


class OpenAIChatSession(ChatSession):
    """Chat session that keeps the message history client-side."""

    def __init__(
        self,
        client: OpenAI,
        model: str,
        system_prompt: str,
        tools: List[Dict[str, Any]],
        options: Optional[Dict[str, Any]] = None,
    ):
        self._client = client
        self._model = model
        self._tools = tools
        self._options = options or {}
        self.messages: List[Dict[str, Any]] = [
            {"role": "system", "content": system_prompt}
        ]

    def _complete(self) -> AgentTurn:
        message = call_llm_with_tools(
            self.messages,
            self._tools,
            model=self._model,
            client=self._client,
            **dict(self._options),
        )
        self.messages.append(_assistant_entry(message))
        return _to_agent_turn(message)

    def send(self, message: str) -> AgentTurn:
        self.messages.append({"role": "user", "content": message})
        return self._complete()

    def send_function_response(self, call: FunctionCall, response: Dict[str, Any]) -> AgentTurn:
        self.messages.append(
            {
                "role": "tool",
                "tool_call_id": call.call_id,
                "content": json.dumps(response, ensure_ascii=False),
            }
        )
        return self._complete()


class OpenAIReasoningService(ReasoningService):
    """
    ReasoningService backed by the OpenAI Chat Completions API.

    Args:
        client: OpenAI client. Uses the cached client if not provided.
        api_key: Key for the cached client (falls back to OPENAI_API_KEY)
        planner_model: Model for planning, summarization and scoring
        agent_model: Model for agent chat sessions and default synthesis
        extended_reasoning_model: Model used for synthesis when extended reasoning is on
        enable_web_search: Request built-in web search for agent sessions
            (requires a search-capable agent model)
    """

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        api_key: Optional[str] = None,
        planner_model: str = "gpt-4.1-mini",
        agent_model: str = "gpt-4.1-mini",
        extended_reasoning_model: str = "o4-mini",
        enable_web_search: bool = False,
    ):
        self._client = client
        self._api_key = api_key
        self.planner_model = planner_model
        self._agent_model = agent_model
        self.extended_reasoning_model = extended_reasoning_model
        self.enable_web_search = enable_web_search

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = get_cached_client(self._api_key)
        return self._client

    @property
    def agent_model(self) -> str:
        return self._agent_model

    def plan(self, context: str) -> Plan:
        raw = get_llm_response(
            self.client,
            build_planning_prompt(context),
            model=self.planner_model,
            json_mode=True,
        )
        return parse_structured_response(raw, Plan)

    def start_chat(self, system_prompt: str, tools: List[Dict[str, Any]]) -> ChatSession:
        options: Dict[str, Any] = {}
        if self.enable_web_search:
            options["web_search_options"] = {}
        return OpenAIChatSession(
            self.client, self._agent_model, system_prompt, tools, options
        )

    def summarize(self, transcript: str) -> str:
        return get_llm_response(
            self.client,
            build_summary_prompt(transcript),
            model=self.planner_model,
        )

    def synthesize(
        self, prompt: str, system_prompt: str, extended_reasoning: bool = False
    ) -> SynthesisResult:
        options: Dict[str, Any] = {}
        model = self._agent_model
        if extended_reasoning:
            model = self.extended_reasoning_model
            options["reasoning_effort"] = "high"

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]
        raw = call_llm(messages, model=model, client=self.client, json_mode=True, **options)
        return parse_structured_response(raw, SynthesisResult)

    def score(self, query: str, response: str) -> ScoreVerdict:
        raw = get_llm_response(
            self.client,
            build_evaluation_prompt(query, response),
            model=self.planner_model,
            json_mode=True,
        )
        return parse_structured_response(raw, ScoreVerdict)
