"""LLM client utilities and the reasoning service interface."""

from nexus.shared.llm.client import (
    MissingCredentialError,
    call_llm,
    get_cached_client,
    require_api_key,
)
from nexus.shared.llm.parsing import ParseError, parse_structured_response
from nexus.shared.llm.reasoning import (
    AgentTurn,
    ChatSession,
    FunctionCall,
    OpenAIReasoningService,
    ReasoningService,
)

__all__ = [
    "MissingCredentialError",
    "call_llm",
    "get_cached_client",
    "require_api_key",
    "ParseError",
    "parse_structured_response",
    "AgentTurn",
    "ChatSession",
    "FunctionCall",
    "OpenAIReasoningService",
    "ReasoningService",
]
