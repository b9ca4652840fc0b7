"""
OpenAI client with retry logic.

Provides a cached client instance and wrappers for chat completion calls
with automatic retries using tenacity.
"""

import os
from typing import Any, Dict, List, Optional

from openai import OpenAI
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
from dotenv import load_dotenv
load_dotenv()

API_KEY_ENV = "OPENAI_API_KEY"

# Module-level cache of OpenAI clients, keyed by API key
_clients: Dict[str, OpenAI] = {}


class MissingCredentialError(ValueError):
    """Raised before any work starts when no API key is configured."""

    pass


def get_api_key() -> Optional[str]:
    """Return the configured API key, or None when it is unset or blank."""
    api_key = os.environ.get(API_KEY_ENV, "").strip()
    return api_key or None


def require_api_key(api_key: Optional[str] = None) -> str:
    """
    Resolve an API key or fail fast.

    Args:
        api_key: Explicit key. Falls back to the OPENAI_API_KEY environment variable.

    Returns:
        The resolved key.

    Raises:
        MissingCredentialError: If no key is available.
    """
    resolved = api_key or get_api_key()
    if not resolved:
        raise MissingCredentialError(
            f"{API_KEY_ENV} environment variable is not set. "
            "Please set it to your OpenAI API key."
        )
    return resolved


def get_cached_client(api_key: Optional[str] = None) -> OpenAI:
    """
    Returns a cached OpenAI client for the resolved API key.

    One client is created per distinct key and reused for all subsequent
    calls with that key.
    """
    resolved = require_api_key(api_key)
    if resolved not in _clients:
        _clients[resolved] = OpenAI(api_key=resolved)
    return _clients[resolved]


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type((Exception,)),
    reraise=True,
)
def call_llm(
    messages: List[Dict[str, Any]],
    model: str = "gpt-4.1-mini",
    client: Optional[OpenAI] = None,
    json_mode: bool = False,
    **options: Any,
) -> str:
    """
    Call the OpenAI Chat Completion API with automatic retries.

    Args:
        messages: List of message dicts with 'role' and 'content' keys
        model: Model identifier to use (default: gpt-4.1-mini)
        client: Optional OpenAI client instance. If not provided, uses cached client.
        json_mode: Ask the model for a single JSON object
        **options: Extra request parameters (e.g. reasoning_effort)

    Returns:
        The assistant's response content as a string.

    Raises:
        Exception: If all retry attempts fail.
    """
    if client is None:
        client = get_cached_client()

    if json_mode:
        options["response_format"] = {"type": "json_object"}

    response = client.chat.completions.create(
        model=model,
        messages=messages,
        **options,
    )

    return (response.choices[0].message.content or "").strip()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type((Exception,)),
    reraise=True,
)
def call_llm_with_tools(
    messages: List[Dict[str, Any]],
    tools: List[Dict[str, Any]],
    model: str = "gpt-4.1-mini",
    client: Optional[OpenAI] = None,
    **options: Any,
):
    """
    Call the Chat Completion API with function tools and return the message.

    Parallel tool calls are disabled so that at most one call is pending
    per turn; the agent loop resolves calls one at a time.

    Args:
        messages: Conversation so far, including tool results
        tools: Function tool declarations
        model: Model identifier to use
        client: Optional OpenAI client instance. If not provided, uses cached client.
        **options: Extra request parameters (e.g. web_search_options)

    Returns:
        The assistant message object of the first choice.
    """
    if client is None:
        client = get_cached_client()

    if tools:
        options["tools"] = tools
        options["parallel_tool_calls"] = False

    response = client.chat.completions.create(
        model=model,
        messages=messages,
        **options,
    )

    return response.choices[0].message


def get_llm_response(
    client: OpenAI,
    user_prompt: str,
    system_prompt: Optional[str] = None,
    model: str = "gpt-4.1-mini",
    json_mode: bool = False,
    **options: Any,
) -> str:
    """
    Single-turn helper: system + user message in, text out.

    Args:
        client: OpenAI client instance
        user_prompt: The user message content
        system_prompt: Optional system message content
        model: Model identifier to use
        json_mode: Ask the model for a single JSON object

    Returns:
        The assistant's response content as a string.
    """
    messages: List[Dict[str, Any]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": user_prompt})
    return call_llm(messages, model=model, client=client, json_mode=json_mode, **options)
