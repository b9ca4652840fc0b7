"""
Prompt builders.

These functions construct the actual prompts sent to the reasoning
service from the current run state.
"""

from typing import Dict, Iterable, List

from nexus.prompts.templates import (
    AGENT_PROMPTS,
    AGENT_SYSTEM_PROMPT_TEMPLATE,
    EVALUATION_PROMPT_TEMPLATE,
    PLANNING_CONTEXT_TEMPLATE,
    PLANNING_PROMPT_TEMPLATE,
    SUMMARY_PROMPT_TEMPLATE,
    SYNTHESIS_SYSTEM_TEMPLATE,
    SYNTHESIS_USER_TEMPLATE,
)
from nexus.shared.contracts.conversation import ConversationTurn
from nexus.shared.contracts.plan import AgentDomain


def build_agent_system_prompt(
    agent: AgentDomain, context: str, language: str, memory_context: str
) -> str:
    """
    Build the persona system prompt for one agent session.

    Args:
        agent: Persona to run
        context: Running context (query, history, previous step outputs)
        language: Target response language
        memory_context: Formatted memory bank snapshot

    Returns:
        Complete system prompt string
    """
    return AGENT_SYSTEM_PROMPT_TEMPLATE.format(
        persona=AGENT_PROMPTS[agent],
        context=context,
        language=language,
        memory=memory_context,
    )


def build_planning_context(prompt: str, context_summary: str, memory_context: str) -> str:
    """Concatenate the request, compacted history and profile into one planning context."""
    return PLANNING_CONTEXT_TEMPLATE.format(
        context_summary=context_summary,
        prompt=prompt,
        memory_context=memory_context,
    )


def build_planning_prompt(context: str) -> str:
    return PLANNING_PROMPT_TEMPLATE.format(context=context)


def format_transcript(turns: Iterable[ConversationTurn]) -> str:
    """Render turns verbatim as 'ROLE: text' lines."""
    return "\n".join(turn.as_line() for turn in turns)


def build_summary_prompt(transcript: str) -> str:
    return SUMMARY_PROMPT_TEMPLATE.format(transcript=transcript)


def format_agent_outputs(agent_outputs: Dict[AgentDomain, str]) -> str:
    """Label each agent output with its domain, blank line between agents."""
    return "\n\n".join(
        f"{AgentDomain(agent).value} Output: {output}"
        for agent, output in agent_outputs.items()
    )


def build_synthesis_system_prompt(tool_usage: List[str], language: str) -> str:
    return SYNTHESIS_SYSTEM_TEMPLATE.format(
        tools_used=", ".join(tool_usage),
        language=language,
    )


def build_synthesis_user_prompt(
    prompt: str,
    agent_outputs: Dict[AgentDomain, str],
    context_summary: str,
    memory_context: str,
) -> str:
    return SYNTHESIS_USER_TEMPLATE.format(
        prompt=prompt,
        results=format_agent_outputs(agent_outputs),
        context_summary=context_summary,
        memory_context=memory_context,
    )


def build_evaluation_prompt(query: str, response: str) -> str:
    return EVALUATION_PROMPT_TEMPLATE.format(query=query, response=response)
