"""
Synthesizer: merges all agent outputs into one final answer.

Errors are not recovered here; a failed synthesis fails the run.
"""

import logging
from typing import Dict, List

from nexus.prompts.builders import (
    build_synthesis_system_prompt,
    build_synthesis_user_prompt,
)
from nexus.shared.contracts.plan import AgentDomain
from nexus.shared.contracts.synthesis import SynthesisResult
from nexus.shared.llm.reasoning import ReasoningService


logger = logging.getLogger(__name__)


def synthesize_response(
    reasoning: ReasoningService,
    prompt: str,
    agent_outputs: Dict[AgentDomain, str],
    context_summary: str,
    memory_context: str,
    tool_usage: List[str],
    language: str,
    extended_reasoning: bool = False,
) -> SynthesisResult:
    """
    Build the synthesis prompts and call the reasoning service once.

    Args:
        reasoning: Reasoning collaborator
        prompt: Original user request
        agent_outputs: Outputs labeled by domain
        context_summary: Compacted prior conversation
        memory_context: Formatted memory bank snapshot
        tool_usage: Tools actually used during the run
        language: Target response language
        extended_reasoning: Use the extended reasoning model

    Returns:
        The structured final answer.
    """
    system_prompt = build_synthesis_system_prompt(tool_usage, language)
    user_prompt = build_synthesis_user_prompt(
        prompt, agent_outputs, context_summary, memory_context
    )
    result = reasoning.synthesize(user_prompt, system_prompt, extended_reasoning)
    logger.info(
        f"Synthesis complete | sentiment={result.sentiment.value}, "
        f"agents={len(agent_outputs)}, tools={len(tool_usage)}"
    )
    return result
