"""Prompt templates and builders for the orchestrator and its agents."""

from nexus.prompts.templates import AGENT_PROMPTS
from nexus.prompts.builders import (
    build_agent_system_prompt,
    build_evaluation_prompt,
    build_planning_context,
    build_planning_prompt,
    build_summary_prompt,
    build_synthesis_system_prompt,
    build_synthesis_user_prompt,
    format_agent_outputs,
    format_transcript,
)

__all__ = [
    "AGENT_PROMPTS",
    "build_agent_system_prompt",
    "build_evaluation_prompt",
    "build_planning_context",
    "build_planning_prompt",
    "build_summary_prompt",
    "build_synthesis_system_prompt",
    "build_synthesis_user_prompt",
    "format_agent_outputs",
    "format_transcript",
]
