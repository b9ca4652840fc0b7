"""
Workflow configuration.

Centralizes all configuration options for the orchestrator workflow,
making it easy to tune behavior without modifying the graph wiring.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class WorkflowConfig:
    """
    Configuration for the orchestrator workflow.

    Attributes:
        recursion_limit: Maximum number of graph steps per run
        max_tool_turns: Resolved tool calls allowed per agent invocation
        compaction_threshold: Prior-turn count above which history is summarized
        planner_model: Model for planning, summarization and scoring
        agent_model: Model for agent sessions and default synthesis
        extended_reasoning_model: Synthesis model when extended reasoning is on
        enable_web_search: Request built-in web search in agent sessions
        record_fetch_latency_s: Simulated latency of the records API
        memory_path: JSON file backing the memory bank (in-memory if None)
        default_language: Response language when the caller gives none
    """

    # Graph execution limits
    recursion_limit: int = 50

    # Agent loop
    max_tool_turns: int = 5

    # Context engineering
    compaction_threshold: int = 6

    # LLM configuration
    planner_model: str = "gpt-4.1-mini"
    agent_model: str = "gpt-4.1-mini"
    extended_reasoning_model: str = "o4-mini"
    enable_web_search: bool = False

    # Collaborators
    record_fetch_latency_s: float = 0.5
    memory_path: Optional[str] = None

    default_language: str = "en-US"


# Default configuration instance
DEFAULT_CONFIG = WorkflowConfig()


def get_config(
    recursion_limit: Optional[int] = None,
    max_tool_turns: Optional[int] = None,
    compaction_threshold: Optional[int] = None,
    agent_model: Optional[str] = None,
    record_fetch_latency_s: Optional[float] = None,
    memory_path: Optional[str] = None,
) -> WorkflowConfig:
    """
    Create a configuration with optional overrides.

    Args:
        recursion_limit: Override for recursion limit
        max_tool_turns: Override for the agent tool-turn cap
        compaction_threshold: Override for the compaction threshold
        agent_model: Override for the agent model
        record_fetch_latency_s: Override for simulated records latency
        memory_path: Override for the memory bank file

    Returns:
        WorkflowConfig with specified overrides applied
    """
    return WorkflowConfig(
        recursion_limit=recursion_limit
        if recursion_limit is not None
        else DEFAULT_CONFIG.recursion_limit,
        max_tool_turns=max_tool_turns
        if max_tool_turns is not None
        else DEFAULT_CONFIG.max_tool_turns,
        compaction_threshold=compaction_threshold
        if compaction_threshold is not None
        else DEFAULT_CONFIG.compaction_threshold,
        agent_model=agent_model or DEFAULT_CONFIG.agent_model,
        record_fetch_latency_s=record_fetch_latency_s
        if record_fetch_latency_s is not None
        else DEFAULT_CONFIG.record_fetch_latency_s,
        memory_path=memory_path or DEFAULT_CONFIG.memory_path,
    )
