"""
Shared infrastructure for the orchestrator and its agents.

Modules:
- llm: OpenAI client with retry logic and the reasoning service interface
- logging: Structured JSON logging and the workflow event channel
- contracts: Plan, checkpoint, synthesis and evaluation contracts
- tracing: Process-wide metric recorder
"""

from nexus.shared.llm.client import get_cached_client, call_llm
from nexus.shared.logging.config import setup_logging, log_state_transition

__all__ = [
    "get_cached_client",
    "call_llm",
    "setup_logging",
    "log_state_transition",
]
