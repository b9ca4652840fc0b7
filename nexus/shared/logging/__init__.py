"""Logging configuration and the workflow event channel."""

from nexus.shared.logging.config import (
    StructuredFormatter,
    log_state_transition,
    setup_logging,
    summarize_state,
)
from nexus.shared.logging.events import EventChannel, WorkflowEvent

__all__ = [
    "setup_logging",
    "log_state_transition",
    "StructuredFormatter",
    "summarize_state",
    "EventChannel",
    "WorkflowEvent",
]
