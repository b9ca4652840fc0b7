"""
Agent tool set and dispatch table.

Client-side tools are resolved through a closed table keyed by ToolName.
A call whose name is not in the table resolves to an explicit
UNRECOGNIZED outcome, which the agent loop treats as a stop signal.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from nexus.executor.records import FETCH_MEDICAL_RECORDS, RecordFetcher
from nexus.memory.bank import MemoryBank, apply_memory_update
from nexus.shared.llm.reasoning import FunctionCall


logger = logging.getLogger(__name__)

# Built-in tool signals, resolved by the reasoning service itself
WEB_SEARCH = "webSearch"
CODE_EXECUTION = "codeExecution"


class ToolName(str, Enum):
    FETCH_MEDICAL_RECORDS = FETCH_MEDICAL_RECORDS
    UPDATE_MEMORY = "updateMemory"
    PAUSE_WORKFLOW = "pauseWorkflow"


TOOL_DECLARATIONS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": ToolName.FETCH_MEDICAL_RECORDS.value,
            "description": "Fetches patient electronic medical records via simulated OpenAPI endpoint.",
            "parameters": {
                "type": "object",
                "properties": {
                    "patientId": {
                        "type": "string",
                        "description": "The ID or name of the patient",
                    }
                },
                "required": ["patientId"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": ToolName.PAUSE_WORKFLOW.value,
            "description": "Pauses the current multi-agent workflow to wait for user confirmation or external events.",
            "parameters": {
                "type": "object",
                "properties": {
                    "reason": {
                        "type": "string",
                        "description": "Why the workflow is pausing",
                    }
                },
                "required": ["reason"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": ToolName.UPDATE_MEMORY.value,
            "description": "Updates the user's long-term memory bank with new personal facts.",
            "parameters": {
                "type": "object",
                "properties": {
                    "category": {
                        "type": "string",
                        "enum": ["health", "education", "environment", "profile", "note"],
                    },
                    "item": {
                        "type": "string",
                        "description": "The specific fact to store.",
                    },
                },
                "required": ["category", "item"],
            },
        },
    },
]


class OutcomeKind(str, Enum):
    RESPOND = "respond"
    PAUSE = "pause"
    UNRECOGNIZED = "unrecognized"


@dataclass
class ToolOutcome:
    """Result of dispatching one tool call."""

    kind: OutcomeKind
    response: Dict[str, Any] = field(default_factory=dict)
    pause_reason: Optional[str] = None


@dataclass
class ToolContext:
    """Collaborators reachable from tool handlers."""

    memory: MemoryBank
    record_fetcher: RecordFetcher


ToolHandler = Callable[[ToolContext, Dict[str, Any]], ToolOutcome]


def _pause_workflow(ctx: ToolContext, args: Dict[str, Any]) -> ToolOutcome:
    return ToolOutcome(kind=OutcomeKind.PAUSE, pause_reason=str(args.get("reason", "")))


def _fetch_medical_records(ctx: ToolContext, args: Dict[str, Any]) -> ToolOutcome:
    result = ctx.record_fetcher.fetch(FETCH_MEDICAL_RECORDS, args)
    return ToolOutcome(kind=OutcomeKind.RESPOND, response={"result": result})


def _update_memory(ctx: ToolContext, args: Dict[str, Any]) -> ToolOutcome:
    apply_memory_update(ctx.memory, str(args.get("category", "note")), str(args.get("item", "")))
    return ToolOutcome(
        kind=OutcomeKind.RESPOND,
        response={"result": {"status": "success", "message": "Memory updated."}},
    )


TOOL_HANDLERS: Dict[ToolName, ToolHandler] = {
    ToolName.PAUSE_WORKFLOW: _pause_workflow,
    ToolName.FETCH_MEDICAL_RECORDS: _fetch_medical_records,
    ToolName.UPDATE_MEMORY: _update_memory,
}


def dispatch_tool(call: FunctionCall, ctx: ToolContext) -> ToolOutcome:
    """
    Resolve one tool call through the dispatch table.

    Args:
        call: Tool call requested by the model
        ctx: Collaborators for the handlers

    Returns:
        ToolOutcome; UNRECOGNIZED if the tool name is not in the table.
    """
    try:
        name = ToolName(call.name)
    except ValueError:
        logger.warning(f"Unrecognized tool call '{call.name}', no response will be sent")
        return ToolOutcome(kind=OutcomeKind.UNRECOGNIZED)
    return TOOL_HANDLERS[name](ctx, call.args)
