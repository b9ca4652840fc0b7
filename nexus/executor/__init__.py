"""
Agent executor: persona sessions with a bounded tool-calling loop.
"""

from nexus.executor.agent import AgentExecutionResult, AgentExecutor
from nexus.executor.records import RecordFetcher, SimulatedRecordFetcher
from nexus.executor.tools import TOOL_DECLARATIONS, ToolName, dispatch_tool

__all__ = [
    "AgentExecutionResult",
    "AgentExecutor",
    "RecordFetcher",
    "SimulatedRecordFetcher",
    "TOOL_DECLARATIONS",
    "ToolName",
    "dispatch_tool",
]
