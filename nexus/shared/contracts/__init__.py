"""Contracts exchanged between the planner, dispatcher, agents and caller."""

from nexus.shared.contracts.plan import (
    AgentDomain,
    ExecutionMode,
    PLANNABLE_MODES,
    Plan,
    PlanStep,
)
from nexus.shared.contracts.paused_state import PausedState
from nexus.shared.contracts.conversation import ConversationTurn
from nexus.shared.contracts.synthesis import ChartData, Sentiment, SynthesisResult
from nexus.shared.contracts.evaluation import EvaluationResult, Metric, ScoreVerdict
from nexus.shared.contracts.result import WorkflowResult

__all__ = [
    "AgentDomain",
    "ExecutionMode",
    "PLANNABLE_MODES",
    "Plan",
    "PlanStep",
    "PausedState",
    "ConversationTurn",
    "ChartData",
    "Sentiment",
    "SynthesisResult",
    "EvaluationResult",
    "Metric",
    "ScoreVerdict",
    "WorkflowResult",
]
