"""
Workflow result contract returned by the entry point.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from nexus.shared.contracts.evaluation import EvaluationResult, Metric
from nexus.shared.contracts.paused_state import PausedState
from nexus.shared.contracts.plan import AgentDomain, ExecutionMode
from nexus.shared.contracts.synthesis import ChartData, Sentiment


class WorkflowResult(BaseModel):
    """
    Outcome of one run.

    A paused run carries paused_state and no evaluation; a completed run
    carries the synthesis fields and its evaluation.
    """

    response: str
    sentiment: Sentiment
    cross_domain_insight: Optional[str] = None
    suggested_action: Optional[str] = None
    tool_calls: List[str] = Field(default_factory=list)
    chart_data: Optional[ChartData] = None
    active_agents: List[AgentDomain] = Field(default_factory=list)
    execution_mode: ExecutionMode
    reasoning: Optional[str] = None
    paused_state: Optional[PausedState] = None
    evaluation: Optional[EvaluationResult] = None
    metrics: List[Metric] = Field(default_factory=list)

    @property
    def is_paused(self) -> bool:
        return self.paused_state is not None
