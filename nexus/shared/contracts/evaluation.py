"""
Evaluation and metric contracts.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class ScoreVerdict(BaseModel):
    """Raw verdict returned by the scoring call."""

    score: float = Field(ge=0, le=10, description="Quality score from 0 to 10")
    feedback: str = Field(description="Brief feedback on relevance and completeness")


class EvaluationResult(BaseModel):
    """Post-hoc quality evaluation of a final response."""

    score: float = Field(ge=0, le=10)
    feedback: str
    latency_ms: int = Field(ge=0)
    token_cost: int = Field(ge=0, description="Approximation: response length / 4")

    @classmethod
    def unavailable(cls) -> "EvaluationResult":
        """Safe default returned whenever scoring fails."""
        return cls(
            score=8,
            feedback="Evaluation service unavailable.",
            latency_ms=0,
            token_cost=0,
        )


class Metric(BaseModel):
    """A timestamped numeric measurement. Immutable once recorded."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: float
    unit: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
