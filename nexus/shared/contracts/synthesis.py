"""
Synthesis output contract.

Defines the structured final answer produced by merging all agent
outputs, including the optional chart-ready series per domain.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Sentiment(str, Enum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"
    EMPATHETIC = "EMPATHETIC"


# Chart point fields are all optional; a partial point must not fail synthesis
class HealthPoint(BaseModel):
    time: Optional[str] = None
    heart_rate: Optional[float] = None
    stress: Optional[float] = None


class EnvironmentPoint(BaseModel):
    day: Optional[str] = None
    aqi: Optional[float] = None
    pollen: Optional[float] = None


class EducationPoint(BaseModel):
    subject: Optional[str] = None
    progress: Optional[float] = None
    focus: Optional[float] = None


class ChartData(BaseModel):
    """Chart-ready numeric series, one optional list per domain."""

    health: Optional[List[HealthPoint]] = None
    env: Optional[List[EnvironmentPoint]] = None
    edu: Optional[List[EducationPoint]] = None


class SynthesisResult(BaseModel):
    """
    Contract for the synthesizer output.

    cross_domain_insight connects findings from at least two agent
    domains to the user profile.
    """

    response: str = Field(description="Final consolidated response to the user")
    sentiment: Sentiment = Field(description="Overall tone of the response")
    cross_domain_insight: Optional[str] = Field(
        default=None,
        description="Insight connecting 2+ domains, personalized to the user",
    )
    suggested_action: Optional[str] = Field(
        default=None, description="One concrete next step for the user"
    )
    tool_calls: List[str] = Field(
        default_factory=list, description="Tools used during execution"
    )
    chart_data: Optional[ChartData] = Field(
        default=None, description="Optional chart-ready series per domain"
    )
