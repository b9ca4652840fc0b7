"""
Execution plan contract.

Defines the agent domains, execution modes and the structured plan that
the planner hands to the mode dispatcher.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator


class AgentDomain(str, Enum):
    """Persona identifiers. Also used as keys for agent outputs."""

    HEALTH = "HEALTH"
    EDUCATION = "EDUCATION"
    ENVIRONMENT = "ENVIRONMENT"
    ORCHESTRATOR = "ORCHESTRATOR"


class ExecutionMode(str, Enum):
    """
    Execution strategies and run status markers.

    PAUSED and PLANNING are status markers reported to the caller;
    the planner may only choose one of PLANNABLE_MODES.
    """

    DIRECT = "DIRECT"
    PARALLEL = "PARALLEL"
    SEQUENTIAL = "SEQUENTIAL"
    LOOP = "LOOP"
    PAUSED = "PAUSED"
    PLANNING = "PLANNING"


PLANNABLE_MODES = (
    ExecutionMode.DIRECT,
    ExecutionMode.PARALLEL,
    ExecutionMode.SEQUENTIAL,
    ExecutionMode.LOOP,
)


class PlanStep(BaseModel):
    """A single (agent, instruction) step of a plan."""

    agent: AgentDomain = Field(description="Agent persona that runs this step")
    instruction: str = Field(description="Specific instruction for this agent")


class Plan(BaseModel):
    """
    Contract for the planner output.

    For DIRECT and LOOP only steps[0] is consulted.
    """

    mode: ExecutionMode = Field(description="Chosen execution mode")
    steps: List[PlanStep] = Field(
        min_length=1, description="Ordered, non-empty list of steps"
    )
    reasoning: str = Field(
        default="", description="Why this execution mode was chosen"
    )

    @field_validator("mode")
    @classmethod
    def _mode_is_plannable(cls, value: ExecutionMode) -> ExecutionMode:
        if value not in PLANNABLE_MODES:
            raise ValueError(f"{value.value} is a status marker, not a plan mode")
        return value

    @classmethod
    def fallback(cls, prompt: str) -> "Plan":
        """Plan used when planning fails: answer directly as the orchestrator."""
        return cls(
            mode=ExecutionMode.DIRECT,
            steps=[PlanStep(agent=AgentDomain.ORCHESTRATOR, instruction=prompt)],
            reasoning="Fallback.",
        )

    @property
    def agents(self) -> List[AgentDomain]:
        return [step.agent for step in self.steps]
