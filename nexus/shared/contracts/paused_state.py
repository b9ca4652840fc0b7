"""
Pause/resume checkpoint contract.

A PausedState is created once, when an agent in a sequential pipeline
calls the pause tool, and is owned by the caller from then on. It is the
only unit meant to be persisted across turns.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from nexus.shared.contracts.plan import AgentDomain, Plan


class PausedState(BaseModel):
    """
    Checkpoint of a suspended sequential run.

    step_index is the exact resumption point: the step after the one
    that paused. Accepts both snake_case and camelCase keys on input so
    checkpoints written by UI clients load unchanged.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    plan: Plan
    step_index: int = Field(ge=0, description="Index of the next step to run")
    accumulated_context: str = Field(
        default="", description="Running context handed to later steps"
    )
    agent_outputs: Dict[AgentDomain, str] = Field(
        default_factory=dict, description="Outputs of the steps already run"
    )

    @model_validator(mode="after")
    def _step_index_within_plan(self) -> "PausedState":
        if self.step_index > len(self.plan.steps):
            raise ValueError(
                f"step_index {self.step_index} exceeds plan length {len(self.plan.steps)}"
            )
        return self

    def to_json(self) -> str:
        """Serialize for persistence."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, payload: str) -> "PausedState":
        """Restore a checkpoint written by to_json (or a camelCase client)."""
        return cls.model_validate_json(payload)
