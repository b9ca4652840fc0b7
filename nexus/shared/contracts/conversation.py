"""
Prior conversation turn contract.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class ConversationTurn(BaseModel):
    """One prior turn of the conversation (role + text)."""

    role: str = Field(description="Speaker role, e.g. 'user' or 'model'")
    text: str = Field(default="", description="Turn text")

    @model_validator(mode="before")
    @classmethod
    def _accept_parts_shape(cls, data: Any) -> Any:
        # Chat clients send {"role": ..., "parts": [{"text": ...}]}
        if isinstance(data, dict) and "text" not in data and "parts" in data:
            parts = data.get("parts") or []
            first = parts[0] if parts else {}
            text = first.get("text", "") if isinstance(first, dict) else str(first)
            return {"role": data.get("role", ""), "text": text}
        return data

    def as_line(self) -> str:
        """Format as a transcript line: 'ROLE: text'."""
        return f"{self.role.upper()}: {self.text}"
