"""
Long-term user memory bank.

Holds the user profile that is injected into planning, every agent
persona and synthesis. Agents write to it only through the updateMemory
tool; writes are serialized so sibling parallel agents cannot lose
updates.
"""

import json
import logging
import threading
import time
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


class UserContext(BaseModel):
    """Long-lived user profile."""

    name: str = "User"
    location: str = "Unknown"
    health_conditions: List[str] = Field(default_factory=list)
    learning_goals: List[str] = Field(default_factory=list)
    eco_preferences: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    last_interaction: float = Field(default_factory=time.time)


class ListCategory(str, Enum):
    """Profile lists that accept items, keyed by tool category."""

    HEALTH = "health"
    EDUCATION = "education"
    ENVIRONMENT = "environment"

    @property
    def field_name(self) -> str:
        return {
            ListCategory.HEALTH: "health_conditions",
            ListCategory.EDUCATION: "learning_goals",
            ListCategory.ENVIRONMENT: "eco_preferences",
        }[self]


class MemoryBank:
    """
    Thread-safe user memory with optional JSON file persistence.

    Args:
        storage_path: JSON file to load from and save to. In-memory only if None.
    """

    def __init__(self, storage_path: Optional[Union[str, Path]] = None):
        self.storage_path = Path(storage_path) if storage_path else None
        self._lock = threading.Lock()
        self._context = self._load()

    def _load(self) -> UserContext:
        if self.storage_path is None or not self.storage_path.exists():
            return UserContext()
        try:
            stored = json.loads(self.storage_path.read_text(encoding="utf-8"))
            return UserContext.model_validate({**UserContext().model_dump(), **stored})
        except Exception as e:
            logger.error(f"Failed to load memory bank from {self.storage_path}: {e}")
            return UserContext()

    def _save(self) -> None:
        if self.storage_path is None:
            return
        try:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            self.storage_path.write_text(self._context.model_dump_json(), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save memory bank to {self.storage_path}: {e}")

    def get(self) -> UserContext:
        """Return a copy of the current profile."""
        with self._lock:
            return self._context.model_copy(deep=True)

    def update(self, **fields) -> UserContext:
        """Replace profile fields and stamp last_interaction."""
        with self._lock:
            data = {**self._context.model_dump(), **fields, "last_interaction": time.time()}
            self._context = UserContext.model_validate(data)
            self._save()
            return self._context.model_copy(deep=True)

    def add_note(self, note: str) -> bool:
        """Append a free-form note. Returns False if it was already present."""
        with self._lock:
            if note in self._context.notes:
                return False
            self._context.notes.append(note)
            self._save()
            return True

    def add_list_item(self, category: Union[ListCategory, str], item: str) -> bool:
        """Append an item to a profile list. Returns False if it was already present."""
        field_name = ListCategory(category).field_name
        with self._lock:
            items = getattr(self._context, field_name)
            if item in items:
                return False
            items.append(item)
            self._save()
            return True

    def formatted(self) -> str:
        """Human-readable block injected into every prompt."""
        ctx = self.get()
        return (
            "[MEMORY BANK - LONG TERM USER CONTEXT]\n"
            f"Name: {ctx.name}\n"
            f"Location: {ctx.location}\n"
            f"Health Profile: {', '.join(ctx.health_conditions) or 'None recorded'}\n"
            f"Learning Goals: {', '.join(ctx.learning_goals) or 'None recorded'}\n"
            f"Eco Preferences: {', '.join(ctx.eco_preferences) or 'None recorded'}\n"
            f"Key Notes: {'; '.join(ctx.notes)}"
        )

    def clear(self) -> None:
        """Reset to the default profile."""
        with self._lock:
            self._context = UserContext()
            self._save()


def apply_memory_update(bank: MemoryBank, category: str, item: str) -> None:
    """
    Route an updateMemory tool call to the matching bank operation.

    health/education/environment append to the matching list, profile
    replaces the user's name, anything else (including "note") becomes a note.
    """
    if category in (c.value for c in ListCategory):
        bank.add_list_item(category, item)
    elif category == "profile":
        bank.update(name=item)
    else:
        bank.add_note(item)
