"""
User memory and session bookkeeping.

The memory bank is shared, mutable state read at planning, agent setup
and synthesis, and written only through the updateMemory tool.
"""

from nexus.memory.bank import ListCategory, MemoryBank, UserContext, apply_memory_update
from nexus.memory.session import SessionService

__all__ = [
    "ListCategory",
    "MemoryBank",
    "UserContext",
    "apply_memory_update",
    "SessionService",
]
