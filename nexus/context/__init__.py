"""Context engineering: prior-conversation compaction."""

from nexus.context.compactor import DEFAULT_COMPACTION_THRESHOLD, compact_history

__all__ = ["DEFAULT_COMPACTION_THRESHOLD", "compact_history"]
