"""
History compaction.

Reduces prior conversation turns to one context string: verbatim when
short, one summarization call when longer than the threshold.
"""

import logging
from typing import Optional, Sequence

from nexus.prompts.builders import format_transcript
from nexus.shared.contracts.conversation import ConversationTurn
from nexus.shared.llm.reasoning import ReasoningService
from nexus.shared.logging.events import EventChannel


logger = logging.getLogger(__name__)

DEFAULT_COMPACTION_THRESHOLD = 6


def compact_history(
    turns: Sequence[ConversationTurn],
    reasoning: ReasoningService,
    threshold: int = DEFAULT_COMPACTION_THRESHOLD,
    events: Optional[EventChannel] = None,
) -> str:
    """
    Compact prior turns into a context string.

    Args:
        turns: Prior conversation turns, oldest first
        reasoning: Reasoning collaborator used for summarization
        threshold: Turn count above which the history is summarized
        events: Optional observability channel

    Returns:
        "" for no history, the summary for long history, else the
        verbatim "ROLE: text" transcript.
    """
    if not turns:
        return ""

    def _publish(message: str) -> None:
        if events is not None:
            events.publish("System", message)

    transcript = format_transcript(turns)

    if len(turns) <= threshold:
        _publish("System: Context Compaction skipped (History short).")
        return transcript

    _publish(f"System: Context Compaction triggered (History > {threshold} turns).")
    _publish("System: Compressing conversation state...")
    try:
        summary = reasoning.summarize(transcript)
    except Exception as e:
        # Compaction is advisory; keep the run going on the raw transcript
        logger.warning(f"Summarization failed, using verbatim history: {e}")
        _publish("System: Context compaction failed, using raw history.")
        return transcript

    _publish("System: Context compacted successfully.")
    return summary or ""
