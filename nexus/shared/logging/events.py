"""
Ordered observability channel.

Every phase transition and tool invocation of a run is published here as
one line naming the acting agent/domain and the action. Subscribers are
notified synchronously, in publication order, so events never overtake
the actions they describe.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field


logger = logging.getLogger(__name__)


class WorkflowEvent(BaseModel):
    """A single published event."""

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(ge=0, description="Position in publication order")
    source: str = Field(description="Acting agent/domain or 'System'")
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


EventCallback = Callable[[WorkflowEvent], None]


class EventChannel:
    """
    Append-only, thread-safe event stream for one workflow run.

    Parallel agents publish concurrently; the lock assigns sequence numbers
    and delivers to subscribers under the same critical section.
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or "unknown"
        self._events: List[WorkflowEvent] = []
        self._subscribers: List[EventCallback] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: EventCallback) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def publish(self, source: str, message: str) -> WorkflowEvent:
        """
        Record one event and deliver it to subscribers.

        Args:
            source: Acting agent/domain (e.g. "HEALTH") or "System"
            message: Human-readable line describing the action

        Returns:
            The recorded event.
        """
        with self._lock:
            event = WorkflowEvent(
                sequence=len(self._events), source=source, message=message
            )
            self._events.append(event)
            logger.info(f"[session={self.session_id}] [source={source}] {message}")
            for callback in self._subscribers:
                callback(event)
        return event

    @property
    def events(self) -> List[WorkflowEvent]:
        with self._lock:
            return list(self._events)

    def lines(self) -> List[str]:
        return [event.message for event in self.events]
