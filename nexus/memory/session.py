"""
In-memory session bookkeeping.

Only tracks the session identifier and start time; the identifier is
written into each run's accumulated context.
"""

import time
import uuid


def _new_session_id() -> str:
    return f"sess_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class SessionService:
    """Holds the current session id and when it started."""

    def __init__(self):
        self.session_id = _new_session_id()
        self.start_time = time.time()

    @property
    def duration(self) -> float:
        """Seconds since the session started."""
        return time.time() - self.start_time

    def reset(self) -> None:
        self.session_id = _new_session_id()
        self.start_time = time.time()
