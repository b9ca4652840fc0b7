"""
Logging configuration.

One entry point, setup_logging, configures either the human-readable
console format or JSON lines. Workflow phase transitions are logged with
a compact summary of the workflow state attached.
"""

import json
import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV = "NEXUS_LOG_LEVEL"

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("httpcore", "httpx", "openai")

_SESSION_PREFIX = re.compile(r"\[session=([^\]]+)\]")


class StructuredFormatter(logging.Formatter):
    """
    Render log records as single-line JSON.

    The session id is lifted out of the "[session=...]" message prefix
    so log shippers can index on it. Workflow context attached by
    log_state_transition is emitted under "workflow".
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
        }

        match = _SESSION_PREFIX.search(message)
        if match:
            entry["session_id"] = match.group(1)

        workflow = getattr(record, "workflow", None)
        if workflow is not None:
            entry["workflow"] = workflow

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def setup_logging(
    level: Optional[Union[int, str]] = None,
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger for the service.

    Args:
        level: Level name or number. Defaults to NEXUS_LOG_LEVEL, then INFO.
        json_output: Emit JSON lines instead of the console format
        log_file: Also write to this file if provided

    Returns:
        The configured root logger.
    """
    formatter: logging.Formatter = (
        StructuredFormatter() if json_output else logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(_resolve_level(level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def summarize_state(state: Dict[str, Any]) -> Dict[str, Any]:
    """Pick the workflow fields worth logging out of a (partial) state."""
    plan = state.get("plan")
    return {
        "session_id": state.get("session_id"),
        "mode": plan.mode.value if plan is not None else None,
        "step_index": state.get("step_index"),
        "agents_done": sorted(a.value for a in (state.get("agent_outputs") or {})),
        "paused": state.get("paused_state") is not None,
    }


def log_state_transition(
    event: str,
    state: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a workflow phase transition.

    Args:
        event: Name of the transition (e.g. "plan_selected", "workflow_paused")
        state: Workflow state after the transition
        extra: Additional context to include
        logger: Logger to use. Defaults to the "nexus" logger.
    """
    logger = logger or logging.getLogger("nexus")
    workflow = {"event": event, "state": summarize_state(state)}
    if extra:
        workflow["extra"] = extra

    logger.info(
        f"[session={state.get('session_id', 'unknown')}] State transition: {event}",
        extra={"workflow": workflow},
    )
