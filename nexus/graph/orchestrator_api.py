"""
FastAPI endpoints for the orchestrator.

Provides the API to run (or resume) a workflow, inspect and clear the
trace recorder, and inspect and clear the memory bank.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from nexus.graph.orchestrator import Orchestrator, ResumeError, create_orchestrator
from nexus.memory.bank import UserContext
from nexus.shared.contracts.conversation import ConversationTurn
from nexus.shared.contracts.evaluation import Metric
from nexus.shared.contracts.paused_state import PausedState
from nexus.shared.contracts.result import WorkflowResult
from nexus.shared.llm.client import MissingCredentialError
from nexus.shared.logging.events import EventChannel, WorkflowEvent


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/workflow", tags=["workflow"])

# Shared orchestrator instance (process-scoped memory and trace state)
_orchestrator: Optional[Orchestrator] = None


def get_orchestrator() -> Orchestrator:
    """Get or create the shared orchestrator instance."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = create_orchestrator()
    return _orchestrator


def set_orchestrator(orchestrator: Optional[Orchestrator]) -> None:
    """Replace the shared orchestrator (used by tests and embedding apps)."""
    global _orchestrator
    _orchestrator = orchestrator


# ============================================================================
# Request/Response Models
# ============================================================================


class WorkflowRunRequest(BaseModel):
    """Request to run or resume a workflow."""

    prompt: str = Field(description="The user's request")
    history: List[ConversationTurn] = Field(
        default_factory=list, description="Prior conversation turns, oldest first"
    )
    language: str = Field(default="en-US", description="Target response language")
    use_extended_reasoning: bool = Field(
        default=False, description="Synthesize with the extended reasoning model"
    )
    paused_state: Optional[PausedState] = Field(
        default=None, description="Checkpoint returned by a paused run"
    )


class WorkflowRunResponse(BaseModel):
    """Workflow result plus the ordered event log of the run."""

    session_id: str
    result: WorkflowResult
    events: List[WorkflowEvent] = Field(default_factory=list)


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/run", response_model=WorkflowRunResponse)
def run_workflow(request: WorkflowRunRequest) -> WorkflowRunResponse:
    """
    Run the workflow for a request, or resume a paused sequential run.
    """
    orchestrator = get_orchestrator()
    session_id = orchestrator.session.session_id
    events = EventChannel(session_id)
    _log = f"[session={session_id}] [graph=workflow] [api=run] "

    logger.info(
        f"{_log}Run requested | history={len(request.history)}, "
        f"resume={request.paused_state is not None}, language={request.language}"
    )

    try:
        result = orchestrator.run_workflow(
            request.prompt,
            prior_turns=request.history,
            language=request.language,
            use_extended_reasoning=request.use_extended_reasoning,
            resume_state=request.paused_state,
            events=events,
        )
    except MissingCredentialError as e:
        logger.error(f"{_log}Missing credential: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except ResumeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"{_log}Workflow failed: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Workflow execution failed: {str(e)}",
        )

    return WorkflowRunResponse(session_id=session_id, result=result, events=events.events)


@router.get("/metrics", response_model=List[Metric])
def recent_metrics(count: int = Query(default=5, ge=0)) -> List[Metric]:
    """Return the most recent metrics in insertion order."""
    return get_orchestrator().trace.recent(count)


@router.delete("/metrics")
def clear_metrics():
    get_orchestrator().trace.clear()
    return {"status": "cleared"}


@router.get("/memory", response_model=UserContext)
def get_memory() -> UserContext:
    return get_orchestrator().memory.get()


@router.delete("/memory")
def clear_memory():
    get_orchestrator().memory.clear()
    return {"status": "cleared"}
