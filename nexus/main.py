"""
FastAPI application entry point.

Assembles the FastAPI app with the workflow router.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nexus import __version__
from nexus.graph.orchestrator_api import router as workflow_router
from nexus.shared.logging.config import setup_logging


setup_logging()
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Nexus",
    description="Multi-agent orchestrator for health, environment and education, built with LangGraph",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(workflow_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Nexus",
        "version": __version__,
        "endpoints": "/api/workflow",
        "agents": [
            "HEALTH",
            "EDUCATION",
            "ENVIRONMENT",
            "ORCHESTRATOR",
        ],
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Nexus on 0.0.0.0:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
