"""
Nexus: a multi-agent orchestrator for health, environment and education.

A planner chooses an execution mode for each request, domain agents run
with tools, and a synthesizer merges their outputs into one structured
answer that is then scored.
"""

__version__ = "0.1.0"
