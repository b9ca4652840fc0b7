"""Synthesis of agent outputs into the final structured answer."""

from nexus.synthesis.synthesizer import synthesize_response

__all__ = ["synthesize_response"]
