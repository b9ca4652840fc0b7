"""
Post-task evaluation.

Scores the final response for relevance, accuracy and safety. Evaluation
is advisory: any failure returns EvaluationResult.unavailable().
"""

import logging
import time

from nexus.shared.contracts.evaluation import EvaluationResult
from nexus.shared.llm.reasoning import ReasoningService


logger = logging.getLogger(__name__)


def evaluate_response(reasoning: ReasoningService, query: str, response: str) -> EvaluationResult:
    """
    Score a final response.

    Args:
        reasoning: Reasoning collaborator
        query: Original user request
        response: Synthesized response text

    Returns:
        EvaluationResult with latency of the scoring call and an approximate
        token cost of len(response) // 4.
    """
    start = time.perf_counter()
    try:
        verdict = reasoning.score(query, response)
        latency_ms = int((time.perf_counter() - start) * 1000)
        return EvaluationResult(
            score=verdict.score,
            feedback=verdict.feedback,
            latency_ms=latency_ms,
            token_cost=len(response) // 4,
        )
    except Exception as e:
        logger.warning(f"Evaluation failed, returning default verdict: {e}")
        return EvaluationResult.unavailable()
