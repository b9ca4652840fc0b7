"""Post-task quality evaluation."""

from nexus.evaluation.evaluator import evaluate_response

__all__ = ["evaluate_response"]
