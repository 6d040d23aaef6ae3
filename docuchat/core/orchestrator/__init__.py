"""Retry and pipeline orchestration."""

from .pipeline import PipelineOrchestrator, PipelineOutcome
from .retry import PipelineAttempt, RetryOrchestrator, RetryResult, RetryState

__all__ = [
    "PipelineOrchestrator",
    "PipelineOutcome",
    "PipelineAttempt",
    "RetryOrchestrator",
    "RetryResult",
    "RetryState",
]
