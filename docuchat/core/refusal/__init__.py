"""Refusal classification, clarification prompts and stream buffering."""

from docuchat.models.enums import Confidence

from .detection import RefusalDetection, detect_refusal, estimate_token_count
from .prompts import RETRY_CLARIFICATIONS, get_retry_clarification
from .stream_buffer import (
    BufferedStreamResult,
    buffer_and_check_refusal,
    close_stream,
    consume_full_stream,
    replay_stream,
)

__all__ = [
    "Confidence",
    "RefusalDetection",
    "detect_refusal",
    "estimate_token_count",
    "RETRY_CLARIFICATIONS",
    "get_retry_clarification",
    "BufferedStreamResult",
    "buffer_and_check_refusal",
    "close_stream",
    "consume_full_stream",
    "replay_stream",
]
