"""Stream buffering with early refusal detection.

The beginning of a streamed response is held back and classified before
anything reaches the client, so a refusal can be replaced by a retry
without the user ever seeing it.
"""

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from docuchat.models.enums import Confidence

from .detection import detect_refusal, estimate_token_count

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_TOKENS = 150
STREAM_ERROR_MESSAGE = "An error occurred while processing the response."


@dataclass
class BufferedStreamResult:
    """Classification of a buffered stream prefix."""

    is_refusal: bool
    buffered_text: str
    confidence: Confidence = Confidence.LOW
    matched_pattern: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def should_retry(self) -> bool:
        return self.is_refusal and self.confidence == Confidence.HIGH


async def buffer_and_check_refusal(
    stream: AsyncIterator[str],
    max_tokens_to_buffer: int = DEFAULT_BUFFER_TOKENS,
) -> BufferedStreamResult:
    """Buffer the start of a text stream and classify it.

    Chunks are read until the estimated token count reaches
    max_tokens_to_buffer or the stream ends. The stream is not closed and
    stays positioned right after the buffered prefix.

    A read error is logged and reported as a non-refusal carrying the
    error, so a broken stream never blocks the normal path.

    Args:
        stream: Async iterator of text chunks
        max_tokens_to_buffer: Token limit for the prefix

    Returns:
        BufferedStreamResult
    """
    buffered_text = ""
    token_count = 0

    try:
        async for chunk in stream:
            buffered_text += chunk
            token_count = estimate_token_count(buffered_text)
            if token_count >= max_tokens_to_buffer:
                break
    except Exception as e:
        logger.error(f"Error during stream buffering: {e}")
        return BufferedStreamResult(
            is_refusal=False,
            buffered_text=buffered_text,
            error=e,
        )

    detection = detect_refusal(buffered_text, token_count)
    return BufferedStreamResult(
        is_refusal=detection.is_refusal,
        buffered_text=buffered_text,
        confidence=detection.confidence,
        matched_pattern=detection.matched_pattern,
    )


async def consume_full_stream(stream: AsyncIterator[str]) -> str:
    """Drain the rest of a stream and return its text.

    On a read error the text read so far is returned, or a generic message
    if nothing was read.
    """
    full_text = ""
    try:
        async for chunk in stream:
            full_text += chunk
    except Exception as e:
        logger.error(f"Error consuming stream: {e}")
        return full_text or STREAM_ERROR_MESSAGE
    return full_text


async def replay_stream(prefix: str, stream: AsyncIterator[str]) -> AsyncIterator[str]:
    """Yield an already-buffered prefix, then the rest of the stream."""
    if prefix:
        yield prefix
    async for chunk in stream:
        yield chunk


async def close_stream(stream: AsyncIterator[str]) -> None:
    """Close an abandoned stream if it supports it."""
    aclose = getattr(stream, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception as e:
        logger.debug(f"Ignoring error while closing stream: {e}")
