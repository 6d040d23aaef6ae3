"""Refusal-aware generation with bounded, localized retries.

Each attempt streams a chat completion and holds back its beginning. A
high-confidence refusal is never shown: the orchestrator appends a
clarification turn in the conversation's language and tries again. The
clarification turns live only in a history copy local to one run and are
never returned to the caller.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, List, Optional, Sequence

from docuchat.core.errors import GenerationError
from docuchat.core.language.detection import detect_conversation_language
from docuchat.core.language.languages import ConversationLanguage
from docuchat.core.llm.gateway import LLMGateway
from docuchat.core.refusal.detection import RefusalDetection
from docuchat.core.refusal.prompts import get_retry_clarification
from docuchat.core.refusal.stream_buffer import (
    DEFAULT_BUFFER_TOKENS,
    buffer_and_check_refusal,
    close_stream,
    consume_full_stream,
    replay_stream,
)
from docuchat.models.schemas.chat import Turn

logger = logging.getLogger(__name__)


class RetryState(str, Enum):
    """State of a retry loop."""

    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    EXHAUSTED_REFUSAL = "exhausted_refusal"


@dataclass(frozen=True)
class PipelineAttempt:
    """Record of one generation attempt."""

    index: int
    buffered_text: str
    detection: RefusalDetection


@dataclass
class RetryResult:
    """Outcome of a retry loop.

    SUCCEEDED carries the stream to deliver (buffered prefix included);
    EXHAUSTED_REFUSAL carries the text of the first refusal.
    """

    state: RetryState
    attempts: List[PipelineAttempt] = field(default_factory=list)
    stream: Optional[AsyncIterator[str]] = None
    refusal_text: Optional[str] = None
    clarification_language: Optional[ConversationLanguage] = None


class RetryOrchestrator:
    """Runs chat generation, retrying high-confidence refusals.

    Usage:
        orchestrator = RetryOrchestrator(gateway, system_prompt)
        result = await orchestrator.run(message, prior_messages)
        if result.state == RetryState.SUCCEEDED:
            async for chunk in result.stream:
                ...
    """

    def __init__(
        self,
        gateway: LLMGateway,
        system_prompt: str,
        max_retries: int = 2,
        buffer_tokens: int = DEFAULT_BUFFER_TOKENS,
    ):
        self.gateway = gateway
        self.system_prompt = system_prompt
        self.max_retries = max_retries
        self.buffer_tokens = buffer_tokens

    async def run(self, current_message: Turn, prior_messages: Sequence[Turn]) -> RetryResult:
        """Generate a reply to current_message.

        Args:
            current_message: The new user turn
            prior_messages: Conversation history, oldest first

        Returns:
            RetryResult in state SUCCEEDED or EXHAUSTED_REFUSAL

        Raises:
            GenerationError: If an attempt fails before producing any text
        """
        retry_history: List[Turn] = [*prior_messages, current_message]
        attempts: List[PipelineAttempt] = []
        first_refusal_text: Optional[str] = None
        clarification_language: Optional[ConversationLanguage] = None
        state = RetryState.ATTEMPTING
        index = 0

        while state == RetryState.ATTEMPTING:
            logger.info(f"Generation attempt {index + 1}/{self.max_retries + 1}")
            stream = self.gateway.stream_chat(self.system_prompt, retry_history)
            buffered = await buffer_and_check_refusal(stream, self.buffer_tokens)

            if buffered.error is not None and not buffered.buffered_text:
                await close_stream(stream)
                raise GenerationError(f"Generation failed: {buffered.error}") from buffered.error

            attempts.append(
                PipelineAttempt(
                    index=index,
                    buffered_text=buffered.buffered_text,
                    detection=RefusalDetection(
                        is_refusal=buffered.is_refusal,
                        confidence=buffered.confidence,
                        matched_pattern=buffered.matched_pattern,
                    ),
                )
            )

            if not buffered.should_retry:
                if buffered.is_refusal:
                    logger.info(
                        f"Low-confidence refusal ({buffered.confidence.value}) passed through: "
                        f"{buffered.matched_pattern}"
                    )
                return RetryResult(
                    state=RetryState.SUCCEEDED,
                    attempts=attempts,
                    stream=replay_stream(buffered.buffered_text, stream),
                    clarification_language=clarification_language,
                )

            logger.warning(f"Refusal detected on attempt {index + 1}: {buffered.matched_pattern}")

            if first_refusal_text is None:
                # Keep the complete first refusal in case every retry fails
                first_refusal_text = buffered.buffered_text + await consume_full_stream(stream)
            else:
                await close_stream(stream)

            if index >= self.max_retries:
                state = RetryState.EXHAUSTED_REFUSAL
                break

            clarification_language = detect_conversation_language(
                current_message,
                prior_messages,
                refusal_text=buffered.buffered_text,
            )
            logger.info(f"Retrying with clarification in {clarification_language.value}")
            retry_history.append(Turn.user_text(get_retry_clarification(clarification_language)))
            index += 1

        logger.warning(f"All {len(attempts)} attempts refused, returning the first refusal")
        return RetryResult(
            state=state,
            attempts=attempts,
            refusal_text=first_refusal_text,
            clarification_language=clarification_language,
        )
