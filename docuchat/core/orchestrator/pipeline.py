"""Translation pipeline orchestrator.

A request takes one of two paths:

- Document path: when the new turn carries images or PDFs, text is
  extracted by the OCR backend, the target language is resolved and the
  translation backend streams the result.
- Direct path: the whole conversation goes to a vision-capable chat model
  through the RetryOrchestrator.

Any failure on the document path before the first translated chunk falls
back to the direct path. History is loaded with a timeout and saved after
the response completes; neither can fail the request.
"""

import asyncio
import logging
from typing import AsyncIterator, List, Optional, Sequence

import httpx

from docuchat.config import Settings
from docuchat.core.history.store import HistoryStore
from docuchat.core.language.detection import detect_target_language
from docuchat.core.language.languages import TargetLanguage
from docuchat.core.ocr.base import OCRBackend, documents_from_parts
from docuchat.core.refusal.stream_buffer import close_stream, replay_stream
from docuchat.core.translation.base import TranslationBackend
from docuchat.models.schemas.chat import ChatRequest, FilePart, TextPart, Turn, generate_message_id

from .retry import RetryOrchestrator, RetryResult, RetryState

logger = logging.getLogger(__name__)


class PipelineOutcome:
    """Result of one pipeline run, ready to be sent to the client.

    Exactly one of ``iter_text()`` (streaming) or ``text`` (a complete
    refusal) applies, see ``is_streaming``. ``finalize()`` persists the
    exchange once the response has been delivered.
    """

    def __init__(
        self,
        *,
        chat_id: str,
        user_turn: Turn,
        prior_messages: Sequence[Turn],
        history_store: Optional[HistoryStore],
        path: str,
        stream: Optional[AsyncIterator[str]] = None,
        text: Optional[str] = None,
        retry_result: Optional[RetryResult] = None,
    ):
        self.chat_id = chat_id
        self.user_turn = user_turn
        self.prior_messages = list(prior_messages)
        self.history_store = history_store
        self.path = path
        self.retry_result = retry_result
        self.message_id = generate_message_id()
        self._stream = stream
        self._text = text
        self._chunks: List[str] = []

    @property
    def is_streaming(self) -> bool:
        return self._stream is not None

    @property
    def text(self) -> str:
        """Complete response text (what has been streamed so far, when streaming)."""
        if self._stream is not None:
            return "".join(self._chunks)
        return self._text or ""

    async def iter_text(self) -> AsyncIterator[str]:
        """Yield response chunks, recording them for persistence."""
        if self._stream is None:
            raise RuntimeError("Outcome has no stream; use .text")
        async for chunk in self._stream:
            self._chunks.append(chunk)
            yield chunk

    def assistant_turn(self) -> Turn:
        return Turn(id=self.message_id, role="assistant", parts=[TextPart(text=self.text)])

    async def finalize(self) -> None:
        """Save prior history, the user turn and the assistant turn.

        Errors are logged and swallowed: the response has already been sent.
        """
        if self.history_store is None:
            return
        if not self.text:
            logger.warning(f"Not saving chat {self.chat_id}: empty assistant response")
            return

        turns = [*self.prior_messages, self.user_turn, self.assistant_turn()]
        try:
            await self.history_store.save(self.chat_id, turns)
            logger.info(f"Saved chat {self.chat_id} ({len(turns)} messages)")
        except Exception as e:
            logger.error(f"Failed to save chat {self.chat_id}: {e}")


class PipelineOrchestrator:
    """Routes a chat request through the document or direct path."""

    def __init__(
        self,
        *,
        settings: Settings,
        ocr_backend: OCRBackend,
        translation_backend: TranslationBackend,
        retry_orchestrator: RetryOrchestrator,
        history_store: HistoryStore,
        http_client: httpx.AsyncClient,
    ):
        self.settings = settings
        self.ocr_backend = ocr_backend
        self.translation_backend = translation_backend
        self.retry_orchestrator = retry_orchestrator
        self.history_store = history_store
        self.http_client = http_client

    async def run(self, request: ChatRequest) -> PipelineOutcome:
        """Process one chat request.

        Args:
            request: Validated chat request

        Returns:
            PipelineOutcome to stream (or send as text) and then finalize

        Raises:
            GenerationError: If the direct path fails before producing text
        """
        message = request.message
        prior: List[Turn] = []
        if request.history_enabled:
            prior = await self.load_history(request.id)

        store = self.history_store if request.history_enabled else None
        documents = [part for part in message.files if part.is_document]

        if documents:
            stream = await self._run_document_path(message, prior, documents)
            if stream is not None:
                return PipelineOutcome(
                    chat_id=request.id,
                    user_turn=message,
                    prior_messages=prior,
                    history_store=store,
                    path="document",
                    stream=stream,
                )
            logger.warning("Document path failed, falling back to direct generation")

        result = await self.retry_orchestrator.run(message, prior)
        if result.state == RetryState.EXHAUSTED_REFUSAL:
            return PipelineOutcome(
                chat_id=request.id,
                user_turn=message,
                prior_messages=prior,
                history_store=store,
                path="direct",
                text=result.refusal_text,
                retry_result=result,
            )

        return PipelineOutcome(
            chat_id=request.id,
            user_turn=message,
            prior_messages=prior,
            history_store=store,
            path="direct",
            stream=result.stream,
            retry_result=result,
        )

    async def load_history(self, chat_id: str) -> List[Turn]:
        """Load prior turns; a slow or failing store yields no history."""
        try:
            return await asyncio.wait_for(
                self.history_store.load(chat_id),
                timeout=self.settings.history_load_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"History load for chat {chat_id} timed out after "
                f"{self.settings.history_load_timeout}s, continuing without history"
            )
        except Exception as e:
            logger.warning(f"History load for chat {chat_id} failed: {e}, continuing without history")
        return []

    async def _run_document_path(
        self,
        message: Turn,
        prior: Sequence[Turn],
        documents: Sequence[FilePart],
    ) -> Optional[AsyncIterator[str]]:
        """OCR, target language, translation. None if any step fails.

        The first translated chunk is awaited here so translation errors
        surface before anything is streamed to the client.
        """
        stream: Optional[AsyncIterator[str]] = None
        try:
            images = await documents_from_parts(documents, self.http_client)
            ocr_result = await self.ocr_backend.process_batch(images)
            logger.info(
                f"OCR extracted {len(ocr_result.markdown)} chars from {ocr_result.page_count} page(s) "
                f"(confidence: {ocr_result.confidence.value})"
            )

            target_language = detect_target_language(
                message,
                prior,
                fallback=TargetLanguage(self.settings.default_target_language),
            )
            logger.info(f"Translating to {target_language.value}")

            stream = self.translation_backend.translate_stream(
                ocr_result.markdown,
                target_language,
                formality=self.settings.translation_formality,
                context=message.text or None,
            )
            first_chunk = await stream.__anext__()
        except StopAsyncIteration:
            logger.warning("Translation produced no output")
            return None
        except Exception as e:
            logger.warning(f"Document path failed: {e}")
            if stream is not None:
                await close_stream(stream)
            return None

        return replay_stream(first_chunk, stream)
