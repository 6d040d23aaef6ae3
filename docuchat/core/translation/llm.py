"""Translation through the LLM gateway."""

import logging
import time
from typing import Any, AsyncIterator, Dict, List, Optional

from docuchat.core.errors import TranslationError
from docuchat.core.language.languages import TargetLanguage
from docuchat.core.llm.gateway import LLMGateway
from docuchat.core.llm.prompts import build_translation_prompt
from docuchat.core.llm.runtime_config import LLMRuntimeConfig
from docuchat.utils.text import safe_truncate, strip_code_fences, strip_code_fences_stream

from .base import TranslationBackend, TranslationResult

logger = logging.getLogger(__name__)


class LLMTranslationBackend(TranslationBackend):
    """One blocking model call per document."""

    name = "llm"

    def __init__(self, gateway: LLMGateway, config: LLMRuntimeConfig):
        self.gateway = gateway
        self.config = config

    def _build_messages(
        self,
        markdown: str,
        target_language: TargetLanguage,
        context: Optional[str],
    ) -> List[Dict[str, Any]]:
        prompt = build_translation_prompt(markdown, target_language.display_name, context)
        return [{"role": "user", "content": prompt}]

    async def translate(
        self,
        markdown: str,
        target_language: TargetLanguage,
        formality: Optional[str] = None,
        context: Optional[str] = None,
    ) -> TranslationResult:
        start_time = time.time()
        logger.info(f"[{self.name}] Translating {len(markdown)} chars to {target_language.value}")

        try:
            response = await self.gateway.complete(
                self._build_messages(markdown, target_language, context),
                config=self.config,
            )
        except Exception as e:
            raise TranslationError(f"LLM translation failed: {e}") from e

        text = strip_code_fences(response.content)
        processing_time = int((time.time() - start_time) * 1000)
        logger.info(f"[{self.name}] Complete in {processing_time}ms ({len(text)} chars)")
        logger.debug(f"[{self.name}] Output: {safe_truncate(text, 200)}")

        return TranslationResult(
            text=text,
            target_language=target_language,
            metadata={
                "processing_time_ms": processing_time,
                "model": self.config.model,
                "tokens_used": response.total_tokens,
            },
        )


class StreamingLLMTranslationBackend(LLMTranslationBackend):
    """Same prompt as LLMTranslationBackend, streamed to the caller.

    A code fence wrapping the whole answer is removed on the fly.
    """

    name = "llm_stream"

    async def translate_stream(
        self,
        markdown: str,
        target_language: TargetLanguage,
        formality: Optional[str] = None,
        context: Optional[str] = None,
    ) -> AsyncIterator[str]:
        logger.info(f"[{self.name}] Streaming translation of {len(markdown)} chars to {target_language.value}")
        messages = self._build_messages(markdown, target_language, context)
        try:
            async for chunk in strip_code_fences_stream(self.gateway.stream(messages, config=self.config)):
                yield chunk
        except Exception as e:
            raise TranslationError(f"LLM translation stream failed: {e}") from e
