"""DeepL REST API adapter."""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from docuchat.core.errors import TranslationError
from docuchat.core.language.languages import TargetLanguage

from .base import TranslationBackend, TranslationResult

logger = logging.getLogger(__name__)


class DeepLTranslationBackend(TranslationBackend):
    """Machine translation with formality control and formatting preserved."""

    name = "deepl"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        url: str = "https://api-free.deepl.com/v2/translate",
        default_formality: Optional[str] = "prefer_more",
    ):
        self.client = client
        self.api_key = api_key
        self.url = url
        self.default_formality = default_formality

    def _build_payload(
        self,
        markdown: str,
        target_language: TargetLanguage,
        formality: Optional[str],
        context: Optional[str],
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "text": [markdown],
            "target_lang": target_language.value.upper(),
            "preserve_formatting": True,
            "show_billed_characters": True,
        }
        formality = formality or self.default_formality
        if formality:
            payload["formality"] = formality
        if context:
            payload["context"] = context
        return payload

    async def translate(
        self,
        markdown: str,
        target_language: TargetLanguage,
        formality: Optional[str] = None,
        context: Optional[str] = None,
    ) -> TranslationResult:
        start_time = time.time()
        logger.info(f"[deepl] Translating {len(markdown)} chars to {target_language.value}")

        try:
            response = await self.client.post(
                self.url,
                json=self._build_payload(markdown, target_language, formality, context),
                headers={"Authorization": f"DeepL-Auth-Key {self.api_key}"},
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise TranslationError(f"DeepL translation failed: {e}") from e

        translations = body.get("translations") or []
        if not translations:
            raise TranslationError("DeepL returned no translations")

        translation = translations[0]
        processing_time = int((time.time() - start_time) * 1000)
        billed = translation.get("billed_characters", 0)
        logger.info(f"[deepl] Complete in {processing_time}ms ({billed} billed chars)")

        return TranslationResult(
            text=translation.get("text", ""),
            target_language=target_language,
            source_language=translation.get("detected_source_language"),
            metadata={
                "processing_time_ms": processing_time,
                "billed_characters": billed,
            },
        )
