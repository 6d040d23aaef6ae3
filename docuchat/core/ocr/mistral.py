"""Mistral OCR service adapter."""

import logging
import time
from typing import Any, Dict

import httpx

from docuchat.core.errors import OCRError

from .base import DOCUMENT_SEPARATOR, DocumentImage, OCRBackend, OCRResult, grade_confidence

logger = logging.getLogger(__name__)


class MistralOCRBackend(OCRBackend):
    """Synchronous OCR: one request returns markdown for every page."""

    name = "mistral"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        url: str = "https://api.mistral.ai/v1/ocr",
        model: str = "mistral-ocr-latest",
    ):
        self.client = client
        self.api_key = api_key
        self.url = url
        self.model = model

    def _build_payload(self, document: DocumentImage) -> Dict[str, Any]:
        if document.is_pdf:
            source = {"type": "document_url", "document_url": document.data_url}
        else:
            source = {"type": "image_url", "image_url": document.data_url}
        return {
            "model": self.model,
            "document": source,
            "include_image_base64": False,
        }

    async def process(self, data: str, media_type: str) -> OCRResult:
        start_time = time.time()
        document = DocumentImage(data=data, media_type=media_type)

        try:
            response = await self.client.post(
                self.url,
                json=self._build_payload(document),
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise OCRError(f"Mistral OCR failed: {e}") from e

        pages = body.get("pages") or []
        if not pages:
            raise OCRError("Mistral OCR returned no pages")

        if len(pages) > 1:
            markdown = DOCUMENT_SEPARATOR.join(
                f"### Document Page {i}\n\n{page.get('markdown', '')}" for i, page in enumerate(pages, start=1)
            )
        else:
            markdown = pages[0].get("markdown", "")

        usage = body.get("usage_info") or {}
        confidence = grade_confidence(markdown)
        processing_time = int((time.time() - start_time) * 1000)
        logger.info(
            f"[mistral] {len(pages)} page(s), {len(markdown)} chars in {processing_time}ms "
            f"(confidence: {confidence.value})"
        )

        return OCRResult(
            markdown=markdown,
            page_count=len(pages),
            confidence=confidence,
            metadata={
                "processing_time_ms": processing_time,
                "pages_processed": usage.get("pages_processed", 0),
                "doc_size_bytes": usage.get("doc_size_bytes", 0),
            },
        )
