"""OCR through a vision-capable chat model."""

import logging
import time

from docuchat.core.errors import OCRError
from docuchat.core.llm.gateway import LLMGateway
from docuchat.core.llm.messages import file_part_to_content
from docuchat.core.llm.prompts import OCR_PROMPT
from docuchat.core.llm.runtime_config import LLMRuntimeConfig
from docuchat.models.schemas.chat import FilePart

from .base import DocumentImage, OCRBackend, OCRResult, grade_confidence

logger = logging.getLogger(__name__)


class VisionOCRBackend(OCRBackend):
    """Extracts markdown by prompting a vision model with the document."""

    name = "vision"

    def __init__(self, gateway: LLMGateway, config: LLMRuntimeConfig):
        self.gateway = gateway
        # Extraction must be deterministic
        self.config = config.with_overrides(temperature=0.0, max_tokens=4096)

    async def process(self, data: str, media_type: str) -> OCRResult:
        start_time = time.time()
        document = DocumentImage(data=data, media_type=media_type)
        logger.info(f"[vision] Extracting text from {media_type} ({len(data)} base64 chars)")

        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": OCR_PROMPT},
                    file_part_to_content(FilePart(media_type=media_type, url=document.data_url)),
                ],
            }
        ]

        try:
            response = await self.gateway.complete(messages, config=self.config)
        except Exception as e:
            raise OCRError(f"Vision OCR failed: {e}") from e

        markdown = response.content
        confidence = grade_confidence(markdown)
        processing_time = int((time.time() - start_time) * 1000)
        logger.info(
            f"[vision] Extracted {len(markdown)} chars in {processing_time}ms (confidence: {confidence.value})"
        )

        return OCRResult(
            markdown=markdown,
            page_count=1,
            confidence=confidence,
            metadata={
                "processing_time_ms": processing_time,
                "model": self.config.model,
                "tokens_used": response.total_tokens,
            },
        )
