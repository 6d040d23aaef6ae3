"""OCR backend interface, confidence grading and batch combination."""

import asyncio
import base64
import logging
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import httpx

from docuchat.core.errors import OCRError
from docuchat.models.enums import Confidence
from docuchat.models.schemas.chat import FilePart

logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = "\n\n---\n\n"

# Characters that are neither letters, digits, whitespace nor common punctuation
_SPECIAL_CHARS = re.compile(r"[^\w\s.,;:!?'\"()\-–—]")
_STRUCTURE_MARKERS = ("#", "|", "**")


@dataclass(frozen=True)
class DocumentImage:
    """One document (image or PDF) to extract text from."""

    data: str  # Base64 payload without data URL prefix
    media_type: str
    filename: Optional[str] = None

    @property
    def data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"

    @property
    def is_pdf(self) -> bool:
        return self.media_type == "application/pdf"


@dataclass(frozen=True)
class OCRResult:
    """Extracted markdown with quality grade."""

    markdown: str
    page_count: int
    confidence: Confidence
    metadata: Dict[str, Any] = field(default_factory=dict)


def grade_confidence(markdown: str) -> Confidence:
    """Grade extracted markdown by length, structure and garbling.

    Args:
        markdown: Extracted text

    Returns:
        Confidence grade
    """
    text = markdown.strip()
    text_length = len(text)

    if text_length < 10:
        return Confidence.LOW  # Too short, extraction likely failed

    special_char_ratio = len(_SPECIAL_CHARS.findall(text)) / text_length
    if special_char_ratio > 0.4:
        return Confidence.LOW  # Likely garbled

    has_structure = any(marker in text for marker in _STRUCTURE_MARKERS)
    word_count = len(text.split())

    if (text_length > 100 and has_structure) or (text_length > 200 and word_count > 20):
        return Confidence.HIGH

    if text_length > 30 and word_count > 5:
        return Confidence.MEDIUM

    if text_length < 30 or word_count < 3:
        return Confidence.LOW

    return Confidence.MEDIUM


def grade_line_confidence(confidences: Sequence[float]) -> Confidence:
    """Grade per-line recognition scores reported by an OCR service."""
    average = sum(confidences) / len(confidences)
    if average > 0.85:
        return Confidence.HIGH
    if average > 0.7:
        return Confidence.MEDIUM
    return Confidence.LOW


def combine_results(results: Sequence[OCRResult], metadata: Optional[Dict[str, Any]] = None) -> OCRResult:
    """Combine per-document results into one.

    Documents are separated by a horizontal rule and, when there is more
    than one, headed ``### Document i``.
    """
    if len(results) == 1:
        markdown = results[0].markdown
    else:
        markdown = DOCUMENT_SEPARATOR.join(
            f"### Document {i}\n\n{result.markdown}" for i, result in enumerate(results, start=1)
        )

    return OCRResult(
        markdown=markdown,
        page_count=sum(r.page_count for r in results),
        confidence=Confidence.overall(r.confidence for r in results),
        metadata=metadata or {},
    )


async def document_from_part(part: FilePart, client: httpx.AsyncClient) -> DocumentImage:
    """Turn a file part into an OCR input, downloading remote files.

    Raises:
        httpx.HTTPError: If a remote file cannot be fetched
    """
    if part.is_inline:
        return DocumentImage(data=part.base64_payload(), media_type=part.media_type, filename=part.filename)

    logger.info(f"Downloading remote document {part.url}")
    response = await client.get(part.url)
    response.raise_for_status()
    return DocumentImage(
        data=base64.b64encode(response.content).decode("ascii"),
        media_type=part.media_type,
        filename=part.filename,
    )


async def documents_from_parts(parts: Sequence[FilePart], client: httpx.AsyncClient) -> List[DocumentImage]:
    """Resolve several file parts, skipping the ones that cannot be fetched.

    Raises:
        OCRError: If no part could be resolved
    """
    documents: List[DocumentImage] = []
    errors: List[str] = []
    for index, part in enumerate(parts, start=1):
        try:
            documents.append(await document_from_part(part, client))
        except Exception as e:
            logger.error(f"Document {index} could not be fetched: {e}")
            errors.append(str(e))

    if not documents:
        raise OCRError("All document downloads failed: " + "; ".join(errors))
    return documents


class OCRBackend(ABC):
    """Extracts markdown from document images.

    Subclasses implement process(); batches fan out concurrently unless
    sequential_batch is set (for services that rate-limit parallel jobs).
    """

    name: str = "ocr"
    sequential_batch: bool = False

    @abstractmethod
    async def process(self, data: str, media_type: str) -> OCRResult:
        """Extract text from one document.

        Args:
            data: Base64 payload (no data URL prefix)
            media_type: MIME type of the document

        Returns:
            OCRResult for the document

        Raises:
            OCRError: If extraction fails
        """

    async def process_batch(self, images: Sequence[DocumentImage]) -> OCRResult:
        """Extract and combine text from several documents.

        Failed documents are logged and skipped.

        Raises:
            OCRError: If every document fails
        """
        start_time = time.time()
        logger.info(f"[{self.name}] Processing {len(images)} document(s)")

        if self.sequential_batch:
            outcomes = []
            for index, image in enumerate(images, start=1):
                outcomes.append(await self._process_safely(index, image))
        else:
            outcomes = await asyncio.gather(
                *(self._process_safely(index, image) for index, image in enumerate(images, start=1))
            )

        results: List[OCRResult] = [r for r in outcomes if isinstance(r, OCRResult)]
        errors = [str(e) for e in outcomes if isinstance(e, Exception)]

        if not results:
            raise OCRError("All OCR attempts failed: " + "; ".join(errors))

        processing_time = int((time.time() - start_time) * 1000)
        logger.info(
            f"[{self.name}] {len(results)}/{len(images)} document(s) processed in {processing_time}ms"
        )

        return combine_results(
            results,
            metadata={
                "backend": self.name,
                "processing_time_ms": processing_time,
                "succeeded": len(results),
                "failed": len(errors),
            },
        )

    async def _process_safely(self, index: int, image: DocumentImage):
        try:
            return await self.process(image.data, image.media_type)
        except Exception as e:
            logger.error(f"[{self.name}] Document {index} failed: {e}")
            return e
