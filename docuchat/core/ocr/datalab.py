"""DataLab OCR service adapter.

DataLab works asynchronously: a multipart upload returns a request id and
a check URL, which is polled until the job is complete or failed.
"""

import base64
import functools
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from docuchat.core.errors import OCRError, PollingTimeoutError
from docuchat.core.polling import RetryPolicy, poll_until

from .base import OCRBackend, OCRResult, grade_confidence, grade_line_confidence

logger = logging.getLogger(__name__)


class DataLabOCRBackend(OCRBackend):
    """Submit-then-poll OCR; batches run one document at a time."""

    name = "datalab"
    sequential_batch = True

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        url: str = "https://www.datalab.to/api/v1/ocr",
        policy: Optional[RetryPolicy] = None,
    ):
        self.client = client
        self.api_key = api_key
        self.url = url
        self.policy = policy or RetryPolicy()

    @property
    def _headers(self) -> Dict[str, str]:
        return {"X-API-Key": self.api_key}

    async def _submit(self, data: str, media_type: str) -> Dict[str, Any]:
        filename = f"document.{media_type.split('/')[-1]}"
        files = {"file": (filename, base64.b64decode(data), media_type)}

        response = await self.client.post(self.url, files=files, headers=self._headers)
        if response.status_code >= 400:
            raise OCRError(
                f"DataLab request failed: {response.status_code} {response.reason_phrase} - {response.text}"
            )

        body = response.json()
        if not body.get("success") or not body.get("request_id"):
            raise OCRError(f"DataLab API error: {body.get('error') or 'Unknown error'}")
        return body

    async def _check(self, check_url: str) -> Optional[Dict[str, Any]]:
        """One status check: the result when complete, None while processing."""
        response = await self.client.get(check_url, headers=self._headers)
        response.raise_for_status()
        body = response.json()

        status = body.get("status")
        if status == "complete":
            return body
        if status == "failed":
            raise OCRError(f"DataLab processing failed: {body.get('error') or 'Unknown error'}")
        return None

    async def process(self, data: str, media_type: str) -> OCRResult:
        start_time = time.time()

        try:
            submitted = await self._submit(data, media_type)
        except httpx.HTTPError as e:
            raise OCRError(f"DataLab request failed: {e}") from e

        request_id = submitted["request_id"]
        logger.info(f"[datalab] Submitted request {request_id}, polling for results")

        try:
            result = await poll_until(
                functools.partial(self._check, submitted["request_check_url"]),
                self.policy,
                retry_on=(httpx.HTTPError,),
                description=f"DataLab request {request_id}",
            )
        except PollingTimeoutError as e:
            raise OCRError(f"DataLab processing timeout: {e}") from e

        pages = result.get("pages") or []
        if not pages:
            raise OCRError("DataLab returned no pages")

        page_texts: List[str] = []
        line_confidences: List[float] = []
        for page in pages:
            lines = page.get("text_lines") or []
            if not lines:
                continue
            line_confidences.extend(line.get("confidence") or 0.0 for line in lines)
            page_text = "\n".join(line.get("text", "") for line in lines)
            if len(pages) > 1:
                page_text = f"--- Page {page.get('page')} ---\n\n{page_text}"
            page_texts.append(page_text)

        markdown = "\n\n".join(page_texts)
        if not markdown.strip():
            raise OCRError("DataLab returned empty text")

        if line_confidences:
            confidence = grade_line_confidence(line_confidences)
        else:
            confidence = grade_confidence(markdown)

        processing_time = int((time.time() - start_time) * 1000)
        logger.info(
            f"[datalab] Request {request_id} complete in {processing_time}ms (confidence: {confidence.value})"
        )

        return OCRResult(
            markdown=markdown,
            page_count=result.get("page_count") or len(pages),
            confidence=confidence,
            metadata={
                "processing_time_ms": processing_time,
                "model": "surya-ocr",
                "request_id": request_id,
            },
        )
