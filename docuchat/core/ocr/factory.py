"""Factory for the configured OCR backend."""

import logging

import httpx

from docuchat.config import Settings
from docuchat.core.llm.gateway import LLMGateway
from docuchat.core.llm.runtime_config import LLMRuntimeConfig
from docuchat.core.polling import RetryPolicy
from docuchat.models.enums import OCRBackendType

from .base import OCRBackend
from .datalab import DataLabOCRBackend
from .mistral import MistralOCRBackend
from .vision import VisionOCRBackend

logger = logging.getLogger(__name__)


class OCRBackendFactory:
    """Factory for creating OCR backends."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        gateway: LLMGateway,
        http_client: httpx.AsyncClient,
    ) -> OCRBackend:
        """Create the OCR backend selected by settings.ocr_backend.

        Args:
            settings: Application settings
            gateway: Shared LLM gateway (vision backend)
            http_client: Shared HTTP client (REST backends)

        Returns:
            Configured OCRBackend

        Raises:
            ValueError: If the backend is unknown or its API key is missing
        """
        backend = OCRBackendType(settings.ocr_backend)
        logger.info(f"Using OCR backend: {backend.value}")

        if backend == OCRBackendType.VISION:
            return VisionOCRBackend(gateway, LLMRuntimeConfig.for_stage("ocr", settings))

        if backend == OCRBackendType.MISTRAL:
            if not settings.mistral_api_key:
                raise ValueError("MISTRAL_API_KEY is required for the mistral OCR backend")
            return MistralOCRBackend(
                http_client,
                api_key=settings.mistral_api_key,
                url=settings.mistral_ocr_url,
                model=settings.mistral_ocr_model,
            )

        if not settings.datalab_api_key:
            raise ValueError("DATALAB_API_KEY is required for the datalab OCR backend")
        return DataLabOCRBackend(
            http_client,
            api_key=settings.datalab_api_key,
            url=settings.datalab_ocr_url,
            policy=RetryPolicy.from_settings(settings),
        )
