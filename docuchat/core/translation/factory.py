"""Factory for the configured translation backend."""

import logging

import httpx

from docuchat.config import Settings
from docuchat.core.llm.gateway import LLMGateway
from docuchat.core.llm.runtime_config import LLMRuntimeConfig
from docuchat.models.enums import TranslationBackendType

from .base import TranslationBackend
from .deepl import DeepLTranslationBackend
from .llm import LLMTranslationBackend, StreamingLLMTranslationBackend

logger = logging.getLogger(__name__)


class TranslationBackendFactory:
    """Factory for creating translation backends."""

    BACKEND_CLASSES = {
        TranslationBackendType.LLM: LLMTranslationBackend,
        TranslationBackendType.LLM_STREAM: StreamingLLMTranslationBackend,
    }

    @classmethod
    def create(
        cls,
        settings: Settings,
        gateway: LLMGateway,
        http_client: httpx.AsyncClient,
    ) -> TranslationBackend:
        """Create the translation backend selected by settings.translation_backend.

        Raises:
            ValueError: If the backend is unknown or its API key is missing
        """
        backend = TranslationBackendType(settings.translation_backend)
        logger.info(f"Using translation backend: {backend.value}")

        if backend == TranslationBackendType.DEEPL:
            if not settings.deepl_api_key:
                raise ValueError("DEEPL_API_KEY is required for the deepl translation backend")
            return DeepLTranslationBackend(
                http_client,
                api_key=settings.deepl_api_key,
                url=settings.deepl_api_url,
                default_formality=settings.translation_formality,
            )

        backend_class = cls.BACKEND_CLASSES[backend]
        return backend_class(gateway, LLMRuntimeConfig.for_stage("translation", settings))
