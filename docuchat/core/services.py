"""Service container built once at application startup."""

import logging
from dataclasses import dataclass

import httpx

from docuchat.config import Settings
from docuchat.core.history.store import HistoryStore, create_history_store
from docuchat.core.llm.gateway import LLMGateway
from docuchat.core.llm.runtime_config import LLMRuntimeConfig
from docuchat.core.ocr.factory import OCRBackendFactory
from docuchat.core.orchestrator.pipeline import PipelineOrchestrator
from docuchat.core.orchestrator.retry import RetryOrchestrator
from docuchat.core.translation.factory import TranslationBackendFactory

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Long-lived clients and the pipeline wired from them."""

    settings: Settings
    http_client: httpx.AsyncClient
    gateway: LLMGateway
    history_store: HistoryStore
    pipeline: PipelineOrchestrator

    @classmethod
    def build(cls, settings: Settings) -> "Services":
        """Wire every component from settings.

        Raises:
            ValueError: If a selected backend is missing its configuration
        """
        http_client = httpx.AsyncClient(timeout=settings.http_timeout)
        gateway = LLMGateway(LLMRuntimeConfig.for_stage("chat", settings))
        history_store = create_history_store(settings)

        pipeline = PipelineOrchestrator(
            settings=settings,
            ocr_backend=OCRBackendFactory.create(settings, gateway, http_client),
            translation_backend=TranslationBackendFactory.create(settings, gateway, http_client),
            retry_orchestrator=RetryOrchestrator(
                gateway,
                settings.system_prompt,
                max_retries=settings.max_refusal_retries,
                buffer_tokens=settings.refusal_buffer_tokens,
            ),
            history_store=history_store,
            http_client=http_client,
        )

        logger.info(
            f"Services ready: chat={settings.chat_model}, ocr={settings.ocr_backend}, "
            f"translation={settings.translation_backend}, history={settings.history_backend}"
        )
        return cls(
            settings=settings,
            http_client=http_client,
            gateway=gateway,
            history_store=history_store,
            pipeline=pipeline,
        )

    async def aclose(self) -> None:
        """Close network clients."""
        await self.history_store.close()
        await self.http_client.aclose()
