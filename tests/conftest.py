"""Pytest configuration for the docuchat test suite.

Configures:
- pytest-asyncio for async test support (auto mode, see pyproject.toml)
- settings isolated from the environment and .env files
- a pipeline factory wired with test doubles
"""

import os
from typing import Optional

import httpx
import pytest

# Use litellm's bundled model cost map instead of fetching it over the network
# at import time (the fetch fails offline and deadlocks under pytest logging).
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from docuchat.config import Settings
from docuchat.core.history.store import HistoryStore, InMemoryHistoryStore
from docuchat.core.orchestrator.pipeline import PipelineOrchestrator
from docuchat.core.orchestrator.retry import RetryOrchestrator

from tests.fakes import FakeGateway, FakeOCRBackend, FakeTranslationBackend


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        history_load_timeout=0.05,
        default_target_language="fr",
        ocr_poll_initial_delay=0.0,
        ocr_poll_max_delay=0.0,
    )


@pytest.fixture
def history_store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def build_pipeline(settings, history_store):
    """Factory for a PipelineOrchestrator wired with fakes."""

    def _build(
        gateway: Optional[FakeGateway] = None,
        ocr_backend: Optional[FakeOCRBackend] = None,
        translation_backend: Optional[FakeTranslationBackend] = None,
        store: Optional[HistoryStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        max_retries: int = 2,
        buffer_tokens: int = 150,
    ) -> PipelineOrchestrator:
        gateway = gateway or FakeGateway()
        return PipelineOrchestrator(
            settings=settings,
            ocr_backend=ocr_backend or FakeOCRBackend({}),
            translation_backend=translation_backend or FakeTranslationBackend(),
            retry_orchestrator=RetryOrchestrator(
                gateway,
                "You are a translator.",
                max_retries=max_retries,
                buffer_tokens=buffer_tokens,
            ),
            history_store=store if store is not None else history_store,
            http_client=http_client or httpx.AsyncClient(
                transport=httpx.MockTransport(lambda request: httpx.Response(404))
            ),
        )

    return _build
