"""API dependencies for the shared service container."""

from typing import Annotated

from fastapi import Depends, Request

from docuchat.core.history.store import HistoryStore
from docuchat.core.orchestrator.pipeline import PipelineOrchestrator
from docuchat.core.services import Services


def get_services(request: Request) -> Services:
    """Services built in the application lifespan."""
    return request.app.state.services


def get_pipeline(services: Annotated[Services, Depends(get_services)]) -> PipelineOrchestrator:
    return services.pipeline


def get_history_store(services: Annotated[Services, Depends(get_services)]) -> HistoryStore:
    return services.history_store


# Type aliases for cleaner dependency injection
Pipeline = Annotated[PipelineOrchestrator, Depends(get_pipeline)]
History = Annotated[HistoryStore, Depends(get_history_store)]
