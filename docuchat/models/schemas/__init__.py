"""Shared Pydantic schemas for API requests and responses."""

from .chat import (
    ChatHistoryResponse,
    ChatRequest,
    FilePart,
    Part,
    TextPart,
    Turn,
    generate_message_id,
)

__all__ = [
    "ChatHistoryResponse",
    "ChatRequest",
    "FilePart",
    "Part",
    "TextPart",
    "Turn",
    "generate_message_id",
]
