"""Conversation history persistence."""

from .store import (
    HistoryStore,
    InMemoryHistoryStore,
    RedisHistoryStore,
    create_history_store,
    extract_title,
)

__all__ = [
    "HistoryStore",
    "InMemoryHistoryStore",
    "RedisHistoryStore",
    "create_history_store",
    "extract_title",
]
