"""Conversation history stores.

History is a best-effort cache keyed by conversation id: the last writer
wins, and a missing or unreadable conversation simply has no history.
Each conversation is stored as one JSON document::

    {"id", "title", "messages", "createdAt", "updatedAt"}
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import redis.asyncio as aioredis
from pydantic import ValidationError

from docuchat.config import Settings
from docuchat.core.errors import HistoryStoreError
from docuchat.models.enums import HistoryBackendType
from docuchat.models.schemas.chat import Turn

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Chat"
TITLE_MAX_CHARS = 50


def extract_title(turns: Sequence[Turn]) -> str:
    """Title from the first user text: its first 50 characters."""
    first_user = next((t for t in turns if t.role == "user" and t.text), None)
    if first_user is None:
        return DEFAULT_TITLE
    text = first_user.text
    if len(text) > TITLE_MAX_CHARS:
        return text[:TITLE_MAX_CHARS] + "..."
    return text


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_document(chat_id: str, turns: Sequence[Turn], existing: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build the stored JSON document, keeping title and creation time of an existing one."""
    now = _now()
    return {
        "id": chat_id,
        "title": existing.get("title", DEFAULT_TITLE) if existing else extract_title(turns),
        "messages": [t.model_dump(mode="json", by_alias=True, exclude_none=True) for t in turns],
        "createdAt": existing.get("createdAt", now) if existing else now,
        "updatedAt": now,
    }


def parse_messages(document: Dict[str, Any]) -> List[Turn]:
    return [Turn.model_validate(m) for m in document.get("messages") or []]


class HistoryStore(ABC):
    """Loads and saves the turns of a conversation."""

    @abstractmethod
    async def load(self, chat_id: str) -> List[Turn]:
        """Load a conversation, oldest turn first; [] if unknown.

        Raises:
            HistoryStoreError: If the store cannot be read
        """

    @abstractmethod
    async def save(self, chat_id: str, turns: Sequence[Turn]) -> None:
        """Replace the stored turns of a conversation.

        Raises:
            HistoryStoreError: If the store cannot be written
        """

    async def close(self) -> None:
        """Release connections held by the store."""


class InMemoryHistoryStore(HistoryStore):
    """Process-local store, used by default and in tests."""

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def load(self, chat_id: str) -> List[Turn]:
        document = self._documents.get(chat_id)
        if document is None:
            return []
        return parse_messages(document)

    async def save(self, chat_id: str, turns: Sequence[Turn]) -> None:
        self._documents[chat_id] = build_document(chat_id, turns, self._documents.get(chat_id))

    def get_document(self, chat_id: str) -> Optional[Dict[str, Any]]:
        """Raw stored document, for inspection."""
        return self._documents.get(chat_id)


class RedisHistoryStore(HistoryStore):
    """Redis-backed store with a sliding expiry per conversation."""

    def __init__(
        self,
        client: aioredis.Redis,
        key_prefix: str = "chat:",
        ttl_seconds: int = 30 * 24 * 60 * 60,
    ):
        self._client = client
        self._prefix = key_prefix
        self._ttl = ttl_seconds

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisHistoryStore":
        return cls(aioredis.from_url(url, decode_responses=True), **kwargs)

    def _key(self, chat_id: str) -> str:
        return f"{self._prefix}{chat_id}"

    async def _get_document(self, chat_id: str) -> Optional[Dict[str, Any]]:
        try:
            raw_value = await self._client.get(self._key(chat_id))
        except aioredis.RedisError as e:
            raise HistoryStoreError(f"Redis get failed for chat {chat_id}: {e}") from e
        if raw_value is None:
            return None
        try:
            return json.loads(raw_value)
        except json.JSONDecodeError as e:
            raise HistoryStoreError(f"Stored chat {chat_id} is not valid JSON: {e}") from e

    async def load(self, chat_id: str) -> List[Turn]:
        document = await self._get_document(chat_id)
        if document is None:
            return []
        try:
            return parse_messages(document)
        except ValidationError as e:
            raise HistoryStoreError(f"Stored chat {chat_id} has invalid messages: {e}") from e

    async def save(self, chat_id: str, turns: Sequence[Turn]) -> None:
        try:
            existing = await self._get_document(chat_id)
        except HistoryStoreError as e:
            logger.warning(f"Overwriting unreadable chat {chat_id}: {e}")
            existing = None

        document = build_document(chat_id, turns, existing)
        try:
            await self._client.set(
                self._key(chat_id),
                json.dumps(document, ensure_ascii=False),
                ex=self._ttl,
            )
        except aioredis.RedisError as e:
            raise HistoryStoreError(f"Redis set failed for chat {chat_id}: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()


def create_history_store(settings: Settings) -> HistoryStore:
    """Create the history store selected by settings.history_backend.

    Raises:
        ValueError: If the redis backend is selected without a URL
    """
    backend = HistoryBackendType(settings.history_backend)
    if backend == HistoryBackendType.REDIS:
        if not settings.redis_url:
            raise ValueError("REDIS_URL is required for the redis history backend")
        logger.info("Using Redis history store")
        return RedisHistoryStore.from_url(
            settings.redis_url,
            key_prefix=settings.history_key_prefix,
            ttl_seconds=settings.history_ttl_seconds,
        )
    logger.info("Using in-memory history store")
    return InMemoryHistoryStore()
