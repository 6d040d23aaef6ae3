"""Conversation turn schemas.

A turn is one message in a conversation: a role plus an ordered list of
parts, each either text or a file reference. Turns are frozen so the
orchestrator can only append new turns, never rewrite prior ones.
"""

import secrets
from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def generate_message_id(prefix: str = "msg", size: int = 16) -> str:
    """Generate a server-side message id such as ``msg-3f9a...``."""
    return f"{prefix}-{secrets.token_hex(size // 2)}"


class TextPart(BaseModel):
    """Plain text content of a turn."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str = Field(..., description="Text content")


class FilePart(BaseModel):
    """File attached to a turn, carried inline (data URL) or by remote URL."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["file"] = "file"
    media_type: str = Field(
        ..., alias="mediaType", description="MIME type, e.g. image/png"
    )
    url: str = Field(
        ..., description="data:<media>;base64,<payload> URL or http(s) URL"
    )
    filename: Optional[str] = Field(default=None, description="Original filename")

    @property
    def is_inline(self) -> bool:
        return self.url.startswith("data:")

    @property
    def is_image(self) -> bool:
        return self.media_type.startswith("image/")

    @property
    def is_document(self) -> bool:
        """Whether the part should go through OCR (images and PDFs)."""
        return self.is_image or self.media_type == "application/pdf"

    def base64_payload(self) -> str:
        """Return the base64 payload of an inline file.

        Raises:
            ValueError: If the part references a remote URL
        """
        if not self.is_inline:
            raise ValueError("File part is not inline")
        _, _, payload = self.url.partition("base64,")
        return payload or self.url


Part = Annotated[Union[TextPart, FilePart], Field(discriminator="type")]


class Turn(BaseModel):
    """One message in a conversation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=generate_message_id, description="Message id")
    role: Literal["user", "assistant"] = Field(..., description="Message author")
    parts: List[Part] = Field(default_factory=list, description="Ordered parts")
    created_at: Optional[datetime] = Field(
        default=None, alias="createdAt", description="Creation timestamp"
    )

    @property
    def text(self) -> str:
        """All text parts joined with a space."""
        return " ".join(p.text for p in self.parts if isinstance(p, TextPart))

    @property
    def files(self) -> List[FilePart]:
        return [p for p in self.parts if isinstance(p, FilePart)]

    @classmethod
    def user_text(cls, text: str) -> "Turn":
        """Build a user turn holding a single text part."""
        return cls(
            role="user",
            parts=[TextPart(text=text)],
            created_at=datetime.now(timezone.utc),
        )

    @classmethod
    def assistant_text(cls, text: str) -> "Turn":
        """Build an assistant turn holding a single text part."""
        return cls(
            role="assistant",
            parts=[TextPart(text=text)],
            created_at=datetime.now(timezone.utc),
        )


class ChatRequest(BaseModel):
    """Body of ``POST /api/v1/chat``.

    The client sends only the newest turn; prior turns come from the
    history store.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: Turn = Field(..., description="The new user turn")
    id: str = Field(..., min_length=1, description="Conversation id")
    history_enabled: bool = Field(
        default=True,
        alias="historyEnabled",
        description="Load and persist conversation history",
    )

    @field_validator("message")
    @classmethod
    def _message_from_user(cls, value: Turn) -> Turn:
        if value.role != "user":
            raise ValueError("message.role must be 'user'")
        return value


class ChatHistoryResponse(BaseModel):
    """Response model for ``GET /api/v1/chat/{chat_id}``."""

    messages: List[Turn]
