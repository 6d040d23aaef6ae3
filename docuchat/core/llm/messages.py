"""Conversion of conversation turns to LiteLLM chat messages."""

import logging
from typing import Any, Dict, List, Sequence

from docuchat.models.schemas.chat import FilePart, TextPart, Turn

logger = logging.getLogger(__name__)


def file_part_to_content(part: FilePart) -> Dict[str, Any]:
    """Convert a file part to a multimodal content block.

    Images become ``image_url`` blocks, PDFs become ``file`` blocks carrying
    the data URL.

    Raises:
        ValueError: If the media type cannot be sent to a vision model
    """
    if part.is_image:
        return {"type": "image_url", "image_url": {"url": part.url}}
    if part.media_type == "application/pdf":
        file_block: Dict[str, Any] = {"file_data": part.url}
        if part.filename:
            file_block["filename"] = part.filename
        return {"type": "file", "file": file_block}
    raise ValueError(f"Unsupported media type for chat: {part.media_type}")


def turn_to_message(turn: Turn) -> Dict[str, Any]:
    """Convert one turn to a chat message.

    Text-only turns use plain string content; turns with files use a list
    of content blocks in part order.
    """
    if not turn.files:
        return {"role": turn.role, "content": turn.text}

    content: List[Dict[str, Any]] = []
    for part in turn.parts:
        if isinstance(part, TextPart):
            content.append({"type": "text", "text": part.text})
            continue
        try:
            content.append(file_part_to_content(part))
        except ValueError as e:
            logger.warning(f"Skipping file part in turn {turn.id}: {e}")

    return {"role": turn.role, "content": content}


def to_litellm_messages(system_prompt: str, turns: Sequence[Turn]) -> List[Dict[str, Any]]:
    """Build the message list for a chat call: system prompt, then turns."""
    messages: List[Dict[str, Any]] = [{"role": "system", "content": system_prompt}]
    messages.extend(turn_to_message(turn) for turn in turns)
    return messages
