"""Text utilities for model output and log previews."""

import re
from typing import AsyncIterator, Tuple

_FENCE_OPEN = re.compile(r"^```[\w-]*[ \t]*\n")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")


def strip_code_fences(content: str) -> str:
    """Remove a code fence wrapping the whole text.

    Models sometimes answer with the translation inside a ```markdown
    block despite being told not to. Only a fence that opens at the start
    and closes at the end is removed; fences inside the text are kept.

    Args:
        content: Raw model output

    Returns:
        Text without the wrapping fence
    """
    text = content.strip()
    if not text.startswith("```"):
        return text

    opened = _FENCE_OPEN.match(text)
    if not opened or not _FENCE_CLOSE.search(text[opened.end():]):
        return text

    inner = text[opened.end():]
    inner = _FENCE_CLOSE.sub("", inner)
    return inner.strip()


def _split_last_line(text: str) -> Tuple[str, str]:
    """Split off the last non-blank line and whatever trails it."""
    cut = text.rstrip().rfind("\n")
    if cut <= 0:
        return "", text
    return text[:cut], text[cut:]


async def strip_code_fences_stream(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    """Streaming counterpart of strip_code_fences.

    The opening fence line is dropped once it is complete. Fenced content
    is then released one line behind the stream so that a closing fence
    on the last line can be dropped too. Output that does not start with
    a fence passes through unchanged as soon as that is known.

    Args:
        chunks: Raw model output chunks

    Yields:
        Text chunks without the wrapping fence
    """
    head = ""
    async for chunk in chunks:
        head += chunk
        stripped = head.lstrip()
        if "```".startswith(stripped):
            continue
        if stripped.startswith("```") and "\n" not in stripped:
            continue
        break
    else:
        # Stream ended before a fence could be ruled in or out
        text = strip_code_fences(head)
        if text:
            yield text
        return

    opened = _FENCE_OPEN.match(stripped)
    if not opened:
        yield head
        async for chunk in chunks:
            yield chunk
        return

    pending = stripped[opened.end():]
    async for chunk in chunks:
        pending += chunk
        ready, pending = _split_last_line(pending)
        if ready:
            yield ready

    tail = _FENCE_CLOSE.sub("", pending).rstrip()
    if tail:
        yield tail


def safe_truncate(text: str, max_chars: int, suffix: str = "...") -> str:
    """Truncate text for display, preferring a word boundary.

    Args:
        text: Text to truncate
        max_chars: Maximum characters (excluding suffix)
        suffix: Suffix to append if truncated (default "...")

    Returns:
        Truncated text with suffix if needed
    """
    if not text or len(text) <= max_chars:
        return text

    truncated = text[:max_chars]

    # Look back up to 20 characters for a good break point
    break_chars = {' ', '\n', '\t', ',', '.', '!', '?', ';', ':', '-'}
    for i in range(min(20, max_chars - 1), 0, -1):
        if truncated[-i] in break_chars:
            truncated = truncated[:-i].rstrip()
            break

    return truncated + suffix
