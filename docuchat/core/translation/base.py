"""Translation backend interface."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Optional

from docuchat.core.language.languages import TargetLanguage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranslationResult:
    """Translated text with provenance."""

    text: str
    target_language: TargetLanguage
    source_language: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class TranslationBackend(ABC):
    """Translates markdown into a target language."""

    name: str = "translation"

    @abstractmethod
    async def translate(
        self,
        markdown: str,
        target_language: TargetLanguage,
        formality: Optional[str] = None,
        context: Optional[str] = None,
    ) -> TranslationResult:
        """Translate a document.

        Args:
            markdown: Source text in markdown
            target_language: Language to translate into
            formality: Register hint, for backends that support it
            context: Background that helps the translation but is not translated

        Returns:
            TranslationResult

        Raises:
            TranslationError: If the backend fails
        """

    async def translate_stream(
        self,
        markdown: str,
        target_language: TargetLanguage,
        formality: Optional[str] = None,
        context: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """Translate a document as a stream of text chunks.

        Backends without native streaming yield the whole translation as a
        single chunk.
        """
        result = await self.translate(markdown, target_language, formality=formality, context=context)
        yield result.text
