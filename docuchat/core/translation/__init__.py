"""Translation package.

Architecture:
- base.py: TranslationBackend interface and TranslationResult
- llm.py: blocking and streaming translation through the LLM gateway
- deepl.py: DeepL REST adapter
- factory.py: backend selection from settings
"""

from .base import TranslationBackend, TranslationResult
from .deepl import DeepLTranslationBackend
from .factory import TranslationBackendFactory
from .llm import LLMTranslationBackend, StreamingLLMTranslationBackend

__all__ = [
    "TranslationBackend",
    "TranslationResult",
    "DeepLTranslationBackend",
    "TranslationBackendFactory",
    "LLMTranslationBackend",
    "StreamingLLMTranslationBackend",
]
