"""Centralized enum definitions.

All status and grade enums shared across the core should be defined here
for consistency.
"""

from enum import Enum
from typing import Iterable


# =============================================================================
# Confidence
# =============================================================================


class Confidence(str, Enum):
    """Three-level confidence grade (refusal detection, OCR quality)."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def overall(cls, grades: Iterable["Confidence"]) -> "Confidence":
        """Combine grades: high only if all high, low if any low."""
        grades = list(grades)
        if grades and all(g == cls.HIGH for g in grades):
            return cls.HIGH
        if any(g == cls.LOW for g in grades):
            return cls.LOW
        return cls.MEDIUM


# =============================================================================
# Backend Enums
# =============================================================================


class OCRBackendType(str, Enum):
    """Available OCR backends."""

    VISION = "vision"
    MISTRAL = "mistral"
    DATALAB = "datalab"


class TranslationBackendType(str, Enum):
    """Available translation backends."""

    LLM = "llm"
    LLM_STREAM = "llm_stream"
    DEEPL = "deepl"


class HistoryBackendType(str, Enum):
    """Available chat history stores."""

    MEMORY = "memory"
    REDIS = "redis"
