"""Language signal extraction."""

from .detection import (
    CONVERSATION_DETECTORS,
    DetectionInput,
    detect_conversation_language,
    detect_target_language,
    extract_explicit_target,
    first_match,
)
from .languages import ConversationLanguage, TargetLanguage

__all__ = [
    "CONVERSATION_DETECTORS",
    "DetectionInput",
    "detect_conversation_language",
    "detect_target_language",
    "extract_explicit_target",
    "first_match",
    "ConversationLanguage",
    "TargetLanguage",
]
