"""Refusal detection for streamed model output.

Only explicit refusals ("I cannot translate", "Je ne peux pas traduire")
are matched. The check only runs on the beginning of a response: refusals
come first, and a long translation may legitimately contain the same
phrases.
"""

import math
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern

from docuchat.models.enums import Confidence

# Beyond this many tokens a response is never classified as a refusal
MAX_REFUSAL_TOKENS = 200
# Medium-confidence patterns only apply to responses shorter than this
MEDIUM_CONFIDENCE_MAX_TOKENS = 100


@dataclass(frozen=True)
class RefusalDetection:
    """Outcome of classifying a text prefix."""

    is_refusal: bool
    confidence: Confidence = Confidence.LOW
    matched_pattern: Optional[str] = None

    @property
    def should_retry(self) -> bool:
        """Only high-confidence refusals trigger a retry."""
        return self.is_refusal and self.confidence == Confidence.HIGH


NOT_A_REFUSAL = RefusalDetection(is_refusal=False)


HIGH_CONFIDENCE_PATTERNS: List[Pattern[str]] = [
    # English
    re.compile(r"I\s+(cannot|can['’]t|can not|should not|shouldn['’]t|won['’]t|will not)\s+(translate|provide|assist|help|process)", re.I),
    re.compile(r"I['’]m\s+(unable|not able|not comfortable)\s+to\s+(translate|provide|assist|help|process)", re.I),
    re.compile(r"I\s+(must|need to|have to)\s+(decline|refuse)", re.I),
    # French
    re.compile(r"Je\s+(ne peux pas|ne dois pas|refuse de)\s+(traduire|fournir|aider|traiter)", re.I),
    re.compile(r"Je\s+(suis désolée?|regrette|m['’]excuse),?\s+(je ne peux|impossible de|mais je ne)", re.I),
    re.compile(r"Il\s+m['’]est\s+impossible\s+de\s+(traduire|fournir)", re.I),
    re.compile(r"Je\s+m['’]excuse,?\s+mais\s+je\s+ne\s+peux\s+pas", re.I),
    # Spanish
    re.compile(r"No\s+puedo\s+(traducir|proporcionar|ayudar)", re.I),
    re.compile(r"Lo\s+siento,?\s+(pero\s+)?no\s+puedo", re.I),
    # German
    re.compile(r"Ich\s+kann\s+(das\s+|dies\s+)?nicht\s+(übersetzen|bereitstellen|helfen)", re.I),
    re.compile(r"Es\s+tut\s+mir\s+leid,?\s+(aber\s+)?ich\s+kann", re.I),
    # Portuguese
    re.compile(r"Não\s+posso\s+(traduzir|fornecer|ajudar)", re.I),
    # Italian
    re.compile(r"Non\s+posso\s+(tradurre|fornire|aiutare)", re.I),
    # Arabic
    re.compile(r"لا\s+(أستطيع|يمكنني)\s+(ترجمة|مساعدة)"),
    # Policy and guideline mentions
    re.compile(r"violates?\s+(my|our|the)\s+(guidelines?|policy|policies|principles?)", re.I),
    re.compile(r"against\s+(my|our|the)\s+(guidelines?|policy|policies|programming)", re.I),
]

MEDIUM_CONFIDENCE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"I\s+don['’]t\s+feel\s+comfortable", re.I),
    re.compile(r"this\s+(appears|seems)\s+to\s+(be|contain)\s+(sensitive|personal|private)", re.I),
    re.compile(r"désolée?", re.I),
    re.compile(r"lo\s+siento", re.I),
]


def estimate_token_count(text: str) -> int:
    """Rough token estimate: 1.3 tokens per whitespace-separated word."""
    words = text.split()
    return math.ceil(len(words) * 1.3)


def detect_refusal(text: str, token_count: int) -> RefusalDetection:
    """Classify whether a response prefix is a refusal.

    Args:
        text: Beginning of the model response
        token_count: Approximate token count of text

    Returns:
        RefusalDetection with confidence and the matched pattern
    """
    if token_count > MAX_REFUSAL_TOKENS:
        return NOT_A_REFUSAL

    for pattern in HIGH_CONFIDENCE_PATTERNS:
        if pattern.search(text):
            return RefusalDetection(
                is_refusal=True,
                confidence=Confidence.HIGH,
                matched_pattern=pattern.pattern,
            )

    if token_count < MEDIUM_CONFIDENCE_MAX_TOKENS:
        for pattern in MEDIUM_CONFIDENCE_PATTERNS:
            if pattern.search(text):
                return RefusalDetection(
                    is_refusal=True,
                    confidence=Confidence.MEDIUM,
                    matched_pattern=pattern.pattern,
                )

    return NOT_A_REFUSAL
