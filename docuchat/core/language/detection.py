"""Conversation and target language detection.

The conversation language is resolved by an ordered cascade of detectors,
each inspecting the conversation and returning a language or ``None``:

1. Refusal text language (the model already chose a language when declining)
2. Unicode script detection (unambiguous for non-Latin scripts)
3. Keyword frequency analysis (Latin-script languages)
4. Explicit "translate to <language>" instruction in the current message

The first detector that returns a language wins; otherwise the base
language is used.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple

from docuchat.models.schemas.chat import Turn

from .languages import (
    BASE_LANGUAGE,
    DEFAULT_TARGET_BY_CONVERSATION,
    LANGUAGE_NAME_MAP,
    ConversationLanguage,
    TargetLanguage,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionInput:
    """Everything a detector may look at."""

    current_message: Turn
    prior_messages: Sequence[Turn] = field(default_factory=tuple)
    refusal_text: Optional[str] = None

    @property
    def user_text(self) -> str:
        """Text of every user-authored turn, oldest first."""
        turns = [*self.prior_messages, self.current_message]
        return " ".join(t.text for t in turns if t.role == "user")


Detector = Callable[[DetectionInput], Optional[ConversationLanguage]]


# =============================================================================
# Detector 1: refusal text
# =============================================================================

REFUSAL_LANGUAGE_PATTERNS: List[Tuple[ConversationLanguage, Pattern[str]]] = [
    (ConversationLanguage.FR, re.compile(r"je (ne peux|dois|suis)|traduire|désolé|il m'est impossible", re.I)),
    (ConversationLanguage.AR, re.compile(r"لا (أستطيع|يمكنني)|ترجمة|آسف")),
    (ConversationLanguage.ES, re.compile(r"no puedo|traducir|lo siento", re.I)),
    (ConversationLanguage.DE, re.compile(r"ich kann nicht|übersetzen|tut mir leid", re.I)),
    (ConversationLanguage.PT, re.compile(r"não posso|traduzir|desculpe", re.I)),
    (ConversationLanguage.IT, re.compile(r"non posso|tradurre|mi dispiace", re.I)),
    (ConversationLanguage.RU, re.compile(r"не могу|перевести|извините", re.I)),
    (ConversationLanguage.TR, re.compile(r"yapamam|çeviremem|üzgünüm", re.I)),
]


def from_refusal_text(data: DetectionInput) -> Optional[ConversationLanguage]:
    """Detect the language a refusal was written in.

    Only non-default languages are trusted: an English-looking refusal says
    little, since models often fall back to English.
    """
    if not data.refusal_text:
        return None
    for language, pattern in REFUSAL_LANGUAGE_PATTERNS:
        if pattern.search(data.refusal_text):
            return language
    return None


# =============================================================================
# Detector 2: Unicode script
# =============================================================================

SCRIPT_PATTERNS: List[Tuple[ConversationLanguage, Pattern[str]]] = [
    # Arabic (including Persian, Urdu)
    (ConversationLanguage.AR, re.compile(r"[؀-ۿݐ-ݿ]")),
    # Kana is checked before Han so Japanese text with kanji is not read as Chinese
    (ConversationLanguage.JA, re.compile(r"[぀-ゟ゠-ヿ]")),
    (ConversationLanguage.ZH, re.compile(r"[一-鿿]")),
    (ConversationLanguage.KO, re.compile(r"[가-힯ᄀ-ᇿ㄰-㆏]")),
    (ConversationLanguage.RU, re.compile(r"[Ѐ-ӿ]")),
]


def from_unicode_script(data: DetectionInput) -> Optional[ConversationLanguage]:
    """Detect a non-Latin script anywhere in the user's text."""
    text = data.user_text
    for language, pattern in SCRIPT_PATTERNS:
        if pattern.search(text):
            return language
    return None


# =============================================================================
# Detector 3: keyword frequency
# =============================================================================

# English has no keyword list; it is the default when nothing else matches.
LANGUAGE_KEYWORDS: Dict[ConversationLanguage, List[str]] = {
    ConversationLanguage.FR: [
        "traduire", "traduction", "français", "certificat", "document", "en français",
        "le", "la", "les", "des", "est", "dans",
    ],
    ConversationLanguage.ES: [
        "traducir", "traducción", "español", "documento", "en español",
        "el", "la", "los", "las", "del", "para",
    ],
    ConversationLanguage.DE: [
        "übersetzen", "übersetzung", "deutsch", "dokument", "auf deutsch",
        "der", "die", "das", "den", "ist", "und",
    ],
    ConversationLanguage.PT: [
        "traduzir", "tradução", "português", "documento", "em português",
        "o", "a", "os", "as", "para", "de",
    ],
    ConversationLanguage.IT: [
        "tradurre", "traduzione", "italiano", "documento", "in italiano",
        "il", "la", "lo", "gli", "per", "di",
    ],
    ConversationLanguage.TR: [
        "çevirmek", "çeviri", "türkçe", "belge", "türkçeye", "bir", "bu", "ve", "için",
    ],
    ConversationLanguage.NL: [
        "vertalen", "vertaling", "nederlands", "document", "in het nederlands",
        "de", "het", "een", "van",
    ],
    ConversationLanguage.PL: [
        "tłumaczyć", "tłumaczenie", "polski", "dokument", "po polsku", "w", "na", "jest",
    ],
}

MIN_KEYWORD_MATCHES = 2


def count_keyword_matches(text: str, keywords: Sequence[str]) -> int:
    """Count whole-word occurrences of every keyword in text."""
    count = 0
    for keyword in keywords:
        count += len(re.findall(rf"\b{re.escape(keyword)}\b", text, re.I))
    return count


def score_keywords(text: str) -> Dict[ConversationLanguage, int]:
    """Keyword match count per candidate language."""
    lowered = text.lower()
    return {
        language: count_keyword_matches(lowered, keywords)
        for language, keywords in LANGUAGE_KEYWORDS.items()
    }


def from_keywords(data: DetectionInput) -> Optional[ConversationLanguage]:
    """Pick the best-scoring Latin-script language, if it scores at least 2."""
    scores = score_keywords(data.user_text)
    best_language, best_score = max(scores.items(), key=lambda item: item[1])
    if best_score >= MIN_KEYWORD_MATCHES:
        return best_language
    return None


# =============================================================================
# Detector 4: explicit instruction
# =============================================================================

INSTRUCTION_PATTERN = re.compile(
    r"\b(?:to|into|in|en|vers|à|al|auf|ins|em|para|на|إلى|için)\s+(\w+)",
    re.I,
)

# Names that only exist as conversation languages
_EXTRA_CONVERSATION_NAMES: Dict[str, ConversationLanguage] = {
    "turkish": ConversationLanguage.TR,
    "turc": ConversationLanguage.TR,
    "türkçe": ConversationLanguage.TR,
    "korean": ConversationLanguage.KO,
    "coréen": ConversationLanguage.KO,
}


def extract_explicit_target(text: str) -> Optional[TargetLanguage]:
    """Find "translate to/in <language>" and map the language name.

    Args:
        text: Message text

    Returns:
        Target language, or None if no known language name follows a
        direction word
    """
    for match in INSTRUCTION_PATTERN.finditer(text.lower()):
        name = match.group(1)
        # Two-letter codes ("it", "de") are ordinary words after a preposition
        if len(name) <= 2:
            continue
        target = LANGUAGE_NAME_MAP.get(name)
        if target is not None:
            return target
    return None


def from_explicit_instruction(data: DetectionInput) -> Optional[ConversationLanguage]:
    """Use the language named in an explicit instruction."""
    text = data.current_message.text.lower()
    target = extract_explicit_target(text)
    if target is not None:
        return ConversationLanguage(target.base)
    for match in INSTRUCTION_PATTERN.finditer(text):
        language = _EXTRA_CONVERSATION_NAMES.get(match.group(1))
        if language is not None:
            return language
    return None


# =============================================================================
# Cascade
# =============================================================================

CONVERSATION_DETECTORS: Tuple[Detector, ...] = (
    from_refusal_text,
    from_unicode_script,
    from_keywords,
    from_explicit_instruction,
)


def first_match(
    detectors: Sequence[Detector],
    data: DetectionInput,
    default: ConversationLanguage = BASE_LANGUAGE,
) -> ConversationLanguage:
    """Run detectors in order and return the first non-None result."""
    for detector in detectors:
        language = detector(data)
        if language is not None:
            logger.debug(f"Language {language.value} detected by {detector.__name__}")
            return language
    return default


def detect_conversation_language(
    current_message: Turn,
    prior_messages: Sequence[Turn] = (),
    refusal_text: Optional[str] = None,
) -> ConversationLanguage:
    """Detect the language the conversation is held in.

    Args:
        current_message: The newest user turn
        prior_messages: Earlier turns of the conversation
        refusal_text: Optional refusal from the model (strongest signal)

    Returns:
        Detected conversation language, the base language if nothing matched
    """
    data = DetectionInput(
        current_message=current_message,
        prior_messages=tuple(prior_messages),
        refusal_text=refusal_text,
    )
    return first_match(CONVERSATION_DETECTORS, data)


# =============================================================================
# Target language
# =============================================================================

# Phrases followed by the target language name
TARGET_INDICATORS = [
    "translate to",
    "translate into",
    "translate it to",
    "translate this to",
    "traduire en",
    "traduction en",
    "traduis en",
    "traduisez en",
    "ترجم إلى",
    "ترجمة إلى",
    "translation to",
    "translation into",
    "traducir al",
    "traducir a",
    "übersetzen auf",
    "übersetzung auf",
]

# Phrases that already name the target language
TARGET_PHRASES: Dict[str, TargetLanguage] = {
    "en anglais": TargetLanguage.EN_US,
    "en français": TargetLanguage.FR,
    "to english": TargetLanguage.EN_US,
    "to french": TargetLanguage.FR,
    "in english": TargetLanguage.EN_US,
    "in french": TargetLanguage.FR,
}

_PUNCTUATION = ".,;:!?'\"()"


def _target_from_indicators(text: str) -> Optional[TargetLanguage]:
    for indicator in TARGET_INDICATORS:
        if indicator not in text:
            continue
        words = text.split(indicator, 1)[1].split()
        if words:
            target = LANGUAGE_NAME_MAP.get(words[0].strip(_PUNCTUATION))
            if target is not None:
                return target
    for phrase, target in TARGET_PHRASES.items():
        if phrase in text:
            return target
    return None


def default_target_for(
    conversation_language: ConversationLanguage,
    fallback: TargetLanguage = TargetLanguage.FR,
) -> TargetLanguage:
    """Pick a target language different from the conversation language."""
    target = DEFAULT_TARGET_BY_CONVERSATION.get(conversation_language, fallback)
    if target.base == conversation_language.value:
        target = TargetLanguage.FR if conversation_language != ConversationLanguage.FR else TargetLanguage.EN_US
    return target


def detect_target_language(
    current_message: Turn,
    prior_messages: Sequence[Turn] = (),
    fallback: TargetLanguage = TargetLanguage.FR,
) -> TargetLanguage:
    """Resolve the language the user wants a document translated into.

    Explicit instructions in the current message win over every heuristic.
    Without one, the target is derived from the conversation language by a
    static mapping that never targets the conversation's own language.

    Args:
        current_message: The newest user turn
        prior_messages: Earlier turns of the conversation
        fallback: Target used when the conversation language has no mapping

    Returns:
        Target language
    """
    text = current_message.text.lower()

    target = _target_from_indicators(text) or extract_explicit_target(text)
    if target is not None:
        return target

    conversation_language = detect_conversation_language(current_message, prior_messages)
    return default_target_for(conversation_language, fallback)
