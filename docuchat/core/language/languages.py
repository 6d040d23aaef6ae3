"""Language code enumerations and lookup tables."""

from enum import Enum
from typing import Dict


class ConversationLanguage(str, Enum):
    """Language a conversation is held in."""

    EN = "en"
    FR = "fr"
    AR = "ar"
    ES = "es"
    DE = "de"
    PT = "pt"
    IT = "it"
    RU = "ru"
    TR = "tr"
    NL = "nl"
    PL = "pl"
    JA = "ja"
    KO = "ko"
    ZH = "zh"


class TargetLanguage(str, Enum):
    """Language a document is translated into."""

    EN_US = "en-US"
    EN_GB = "en-GB"
    FR = "fr"
    AR = "ar"
    ES = "es"
    DE = "de"
    IT = "it"
    PT_BR = "pt-BR"
    PT_PT = "pt-PT"
    RU = "ru"
    ZH = "zh"
    JA = "ja"
    NL = "nl"
    PL = "pl"

    @property
    def base(self) -> str:
        """Two-letter base language, e.g. ``en`` for ``en-US``."""
        return self.value.split("-")[0]

    @property
    def display_name(self) -> str:
        return TARGET_LANGUAGE_NAMES[self]


BASE_LANGUAGE = ConversationLanguage.EN

# User-facing language names (in several instruction languages) -> target code
LANGUAGE_NAME_MAP: Dict[str, TargetLanguage] = {
    "en": TargetLanguage.EN_US,
    "english": TargetLanguage.EN_US,
    "anglais": TargetLanguage.EN_US,
    "inglés": TargetLanguage.EN_US,
    "ingles": TargetLanguage.EN_US,
    "englisch": TargetLanguage.EN_US,
    "الإنجليزية": TargetLanguage.EN_US,

    "fr": TargetLanguage.FR,
    "french": TargetLanguage.FR,
    "français": TargetLanguage.FR,
    "francais": TargetLanguage.FR,
    "francés": TargetLanguage.FR,
    "französisch": TargetLanguage.FR,
    "الفرنسية": TargetLanguage.FR,

    "ar": TargetLanguage.AR,
    "arabic": TargetLanguage.AR,
    "arabe": TargetLanguage.AR,
    "arabisch": TargetLanguage.AR,
    "العربية": TargetLanguage.AR,
    "عربي": TargetLanguage.AR,

    "es": TargetLanguage.ES,
    "spanish": TargetLanguage.ES,
    "espagnol": TargetLanguage.ES,
    "español": TargetLanguage.ES,
    "spanisch": TargetLanguage.ES,

    "de": TargetLanguage.DE,
    "german": TargetLanguage.DE,
    "allemand": TargetLanguage.DE,
    "alemán": TargetLanguage.DE,
    "deutsch": TargetLanguage.DE,

    "it": TargetLanguage.IT,
    "italian": TargetLanguage.IT,
    "italien": TargetLanguage.IT,
    "italiano": TargetLanguage.IT,

    "pt": TargetLanguage.PT_PT,
    "portuguese": TargetLanguage.PT_PT,
    "portugais": TargetLanguage.PT_PT,
    "português": TargetLanguage.PT_PT,
    "brazilian": TargetLanguage.PT_BR,

    "ru": TargetLanguage.RU,
    "russian": TargetLanguage.RU,
    "russe": TargetLanguage.RU,
    "русский": TargetLanguage.RU,

    "zh": TargetLanguage.ZH,
    "chinese": TargetLanguage.ZH,
    "chinois": TargetLanguage.ZH,

    "ja": TargetLanguage.JA,
    "japanese": TargetLanguage.JA,
    "japonais": TargetLanguage.JA,

    "nl": TargetLanguage.NL,
    "dutch": TargetLanguage.NL,
    "néerlandais": TargetLanguage.NL,
    "nederlands": TargetLanguage.NL,

    "pl": TargetLanguage.PL,
    "polish": TargetLanguage.PL,
    "polonais": TargetLanguage.PL,
    "polski": TargetLanguage.PL,
}

# Language names used inside translation prompts
TARGET_LANGUAGE_NAMES: Dict[TargetLanguage, str] = {
    TargetLanguage.EN_US: "English (American)",
    TargetLanguage.EN_GB: "English (British)",
    TargetLanguage.FR: "French",
    TargetLanguage.AR: "Arabic",
    TargetLanguage.ES: "Spanish",
    TargetLanguage.DE: "German",
    TargetLanguage.IT: "Italian",
    TargetLanguage.PT_BR: "Portuguese (Brazilian)",
    TargetLanguage.PT_PT: "Portuguese (European)",
    TargetLanguage.RU: "Russian",
    TargetLanguage.ZH: "Chinese (Simplified)",
    TargetLanguage.JA: "Japanese",
    TargetLanguage.NL: "Dutch",
    TargetLanguage.PL: "Polish",
}

# Conversation language -> default target when the user names none.
# French speakers mostly need English, everyone else mostly needs French.
DEFAULT_TARGET_BY_CONVERSATION: Dict[ConversationLanguage, TargetLanguage] = {
    ConversationLanguage.FR: TargetLanguage.EN_US,
    ConversationLanguage.EN: TargetLanguage.FR,
    ConversationLanguage.AR: TargetLanguage.FR,
}
