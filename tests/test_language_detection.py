"""Tests for conversation and target language detection."""

import pytest

from docuchat.core.language import ConversationLanguage, TargetLanguage
from docuchat.core.language.detection import (
    default_target_for,
    detect_conversation_language,
    detect_target_language,
    extract_explicit_target,
)
from docuchat.models.schemas.chat import Turn

from tests.fakes import user_turn


class TestConversationLanguage:
    """Tests for the detector cascade."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("ترجم هذه الوثيقة من فضلك", ConversationLanguage.AR),
            ("この書類を翻訳してください", ConversationLanguage.JA),
            ("请翻译这份文件", ConversationLanguage.ZH),
            ("이 문서를 번역해 주세요", ConversationLanguage.KO),
            ("Пожалуйста, переведите документ", ConversationLanguage.RU),
        ],
    )
    def test_non_latin_scripts(self, text, expected):
        assert detect_conversation_language(user_turn(text)) == expected

    def test_japanese_with_kanji_is_not_chinese(self):
        assert detect_conversation_language(user_turn("出生証明書を翻訳してください")) == ConversationLanguage.JA

    def test_french_keywords(self):
        message = user_turn("Bonjour, pouvez-vous traduire le document dans la langue anglaise")
        assert detect_conversation_language(message) == ConversationLanguage.FR

    def test_short_english_request_defaults_to_english(self):
        message = user_turn("Please translate this document")
        assert detect_conversation_language(message) == ConversationLanguage.EN

    def test_english_sentence_reaches_explicit_instruction(self):
        message = user_turn("Please translate this document to Spanish")
        assert detect_conversation_language(message) == ConversationLanguage.ES

    def test_script_beats_keywords(self):
        message = user_turn("Traduire le document dans la langue: مرحبا")
        assert detect_conversation_language(message) == ConversationLanguage.AR

    def test_refusal_language_wins(self):
        message = user_turn("Please translate this document")
        language = detect_conversation_language(
            message,
            refusal_text="Je suis désolé, je ne peux pas traduire ce document.",
        )
        assert language == ConversationLanguage.FR

    def test_english_refusal_falls_through_to_user_text(self):
        message = user_turn("Bonjour, pouvez-vous traduire le document dans la journée")
        language = detect_conversation_language(message, refusal_text="I cannot translate this.")
        assert language == ConversationLanguage.FR

    def test_assistant_turns_are_ignored(self):
        prior = [
            user_turn("ok"),
            Turn.assistant_text("Voici la traduction du document dans la langue demandée"),
        ]
        assert detect_conversation_language(user_turn("ok"), prior) == ConversationLanguage.EN

    def test_prior_user_turns_count(self):
        prior = [user_turn("Bonjour, voici le certificat dans la pochette")]
        assert detect_conversation_language(user_turn("merci"), prior) == ConversationLanguage.FR

    def test_explicit_instruction_as_last_resort(self):
        assert detect_conversation_language(user_turn("Translate to Spanish")) == ConversationLanguage.ES

    def test_defaults_to_english(self):
        assert detect_conversation_language(user_turn("ok")) == ConversationLanguage.EN


class TestExplicitTarget:
    """Tests for "translate to <language>" extraction."""

    def test_language_name_after_direction_word(self):
        assert extract_explicit_target("can you put this into german") == TargetLanguage.DE

    def test_two_letter_words_are_skipped(self):
        assert extract_explicit_target("what is in it") is None

    def test_unknown_name(self):
        assert extract_explicit_target("translate to klingon") is None


class TestTargetLanguage:
    """Tests for target language resolution."""

    def test_indicator_phrase(self):
        assert detect_target_language(user_turn("Please translate to Spanish.")) == TargetLanguage.ES

    def test_french_indicator(self):
        message = user_turn("Traduire en anglais s'il vous plaît")
        assert detect_target_language(message) == TargetLanguage.EN_US

    def test_explicit_instruction_regardless_of_script(self):
        message = user_turn("ترجم هذه الوثيقة translate to german")
        assert detect_target_language(message) == TargetLanguage.DE

    def test_french_conversation_targets_english(self):
        message = user_turn("Bonjour, voici le certificat et la carte dans le dossier")
        assert detect_target_language(message) == TargetLanguage.EN_US

    def test_english_conversation_targets_french(self):
        message = user_turn("Please translate this document for me")
        assert detect_target_language(message) == TargetLanguage.FR

    def test_arabic_conversation_targets_french(self):
        assert detect_target_language(user_turn("مرحبا، هذه شهادة ميلادي")) == TargetLanguage.FR

    def test_unmapped_conversation_uses_fallback(self):
        message = user_turn("Bitte übersetzen Sie das Dokument und die Urkunde")
        assert detect_target_language(message, fallback=TargetLanguage.FR) == TargetLanguage.FR

    def test_default_never_targets_conversation_language(self):
        assert default_target_for(ConversationLanguage.ES, fallback=TargetLanguage.ES) == TargetLanguage.FR
        assert default_target_for(ConversationLanguage.FR, fallback=TargetLanguage.FR) == TargetLanguage.EN_US
