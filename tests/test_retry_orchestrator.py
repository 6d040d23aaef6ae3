"""Tests for the refusal retry loop."""

import pytest

from docuchat.core.errors import GenerationError
from docuchat.core.language import ConversationLanguage
from docuchat.core.orchestrator import RetryOrchestrator, RetryState
from docuchat.core.refusal.prompts import RETRY_CLARIFICATIONS

from tests.fakes import FakeGateway, collect, user_turn

FRENCH_MESSAGE = "Bonjour, pouvez-vous traduire le document dans la langue anglaise"


def make_orchestrator(gateway: FakeGateway, max_retries: int = 2) -> RetryOrchestrator:
    return RetryOrchestrator(gateway, "You are a translator.", max_retries=max_retries)


class TestRetryOrchestrator:
    """Tests for RetryOrchestrator.run."""

    async def test_success_on_first_attempt(self):
        gateway = FakeGateway(scripts=[["# Translation\n", "Hello"]])

        result = await make_orchestrator(gateway).run(user_turn("Please translate this"), [])

        assert result.state == RetryState.SUCCEEDED
        assert len(result.attempts) == 1
        assert await collect(result.stream) == "# Translation\nHello"
        assert len(gateway.chat_calls) == 1

    async def test_refusal_then_success_appends_localized_clarification(self):
        gateway = FakeGateway(
            scripts=[
                ["I cannot translate this document."],
                ["Voici la traduction"],
            ]
        )
        prior = [user_turn("Bonjour")]

        result = await make_orchestrator(gateway).run(user_turn(FRENCH_MESSAGE), prior)

        assert result.state == RetryState.SUCCEEDED
        assert await collect(result.stream) == "Voici la traduction"
        assert result.clarification_language == ConversationLanguage.FR

        retry_turns = gateway.chat_calls[1]
        assert len(retry_turns) == 3
        assert retry_turns[-1].role == "user"
        assert retry_turns[-1].text == RETRY_CLARIFICATIONS[ConversationLanguage.FR]
        # Caller's history is untouched
        assert len(prior) == 1

    async def test_exhausted_returns_first_full_refusal(self):
        gateway = FakeGateway(
            scripts=[
                ["I cannot translate ", "this document. Sorry."],
                ["I cannot translate this."],
                ["I must decline."],
            ]
        )

        result = await make_orchestrator(gateway, max_retries=2).run(user_turn("Please translate this"), [])

        assert result.state == RetryState.EXHAUSTED_REFUSAL
        assert result.refusal_text == "I cannot translate this document. Sorry."
        assert result.stream is None
        assert len(result.attempts) == 3
        assert [len(turns) for turns in gateway.chat_calls] == [1, 2, 3]

    async def test_no_retries_configured(self):
        gateway = FakeGateway(scripts=[["I cannot translate this."]])

        result = await make_orchestrator(gateway, max_retries=0).run(user_turn("Translate"), [])

        assert result.state == RetryState.EXHAUSTED_REFUSAL
        assert len(gateway.chat_calls) == 1

    async def test_medium_confidence_refusal_passes_through(self):
        gateway = FakeGateway(scripts=[["Désolé, voici la traduction."]])

        result = await make_orchestrator(gateway).run(user_turn(FRENCH_MESSAGE), [])

        assert result.state == RetryState.SUCCEEDED
        assert await collect(result.stream) == "Désolé, voici la traduction."
        assert len(gateway.chat_calls) == 1

    async def test_failure_before_any_text_raises(self):
        gateway = FakeGateway(scripts=[[RuntimeError("provider down")]])

        with pytest.raises(GenerationError):
            await make_orchestrator(gateway).run(user_turn("Translate"), [])

    async def test_failure_after_text_is_delivered(self):
        gateway = FakeGateway(scripts=[["Partial answer", RuntimeError("lost")]])

        result = await make_orchestrator(gateway).run(user_turn("Translate"), [])

        assert result.state == RetryState.SUCCEEDED
        assert await collect(result.stream) == "Partial answer"

    async def test_french_refusals_exhaust_with_french_clarifications(self):
        refusal = "Je ne peux pas traduire ce document"
        gateway = FakeGateway(scripts=[[refusal]] * 3)

        result = await make_orchestrator(gateway).run(user_turn("Traduire ce document"), [])

        assert result.state == RetryState.EXHAUSTED_REFUSAL
        assert result.refusal_text == refusal
        assert result.clarification_language == ConversationLanguage.FR
        assert len(result.attempts) == 3

        clarification = RETRY_CLARIFICATIONS[ConversationLanguage.FR]
        second, third = gateway.chat_calls[1], gateway.chat_calls[2]
        assert second[-1].text == clarification
        assert [t.text for t in third[-2:]] == [clarification, clarification]
