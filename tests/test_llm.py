"""Tests for the LLM gateway, message conversion and runtime config."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from docuchat.core.llm import LLMGateway, LLMRuntimeConfig, to_litellm_messages, turn_to_message
from docuchat.core.llm.messages import file_part_to_content
from docuchat.models.schemas.chat import FilePart, Turn

from tests.fakes import collect, image_part, user_turn

CONFIG = LLMRuntimeConfig(provider="openai", model="gpt-4o", api_key="sk-test", temperature=0.3, max_tokens=1024)


def completion(content: str):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
    )


async def delta_stream(*contents):
    for content in contents:
        yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class TestMessages:
    """Tests for turn to message conversion."""

    def test_text_turn_is_plain_string(self):
        assert turn_to_message(user_turn("Hello")) == {"role": "user", "content": "Hello"}

    def test_file_turn_is_block_list(self):
        message = turn_to_message(user_turn("Translate", image_part()))

        assert message["content"] == [
            {"type": "text", "text": "Translate"},
            {"type": "image_url", "image_url": {"url": "data:image/png;base64,aGVsbG8="}},
        ]

    def test_pdf_block(self):
        part = FilePart(media_type="application/pdf", url="data:application/pdf;base64,JVBERi0=", filename="acte.pdf")

        assert file_part_to_content(part) == {
            "type": "file",
            "file": {"file_data": "data:application/pdf;base64,JVBERi0=", "filename": "acte.pdf"},
        }

    def test_unsupported_file_is_skipped(self):
        turn = user_turn("Read this", FilePart(media_type="text/csv", url="data:text/csv;base64,YQ=="))

        assert turn_to_message(turn)["content"] == [{"type": "text", "text": "Read this"}]

    def test_system_prompt_first(self):
        messages = to_litellm_messages("system", [user_turn("Hi"), Turn.assistant_text("Hello")])

        assert [m["role"] for m in messages] == ["system", "user", "assistant"]


class TestFilePart:
    def test_inline_payload(self):
        assert image_part().base64_payload() == "aGVsbG8="

    def test_remote_part_has_no_payload(self):
        with pytest.raises(ValueError):
            image_part("https://files.test/scan.png").base64_payload()


class TestRuntimeConfig:
    def test_litellm_kwargs(self):
        kwargs = LLMRuntimeConfig(provider="anthropic", model="claude-sonnet", base_url="http://proxy").to_litellm_kwargs()

        assert kwargs["model"] == "anthropic/claude-sonnet"
        assert kwargs["api_base"] == "http://proxy"
        assert "api_key" not in kwargs

    def test_ocr_stage_is_deterministic(self, settings):
        assert LLMRuntimeConfig.for_stage("ocr", settings).temperature == 0.0

    def test_unknown_stage(self, settings):
        with pytest.raises(ValueError):
            LLMRuntimeConfig.for_stage("summary", settings)

    def test_overrides(self):
        config = CONFIG.with_overrides(temperature=0.0)

        assert config.temperature == 0.0
        assert config.max_tokens == CONFIG.max_tokens


class TestLLMGateway:
    """Tests for LLMGateway with litellm patched out."""

    async def test_complete_passes_config(self):
        with patch("docuchat.core.llm.gateway.acompletion", new=AsyncMock(return_value=completion("Bonjour"))) as mock:
            response = await LLMGateway(CONFIG).complete([{"role": "user", "content": "Hello"}])

        assert response.content == "Bonjour"
        assert response.total_tokens == 15
        kwargs = mock.call_args.kwargs
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 1024
        assert kwargs["api_key"] == "sk-test"

    async def test_stream_chat_yields_deltas(self):
        mock = AsyncMock(return_value=delta_stream("Bon", None, "jour"))
        with patch("docuchat.core.llm.gateway.acompletion", new=mock):
            text = await collect(LLMGateway(CONFIG).stream_chat("system", [user_turn("Hello")]))

        assert text == "Bonjour"
        kwargs = mock.call_args.kwargs
        assert kwargs["stream"] is True
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}

    async def test_stream_errors_propagate(self):
        with patch("docuchat.core.llm.gateway.acompletion", new=AsyncMock(side_effect=RuntimeError("rate limited"))):
            with pytest.raises(RuntimeError):
                await collect(LLMGateway(CONFIG).stream([{"role": "user", "content": "Hello"}]))
