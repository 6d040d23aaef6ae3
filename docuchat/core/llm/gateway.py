"""LLM gateway for all generative calls.

Every call goes through LiteLLM ``acompletion`` with parameters taken from
an LLMRuntimeConfig, so configured temperature and max_tokens actually
reach the provider.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from litellm import acompletion

from docuchat.models.schemas.chat import Turn

from .messages import to_litellm_messages
from .runtime_config import LLMRuntimeConfig

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Standardized LLM response."""

    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    latency_ms: int = 0


class LLMGateway:
    """Gateway for chat, OCR and translation model calls.

    The gateway holds a default config (the chat model); callers with their
    own stage config pass it per call.

    Usage:
        gateway = LLMGateway(LLMRuntimeConfig.for_stage("chat", settings))
        async for chunk in gateway.stream_chat(system_prompt, turns):
            ...
    """

    def __init__(self, config: LLMRuntimeConfig):
        self.config = config

    async def complete(
        self,
        messages: List[Dict[str, Any]],
        config: Optional[LLMRuntimeConfig] = None,
    ) -> LLMResponse:
        """Execute a blocking LLM call with a pre-built messages array.

        Args:
            messages: List of message dicts with 'role' and 'content'
            config: Config to use instead of the gateway default

        Returns:
            Standardized LLMResponse

        Raises:
            Exception: If the LLM call fails
        """
        config = config or self.config
        start_time = time.time()

        kwargs = config.to_litellm_kwargs()
        kwargs["messages"] = messages

        logger.info(
            f"LLM call: model={config.model}, provider={config.provider}, "
            f"temperature={config.temperature}, message_count={len(messages)}"
        )

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            logger.error(f"LLM call failed: model={config.model}, error={e}")
            raise

        latency_ms = int((time.time() - start_time) * 1000)
        usage = getattr(response, "usage", None)
        result = LLMResponse(
            content=response.choices[0].message.content or "",
            model=config.model,
            provider=config.provider,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            total_tokens=usage.total_tokens if usage else 0,
            latency_ms=latency_ms,
        )

        logger.info(f"LLM response: tokens={result.total_tokens}, latency={latency_ms}ms")
        return result

    async def stream(
        self,
        messages: List[Dict[str, Any]],
        config: Optional[LLMRuntimeConfig] = None,
    ) -> AsyncIterator[str]:
        """Stream an LLM response as text deltas.

        Nothing is sent to the provider until the first chunk is requested.

        Args:
            messages: List of message dicts with 'role' and 'content'
            config: Config to use instead of the gateway default

        Yields:
            Text deltas as they arrive
        """
        config = config or self.config
        start_time = time.time()

        kwargs = config.to_litellm_kwargs()
        kwargs["messages"] = messages
        kwargs["stream"] = True

        logger.info(
            f"LLM stream: model={config.model}, provider={config.provider}, "
            f"temperature={config.temperature}"
        )

        chunk_count = 0
        try:
            response = await acompletion(**kwargs)
            async for chunk in response:
                if chunk.choices and chunk.choices[0].delta.content:
                    chunk_count += 1
                    yield chunk.choices[0].delta.content
        except Exception as e:
            logger.error(f"LLM stream failed after {chunk_count} chunks: {e}")
            raise

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"LLM stream complete: chunks={chunk_count}, latency={latency_ms}ms")

    def stream_chat(self, system_prompt: str, turns: Sequence[Turn]) -> AsyncIterator[str]:
        """Stream a chat completion over a conversation.

        Args:
            system_prompt: System message content
            turns: Conversation turns, oldest first, ending with a user turn

        Returns:
            Async iterator of text deltas
        """
        return self.stream(to_litellm_messages(system_prompt, turns))

