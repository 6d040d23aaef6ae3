"""LLM integration package.

This package provides:
- LLMGateway: single entry point for blocking and streaming LiteLLM calls
- LLMRuntimeConfig: per-stage call parameters resolved from settings
- Turn to chat-message conversion and the OCR/translation prompts
"""

from .gateway import LLMGateway, LLMResponse
from .messages import to_litellm_messages, turn_to_message
from .runtime_config import LLMRuntimeConfig

__all__ = [
    "LLMGateway",
    "LLMResponse",
    "LLMRuntimeConfig",
    "to_litellm_messages",
    "turn_to_message",
]
