"""LLM runtime configuration.

LLMRuntimeConfig is the single source of LLM call parameters: every
generative call in the pipeline (chat, vision OCR, translation) is made
with one of these, resolved from settings by stage.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Literal, Optional

from docuchat.config import Settings

logger = logging.getLogger(__name__)

# Pipeline stages that make generative calls
StageType = Literal["chat", "ocr", "translation"]


@dataclass(frozen=True)
class LLMRuntimeConfig:
    """Complete LLM configuration for one kind of request."""

    # Connection parameters
    provider: str
    model: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None

    # Generation parameters
    temperature: float = 0.7
    max_tokens: int = 4096
    top_p: Optional[float] = None

    def get_litellm_model(self) -> str:
        """Get model string in LiteLLM format (provider/model)."""
        provider_prefixes = {
            "openai": "",  # No prefix for OpenAI
            "anthropic": "anthropic/",
            "gemini": "gemini/",
            "mistral": "mistral/",
            "openrouter": "openrouter/",
            "ollama": "ollama/",
        }
        if self.provider == "openai":
            return self.model
        prefix = provider_prefixes.get(self.provider, f"{self.provider}/")
        return f"{prefix}{self.model}"

    def to_litellm_kwargs(self) -> Dict[str, Any]:
        """Convert to kwargs for litellm.acompletion()."""
        kwargs: Dict[str, Any] = {
            "model": self.get_litellm_model(),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        if self.api_key:
            kwargs["api_key"] = self.api_key

        if self.base_url:
            kwargs["api_base"] = self.base_url

        if self.top_p is not None:
            kwargs["top_p"] = self.top_p

        return kwargs

    def with_overrides(
        self,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> "LLMRuntimeConfig":
        """Create a copy with specific overrides applied."""
        return replace(
            self,
            temperature=temperature if temperature is not None else self.temperature,
            max_tokens=max_tokens if max_tokens is not None else self.max_tokens,
        )

    @classmethod
    def for_stage(cls, stage: StageType, settings: Settings) -> "LLMRuntimeConfig":
        """Resolve the configuration of a pipeline stage from settings.

        Args:
            stage: Pipeline stage making the call
            settings: Application settings

        Returns:
            LLMRuntimeConfig for that stage
        """
        if stage == "chat":
            provider, model = settings.chat_provider, settings.chat_model
            temperature = settings.chat_temperature
            base_url = settings.chat_base_url
        elif stage == "ocr":
            provider, model = settings.ocr_provider, settings.ocr_model
            temperature = 0.0  # Extraction must be deterministic
            base_url = None
        elif stage == "translation":
            provider, model = settings.translation_provider, settings.translation_model
            temperature = settings.translation_temperature
            base_url = None
        else:
            raise ValueError(f"Unknown LLM stage: {stage}")

        api_key = settings.api_key_for(provider)
        if not api_key:
            logger.warning(f"No API key configured for provider {provider} ({stage} stage)")

        return cls(
            provider=provider,
            model=model,
            api_key=api_key,
            base_url=base_url,
            temperature=temperature,
            max_tokens=settings.chat_max_tokens,
        )
