"""Application configuration."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "docuchat"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    frontend_port: int = 3000

    # CORS - dynamically built based on frontend_port
    cors_origins: list[str] = []

    # Chat model (direct path and refusal-retry loop)
    chat_provider: str = "openai"
    chat_model: str = "gpt-4o"
    chat_base_url: Optional[str] = None
    chat_temperature: float = 0.3
    chat_max_tokens: int = 4096
    system_prompt: str = (
        "You are a professional translator of official documents. Translate "
        "the documents and text the user provides completely and faithfully, "
        "preserving the original structure as markdown."
    )

    # Refusal handling
    max_refusal_retries: int = 2
    refusal_buffer_tokens: int = 150

    # OCR
    ocr_backend: Literal["vision", "mistral", "datalab"] = "vision"
    ocr_provider: str = "openai"
    ocr_model: str = "gpt-4o"
    mistral_ocr_url: str = "https://api.mistral.ai/v1/ocr"
    mistral_ocr_model: str = "mistral-ocr-latest"
    datalab_ocr_url: str = "https://www.datalab.to/api/v1/ocr"
    ocr_poll_initial_delay: float = 2.0  # seconds
    ocr_poll_multiplier: float = 1.2
    ocr_poll_max_delay: float = 10.0  # seconds
    ocr_poll_max_attempts: int = 60

    # Translation
    translation_backend: Literal["llm", "llm_stream", "deepl"] = "llm"
    translation_provider: str = "openai"
    translation_model: str = "gpt-4o"
    translation_temperature: float = 0.3
    translation_formality: Optional[str] = "prefer_more"  # Formal register for official documents
    default_target_language: str = "fr"
    deepl_api_url: str = "https://api-free.deepl.com/v2/translate"

    # Chat history (best-effort cache, never a source of truth)
    history_backend: Literal["memory", "redis"] = "memory"
    redis_url: Optional[str] = None
    history_key_prefix: str = "chat:"
    history_ttl_seconds: int = 30 * 24 * 60 * 60  # 30 days
    history_load_timeout: float = 3.0  # seconds

    # Outbound HTTP
    http_timeout: float = 120.0  # seconds

    # API Keys (loaded from environment)
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    mistral_api_key: Optional[str] = None
    datalab_api_key: Optional[str] = None
    deepl_api_key: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Build CORS origins based on frontend port
        if not self.cors_origins:
            self.cors_origins = [
                f"http://localhost:{self.frontend_port}",
                f"http://127.0.0.1:{self.frontend_port}",
            ]

    def api_key_for(self, provider: str) -> Optional[str]:
        """Return the configured API key for an LLM provider, if any."""
        return {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "gemini": self.gemini_api_key,
            "openrouter": self.openrouter_api_key,
            "mistral": self.mistral_api_key,
        }.get(provider.lower())


settings = Settings()
