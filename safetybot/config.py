"""Application configuration and feature flags."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


ProviderName = Literal["google", "openai", "anthropic"]

# Environment variable that carries the API key for each provider
PROVIDER_KEY_ENV = {
    "google": "GOOGLE_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # API
    app_name: str = "労働安全衛生チャットボット"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: str = "*"

    # Optional basic auth (enabled when both are set)
    basic_auth_user: str | None = None
    basic_auth_password: str | None = None

    # LLM provider
    ai_provider: ProviderName = "google"
    google_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None

    google_model: str = "gemini-2.5-pro"
    openai_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-3-5-sonnet-20241022"

    llm_timeout_seconds: float = 60.0
    short_max_tokens: int = 1024
    long_max_tokens: int = 4096
    temperature: float = 0.7

    # Paths
    knowledge_path: str = "data/knowledge.json"
    cases_path: str = "data/jirei.json"
    laws_path: str = "data/laws.json"

    # Search tuning
    max_knowledge_items: int = 3
    max_case_items: int = 5
    max_law_items: int = 5
    bigram_min_length: int = 4
    trigram_min_length: int = 5
    use_domain_vocabulary: bool = True

    weight_title_exact: int = 5
    weight_tag_exact: int = 4
    weight_title_term: int = 2
    weight_tag_term: int = 2
    weight_body_term: int = 1
    weight_case_bonus: int = 1
    weight_law_bonus: int = 2

    law_summary_chars: int = 120

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def api_key_for(self, provider: str | None = None) -> str | None:
        """Return the configured API key for a provider (default: the active one)."""
        provider = provider or self.ai_provider
        return {
            "google": self.google_api_key,
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
        }.get(provider)

    def default_model_for(self, provider: str | None = None) -> str:
        provider = provider or self.ai_provider
        return {
            "google": self.google_model,
            "openai": self.openai_model,
            "anthropic": self.anthropic_model,
        }[provider]

    @property
    def api_configured(self) -> bool:
        return bool(self.api_key_for())

    @property
    def basic_auth_enabled(self) -> bool:
        return bool(self.basic_auth_user and self.basic_auth_password)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
