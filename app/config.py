"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INSTRUCTION = (
    "You are a patient technical explainer. Explain the user's text and any "
    "attached file clearly and concisely, using Markdown where it helps."
)


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    gemini_api_key: str = Field(alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-1.5-flash", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    explanation_instruction: str = Field(
        default=DEFAULT_INSTRUCTION, alias="EXPLANATION_INSTRUCTION"
    )
    generation_timeout: float = Field(
        default=30.0, alias="GENERATION_TIMEOUT", description="Seconds"
    )
    max_text_length: int = Field(default=5000, alias="MAX_TEXT_LENGTH")
    attachment_policy: Literal["permissive", "strict"] = Field(
        default="permissive", alias="ATTACHMENT_POLICY"
    )
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    port: int = Field(default=3000, alias="PORT")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of settings."""

    return Settings()
