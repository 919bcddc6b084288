"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    openai_api_key: str = Field(alias="OPENAI_API_KEY")
    model_base_url: str = Field(default="https://api.openai.com/v1", alias="MODEL_BASE_URL")
    chat_model: str = Field(default="gpt-4o-mini", alias="CHAT_MODEL")
    temperature: float = Field(default=1.5, alias="TEMPERATURE")
    max_tokens: int | None = Field(default=None, alias="MAX_TOKENS")
    model_timeout: float = Field(default=30.0, alias="MODEL_TIMEOUT", description="Seconds")
    default_max_turns: int = Field(default=5, ge=3, le=10, alias="DEFAULT_MAX_TURNS")
    turn_delay: float = Field(
        default=0.5, ge=0.0, alias="TURN_DELAY", description="Seconds between turns"
    )
    max_topic_words: int = Field(default=2, alias="MAX_TOPIC_WORDS")
    max_topic_length: int = Field(default=100, alias="MAX_TOPIC_LENGTH")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    port: int = Field(default=8000, alias="PORT")
    ws_inactivity_timeout: float = Field(
        default=300.0, alias="WS_INACTIVITY_TIMEOUT", description="Seconds"
    )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of settings."""

    return Settings()
