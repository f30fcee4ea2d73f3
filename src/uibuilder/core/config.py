"""Configuration Management."""

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="UIB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Server
    host: str = Field(default="0.0.0.0", description="HTTP bind host")
    port: int = Field(default=8000, gt=0, description="HTTP port")

    # Oracle (OpenAI-compatible chat completions)
    oracle_enabled: bool = Field(default=True, description="Consult the language model oracle")
    oracle_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""), description="Oracle API key"
    )
    oracle_base_url: str = Field(default="https://api.openai.com/v1", description="Oracle API base URL")
    oracle_model: str = Field(
        default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4.1-mini"), description="Oracle model name"
    )
    oracle_timeout: float = Field(default=20.0, gt=0, description="Oracle request timeout")
    oracle_breaker_fail_max: int = Field(default=5, gt=0, description="Failures before breaker opens")
    oracle_breaker_reset: int = Field(default=30, gt=0, description="Breaker reset timeout (seconds)")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Streaming
    stream_explanation_by_line: bool = Field(
        default=True, description="Emit one explanation_chunk event per explanation line"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
