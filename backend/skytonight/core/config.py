"""Configuration management for the application."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 9247
    reload: bool = True
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # Upstream Astronomy Sources (USNO)
    usno_base_url: str = "https://aa.usno.navy.mil/api"
    celnav_enabled: bool = True

    # Geocoding (Open-Meteo)
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"

    # Outbound HTTP
    request_timeout: float = 10.0  # seconds

    # Stella language model (OpenAI chat completions)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.8
    openai_max_tokens: int = 300

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
