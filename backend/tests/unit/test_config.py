"""Tests for configuration settings."""

from skytonight.core.config import Settings, get_settings


def test_upstream_settings_defaults(monkeypatch):
    """Test upstream service configuration defaults."""
    monkeypatch.delenv("USNO_BASE_URL", raising=False)
    monkeypatch.delenv("CELNAV_ENABLED", raising=False)
    settings = Settings(_env_file=None)

    assert settings.usno_base_url == "https://aa.usno.navy.mil/api"
    assert settings.geocoding_url == "https://geocoding-api.open-meteo.com/v1/search"
    assert settings.celnav_enabled is True
    assert settings.request_timeout == 10.0


def test_model_settings_defaults(monkeypatch):
    """Test Stella model configuration defaults."""
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    settings = Settings(_env_file=None)

    assert settings.openai_model == "gpt-4o-mini"
    assert settings.openai_temperature == 0.8
    assert settings.openai_max_tokens == 300


def test_settings_from_environment(monkeypatch):
    """Test environment variables override defaults (case-insensitive)."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("celnav_enabled", "false")

    settings = get_settings()

    assert settings.openai_api_key == "sk-test"
    assert settings.celnav_enabled is False


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
