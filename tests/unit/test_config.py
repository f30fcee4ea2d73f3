"""Configuration tests."""

import pytest
from pydantic import ValidationError

from uibuilder.core.config import Settings


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("UIB_ORACLE_ENABLED", raising=False)
    settings = Settings()

    assert settings.port == 8000
    assert settings.oracle_enabled is True
    assert settings.oracle_base_url == "https://api.openai.com/v1"
    assert settings.oracle_breaker_fail_max == 5
    assert settings.stream_explanation_by_line is True
    assert settings.json_logs is False


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("UIB_PORT", "9100")
    monkeypatch.setenv("UIB_ORACLE_ENABLED", "false")
    monkeypatch.setenv("UIB_STREAM_EXPLANATION_BY_LINE", "0")

    settings = Settings()

    assert settings.port == 9100
    assert settings.oracle_enabled is False
    assert settings.stream_explanation_by_line is False


def test_api_key_falls_back_to_openai_variable(monkeypatch):
    monkeypatch.delenv("UIB_ORACLE_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    assert Settings().oracle_api_key == "sk-test"


def test_prefixed_key_wins(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("UIB_ORACLE_API_KEY", "sk-prefixed")

    assert Settings().oracle_api_key == "sk-prefixed"


@pytest.mark.parametrize(
    "overrides",
    [
        {"port": 0},
        {"oracle_timeout": 0},
        {"oracle_breaker_fail_max": -1},
    ],
)
def test_settings_validation(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)
