import pytest
from pydantic import ValidationError

from issuer.app.config import DEFAULT_API_KEY, Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "GOV24_BASE_URL",
        "GOV24_API_KEY",
        "GOV24_REQUEST_TIMEOUT_SECONDS",
        "GOV24_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_documented_defaults_apply_when_unset():
    settings = Settings(_env_file=None)

    assert settings.api_base_url == "https://api.gov24.example.com"
    assert settings.api_key.get_secret_value() == DEFAULT_API_KEY
    assert settings.request_timeout_seconds == 30.0
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GOV24_BASE_URL", "https://gov.example.org/api/")
    monkeypatch.setenv("GOV24_API_KEY", "live-key")
    monkeypatch.setenv("GOV24_LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.api_base_url == "https://gov.example.org/api"
    assert settings.api_key.get_secret_value() == "live-key"
    assert settings.log_level == "DEBUG"


def test_api_key_is_redacted():
    settings = Settings(_env_file=None, api_key="super-secret")

    assert "super-secret" not in repr(settings)


def test_blank_api_key_fails_fast(monkeypatch):
    monkeypatch.setenv("GOV24_API_KEY", "   ")

    with pytest.raises(ValidationError, match="GOV24_API_KEY"):
        Settings(_env_file=None)


def test_invalid_base_url_fails_fast(monkeypatch):
    monkeypatch.setenv("GOV24_BASE_URL", "not a url")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_are_frozen():
    settings = Settings(_env_file=None)

    with pytest.raises(ValidationError):
        settings.api_key = "other"
