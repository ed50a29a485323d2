"""Tests for environment-driven settings."""
import pytest
from deploykeys.domain.errors import ValidationError
from deploykeys.infrastructure.settings import DEFAULT_BASE_URL, ClientSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("GITHUB_TOKEN", "GITHUB_API_URL", "GITHUB_TIMEOUT", "GITHUB_USER_AGENT"):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    settings = ClientSettings.from_env()

    assert settings.token is None
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout_seconds == 30.0


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_abc")
    monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")
    monkeypatch.setenv("GITHUB_TIMEOUT", "12.5")
    monkeypatch.setenv("GITHUB_USER_AGENT", "ops-bot")

    settings = ClientSettings.from_env()

    assert settings.token == "ghp_abc"
    assert settings.base_url == "https://ghe.example.com/api/v3"
    assert settings.timeout_seconds == 12.5
    assert settings.user_agent == "ops-bot"


@pytest.mark.parametrize("timeout", ["soon", "0", "-3"])
def test_rejects_bad_timeout(monkeypatch, timeout):
    monkeypatch.setenv("GITHUB_TIMEOUT", timeout)

    with pytest.raises(ValidationError):
        ClientSettings.from_env()
