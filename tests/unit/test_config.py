"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from config import ApplicationConfig, str_to_bool


def test_defaults(mock_config) -> None:
    assert mock_config.metadata_index == "metrics-endpoint.metadata-*"
    assert mock_config.default_page_size == 10
    assert mock_config.max_page_size == 10000
    assert mock_config.log_level == "INFO"


def test_urls_are_normalized(monkeypatch) -> None:
    monkeypatch.setenv("SEARCH_URL", "https://search.example.com/")
    monkeypatch.setenv("AGENT_SERVICE_URL", "https://fleet.example.com//")

    config = ApplicationConfig()

    assert config.search_url == "https://search.example.com"
    assert config.agent_service_url == "https://fleet.example.com"


def test_invalid_url_rejected(monkeypatch) -> None:
    monkeypatch.setenv("AGENT_SERVICE_URL", "fleet.example.com")

    with pytest.raises(ValidationError):
        ApplicationConfig()


def test_invalid_log_level_rejected(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ValidationError):
        ApplicationConfig()


def test_boolean_env_values(monkeypatch) -> None:
    monkeypatch.setenv("SEARCH_VERIFY_TLS", "no")
    monkeypatch.setenv("LOG_JSON", "enabled")

    config = ApplicationConfig()

    assert config.search_verify_tls is False
    assert config.log_json is True


@pytest.mark.parametrize("value,expected", [("true", True), ("0", False), (1, True), (False, False)])
def test_str_to_bool(value, expected) -> None:
    assert str_to_bool(value) is expected
