import pytest

from ticketdesk.config import TicketDeskConfig, get_config, reset_config

ENV_VARS = (
    "TICKETDESK_API_BASE_URL",
    "TICKETDESK_API_TOKEN",
    "TICKETDESK_VERIFY_SSL",
    "TICKETDESK_API_TIMEOUT",
    "TICKETDESK_MESSAGE_SECONDS",
    "TICKETDESK_RECENT_DAYS",
    "TICKETDESK_LOG_LEVEL",
    "TICKETDESK_LOG_JSON",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


def test_defaults():
    config = TicketDeskConfig.from_env()
    assert config.api_base_url == "http://localhost:5000/api"
    assert config.api_token is None
    assert config.verify_ssl is True
    assert config.timeout_seconds == 30
    assert config.message_seconds == 6
    assert config.recent_days == 7
    assert config.log_level == "INFO"
    assert config.log_json is False


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TICKETDESK_API_BASE_URL", "https://desk.example.com/api/")
    monkeypatch.setenv("TICKETDESK_API_TOKEN", "abc")
    monkeypatch.setenv("TICKETDESK_VERIFY_SSL", "no")
    monkeypatch.setenv("TICKETDESK_API_TIMEOUT", "10")
    monkeypatch.setenv("TICKETDESK_LOG_LEVEL", "debug")
    monkeypatch.setenv("TICKETDESK_LOG_JSON", "1")
    config = TicketDeskConfig.from_env()
    assert config.api_base_url == "https://desk.example.com/api"
    assert config.api_token == "abc"
    assert config.verify_ssl is False
    assert config.timeout_seconds == 10
    assert config.log_level == "DEBUG"
    assert config.log_json is True


def test_invalid_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("TICKETDESK_API_TIMEOUT", "0")
    monkeypatch.setenv("TICKETDESK_RECENT_DAYS", "soon")
    config = TicketDeskConfig.from_env()
    assert config.timeout_seconds == 30
    assert config.recent_days == 7


def test_to_dict_hides_token(monkeypatch):
    monkeypatch.setenv("TICKETDESK_API_TOKEN", "secret")
    data = TicketDeskConfig.from_env().to_dict()
    assert data["has_token"] is True
    assert "secret" not in data.values()


def test_get_config_is_cached(monkeypatch):
    first = get_config()
    monkeypatch.setenv("TICKETDESK_RECENT_DAYS", "30")
    assert get_config() is first
    reset_config()
    assert get_config().recent_days == 30
