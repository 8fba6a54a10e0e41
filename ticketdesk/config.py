"""TicketDesk front end configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ticketdesk.config_utils import env_bool, env_int, env_optional_str, env_str


@dataclass(frozen=True)
class TicketDeskConfig:
    """Runtime configuration for the TicketDesk front end.

    Env-first with local-dev defaults.

    Env vars:
    - TICKETDESK_API_BASE_URL (default http://localhost:5000/api)
    - TICKETDESK_API_TOKEN (optional bearer token, normally set by login)
    - TICKETDESK_VERIFY_SSL (default true)
    - TICKETDESK_API_TIMEOUT (seconds, default 30)

    UI behaviour:
    - TICKETDESK_MESSAGE_SECONDS: lifetime of transient notifications (default 6)
    - TICKETDESK_RECENT_DAYS: window of the "Recent" reports tab (default 7)

    Logging:
    - TICKETDESK_LOG_LEVEL (default INFO)
    - TICKETDESK_LOG_JSON (default false)
    """

    api_base_url: str
    api_token: Optional[str]
    verify_ssl: bool
    timeout_seconds: int

    message_seconds: int
    recent_days: int

    log_level: str
    log_json: bool

    DEFAULT_API_BASE_URL: str = "http://localhost:5000/api"
    DEFAULT_TIMEOUT_SECONDS: int = 30
    DEFAULT_MESSAGE_SECONDS: int = 6
    DEFAULT_RECENT_DAYS: int = 7
    DEFAULT_LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "TicketDeskConfig":
        return cls(
            api_base_url=env_str("TICKETDESK_API_BASE_URL", cls.DEFAULT_API_BASE_URL).rstrip("/"),
            api_token=env_optional_str("TICKETDESK_API_TOKEN"),
            verify_ssl=env_bool("TICKETDESK_VERIFY_SSL", True),
            timeout_seconds=env_int("TICKETDESK_API_TIMEOUT", cls.DEFAULT_TIMEOUT_SECONDS, minimum=1),
            message_seconds=env_int("TICKETDESK_MESSAGE_SECONDS", cls.DEFAULT_MESSAGE_SECONDS, minimum=0),
            recent_days=env_int("TICKETDESK_RECENT_DAYS", cls.DEFAULT_RECENT_DAYS, minimum=0),
            log_level=env_str("TICKETDESK_LOG_LEVEL", cls.DEFAULT_LOG_LEVEL).upper(),
            log_json=env_bool("TICKETDESK_LOG_JSON", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api_base_url": self.api_base_url,
            "has_token": bool(self.api_token),
            "verify_ssl": self.verify_ssl,
            "timeout_seconds": self.timeout_seconds,
            "message_seconds": self.message_seconds,
            "recent_days": self.recent_days,
            "log_level": self.log_level,
            "log_json": self.log_json,
        }


_config: Optional[TicketDeskConfig] = None


def get_config() -> TicketDeskConfig:
    """Get the front end configuration (cached)."""
    global _config
    if _config is None:
        _config = TicketDeskConfig.from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None
