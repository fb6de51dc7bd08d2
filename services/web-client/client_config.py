"""Web client configuration loaded from environment variables."""

import os

from pydantic import BaseModel


class ClientConfig(BaseModel, frozen=True):
    """Root web client configuration."""

    gateway_url: str = "http://localhost:5000/api"
    request_timeout_seconds: float = 60.0
    default_user_id: str = "anonymous"
    history_limit: int = 10


def load_client_config() -> ClientConfig:
    """Loads configuration from environment variables."""
    return ClientConfig(
        gateway_url=os.getenv("GATEWAY_URL", "http://localhost:5000/api").rstrip("/"),
        request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "60")),
        default_user_id=os.getenv("DEFAULT_USER_ID", "anonymous"),
        history_limit=int(os.getenv("HISTORY_LIMIT", "10")),
    )
