"""Application configuration loaded from environment variables."""

import os
from pathlib import Path

from pydantic import BaseModel
from voicescribe_common import StorageConfig

from exceptions import ConfigurationError

SERVICE_DIR = Path(__file__).resolve().parent

PROVIDER_KEY_VARS = {
    "deepgram": "DEEPGRAM_API_KEY",
    "openai": "OPENAI_API_KEY",
}

MODEL_DEFAULTS = {
    "deepgram": ("DEEPGRAM_MODEL", "nova-2"),
    "openai": ("OPENAI_MODEL", "whisper-1"),
}


class ProviderConfig(BaseModel, frozen=True):
    """Transcription provider configuration."""

    name: str
    api_key: str
    model: str
    language: str = "en"
    timeout_seconds: float = 120.0


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    provider: ProviderConfig
    storage: StorageConfig | None = None
    environment: str = "production"
    upload_dir: Path = SERVICE_DIR / "uploads"
    cors_origins: tuple[str, ...] = ("http://localhost:8501",)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def _is_truthy(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _load_provider() -> ProviderConfig:
    """Picks the single configured provider or fails startup."""
    requested = os.getenv("TRANSCRIPTION_PROVIDER", "").strip().lower()
    keys = {name: os.getenv(var, "").strip() for name, var in PROVIDER_KEY_VARS.items()}

    if requested:
        if requested not in PROVIDER_KEY_VARS:
            raise ConfigurationError(
                f"Unknown TRANSCRIPTION_PROVIDER '{requested}'. "
                f"Expected one of: {', '.join(PROVIDER_KEY_VARS)}"
            )
        name = requested
    else:
        configured = [provider for provider, key in keys.items() if key]
        if not configured:
            raise ConfigurationError(
                "No transcription provider configured. "
                "Set DEEPGRAM_API_KEY or OPENAI_API_KEY."
            )
        name = configured[0]

    if not keys[name]:
        raise ConfigurationError(
            f"{PROVIDER_KEY_VARS[name]} must be set when using the '{name}' provider"
        )

    model_var, model_default = MODEL_DEFAULTS[name]

    return ProviderConfig(
        name=name,
        api_key=keys[name],
        model=os.getenv(model_var, model_default),
        language=os.getenv("TRANSCRIPTION_LANGUAGE", "en"),
        timeout_seconds=float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "120")),
    )


def _load_storage() -> StorageConfig | None:
    """Returns storage settings, or None when history is not configured."""
    endpoint = os.getenv("STORAGE_ENDPOINT", "")
    access_key = os.getenv("STORAGE_ACCESS_KEY", "")
    secret_key = os.getenv("STORAGE_SECRET_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")

    if not all([endpoint, access_key, secret_key, database_url]):
        return None

    return StorageConfig(
        endpoint=endpoint,
        access_key=access_key,
        secret_key=secret_key,
        database_url=database_url,
        bucket_name=os.getenv("STORAGE_BUCKET", "audio-files"),
        secure=_is_truthy(os.getenv("STORAGE_SECURE"), default=True),
        public_url=os.getenv("STORAGE_PUBLIC_URL") or None,
    )


def load_config() -> AppConfig:
    """
    Loads configuration from environment variables.

    Raises:
        ConfigurationError: If no usable transcription provider is configured.
    """
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8501")
    return AppConfig(
        provider=_load_provider(),
        storage=_load_storage(),
        environment=os.getenv("APP_ENV", "production").strip().lower(),
        upload_dir=Path(os.getenv("UPLOAD_DIR", str(SERVICE_DIR / "uploads"))),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
