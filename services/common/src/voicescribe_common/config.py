"""Shared configuration models for infrastructure components."""

from pydantic import BaseModel


class StorageConfig(BaseModel, frozen=True):
    """S3-compatible object storage and history database configuration."""

    endpoint: str
    access_key: str
    secret_key: str
    database_url: str
    bucket_name: str = "audio-files"
    secure: bool = True
    public_url: str | None = None

    @property
    def public_base_url(self) -> str:
        """Base URL that archived objects are publicly reachable under."""
        if self.public_url:
            return self.public_url.rstrip("/")
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.endpoint}"
