"""Dependency injection configuration for the transcription gateway."""

import openai
import requests
from fastapi import Request
from minio import Minio
from sqlmodel import Session as DBSession
from sqlmodel import create_engine
from voicescribe_common import StorageConfig, setup_logging

from config import AppConfig, ProviderConfig
from handlers import DisabledHistoryStore, HistoryArchiver, TranscriptionGateway, UploadHandler
from infrastructure import (
    DeepgramTranscriber,
    LocalUploadStore,
    MinioStorageClient,
    OpenAITranscriber,
)
from infrastructure.interfaces import HistoryStore, TranscriptionProvider
from repositories import TranscriptionRepository

logger = setup_logging()


class Services:
    """Process-wide collaborators, built once at startup and read-only after."""

    def __init__(
        self,
        config: AppConfig,
        gateway: TranscriptionGateway,
        history: HistoryStore,
        uploads: LocalUploadStore,
    ):
        self.config = config
        self.gateway = gateway
        self.history = history
        self.uploads = uploads
        self.upload_handler = UploadHandler(uploads, gateway, history)


def build_provider(config: ProviderConfig) -> TranscriptionProvider:
    """Creates the vendor client for the configured provider."""
    if config.name == "deepgram":
        return DeepgramTranscriber(
            requests.Session,
            api_key=config.api_key,
            model=config.model,
            language=config.language,
            timeout=config.timeout_seconds,
        )
    if config.name == "openai":
        client = openai.OpenAI(
            api_key=config.api_key, timeout=config.timeout_seconds, max_retries=0
        )
        return OpenAITranscriber(client, model=config.model, language=config.language)
    raise ValueError(f"Unsupported transcription provider '{config.name}'")


def build_history_store(
    config: StorageConfig | None, uploads: LocalUploadStore
) -> HistoryStore:
    """Creates the archive store, or a disabled one without credentials."""
    if config is None:
        return DisabledHistoryStore()

    minio_client = Minio(
        endpoint=config.endpoint,
        access_key=config.access_key,
        secret_key=config.secret_key,
        secure=config.secure,
    )
    engine = create_engine(config.database_url, pool_pre_ping=True)

    return HistoryArchiver(
        storage=MinioStorageClient(minio_client, config.public_base_url),
        repository=TranscriptionRepository(lambda: DBSession(engine), engine=engine),
        uploads=uploads,
        bucket_name=config.bucket_name,
    )


def build_services(
    config: AppConfig,
    provider: TranscriptionProvider | None = None,
    history: HistoryStore | None = None,
) -> Services:
    """Wires the gateway; ``provider`` and ``history`` replace the real ones."""
    uploads = LocalUploadStore(config.upload_dir)
    uploads.ensure_dir()

    gateway = TranscriptionGateway(provider or build_provider(config.provider))
    if history is None:
        history = build_history_store(config.storage, uploads)

    logger.info(
        "Gateway services initialized",
        extra={
            "provider": gateway.provider_name,
            "storage_configured": history.is_configured,
        },
    )
    return Services(config, gateway, history, uploads)


def get_services(request: Request) -> Services:
    """Returns the services attached to the running application."""
    return request.app.state.services


def get_upload_handler(request: Request) -> UploadHandler:
    return get_services(request).upload_handler


def get_history_store(request: Request) -> HistoryStore:
    return get_services(request).history
