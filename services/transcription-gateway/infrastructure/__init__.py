"""Infrastructure layer exports."""

from .deepgram_transcriber import DeepgramTranscriber
from .local_upload_store import LocalUploadStore
from .minio_storage import MinioStorageClient
from .openai_transcriber import OpenAITranscriber

__all__ = [
    "DeepgramTranscriber",
    "LocalUploadStore",
    "MinioStorageClient",
    "OpenAITranscriber",
]
