from voicescribe_common.config import StorageConfig
from voicescribe_common.db_models import TranscriptionRecord
from voicescribe_common.exceptions import (
    StorageDeleteError,
    StorageUploadError,
    UploadValidationError,
)
from voicescribe_common.logging import setup_logging

__all__ = [
    "setup_logging",
    "StorageConfig",
    "StorageDeleteError",
    "StorageUploadError",
    "TranscriptionRecord",
    "UploadValidationError",
]
