"""Temporary on-disk storage for uploaded audio."""

import shutil
from pathlib import Path
from typing import BinaryIO

from voicescribe_common.logging import setup_logging

from domain import UploadedAudio, build_upload_filename

logger = setup_logging()


class LocalUploadStore:
    """Writes each upload to a uniquely named file in the upload directory."""

    def __init__(self, upload_dir: Path):
        self._upload_dir = upload_dir

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    def ensure_dir(self) -> None:
        self._upload_dir.mkdir(parents=True, exist_ok=True)

    def save(
        self, data: BinaryIO, original_filename: str, content_type: str
    ) -> UploadedAudio:
        """Streams ``data`` to disk and returns the stored upload."""
        self.ensure_dir()
        filename = build_upload_filename(original_filename)
        path = self._upload_dir / filename

        with path.open("wb") as out:
            shutil.copyfileobj(data, out)

        uploaded = UploadedAudio(
            filename=filename,
            original_filename=original_filename,
            content_type=content_type,
            size=path.stat().st_size,
            path=path,
        )
        logger.info(
            "Upload written to disk",
            extra={
                "file_name": filename,
                "original_name": original_filename,
                "content_type": content_type,
                "size": uploaded.size,
            },
        )
        return uploaded

    def path_for(self, filename: str) -> Path:
        return self._upload_dir / filename

    def discard(self, filename: str) -> None:
        """Removes a temp file; a missing file is not an error."""
        self.path_for(filename).unlink(missing_ok=True)
