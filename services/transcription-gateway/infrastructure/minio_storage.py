"""MinIO implementation of the StorageClient interface."""

import json
from typing import BinaryIO
from urllib.parse import quote

from minio import Minio
from voicescribe_common import StorageDeleteError, StorageUploadError, setup_logging
from voicescribe_common.infrastructure import StorageClient

logger = setup_logging()


def public_read_policy(bucket_name: str) -> str:
    """Bucket policy that lets anyone GET objects in the bucket."""
    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"AWS": ["*"]},
                    "Action": ["s3:GetObject"],
                    "Resource": [f"arn:aws:s3:::{bucket_name}/*"],
                }
            ],
        }
    )


class MinioStorageClient(StorageClient):
    """Handles archive storage on any S3-compatible endpoint through MinIO."""

    def __init__(self, client: Minio, public_base_url: str):
        self._client = client
        self._public_base_url = public_base_url.rstrip("/")

    def upload(
        self,
        bucket_name: str,
        object_name: str,
        data: BinaryIO,
        size: int,
        content_type: str,
    ) -> None:
        try:
            self._client.put_object(
                bucket_name=bucket_name,
                object_name=object_name,
                data=data,
                length=size,
                content_type=content_type,
            )
            logger.info(
                "File uploaded to storage",
                extra={
                    "bucket_name": bucket_name,
                    "object_name": object_name,
                    "size": size,
                },
            )
        except Exception as e:
            logger.exception(
                "Storage upload failed",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
            raise StorageUploadError(object_name, e) from e

    def delete(self, bucket_name: str, object_name: str) -> None:
        try:
            self._client.remove_object(bucket_name, object_name)
            logger.info(
                "File removed from storage",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
        except Exception as e:
            logger.exception(
                "Storage delete failed",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
            raise StorageDeleteError(object_name, e) from e

    def public_url(self, bucket_name: str, object_name: str) -> str:
        return f"{self._public_base_url}/{bucket_name}/{quote(object_name)}"

    def ensure_bucket_exists(self, bucket_name: str) -> None:
        if not self._client.bucket_exists(bucket_name):
            self._client.make_bucket(bucket_name)
            self._client.set_bucket_policy(bucket_name, public_read_policy(bucket_name))
            logger.info("Bucket created", extra={"bucket_name": bucket_name})
        else:
            logger.info("Bucket already exists", extra={"bucket_name": bucket_name})
