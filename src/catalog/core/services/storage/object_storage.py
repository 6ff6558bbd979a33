"""Image storage for product uploads.

Both backends accept an :class:`UploadedImage` and return a URL the client can
fetch the image from.
"""

import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from src.catalog.core.exceptions import StorageError, ValidationError
from src.catalog.runtime.config.config_data import StorageConfig


@dataclass(frozen=True)
class UploadedImage:
    """An image received in a request, fully read into memory."""

    filename: str | None
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class ObjectStorage(Protocol):
    def upload(self, image: UploadedImage) -> str:
        """Store ``image`` and return its public URL."""
        ...


def _object_name(image: UploadedImage) -> str:
    suffix = Path(image.filename or "").suffix.lower()
    if not suffix and image.content_type:
        suffix = mimetypes.guess_extension(image.content_type) or ""
    return f"{uuid.uuid4().hex}{suffix}"


class _ValidatingStorage:
    def __init__(self, config: StorageConfig):
        self._config = config

    def validate(self, image: UploadedImage) -> None:
        if not image.data:
            raise ValidationError("No file uploaded", [{"field": "image"}])
        if image.content_type not in self._config.allowed_content_types:
            raise ValidationError(
                "Unsupported image type",
                [{"field": "image", "content_type": image.content_type}],
            )
        if image.size > self._config.max_upload_bytes:
            raise ValidationError(
                "Image too large",
                [{"field": "image", "max_bytes": self._config.max_upload_bytes}],
            )


class LocalObjectStorage(_ValidatingStorage):
    """Write images to a local directory served by the API under a URL prefix."""

    def __init__(self, config: StorageConfig):
        super().__init__(config)
        self.directory = Path(config.local_directory)
        base_url = config.public_base_url or ""
        self._url_prefix = base_url.rstrip("/") + "/" + config.local_url_prefix.strip("/")

    def upload(self, image: UploadedImage) -> str:
        self.validate(image)
        name = _object_name(image)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / name).write_bytes(image.data)
        except OSError as e:
            raise StorageError("Error uploading image", details={"error": str(e)}) from e

        logger.info("Stored image locally: {}", name)
        return f"{self._url_prefix}/{name}"


class S3ObjectStorage(_ValidatingStorage):
    """Store images in an S3-compatible bucket.

    Usage::

        storage = S3ObjectStorage(StorageConfig(
            backend="s3",
            s3_bucket="catalog-images",
            s3_endpoint_url="http://localhost:9000",  # for MinIO
        ))
    """

    def __init__(self, config: StorageConfig, client=None):
        super().__init__(config)
        if not config.s3_bucket:
            raise ValueError("storage.s3_bucket must be set for the s3 backend")
        self.bucket = config.s3_bucket
        self.prefix = config.s3_prefix
        self._client = client

    def _get_client(self):
        if self._client is None:
            kwargs = {"region_name": self._config.s3_region}
            if self._config.s3_endpoint_url:
                kwargs["endpoint_url"] = self._config.s3_endpoint_url
            if self._config.s3_access_key_id:
                kwargs["aws_access_key_id"] = self._config.s3_access_key_id
            if self._config.s3_secret_access_key:
                kwargs["aws_secret_access_key"] = self._config.s3_secret_access_key
            self._client = boto3.client("s3", **kwargs)
        return self._client

    def public_url(self, key: str) -> str:
        if self._config.public_base_url:
            return f"{self._config.public_base_url.rstrip('/')}/{key}"
        if self._config.s3_endpoint_url:
            return f"{self._config.s3_endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self._config.s3_region}.amazonaws.com/{key}"

    def upload(self, image: UploadedImage) -> str:
        self.validate(image)
        key = f"{self.prefix}{_object_name(image)}"
        try:
            self._get_client().put_object(
                Bucket=self.bucket,
                Key=key,
                Body=image.data,
                ContentType=image.content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload failed for {}: {}", key, e)
            raise StorageError("Error uploading image", details={"error": str(e)}) from e

        logger.info("Stored image in S3: s3://{}/{}", self.bucket, key)
        return self.public_url(key)


def build_object_storage(config: StorageConfig) -> ObjectStorage:
    if config.backend == "s3":
        return S3ObjectStorage(config)
    return LocalObjectStorage(config)
