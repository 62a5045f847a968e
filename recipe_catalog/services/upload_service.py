# recipe_catalog/services/upload_service.py
import logging
import os
import uuid
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from recipe_catalog import config
from recipe_catalog.errors import BadRequestError, PayloadTooLargeError, UnprocessableEntityError

logger = logging.getLogger(__name__)

ALLOWED_MIMES = {"image/jpeg", "image/png"}
DIRECTORIES = {"category": "categories", "ingredient": "ingredients"}


class ObjectStorage:
    """Thin wrapper over an S3-compatible bucket (MinIO in development)."""

    def __init__(self, client=None, bucket: str = config.S3_BUCKET, public_url: str = config.S3_PUBLIC_URL):
        self.client = client if client is not None else boto3.client(
            "s3",
            endpoint_url=config.S3_ENDPOINT_URL,
            aws_access_key_id=config.S3_ACCESS_KEY,
            aws_secret_access_key=config.S3_SECRET_KEY,
            region_name=config.S3_REGION,
        )
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")
        self._bucket_ready = False

    def ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        try:
            self.client.head_bucket(Bucket=self.bucket)
            logger.info("Bucket already exists: %s", self.bucket)
        except ClientError:
            self.client.create_bucket(Bucket=self.bucket)
            logger.info("Created bucket: %s", self.bucket)
        self._bucket_ready = True

    def put(self, object_name: str, body: bytes, content_type: str, original_name: str) -> None:
        self.ensure_bucket()
        self.client.put_object(
            Bucket=self.bucket,
            Key=object_name,
            Body=body,
            ContentType=content_type,
            Metadata={"original-name": original_name},
        )

    def public_url_for(self, object_name: str) -> str:
        return f"{self.public_url}/{self.bucket}/{object_name}"


@lru_cache(maxsize=1)
def get_storage() -> ObjectStorage:
    return ObjectStorage()


def upload_file(
    storage: ObjectStorage,
    filename: str | None,
    content: bytes,
    content_type: str | None,
    kind: str = "category",
) -> dict:
    if kind not in DIRECTORIES:
        logger.warning("Upload rejected, unknown type: %s", kind)
        raise BadRequestError(f"Unsupported upload type '{kind}'")
    if content_type not in ALLOWED_MIMES:
        logger.warning("Upload rejected, mime %s for %s", content_type, filename)
        raise UnprocessableEntityError("File type not allowed")
    if len(content) > config.MAX_UPLOAD_BYTES:
        logger.warning("Upload rejected, %s is %d bytes", filename, len(content))
        raise PayloadTooLargeError("File too large")

    original_name = filename or ""
    file_name = f"{uuid.uuid4()}{os.path.splitext(original_name)[1]}"
    object_name = f"{DIRECTORIES[kind]}/{file_name}"
    logger.info("Uploading file: %s as %s", original_name, object_name)

    try:
        storage.put(object_name, content, content_type, original_name)
    except (BotoCoreError, ClientError) as e:
        logger.error("Failed to upload file %s: %s", object_name, e)
        raise BadRequestError(f"Failed to upload file: {e}") from e

    logger.info("File uploaded successfully: %s", object_name)
    return {
        "original_name": original_name,
        "file_name": file_name,
        "size": len(content),
        "mimetype": content_type,
        "public_url": storage.public_url_for(object_name),
    }
