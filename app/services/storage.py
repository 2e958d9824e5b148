"""
Storage service for writing uploaded images to S3
Reference: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/s3.html
"""
import asyncio
import logging
import time
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class StorageNotConfiguredError(RuntimeError):
    """Raised when an object is written before a bucket name is configured."""


class StorageService:
    """Service that persists image bytes to an S3 bucket"""

    def __init__(
        self,
        bucket_name: Optional[str],
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        s3_client=None,
    ):
        """
        Initialize the S3 client.

        Credentials are passed straight to boto3; when they are missing or
        wrong the failure shows up on the first ``store`` call, not here.
        """
        if s3_client is None:
            # Reference: https://boto3.amazonaws.com/v1/documentation/api/latest/guide/configuration.html
            config = Config(
                max_pool_connections=50,
                # Single attempt: the gateway never retries a write
                retries={"max_attempts": 1, "mode": "standard"},
                connect_timeout=5,
                read_timeout=10,
            )
            s3_client = boto3.client(
                "s3",
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                region_name=region,
                config=config,
            )

        self.s3_client = s3_client
        self.bucket_name = bucket_name

    @classmethod
    def from_settings(cls, settings) -> "StorageService":
        """Build the service from application settings."""
        return cls(
            bucket_name=settings.AWS_S3_BUCKET_NAME,
            region=settings.AWS_REGION,
            access_key_id=settings.AWS_ACCESS_KEY_ID,
            secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        )

    def public_url(self, key: str) -> str:
        """
        Public URL of an object.

        Virtual-hosted-style bucket URL, unsigned and without expiry:
        https://<bucket>.s3.amazonaws.com/<key>
        """
        return f"https://{self.bucket_name}.s3.amazonaws.com/{key}"

    async def store(self, data: bytes, key: str, content_type: Optional[str]) -> str:
        """
        Write ``data`` under ``key`` and return its public URL.

        Args:
            data: Object bytes
            key: Destination key inside the bucket
            content_type: Content type recorded on the object

        Returns:
            Public URL of the stored object

        Raises:
            StorageNotConfiguredError: If no bucket name is configured
            ClientError / BotoCoreError: If S3 rejects the write
        """
        if not self.bucket_name:
            raise StorageNotConfiguredError("AWS_S3_BUCKET_NAME is not configured")

        params = {
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": data,
        }
        if content_type:
            params["ContentType"] = content_type

        start = time.time()
        try:
            # put_object is synchronous; offload to a worker thread
            await asyncio.to_thread(self.s3_client.put_object, **params)
        except (ClientError, BotoCoreError):
            logger.exception(
                "Couldn't put object '%s' to bucket '%s'.",
                key,
                self.bucket_name,
            )
            raise

        logger.info(
            "Put object '%s' to bucket '%s' (%d bytes) in %.2fms.",
            key,
            self.bucket_name,
            len(data),
            (time.time() - start) * 1000,
        )
        return self.public_url(key)
