"""
Upload client for the storage gateway

Turns a locally selected file into a public URL by posting it to the
storage gateway endpoint. The client only depends on the gateway's HTTP
contract: multipart ``file`` + ``path`` in, ``{"success": true, "url": ...}`` out.
Reference: https://www.python-httpx.org/async/
"""
import logging
import uuid
from typing import Optional

import httpx
from fastapi import UploadFile

from app.core.exceptions import UploadFailure

logger = logging.getLogger(__name__)


def file_extension(filename: Optional[str]) -> str:
    """Text after the last dot of ``filename``, or "" when there is none."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1]


def build_key(filename: Optional[str], prefix: str = "products") -> str:
    """
    Build a fresh storage key for ``filename``.

    Every call returns a new key (``<prefix>/<uuid4>.<ext>``), so a retried
    upload never overwrites an earlier object.
    """
    extension = file_extension(filename)
    key = f"{prefix}/{uuid.uuid4()}"
    if extension:
        key = f"{key}.{extension}"
    return key


class UploadClient:
    """Client that submits files to the storage gateway"""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        gateway_url: str,
        key_prefix: str = "products",
    ):
        self.http_client = http_client
        self.gateway_url = gateway_url
        self.key_prefix = key_prefix

    async def upload(self, file: UploadFile) -> str:
        """
        Upload an ``UploadFile`` and return its public URL.

        Raises:
            UploadFailure: If the gateway rejects the upload or cannot be reached
        """
        data = await file.read()
        return await self.upload_bytes(data, file.filename, file.content_type)

    async def upload_bytes(
        self,
        data: bytes,
        filename: Optional[str],
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload raw bytes and return the URL reported by the gateway.

        Args:
            data: File content
            filename: Original filename, used for the key extension
            content_type: Declared content type of the file

        Returns:
            The gateway's public URL, unmodified

        Raises:
            UploadFailure: On a non-success status, a malformed response
                or a transport error. The object may still have been
                written on the gateway side.
        """
        key = build_key(filename, self.key_prefix)
        files = {
            "file": (
                filename or key.rsplit("/", 1)[-1],
                data,
                content_type or "application/octet-stream",
            )
        }

        try:
            response = await self.http_client.post(
                self.gateway_url,
                files=files,
                data={"path": key},
            )
        except httpx.HTTPError as e:
            logger.error(f"Upload of '{key}' failed: {type(e).__name__}: {e}", exc_info=True)
            raise UploadFailure() from e

        if not response.is_success:
            logger.error(
                f"Storage gateway rejected upload of '{key}' with status {response.status_code}"
            )
            raise UploadFailure()

        try:
            url = response.json()["url"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Storage gateway returned a malformed response for '{key}'", exc_info=True)
            raise UploadFailure() from e

        logger.info(f"Uploaded '{key}' ({len(data)} bytes) -> {url}")
        return url
