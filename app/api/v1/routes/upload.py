"""
Storage gateway route
Accepts a file and a destination key, writes the file to S3 and returns its public URL
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from app.api.v1.schemas.storage import UploadErrorResponse, UploadResponse
from app.core.dependencies import get_storage_service
from app.services.storage import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/upload-s3",
    tags=["uploads"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "",
    response_model=UploadResponse,
    summary="Upload file to storage",
    description="Write a file to the image bucket under the given key and return its public URL.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "File stored"},
        400: {"model": UploadErrorResponse, "description": "No file or no destination key provided"},
        500: {"model": UploadErrorResponse, "description": "Storage provider error"},
    },
)
async def upload_file(
    file: Optional[UploadFile] = File(None, description="File to store"),
    path: Optional[str] = Form(None, description="Destination key, e.g. products/<uuid>.jpg"),
    storage_service: StorageService = Depends(get_storage_service),
):
    """
    Store an uploaded file.

    **Contract:**
    - Request: multipart body with `file` (binary) and `path` (destination key)
    - Success: `{"success": true, "url": "https://<bucket>.s3.amazonaws.com/<path>"}`
    - Failure: `{"error": "<message>"}` with status 400 or 500

    The object is written once; there is no retry and no cleanup of a
    partially failed write.
    """
    if file is None or not file.filename:
        return error_response(status.HTTP_400_BAD_REQUEST, "No file provided")
    if not path or not path.strip():
        return error_response(status.HTTP_400_BAD_REQUEST, "No path provided")

    try:
        data = await file.read()
        url = await storage_service.store(data, path.strip(), file.content_type)
    except Exception as e:
        logger.error(
            f"Error uploading '{path}' to storage: {type(e).__name__}: {e}",
            exc_info=True,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to upload file")

    logger.info(f"Stored '{path}' ({len(data)} bytes)")
    return UploadResponse(url=url)
