"""
Storage schemas for the upload gateway responses
"""
from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """
    Response schema for a successful upload

    Attributes:
        success: Always true
        url: Public URL of the stored object
    """
    success: bool = Field(default=True, description="Upload status")
    url: str = Field(..., description="Public URL of the uploaded file")

    model_config = {"json_schema_extra": {"example": {"success": True, "url": "https://bucket.s3.amazonaws.com/products/0b6c2e1a-4f0e-4b8e-9a51-1f0cbbd1c2aa.jpg"}}}


class UploadErrorResponse(BaseModel):
    """
    Response schema for a failed upload

    Only a short message crosses the boundary; the cause is logged server-side.
    """
    error: str = Field(..., description="Error message")

    model_config = {"json_schema_extra": {"example": {"error": "No file provided"}}}
