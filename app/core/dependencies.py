"""
Shared dependencies for route handlers
Process-wide clients are built once in the application lifespan and kept on
``app.state``; these functions hand them to routes so tests can swap them
through ``app.dependency_overrides``.
Reference: https://fastapi.tiangolo.com/tutorial/dependencies/
"""
from fastapi import Depends, Request

from app.services.forms import CategoryFormController, ProductFormController
from app.services.storage import StorageService
from app.services.upload_client import UploadClient


def get_storage_service(request: Request) -> StorageService:
    """Storage service created at startup."""
    return request.app.state.storage_service


def get_upload_client(request: Request) -> UploadClient:
    """Upload client created at startup."""
    return request.app.state.upload_client


def get_category_form(
    upload_client: UploadClient = Depends(get_upload_client),
) -> CategoryFormController:
    return CategoryFormController(upload_client)


def get_product_form(
    upload_client: UploadClient = Depends(get_upload_client),
) -> ProductFormController:
    return ProductFormController(upload_client)
