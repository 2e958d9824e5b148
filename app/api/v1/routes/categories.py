"""
Routes for catalog categories.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.catalog import CategoryResponse
from app.core.database import get_db
from app.core.dependencies import get_category_form
from app.core.exceptions import ConflictError, NotFoundError, UploadFailure, ValidationError
from app.services.category import CategoryService
from app.services.forms import CategoryFormController

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
)


@router.get(
    "",
    response_model=List[CategoryResponse],
    summary="Get categories",
    description="Get all categories with the number of products in each.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Categories retrieved successfully"},
        500: {"description": "Internal server error"},
    },
)
async def get_categories(
    q: Optional[str] = Query(None, description="Filter by name (case-insensitive substring)"),
    db: AsyncSession = Depends(get_db),
) -> List[CategoryResponse]:
    """
    Get categories for the category list.

    Product counts are recomputed from the products table on every request.
    """
    category_service = CategoryService()
    try:
        rows = await category_service.list_with_product_counts(db, search=q)
        logger.info(f"Retrieved {len(rows)} categories")
        return [CategoryResponse.from_model(category, count) for category, count in rows]
    except Exception as e:
        logger.error(f"Unexpected error getting categories: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving categories",
        ) from e


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Get category",
    description="Get a category by ID, with its live product count.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Category retrieved successfully"},
        404: {"description": "Category not found"},
        500: {"description": "Internal server error"},
    },
)
async def get_category(
    category_id: str,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    category_service = CategoryService()
    try:
        row = await category_service.get_with_product_count(db, category_id)
        if not row:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
        return CategoryResponse.from_model(*row)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error getting category {category_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving the category",
        ) from e


@router.post(
    "",
    response_model=CategoryResponse,
    summary="Create category",
    description="Create a category from the category form. Image files are uploaded to storage first.",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Category created successfully"},
        400: {"description": "Invalid form data"},
        502: {"description": "Image upload failed"},
        500: {"description": "Internal server error"},
    },
)
async def create_category(
    name: str = Form(..., min_length=1, max_length=200, description="Display name"),
    description: str = Form("", description="Category description"),
    image_file: Optional[UploadFile] = File(None, description="Thumbnail image"),
    hero_image_file: Optional[UploadFile] = File(None, description="Hero image"),
    form: CategoryFormController = Depends(get_category_form),
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """
    Create a new category.

    **Images:**
    - `image_file` becomes the thumbnail, `hero_image_file` the hero image
    - Each file is uploaded before the category is written
    - If an upload fails the category is not created
    """
    try:
        category = await form.save(
            db,
            {"name": name, "description": description},
            image_file=image_file,
            hero_image_file=hero_image_file,
        )
        return CategoryResponse.from_model(category, 0)
    except ValidationError as e:
        logger.warning(f"Category creation failed: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except UploadFailure as e:
        logger.error(f"Category creation aborted by upload failure: {e.__cause__!r}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error creating category: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating the category",
        ) from e


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update category",
    description="Update a category from the category form. Only submitted fields and images change.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Category updated successfully"},
        404: {"description": "Category not found"},
        502: {"description": "Image upload failed"},
        500: {"description": "Internal server error"},
    },
)
async def update_category(
    category_id: str,
    name: Optional[str] = Form(None, min_length=1, max_length=200),
    description: Optional[str] = Form(None),
    image_file: Optional[UploadFile] = File(None, description="New thumbnail image"),
    hero_image_file: Optional[UploadFile] = File(None, description="New hero image"),
    form: CategoryFormController = Depends(get_category_form),
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """
    Update a category.

    **Partial Updates:**
    - Omitted fields remain unchanged
    - An image is replaced only when a new file is sent; the old object stays in storage
    """
    fields = {
        key: value
        for key, value in (("name", name), ("description", description))
        if value is not None
    }
    try:
        category = await form.save(
            db,
            fields,
            image_file=image_file,
            hero_image_file=hero_image_file,
            category_id=category_id,
        )
        product_count = await form.category_service.count_products(db, category_id)
        return CategoryResponse.from_model(category, product_count)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except UploadFailure as e:
        logger.error(f"Category {category_id} update aborted by upload failure: {e.__cause__!r}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error updating category {category_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the category",
        ) from e


@router.delete(
    "/{category_id}",
    summary="Delete category",
    description="Delete a category and its subcategories. Refused while any product references it.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Category deleted successfully"},
        404: {"description": "Category not found"},
        409: {"description": "Category still has products"},
        500: {"description": "Internal server error"},
    },
)
async def delete_category(
    category_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    """
    Delete a category.

    **Guard:**
    - The product count is recomputed at delete time
    - Any referencing product blocks the delete with 409 and nothing changes
    """
    category_service = CategoryService()
    try:
        deleted = await category_service.delete_category(db, category_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
        return None
    except HTTPException:
        raise
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error deleting category {category_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while deleting the category",
        ) from e
