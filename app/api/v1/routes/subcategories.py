"""
Routes for catalog subcategories.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.catalog import (
    SubcategoryCreate,
    SubcategoryResponse,
    SubcategoryUpdate,
)
from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.services.subcategory import SubcategoryService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/subcategories",
    tags=["subcategories"],
)


@router.get(
    "",
    response_model=List[SubcategoryResponse],
    summary="Get subcategories",
    description="Get subcategories with the current name of their parent category.",
    status_code=status.HTTP_200_OK,
)
async def get_subcategories(
    category_id: Optional[str] = Query(None, description="Only subcategories of this category"),
    q: Optional[str] = Query(None, description="Filter by name (case-insensitive substring)"),
    db: AsyncSession = Depends(get_db),
) -> List[SubcategoryResponse]:
    subcategory_service = SubcategoryService()
    try:
        rows = await subcategory_service.list_with_parent_names(
            db, category_id=category_id, search=q
        )
        return [SubcategoryResponse.from_model(sub, parent_name) for sub, parent_name in rows]
    except Exception as e:
        logger.error(f"Unexpected error getting subcategories: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving subcategories",
        ) from e


@router.get(
    "/{subcategory_id}",
    response_model=SubcategoryResponse,
    summary="Get subcategory",
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Subcategory not found"}},
)
async def get_subcategory(
    subcategory_id: str,
    db: AsyncSession = Depends(get_db),
) -> SubcategoryResponse:
    subcategory_service = SubcategoryService()
    try:
        row = await subcategory_service.get_with_parent_name(db, subcategory_id)
        if not row:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subcategory not found")
        return SubcategoryResponse.from_model(*row)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error getting subcategory {subcategory_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving the subcategory",
        ) from e


@router.post(
    "",
    response_model=SubcategoryResponse,
    summary="Create subcategory",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Subcategory created successfully"},
        400: {"description": "Owning category does not exist"},
    },
)
async def create_subcategory(
    data: SubcategoryCreate,
    db: AsyncSession = Depends(get_db),
) -> SubcategoryResponse:
    """
    Create a subcategory under an existing category.
    """
    subcategory_service = SubcategoryService()
    try:
        subcategory = await subcategory_service.create_subcategory(db, data)
        row = await subcategory_service.get_with_parent_name(db, subcategory.id)
        return SubcategoryResponse.from_model(*row)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error creating subcategory: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating the subcategory",
        ) from e


@router.patch(
    "/{subcategory_id}",
    response_model=SubcategoryResponse,
    summary="Update subcategory",
    description="Moving a subcategory to another category clears it from the products that use it.",
    status_code=status.HTTP_200_OK,
    responses={
        400: {"description": "Owning category does not exist"},
        404: {"description": "Subcategory not found"},
    },
)
async def update_subcategory(
    subcategory_id: str,
    data: SubcategoryUpdate,
    db: AsyncSession = Depends(get_db),
) -> SubcategoryResponse:
    subcategory_service = SubcategoryService()
    try:
        subcategory = await subcategory_service.update_subcategory(db, subcategory_id, data)
        if not subcategory:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subcategory not found")
        row = await subcategory_service.get_with_parent_name(db, subcategory_id)
        return SubcategoryResponse.from_model(*row)
    except HTTPException:
        raise
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error updating subcategory {subcategory_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the subcategory",
        ) from e


@router.delete(
    "/{subcategory_id}",
    summary="Delete subcategory",
    description="Delete a subcategory and clear it from the products that use it.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Subcategory not found"}},
)
async def delete_subcategory(
    subcategory_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    subcategory_service = SubcategoryService()
    try:
        deleted = await subcategory_service.delete_subcategory(db, subcategory_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subcategory not found")
        return None
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error deleting subcategory {subcategory_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while deleting the subcategory",
        ) from e
