"""
Routes for product tags.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.catalog import TagCreate, TagResponse, TagUpdate
from app.core.database import get_db
from app.core.exceptions import UpstreamFailure
from app.services.tag import TagService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tags",
    tags=["tags"],
)


@router.get(
    "",
    response_model=List[TagResponse],
    summary="Get tags",
    description="Get all tags with the number of products carrying each one.",
    status_code=status.HTTP_200_OK,
)
async def get_tags(
    q: Optional[str] = Query(None, description="Filter by name (case-insensitive substring)"),
    db: AsyncSession = Depends(get_db),
) -> List[TagResponse]:
    try:
        rows = await TagService.list_with_product_counts(db, search=q)
        return [TagResponse.from_model(tag, count) for tag, count in rows]
    except UpstreamFailure as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error getting tags: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving tags",
        ) from e


@router.get(
    "/{tag_id}",
    response_model=TagResponse,
    summary="Get tag",
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Tag not found"},
        502: {"description": "A stored product has malformed tag ids"},
    },
)
async def get_tag(
    tag_id: str,
    db: AsyncSession = Depends(get_db),
) -> TagResponse:
    try:
        row = await TagService.get_with_product_count(db, tag_id)
        if not row:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
        return TagResponse.from_model(*row)
    except HTTPException:
        raise
    except UpstreamFailure as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error getting tag {tag_id}: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving the tag",
        ) from e


@router.post(
    "",
    response_model=TagResponse,
    summary="Create tag",
    status_code=status.HTTP_201_CREATED,
)
async def create_tag(
    data: TagCreate,
    db: AsyncSession = Depends(get_db),
) -> TagResponse:
    try:
        tag = await TagService.create_tag(db, data)
        return TagResponse.from_model(tag, 0)
    except Exception as e:
        logger.error(f"Unexpected error creating tag: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating the tag",
        ) from e


@router.patch(
    "/{tag_id}",
    response_model=TagResponse,
    summary="Update tag",
    description="Rename a tag. Products keep referring to it by id.",
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Tag not found"},
        502: {"description": "A stored product has malformed tag ids"},
    },
)
async def update_tag(
    tag_id: str,
    data: TagUpdate,
    db: AsyncSession = Depends(get_db),
) -> TagResponse:
    try:
        tag = await TagService.update_tag(db, tag_id, data)
        if not tag:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
        row = await TagService.get_with_product_count(db, tag_id)
        return TagResponse.from_model(*row)
    except HTTPException:
        raise
    except UpstreamFailure as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error updating tag {tag_id}: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the tag",
        ) from e


@router.delete(
    "/{tag_id}",
    summary="Delete tag",
    description="Delete a tag and remove it from every product that carries it.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Tag not found"}},
)
async def delete_tag(
    tag_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        deleted = await TagService.delete_tag(db, tag_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
        return None
    except HTTPException:
        raise
    except UpstreamFailure as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error deleting tag {tag_id}: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while deleting the tag",
        ) from e
