"""
Routes for shipping addresses.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.customer import AddressCreate, AddressResponse, AddressUpdate
from app.core.database import get_db
from app.services.address import AddressService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/addresses",
    tags=["addresses"],
)


@router.get(
    "",
    response_model=List[AddressResponse],
    summary="Get addresses",
    description="Get addresses grouped by owning user.",
)
async def get_addresses(
    user_id: Optional[str] = Query(None, description="Only addresses of this user"),
    q: Optional[str] = Query(None, description="Search street, city or country"),
    skip: int = Query(0, ge=0),
    limit: int = Query(1000, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> List[AddressResponse]:
    try:
        addresses = await AddressService.get_addresses(
            db, user_id=user_id, search=q, skip=skip, limit=limit
        )
        return [AddressResponse.model_validate(address) for address in addresses]
    except Exception as e:
        logger.error(f"Unexpected error getting addresses: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving addresses",
        ) from e


@router.get(
    "/{address_id}",
    response_model=AddressResponse,
    summary="Get address",
    responses={404: {"description": "Address not found"}},
)
async def get_address(
    address_id: str,
    db: AsyncSession = Depends(get_db),
) -> AddressResponse:
    try:
        address = await AddressService.get_address(db, address_id)
        if not address:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found")
        return AddressResponse.model_validate(address)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error getting address {address_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving the address",
        ) from e


@router.post(
    "",
    response_model=AddressResponse,
    summary="Create address",
    status_code=status.HTTP_201_CREATED,
)
async def create_address(
    data: AddressCreate,
    db: AsyncSession = Depends(get_db),
) -> AddressResponse:
    try:
        address = await AddressService.create_address(db, data)
        return AddressResponse.model_validate(address)
    except Exception as e:
        logger.error(f"Unexpected error creating address: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating the address",
        ) from e


@router.patch(
    "/{address_id}",
    response_model=AddressResponse,
    summary="Update address",
    responses={404: {"description": "Address not found"}},
)
async def update_address(
    address_id: str,
    data: AddressUpdate,
    db: AsyncSession = Depends(get_db),
) -> AddressResponse:
    try:
        address = await AddressService.update_address(db, address_id, data)
        if not address:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found")
        return AddressResponse.model_validate(address)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error updating address {address_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the address",
        ) from e


@router.delete(
    "/{address_id}",
    summary="Delete address",
    description="Delete an address. Orders that shipped to it keep the id.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Address not found"}},
)
async def delete_address(
    address_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        deleted = await AddressService.delete_address(db, address_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found")
        return None
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error deleting address {address_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while deleting the address",
        ) from e
