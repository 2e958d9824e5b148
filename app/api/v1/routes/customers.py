"""
Routes for customers.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from app.api.v1.schemas.order import CustomerDetailResponse
from app.core.database import get_db
from app.core.exceptions import ConflictError, UpstreamFailure
from app.services.customer import CustomerService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/customers",
    tags=["customers"],
)


@router.get(
    "",
    response_model=List[CustomerResponse],
    summary="Get customers",
    description="Get customers, newest first, with total spent and order count.",
    status_code=status.HTTP_200_OK,
)
async def get_customers(
    q: Optional[str] = Query(None, description="Search name or email"),
    skip: int = Query(0, ge=0),
    limit: int = Query(1000, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> List[CustomerResponse]:
    customer_service = CustomerService()
    try:
        rows = await customer_service.list_with_metrics(db, search=q, skip=skip, limit=limit)
        return [CustomerResponse.from_model(*row) for row in rows]
    except Exception as e:
        logger.error(f"Unexpected error getting customers: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving customers",
        ) from e


@router.get(
    "/{customer_id}",
    response_model=CustomerDetailResponse,
    summary="Get customer details",
    description="Get a customer with their addresses, orders and order metrics.",
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Customer not found"}},
)
async def get_customer(
    customer_id: str,
    db: AsyncSession = Depends(get_db),
) -> CustomerDetailResponse:
    """
    Get customer details.

    The metrics shown here are computed from the same orders as the
    list view, so both always agree.
    """
    customer_service = CustomerService()
    try:
        details = await customer_service.get_customer_details(db, customer_id)
        if not details:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

        return CustomerDetailResponse.model_validate(
            {
                "customer": CustomerResponse.from_model(
                    details["customer"], details["total_spent"], details["order_count"]
                ),
                "addresses": details["addresses"],
                "orders": details["orders"],
            },
            from_attributes=True,
        )
    except HTTPException:
        raise
    except UpstreamFailure as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error getting customer {customer_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving the customer",
        ) from e


@router.post(
    "",
    response_model=CustomerResponse,
    summary="Create customer",
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "user_id already in use"}},
)
async def create_customer(
    data: CustomerCreate,
    db: AsyncSession = Depends(get_db),
) -> CustomerResponse:
    customer_service = CustomerService()
    try:
        customer = await customer_service.create_customer(db, data)
        return CustomerResponse.from_model(customer)
    except ConflictError as e:
        logger.warning(f"Customer creation refused: {e.message}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error creating customer: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating the customer",
        ) from e


@router.patch(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Update customer",
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Customer not found"},
        409: {"description": "user_id already in use"},
    },
)
async def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
) -> CustomerResponse:
    customer_service = CustomerService()
    try:
        customer = await customer_service.update_customer(db, customer_id, data)
        if not customer:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

        metrics = await customer_service.order_metrics(db, [customer.user_id])
        return CustomerResponse.from_model(customer, *metrics.get(customer.user_id, (0.0, 0)))
    except HTTPException:
        raise
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error updating customer {customer_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the customer",
        ) from e


@router.delete(
    "/{customer_id}",
    summary="Delete customer",
    description="Delete a customer profile. Their addresses and orders are kept.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Customer not found"}},
)
async def delete_customer(
    customer_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    customer_service = CustomerService()
    try:
        deleted = await customer_service.delete_customer(db, customer_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
        return None
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error deleting customer {customer_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while deleting the customer",
        ) from e
