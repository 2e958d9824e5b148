"""
Routes for orders.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.customer import AddressResponse, CustomerResponse
from app.api.v1.schemas.dashboard import RecentOrdersResponse
from app.api.v1.schemas.order import (
    OrderCreate,
    OrderDetailResponse,
    OrderResponse,
    OrderUpdate,
)
from app.core.database import get_db
from app.core.exceptions import DocumentDecodeError
from app.models.order import PaymentStatus
from app.services.customer import CustomerService
from app.services.order import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/orders",
    tags=["orders"],
)


@router.get(
    "",
    response_model=List[OrderResponse],
    summary="Get orders",
    description="Get orders, newest first.",
    status_code=status.HTTP_200_OK,
)
async def get_orders(
    user_id: Optional[str] = Query(None, description="Only orders of this user"),
    payment_status: Optional[PaymentStatus] = Query(None, description="Filter by payment status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> List[OrderResponse]:
    order_service = OrderService()
    try:
        orders = await order_service.get_orders(
            db, user_id=user_id, payment_status=payment_status, skip=skip, limit=limit
        )
        return [OrderResponse.model_validate(order) for order in orders]
    except DocumentDecodeError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error getting orders: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving orders",
        ) from e


# Must be registered before /{order_id}
@router.get(
    "/recent",
    response_model=RecentOrdersResponse,
    summary="Get recent orders",
    description="The five most recently placed orders.",
    status_code=status.HTTP_200_OK,
)
async def get_recent_orders(
    db: AsyncSession = Depends(get_db),
) -> RecentOrdersResponse:
    order_service = OrderService()
    try:
        orders = await order_service.get_recent_orders(db)
        return RecentOrdersResponse.model_validate({"orders": orders}, from_attributes=True)
    except DocumentDecodeError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error getting recent orders: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving recent orders",
        ) from e


@router.get(
    "/{order_id}",
    response_model=OrderDetailResponse,
    summary="Get order details",
    description="Get an order with its customer profile and shipping address.",
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Order not found"}},
)
async def get_order(
    order_id: str,
    db: AsyncSession = Depends(get_db),
) -> OrderDetailResponse:
    """
    Get order details.

    The customer and address are looked up on every read. Either is null
    when the referenced record no longer exists.
    """
    order_service = OrderService()
    customer_service = CustomerService()
    try:
        details = await order_service.get_order_details(db, order_id)
        if not details:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

        order, customer, address = details
        customer_response = None
        if customer:
            metrics = await customer_service.order_metrics(db, [customer.user_id])
            customer_response = CustomerResponse.from_model(
                customer, *metrics.get(customer.user_id, (0.0, 0))
            )

        return OrderDetailResponse(
            order=OrderResponse.model_validate(order),
            customer=customer_response,
            address=AddressResponse.model_validate(address) if address else None,
        )
    except HTTPException:
        raise
    except DocumentDecodeError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error getting order {order_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving the order",
        ) from e


@router.post(
    "",
    response_model=OrderResponse,
    summary="Record order",
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    data: OrderCreate,
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    order_service = OrderService()
    try:
        order = await order_service.create_order(db, data)
        return OrderResponse.model_validate(order)
    except Exception as e:
        logger.error(f"Unexpected error recording order: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while recording the order",
        ) from e


@router.patch(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Update order",
    description=(
        "Update payment or shipping fields. Line items and totals are fixed. "
        "Send null for shipping_address_id to clear it."
    ),
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Order not found"}},
)
async def update_order(
    order_id: str,
    data: OrderUpdate,
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    order_service = OrderService()
    try:
        order = await order_service.update_order(db, order_id, data)
        if not order:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
        return OrderResponse.model_validate(order)
    except HTTPException:
        raise
    except DocumentDecodeError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error updating order {order_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the order",
        ) from e


@router.delete(
    "/{order_id}",
    summary="Delete order",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Order not found"}},
)
async def delete_order(
    order_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    order_service = OrderService()
    try:
        deleted = await order_service.delete_order(db, order_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
        return None
    except HTTPException:
        raise
    except DocumentDecodeError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error deleting order {order_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while deleting the order",
        ) from e
