"""
Order service: order records and the enriched order view.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.order import OrderCreate, OrderLineItem, OrderUpdate
from app.core.exceptions import DocumentDecodeError
from app.models.customer import Address, Customer
from app.models.order import Order, PaymentStatus

logger = logging.getLogger(__name__)

_line_items = TypeAdapter(List[OrderLineItem])

# An explicit null for these clears the stored value
CLEARABLE_ORDER_FIELDS = ("shipping_address_id", "provider_session_id")


def decode_line_items(order: Order) -> List[OrderLineItem]:
    """
    Validate the stored line items of an order.

    Raises:
        DocumentDecodeError: If a stored line item does not match the schema
    """
    try:
        return _line_items.validate_python(order.products or [])
    except PydanticValidationError as e:
        logger.error(f"Order {order.id} has malformed line items", exc_info=True)
        raise DocumentDecodeError() from e


class OrderService:
    """Service for managing orders"""

    async def get_order(self, db: AsyncSession, order_id: str) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.id == order_id))
        order = result.scalar_one_or_none()
        if order:
            decode_line_items(order)
        return order

    async def get_orders(
        self,
        db: AsyncSession,
        user_id: Optional[str] = None,
        payment_status: Optional[PaymentStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Order]:
        """
        Get orders, newest first.

        Args:
            db: Database session
            user_id: Optional customer filter
            payment_status: Optional payment status filter
            skip: Number of orders to skip (for pagination)
            limit: Maximum number of orders to return
        """
        query = select(Order)
        if user_id:
            query = query.where(Order.user_id == user_id)
        if payment_status:
            query = query.where(Order.payment_status == payment_status.value)
        query = query.order_by(Order.created_at.desc()).offset(skip).limit(limit)

        result = await db.execute(query)
        orders = list(result.scalars().all())
        for order in orders:
            decode_line_items(order)
        return orders

    async def get_recent_orders(self, db: AsyncSession, limit: int = 5) -> List[Order]:
        """The ``limit`` most recently placed orders."""
        return await self.get_orders(db, limit=limit)

    async def get_order_details(
        self, db: AsyncSession, order_id: str
    ) -> Optional[Tuple[Order, Optional[Customer], Optional[Address]]]:
        """
        Order with its customer and shipping address.

        The customer is looked up by the order's ``user_id``; the address by
        ``shipping_address_id`` when one is set. Either may be None when the
        referenced document no longer exists.

        Returns:
            (order, customer, address), or None if the order does not exist
        """
        order = await self.get_order(db, order_id)
        if not order:
            return None

        customer_rows = await db.execute(
            select(Customer).where(Customer.user_id == order.user_id)
        )
        customer = customer_rows.scalar_one_or_none()

        address = None
        if order.shipping_address_id:
            address = await db.get(Address, order.shipping_address_id)

        return order, customer, address

    async def create_order(self, db: AsyncSession, data: OrderCreate) -> Order:
        values = data.model_dump(exclude_none=True, mode="json")
        if data.created_at is not None:
            values["created_at"] = data.created_at
        order = Order(**values)
        db.add(order)
        await db.flush()
        logger.info(f"Recorded order {order.order_id} (ID: {order.id}) for user {order.user_id}")
        return order

    async def update_order(
        self, db: AsyncSession, order_id: str, data: OrderUpdate
    ) -> Optional[Order]:
        order = await self.get_order(db, order_id)
        if not order:
            return None

        update_data = data.model_dump(exclude_unset=True, mode="json")
        for field, value in update_data.items():
            if value is None and field not in CLEARABLE_ORDER_FIELDS:
                continue
            setattr(order, field, value)
        order.updated_at = datetime.now(timezone.utc)

        await db.flush()
        logger.info(f"Updated order {order_id}")
        return order

    async def delete_order(self, db: AsyncSession, order_id: str) -> bool:
        order = await self.get_order(db, order_id)
        if not order:
            return False

        await db.delete(order)
        await db.flush()
        logger.info(f"Deleted order {order_id}")
        return True
