"""
Customer service: profiles, order metrics and the customer detail view.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.customer import CustomerCreate, CustomerUpdate
from app.core.exceptions import ConflictError
from app.models.customer import Address, Customer
from app.models.order import Order

logger = logging.getLogger(__name__)


class CustomerService:
    """Service for managing customers"""

    async def get_customer(self, db: AsyncSession, customer_id: str) -> Optional[Customer]:
        result = await db.execute(select(Customer).where(Customer.id == customer_id))
        return result.scalar_one_or_none()

    async def get_customer_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Optional[Customer]:
        """Customer owning ``user_id``; unique by constraint."""
        result = await db.execute(select(Customer).where(Customer.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_customers(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 1000,
    ) -> List[Customer]:
        """
        Get customers, newest first.

        Args:
            db: Database session
            search: Case-insensitive substring of the name or email
            skip: Number of customers to skip (for pagination)
            limit: Maximum number of customers to return
        """
        query = select(Customer)
        if search:
            needle = search.lower()
            query = query.where(
                func.lower(Customer.name).contains(needle)
                | func.lower(Customer.email).contains(needle)
            )
        query = query.order_by(Customer.created_at.desc()).offset(skip).limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def order_metrics(
        self, db: AsyncSession, user_ids: Optional[List[str]] = None
    ) -> Dict[str, Tuple[float, int]]:
        """
        Total spent and order count per user id.

        Args:
            db: Database session
            user_ids: Restrict the tally to these users

        Returns:
            Mapping of user id to (total_spent, order_count)
        """
        query = select(
            Order.user_id,
            func.coalesce(func.sum(Order.total_amount), 0.0),
            func.count(),
        ).group_by(Order.user_id)
        if user_ids is not None:
            query = query.where(Order.user_id.in_(user_ids))

        result = await db.execute(query)
        return {
            user_id: (float(total), count) for user_id, total, count in result.all()
        }

    async def list_with_metrics(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 1000,
    ) -> List[Tuple[Customer, float, int]]:
        """Get customers paired with (total_spent, order_count)."""
        customers = await self.get_customers(db, search=search, skip=skip, limit=limit)
        metrics = await self.order_metrics(db, [customer.user_id for customer in customers])
        return [
            (customer, *metrics.get(customer.user_id, (0.0, 0)))
            for customer in customers
        ]

    async def get_customer_details(
        self, db: AsyncSession, customer_id: str
    ) -> Optional[Dict]:
        """
        Customer with addresses, orders and order metrics.

        Returns:
            Dict with customer, total_spent, order_count, addresses and
            orders; None if the customer does not exist
        """
        customer = await self.get_customer(db, customer_id)
        if not customer:
            return None

        address_rows = await db.execute(
            select(Address).where(Address.user_id == customer.user_id)
        )
        order_rows = await db.execute(
            select(Order)
            .where(Order.user_id == customer.user_id)
            .order_by(Order.created_at.desc())
        )
        addresses = list(address_rows.scalars().all())
        orders = list(order_rows.scalars().all())

        return {
            "customer": customer,
            "total_spent": float(sum(order.total_amount or 0.0 for order in orders)),
            "order_count": len(orders),
            "addresses": addresses,
            "orders": orders,
        }

    async def _ensure_user_id_free(
        self, db: AsyncSession, user_id: str, customer_id: Optional[str] = None
    ) -> None:
        existing = await self.get_customer_by_user_id(db, user_id)
        if existing and existing.id != customer_id:
            raise ConflictError(f"A customer with user_id {user_id} already exists")

    async def create_customer(self, db: AsyncSession, data: CustomerCreate) -> Customer:
        """
        Create a new customer.

        Raises:
            ConflictError: If ``user_id`` is already taken
        """
        await self._ensure_user_id_free(db, data.user_id)

        values = data.model_dump(exclude_none=True)
        values["status"] = data.status.value
        customer = Customer(**values)
        db.add(customer)

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Failed to create customer due to database error", exc_info=True)
            raise ConflictError(
                f"A customer with user_id {data.user_id} already exists"
            ) from e

        logger.info(f"Created customer {customer.id} for user {customer.user_id}")
        return customer

    async def update_customer(
        self, db: AsyncSession, customer_id: str, data: CustomerUpdate
    ) -> Optional[Customer]:
        """
        Update a customer (partial update).

        Raises:
            ConflictError: If the new ``user_id`` is already taken
        """
        customer = await self.get_customer(db, customer_id)
        if not customer:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "user_id" in update_data:
            await self._ensure_user_id_free(db, update_data["user_id"], customer_id)
        if "status" in update_data:
            update_data["status"] = update_data["status"].value

        for field, value in update_data.items():
            setattr(customer, field, value)
        customer.updated_at = datetime.now(timezone.utc)

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Failed to update customer due to database error", exc_info=True)
            raise ConflictError("user_id is already in use") from e

        logger.info(f"Updated customer {customer_id}")
        return customer

    async def delete_customer(self, db: AsyncSession, customer_id: str) -> bool:
        """
        Delete a customer. Addresses and orders are kept.
        """
        customer = await self.get_customer(db, customer_id)
        if not customer:
            return False

        await db.delete(customer)
        await db.flush()
        logger.info(f"Deleted customer {customer_id}")
        return True
