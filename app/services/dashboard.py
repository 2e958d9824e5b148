"""
Dashboard service
Store-wide counters computed from the collections on each request
"""
import logging
from typing import Dict, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalog import Product
from app.models.customer import Customer
from app.models.order import Order, PaymentStatus

logger = logging.getLogger(__name__)


class DashboardService:
    """
    Service class for dashboard statistics
    """

    @staticmethod
    async def get_stats(db: AsyncSession) -> Dict[str, Union[int, float]]:
        """
        Count products, orders and customers, and sum paid revenue

        Returns:
            Dict with products, orders, customers and revenue
        """
        products = await db.scalar(select(func.count()).select_from(Product))
        orders = await db.scalar(select(func.count()).select_from(Order))
        customers = await db.scalar(select(func.count()).select_from(Customer))
        revenue = await db.scalar(
            select(func.coalesce(func.sum(Order.total_amount), 0.0)).where(
                Order.payment_status == PaymentStatus.PAID.value
            )
        )
        logger.debug(
            f"Dashboard stats: {products} products, {orders} orders, {customers} customers"
        )
        return {
            "products": products or 0,
            "orders": orders or 0,
            "customers": customers or 0,
            "revenue": float(revenue or 0.0),
        }
