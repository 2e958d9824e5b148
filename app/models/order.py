"""
Order model.

Line items are a denormalized snapshot stored as a JSON list; they are not
live references to products.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.catalog import generate_id, utcnow


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    PAID = "paid"
    PENDING = "pending"
    OTHER = "other"


class Order(Base):
    """
    Customer order.

    Attributes:
        id: Opaque string id
        order_id: Human-readable order number
        user_id: Logical user id of the customer who placed the order
        products: Line items (product_id, name, quantity, price)
        subtotal: Sum of line items
        total_amount: Amount charged
        shipping_address_id: Id of the shipping address (optional)
        payment_status: paid, pending or other
        payment_provider: Payment provider name
        provider_session_id: Checkout session id at the provider
        created_at: Timestamp when the order was placed
    """

    __tablename__ = "orders"

    __table_args__ = (
        Index("ix_orders_user_id", "user_id"),
        Index("ix_orders_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    order_id: Mapped[str] = mapped_column(
        String(64), nullable=False, comment="Human-readable order number"
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)

    products: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list, comment="Line item snapshot"
    )
    subtotal: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    shipping_address_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    payment_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.PENDING.value,
        comment="Payment status (paid, pending, other)",
    )
    payment_provider: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    provider_session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id='{self.id}', order_id='{self.order_id}', "
            f"user_id='{self.user_id}', payment_status='{self.payment_status}')>"
        )
