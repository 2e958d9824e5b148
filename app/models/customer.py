"""
Customer and address models.

``Customer.user_id`` is the logical key that addresses and orders point at.
It is unique so that joins on it resolve to at most one customer.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.catalog import generate_id, utcnow


class CustomerStatus(str, Enum):
    """Customer account status enumeration."""

    ACTIVE = "active"
    DEACTIVE = "deactive"
    SUSPEND = "suspend"


class Customer(Base):
    """
    Store customer profile.

    Attributes:
        id: Opaque string id
        user_id: Identity-provider user id, unique across customers
        name: Full name
        email: Email address
        status: Account status (active, deactive, suspend)
        created_at: Join date
    """

    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(
        String(128),
        unique=True,
        index=True,
        nullable=False,
        comment="Logical user id used to join addresses and orders",
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)

    # Stored as String; enum validation is handled in Pydantic schemas
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CustomerStatus.ACTIVE.value,
        comment="Account status (active, deactive, suspend)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, comment="Join date"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Customer(id='{self.id}', user_id='{self.user_id}', status='{self.status}')>"


class Address(Base):
    """Shipping address owned by a user."""

    __tablename__ = "addresses"

    __table_args__ = (
        Index("ix_addresses_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    label: Mapped[str] = mapped_column(
        String(50), nullable=False, default="", comment="Address label (home, work, ...)"
    )
    street: Mapped[str] = mapped_column(String(300), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Address(id='{self.id}', user_id='{self.user_id}', city='{self.city}')>"
