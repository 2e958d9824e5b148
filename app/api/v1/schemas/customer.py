"""
Schemas for customers and addresses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.customer import CustomerStatus


class AddressBase(BaseModel):
    """Base schema with common address fields."""

    label: str = Field("", max_length=50, description="Address label (home, work, ...)")
    street: str = Field(..., min_length=1, max_length=300)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field("", max_length=100)
    postal_code: str = Field("", max_length=20)
    country: str = Field(..., min_length=1, max_length=100)


class AddressCreate(AddressBase):
    """Schema for creating an address."""

    user_id: str = Field(..., min_length=1, description="Owning user ID")


class AddressUpdate(BaseModel):
    """Schema for updating an address. All fields are optional."""

    label: Optional[str] = Field(None, max_length=50)
    street: Optional[str] = Field(None, min_length=1, max_length=300)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, min_length=1, max_length=100)


class AddressResponse(AddressBase):
    """Schema for address response."""

    id: str = Field(..., description="Address ID")
    user_id: str = Field(..., description="Owning user ID")

    model_config = ConfigDict(from_attributes=True)


class CustomerCreate(BaseModel):
    """
    Schema for creating a customer.

    ``user_id`` must not be in use by another customer.
    """

    user_id: str = Field(..., min_length=1, max_length=128, description="Logical user ID")
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    status: CustomerStatus = Field(CustomerStatus.ACTIVE, description="Account status")
    created_at: Optional[datetime] = Field(None, description="Join date (defaults to now)")


class CustomerUpdate(BaseModel):
    """Schema for updating a customer. All fields are optional."""

    user_id: Optional[str] = Field(None, min_length=1, max_length=128)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    status: Optional[CustomerStatus] = None


class CustomerResponse(BaseModel):
    """
    Schema for customer response.

    ``total_spent`` and ``order_count`` are computed from the customer's
    orders each time the customer is read.
    """

    id: str
    user_id: str
    name: str
    email: str
    status: CustomerStatus
    created_at: Optional[datetime] = None
    total_spent: float = Field(0.0, description="Sum of order totals")
    order_count: int = Field(0, ge=0, description="Number of orders")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, customer, total_spent: float = 0.0, order_count: int = 0) -> "CustomerResponse":
        return cls.model_validate(customer).model_copy(
            update={"total_spent": total_spent, "order_count": order_count}
        )

