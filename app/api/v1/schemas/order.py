"""
Schemas for orders.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.api.v1.schemas.customer import AddressResponse, CustomerResponse
from app.models.order import PaymentStatus


class OrderLineItem(BaseModel):
    """Line item snapshot taken when the order was placed."""

    product_id: str = Field(..., description="Product ID at order time")
    name: str = Field(..., description="Product name at order time")
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0, description="Unit price at order time")


class OrderCreate(BaseModel):
    """Schema for recording an order."""

    order_id: str = Field(..., min_length=1, max_length=64, description="Human-readable order number")
    user_id: str = Field(..., min_length=1, max_length=128)
    products: List[OrderLineItem] = Field(default_factory=list)
    subtotal: float = Field(..., ge=0)
    total_amount: float = Field(..., ge=0)
    shipping_address_id: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_provider: str = Field("", max_length=50)
    provider_session_id: Optional[str] = Field(None, max_length=255)
    created_at: Optional[datetime] = Field(None, description="Order time (defaults to now)")


class OrderUpdate(BaseModel):
    """Schema for updating an order. All fields are optional."""

    shipping_address_id: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    payment_provider: Optional[str] = Field(None, max_length=50)
    provider_session_id: Optional[str] = Field(None, max_length=255)


class OrderSummary(BaseModel):
    """Compact order row for list views."""

    id: str
    order_id: str
    user_id: str
    created_at: Optional[datetime] = None
    total_amount: float
    payment_status: str

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(OrderSummary):
    """Schema for order response."""

    products: List[OrderLineItem] = Field(default_factory=list)
    subtotal: float
    shipping_address_id: Optional[str] = None
    payment_provider: str = ""
    provider_session_id: Optional[str] = None


class OrderDetailResponse(BaseModel):
    """Order enriched with the customer profile and shipping address."""

    order: OrderResponse
    customer: Optional[CustomerResponse] = None
    address: Optional[AddressResponse] = None


class CustomerDetailResponse(BaseModel):
    """Customer profile with addresses, orders and order metrics."""

    customer: CustomerResponse
    addresses: List[AddressResponse] = Field(default_factory=list)
    orders: List[OrderSummary] = Field(default_factory=list)
