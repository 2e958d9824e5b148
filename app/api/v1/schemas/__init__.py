"""
Pydantic schemas for API request/response models
"""

from app.api.v1.schemas.catalog import (
    CategoryResponse,
    ProductResponse,
    SubcategoryCreate,
    SubcategoryResponse,
    SubcategoryUpdate,
    TagCreate,
    TagResponse,
    TagUpdate,
)
from app.api.v1.schemas.customer import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
)
from app.api.v1.schemas.order import (
    CustomerDetailResponse,
    OrderCreate,
    OrderDetailResponse,
    OrderResponse,
    OrderUpdate,
)

__all__ = [
    "AddressCreate",
    "AddressResponse",
    "AddressUpdate",
    "CategoryResponse",
    "CustomerCreate",
    "CustomerDetailResponse",
    "CustomerResponse",
    "CustomerUpdate",
    "OrderCreate",
    "OrderDetailResponse",
    "OrderResponse",
    "OrderUpdate",
    "ProductResponse",
    "SubcategoryCreate",
    "SubcategoryResponse",
    "SubcategoryUpdate",
    "TagCreate",
    "TagResponse",
    "TagUpdate",
]
