"""
Schemas for catalog categories, subcategories, tags and products.

Reference: https://fastapi.tiangolo.com/tutorial/body/
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Category schemas
class CategoryResponse(BaseModel):
    """
    Schema for category response.

    ``product_count`` is computed when the category is read; it is not stored.
    """

    id: str = Field(..., description="Category ID")
    name: str = Field(..., description="Display name")
    description: str = Field("", description="Category description")
    image: Optional[str] = Field(None, description="Thumbnail image URL")
    hero_image: Optional[str] = Field(None, description="Hero image URL")
    product_count: int = Field(0, ge=0, description="Number of products in this category")
    created_at: Optional[datetime] = Field(None, description="Timestamp when category was created")
    updated_at: Optional[datetime] = Field(None, description="Timestamp when category was last updated")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, category, product_count: int = 0) -> "CategoryResponse":
        return cls.model_validate(category).model_copy(update={"product_count": product_count})


# Subcategory schemas
class SubcategoryCreate(BaseModel):
    """Schema for creating a new subcategory."""

    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    category_id: str = Field(..., min_length=1, description="Owning category ID")


class SubcategoryUpdate(BaseModel):
    """
    Schema for updating a subcategory.

    All fields are optional for partial updates.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200, description="Display name")
    category_id: Optional[str] = Field(None, min_length=1, description="Owning category ID")


class SubcategoryResponse(BaseModel):
    """Schema for subcategory response, with the parent name resolved at read time."""

    id: str = Field(..., description="Subcategory ID")
    name: str = Field(..., description="Display name")
    category_id: str = Field(..., description="Owning category ID")
    parent_name: str = Field("", description="Current name of the owning category")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, subcategory, parent_name: str = "") -> "SubcategoryResponse":
        return cls.model_validate(subcategory).model_copy(update={"parent_name": parent_name})


# Tag schemas
class TagCreate(BaseModel):
    """Schema for creating a new tag."""

    name: str = Field(..., min_length=1, max_length=100, description="Tag name")


class TagUpdate(BaseModel):
    """Schema for updating a tag."""

    name: Optional[str] = Field(None, min_length=1, max_length=100, description="Tag name")


class TagResponse(BaseModel):
    """Schema for tag response."""

    id: str = Field(..., description="Tag ID")
    name: str = Field(..., description="Tag name")
    product_count: int = Field(0, ge=0, description="Number of products carrying this tag")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, tag, product_count: int = 0) -> "TagResponse":
        return cls.model_validate(tag).model_copy(update={"product_count": product_count})


# Product schemas
class ProductResponse(BaseModel):
    """
    Schema for product response.

    ``category_name`` and ``subcategory_name`` are filled in on list views.
    """

    id: str = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    image: Optional[str] = Field(None, description="First image URL")
    image2: Optional[str] = Field(None, description="Second image URL")
    image3: Optional[str] = Field(None, description="Third image URL")
    price: float = Field(..., ge=0, description="Selling price")
    stock: int = Field(..., ge=0, description="Available inventory count")
    rating: float = Field(0, ge=0, le=5, description="Average rating 0-5")
    date: Optional[datetime] = Field(None, description="Listing date")
    category_id: Optional[str] = Field(None, description="Category ID")
    subcategory_id: Optional[str] = Field(None, description="Subcategory ID")
    tag_ids: List[str] = Field(default_factory=list, description="Tag IDs")
    product_details: List[str] = Field(default_factory=list, description="Detail lines")
    weight: Optional[float] = Field(None, ge=0, description="Shipping weight")
    weight_unit: str = Field("g", description="Weight unit")
    category_name: Optional[str] = Field(None, description="Resolved category name")
    subcategory_name: Optional[str] = Field(None, description="Resolved subcategory name")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(
        cls,
        product,
        category_name: Optional[str] = None,
        subcategory_name: Optional[str] = None,
    ) -> "ProductResponse":
        return cls.model_validate(product).model_copy(
            update={"category_name": category_name, "subcategory_name": subcategory_name}
        )


class ProductFields(BaseModel):
    """
    Product fields submitted through the product form.

    All fields are optional so the same schema serves create and partial
    update; ``ProductFormController`` enforces what create requires.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    rating: Optional[float] = Field(None, ge=0, le=5)
    date: Optional[datetime] = None
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    tag_ids: Optional[List[str]] = None
    product_details: Optional[List[str]] = None
    weight: Optional[float] = Field(None, ge=0)
    weight_unit: Optional[str] = Field(None, max_length=10)


class OptionItem(BaseModel):
    """Id/name pair used to fill form select boxes."""

    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class ProductFormOptions(BaseModel):
    """Lookup lists for the product form."""

    categories: List[OptionItem] = Field(default_factory=list)
    tags: List[OptionItem] = Field(default_factory=list)
    subcategories: List[OptionItem] = Field(
        default_factory=list, description="Subcategories of the requested category"
    )
