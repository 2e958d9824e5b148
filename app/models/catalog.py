"""
Catalog models: categories, subcategories, tags and products.

Foreign keys between catalog entities are plain indexed string columns.
Referential rules (restrict, cascade, nullify) are applied by the service
layer so that each relationship's policy is explicit in one place.

Reference: https://docs.sqlalchemy.org/en/20/orm/declarative_tables.html
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


def generate_id() -> str:
    """Opaque unique id assigned to every new catalog document."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Category(Base):
    """
    Top-level product category.

    Attributes:
        id: Opaque string id
        name: Display name
        description: Category description
        image: Public URL of the thumbnail image
        hero_image: Public URL of the hero image
        created_at: Timestamp when the category was created
        updated_at: Timestamp when the category was last updated
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False, comment="Display name")
    description: Mapped[str] = mapped_column(
        Text, nullable=False, default="", comment="Category description"
    )
    image: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True, comment="Thumbnail image URL"
    )
    hero_image: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True, comment="Hero image URL"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Category(id='{self.id}', name='{self.name}')>"


class Subcategory(Base):
    """
    Second-level category owned by a Category.

    Attributes:
        id: Opaque string id
        name: Display name
        category_id: Id of the owning category (required)
    """

    __tablename__ = "subcategories"

    __table_args__ = (
        Index("ix_subcategories_category_id", "category_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        comment="Owning category id",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<Subcategory(id='{self.id}', name='{self.name}', "
            f"category_id='{self.category_id}')>"
        )


class Tag(Base):
    """Product tag. Products reference tags through their ``tag_ids`` list."""

    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Tag(id='{self.id}', name='{self.name}')>"


class Product(Base):
    """
    Product in the store catalog.

    Attributes:
        id: Opaque string id
        name: Product name
        description: Product description
        image, image2, image3: Up to three image URLs; any slot may be empty
        price: Selling price
        stock: Available inventory count
        rating: Average rating (0-5)
        date: Listing date
        category_id: Id of the category the product belongs to
        subcategory_id: Id of the subcategory (optional)
        tag_ids: List of tag ids
        product_details: Free-form list of detail lines
        weight: Shipping weight (optional)
        weight_unit: Unit of ``weight`` (e.g. "g", "kg")
    """

    __tablename__ = "products"

    __table_args__ = (
        Index("ix_products_category_id", "category_id"),
        Index("ix_products_subcategory_id", "subcategory_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    image2: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    image3: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, comment="Listing date"
    )

    category_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    subcategory_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    tag_ids: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list, comment="Ids of the tags on this product"
    )
    product_details: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list, comment="Free-form detail lines"
    )

    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    weight_unit: Mapped[str] = mapped_column(String(10), nullable=False, default="g")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<Product(id='{self.id}', name='{self.name}', "
            f"category_id='{self.category_id}')>"
        )
