"""
Product service for catalog products.

Reference: https://docs.sqlalchemy.org/en/20/orm/queryguide/
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DocumentDecodeError, ValidationError
from app.models.catalog import Category, Product, Subcategory, Tag

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = (
    "name",
    "description",
    "image",
    "image2",
    "image3",
    "price",
    "stock",
    "rating",
    "date",
    "category_id",
    "subcategory_id",
    "tag_ids",
    "product_details",
    "weight",
    "weight_unit",
)

UNCATEGORIZED = "Uncategorized"

_string_list = TypeAdapter(List[str])


def decode_tag_ids(product: Product) -> List[str]:
    """
    Validate the stored ``tag_ids`` of a product.

    Raises:
        DocumentDecodeError: If the stored value is not a list of strings
    """
    try:
        return _string_list.validate_python(product.tag_ids or [])
    except PydanticValidationError as e:
        logger.error(f"Product {product.id} has malformed tag_ids: {product.tag_ids!r}")
        raise DocumentDecodeError() from e


class ProductService:
    """Service for managing products"""

    async def get_product(self, db: AsyncSession, product_id: str) -> Optional[Product]:
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def get_products(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        category_id: Optional[str] = None,
        subcategory_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 1000,
    ) -> List[Product]:
        """
        Get products with optional filtering.

        Args:
            db: Database session
            search: Case-insensitive substring of the name or description
            category_id: Optional category filter
            subcategory_id: Optional subcategory filter
            skip: Number of products to skip (for pagination)
            limit: Maximum number of products to return
        """
        query = select(Product)

        if search:
            needle = search.lower()
            query = query.where(
                or_(
                    func.lower(Product.name).contains(needle),
                    func.lower(Product.description).contains(needle),
                )
            )
        if category_id:
            query = query.where(Product.category_id == category_id)
        if subcategory_id:
            query = query.where(Product.subcategory_id == subcategory_id)

        query = query.order_by(Product.date.desc()).offset(skip).limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def list_with_names(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        category_id: Optional[str] = None,
        subcategory_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 1000,
    ) -> List[Tuple[Product, Optional[str], Optional[str]]]:
        """
        Get products paired with their category and subcategory names.

        An unset reference reads as "Uncategorized"; a reference to a deleted
        entity reads as None.
        """
        products = await self.get_products(
            db,
            search=search,
            category_id=category_id,
            subcategory_id=subcategory_id,
            skip=skip,
            limit=limit,
        )

        category_rows = await db.execute(select(Category.id, Category.name))
        category_names = dict(category_rows.all())
        subcategory_rows = await db.execute(select(Subcategory.id, Subcategory.name))
        subcategory_names = dict(subcategory_rows.all())

        rows = []
        for product in products:
            category_name = (
                category_names.get(product.category_id) if product.category_id else UNCATEGORIZED
            )
            subcategory_name = (
                subcategory_names.get(product.subcategory_id)
                if product.subcategory_id
                else UNCATEGORIZED
            )
            rows.append((product, category_name, subcategory_name))
        return rows

    async def validate_references(
        self,
        db: AsyncSession,
        category_id: Optional[str],
        subcategory_id: Optional[str],
        tag_ids: Optional[List[str]],
    ) -> None:
        """
        Check that every id a product points at exists.

        Raises:
            ValidationError: On an unknown category, subcategory or tag, or a
                subcategory without a category or owned by a different one
        """
        if category_id and await db.get(Category, category_id) is None:
            raise ValidationError(f"Category {category_id} does not exist")

        if subcategory_id:
            if not category_id:
                raise ValidationError("A subcategory requires a category")
            subcategory = await db.get(Subcategory, subcategory_id)
            if subcategory is None:
                raise ValidationError(f"Subcategory {subcategory_id} does not exist")
            if subcategory.category_id != category_id:
                raise ValidationError(
                    f"Subcategory {subcategory_id} does not belong to category {category_id}"
                )

        if tag_ids:
            result = await db.execute(select(Tag.id).where(Tag.id.in_(tag_ids)))
            missing = set(tag_ids) - set(result.scalars().all())
            if missing:
                raise ValidationError(f"Unknown tags: {', '.join(sorted(missing))}")

    async def create_product(self, db: AsyncSession, data: Dict[str, Any]) -> Product:
        """
        Create a new product.

        Args:
            db: Database session
            data: Product fields; image fields hold already-uploaded URLs

        Returns:
            Created product
        """
        values = {field: data[field] for field in PRODUCT_FIELDS if field in data}
        product = Product(**values)
        db.add(product)
        await db.flush()
        logger.info(f"Created product '{product.name}' (ID: {product.id})")
        return product

    async def update_product(
        self, db: AsyncSession, product_id: str, data: Dict[str, Any]
    ) -> Optional[Product]:
        """
        Update a product.

        Only the fields present in ``data`` are overwritten (partial update).
        No version check is made: concurrent edits are last-write-wins.

        Returns:
            Updated product if found, None otherwise
        """
        product = await self.get_product(db, product_id)
        if not product:
            return None

        for field in PRODUCT_FIELDS:
            if field in data:
                setattr(product, field, data[field])
        product.updated_at = datetime.now(timezone.utc)

        await db.flush()
        logger.info(f"Updated product {product_id}")
        return product

    async def delete_product(self, db: AsyncSession, product_id: str) -> bool:
        """
        Delete a product. Its images stay in storage.

        Returns:
            True if deleted, False if not found
        """
        product = await self.get_product(db, product_id)
        if not product:
            return False

        await db.delete(product)
        await db.flush()
        logger.info(f"Deleted product {product_id}")
        return True
