"""
Category service: category documents, product counts and the deletion guard.

Reference: https://docs.sqlalchemy.org/en/20/orm/queryguide/
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.models.catalog import Category, Product, Subcategory

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ("name", "description", "image", "hero_image")


class CategoryService:
    """Service for managing categories"""

    async def get_category(
        self, db: AsyncSession, category_id: str
    ) -> Optional[Category]:
        """
        Get a category by ID.

        Args:
            db: Database session
            category_id: Category ID

        Returns:
            Category if found, None otherwise
        """
        result = await db.execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def get_categories(
        self, db: AsyncSession, search: Optional[str] = None
    ) -> List[Category]:
        """
        Get all categories, optionally filtered by a case-insensitive name match.
        """
        query = select(Category)
        if search:
            query = query.where(func.lower(Category.name).contains(search.lower()))
        query = query.order_by(Category.name)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_products(self, db: AsyncSession, category_id: str) -> int:
        """Live number of products whose category_id is ``category_id``."""
        result = await db.execute(
            select(func.count()).select_from(Product).where(Product.category_id == category_id)
        )
        return result.scalar_one()

    async def product_counts(self, db: AsyncSession) -> Dict[str, int]:
        """Number of products per category id, over the whole products table."""
        result = await db.execute(
            select(Product.category_id, func.count())
            .where(Product.category_id.is_not(None))
            .group_by(Product.category_id)
        )
        return {category_id: count for category_id, count in result.all()}

    async def list_with_product_counts(
        self, db: AsyncSession, search: Optional[str] = None
    ) -> List[Tuple[Category, int]]:
        """
        Get categories paired with their product counts.

        Counts are recomputed on every call.
        """
        categories = await self.get_categories(db, search=search)
        counts = await self.product_counts(db)
        return [(category, counts.get(category.id, 0)) for category in categories]

    async def get_with_product_count(
        self, db: AsyncSession, category_id: str
    ) -> Optional[Tuple[Category, int]]:
        category = await self.get_category(db, category_id)
        if not category:
            return None
        return category, await self.count_products(db, category_id)

    async def create_category(
        self, db: AsyncSession, data: Dict[str, Any]
    ) -> Category:
        """
        Create a new category.

        Args:
            db: Database session
            data: Category fields (name, description, image, hero_image)

        Returns:
            Created category
        """
        values = {field: data[field] for field in CATEGORY_FIELDS if field in data}
        category = Category(**values)
        db.add(category)
        await db.flush()
        logger.info(f"Created category '{category.name}' (ID: {category.id})")
        return category

    async def update_category(
        self, db: AsyncSession, category_id: str, data: Dict[str, Any]
    ) -> Optional[Category]:
        """
        Update a category.

        Only the fields present in ``data`` are overwritten (partial update).

        Returns:
            Updated category if found, None otherwise
        """
        category = await self.get_category(db, category_id)
        if not category:
            return None

        for field in CATEGORY_FIELDS:
            if field in data:
                setattr(category, field, data[field])
        category.updated_at = datetime.now(timezone.utc)

        await db.flush()
        logger.info(f"Updated category {category_id}")
        return category

    async def delete_category(self, db: AsyncSession, category_id: str) -> bool:
        """
        Delete a category and its subcategories.

        The product count is recomputed here rather than taken from a list
        view, so a product added since the list was loaded still blocks the
        delete.

        Returns:
            True if deleted, False if not found

        Raises:
            ConflictError: If any product still references the category
        """
        category = await self.get_category(db, category_id)
        if not category:
            return False

        product_count = await self.count_products(db, category_id)
        if product_count > 0:
            logger.warning(
                f"Refused to delete category {category_id}: {product_count} products reference it"
            )
            raise ConflictError(
                f"Cannot delete category: it has {product_count} products."
            )

        owned = select(Subcategory.id).where(Subcategory.category_id == category_id)
        cleared = await db.execute(
            update(Product)
            .where(Product.subcategory_id.in_(owned))
            .values(subcategory_id=None)
        )
        result = await db.execute(
            delete(Subcategory).where(Subcategory.category_id == category_id)
        )
        await db.delete(category)
        await db.flush()
        logger.info(
            f"Deleted category {category_id} and {result.rowcount} subcategories; "
            f"cleared subcategory on {cleared.rowcount} products"
        )
        return True
