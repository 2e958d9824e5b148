"""
Subcategory service.

Parent category names are resolved on every read, so renaming a category
is reflected immediately in subcategory listings.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.catalog import SubcategoryCreate, SubcategoryUpdate
from app.core.exceptions import ValidationError
from app.models.catalog import Category, Product, Subcategory

logger = logging.getLogger(__name__)


class SubcategoryService:
    """Service for managing subcategories"""

    async def get_subcategory(
        self, db: AsyncSession, subcategory_id: str
    ) -> Optional[Subcategory]:
        result = await db.execute(
            select(Subcategory).where(Subcategory.id == subcategory_id)
        )
        return result.scalar_one_or_none()

    async def get_subcategories(
        self,
        db: AsyncSession,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Subcategory]:
        """
        Get subcategories with optional filtering.

        Args:
            db: Database session
            category_id: Only subcategories of this category
            search: Case-insensitive substring of the name
        """
        query = select(Subcategory)
        if category_id:
            query = query.where(Subcategory.category_id == category_id)
        if search:
            query = query.where(func.lower(Subcategory.name).contains(search.lower()))
        query = query.order_by(Subcategory.name)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def category_names(self, db: AsyncSession) -> dict[str, str]:
        """Map of category id to current category name."""
        result = await db.execute(select(Category.id, Category.name))
        return {category_id: name for category_id, name in result.all()}

    async def list_with_parent_names(
        self,
        db: AsyncSession,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Tuple[Subcategory, str]]:
        """
        Get subcategories paired with their parent category's name.

        The name is "" when the parent category no longer exists.
        """
        subcategories = await self.get_subcategories(db, category_id=category_id, search=search)
        names = await self.category_names(db)
        return [(sub, names.get(sub.category_id, "")) for sub in subcategories]

    async def get_with_parent_name(
        self, db: AsyncSession, subcategory_id: str
    ) -> Optional[Tuple[Subcategory, str]]:
        subcategory = await self.get_subcategory(db, subcategory_id)
        if not subcategory:
            return None
        parent = await db.get(Category, subcategory.category_id)
        return subcategory, parent.name if parent else ""

    async def _require_category(self, db: AsyncSession, category_id: str) -> None:
        if await db.get(Category, category_id) is None:
            raise ValidationError(f"Category {category_id} does not exist")

    async def create_subcategory(
        self, db: AsyncSession, data: SubcategoryCreate
    ) -> Subcategory:
        """
        Create a new subcategory.

        Raises:
            ValidationError: If the owning category does not exist
        """
        await self._require_category(db, data.category_id)

        subcategory = Subcategory(name=data.name, category_id=data.category_id)
        db.add(subcategory)
        await db.flush()
        logger.info(
            f"Created subcategory '{subcategory.name}' (ID: {subcategory.id}) "
            f"under category {subcategory.category_id}"
        )
        return subcategory

    async def update_subcategory(
        self, db: AsyncSession, subcategory_id: str, data: SubcategoryUpdate
    ) -> Optional[Subcategory]:
        """
        Update a subcategory (partial update).

        Raises:
            ValidationError: If a new owning category does not exist
        """
        subcategory = await self.get_subcategory(db, subcategory_id)
        if not subcategory:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        moved = (
            "category_id" in update_data
            and update_data["category_id"] != subcategory.category_id
        )
        if moved:
            await self._require_category(db, update_data["category_id"])
            # Products keep their category, so the subcategory no longer fits them
            result = await db.execute(
                update(Product)
                .where(Product.subcategory_id == subcategory_id)
                .values(subcategory_id=None)
            )
            logger.info(
                f"Subcategory {subcategory_id} moved to category {update_data['category_id']}; "
                f"cleared it from {result.rowcount} products"
            )

        for field, value in update_data.items():
            setattr(subcategory, field, value)
        subcategory.updated_at = datetime.now(timezone.utc)

        await db.flush()
        logger.info(f"Updated subcategory {subcategory_id}")
        return subcategory

    async def delete_subcategory(self, db: AsyncSession, subcategory_id: str) -> bool:
        """
        Delete a subcategory and clear it from the products that use it.

        Returns:
            True if deleted, False if not found
        """
        subcategory = await self.get_subcategory(db, subcategory_id)
        if not subcategory:
            return False

        result = await db.execute(
            update(Product)
            .where(Product.subcategory_id == subcategory_id)
            .values(subcategory_id=None)
        )
        await db.delete(subcategory)
        await db.flush()
        logger.info(
            f"Deleted subcategory {subcategory_id}; cleared it from {result.rowcount} products"
        )
        return True
