"""
Tag service.

Products carry their tags as a list of ids, so counts are tallied by scanning
products and a deleted tag is removed from every product that lists it.
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.catalog import TagCreate, TagUpdate
from app.models.catalog import Product, Tag
from app.services.product import decode_tag_ids

logger = logging.getLogger(__name__)


class TagService:
    """Service for managing tags"""

    @staticmethod
    async def get_tag(db: AsyncSession, tag_id: str) -> Optional[Tag]:
        result = await db.execute(select(Tag).where(Tag.id == tag_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_tags(db: AsyncSession, search: Optional[str] = None) -> List[Tag]:
        query = select(Tag)
        if search:
            query = query.where(func.lower(Tag.name).contains(search.lower()))
        result = await db.execute(query.order_by(Tag.name))
        return list(result.scalars().all())

    @staticmethod
    async def product_counts(db: AsyncSession) -> Dict[str, int]:
        """
        Number of products per tag id.

        A product with several tags counts once for each of them.
        """
        result = await db.execute(select(Product))
        counts: Counter[str] = Counter()
        for product in result.scalars().all():
            counts.update(decode_tag_ids(product))
        return dict(counts)

    @staticmethod
    async def list_with_product_counts(
        db: AsyncSession, search: Optional[str] = None
    ) -> List[Tuple[Tag, int]]:
        tags = await TagService.get_tags(db, search=search)
        counts = await TagService.product_counts(db)
        return [(tag, counts.get(tag.id, 0)) for tag in tags]

    @staticmethod
    async def get_with_product_count(
        db: AsyncSession, tag_id: str
    ) -> Optional[Tuple[Tag, int]]:
        tag = await TagService.get_tag(db, tag_id)
        if not tag:
            return None
        counts = await TagService.product_counts(db)
        return tag, counts.get(tag_id, 0)

    @staticmethod
    async def create_tag(db: AsyncSession, data: TagCreate) -> Tag:
        tag = Tag(name=data.name)
        db.add(tag)
        await db.flush()
        logger.info(f"Created tag '{tag.name}' (ID: {tag.id})")
        return tag

    @staticmethod
    async def update_tag(db: AsyncSession, tag_id: str, data: TagUpdate) -> Optional[Tag]:
        tag = await TagService.get_tag(db, tag_id)
        if not tag:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(tag, field, value)
        tag.updated_at = datetime.now(timezone.utc)

        await db.flush()
        logger.info(f"Updated tag {tag_id}")
        return tag

    @staticmethod
    async def delete_tag(db: AsyncSession, tag_id: str) -> bool:
        """
        Delete a tag and remove its id from every product's ``tag_ids``.

        Returns:
            True if deleted, False if not found
        """
        tag = await TagService.get_tag(db, tag_id)
        if not tag:
            return False

        result = await db.execute(select(Product))
        updated = 0
        for product in result.scalars().all():
            tag_ids = decode_tag_ids(product)
            if tag_id in tag_ids:
                # Assign a new list so the JSON column is marked dirty
                product.tag_ids = [other for other in tag_ids if other != tag_id]
                updated += 1

        await db.delete(tag)
        await db.flush()
        logger.info(f"Deleted tag {tag_id}; removed it from {updated} products")
        return True
