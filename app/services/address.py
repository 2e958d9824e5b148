"""
Address service
Business logic for shipping addresses
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.customer import AddressCreate, AddressUpdate
from app.models.customer import Address

logger = logging.getLogger(__name__)


class AddressService:
    """
    Service class for address operations
    """

    @staticmethod
    async def get_address(db: AsyncSession, address_id: str) -> Optional[Address]:
        result = await db.execute(select(Address).where(Address.id == address_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_addresses(
        db: AsyncSession,
        user_id: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 1000,
    ) -> List[Address]:
        """
        Retrieve addresses ordered by owning user

        Args:
            db: Database session
            user_id: Optional owner filter
            search: Case-insensitive substring of street, city or country
            skip: Number of records to skip
            limit: Maximum number of records to return
        """
        query = select(Address)
        if user_id:
            query = query.where(Address.user_id == user_id)
        if search:
            needle = search.lower()
            query = query.where(
                or_(
                    func.lower(Address.street).contains(needle),
                    func.lower(Address.city).contains(needle),
                    func.lower(Address.country).contains(needle),
                )
            )
        query = query.order_by(Address.user_id, Address.created_at).offset(skip).limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def create_address(db: AsyncSession, data: AddressCreate) -> Address:
        address = Address(**data.model_dump())
        db.add(address)
        # Flush to get the generated id; commit is handled by get_db()
        await db.flush()
        logger.info(f"Created address {address.id} for user {address.user_id}")
        return address

    @staticmethod
    async def update_address(
        db: AsyncSession, address_id: str, data: AddressUpdate
    ) -> Optional[Address]:
        address = await AddressService.get_address(db, address_id)
        if not address:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(address, field, value)
        address.updated_at = datetime.now(timezone.utc)

        await db.flush()
        logger.info(f"Updated address {address_id}")
        return address

    @staticmethod
    async def delete_address(db: AsyncSession, address_id: str) -> bool:
        """
        Delete an address

        Orders that shipped to it keep their shipping_address_id; the order
        view shows no address for them afterwards.
        """
        address = await AddressService.get_address(db, address_id)
        if not address:
            return False

        await db.delete(address)
        await db.flush()
        logger.info(f"Deleted address {address_id}")
        return True
