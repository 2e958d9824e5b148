"""
Form controllers for the category and product editors.

A save runs in a fixed order: load the existing document (on edit),
validate references, upload any new images, then write the document.
Nothing is written when an upload fails. Images that were uploaded before
the failure stay in storage.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.catalog import ProductFields
from app.core.exceptions import NotFoundError, UploadFailure, ValidationError
from app.models.catalog import Category, Product
from app.services.category import CategoryService
from app.services.product import ProductService
from app.services.subcategory import SubcategoryService
from app.services.tag import TagService
from app.services.upload_client import UploadClient

logger = logging.getLogger(__name__)

PRODUCT_IMAGE_FIELDS = ("image", "image2", "image3")


def is_provided(file: Optional[UploadFile]) -> bool:
    """Browsers send an empty part for an untouched file input."""
    return file is not None and bool(file.filename)


class CategoryFormController:
    """Load and save categories, uploading thumbnail and hero images"""

    def __init__(self, upload_client: UploadClient, category_service: Optional[CategoryService] = None):
        self.upload_client = upload_client
        self.category_service = category_service or CategoryService()

    async def load(self, db: AsyncSession, category_id: str) -> Category:
        """
        Raises:
            NotFoundError: If the category does not exist
        """
        category = await self.category_service.get_category(db, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    async def save(
        self,
        db: AsyncSession,
        fields: Dict[str, Any],
        image_file: Optional[UploadFile] = None,
        hero_image_file: Optional[UploadFile] = None,
        category_id: Optional[str] = None,
    ) -> Category:
        """
        Create a category, or update ``category_id`` when given.

        Args:
            db: Database session
            fields: Submitted text fields; on edit only these are overwritten
            image_file: New thumbnail image, if one was chosen
            hero_image_file: New hero image, if one was chosen
            category_id: ID of the category being edited

        Raises:
            NotFoundError: If ``category_id`` does not exist
            ValidationError: If a new category has no name
            UploadFailure: If an image upload fails (nothing is written)
        """
        if category_id:
            await self.load(db, category_id)
        elif not fields.get("name"):
            raise ValidationError("Name is required")

        values = dict(fields)
        if is_provided(image_file):
            values["image"] = await self.upload_client.upload(image_file)
        if is_provided(hero_image_file):
            values["hero_image"] = await self.upload_client.upload(hero_image_file)

        if category_id:
            return await self.category_service.update_category(db, category_id, values)
        return await self.category_service.create_category(db, values)


class ProductFormController:
    """Load and save products, uploading up to three images concurrently"""

    def __init__(
        self,
        upload_client: UploadClient,
        product_service: Optional[ProductService] = None,
    ):
        self.upload_client = upload_client
        self.product_service = product_service or ProductService()

    async def load(self, db: AsyncSession, product_id: str) -> Product:
        """
        Raises:
            NotFoundError: If the product does not exist
        """
        product = await self.product_service.get_product(db, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    async def form_options(
        self, db: AsyncSession, category_id: Optional[str] = None
    ) -> Dict[str, List]:
        """
        Lookup lists for the product form.

        Categories and tags are always returned; subcategories only for
        ``category_id``. A failure of any lookup fails the whole call.
        """
        categories = await CategoryService().get_categories(db)
        tags = await TagService.get_tags(db)
        subcategories = []
        if category_id:
            subcategories = await SubcategoryService().get_subcategories(db, category_id=category_id)
        return {
            "categories": categories,
            "tags": tags,
            "subcategories": subcategories,
        }

    async def upload_images(
        self, image_files: Sequence[Optional[UploadFile]]
    ) -> Dict[str, str]:
        """
        Upload the provided image slots concurrently.

        Waits for every upload to finish before reporting, so a failed slot
        never leaves another upload running in the background.

        Returns:
            Mapping of image field name to uploaded URL, provided slots only

        Raises:
            UploadFailure: If any slot failed
        """
        slots = [
            (PRODUCT_IMAGE_FIELDS[index], file)
            for index, file in enumerate(image_files[: len(PRODUCT_IMAGE_FIELDS)])
            if is_provided(file)
        ]
        if not slots:
            return {}

        results = await asyncio.gather(
            *(self.upload_client.upload(file) for _, file in slots),
            return_exceptions=True,
        )

        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            logger.error(
                f"{len(failures)} of {len(slots)} product image uploads failed; "
                f"{len(slots) - len(failures)} uploaded objects are left unreferenced"
            )
            first = failures[0]
            if isinstance(first, UploadFailure):
                raise first
            raise UploadFailure() from first

        return {field: url for (field, _), url in zip(slots, results)}

    async def save(
        self,
        db: AsyncSession,
        fields: ProductFields,
        image_files: Sequence[Optional[UploadFile]] = (),
        product_id: Optional[str] = None,
    ) -> Product:
        """
        Create a product, or update ``product_id`` when given.

        Args:
            db: Database session
            fields: Submitted fields; on edit only the set ones are overwritten,
                and a category or subcategory set to None is cleared
            image_files: Up to three files for the image slots, None for
                slots that keep their current image
            product_id: ID of the product being edited

        Raises:
            NotFoundError: If ``product_id`` does not exist
            ValidationError: If required fields are missing or a referenced
                category, subcategory or tag does not exist
            UploadFailure: If any image upload fails (nothing is written)
        """
        values = fields.model_dump(exclude_unset=True)

        existing = None
        if product_id:
            existing = await self.load(db, product_id)
        else:
            missing = [
                name for name in ("name", "price", "stock") if values.get(name) is None
            ]
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        category_id = values.get("category_id", existing.category_id if existing else None)
        subcategory_id = values.get(
            "subcategory_id", existing.subcategory_id if existing else None
        )
        # Changing the category drops a subcategory that belongs to the old one
        if existing and "category_id" in values and "subcategory_id" not in values:
            if category_id != existing.category_id:
                values["subcategory_id"] = None
                subcategory_id = None

        await self.product_service.validate_references(
            db, category_id, subcategory_id, values.get("tag_ids")
        )

        values.update(await self.upload_images(image_files))

        if product_id:
            return await self.product_service.update_product(db, product_id, values)
        return await self.product_service.create_product(db, values)
