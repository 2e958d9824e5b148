"""
Routes for catalog products.

Create and update accept the product form as multipart data so up to three
image files can travel with the fields.
"""

import logging
from datetime import datetime
from typing import Any, Collection, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.catalog import ProductFields, ProductFormOptions, ProductResponse
from app.core.database import get_db
from app.core.dependencies import get_product_form
from app.core.exceptions import NotFoundError, UpstreamFailure, ValidationError
from app.services.forms import ProductFormController
from app.services.product import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/products",
    tags=["products"],
)


def clean_list(values: Optional[List[str]]) -> Optional[List[str]]:
    """Drop blank entries from a repeated form field; None when not sent."""
    if values is None:
        return None
    return [value.strip() for value in values if value and value.strip()]


# Sent blank, these clear the reference instead of being ignored
CLEARABLE_FIELDS = ("category_id", "subcategory_id")


def product_fields(sent: Collection[str], **submitted: Any) -> ProductFields:
    """
    Build ProductFields from the parsed form values.

    FastAPI turns a blank form value into None, so ``sent`` (the raw form
    keys) tells a blank reference apart from one that was not submitted.
    Only submitted fields end up in ``model_fields_set``; an edit leaves
    every other field alone.
    """
    values: Dict[str, Any] = {}
    for field, value in submitted.items():
        if isinstance(value, list):
            values[field] = clean_list(value)
        elif value is not None:
            values[field] = value
        elif field in CLEARABLE_FIELDS and field in sent:
            values[field] = None
    return ProductFields(**values)


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="Get products",
    description="Get products with their category and subcategory names.",
    status_code=status.HTTP_200_OK,
)
async def get_products(
    q: Optional[str] = Query(None, description="Search name or description"),
    category_id: Optional[str] = Query(None, description="Filter by category"),
    subcategory_id: Optional[str] = Query(None, description="Filter by subcategory"),
    skip: int = Query(0, ge=0, description="Number of products to skip"),
    limit: int = Query(1000, ge=1, le=1000, description="Maximum number of products to return"),
    db: AsyncSession = Depends(get_db),
) -> List[ProductResponse]:
    product_service = ProductService()
    try:
        rows = await product_service.list_with_names(
            db,
            search=q,
            category_id=category_id,
            subcategory_id=subcategory_id,
            skip=skip,
            limit=limit,
        )
        logger.info(f"Retrieved {len(rows)} products")
        return [ProductResponse.from_model(*row) for row in rows]
    except Exception as e:
        logger.error(f"Unexpected error getting products: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving products",
        ) from e


@router.get(
    "/form-options",
    response_model=ProductFormOptions,
    summary="Get product form options",
    description="Categories and tags for the product form, plus the subcategories of one category.",
    status_code=status.HTTP_200_OK,
)
async def get_form_options(
    category_id: Optional[str] = Query(None, description="Category whose subcategories to include"),
    form: ProductFormController = Depends(get_product_form),
    db: AsyncSession = Depends(get_db),
) -> ProductFormOptions:
    try:
        options = await form.form_options(db, category_id=category_id)
        return ProductFormOptions.model_validate(options, from_attributes=True)
    except Exception as e:
        logger.error(f"Unexpected error loading form options: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while loading form options",
        ) from e


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product",
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Product not found"}},
)
async def get_product(
    product_id: str,
    form: ProductFormController = Depends(get_product_form),
    db: AsyncSession = Depends(get_db),
) -> ProductResponse:
    try:
        product = await form.load(db, product_id)
        return ProductResponse.from_model(product)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error getting product {product_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving the product",
        ) from e


@router.post(
    "",
    response_model=ProductResponse,
    summary="Create product",
    description="Create a product from the product form, uploading up to three images.",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Product created successfully"},
        400: {"description": "Missing fields or unknown references"},
        502: {"description": "Image upload failed; no product was written"},
    },
)
async def create_product(
    request: Request,
    name: Optional[str] = Form(None, max_length=200),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None, ge=0),
    stock: Optional[int] = Form(None, ge=0),
    rating: Optional[float] = Form(None, ge=0, le=5),
    date: Optional[datetime] = Form(None),
    category_id: Optional[str] = Form(None),
    subcategory_id: Optional[str] = Form(None),
    tag_ids: Optional[List[str]] = Form(None, description="Repeat the field once per tag"),
    product_details: Optional[List[str]] = Form(None, description="Repeat the field once per line"),
    weight: Optional[float] = Form(None, ge=0),
    weight_unit: Optional[str] = Form(None, max_length=10),
    image_file: Optional[UploadFile] = File(None),
    image2_file: Optional[UploadFile] = File(None),
    image3_file: Optional[UploadFile] = File(None),
    form: ProductFormController = Depends(get_product_form),
    db: AsyncSession = Depends(get_db),
) -> ProductResponse:
    """
    Create a new product.

    **Required:** name, price and stock.

    **Images:**
    - The three image slots are uploaded concurrently
    - If any slot fails the product is not created; images that did
      upload stay in storage unreferenced
    """
    fields = product_fields(
        (await request.form()).keys(),
        name=name,
        description=description,
        price=price,
        stock=stock,
        rating=rating,
        date=date,
        category_id=category_id,
        subcategory_id=subcategory_id,
        tag_ids=tag_ids,
        product_details=product_details,
        weight=weight,
        weight_unit=weight_unit,
    )
    try:
        product = await form.save(db, fields, [image_file, image2_file, image3_file])
        return ProductResponse.from_model(product)
    except ValidationError as e:
        logger.warning(f"Product creation failed: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except UpstreamFailure as e:
        logger.error(f"Product creation aborted: {type(e).__name__}: {e.__cause__!r}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error creating product: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating the product",
        ) from e


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update product",
    description="Update a product from the product form. Only submitted fields and image slots change.",
    status_code=status.HTTP_200_OK,
    responses={
        400: {"description": "Unknown references"},
        404: {"description": "Product not found"},
        502: {"description": "Image upload failed; the product was not changed"},
    },
)
async def update_product(
    product_id: str,
    request: Request,
    name: Optional[str] = Form(None, max_length=200),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None, ge=0),
    stock: Optional[int] = Form(None, ge=0),
    rating: Optional[float] = Form(None, ge=0, le=5),
    date: Optional[datetime] = Form(None),
    category_id: Optional[str] = Form(None),
    subcategory_id: Optional[str] = Form(None),
    tag_ids: Optional[List[str]] = Form(None),
    product_details: Optional[List[str]] = Form(None),
    weight: Optional[float] = Form(None, ge=0),
    weight_unit: Optional[str] = Form(None, max_length=10),
    image_file: Optional[UploadFile] = File(None),
    image2_file: Optional[UploadFile] = File(None),
    image3_file: Optional[UploadFile] = File(None),
    form: ProductFormController = Depends(get_product_form),
    db: AsyncSession = Depends(get_db),
) -> ProductResponse:
    """
    Update a product.

    **Partial Updates:**
    - Omitted fields remain unchanged
    - Moving the product to another category clears its subcategory
      unless a new one is sent
    - A blank category_id or subcategory_id clears that reference
    - An image slot changes only when a new file is sent for it
    """
    fields = product_fields(
        (await request.form()).keys(),
        name=name,
        description=description,
        price=price,
        stock=stock,
        rating=rating,
        date=date,
        category_id=category_id,
        subcategory_id=subcategory_id,
        tag_ids=tag_ids,
        product_details=product_details,
        weight=weight,
        weight_unit=weight_unit,
    )
    try:
        product = await form.save(
            db, fields, [image_file, image2_file, image3_file], product_id=product_id
        )
        return ProductResponse.from_model(product)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except UpstreamFailure as e:
        logger.error(f"Product {product_id} update aborted: {type(e).__name__}: {e.__cause__!r}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(
            f"Unexpected error updating product {product_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the product",
        ) from e


@router.delete(
    "/{product_id}",
    summary="Delete product",
    description="Delete a product. Its images stay in storage.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Product not found"}},
)
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    product_service = ProductService()
    try:
        deleted = await product_service.delete_product(db, product_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        return None
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error deleting product {product_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while deleting the product",
        ) from e
