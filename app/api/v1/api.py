"""
API v1 router aggregation
Combines all v1 route handlers into a single router
Reference: https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
from fastapi import APIRouter

from app.api.v1.routes import (
    addresses,
    categories,
    customers,
    dashboard,
    health,
    orders,
    products,
    subcategories,
    tags,
    upload,
)
from app.core.config import settings


# Create main API router for v1
# All v1 routes will be prefixed with /api/v1
api_router = APIRouter(prefix=settings.API_V1_PREFIX)

# Include route modules
# Each route module is added as a sub-router
api_router.include_router(upload.router)
api_router.include_router(categories.router)
api_router.include_router(subcategories.router)
api_router.include_router(tags.router)
api_router.include_router(products.router)
api_router.include_router(customers.router)
api_router.include_router(addresses.router)
api_router.include_router(orders.router)
api_router.include_router(dashboard.router)
api_router.include_router(health.router)
