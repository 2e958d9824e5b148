"""
Dashboard routes
Store-wide counters for the admin landing page
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.dashboard import DashboardStatsResponse
from app.core.database import get_db
from app.services.dashboard import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    summary="Get dashboard statistics",
    description="Counts of products, orders and customers, plus revenue from paid orders.",
    status_code=status.HTTP_200_OK,
)
async def get_stats(db: AsyncSession = Depends(get_db)) -> DashboardStatsResponse:
    try:
        stats = await DashboardService.get_stats(db)
        return DashboardStatsResponse(**stats)
    except Exception as e:
        logger.error(f"Unexpected error computing dashboard stats: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while computing dashboard statistics",
        ) from e
