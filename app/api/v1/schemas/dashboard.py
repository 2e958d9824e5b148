"""
Schemas for the dashboard overview.
"""
from typing import List

from pydantic import BaseModel, Field

from app.api.v1.schemas.order import OrderSummary


class DashboardStatsResponse(BaseModel):
    """Store-wide counters for the dashboard."""

    products: int = Field(..., ge=0, description="Items in the catalog")
    orders: int = Field(..., ge=0, description="Orders placed")
    customers: int = Field(..., ge=0, description="Registered customers")
    revenue: float = Field(..., description="Sum of paid order totals")


class RecentOrdersResponse(BaseModel):
    """Most recent orders, newest first."""

    orders: List[OrderSummary] = Field(default_factory=list)
