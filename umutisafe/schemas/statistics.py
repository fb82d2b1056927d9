"""Statistics schemas for the admin dashboard."""

from typing import Dict, List

from pydantic import BaseModel, Field


class MonthlyTrendItem(BaseModel):
    month: str = Field(..., description="Short month name, e.g. 'Jan'")
    year: int
    count: int


class TopMedicineItem(BaseModel):
    name: str
    count: int


class SystemStatisticsResponse(BaseModel):
    """Response schema for system-wide statistics."""

    # Accounts
    total_users: int = Field(..., description="Active accounts with role 'user'")
    total_chws: int = Field(..., description="Active accounts with role 'chw'")
    users_by_role: Dict[str, int] = Field(..., description="All accounts grouped by role")
    pending_approvals: int = Field(..., description="Active accounts waiting for approval")

    # Disposals
    total_disposals: int
    completed_this_month: int = Field(..., description="Disposals completed since the first day of this month")
    high_risk_collected: int = Field(..., description="Completed disposals with risk level HIGH")
    risk_distribution: Dict[str, int]
    disposal_status_distribution: Dict[str, int]

    # Pickups
    pending_pickups: int
    pickup_status_distribution: Dict[str, int]

    # Trends
    monthly_trend: List[MonthlyTrendItem]
    top_medicines: List[TopMedicineItem]
