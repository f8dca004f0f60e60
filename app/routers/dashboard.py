# =============================================================================
# app/routers/dashboard.py - Dashboard Endpoints
# =============================================================================

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.auth import AuthUser, get_current_user
from core.services.dashboard_service import DashboardService

router = APIRouter()


class DashboardStats(BaseModel):
    total_households: int
    total_members: int
    living_members: int
    deceased_members: int
    upcoming_worship: int


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(user: AuthUser = Depends(get_current_user)):
    """Household, member and upcoming worship counts for the current user."""
    return DashboardService.get_stats(user.id)
