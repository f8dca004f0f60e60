# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .household_service import HouseholdService
from .member_service import MemberService
from .worship_service import WorshipService
from .dashboard_service import DashboardService

__all__ = [
    "HouseholdService",
    "MemberService",
    "WorshipService",
    "DashboardService",
]
