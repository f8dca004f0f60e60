# =============================================================================
# core/services/dashboard_service.py - Dashboard Statistics
# =============================================================================
# Every figure is a count-only query (count="exact", head=True), so totals
# stay correct past PostgREST's max-rows limit. Member and worship counts
# are scoped to the user through an inner join on households.
# =============================================================================

import logging
from datetime import date
from typing import Any
from uuid import UUID

from app.exceptions import BackendOperationError
from core.services.ownership import HOUSEHOLDS_TABLE
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, today_iso

logger = logging.getLogger(__name__)

OWNED_VIA_HOUSEHOLD = f"id, {HOUSEHOLDS_TABLE}!inner(created_by)"


class DashboardService:
    """Aggregate counts for the dashboard landing page."""

    @staticmethod
    def _count(query) -> int:
        return query.execute().count or 0

    @staticmethod
    def get_stats(user_id: UUID | str, today: date | None = None) -> dict[str, Any]:
        """
        Count the user's households, members and upcoming worship events.

        Returns:
            Dict with total_households, total_members, living_members,
            deceased_members and upcoming_worship
        """
        client = SupabaseClient.get_client()
        owner = normalize_uuid(user_id)

        def owned(table: str):
            return (
                client.table(table)
                .select(OWNED_VIA_HOUSEHOLD, count="exact", head=True)
                .eq(f"{HOUSEHOLDS_TABLE}.created_by", owner)
            )

        try:
            total_households = DashboardService._count(
                client.table(HOUSEHOLDS_TABLE)
                .select("id", count="exact", head=True)
                .eq("created_by", owner)
            )

            total_members = deceased = upcoming = 0
            if total_households:
                total_members = DashboardService._count(owned("family_members"))
                deceased = DashboardService._count(
                    owned("family_members").eq("is_alive", False)
                )
                upcoming = DashboardService._count(
                    owned("worship_history").gte("worship_date", today_iso(today))
                )

        except Exception as e:
            logger.error(f"Failed to load dashboard stats: {e}")
            raise BackendOperationError("Không thể tải thống kê", e) from e

        return {
            "total_households": total_households,
            "total_members": total_members,
            "living_members": total_members - deceased,
            "deceased_members": deceased,
            "upcoming_worship": upcoming,
        }
