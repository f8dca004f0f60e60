# =============================================================================
# core/services/worship_service.py - Worship History Business Logic
# =============================================================================
# Logs and schedules ancestor-worship events for a household.
# An event may name one family member of the same household, or none for a
# shared ceremony.
# =============================================================================

import logging
from datetime import date
from typing import Any
from uuid import UUID

from app.exceptions import (
    BackendOperationError,
    InvalidWorshipMemberError,
    WorshipEventNotFoundError,
)
from core.models.worship import WorshipEventCreate, WorshipEventUpdate
from core.services.ownership import require_household
from core.services.presenters import present_worship
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, today_iso

logger = logging.getLogger(__name__)

WORSHIP_TABLE = "worship_history"
MEMBERS_TABLE = "family_members"

# Embed the honoured member's name
WORSHIP_COLUMNS = "*, family_member:family_members(full_name)"


class WorshipService:
    """Service for worship_history operations."""

    @staticmethod
    def _check_member(household_id: str, member_id: str | UUID | None) -> None:
        """The referenced member, if any, must belong to this household."""
        if member_id is None:
            return
        member = SupabaseClient.fetch_single(
            MEMBERS_TABLE, member_id, columns="id, household_id"
        )
        if not member or str(member.get("household_id")) != household_id:
            raise InvalidWorshipMemberError(household_id, str(member_id))

    @staticmethod
    def _get_event(event_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """Event row whose household is owned by user_id."""
        event = SupabaseClient.fetch_single(WORSHIP_TABLE, event_id)
        if not event:
            raise WorshipEventNotFoundError(str(event_id))
        require_household(event["household_id"], user_id, columns="id")
        return event

    @staticmethod
    def create_event(
        household_id: str | UUID,
        data: WorshipEventCreate,
        user_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Log or schedule a worship event.

        Raises:
            HouseholdNotFoundError: If the household isn't the user's
            InvalidWorshipMemberError: If the member is from another household
            BackendOperationError: If the insert fails
        """
        household_id = normalize_uuid(household_id)
        require_household(household_id, user_id, columns="id")
        WorshipService._check_member(household_id, data.family_member_id)

        payload = data.model_dump(mode="json", exclude_none=True)
        payload["household_id"] = household_id

        client = SupabaseClient.get_client()
        try:
            response = client.table(WORSHIP_TABLE).insert(payload).execute()
        except Exception as e:
            logger.error(f"Failed to create worship event: {e}")
            raise BackendOperationError("Không thể thêm lịch cúng", e) from e

        if not response.data:
            raise BackendOperationError("Không thể thêm lịch cúng", "Insert returned no data")

        event = response.data[0]
        logger.info(f"Created worship event {event['id']} for household {household_id}")
        return present_worship(event)

    @staticmethod
    def update_event(
        event_id: str | UUID,
        data: WorshipEventUpdate,
        user_id: UUID | str,
    ) -> dict[str, Any]:
        """Update date, type, member or notes of an event."""
        event = WorshipService._get_event(event_id, user_id)
        update_data = data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            return present_worship(event)

        if update_data.get("family_member_id"):
            WorshipService._check_member(
                str(event["household_id"]), update_data["family_member_id"]
            )

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(WORSHIP_TABLE)
                .update(update_data)
                .eq("id", normalize_uuid(event_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update worship event: {e}")
            raise BackendOperationError("Không thể cập nhật lịch cúng", e) from e

        logger.info(f"Updated worship event {event_id}")
        return present_worship(response.data[0] if response.data else {**event, **update_data})

    @staticmethod
    def delete_event(event_id: str | UUID, user_id: UUID | str) -> None:
        WorshipService._get_event(event_id, user_id)

        client = SupabaseClient.get_client()
        try:
            client.table(WORSHIP_TABLE).delete().eq("id", normalize_uuid(event_id)).execute()
        except Exception as e:
            logger.error(f"Failed to delete worship event: {e}")
            raise BackendOperationError("Không thể xóa lịch cúng", e) from e

        logger.info(f"Deleted worship event {event_id}")

    @staticmethod
    def list_events(household_id: str | UUID, user_id: UUID | str) -> list[dict[str, Any]]:
        """All events of a household, newest worship_date first."""
        household_id = normalize_uuid(household_id)
        require_household(household_id, user_id, columns="id")

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(WORSHIP_TABLE)
                .select(WORSHIP_COLUMNS)
                .eq("household_id", household_id)
                .order("worship_date", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list worship events: {e}")
            raise BackendOperationError("Không thể tải lịch cúng", e) from e

        return [present_worship(row) for row in response.data or []]

    # -------------------------------------------------------------------------
    # Previews (household detail page)
    # -------------------------------------------------------------------------
    # These assume ownership was already checked by the caller.

    @staticmethod
    def recent_events(household_id: str | UUID, limit: int = 5) -> list[dict[str, Any]]:
        """Latest events by worship_date, past or future."""
        client = SupabaseClient.get_client()
        response = (
            client.table(WORSHIP_TABLE)
            .select(WORSHIP_COLUMNS)
            .eq("household_id", normalize_uuid(household_id))
            .order("worship_date", desc=True)
            .limit(limit)
            .execute()
        )
        return [present_worship(row) for row in response.data or []]

    @staticmethod
    def upcoming_events(
        household_id: str | UUID,
        limit: int = 5,
        today: date | None = None,
    ) -> list[dict[str, Any]]:
        """Events on or after today, soonest first."""
        client = SupabaseClient.get_client()
        response = (
            client.table(WORSHIP_TABLE)
            .select(WORSHIP_COLUMNS)
            .eq("household_id", normalize_uuid(household_id))
            .gte("worship_date", today_iso(today))
            .order("worship_date")
            .limit(limit)
            .execute()
        )
        return [present_worship(row) for row in response.data or []]
