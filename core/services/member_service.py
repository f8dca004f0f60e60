# =============================================================================
# core/services/member_service.py - Family Member Business Logic
# =============================================================================
# Handles family member CRUD and the cross-household member search.
# A household has at most one head: marking a member as head clears the flag
# on the others and points households.head_of_household_id at it.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import (
    BackendOperationError,
    FamilyMemberNotFoundError,
    HeadOfHouseholdDeletionError,
    error_text,
)
from core.models.family_member import FamilyMemberCreate, FamilyMemberUpdate
from core.services.ownership import HOUSEHOLDS_TABLE, fetch_owned_household, require_household
from core.services.presenters import present_member, present_search_result
from lib.filters import MemberFilters, filter_members, order_members
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

MEMBERS_TABLE = "family_members"

# Raised by the database trigger guarding the head row
HEAD_DELETE_TRIGGER_MESSAGE = "Cannot delete head of household"


class MemberService:
    """Service for family_members operations."""

    @staticmethod
    def get_member(member_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """
        Get a raw member row whose household belongs to user_id.

        Raises:
            FamilyMemberNotFoundError: If missing or in someone else's household
        """
        member = SupabaseClient.fetch_single(MEMBERS_TABLE, member_id)
        if not member:
            raise FamilyMemberNotFoundError(str(member_id))

        if not fetch_owned_household(member["household_id"], user_id, columns="id"):
            raise FamilyMemberNotFoundError(str(member_id))

        return member

    @staticmethod
    def _promote_to_head(household_id: str, member_id: str) -> None:
        """Make member_id the only head of its household."""
        client = SupabaseClient.get_client()
        (
            client.table(MEMBERS_TABLE)
            .update({"is_head_of_household": False})
            .eq("household_id", household_id)
            .neq("id", member_id)
            .execute()
        )
        (
            client.table(HOUSEHOLDS_TABLE)
            .update({"head_of_household_id": member_id})
            .eq("id", household_id)
            .execute()
        )

    @staticmethod
    def create_member(
        household_id: str | UUID,
        data: FamilyMemberCreate,
        user_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Add a member to a household.

        Raises:
            HouseholdNotFoundError: If the household isn't the user's
            BackendOperationError: If the insert fails
        """
        household_id = normalize_uuid(household_id)
        require_household(household_id, user_id, columns="id")

        payload = data.model_dump(mode="json", exclude_none=True)
        payload["household_id"] = household_id

        client = SupabaseClient.get_client()
        try:
            response = client.table(MEMBERS_TABLE).insert(payload).execute()
            if not response.data:
                raise BackendOperationError("Không thể thêm thành viên", "Insert returned no data")
            member = response.data[0]
            if data.is_head_of_household:
                MemberService._promote_to_head(household_id, member["id"])
        except BackendOperationError:
            raise
        except Exception as e:
            logger.error(f"Failed to create family member: {e}")
            raise BackendOperationError("Không thể thêm thành viên", e) from e

        logger.info(f"Added member {member['id']} to household {household_id}")
        return present_member(member)

    @staticmethod
    def update_member(
        member_id: str | UUID,
        data: FamilyMemberUpdate,
        user_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Update a member. Only fields present in the request are written.

        Raises:
            FamilyMemberNotFoundError: If missing or not the user's
            BackendOperationError: If the update fails
        """
        member = MemberService.get_member(member_id, user_id)
        update_data = data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            return present_member(member)

        member_id = normalize_uuid(member_id)
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(MEMBERS_TABLE)
                .update(update_data)
                .eq("id", member_id)
                .execute()
            )
            if update_data.get("is_head_of_household"):
                MemberService._promote_to_head(str(member["household_id"]), member_id)
        except Exception as e:
            logger.error(f"Failed to update family member: {e}")
            raise BackendOperationError("Không thể cập nhật thành viên", e) from e

        logger.info(f"Updated member {member_id}")
        return present_member(response.data[0] if response.data else {**member, **update_data})

    @staticmethod
    def delete_member(member_id: str | UUID, user_id: UUID | str) -> None:
        """
        Delete a member.

        Raises:
            FamilyMemberNotFoundError: If missing or not the user's
            HeadOfHouseholdDeletionError: If the member heads the household
            BackendOperationError: If the delete fails
        """
        member = MemberService.get_member(member_id, user_id)
        member_id = normalize_uuid(member_id)

        if member.get("is_head_of_household"):
            raise HeadOfHouseholdDeletionError(member_id)

        client = SupabaseClient.get_client()
        try:
            client.table(MEMBERS_TABLE).delete().eq("id", member_id).execute()
        except Exception as e:
            logger.error(f"Error deleting family member: {e}")
            if HEAD_DELETE_TRIGGER_MESSAGE in error_text(e):
                raise HeadOfHouseholdDeletionError(member_id) from e
            raise BackendOperationError("Không thể xóa thành viên", e) from e

        logger.info(f"Deleted member {member_id}")

    @staticmethod
    def list_members(
        household_id: str | UUID,
        user_id: UUID | str,
        filters: MemberFilters | None = None,
    ) -> list[dict[str, Any]]:
        """
        Members of a household, head first, then oldest entries first.

        filters narrows the list by name/hometown text, relationship,
        nominal age range and hometown province.
        """
        household_id = normalize_uuid(household_id)
        require_household(household_id, user_id, columns="id")

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(MEMBERS_TABLE)
                .select("*")
                .eq("household_id", household_id)
                .order("is_head_of_household", desc=True)
                .order("created_at")
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list family members: {e}")
            raise BackendOperationError("Không thể tải danh sách thành viên", e) from e

        members = order_members(response.data or [])
        if filters is not None:
            members = filter_members(members, filters)
        return [present_member(m) for m in members]

    @staticmethod
    def search_members(query: str, user_id: UUID | str) -> list[dict[str, Any]]:
        """
        Search members by name across the user's households.

        Queries shorter than MEMBER_SEARCH_MIN_LENGTH return [] without
        touching the database.
        """
        query = (query or "").strip()
        if len(query) < settings.MEMBER_SEARCH_MIN_LENGTH:
            return []

        client = SupabaseClient.get_client()
        try:
            households_response = (
                client.table(HOUSEHOLDS_TABLE)
                .select("id, address, province_code, ward_code")
                .eq("created_by", normalize_uuid(user_id))
                .execute()
            )
            households = {str(h["id"]): h for h in households_response.data or []}
            if not households:
                return []

            response = (
                client.table(MEMBERS_TABLE)
                .select(
                    "id, household_id, full_name, birth_year, gender, is_head_of_household, "
                    "is_alive, hometown_address, hometown_province_code, hometown_ward_code"
                )
                .in_("household_id", list(households))
                .ilike("full_name", f"%{query}%")
                .limit(settings.MEMBER_SEARCH_LIMIT)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error searching members: {e}")
            raise BackendOperationError("Không thể tìm kiếm thành viên", e) from e

        return [
            present_search_result(member, households.get(str(member["household_id"])))
            for member in response.data or []
        ]
