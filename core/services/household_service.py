# =============================================================================
# core/services/household_service.py - Household Business Logic
# =============================================================================
# Handles household CRUD, the one-step "household + head" creation flow,
# headship transfer and the printable member roster.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

import pandas as pd

from app.config import settings
from app.exceptions import (
    BackendOperationError,
    DuplicatePhoneError,
    HouseholdNotFoundError,
    InvalidHeadTransferError,
    error_text,
)
from core.models.family_member import RelationshipRole
from core.models.household import (
    HeadOfHouseholdCreate,
    HouseholdCreate,
    HouseholdUpdate,
)
from core.services.ownership import HOUSEHOLDS_TABLE, fetch_owned_household, require_household
from core.services.presenters import present_household, present_member, present_roster_row
from core.services.worship_service import WorshipService
from lib.filters import order_members, sort_households, split_living
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

MEMBERS_TABLE = "family_members"

# Column headers of the exported roster, in order
ROSTER_CSV_COLUMNS = {
    "full_name": "Họ tên",
    "dharma_name": "Pháp danh",
    "birth_year": "Năm sinh",
    "gender": "Giới tính",
    "relationship": "Quan hệ",
    "tuoi_mu": "Tuổi",
    "can_chi": "Can chi",
    "sao": "Sao chiếu mệnh",
    "han": "Hạn",
    "diem_vuong": "Diêm Vương",
    "tam_tai": "Tam Tai",
    "is_alive": "Còn sống",
}


def _is_duplicate_phone(error: Exception) -> bool:
    text = error_text(error)
    return "duplicate key value violates unique constraint" in text and "phone" in text


def _clean_search(search: str) -> str:
    """Strip characters that have meaning inside a PostgREST or_() filter."""
    return search.strip().translate(str.maketrans("", "", ",()"))


def _find_head(household: dict[str, Any], members: list[dict[str, Any]]) -> dict[str, Any] | None:
    head_id = household.get("head_of_household_id")
    for member in members:
        if head_id and str(member.get("id")) == str(head_id):
            return member
    for member in members:
        if member.get("is_head_of_household"):
            return member
    return None


class HouseholdService:
    """
    Service for household management operations.

    Every method takes the caller's user_id and only touches households
    whose created_by matches it.
    """

    @staticmethod
    def create_household(data: HouseholdCreate, user_id: UUID | str) -> dict[str, Any]:
        """
        Create a household without members.

        Returns:
            Household dict with display fields (member_count 0)

        Raises:
            DuplicatePhoneError: If the phone number is already registered
            BackendOperationError: If the insert fails
        """
        client = SupabaseClient.get_client()

        payload = data.model_dump(exclude_none=True)
        payload["created_by"] = normalize_uuid(user_id)

        try:
            response = client.table(HOUSEHOLDS_TABLE).insert(payload).execute()
        except Exception as e:
            logger.error(f"Failed to create household: {e}")
            if _is_duplicate_phone(e):
                raise DuplicatePhoneError(data.phone) from e
            raise BackendOperationError("Không thể tạo hộ gia đình", e) from e

        if not response.data:
            raise BackendOperationError("Không thể tạo hộ gia đình", "Insert returned no data")

        household = response.data[0]
        logger.info(f"Created household: {household['id']} for user: {user_id}")
        return present_household(household)

    @staticmethod
    def create_household_with_head(
        household: HouseholdCreate,
        head: HeadOfHouseholdCreate,
        user_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Create a household and its head member in one transaction.

        The database function create_household_with_head inserts both rows
        and links head_of_household_id.

        Returns:
            Dict with household, head_member and message

        Raises:
            DuplicatePhoneError: If the phone number is already registered
            BackendOperationError: If the RPC or the follow-up reads fail
        """
        client = SupabaseClient.get_client()

        household_data = household.model_dump(mode="json")
        household_data["created_by"] = normalize_uuid(user_id)

        head_data = head.model_dump(mode="json", exclude={"use_same_address"})
        if head.use_same_address:
            head_data["hometown_address"] = household.address
            head_data["hometown_province_code"] = household.province_code
            head_data["hometown_ward_code"] = household.ward_code
        head_data.update(
            relationship_role=RelationshipRole.CHU_HO.value,
            is_head_of_household=True,
            is_alive=True,
        )

        try:
            response = client.rpc(
                "create_household_with_head",
                {"household_data": household_data, "head_data": head_data},
            ).execute()
        except Exception as e:
            logger.error(f"Error creating household with head: {e}")
            if _is_duplicate_phone(e):
                raise DuplicatePhoneError(household.phone) from e
            raise BackendOperationError("Có lỗi xảy ra khi tạo hộ gia đình", e) from e

        # The function returns one row; postgrest may wrap it in a list
        result = response.data[0] if isinstance(response.data, list) else response.data
        if not result or not result.get("household_id"):
            raise BackendOperationError(
                "Có lỗi xảy ra khi tạo hộ gia đình", "RPC returned no household_id"
            )

        household_id = result["household_id"]
        try:
            created = SupabaseClient.fetch_single(HOUSEHOLDS_TABLE, household_id)
            head_id = result.get("head_id") or (created or {}).get("head_of_household_id")
            head_member = SupabaseClient.fetch_single(MEMBERS_TABLE, head_id) if head_id else None
        except Exception as e:
            raise BackendOperationError("Có lỗi xảy ra khi tạo hộ gia đình", e) from e

        if not created or not head_member:
            raise BackendOperationError(
                "Có lỗi xảy ra khi tạo hộ gia đình", "Created rows could not be read back"
            )

        logger.info(f"Created household {household_id} with head {head_member['id']}")
        return {
            "household": present_household(created, head_member, member_count=1),
            "head_member": present_member(head_member),
            "success": True,
            "message": "Tạo hộ gia đình thành công!",
        }

    @staticmethod
    def _fetch_members(household_id: str) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            client.table(MEMBERS_TABLE)
            .select("*")
            .eq("household_id", household_id)
            .execute()
        )
        return order_members(response.data or [])

    @staticmethod
    def _present_with_members(household: dict[str, Any]) -> dict[str, Any]:
        """Household with display_name and member_count from its current members."""
        try:
            members = HouseholdService._fetch_members(str(household["id"]))
        except Exception as e:
            logger.error(f"Failed to load members of household {household['id']}: {e}")
            raise BackendOperationError("Không thể tải thông tin hộ gia đình", e) from e
        return present_household(household, _find_head(household, members), len(members))

    @staticmethod
    def get_household(household_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """
        Get a household with its members and worship previews.

        Returns:
            Household dict with family_members (head first), living/deceased
            counts, recent_worship and upcoming_worship

        Raises:
            HouseholdNotFoundError: If missing or not owned by the user
        """
        household_id = normalize_uuid(household_id)
        household = require_household(household_id, user_id)

        try:
            members = HouseholdService._fetch_members(household_id)
            limit = settings.WORSHIP_PREVIEW_LIMIT
            recent = WorshipService.recent_events(household_id, limit=limit)
            upcoming = WorshipService.upcoming_events(household_id, limit=limit)
        except Exception as e:
            logger.error(f"Failed to load household {household_id}: {e}")
            raise BackendOperationError("Không thể tải thông tin hộ gia đình", e) from e

        living, deceased = split_living(members)
        head = _find_head(household, members)

        return {
            **present_household(household, head, member_count=len(members)),
            "family_members": [present_member(m) for m in members],
            "living_count": len(living),
            "deceased_count": len(deceased),
            "recent_worship": recent,
            "upcoming_worship": upcoming,
        }

    @staticmethod
    def list_households(
        user_id: UUID | str,
        search: str | None = None,
        province: str | None = None,
        ward: str | None = None,
        page: int = 1,
        page_size: int = 10,
        sort: str = "created_at",
        descending: bool = True,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List the user's households, newest first by default.

        Args:
            user_id: Owner
            search: Case-insensitive match on household_name or phone
            province: Exact province_code
            ward: Exact ward_code
            page: 1-based page number
            page_size: Rows per page
            sort: created_at (in the database), or member_count / display_name
                (computed fields, so ordered within the page)
            descending: Sort direction

        Returns:
            Tuple of (households with display fields, total matching count)
        """
        client = SupabaseClient.get_client()

        query = (
            client.table(HOUSEHOLDS_TABLE)
            .select("*", count="exact")
            .eq("created_by", normalize_uuid(user_id))
        )

        term = _clean_search(search or "")
        if term:
            query = query.or_(f"household_name.ilike.%{term}%,phone.ilike.%{term}%")
        if province:
            query = query.eq("province_code", province)
        if ward:
            query = query.eq("ward_code", ward)

        offset = (page - 1) * page_size
        try:
            response = (
                query.order("created_at", desc=descending if sort == "created_at" else True)
                .range(offset, offset + page_size - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list households: {e}")
            raise BackendOperationError("Không thể tải danh sách hộ gia đình", e) from e

        households = response.data or []
        total = response.count or 0
        if not households:
            return [], total

        # One query for member counts and head names across the page
        ids = [h["id"] for h in households]
        try:
            members_response = (
                client.table(MEMBERS_TABLE)
                .select("id, household_id, full_name, is_head_of_household")
                .in_("household_id", ids)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to count household members: {e}")
            raise BackendOperationError("Không thể tải danh sách hộ gia đình", e) from e

        by_household: dict[str, list[dict[str, Any]]] = {}
        for member in members_response.data or []:
            by_household.setdefault(str(member["household_id"]), []).append(member)

        rows = []
        for household in households:
            members = by_household.get(str(household["id"]), [])
            rows.append(
                present_household(household, _find_head(household, members), len(members))
            )

        if sort != "created_at":
            rows = sort_households(rows, sort, descending)
        return rows, total

    @staticmethod
    def update_household(
        household_id: str | UUID,
        data: HouseholdUpdate,
        user_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Update a household. Only fields present in the request are written.

        Raises:
            HouseholdNotFoundError: If missing or not owned by the user
            DuplicatePhoneError: If the new phone is already registered
            BackendOperationError: If the update fails
        """
        household_id = normalize_uuid(household_id)
        household = require_household(household_id, user_id)

        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return HouseholdService._present_with_members(household)

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(HOUSEHOLDS_TABLE)
                .update(update_data)
                .eq("id", household_id)
                .eq("created_by", normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update household: {e}")
            if _is_duplicate_phone(e):
                raise DuplicatePhoneError(update_data.get("phone")) from e
            raise BackendOperationError("Không thể cập nhật hộ gia đình", e) from e

        if not response.data:
            raise HouseholdNotFoundError(household_id)

        logger.info(f"Updated household: {household_id}")
        return HouseholdService._present_with_members(response.data[0])

    @staticmethod
    def delete_household(household_id: str | UUID, user_id: UUID | str) -> None:
        """
        Delete a household with its members and worship history.

        Raises:
            HouseholdNotFoundError: If missing or not owned by the user
            BackendOperationError: If the cascade fails
        """
        household_id = normalize_uuid(household_id)
        if not fetch_owned_household(household_id, user_id, columns="id"):
            raise HouseholdNotFoundError(
                household_id, message="Không tìm thấy hộ gia đình hoặc không có quyền xóa"
            )

        client = SupabaseClient.get_client()
        try:
            client.rpc("delete_household_cascade", {"p_household_id": household_id}).execute()
        except Exception as e:
            logger.error(f"Error deleting household: {e}")
            raise BackendOperationError("Không thể xóa hộ gia đình", e) from e

        logger.info(f"Deleted household: {household_id}")

    @staticmethod
    def transfer_headship(
        household_id: str | UUID,
        new_head_id: str | UUID,
        user_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Make another member of the household its head.

        Returns:
            Dict with household, old_head, new_head and message

        Raises:
            HouseholdNotFoundError: If missing or not owned by the user
            InvalidHeadTransferError: If the member can't become head
            BackendOperationError: If the RPC fails
        """
        household_id = normalize_uuid(household_id)
        new_head_id = normalize_uuid(new_head_id)
        household = require_household(household_id, user_id)

        try:
            members = HouseholdService._fetch_members(household_id)
        except Exception as e:
            raise BackendOperationError("Có lỗi xảy ra khi chuyển quyền chủ hộ", e) from e

        new_head = next((m for m in members if str(m["id"]) == new_head_id), None)
        if new_head is None:
            raise InvalidHeadTransferError(
                household_id, new_head_id, "Thành viên không thuộc hộ gia đình này"
            )
        old_head = _find_head(household, members)
        if old_head and str(old_head["id"]) == new_head_id:
            raise InvalidHeadTransferError(
                household_id, new_head_id, "Thành viên này đã là chủ hộ"
            )
        if not new_head.get("is_alive", True):
            raise InvalidHeadTransferError(
                household_id, new_head_id, "Không thể chọn thành viên đã mất làm chủ hộ"
            )

        client = SupabaseClient.get_client()
        try:
            client.rpc(
                "transfer_headship",
                {"household_id": household_id, "new_head_id": new_head_id},
            ).execute()
        except Exception as e:
            logger.error(f"Error transferring headship: {e}")
            raise BackendOperationError("Có lỗi xảy ra khi chuyển quyền chủ hộ", e) from e

        logger.info(f"Transferred headship of {household_id} to {new_head_id}")

        new_head = {**new_head, "is_head_of_household": True}
        if old_head:
            old_head = {**old_head, "is_head_of_household": False}
        updated = {**household, "head_of_household_id": new_head_id}

        return {
            "household": present_household(updated, new_head, member_count=len(members)),
            "old_head": present_member(old_head) if old_head else None,
            "new_head": present_member(new_head),
            "success": True,
            "message": "Đã chuyển quyền chủ hộ thành công!",
        }

    @staticmethod
    def is_phone_unique(phone: str, exclude_household_id: str | UUID | None = None) -> bool:
        """
        Check that no other household uses this phone number.

        Returns False when the check itself fails so callers err on the side
        of asking for another number.
        """
        phone = phone.strip()
        if not phone:
            return True

        client = SupabaseClient.get_client()
        query = client.table(HOUSEHOLDS_TABLE).select("id").eq("phone", phone)
        if exclude_household_id:
            query = query.neq("id", normalize_uuid(exclude_household_id))

        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Error checking phone uniqueness: {e}")
            return False

        return not response.data

    @staticmethod
    def get_roster(household_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """
        Printable member list with zodiac data, living members first.

        Raises:
            HouseholdNotFoundError: If missing or not owned by the user
        """
        household_id = normalize_uuid(household_id)
        household = require_household(household_id, user_id)

        try:
            members = HouseholdService._fetch_members(household_id)
        except Exception as e:
            logger.error(f"Failed to load roster for {household_id}: {e}")
            raise BackendOperationError("Không thể tải danh sách thành viên", e) from e

        living, deceased = split_living(members)
        head = _find_head(household, members)

        return {
            "household": present_household(household, head, member_count=len(members)),
            "members": [present_roster_row(m) for m in living + deceased],
        }

    @staticmethod
    def export_roster_csv(household_id: str | UUID, user_id: UUID | str) -> tuple[str, str]:
        """
        Roster as CSV text.

        Returns:
            Tuple of (filename, csv text)
        """
        roster = HouseholdService.get_roster(household_id, user_id)

        df = pd.DataFrame(roster["members"], columns=list(ROSTER_CSV_COLUMNS))
        df = df.rename(columns=ROSTER_CSV_COLUMNS)

        filename = f"danh-sach-thanh-vien-{str(roster['household']['id'])[:8]}.csv"
        return filename, df.to_csv(index=False)

