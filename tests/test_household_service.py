# =============================================================================
# tests/test_household_service.py - Household Service Tests
# =============================================================================
# Runs HouseholdService against the in-memory FakeSupabase from conftest.
# =============================================================================

import csv
import io

import pytest

from app.exceptions import (
    BackendOperationError,
    DuplicatePhoneError,
    HouseholdNotFoundError,
    InvalidHeadTransferError,
)
from core.models import HeadOfHouseholdCreate, HouseholdCreate, HouseholdUpdate
from core.services.household_service import HouseholdService
from tests.conftest import (
    GRANDFATHER_ID,
    HEAD_ID,
    HOUSEHOLD_ID,
    OTHER_USER_ID,
    USER_ID,
    WIFE_ID,
)

DUPLICATE_PHONE_MESSAGE = (
    'duplicate key value violates unique constraint "households_phone_key"'
)


# =============================================================================
# Create
# =============================================================================

class TestCreateHousehold:

    def test_create(self, fake_db):
        data = HouseholdCreate(household_name="Hộ Lê", address="5 Trần Phú", phone="0911111111")

        household = HouseholdService.create_household(data, USER_ID)

        assert household["created_by"] == USER_ID
        assert household["member_count"] == 0
        assert household["display_name"].startswith("Hộ gia đình (")
        assert household["head_of_household"] is None
        assert len(fake_db.tables["households"]) == 1

    def test_duplicate_phone(self, fake_db):
        fake_db.fail("households", "insert", DUPLICATE_PHONE_MESSAGE)
        data = HouseholdCreate(household_name="Hộ Lê", address="5 Trần Phú", phone="0911111111")

        with pytest.raises(DuplicatePhoneError) as exc_info:
            HouseholdService.create_household(data, USER_ID)

        assert exc_info.value.status_code == 409

    def test_backend_error_keeps_message(self, fake_db):
        fake_db.fail("households", "insert", "permission denied")
        data = HouseholdCreate(household_name="Hộ Lê", address="5 Trần Phú")

        with pytest.raises(BackendOperationError) as exc_info:
            HouseholdService.create_household(data, USER_ID)

        assert exc_info.value.message == "Không thể tạo hộ gia đình: permission denied"


class TestCreateHouseholdWithHead:

    def test_creates_household_and_head(self, fake_db):
        household = HouseholdCreate(
            household_name="Gia đình Phạm Minh",
            address="7 Hai Bà Trưng",
            province_code="01",
            ward_code="00070",
        )
        head = HeadOfHouseholdCreate(
            full_name="Phạm Minh", birth_year=1970, gender="nam", use_same_address=True
        )

        result = HouseholdService.create_household_with_head(household, head, USER_ID)

        assert result["message"] == "Tạo hộ gia đình thành công!"
        assert result["household"]["display_name"] == "Gia đình Phạm Minh"
        assert result["household"]["member_count"] == 1
        assert result["household"]["address_display"] == (
            "7 Hai Bà Trưng, Phường Hoàn Kiếm, Thành phố Hà Nội"
        )

        head_member = result["head_member"]
        assert head_member["is_head_of_household"] is True
        assert head_member["relationship_role"] == "chu_ho"
        assert head_member["hometown_address"] == "7 Hai Bà Trưng"
        assert head_member["hometown_province_code"] == "01"

        name, params = fake_db.rpc_calls[0]
        assert name == "create_household_with_head"
        assert params["household_data"]["created_by"] == USER_ID
        assert "use_same_address" not in params["head_data"]

    def test_duplicate_phone(self, fake_db):
        fake_db.fail("rpc:create_household_with_head", "call", DUPLICATE_PHONE_MESSAGE)
        household = HouseholdCreate(household_name="Hộ Lê", address="5 Trần Phú", phone="0911111111")
        head = HeadOfHouseholdCreate(
            full_name="Lê Văn Nam", birth_year=1970, gender="nam", use_same_address=True
        )

        with pytest.raises(DuplicatePhoneError):
            HouseholdService.create_household_with_head(household, head, USER_ID)

    def test_other_rpc_error(self, fake_db):
        fake_db.fail("rpc:create_household_with_head", "call", "boom")
        household = HouseholdCreate(household_name="Hộ Lê", address="5 Trần Phú")
        head = HeadOfHouseholdCreate(
            full_name="Lê Văn Nam", birth_year=1970, gender="nam", hometown_address="Huế"
        )

        with pytest.raises(BackendOperationError, match="Có lỗi xảy ra khi tạo hộ gia đình"):
            HouseholdService.create_household_with_head(household, head, USER_ID)


# =============================================================================
# Read
# =============================================================================

class TestGetHousehold:

    def test_detail(self, seeded_db):
        seeded_db.tables["worship_history"].extend([
            {"id": "w1", "household_id": HOUSEHOLD_ID, "family_member_id": GRANDFATHER_ID,
             "worship_date": "2001-03-10", "worship_type": "Giỗ"},
            {"id": "w2", "household_id": HOUSEHOLD_ID, "family_member_id": None,
             "worship_date": "2999-01-01", "worship_type": "Rằm"},
        ])

        household = HouseholdService.get_household(HOUSEHOLD_ID, USER_ID)

        assert household["display_name"] == "Gia đình Nguyễn Văn An"
        assert household["member_count"] == 3
        assert household["living_count"] == 2
        assert household["deceased_count"] == 1
        assert [m["id"] for m in household["family_members"]] == [HEAD_ID, GRANDFATHER_ID, WIFE_ID]
        assert household["head_of_household"] == {"id": HEAD_ID, "full_name": "Nguyễn Văn An"}

        assert [e["id"] for e in household["recent_worship"]] == ["w2", "w1"]
        assert household["recent_worship"][1]["display_label"] == "Nguyễn Văn Cường"
        assert [e["display_label"] for e in household["upcoming_worship"]] == ["Cúng chung"]

    def test_other_users_household_is_not_found(self, seeded_db):
        with pytest.raises(HouseholdNotFoundError):
            HouseholdService.get_household(HOUSEHOLD_ID, OTHER_USER_ID)

    def test_missing_household(self, fake_db):
        with pytest.raises(HouseholdNotFoundError) as exc_info:
            HouseholdService.get_household(HOUSEHOLD_ID, USER_ID)

        assert exc_info.value.status_code == 404


class TestListHouseholds:

    @pytest.fixture
    def db(self, seeded_db):
        seeded_db.tables["households"].extend([
            {"id": "h-2", "household_name": "Hộ Trần", "address": "1 Lý Thường Kiệt",
             "phone": "0987000111", "province_code": "01", "ward_code": "00004",
             "created_by": USER_ID, "created_at": "2024-03-01T00:00:00+00:00"},
            {"id": "h-3", "household_name": "Hộ Võ", "address": "9 Bạch Đằng",
             "phone": None, "province_code": "79", "ward_code": "27007",
             "created_by": USER_ID, "created_at": "2024-02-01T00:00:00+00:00"},
            {"id": "h-other", "household_name": "Hộ Khác", "address": "2 Lê Duẩn",
             "created_by": OTHER_USER_ID, "created_at": "2024-04-01T00:00:00+00:00"},
        ])
        return seeded_db

    def test_newest_first_and_scoped_to_user(self, db):
        rows, total = HouseholdService.list_households(USER_ID)

        assert total == 3
        assert [r["id"] for r in rows] == ["h-2", "h-3", HOUSEHOLD_ID]

    def test_member_counts_and_display_names(self, db):
        rows, _ = HouseholdService.list_households(USER_ID)
        by_id = {r["id"]: r for r in rows}

        assert by_id[HOUSEHOLD_ID]["member_count"] == 3
        assert by_id[HOUSEHOLD_ID]["display_name"] == "Gia đình Nguyễn Văn An"
        assert by_id["h-2"]["member_count"] == 0
        assert by_id["h-2"]["display_name"] == "Hộ gia đình (h-2)"

    def test_oldest_first(self, db):
        rows, _ = HouseholdService.list_households(USER_ID, descending=False)
        assert [r["id"] for r in rows] == [HOUSEHOLD_ID, "h-3", "h-2"]

    def test_sort_by_computed_fields(self, db):
        rows, _ = HouseholdService.list_households(USER_ID, sort="member_count")
        assert [r["id"] for r in rows] == [HOUSEHOLD_ID, "h-2", "h-3"]

        rows, _ = HouseholdService.list_households(USER_ID, sort="display_name", descending=False)
        assert [r["id"] for r in rows] == [HOUSEHOLD_ID, "h-2", "h-3"]

    def test_badge_flags(self, db):
        rows, _ = HouseholdService.list_households(USER_ID)
        household = next(r for r in rows if r["id"] == HOUSEHOLD_ID)

        assert household["is_recent"] is False
        assert household["is_large"] is False

    def test_search_matches_name_or_phone(self, db):
        rows, total = HouseholdService.list_households(USER_ID, search="0987")
        assert [r["id"] for r in rows] == ["h-2"]
        assert total == 1

        rows, _ = HouseholdService.list_households(USER_ID, search="võ")
        assert [r["id"] for r in rows] == ["h-3"]

    def test_search_strips_filter_syntax(self, db):
        rows, _ = HouseholdService.list_households(USER_ID, search="(Hộ Trần),")
        assert [r["id"] for r in rows] == ["h-2"]

    def test_province_and_ward_filters(self, db):
        rows, _ = HouseholdService.list_households(USER_ID, province="79")
        assert {r["id"] for r in rows} == {HOUSEHOLD_ID, "h-3"}

        rows, _ = HouseholdService.list_households(USER_ID, province="79", ward="27007")
        assert [r["id"] for r in rows] == ["h-3"]

    def test_pagination(self, db):
        rows, total = HouseholdService.list_households(USER_ID, page=2, page_size=2)

        assert total == 3
        assert [r["id"] for r in rows] == [HOUSEHOLD_ID]

    def test_empty_page_skips_member_query(self, db):
        rows, total = HouseholdService.list_households(USER_ID, page=5, page_size=2)

        assert rows == []
        assert total == 3
        assert ("family_members", "select") not in db.calls


# =============================================================================
# Update / Delete
# =============================================================================

class TestUpdateHousehold:

    def test_update(self, seeded_db):
        updated = HouseholdService.update_household(
            HOUSEHOLD_ID, HouseholdUpdate(notes="Đã cập nhật"), USER_ID
        )

        assert updated["notes"] == "Đã cập nhật"
        assert seeded_db.find("households", HOUSEHOLD_ID)["notes"] == "Đã cập nhật"

    def test_update_keeps_display_fields(self, seeded_db):
        updated = HouseholdService.update_household(
            HOUSEHOLD_ID, HouseholdUpdate(notes="x"), USER_ID
        )

        assert updated["display_name"] == "Gia đình Nguyễn Văn An"
        assert updated["member_count"] == 3
        assert updated["head_of_household"]["id"] == HEAD_ID

    def test_empty_update_writes_nothing(self, seeded_db):
        household = HouseholdService.update_household(HOUSEHOLD_ID, HouseholdUpdate(), USER_ID)

        assert ("households", "update") not in seeded_db.calls
        assert household["member_count"] == 3

    def test_duplicate_phone(self, seeded_db):
        seeded_db.fail("households", "update", DUPLICATE_PHONE_MESSAGE)

        with pytest.raises(DuplicatePhoneError):
            HouseholdService.update_household(
                HOUSEHOLD_ID, HouseholdUpdate(phone="0987000111"), USER_ID
            )

    def test_not_owner(self, seeded_db):
        with pytest.raises(HouseholdNotFoundError):
            HouseholdService.update_household(
                HOUSEHOLD_ID, HouseholdUpdate(notes="x"), OTHER_USER_ID
            )


class TestDeleteHousehold:

    def test_cascade(self, seeded_db):
        seeded_db.tables["worship_history"].append(
            {"id": "w1", "household_id": HOUSEHOLD_ID, "worship_date": "2024-01-01"}
        )

        HouseholdService.delete_household(HOUSEHOLD_ID, USER_ID)

        assert seeded_db.rpc_calls == [
            ("delete_household_cascade", {"p_household_id": HOUSEHOLD_ID})
        ]
        assert seeded_db.tables["households"] == []
        assert seeded_db.tables["family_members"] == []
        assert seeded_db.tables["worship_history"] == []

    def test_not_owner(self, seeded_db):
        with pytest.raises(HouseholdNotFoundError) as exc_info:
            HouseholdService.delete_household(HOUSEHOLD_ID, OTHER_USER_ID)

        assert exc_info.value.message == "Không tìm thấy hộ gia đình hoặc không có quyền xóa"
        assert seeded_db.rpc_calls == []

    def test_rpc_failure(self, seeded_db):
        seeded_db.fail("rpc:delete_household_cascade", "call", "timeout")

        with pytest.raises(BackendOperationError, match="Không thể xóa hộ gia đình"):
            HouseholdService.delete_household(HOUSEHOLD_ID, USER_ID)


# =============================================================================
# Headship
# =============================================================================

class TestTransferHeadship:

    def test_transfer(self, seeded_db):
        result = HouseholdService.transfer_headship(HOUSEHOLD_ID, WIFE_ID, USER_ID)

        assert result["message"] == "Đã chuyển quyền chủ hộ thành công!"
        assert result["old_head"]["id"] == HEAD_ID
        assert result["old_head"]["is_head_of_household"] is False
        assert result["new_head"]["id"] == WIFE_ID
        assert result["household"]["display_name"] == "Gia đình Trần Thị Bình"
        assert seeded_db.rpc_calls == [
            ("transfer_headship", {"household_id": HOUSEHOLD_ID, "new_head_id": WIFE_ID})
        ]
        assert seeded_db.find("households", HOUSEHOLD_ID)["head_of_household_id"] == WIFE_ID

    def test_already_head(self, seeded_db):
        with pytest.raises(InvalidHeadTransferError, match="đã là chủ hộ"):
            HouseholdService.transfer_headship(HOUSEHOLD_ID, HEAD_ID, USER_ID)

    def test_member_of_other_household(self, seeded_db):
        with pytest.raises(InvalidHeadTransferError, match="không thuộc hộ gia đình"):
            HouseholdService.transfer_headship(
                HOUSEHOLD_ID, "99999999-9999-4999-8999-999999999999", USER_ID
            )

    def test_deceased_member(self, seeded_db):
        with pytest.raises(InvalidHeadTransferError):
            HouseholdService.transfer_headship(HOUSEHOLD_ID, GRANDFATHER_ID, USER_ID)
        assert seeded_db.rpc_calls == []


# =============================================================================
# Phone uniqueness and roster
# =============================================================================

class TestIsPhoneUnique:

    def test_taken(self, seeded_db):
        assert HouseholdService.is_phone_unique(" 0901234567 ") is False

    def test_free(self, seeded_db):
        assert HouseholdService.is_phone_unique("0999999999") is True

    def test_own_household_excluded(self, seeded_db):
        assert HouseholdService.is_phone_unique("0901234567", HOUSEHOLD_ID) is True

    def test_backend_failure_reports_not_unique(self, seeded_db):
        seeded_db.fail("households", "select", "connection reset")
        assert HouseholdService.is_phone_unique("0999999999") is False


class TestRoster:

    def test_living_first_with_zodiac(self, seeded_db):
        roster = HouseholdService.get_roster(HOUSEHOLD_ID, USER_ID)

        members = roster["members"]
        assert [m["id"] for m in members] == [HEAD_ID, WIFE_ID, GRANDFATHER_ID]

        head = members[0]
        assert head["can_chi"] == "Giáp Tý"
        assert head["gender"] == "Nam"
        assert head["relationship"] == "Chủ hộ"
        assert {"tuoi_mu", "sao", "han", "diem_vuong", "tam_tai"} <= set(head)

    def test_csv_export(self, seeded_db):
        filename, content = HouseholdService.export_roster_csv(HOUSEHOLD_ID, USER_ID)

        assert filename == f"danh-sach-thanh-vien-{HOUSEHOLD_ID[:8]}.csv"
        rows = list(csv.DictReader(io.StringIO(content)))
        assert len(rows) == 3
        assert rows[0]["Họ tên"] == "Nguyễn Văn An"
        assert rows[1]["Pháp danh"] == "Diệu Hạnh"
        assert rows[2]["Quan hệ"] == "Cha"
