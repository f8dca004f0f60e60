# =============================================================================
# tests/test_worship_service.py - Worship History Service Tests
# =============================================================================

from datetime import date

import pytest

from app.exceptions import (
    HouseholdNotFoundError,
    InvalidWorshipMemberError,
    WorshipEventNotFoundError,
)
from core.models import WorshipEventCreate, WorshipEventUpdate
from core.services.worship_service import WorshipService
from tests.conftest import GRANDFATHER_ID, HOUSEHOLD_ID, OTHER_USER_ID, USER_ID

TODAY = date(2025, 6, 1)
OUTSIDER_ID = "77777777-7777-4777-8777-777777777777"


@pytest.fixture
def db(seeded_db):
    seeded_db.tables["worship_history"].extend([
        {"id": "w-past", "household_id": HOUSEHOLD_ID, "family_member_id": GRANDFATHER_ID,
         "worship_date": "2025-03-10", "worship_type": "Giỗ", "notes": None},
        {"id": "w-today", "household_id": HOUSEHOLD_ID, "family_member_id": None,
         "worship_date": "2025-06-01", "worship_type": "Rằm", "notes": None},
        {"id": "w-next", "household_id": HOUSEHOLD_ID, "family_member_id": None,
         "worship_date": "2025-07-15", "worship_type": "Vu Lan", "notes": None},
    ])
    return seeded_db


class TestCreateEvent:

    def test_for_member(self, db):
        data = WorshipEventCreate(
            worship_date="2026-03-10", worship_type="Giỗ", family_member_id=GRANDFATHER_ID
        )

        event = WorshipService.create_event(HOUSEHOLD_ID, data, USER_ID)

        assert event["household_id"] == HOUSEHOLD_ID
        assert event["worship_date"] == "2026-03-10"
        assert event["family_member_id"] == GRANDFATHER_ID

    def test_shared_ceremony(self, db):
        event = WorshipService.create_event(
            HOUSEHOLD_ID, WorshipEventCreate(worship_date="2026-01-01"), USER_ID
        )

        assert event["display_label"] == "Cúng chung"
        assert event["member_name"] is None

    def test_member_from_other_household(self, db):
        db.tables["family_members"].append(
            {"id": OUTSIDER_ID, "household_id": "h-other", "full_name": "Lê Văn Tư"}
        )
        data = WorshipEventCreate(worship_date="2026-01-01", family_member_id=OUTSIDER_ID)

        with pytest.raises(InvalidWorshipMemberError):
            WorshipService.create_event(HOUSEHOLD_ID, data, USER_ID)

    def test_household_of_other_user(self, db):
        with pytest.raises(HouseholdNotFoundError):
            WorshipService.create_event(
                HOUSEHOLD_ID, WorshipEventCreate(worship_date="2026-01-01"), OTHER_USER_ID
            )


class TestUpdateDeleteEvent:

    def test_update(self, db):
        event = WorshipService.update_event(
            "w-next", WorshipEventUpdate(notes="Mời họ hàng"), USER_ID
        )
        assert event["notes"] == "Mời họ hàng"

    def test_missing_event(self, db):
        with pytest.raises(WorshipEventNotFoundError):
            WorshipService.update_event("nope", WorshipEventUpdate(notes="x"), USER_ID)

    def test_other_users_event(self, db):
        with pytest.raises(HouseholdNotFoundError):
            WorshipService.delete_event("w-next", OTHER_USER_ID)

    def test_delete(self, db):
        WorshipService.delete_event("w-past", USER_ID)
        assert db.find("worship_history", "w-past") is None


class TestListings:

    def test_list_newest_first_with_labels(self, db):
        events = WorshipService.list_events(HOUSEHOLD_ID, USER_ID)

        assert [e["id"] for e in events] == ["w-next", "w-today", "w-past"]
        assert events[2]["display_label"] == "Nguyễn Văn Cường"
        assert "family_member" not in events[2]

    def test_recent_respects_limit(self, db):
        events = WorshipService.recent_events(HOUSEHOLD_ID, limit=2)
        assert [e["id"] for e in events] == ["w-next", "w-today"]

    def test_upcoming_includes_today(self, db):
        events = WorshipService.upcoming_events(HOUSEHOLD_ID, today=TODAY)
        assert [e["id"] for e in events] == ["w-today", "w-next"]
