# =============================================================================
# lib/filters.py - In-Memory List Filtering and Sorting
# =============================================================================
# Small helpers for filtering and sorting household/member rows that are
# already loaded: a page of the household list, the members of one
# household. Rows are plain dicts as returned by the service layer.
#
# Usage:
#   from lib.filters import MemberFilters, filter_members
#   rows = filter_members(rows, MemberFilters(relationship="con"))
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from lib.astrology import get_tuoi
from lib.utils import parse_timestamp

RECENT_WINDOW = timedelta(days=7)
LARGE_HOUSEHOLD_THRESHOLD = 5

Row = dict[str, Any]


# =============================================================================
# Households
# =============================================================================

HOUSEHOLD_SORT_KEYS = {
    "member_count": lambda row: row.get("member_count") or 0,
    "created_at": lambda row: parse_timestamp(row.get("created_at"))
    or datetime.min.replace(tzinfo=timezone.utc),
    "display_name": lambda row: (row.get("display_name") or "").lower(),
}


def sort_households(rows: Iterable[Row], key: str, descending: bool = False) -> list[Row]:
    """
    Sort rows by member_count, created_at or display_name.

    Raises:
        ValueError: For an unknown sort key
    """
    if key not in HOUSEHOLD_SORT_KEYS:
        raise ValueError(
            f"Unknown sort key: {key}. Use one of {', '.join(HOUSEHOLD_SORT_KEYS)}"
        )
    return sorted(rows, key=HOUSEHOLD_SORT_KEYS[key], reverse=descending)


def is_recent(created_at: str | datetime | None, now: datetime | None = None) -> bool:
    """True when the row was created within the last 7 days."""
    created = parse_timestamp(created_at)
    if created is None:
        return False
    now = now or datetime.now(timezone.utc)
    return now - created < RECENT_WINDOW


def is_large_household(member_count: int) -> bool:
    """Households with more than 5 members get the "Đông" badge."""
    return member_count > LARGE_HOUSEHOLD_THRESHOLD


# =============================================================================
# Members
# =============================================================================

@dataclass
class MemberFilters:
    """Filters for a member table. None/empty fields are ignored."""
    search_text: str = ""
    relationship: str = ""
    age_min: int | None = None
    age_max: int | None = None
    hometown_province: str = ""


def member_matches(row: Row, filters: MemberFilters, current_year: int | None = None) -> bool:
    if filters.search_text:
        searchable = " ".join(
            part for part in (row.get("full_name"), row.get("hometown_address")) if part
        ).lower()
        if filters.search_text.lower() not in searchable:
            return False

    if filters.relationship and row.get("relationship_role") != filters.relationship:
        return False

    if filters.age_min is not None or filters.age_max is not None:
        birth_year = row.get("birth_year")
        if not birth_year:
            return False
        age = get_tuoi(birth_year, current_year)
        if filters.age_min is not None and age < filters.age_min:
            return False
        if filters.age_max is not None and age > filters.age_max:
            return False

    if filters.hometown_province and row.get("hometown_province_code") != filters.hometown_province:
        return False

    return True


def filter_members(
    rows: Iterable[Row],
    filters: MemberFilters,
    current_year: int | None = None,
) -> list[Row]:
    """Keep members matching the filters. Ages are nominal (tuổi mụ)."""
    return [row for row in rows if member_matches(row, filters, current_year)]


def split_living(rows: Iterable[Row]) -> tuple[list[Row], list[Row]]:
    """Split members into (living, deceased), preserving order."""
    living: list[Row] = []
    deceased: list[Row] = []
    for row in rows:
        (living if row.get("is_alive", True) else deceased).append(row)
    return living, deceased


def order_members(rows: Iterable[Row]) -> list[Row]:
    """Head of household first, then by created_at ascending."""
    def key(row: Row):
        created = parse_timestamp(row.get("created_at")) or datetime.min.replace(tzinfo=timezone.utc)
        return (not row.get("is_head_of_household", False), created)
    return sorted(rows, key=key)
