# =============================================================================
# core/services/presenters.py - Computed Display Fields
# =============================================================================
# Adds the fields clients display but the database doesn't store:
# household display names, formatted addresses, member ages and zodiac data.
# All functions take raw Supabase rows (dicts) and return new dicts.
# =============================================================================

from typing import Any

from core.models.family_member import (
    get_gender_label,
    get_relationship_color,
    get_relationship_label,
)
from core.models.worship import SHARED_CEREMONY_LABEL
from lib.astrology import get_calendar_age, get_can_chi, get_tuoi, get_van_han
from lib.filters import is_large_household, is_recent
from lib.utils import short_id
from lib.vietnam_data import format_address

NO_ADDRESS_LABEL = "Chưa có thông tin"


def household_display_name(household: dict[str, Any], head: dict[str, Any] | None) -> str:
    """
    "Gia đình {head name}" when the head is known, otherwise
    "Hộ gia đình ({first 8 characters of the id})".
    """
    if head and head.get("full_name"):
        return f"Gia đình {head['full_name']}"
    return f"Hộ gia đình ({short_id(household['id'])})"


def present_household(
    household: dict[str, Any],
    head: dict[str, Any] | None = None,
    member_count: int = 0,
) -> dict[str, Any]:
    """
    Household row plus display_name, member_count, address_display, head
    summary and the "Mới" (is_recent) / "Đông" (is_large) badge flags.
    """
    return {
        **household,
        "display_name": household_display_name(household, head),
        "member_count": member_count,
        "is_recent": is_recent(household.get("created_at")),
        "is_large": is_large_household(member_count),
        "address_display": format_address(
            household.get("address"),
            household.get("province_code"),
            household.get("ward_code"),
        ),
        "head_of_household": (
            {"id": head["id"], "full_name": head.get("full_name")} if head else None
        ),
    }


def present_member(member: dict[str, Any], current_year: int | None = None) -> dict[str, Any]:
    """Member row plus nominal age, can chi, Vietnamese labels and hometown line."""
    birth_year = member.get("birth_year")
    return {
        **member,
        "age": get_tuoi(birth_year, current_year) if birth_year else None,
        "can_chi": get_can_chi(birth_year) if birth_year else None,
        "relationship_label": get_relationship_label(member.get("relationship_role")),
        "relationship_color": get_relationship_color(member.get("relationship_role")),
        "gender_label": get_gender_label(member.get("gender")),
        "hometown_display": format_address(
            member.get("hometown_address"),
            member.get("hometown_province_code"),
            member.get("hometown_ward_code"),
        ),
    }


def present_search_result(
    member: dict[str, Any],
    household: dict[str, Any] | None,
    current_year: int | None = None,
) -> dict[str, Any]:
    """Member search hit with its household's address attached."""
    household = household or {}
    return {
        **member,
        "household_address": household.get("address"),
        "household_province_code": household.get("province_code"),
        "household_ward_code": household.get("ward_code"),
        "age": get_calendar_age(member["birth_year"], current_year),
        "household_address_display": format_address(
            household.get("address"),
            household.get("province_code"),
            household.get("ward_code"),
            fallback=NO_ADDRESS_LABEL,
        ),
        "hometown_display": format_address(
            member.get("hometown_address"),
            member.get("hometown_province_code"),
            member.get("hometown_ward_code"),
            fallback=NO_ADDRESS_LABEL,
        ),
    }


def present_roster_row(member: dict[str, Any], current_year: int | None = None) -> dict[str, Any]:
    """One line of the printable household roster."""
    van_han = get_van_han(member["birth_year"], member.get("gender"), current_year)
    return {
        "id": member["id"],
        "full_name": member["full_name"],
        "dharma_name": member.get("dharma_name"),
        "birth_year": member["birth_year"],
        "gender": get_gender_label(member.get("gender")),
        "relationship": get_relationship_label(member.get("relationship_role")),
        "is_head_of_household": bool(member.get("is_head_of_household")),
        "is_alive": member.get("is_alive", True),
        "tuoi_mu": van_han.tuoi_mu,
        "can_chi": get_can_chi(member["birth_year"]),
        "sao": van_han.sao,
        "han": van_han.han,
        "diem_vuong": van_han.diem_vuong,
        "tam_tai": van_han.tam_tai,
    }


def present_worship(event: dict[str, Any]) -> dict[str, Any]:
    """Worship row with the embedded member name flattened out."""
    event = dict(event)
    member = event.pop("family_member", None) or {}
    member_name = member.get("full_name")
    return {
        **event,
        "member_name": member_name,
        "display_label": member_name or SHARED_CEREMONY_LABEL,
    }
