# =============================================================================
# core/models/family_member.py - Family Member Schemas
# =============================================================================
# These models define the API contract for family member operations:
# - RelationshipRole / Gender: enums with Vietnamese display labels
# - FamilyMemberCreate / FamilyMemberUpdate: validated input
# - FamilyMemberResponse: output with computed zodiac fields
# - MemberSearchResult: member joined with household address for search
#
# A family member belongs to exactly one household. At most one member of a
# household has is_head_of_household = true.
# =============================================================================

from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

MIN_BIRTH_YEAR = 1900


class RelationshipRole(str, Enum):
    """Relationship of a member to the head of household."""
    CHU_HO = "chu_ho"
    VO = "vo"
    CHONG = "chong"
    CON = "con"
    CHA = "cha"
    ME = "me"
    CON_DAU = "con_dau"
    CON_RE = "con_re"
    CHAU_NOI = "chau_noi"
    CHAU_NGOAI = "chau_ngoai"


class Gender(str, Enum):
    """Member gender. Drives which ruling-star table applies."""
    NAM = "nam"
    NU = "nu"


RELATIONSHIP_LABELS: dict[RelationshipRole, str] = {
    RelationshipRole.CHU_HO: "Chủ hộ",
    RelationshipRole.VO: "Vợ",
    RelationshipRole.CHONG: "Chồng",
    RelationshipRole.CON: "Con",
    RelationshipRole.CHA: "Cha",
    RelationshipRole.ME: "Mẹ",
    RelationshipRole.CON_DAU: "Con dâu",
    RelationshipRole.CON_RE: "Con rể",
    RelationshipRole.CHAU_NOI: "Cháu nội",
    RelationshipRole.CHAU_NGOAI: "Cháu ngoại",
}

GENDER_LABELS: dict[Gender, str] = {
    Gender.NAM: "Nam",
    Gender.NU: "Nữ",
}

# Badge colour classes, grouped by kinship
RELATIONSHIP_COLORS: dict[RelationshipRole, str] = {
    RelationshipRole.CHU_HO: "bg-blue-100 text-blue-800",
    RelationshipRole.VO: "bg-green-100 text-green-800",
    RelationshipRole.CHONG: "bg-green-100 text-green-800",
    RelationshipRole.CON: "bg-yellow-100 text-yellow-800",
    RelationshipRole.CHA: "bg-purple-100 text-purple-800",
    RelationshipRole.ME: "bg-purple-100 text-purple-800",
    RelationshipRole.CON_DAU: "bg-pink-100 text-pink-800",
    RelationshipRole.CON_RE: "bg-pink-100 text-pink-800",
    RelationshipRole.CHAU_NOI: "bg-indigo-100 text-indigo-800",
    RelationshipRole.CHAU_NGOAI: "bg-indigo-100 text-indigo-800",
}
DEFAULT_RELATIONSHIP_COLOR = "bg-gray-100 text-gray-800"


def get_relationship_label(role: RelationshipRole | str | None) -> str:
    """Vietnamese label for a relationship; unknown values are returned as-is."""
    if role is None:
        return ""
    try:
        return RELATIONSHIP_LABELS[RelationshipRole(role)]
    except ValueError:
        return str(role)


def get_gender_label(gender: Gender | str | None) -> str:
    """Vietnamese label for a gender; unknown values are returned as-is."""
    if gender is None:
        return ""
    try:
        return GENDER_LABELS[Gender(gender)]
    except ValueError:
        return str(gender)


def get_relationship_color(role: RelationshipRole | str | None) -> str:
    try:
        return RELATIONSHIP_COLORS[RelationshipRole(role)]
    except ValueError:
        return DEFAULT_RELATIONSHIP_COLOR


def check_birth_year(value: int) -> int:
    if value < MIN_BIRTH_YEAR:
        raise ValueError("Năm sinh không hợp lệ")
    if value > date.today().year:
        raise ValueError("Năm sinh không được lớn hơn năm hiện tại")
    return value


def check_full_name(value: str) -> str:
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Họ tên phải có ít nhất 2 ký tự")
    return value


def reject_null(value: Any) -> Any:
    """Partial updates may omit a NOT NULL column but never clear it."""
    if value is None:
        raise ValueError("Trường này không được để trống")
    return value


class FamilyMemberCreate(BaseModel):
    """
    Input for adding a member to a household.

    Example:
        {
            "full_name": "Nguyễn Văn An",
            "birth_year": 1965,
            "gender": "nam",
            "relationship_role": "cha",
            "is_head_of_household": false
        }
    """

    full_name: str = Field(
        ...,
        min_length=2,
        max_length=255,
        description="Họ tên (2-255 characters)"
    )

    dharma_name: str | None = Field(
        default=None,
        max_length=255,
        description="Pháp danh (Buddhist dharma name)"
    )

    birth_year: int = Field(
        ...,
        description=f"Năm sinh ({MIN_BIRTH_YEAR} to the current year)"
    )

    gender: Gender = Field(
        ...,
        description="Giới tính"
    )

    relationship_role: RelationshipRole | None = Field(
        default=None,
        description="Quan hệ với chủ hộ"
    )

    is_head_of_household: bool = Field(
        default=False,
        description="Whether this member heads the household"
    )

    is_alive: bool = Field(
        default=True,
        description="False for deceased members (kept for worship records)"
    )

    hometown_address: str | None = Field(default=None, max_length=500)
    hometown_province_code: str | None = Field(default=None, min_length=1)
    hometown_ward_code: str | None = Field(default=None, min_length=1)

    notes: str | None = Field(
        default=None,
        max_length=1000,
        description="Ghi chú"
    )

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        return check_full_name(v)

    @field_validator("birth_year")
    @classmethod
    def validate_birth_year(cls, v: int) -> int:
        return check_birth_year(v)


class FamilyMemberUpdate(BaseModel):
    """Partial update of a member. Only provided fields are written."""

    full_name: str | None = Field(default=None, min_length=2, max_length=255)
    dharma_name: str | None = Field(default=None, max_length=255)
    birth_year: int | None = None
    gender: Gender | None = None
    relationship_role: RelationshipRole | None = None
    is_head_of_household: bool | None = None
    is_alive: bool | None = None
    hometown_address: str | None = Field(default=None, max_length=500)
    hometown_province_code: str | None = Field(default=None, min_length=1)
    hometown_ward_code: str | None = Field(default=None, min_length=1)
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator(
        "full_name", "birth_year", "gender", "is_head_of_household", "is_alive",
        mode="before",
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        return check_full_name(v)

    @field_validator("birth_year")
    @classmethod
    def validate_birth_year(cls, v: int) -> int:
        return check_birth_year(v)


class FamilyMemberResponse(BaseModel):
    """
    A member as returned to clients.

    Zodiac fields are computed from birth_year/gender for the current year.
    """

    id: UUID
    household_id: UUID
    full_name: str
    dharma_name: str | None = None
    birth_year: int
    gender: str | None = None
    relationship_role: str | None = None
    is_head_of_household: bool = False
    is_alive: bool = True
    hometown_address: str | None = None
    hometown_province_code: str | None = None
    hometown_ward_code: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Computed
    age: int | None = None
    can_chi: str | None = None
    relationship_label: str | None = None
    relationship_color: str | None = None
    gender_label: str | None = None
    hometown_display: str | None = None


class MemberSearchResult(BaseModel):
    """A member hit from the cross-household search."""

    id: UUID
    household_id: UUID
    full_name: str
    birth_year: int
    gender: str | None = None
    is_head_of_household: bool = False
    is_alive: bool = True
    hometown_address: str | None = None
    hometown_province_code: str | None = None
    hometown_ward_code: str | None = None
    household_address: str | None = None
    household_province_code: str | None = None
    household_ward_code: str | None = None

    # Computed
    age: int
    household_address_display: str
    hometown_display: str
