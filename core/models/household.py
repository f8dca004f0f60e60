# =============================================================================
# core/models/household.py - Household Schemas
# =============================================================================
# These models define the API contract for household operations:
# - HouseholdCreate / HouseholdUpdate: validated input
# - HeadOfHouseholdCreate: head member data for the one-step creation flow
# - HouseholdResponse / HouseholdList: output with computed display fields
# - TransferHeadshipRequest: move the head role to another member
#
# A household is owned by the user who created it (created_by). Its display
# name is derived from the head member: "Gia đình {head name}".
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from .family_member import (
    FamilyMemberResponse,
    Gender,
    check_birth_year,
    check_full_name,
    reject_null,
)


def _strip_phone(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    return v or None


def _check_household_name(v: str) -> str:
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Tên hộ gia đình phải có ít nhất 2 ký tự")
    return v


def _check_address(v: str) -> str:
    v = v.strip()
    if len(v) < 5:
        raise ValueError("Địa chỉ phải có ít nhất 5 ký tự")
    return v


class HouseholdCreate(BaseModel):
    """
    Input for creating a household.

    Example:
        {
            "household_name": "Gia đình Nguyễn Văn An",
            "address": "12 Lê Lợi",
            "province_code": "79",
            "ward_code": "26734",
            "phone": "0901234567"
        }
    """

    household_name: str = Field(
        ...,
        min_length=2,
        max_length=255,
        description="Tên hộ gia đình (2-255 characters)"
    )

    address: str = Field(
        ...,
        min_length=5,
        max_length=500,
        description="Địa chỉ (5-500 characters)"
    )

    province_code: str | None = Field(
        default=None,
        min_length=1,
        description="Mã tỉnh/thành phố"
    )

    ward_code: str | None = Field(
        default=None,
        min_length=1,
        description="Mã phường/xã"
    )

    phone: str | None = Field(
        default=None,
        max_length=20,
        description="Số điện thoại (unique across households)"
    )

    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("household_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_household_name(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        return _check_address(v)

    @field_validator("phone")
    @classmethod
    def strip_phone(cls, v: str | None) -> str | None:
        return _strip_phone(v)


class HouseholdUpdate(BaseModel):
    """
    Partial household update. Only provided fields are written.

    household_name and address may be omitted but not set to null.
    """

    household_name: str | None = Field(default=None, min_length=2, max_length=255)
    address: str | None = Field(default=None, min_length=5, max_length=500)
    province_code: str | None = Field(default=None, min_length=1)
    ward_code: str | None = Field(default=None, min_length=1)
    phone: str | None = Field(default=None, max_length=20)
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("household_name", "address", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator("household_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_household_name(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        return _check_address(v)

    @field_validator("phone")
    @classmethod
    def strip_phone(cls, v: str | None) -> str | None:
        return _strip_phone(v)


class HeadOfHouseholdCreate(BaseModel):
    """
    Head member data for creating a household and its head in one call.

    When use_same_address is true the household address fills the hometown
    fields.
    """

    full_name: str = Field(..., min_length=2, max_length=255)
    birth_year: int
    gender: Gender
    hometown_address: str | None = Field(default=None, max_length=500)
    hometown_province_code: str | None = None
    hometown_ward_code: str | None = None
    use_same_address: bool = False
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        return check_full_name(v)

    @field_validator("birth_year")
    @classmethod
    def validate_birth_year(cls, v: int) -> int:
        return check_birth_year(v)

    @model_validator(mode="after")
    def require_hometown(self) -> "HeadOfHouseholdCreate":
        if not self.use_same_address and not self.hometown_address:
            raise ValueError("Vui lòng nhập quê quán hoặc chọn dùng địa chỉ hộ gia đình")
        return self


class HouseholdWithHeadCreate(BaseModel):
    """Request body for POST /households/with-head."""
    household: HouseholdCreate
    head: HeadOfHouseholdCreate


class HeadSummary(BaseModel):
    """The head of household as embedded in household responses."""
    id: UUID
    full_name: str


class HouseholdResponse(BaseModel):
    """
    A household as returned to clients.

    display_name and member_count are computed on read.
    """

    id: UUID
    household_name: str | None = None
    address: str
    province_code: str | None = None
    ward_code: str | None = None
    phone: str | None = None
    notes: str | None = None
    head_of_household_id: UUID | None = None
    created_by: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Computed
    display_name: str
    member_count: int = Field(default=0, ge=0)
    is_recent: bool = Field(default=False, description="Created within the last 7 days")
    is_large: bool = Field(default=False, description="More than 5 members")
    address_display: str | None = None
    head_of_household: HeadSummary | None = None


class HouseholdDetail(HouseholdResponse):
    """Household with members and worship previews (GET /households/{id})."""

    family_members: list[FamilyMemberResponse] = Field(default_factory=list)
    living_count: int = 0
    deceased_count: int = 0
    recent_worship: list[dict] = Field(default_factory=list)
    upcoming_worship: list[dict] = Field(default_factory=list)


class HouseholdList(BaseModel):
    """
    Paginated household listing.

    Example:
        {"households": [...], "total": 42, "page": 1, "page_size": 10}
    """

    households: list[HouseholdResponse] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)


class TransferHeadshipRequest(BaseModel):
    """Request to make another member the head of household."""
    new_head_id: UUID


class HouseholdCreatedResponse(BaseModel):
    """Response of the one-step household + head creation."""
    household: HouseholdResponse
    head_member: FamilyMemberResponse
    success: bool = True
    message: str = "Tạo hộ gia đình thành công!"


class TransferHeadshipResponse(BaseModel):
    household: HouseholdResponse
    old_head: FamilyMemberResponse | None = None
    new_head: FamilyMemberResponse
    success: bool = True
    message: str = "Đã chuyển quyền chủ hộ thành công!"
