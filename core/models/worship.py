# =============================================================================
# core/models/worship.py - Worship History Schemas
# =============================================================================
# A worship event is a logged or scheduled ancestor-worship ceremony for a
# household. It may honour one member (e.g. a death anniversary) or the whole
# family (family_member_id is null: "Cúng chung").
# =============================================================================

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .family_member import reject_null

SHARED_CEREMONY_LABEL = "Cúng chung"


class WorshipEventCreate(BaseModel):
    """
    Input for logging or scheduling a worship event.

    Example:
        {
            "worship_date": "2025-02-12",
            "worship_type": "Giỗ",
            "family_member_id": "660e8400-e29b-41d4-a716-446655440001"
        }
    """

    worship_date: date = Field(..., description="Ngày cúng")
    worship_type: str | None = Field(
        default=None,
        max_length=255,
        description="Loại lễ (Giỗ, Rằm, Tết...)"
    )
    family_member_id: UUID | None = Field(
        default=None,
        description="Member honoured by the ceremony; omit for a shared ceremony"
    )
    notes: str | None = Field(default=None, max_length=1000)


class WorshipEventUpdate(BaseModel):
    """Partial update of a worship event. Null family_member_id makes it shared."""
    worship_date: date | None = None
    worship_type: str | None = Field(default=None, max_length=255)
    family_member_id: UUID | None = None
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("worship_date", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class WorshipEventResponse(BaseModel):
    """A worship event with the honoured member's name resolved."""

    id: UUID
    household_id: UUID
    family_member_id: UUID | None = None
    worship_date: date
    worship_type: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    # Computed
    member_name: str | None = None
    display_label: str = SHARED_CEREMONY_LABEL
