# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - household.py: Household CRUD, one-step creation and headship transfer
# - family_member.py: Member CRUD, relationship/gender enums and labels
# - worship.py: Worship history (ancestor-worship events)
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Family Member Models
# -----------------------------------------------------------------------------
from .family_member import (
    GENDER_LABELS,
    RELATIONSHIP_LABELS,
    FamilyMemberCreate,
    FamilyMemberResponse,
    FamilyMemberUpdate,
    Gender,
    MemberSearchResult,
    RelationshipRole,
    get_gender_label,
    get_relationship_color,
    get_relationship_label,
)

# -----------------------------------------------------------------------------
# Household Models
# -----------------------------------------------------------------------------
from .household import (
    HeadOfHouseholdCreate,
    HeadSummary,
    HouseholdCreate,
    HouseholdCreatedResponse,
    HouseholdDetail,
    HouseholdList,
    HouseholdResponse,
    HouseholdUpdate,
    HouseholdWithHeadCreate,
    TransferHeadshipRequest,
    TransferHeadshipResponse,
)

# -----------------------------------------------------------------------------
# Worship Models
# -----------------------------------------------------------------------------
from .worship import (
    SHARED_CEREMONY_LABEL,
    WorshipEventCreate,
    WorshipEventResponse,
    WorshipEventUpdate,
)

__all__ = [
    # Family members
    "GENDER_LABELS",
    "RELATIONSHIP_LABELS",
    "FamilyMemberCreate",
    "FamilyMemberResponse",
    "FamilyMemberUpdate",
    "Gender",
    "MemberSearchResult",
    "RelationshipRole",
    "get_gender_label",
    "get_relationship_color",
    "get_relationship_label",
    # Households
    "HeadOfHouseholdCreate",
    "HeadSummary",
    "HouseholdCreate",
    "HouseholdCreatedResponse",
    "HouseholdDetail",
    "HouseholdList",
    "HouseholdResponse",
    "HouseholdUpdate",
    "HouseholdWithHeadCreate",
    "TransferHeadshipRequest",
    "TransferHeadshipResponse",
    # Worship
    "SHARED_CEREMONY_LABEL",
    "WorshipEventCreate",
    "WorshipEventResponse",
    "WorshipEventUpdate",
]
