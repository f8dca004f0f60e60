# =============================================================================
# app/routers/members.py - Family Member Endpoints
# =============================================================================
# Members are created and listed under their household and edited by their
# own id. Mounted at /api/v1.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Response

from app.auth import AuthUser, get_current_user
from core.models.family_member import (
    FamilyMemberCreate,
    FamilyMemberResponse,
    FamilyMemberUpdate,
    MemberSearchResult,
    RelationshipRole,
)
from core.services.member_service import MemberService
from lib.filters import MemberFilters

router = APIRouter()


@router.get("/members/search", response_model=list[MemberSearchResult])
async def search_members(
    q: Annotated[str, Query(description="Part of a member's full name")] = "",
    user: AuthUser = Depends(get_current_user),
):
    """
    Search members by name across all of the user's households.

    Queries shorter than two characters return an empty list.
    """
    return MemberService.search_members(q, user_id=user.id)


@router.get("/households/{household_id}/members", response_model=list[FamilyMemberResponse])
async def list_members(
    household_id: Annotated[UUID, Path(description="Household UUID")],
    user: AuthUser = Depends(get_current_user),
    search: Annotated[str, Query(description="Match full name or hometown address")] = "",
    relationship: Annotated[RelationshipRole | None, Query(description="Relationship role")] = None,
    age_min: Annotated[int | None, Query(ge=0, description="Minimum nominal age")] = None,
    age_max: Annotated[int | None, Query(ge=0, description="Maximum nominal age")] = None,
    hometown_province: Annotated[str, Query(description="Hometown province code")] = "",
):
    """Members head first; the optional filters narrow the list."""
    filters = MemberFilters(
        search_text=search.strip(),
        relationship=relationship.value if relationship else "",
        age_min=age_min,
        age_max=age_max,
        hometown_province=hometown_province,
    )
    return MemberService.list_members(household_id, user_id=user.id, filters=filters)


@router.post(
    "/households/{household_id}/members",
    response_model=FamilyMemberResponse,
    status_code=201,
)
async def create_member(
    household_id: Annotated[UUID, Path(description="Household UUID")],
    data: FamilyMemberCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Add a member to a household.

    With is_head_of_household the new member replaces the current head.
    """
    return MemberService.create_member(household_id, data, user_id=user.id)


@router.patch("/members/{member_id}", response_model=FamilyMemberResponse)
async def update_member(
    member_id: Annotated[UUID, Path(description="Member UUID")],
    data: FamilyMemberUpdate,
    user: AuthUser = Depends(get_current_user),
):
    return MemberService.update_member(member_id, data, user_id=user.id)


@router.delete("/members/{member_id}", status_code=204)
async def delete_member(
    member_id: Annotated[UUID, Path(description="Member UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete a member.

    The head of household can't be deleted; transfer headship first.
    """
    MemberService.delete_member(member_id, user_id=user.id)
    return Response(status_code=204)
