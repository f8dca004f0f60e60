# =============================================================================
# app/routers/households.py - Household Endpoints
# =============================================================================
# Household CRUD, one-step creation with a head, headship transfer and the
# printable roster. All endpoints require authentication and only see the
# caller's own households.
# =============================================================================

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Response
from fastapi.responses import StreamingResponse

from app.auth import AuthUser, get_current_user
from app.config import settings
from core.models.household import (
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
from core.services.household_service import HouseholdService

router = APIRouter()

HouseholdId = Annotated[UUID, Path(description="Household UUID")]


@router.get("", response_model=HouseholdList)
async def list_households(
    user: AuthUser = Depends(get_current_user),
    search: Annotated[str | None, Query(description="Match household name or phone")] = None,
    province: Annotated[str | None, Query(description="Province code")] = None,
    ward: Annotated[str | None, Query(description="Ward code")] = None,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int | None, Query(ge=1, le=100, description="Items per page")] = None,
    sort: Annotated[
        Literal["created_at", "member_count", "display_name"],
        Query(description="member_count and display_name order the current page"),
    ] = "created_at",
    descending: Annotated[bool, Query(description="Sort direction")] = True,
):
    """
    List households with pagination, newest first by default.

    Each row carries display_name ("Gia đình {head}"), member_count and the
    is_recent / is_large badge flags.
    """
    page_size = page_size or settings.DEFAULT_PAGE_SIZE
    households, total = HouseholdService.list_households(
        user_id=user.id,
        search=search,
        province=province,
        ward=ward,
        page=page,
        page_size=page_size,
        sort=sort,
        descending=descending,
    )
    return HouseholdList(households=households, total=total, page=page, page_size=page_size)


@router.post("", response_model=HouseholdResponse, status_code=201)
async def create_household(
    data: HouseholdCreate,
    user: AuthUser = Depends(get_current_user),
):
    """Create a household without members."""
    return HouseholdService.create_household(data, user_id=user.id)


@router.post("/with-head", response_model=HouseholdCreatedResponse, status_code=201)
async def create_household_with_head(
    data: HouseholdWithHeadCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a household and its head of household in one transaction.

    With head.use_same_address the household address becomes the head's
    hometown.
    """
    return HouseholdService.create_household_with_head(data.household, data.head, user_id=user.id)


@router.get("/phone-available")
async def check_phone_available(
    phone: Annotated[str, Query(min_length=1, description="Phone number to check")],
    exclude_household_id: Annotated[UUID | None, Query(description="Household being edited")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """Whether no other household uses this phone number."""
    available = HouseholdService.is_phone_unique(phone, exclude_household_id)
    return {"phone": phone.strip(), "available": available}


@router.get("/{household_id}", response_model=HouseholdDetail)
async def get_household(
    household_id: HouseholdId,
    user: AuthUser = Depends(get_current_user),
):
    """
    Get a household with its members and worship previews.

    Members are listed head first, then in the order they were added.
    """
    return HouseholdService.get_household(household_id, user_id=user.id)


@router.patch("/{household_id}", response_model=HouseholdResponse)
async def update_household(
    household_id: HouseholdId,
    data: HouseholdUpdate,
    user: AuthUser = Depends(get_current_user),
):
    return HouseholdService.update_household(household_id, data, user_id=user.id)


@router.delete("/{household_id}", status_code=204)
async def delete_household(
    household_id: HouseholdId,
    user: AuthUser = Depends(get_current_user),
):
    """Delete a household together with its members and worship history."""
    HouseholdService.delete_household(household_id, user_id=user.id)
    return Response(status_code=204)


@router.post("/{household_id}/transfer-head", response_model=TransferHeadshipResponse)
async def transfer_headship(
    household_id: HouseholdId,
    request: TransferHeadshipRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Make another living member of the household its head."""
    return HouseholdService.transfer_headship(household_id, request.new_head_id, user_id=user.id)


@router.get("/{household_id}/roster")
async def get_roster(
    household_id: HouseholdId,
    user: AuthUser = Depends(get_current_user),
):
    """
    Printable roster: every member with nominal age, can chi, ruling star,
    hạn, Diêm Vương and Tam Tai for the current year.
    """
    return HouseholdService.get_roster(household_id, user_id=user.id)


@router.get("/{household_id}/roster.csv")
async def download_roster_csv(
    household_id: HouseholdId,
    user: AuthUser = Depends(get_current_user),
):
    """Download the roster as CSV."""
    filename, content = HouseholdService.export_roster_csv(household_id, user_id=user.id)

    # BOM so spreadsheet apps detect UTF-8 Vietnamese text
    return StreamingResponse(
        iter(["\ufeff" + content]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
