# =============================================================================
# app/routers/worship.py - Worship History Endpoints
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response

from app.auth import AuthUser, get_current_user
from core.models.worship import WorshipEventCreate, WorshipEventResponse, WorshipEventUpdate
from core.services.worship_service import WorshipService

router = APIRouter()


@router.get("/households/{household_id}/worship", response_model=list[WorshipEventResponse])
async def list_worship_events(
    household_id: Annotated[UUID, Path(description="Household UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """All worship events of a household, latest date first."""
    return WorshipService.list_events(household_id, user_id=user.id)


@router.post(
    "/households/{household_id}/worship",
    response_model=WorshipEventResponse,
    status_code=201,
)
async def create_worship_event(
    household_id: Annotated[UUID, Path(description="Household UUID")],
    data: WorshipEventCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Log or schedule a worship event.

    Omit family_member_id for a shared ceremony ("Cúng chung").
    """
    return WorshipService.create_event(household_id, data, user_id=user.id)


@router.patch("/worship/{event_id}", response_model=WorshipEventResponse)
async def update_worship_event(
    event_id: Annotated[UUID, Path(description="Worship event UUID")],
    data: WorshipEventUpdate,
    user: AuthUser = Depends(get_current_user),
):
    return WorshipService.update_event(event_id, data, user_id=user.id)


@router.delete("/worship/{event_id}", status_code=204)
async def delete_worship_event(
    event_id: Annotated[UUID, Path(description="Worship event UUID")],
    user: AuthUser = Depends(get_current_user),
):
    WorshipService.delete_event(event_id, user_id=user.id)
    return Response(status_code=204)
