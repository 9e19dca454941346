from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import Field

from ..auth import Principal
from ..dependencies import PageParams, get_current_principal, get_page_params, get_store
from ..enums import AttendanceStatus, EventType, RsvpStatus
from ..schemas import ApiModel, EventDetail, EventRead, InvitationRead, Page
from ..services import events as event_service
from ..store import ClubStore

router = APIRouter(prefix="/events")


class EventCreate(ApiModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    type: EventType
    location: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    team_id: Optional[int] = None
    invitee_ids: Optional[List[int]] = None


class EventUpdate(ApiModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    type: Optional[EventType] = None
    location: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    team_id: Optional[int] = None
    invitee_ids: Optional[List[int]] = None


class InviteRequest(ApiModel):
    user_id: int


class RsvpRequest(ApiModel):
    status: RsvpStatus


class AttendanceRequest(ApiModel):
    attendance_status: Optional[AttendanceStatus] = None


@router.get("", response_model=Page[EventRead])
async def list_events(
    paging: PageParams = Depends(get_page_params),
    search: Optional[str] = None,
    event_type: Optional[EventType] = Query(None, alias="type"),
    team_id: Optional[int] = Query(None, alias="teamId"),
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    """Events visible to the caller, soonest first."""
    return event_service.list_events(
        store, principal, paging.page, paging.page_size,
        search=search, type=event_type, team_id=team_id,
    )


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    body: EventCreate,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return event_service.create_event(store, principal, body.model_dump())


@router.get("/{event_id}", response_model=EventDetail)
async def get_event(
    event_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return event_service.get_event(store, principal, event_id)


@router.patch("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: int,
    body: EventUpdate,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return event_service.update_event(store, principal, event_id, body.model_dump(exclude_unset=True))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    event_service.delete_event(store, principal, event_id)


@router.post("/{event_id}/invitations", response_model=InvitationRead, status_code=status.HTTP_201_CREATED)
async def invite_user(
    event_id: int,
    body: InviteRequest,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return event_service.invite_user(store, principal, event_id, body.user_id)


@router.post("/{event_id}/rsvp", response_model=InvitationRead)
async def rsvp(
    event_id: int,
    body: RsvpRequest,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    """Answer your own invitation. There is no implicit self-invite."""
    return event_service.rsvp(store, principal, event_id, body.status)


@router.patch("/{event_id}/invitations/{user_id}", response_model=InvitationRead)
async def record_attendance(
    event_id: int,
    user_id: int,
    body: AttendanceRequest,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return event_service.record_attendance(
        store, principal, event_id, user_id, body.attendance_status
    )
