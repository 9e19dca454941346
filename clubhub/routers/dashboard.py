from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends

from ..auth import Principal
from ..dependencies import get_current_principal, get_store
from ..enums import AttendanceStatus, EventType, RsvpStatus
from ..schemas import ApiModel, AthleteRead, TeamRead, UserRead
from ..services import dashboard as dashboard_service
from ..store import ClubStore

router = APIRouter()


class OverviewStats(ApiModel):
    teams: int
    athletes: int
    upcoming_events: int
    pending_invitations: int


class ScheduleEntry(ApiModel):
    id: int
    title: str
    type: EventType
    start_time: datetime
    team_id: Optional[int] = None
    team_name: Optional[str] = None
    rsvp_status: Optional[RsvpStatus] = None
    attendance_status: Optional[AttendanceStatus] = None


class OverviewResponse(ApiModel):
    stats: OverviewStats
    upcoming_events: List[ScheduleEntry]


class PlayerProfileResponse(ApiModel):
    user: UserRead
    athlete: AthleteRead
    teams: List[TeamRead]
    upcoming_events: List[ScheduleEntry]
    recent_events: List[ScheduleEntry]


@router.get("/dashboard/overview", response_model=OverviewResponse)
async def overview(
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    """Counts and upcoming events scoped to the caller's role."""
    return dashboard_service.get_overview(store, principal)


@router.get("/player-profile", response_model=PlayerProfileResponse)
async def player_profile(
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    """The signed-in athlete's profile, teams and schedule."""
    return dashboard_service.get_player_profile(store, principal)
