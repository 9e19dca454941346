from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import Field

from ..auth import Principal
from ..dependencies import PageParams, get_current_principal, get_page_params, get_store
from ..enums import TeamStatus
from ..schemas import ApiModel, AthleteRead, Page, TeamRead, UserRead
from ..services import teams as team_service
from ..store import ClubStore

router = APIRouter(prefix="/teams")


class TeamCreate(ApiModel):
    name: str = Field(min_length=1)
    age_group: Optional[str] = None
    status: Optional[TeamStatus] = None


class TeamUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    age_group: Optional[str] = None
    status: Optional[TeamStatus] = None


class AssignAthleteRequest(ApiModel):
    athlete_id: int


class AssignCoachRequest(ApiModel):
    coach_id: int


class RosterResponse(ApiModel):
    team: TeamRead
    athletes: List[AthleteRead]
    coaches: List[UserRead]


@router.get("", response_model=Page[TeamRead])
async def list_teams(
    paging: PageParams = Depends(get_page_params),
    search: Optional[str] = None,
    team_status: Optional[TeamStatus] = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    """Teams visible to the caller: all for admin/staff, own teams otherwise."""
    return team_service.list_teams(
        store, principal, paging.page, paging.page_size,
        search=search, status=team_status,
    )


@router.post("", response_model=TeamRead, status_code=status.HTTP_201_CREATED)
async def create_team(
    body: TeamCreate,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return team_service.create_team(store, principal, body.model_dump())


@router.get("/{team_id}", response_model=TeamRead)
async def get_team(
    team_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return team_service.get_team(store, principal, team_id)


@router.patch("/{team_id}", response_model=TeamRead)
async def update_team(
    team_id: int,
    body: TeamUpdate,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return team_service.update_team(store, principal, team_id, body.model_dump(exclude_unset=True))


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(
    team_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    team_service.delete_team(store, principal, team_id)


@router.post("/{team_id}/athletes", status_code=status.HTTP_204_NO_CONTENT)
async def add_athlete(
    team_id: int,
    body: AssignAthleteRequest,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    team_service.add_athlete(store, principal, team_id, body.athlete_id)


@router.delete("/{team_id}/athletes/{athlete_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_athlete(
    team_id: int,
    athlete_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    team_service.remove_athlete(store, principal, team_id, athlete_id)


@router.post("/{team_id}/coaches", status_code=status.HTTP_204_NO_CONTENT)
async def add_coach(
    team_id: int,
    body: AssignCoachRequest,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    team_service.add_coach(store, principal, team_id, body.coach_id)


@router.delete("/{team_id}/coaches/{coach_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_coach(
    team_id: int,
    coach_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    team_service.remove_coach(store, principal, team_id, coach_id)


@router.get("/{team_id}/roster", response_model=RosterResponse)
async def get_roster(
    team_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return team_service.get_roster(store, principal, team_id)
