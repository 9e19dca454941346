from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from ..auth import Principal
from ..dependencies import PageParams, get_current_principal, get_page_params, get_store
from ..enums import AthleteStatus, DominantFoot
from ..schemas import ApiModel, AthleteRead, Page
from ..services import athletes as athlete_service
from ..store import ClubStore

router = APIRouter(prefix="/athletes")


class AthleteCreate(ApiModel):
    user_id: int
    position: Optional[str] = None
    dominant_foot: Optional[DominantFoot] = None
    status: Optional[AthleteStatus] = None
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None


class AthleteUpdate(ApiModel):
    position: Optional[str] = None
    dominant_foot: Optional[DominantFoot] = None
    status: Optional[AthleteStatus] = None
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None


@router.get("", response_model=Page[AthleteRead])
async def list_athletes(
    paging: PageParams = Depends(get_page_params),
    search: Optional[str] = None,
    athlete_status: Optional[AthleteStatus] = Query(None, alias="status"),
    team_id: Optional[int] = Query(None, alias="teamId"),
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    """Athletes, newest first. ``search`` is a case-insensitive substring match."""
    return athlete_service.list_athletes(
        store, principal, paging.page, paging.page_size,
        search=search, status=athlete_status, team_id=team_id,
    )


@router.post("", response_model=AthleteRead, status_code=status.HTTP_201_CREATED)
async def create_athlete(
    body: AthleteCreate,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return athlete_service.create_athlete(store, principal, body.model_dump())


@router.get("/{athlete_id}", response_model=AthleteRead)
async def get_athlete(
    athlete_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return athlete_service.get_athlete(store, principal, athlete_id)


@router.patch("/{athlete_id}", response_model=AthleteRead)
async def update_athlete(
    athlete_id: int,
    body: AthleteUpdate,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return athlete_service.update_athlete(
        store, principal, athlete_id, body.model_dump(exclude_unset=True)
    )


@router.delete("/{athlete_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_athlete(
    athlete_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    athlete_service.delete_athlete(store, principal, athlete_id)
