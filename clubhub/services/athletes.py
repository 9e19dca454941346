from typing import Any, Dict, Optional

from sqlmodel import col, or_, select

from .. import scope
from ..auth import Principal
from ..clock import utcnow
from ..enums import AthleteStatus
from ..errors import ConflictError, reject_nulls
from ..models import Athlete, TeamAthlete, User
from ..pagination import contains_insensitive, paginate
from ..store import ClubStore

PROFILE_CONFLICT = "User already has an athlete profile"


def list_athletes(
    store: ClubStore,
    principal: Principal,
    page: int,
    page_size: int,
    search: Optional[str] = None,
    status: Optional[AthleteStatus] = None,
    team_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Page over athletes, newest first. Search covers name, email and position."""
    scope.can_list_athletes(principal).enforce(principal, "athlete.list")

    statement = select(Athlete).join(User, User.id == Athlete.user_id)
    if search:
        statement = statement.where(or_(
            contains_insensitive(User.first_name, search),
            contains_insensitive(User.last_name, search),
            contains_insensitive(User.email, search),
            contains_insensitive(Athlete.position, search),
        ))
    if status:
        statement = statement.where(Athlete.status == status)
    if team_id is not None:
        statement = statement.where(col(Athlete.id).in_(
            select(TeamAthlete.athlete_id).where(TeamAthlete.team_id == team_id)
        ))
    statement = statement.order_by(col(Athlete.created_at).desc(), col(Athlete.id).desc())
    return paginate(store.db, statement, page, page_size)


def get_athlete(store: ClubStore, principal: Principal, athlete_id: int) -> Athlete:
    athlete = store.require_athlete(athlete_id)
    scope.can_read_athlete(principal, athlete, store).enforce(principal, "athlete.read")
    return athlete


def create_athlete(store: ClubStore, principal: Principal, data: Dict[str, Any]) -> Athlete:
    scope.can_manage_athletes(principal).enforce(principal, "athlete.create")

    user_id = data["user_id"]
    store.require_user(user_id)
    if store.get_athlete_by_user(user_id):
        raise ConflictError(PROFILE_CONFLICT)

    athlete = Athlete(**{key: value for key, value in data.items() if value is not None})
    store.add(athlete)
    store.commit(PROFILE_CONFLICT)
    store.refresh(athlete)
    return athlete


def update_athlete(
    store: ClubStore,
    principal: Principal,
    athlete_id: int,
    changes: Dict[str, Any]
) -> Athlete:
    reject_nulls(changes, ("status",))
    athlete = store.require_athlete(athlete_id)
    scope.can_update_athlete(principal, athlete, store).enforce(principal, "athlete.update")

    for field, value in changes.items():
        setattr(athlete, field, value)
    athlete.updated_at = utcnow()

    store.add(athlete)
    store.commit()
    store.refresh(athlete)
    return athlete


def delete_athlete(store: ClubStore, principal: Principal, athlete_id: int) -> None:
    """Delete an athlete profile and its team memberships. The user stays."""
    athlete = store.require_athlete(athlete_id)
    scope.can_manage_athletes(principal).enforce(principal, "athlete.delete")

    for link in store.db.exec(select(TeamAthlete).where(TeamAthlete.athlete_id == athlete.id)).all():
        store.delete(link)
    store.delete(athlete)
    store.commit()
