from typing import Any, Dict, Optional

from sqlmodel import col, select

from .. import scope
from ..auth import Principal
from ..clock import utcnow
from ..enums import Role, TeamStatus
from ..errors import ConflictError, NotFoundError, ValidationError, reject_nulls
from ..logger import get_logger
from ..models import Athlete, Event, Team, TeamAthlete, TeamCoach, User
from ..pagination import contains_insensitive, paginate
from ..store import ClubStore

logger = get_logger(__name__)

NAME_CONFLICT = "Team name already exists"


def _ensure_name_available(store: ClubStore, name: str, team_id: Optional[int] = None) -> None:
    existing = store.get_team_by_name(name)
    if existing and existing.id != team_id:
        raise ConflictError(NAME_CONFLICT)


def list_teams(
    store: ClubStore,
    principal: Principal,
    page: int,
    page_size: int,
    search: Optional[str] = None,
    status: Optional[TeamStatus] = None,
) -> Dict[str, Any]:
    """Page over the teams visible to the principal, newest first."""
    statement = select(Team).where(scope.team_list_filter(principal, store))
    if search:
        statement = statement.where(contains_insensitive(Team.name, search))
    if status:
        statement = statement.where(Team.status == status)
    statement = statement.order_by(col(Team.created_at).desc(), col(Team.id).desc())
    return paginate(store.db, statement, page, page_size)


def get_team(store: ClubStore, principal: Principal, team_id: int) -> Team:
    team = store.require_team(team_id)
    scope.can_read_team(principal, team, store).enforce(principal, "team.read")
    return team


def create_team(store: ClubStore, principal: Principal, data: Dict[str, Any]) -> Team:
    scope.can_manage_teams(principal).enforce(principal, "team.create")
    _ensure_name_available(store, data["name"])

    team = Team(**{key: value for key, value in data.items() if value is not None})
    store.add(team)
    store.commit(NAME_CONFLICT)
    store.refresh(team)
    logger.info("Team %s created by %s", team.name, principal.user_id)
    return team


def update_team(
    store: ClubStore,
    principal: Principal,
    team_id: int,
    changes: Dict[str, Any]
) -> Team:
    reject_nulls(changes, ("name", "status"))
    team = store.require_team(team_id)
    scope.can_manage_teams(principal).enforce(principal, "team.update")

    if "name" in changes and changes["name"] != team.name:
        _ensure_name_available(store, changes["name"], team.id)

    for field, value in changes.items():
        setattr(team, field, value)
    team.updated_at = utcnow()

    store.add(team)
    store.commit(NAME_CONFLICT)
    store.refresh(team)
    return team


def delete_team(store: ClubStore, principal: Principal, team_id: int) -> None:
    """Delete a team, its memberships, and detach its events."""
    team = store.require_team(team_id)
    scope.can_manage_teams(principal).enforce(principal, "team.delete")

    for link in store.db.exec(select(TeamCoach).where(TeamCoach.team_id == team.id)).all():
        store.delete(link)
    for link in store.db.exec(select(TeamAthlete).where(TeamAthlete.team_id == team.id)).all():
        store.delete(link)
    for event in store.db.exec(select(Event).where(Event.team_id == team.id)).all():
        event.team_id = None
        store.add(event)

    store.delete(team)
    store.commit()
    logger.info("Team %s deleted by %s", team_id, principal.user_id)


def add_athlete(store: ClubStore, principal: Principal, team_id: int, athlete_id: int) -> None:
    team = store.require_team(team_id)
    scope.can_manage_teams(principal).enforce(principal, "team.add_athlete")
    store.require_athlete(athlete_id)

    if store.is_athlete_on_team(athlete_id, team.id):
        return
    store.add(TeamAthlete(team_id=team.id, athlete_id=athlete_id))
    store.commit("Athlete already on this team")
    logger.info("Athlete %s added to team %s", athlete_id, team.id)


def remove_athlete(store: ClubStore, principal: Principal, team_id: int, athlete_id: int) -> None:
    team = store.require_team(team_id)
    scope.can_manage_teams(principal).enforce(principal, "team.remove_athlete")

    link = store.get_team_athlete(team.id, athlete_id)
    if not link:
        raise NotFoundError("Athlete not found on this team")
    store.delete(link)
    store.commit()
    logger.info("Athlete %s removed from team %s", athlete_id, team.id)


def add_coach(store: ClubStore, principal: Principal, team_id: int, coach_id: int) -> None:
    team = store.require_team(team_id)
    scope.can_manage_teams(principal).enforce(principal, "team.add_coach")

    coach = store.require_user(coach_id, "Coach not found")
    if coach.role != Role.COACH:
        raise ValidationError(
            "User is not a coach",
            errors=[{"field": "coachId", "message": "User must have the COACH role"}],
        )

    if store.is_coach_on_team(coach.id, team.id):
        return
    store.add(TeamCoach(team_id=team.id, coach_id=coach.id))
    store.commit("Coach already on this team")
    logger.info("Coach %s assigned to team %s", coach.id, team.id)


def remove_coach(store: ClubStore, principal: Principal, team_id: int, coach_id: int) -> None:
    team = store.require_team(team_id)
    scope.can_manage_teams(principal).enforce(principal, "team.remove_coach")

    link = store.get_team_coach(team.id, coach_id)
    if not link:
        raise NotFoundError("Coach not found on this team")
    store.delete(link)
    store.commit()
    logger.info("Coach %s removed from team %s", coach_id, team.id)


def get_roster(store: ClubStore, principal: Principal, team_id: int) -> Dict[str, Any]:
    team = store.require_team(team_id)
    scope.can_view_roster(principal, team, store).enforce(principal, "team.roster")

    athletes = store.db.exec(
        select(Athlete)
        .join(TeamAthlete, TeamAthlete.athlete_id == Athlete.id)
        .where(TeamAthlete.team_id == team.id)
        .order_by(Athlete.id)
    ).all()
    coaches = store.db.exec(
        select(User)
        .join(TeamCoach, TeamCoach.coach_id == User.id)
        .where(TeamCoach.team_id == team.id)
        .order_by(User.id)
    ).all()
    return {"team": team, "athletes": athletes, "coaches": coaches}
