from typing import Any, Dict, List, Sequence

from sqlalchemy import func
from sqlmodel import col, select

from .. import scope
from ..auth import Principal
from ..clock import utcnow
from ..enums import Role, RsvpStatus
from ..errors import ForbiddenError, NotFoundError
from ..models import Athlete, Event, EventInvitation, Team, TeamAthlete, User
from ..store import ClubStore

UPCOMING_LIMIT = 5
PROFILE_UPCOMING_LIMIT = 10
PROFILE_RECENT_LIMIT = 5


def _count(store: ClubStore, statement) -> int:
    return store.db.exec(select(func.count()).select_from(statement.subquery())).one()


def _distinct_athletes(store: ClubStore, team_ids: Sequence[int]) -> int:
    if not team_ids:
        return 0
    statement = (
        select(TeamAthlete.athlete_id)
        .where(col(TeamAthlete.team_id).in_(team_ids))
        .distinct()
    )
    return _count(store, statement)


def _event_rows(store: ClubStore, events: Sequence[Event], user_id: int) -> List[Dict[str, Any]]:
    """Flatten events with their team name and the user's invitation state."""
    team_ids = {event.team_id for event in events if event.team_id is not None}
    team_names = {}
    if team_ids:
        teams = store.db.exec(select(Team).where(col(Team.id).in_(team_ids))).all()
        team_names = {team.id: team.name for team in teams}

    invitations = {}
    if events:
        statement = select(EventInvitation).where(
            EventInvitation.user_id == user_id,
            col(EventInvitation.event_id).in_([event.id for event in events]),
        )
        invitations = {inv.event_id: inv for inv in store.db.exec(statement).all()}

    rows = []
    for event in events:
        invitation = invitations.get(event.id)
        rows.append({
            "id": event.id,
            "title": event.title,
            "type": event.type,
            "start_time": event.start_time,
            "team_id": event.team_id,
            "team_name": team_names.get(event.team_id),
            "rsvp_status": invitation.rsvp_status if invitation else None,
            "attendance_status": invitation.attendance_status if invitation else None,
        })
    return rows


def get_overview(store: ClubStore, principal: Principal) -> Dict[str, Any]:
    """Headline counts and the next few events visible to the principal."""
    now = utcnow()

    if scope.is_privileged(principal):
        teams = _count(store, select(Team.id))
        athletes = _count(store, select(Athlete.id))
    else:
        if principal.role == Role.COACH:
            team_ids = store.coach_team_ids(principal.user_id)
        else:
            athlete = store.get_athlete_by_user(principal.user_id)
            team_ids = store.athlete_team_ids(athlete.id) if athlete else []
        teams = len(team_ids)
        athletes = _distinct_athletes(store, team_ids)

    upcoming = (
        select(Event)
        .where(scope.event_list_filter(principal, store))
        .where(Event.start_time >= now)
    )
    upcoming_count = _count(store, upcoming)
    upcoming_events = store.db.exec(
        upcoming.order_by(col(Event.start_time).asc()).limit(UPCOMING_LIMIT)
    ).all()

    pending = _count(store, select(EventInvitation.id).where(
        EventInvitation.user_id == principal.user_id,
        EventInvitation.rsvp_status == RsvpStatus.PENDING,
    ))

    return {
        "stats": {
            "teams": teams,
            "athletes": athletes,
            "upcoming_events": upcoming_count,
            "pending_invitations": pending,
        },
        "upcoming_events": _event_rows(store, upcoming_events, principal.user_id),
    }


def get_player_profile(store: ClubStore, principal: Principal) -> Dict[str, Any]:
    """The athlete's own profile, teams and schedule."""
    if principal.role != Role.ATHLETE:
        raise ForbiddenError("Only athletes can access player profile")

    athlete = store.get_athlete_by_user(principal.user_id)
    if not athlete:
        raise NotFoundError("Athlete profile not found")
    user = store.db.get(User, principal.user_id)

    teams = store.db.exec(
        select(Team)
        .join(TeamAthlete, TeamAthlete.team_id == Team.id)
        .where(TeamAthlete.athlete_id == athlete.id)
        .order_by(Team.name)
    ).all()

    now = utcnow()
    visible = select(Event).where(scope.event_list_filter(principal, store))
    upcoming = store.db.exec(
        visible.where(Event.start_time >= now)
        .order_by(col(Event.start_time).asc())
        .limit(PROFILE_UPCOMING_LIMIT)
    ).all()
    recent = store.db.exec(
        visible.where(Event.start_time < now)
        .order_by(col(Event.start_time).desc())
        .limit(PROFILE_RECENT_LIMIT)
    ).all()

    return {
        "user": user,
        "athlete": athlete,
        "teams": teams,
        "upcoming_events": _event_rows(store, upcoming, principal.user_id),
        "recent_events": _event_rows(store, recent, principal.user_id),
    }
