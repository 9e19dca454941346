"""
Role and relationship scoping for every resource.

Each ``can_*`` function answers one row of the access table for a principal
and a resolved resource and returns a ``Decision``. ADMIN and STAFF are
allowed everywhere except user administration; COACH and ATHLETE access
depends on team membership, event authorship and invitations looked up
through the store. The ``*_list_filter`` functions express the same rules as
SQL predicates so list endpoints can page over the visible set directly.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import false, or_, true
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import col, select

from .auth import Principal
from .enums import PRIVILEGED_ROLES, Role
from .errors import ForbiddenError
from .logger import get_logger
from .models import Athlete, Event, EventInvitation, Team, TeamAthlete, TeamCoach, User
from .store import ClubStore

logger = get_logger(__name__)

# User fields only an admin may change
USER_ADMIN_FIELDS = frozenset({"role", "status"})


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def enforce(self, principal: Principal, action: str) -> None:
        """Raise ``ForbiddenError`` when the decision is a denial."""
        if self.allowed:
            return
        logger.warning(
            "Denied %s for user %s (%s): %s",
            action, principal.user_id, principal.role.value, self.reason,
        )
        raise ForbiddenError(self.reason or "Access denied")


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


def is_privileged(principal: Principal) -> bool:
    return principal.role in PRIVILEGED_ROLES


# Athletes

def can_read_athlete(principal: Principal, athlete: Athlete, store: ClubStore) -> Decision:
    if is_privileged(principal):
        return ALLOW
    if principal.role == Role.COACH:
        if store.coach_shares_team_with_athlete(principal.user_id, athlete.id):
            return ALLOW
        return deny("Coach not assigned to athlete team")
    if principal.role == Role.ATHLETE:
        if athlete.user_id == principal.user_id:
            return ALLOW
        return deny("Access denied to athlete profile")
    return deny("Access denied")


def can_update_athlete(principal: Principal, athlete: Athlete, store: ClubStore) -> Decision:
    if principal.role == Role.ATHLETE:
        return deny("Athletes cannot edit athlete profiles")
    return can_read_athlete(principal, athlete, store)


def can_manage_athletes(principal: Principal) -> Decision:
    """Create and delete athlete profiles."""
    if is_privileged(principal):
        return ALLOW
    return deny("Only admin or staff can create or delete athletes")


def can_list_athletes(principal: Principal) -> Decision:
    if is_privileged(principal):
        return ALLOW
    return deny("Only admin or staff can list athletes")


# Teams

def can_read_team(principal: Principal, team: Team, store: ClubStore) -> Decision:
    if is_privileged(principal):
        return ALLOW
    if principal.role == Role.COACH:
        if store.is_coach_on_team(principal.user_id, team.id):
            return ALLOW
        return deny("Coach not assigned to this team")
    if principal.role == Role.ATHLETE:
        athlete = store.get_athlete_by_user(principal.user_id)
        if not athlete:
            return deny("Athlete profile not found")
        if store.is_athlete_on_team(athlete.id, team.id):
            return ALLOW
        return deny("Athlete not assigned to this team")
    return deny("Access denied")


can_view_roster = can_read_team


def can_manage_teams(principal: Principal) -> Decision:
    """Create, update, delete teams and change their memberships."""
    if is_privileged(principal):
        return ALLOW
    return deny("Only admin or staff can manage teams")


def team_list_filter(principal: Principal, store: ClubStore) -> ColumnElement:
    if is_privileged(principal):
        return true()
    if principal.role == Role.COACH:
        coach_teams = select(TeamCoach.team_id).where(TeamCoach.coach_id == principal.user_id)
        return col(Team.id).in_(coach_teams)
    if principal.role == Role.ATHLETE:
        athlete = store.get_athlete_by_user(principal.user_id)
        if not athlete:
            return false()
        athlete_teams = select(TeamAthlete.team_id).where(TeamAthlete.athlete_id == athlete.id)
        return col(Team.id).in_(athlete_teams)
    return false()


# Events

def can_create_event(principal: Principal, team_id: Optional[int], store: ClubStore) -> Decision:
    if is_privileged(principal):
        return ALLOW
    if principal.role == Role.COACH:
        if team_id is None or store.is_coach_on_team(principal.user_id, team_id):
            return ALLOW
        return deny("Coach not assigned to this team")
    return deny("Only admin, staff or coaches can create events")


def can_read_event(principal: Principal, event: Event, store: ClubStore) -> Decision:
    if is_privileged(principal):
        return ALLOW
    if principal.role == Role.COACH:
        if (
            event.created_by_id == principal.user_id
            or store.is_invited(event.id, principal.user_id)
            or (event.team_id is not None and store.is_coach_on_team(principal.user_id, event.team_id))
        ):
            return ALLOW
        return deny("Access denied")
    if principal.role == Role.ATHLETE:
        if store.is_invited(event.id, principal.user_id):
            return ALLOW
        if event.team_id is not None:
            athlete = store.get_athlete_by_user(principal.user_id)
            if athlete and store.is_athlete_on_team(athlete.id, event.team_id):
                return ALLOW
        return deny("Access denied")
    return deny("Access denied")


def can_edit_event(principal: Principal, event: Event, store: ClubStore) -> Decision:
    """Update, delete, invite to and record attendance for an event."""
    if is_privileged(principal):
        return ALLOW
    if principal.role == Role.COACH:
        if event.created_by_id == principal.user_id:
            return ALLOW
        if event.team_id is not None and store.is_coach_on_team(principal.user_id, event.team_id):
            return ALLOW
        return deny("Coach cannot modify this event")
    return deny("Only admin/staff or assigned coach can modify")


def can_rsvp(principal: Principal, event: Event, store: ClubStore) -> Decision:
    if store.is_invited(event.id, principal.user_id):
        return ALLOW
    return deny("Not invited to this event")


def event_list_filter(principal: Principal, store: ClubStore) -> ColumnElement:
    if is_privileged(principal):
        return true()

    invited = col(Event.id).in_(
        select(EventInvitation.event_id).where(EventInvitation.user_id == principal.user_id)
    )
    if principal.role == Role.COACH:
        coach_teams = select(TeamCoach.team_id).where(TeamCoach.coach_id == principal.user_id)
        return or_(
            col(Event.created_by_id) == principal.user_id,
            invited,
            col(Event.team_id).in_(coach_teams),
        )
    if principal.role == Role.ATHLETE:
        athlete = store.get_athlete_by_user(principal.user_id)
        if not athlete:
            return invited
        athlete_teams = select(TeamAthlete.team_id).where(TeamAthlete.athlete_id == athlete.id)
        return or_(invited, col(Event.team_id).in_(athlete_teams))
    return false()


# Users

def can_list_users(principal: Principal) -> Decision:
    if is_privileged(principal):
        return ALLOW
    return deny("Only admin or staff can list users")


def can_read_user(principal: Principal, user: User) -> Decision:
    if is_privileged(principal) or user.id == principal.user_id:
        return ALLOW
    return deny("Access denied to user")


def can_update_user(principal: Principal, user: User, fields: Iterable[str]) -> Decision:
    if principal.role == Role.ADMIN:
        return ALLOW
    if user.id != principal.user_id:
        return deny("Only admins can edit other users")
    if USER_ADMIN_FIELDS.intersection(fields):
        return deny("Only admins can change role or status")
    return ALLOW


def can_manage_users(principal: Principal) -> Decision:
    """Create and delete users."""
    if principal.role == Role.ADMIN:
        return ALLOW
    return deny("Only admins can create or delete users")
