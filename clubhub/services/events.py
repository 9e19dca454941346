from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlmodel import col, select

from .. import scope
from ..auth import Principal
from ..clock import as_utc, utcnow
from ..enums import AttendanceStatus, EventType, RsvpStatus
from ..errors import NotFoundError, ValidationError, reject_nulls
from ..logger import get_logger
from ..models import Event, EventInvitation
from ..pagination import contains_insensitive, paginate
from ..store import ClubStore

logger = get_logger(__name__)


def _check_times(start_time: datetime, end_time: Optional[datetime]) -> None:
    if end_time is not None and end_time < start_time:
        raise ValidationError(
            "Invalid event times",
            errors=[{"field": "endTime", "message": "End time must not be before start time"}],
        )


def _require_invitees(store: ClubStore, invitee_ids: Iterable[int]) -> List[int]:
    unique_ids = list(dict.fromkeys(invitee_ids))
    for user_id in unique_ids:
        store.require_user(user_id, f"User {user_id} to invite not found")
    return unique_ids


def _invite(store: ClubStore, event_id: int, user_ids: Iterable[int]) -> None:
    for user_id in user_ids:
        if not store.is_invited(event_id, user_id):
            store.add(EventInvitation(event_id=event_id, user_id=user_id))


def _invitations(store: ClubStore, event_id: int) -> List[EventInvitation]:
    statement = (
        select(EventInvitation)
        .where(EventInvitation.event_id == event_id)
        .order_by(EventInvitation.id)
    )
    return list(store.db.exec(statement).all())


def list_events(
    store: ClubStore,
    principal: Principal,
    page: int,
    page_size: int,
    search: Optional[str] = None,
    type: Optional[EventType] = None,
    team_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Page over the events visible to the principal, soonest first."""
    statement = select(Event).where(scope.event_list_filter(principal, store))
    if search:
        statement = statement.where(contains_insensitive(Event.title, search))
    if type:
        statement = statement.where(Event.type == type)
    if team_id is not None:
        statement = statement.where(Event.team_id == team_id)
    statement = statement.order_by(col(Event.start_time).asc(), col(Event.id).asc())
    return paginate(store.db, statement, page, page_size)


def get_event(store: ClubStore, principal: Principal, event_id: int) -> Dict[str, Any]:
    event = store.require_event(event_id)
    scope.can_read_event(principal, event, store).enforce(principal, "event.read")
    return {**event.model_dump(), "invitations": _invitations(store, event.id)}


def create_event(store: ClubStore, principal: Principal, data: Dict[str, Any]) -> Event:
    invitee_ids = data.pop("invitee_ids", None) or []
    team_id = data.get("team_id")

    if team_id is not None:
        store.require_team(team_id)
    invitee_ids = _require_invitees(store, invitee_ids)
    scope.can_create_event(principal, team_id, store).enforce(principal, "event.create")

    data["start_time"] = as_utc(data["start_time"])
    data["end_time"] = as_utc(data.get("end_time"))
    _check_times(data["start_time"], data["end_time"])

    event = Event(**data, created_by_id=principal.user_id)
    store.add(event)
    store.flush()
    _invite(store, event.id, invitee_ids)
    store.commit()
    store.refresh(event)
    logger.info("Event %s created by %s with %d invitees", event.id, principal.user_id, len(invitee_ids))
    return event


def update_event(
    store: ClubStore,
    principal: Principal,
    event_id: int,
    changes: Dict[str, Any]
) -> Event:
    reject_nulls(changes, ("title", "type", "start_time"))
    invitee_ids = changes.pop("invitee_ids", None) or []

    event = store.require_event(event_id)
    new_team_id = changes.get("team_id")
    if new_team_id is not None:
        store.require_team(new_team_id)
    invitee_ids = _require_invitees(store, invitee_ids)

    scope.can_edit_event(principal, event, store).enforce(principal, "event.update")
    if new_team_id is not None and new_team_id != event.team_id:
        scope.can_create_event(principal, new_team_id, store).enforce(principal, "event.move")

    for field in ("start_time", "end_time"):
        if field in changes:
            changes[field] = as_utc(changes[field])
    _check_times(changes.get("start_time", event.start_time), changes.get("end_time", event.end_time))

    for field, value in changes.items():
        setattr(event, field, value)
    event.updated_at = utcnow()

    store.add(event)
    _invite(store, event.id, invitee_ids)
    store.commit()
    store.refresh(event)
    return event


def delete_event(store: ClubStore, principal: Principal, event_id: int) -> None:
    event = store.require_event(event_id)
    scope.can_edit_event(principal, event, store).enforce(principal, "event.delete")

    for invitation in _invitations(store, event.id):
        store.delete(invitation)
    store.delete(event)
    store.commit()
    logger.info("Event %s deleted by %s", event_id, principal.user_id)


def invite_user(store: ClubStore, principal: Principal, event_id: int, user_id: int) -> EventInvitation:
    """Invite a user; inviting someone twice returns the existing invitation."""
    store.require_user(user_id, "User to invite not found")
    event = store.require_event(event_id)
    scope.can_edit_event(principal, event, store).enforce(principal, "event.invite")

    invitation = store.get_invitation(event.id, user_id)
    if invitation:
        return invitation

    invitation = EventInvitation(event_id=event.id, user_id=user_id)
    store.add(invitation)
    store.commit("User already invited")
    store.refresh(invitation)
    logger.info("User %s invited to event %s", user_id, event.id)
    return invitation


def rsvp(store: ClubStore, principal: Principal, event_id: int, status: RsvpStatus) -> EventInvitation:
    """Record the principal's answer on their existing invitation."""
    event = store.require_event(event_id)
    scope.can_rsvp(principal, event, store).enforce(principal, "event.rsvp")

    invitation = store.get_invitation(event.id, principal.user_id)
    invitation.rsvp_status = status
    invitation.responded_at = utcnow()
    store.add(invitation)
    store.commit()
    store.refresh(invitation)
    return invitation


def record_attendance(
    store: ClubStore,
    principal: Principal,
    event_id: int,
    user_id: int,
    attendance_status: Optional[AttendanceStatus],
) -> EventInvitation:
    event = store.require_event(event_id)
    scope.can_edit_event(principal, event, store).enforce(principal, "event.attendance")

    invitation = store.get_invitation(event.id, user_id)
    if not invitation:
        raise NotFoundError("Invitation not found")
    invitation.attendance_status = attendance_status
    store.add(invitation)
    store.commit()
    store.refresh(invitation)
    return invitation
