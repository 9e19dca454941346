from typing import Any, Dict, Optional

from sqlmodel import col, or_, select

from .. import scope
from ..auth import Principal, hash_password
from ..clock import utcnow
from ..enums import Role, UserStatus
from ..errors import ConflictError, reject_nulls
from ..logger import get_logger
from ..models import Event, EventInvitation, TeamAthlete, TeamCoach, User
from ..pagination import contains_insensitive, paginate
from ..store import ClubStore

logger = get_logger(__name__)

EMAIL_CONFLICT = "Email already in use"


def ensure_email_available(store: ClubStore, email: str) -> None:
    if store.get_user_by_email(email):
        raise ConflictError(EMAIL_CONFLICT)


def register_user(
    store: ClubStore,
    email: str,
    password: str,
    role: Role = Role.ATHLETE,
    status: UserStatus = UserStatus.PENDING,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> User:
    """Create a user row after checking the email is free."""
    ensure_email_available(store, email)
    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role,
        status=status,
        first_name=first_name,
        last_name=last_name,
    )
    store.add(user)
    store.commit(EMAIL_CONFLICT)
    store.refresh(user)
    return user


def list_users(
    store: ClubStore,
    principal: Principal,
    page: int,
    page_size: int,
    search: Optional[str] = None,
    role: Optional[Role] = None,
    status: Optional[UserStatus] = None,
) -> Dict[str, Any]:
    scope.can_list_users(principal).enforce(principal, "user.list")

    statement = select(User)
    if search:
        statement = statement.where(or_(
            contains_insensitive(User.first_name, search),
            contains_insensitive(User.last_name, search),
            contains_insensitive(User.email, search),
        ))
    if role:
        statement = statement.where(User.role == role)
    if status:
        statement = statement.where(User.status == status)
    statement = statement.order_by(col(User.created_at).desc(), col(User.id).desc())
    return paginate(store.db, statement, page, page_size)


def get_user(store: ClubStore, principal: Principal, user_id: int) -> User:
    user = store.require_user(user_id)
    scope.can_read_user(principal, user).enforce(principal, "user.read")
    return user


def create_user(store: ClubStore, principal: Principal, data: Dict[str, Any]) -> User:
    scope.can_manage_users(principal).enforce(principal, "user.create")
    user = register_user(store, **data)
    logger.info("User %s created by %s", user.email, principal.user_id)
    return user


def update_user(
    store: ClubStore,
    principal: Principal,
    user_id: int,
    changes: Dict[str, Any]
) -> User:
    reject_nulls(changes, ("email", "password", "role", "status"))
    user = store.require_user(user_id)
    scope.can_update_user(principal, user, changes.keys()).enforce(principal, "user.update")

    email = changes.get("email")
    if email and email != user.email:
        ensure_email_available(store, email)

    password = changes.pop("password", None)
    if password:
        user.password_hash = hash_password(password)

    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = utcnow()

    store.add(user)
    store.commit(EMAIL_CONFLICT)
    store.refresh(user)
    return user


def delete_user(store: ClubStore, principal: Principal, user_id: int) -> None:
    """Remove a user with their athlete profile, memberships and invitations."""
    user = store.require_user(user_id)
    scope.can_manage_users(principal).enforce(principal, "user.delete")

    owned_event = store.db.exec(select(Event.id).where(Event.created_by_id == user.id)).first()
    if owned_event is not None:
        raise ConflictError("User still owns events")

    athlete = store.get_athlete_by_user(user.id)
    if athlete:
        for link in store.db.exec(select(TeamAthlete).where(TeamAthlete.athlete_id == athlete.id)).all():
            store.delete(link)
        store.delete(athlete)

    for link in store.db.exec(select(TeamCoach).where(TeamCoach.coach_id == user.id)).all():
        store.delete(link)
    for invitation in store.db.exec(select(EventInvitation).where(EventInvitation.user_id == user.id)).all():
        store.delete(invitation)

    store.delete(user)
    store.commit()
    logger.info("User %s removed by %s", user_id, principal.user_id)
