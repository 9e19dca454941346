from typing import Optional, Tuple

from ..auth import authenticate_user, create_access_token
from ..enums import Role, SELF_SIGNUP_ROLES
from ..errors import UnauthorizedError, ValidationError
from ..logger import get_logger
from ..models import User
from ..store import ClubStore
from .users import register_user

logger = get_logger(__name__)


def signup(
    store: ClubStore,
    email: str,
    password: str,
    role: Optional[Role] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> Tuple[User, str]:
    """Register a pending account and issue its first token."""
    role = role or Role.ATHLETE
    if role not in SELF_SIGNUP_ROLES:
        raise ValidationError(
            "Invalid role for signup",
            errors=[{"field": "role", "message": "Role must be COACH or ATHLETE"}],
        )

    user = register_user(
        store,
        email=email,
        password=password,
        role=role,
        first_name=first_name,
        last_name=last_name,
    )
    logger.info("New %s signup: %s", user.role.value, user.email)
    return user, create_access_token(user)


def signin(store: ClubStore, email: str, password: str) -> Tuple[User, str]:
    """
    Check credentials and issue a token.

    Non-active accounts still receive a token; they are stopped when the
    token is used, since status is re-checked on every request.
    """
    user = authenticate_user(store.db, email, password)
    if not user:
        raise UnauthorizedError("Invalid credentials")

    logger.info("User %s signed in", user.id)
    return user, create_access_token(user)
