from dataclasses import dataclass
from typing import Optional
from fastapi import Request, Depends, Query
from sqlmodel import Session

from .auth import Principal, decode_access_token
from .config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SESSION_COOKIE_NAME
from .database import get_session
from .enums import UserStatus
from .errors import ForbiddenError, UnauthorizedError
from .store import ClubStore


def get_store(db: Session = Depends(get_session)) -> ClubStore:
    """Persistence port bound to the request's session."""
    return ClubStore(db)


def extract_token(request: Request) -> Optional[str]:
    """Read the session token from the cookie, falling back to a bearer header."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def get_current_principal(
    request: Request,
    store: ClubStore = Depends(get_store)
) -> Principal:
    """
    Resolve the caller from their token.

    Role and status always come from the stored user, never from the token
    claims, so demotions and deactivations apply on the next request.
    """
    token = extract_token(request)
    if not token:
        raise UnauthorizedError("Not authenticated")

    user_id = decode_access_token(token)
    user = store.get_user(user_id)
    if not user:
        raise UnauthorizedError("User no longer exists")

    if user.status != UserStatus.ACTIVE:
        raise ForbiddenError("Account is not active")

    principal = Principal(user_id=user.id, email=user.email, role=user.role)
    request.state.principal = principal
    return principal


@dataclass(frozen=True)
class PageParams:
    page: int
    page_size: int


def get_page_params(
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize")
) -> PageParams:
    return PageParams(page=page, page_size=page_size)
