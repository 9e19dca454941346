from typing import Optional
from fastapi import APIRouter, Depends, Response, status
from pydantic import EmailStr, Field

from ..auth import Principal
from ..config import COOKIE_SECURE, SESSION_COOKIE_NAME, TOKEN_EXPIRE_HOURS
from ..dependencies import get_current_principal, get_store
from ..enums import Role
from ..schemas import ApiModel, UserRead
from ..services import auth as auth_service
from ..store import ClubStore

router = APIRouter(prefix="/auth")


class SignUpRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=8)
    role: Optional[Role] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class SignInRequest(ApiModel):
    email: EmailStr
    password: str


class MeResponse(ApiModel):
    id: int
    email: str
    role: Role


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=TOKEN_EXPIRE_HOURS * 60 * 60,
        path="/",
    )


# Sync handlers: bcrypt runs in the threadpool, off the event loop
@router.post("/signup", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignUpRequest,
    response: Response,
    store: ClubStore = Depends(get_store)
):
    """Register a new (pending) account and start a session."""
    user, token = auth_service.signup(
        store,
        email=body.email,
        password=body.password,
        role=body.role,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    set_session_cookie(response, token)
    return user


@router.post("/signin", response_model=UserRead)
def signin(
    body: SignInRequest,
    response: Response,
    store: ClubStore = Depends(get_store)
):
    """Check credentials and start a session."""
    user, token = auth_service.signin(store, body.email, body.password)
    set_session_cookie(response, token)
    return user


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
async def signout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")


@router.get("/me", response_model=MeResponse)
async def me(principal: Principal = Depends(get_current_principal)):
    """The current principal, with role as stored now."""
    return MeResponse(id=principal.user_id, email=principal.email, role=principal.role)
