from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr, Field

from ..auth import Principal
from ..dependencies import PageParams, get_current_principal, get_page_params, get_store
from ..enums import Role, UserStatus
from ..schemas import ApiModel, Page, UserRead
from ..services import users as user_service
from ..store import ClubStore

router = APIRouter(prefix="/users")


class UserCreate(ApiModel):
    email: EmailStr
    password: str = Field(min_length=8)
    role: Role
    status: UserStatus = UserStatus.PENDING
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserUpdate(ApiModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8)
    role: Optional[Role] = None
    status: Optional[UserStatus] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


@router.get("", response_model=Page[UserRead])
async def list_users(
    paging: PageParams = Depends(get_page_params),
    search: Optional[str] = None,
    role: Optional[Role] = None,
    user_status: Optional[UserStatus] = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return user_service.list_users(
        store, principal, paging.page, paging.page_size,
        search=search, role=role, status=user_status,
    )


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return user_service.create_user(store, principal, body.model_dump())


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    return user_service.get_user(store, principal, user_id)


@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    body: UserUpdate,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    """Partial update. Only admins may change role or status."""
    return user_service.update_user(store, principal, user_id, body.model_dump(exclude_unset=True))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    store: ClubStore = Depends(get_store)
):
    user_service.delete_user(store, principal, user_id)
