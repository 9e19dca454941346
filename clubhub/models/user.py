from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from ..clock import utcnow
from ..enums import Role, UserStatus


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    role: Role = Field(default=Role.ATHLETE, index=True)
    status: UserStatus = Field(default=UserStatus.PENDING)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
