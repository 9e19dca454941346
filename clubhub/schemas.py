from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .enums import (
    AthleteStatus,
    AttendanceStatus,
    DominantFoot,
    EventType,
    Role,
    RsvpStatus,
    TeamStatus,
    UserStatus,
)

T = TypeVar("T")


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Page(ApiModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int


class UserRead(ApiModel):
    """User record without the password hash."""
    id: int
    email: str
    role: Role
    status: UserStatus
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AthleteRead(ApiModel):
    id: int
    user_id: int
    position: Optional[str] = None
    dominant_foot: Optional[DominantFoot] = None
    status: AthleteStatus
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TeamRead(ApiModel):
    id: int
    name: str
    age_group: Optional[str] = None
    status: TeamStatus
    created_at: datetime
    updated_at: datetime


class InvitationRead(ApiModel):
    id: int
    event_id: int
    user_id: int
    rsvp_status: RsvpStatus
    attendance_status: Optional[AttendanceStatus] = None
    responded_at: Optional[datetime] = None


class EventRead(ApiModel):
    id: int
    title: str
    description: Optional[str] = None
    type: EventType
    location: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    team_id: Optional[int] = None
    created_by_id: int
    created_at: datetime
    updated_at: datetime


class EventDetail(EventRead):
    invitations: List[InvitationRead] = []
