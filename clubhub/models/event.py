from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint

from ..clock import utcnow
from ..enums import AttendanceStatus, EventType, RsvpStatus


class Event(SQLModel, table=True):
    __tablename__ = "events"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None
    type: EventType
    location: Optional[str] = None
    start_time: datetime = Field(index=True)
    end_time: Optional[datetime] = None
    team_id: Optional[int] = Field(default=None, foreign_key="teams.id", index=True)
    created_by_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class EventInvitation(SQLModel, table=True):
    __tablename__ = "event_invitations"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="unique_event_user"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="events.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    rsvp_status: RsvpStatus = Field(default=RsvpStatus.PENDING)
    attendance_status: Optional[AttendanceStatus] = None
    responded_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
