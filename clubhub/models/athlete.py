from datetime import date, datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from ..clock import utcnow
from ..enums import AthleteStatus, DominantFoot


class Athlete(SQLModel, table=True):
    """Sporting profile of a user; at most one per user."""
    __tablename__ = "athletes"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True, index=True)
    position: Optional[str] = None
    dominant_foot: Optional[DominantFoot] = None
    status: AthleteStatus = Field(default=AthleteStatus.ACTIVE)
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
