from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint

from ..clock import utcnow
from ..enums import TeamStatus


class Team(SQLModel, table=True):
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    age_group: Optional[str] = None
    status: TeamStatus = Field(default=TeamStatus.ACTIVE)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TeamCoach(SQLModel, table=True):
    __tablename__ = "team_coaches"
    __table_args__ = (UniqueConstraint("team_id", "coach_id", name="unique_team_coach"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    coach_id: int = Field(foreign_key="users.id", index=True)
    assigned_at: datetime = Field(default_factory=utcnow)


class TeamAthlete(SQLModel, table=True):
    __tablename__ = "team_athletes"
    __table_args__ = (UniqueConstraint("team_id", "athlete_id", name="unique_team_athlete"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    athlete_id: int = Field(foreign_key="athletes.id", index=True)
    joined_at: datetime = Field(default_factory=utcnow)
