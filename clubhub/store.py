from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .errors import ConflictError, NotFoundError
from .models import Athlete, Event, EventInvitation, Team, TeamAthlete, TeamCoach, User


class ClubStore:
    """
    Persistence port over a single SQLModel session.

    Holds the point lookups the scope rules depend on plus the commit
    helper that turns constraint violations into conflicts. Everything a
    request reads and writes goes through one session, so the checks and
    the mutation they gate share a transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    # Lookups

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.exec(select(User).where(User.email == email)).first()

    def get_athlete(self, athlete_id: int) -> Optional[Athlete]:
        return self.db.get(Athlete, athlete_id)

    def get_athlete_by_user(self, user_id: int) -> Optional[Athlete]:
        return self.db.exec(select(Athlete).where(Athlete.user_id == user_id)).first()

    def get_team(self, team_id: int) -> Optional[Team]:
        return self.db.get(Team, team_id)

    def get_team_by_name(self, name: str) -> Optional[Team]:
        return self.db.exec(select(Team).where(Team.name == name)).first()

    def get_event(self, event_id: int) -> Optional[Event]:
        return self.db.get(Event, event_id)

    def get_invitation(self, event_id: int, user_id: int) -> Optional[EventInvitation]:
        statement = select(EventInvitation).where(
            EventInvitation.event_id == event_id,
            EventInvitation.user_id == user_id,
        )
        return self.db.exec(statement).first()

    def get_team_coach(self, team_id: int, coach_id: int) -> Optional[TeamCoach]:
        statement = select(TeamCoach).where(
            TeamCoach.team_id == team_id,
            TeamCoach.coach_id == coach_id,
        )
        return self.db.exec(statement).first()

    def get_team_athlete(self, team_id: int, athlete_id: int) -> Optional[TeamAthlete]:
        statement = select(TeamAthlete).where(
            TeamAthlete.team_id == team_id,
            TeamAthlete.athlete_id == athlete_id,
        )
        return self.db.exec(statement).first()

    # Membership facts

    def is_coach_on_team(self, coach_id: int, team_id: int) -> bool:
        return self.get_team_coach(team_id, coach_id) is not None

    def is_athlete_on_team(self, athlete_id: int, team_id: int) -> bool:
        return self.get_team_athlete(team_id, athlete_id) is not None

    def coach_shares_team_with_athlete(self, coach_id: int, athlete_id: int) -> bool:
        statement = (
            select(TeamAthlete.id)
            .join(TeamCoach, TeamCoach.team_id == TeamAthlete.team_id)
            .where(TeamAthlete.athlete_id == athlete_id, TeamCoach.coach_id == coach_id)
        )
        return self.db.exec(statement).first() is not None

    def is_invited(self, event_id: int, user_id: int) -> bool:
        return self.get_invitation(event_id, user_id) is not None

    def coach_team_ids(self, coach_id: int) -> List[int]:
        statement = select(TeamCoach.team_id).where(TeamCoach.coach_id == coach_id)
        return list(self.db.exec(statement).all())

    def athlete_team_ids(self, athlete_id: int) -> List[int]:
        statement = select(TeamAthlete.team_id).where(TeamAthlete.athlete_id == athlete_id)
        return list(self.db.exec(statement).all())

    # Required lookups

    def require_user(self, user_id: int, message: str = "User not found") -> User:
        user = self.get_user(user_id)
        if not user:
            raise NotFoundError(message)
        return user

    def require_athlete(self, athlete_id: int) -> Athlete:
        athlete = self.get_athlete(athlete_id)
        if not athlete:
            raise NotFoundError("Athlete not found")
        return athlete

    def require_team(self, team_id: int) -> Team:
        team = self.get_team(team_id)
        if not team:
            raise NotFoundError("Team not found")
        return team

    def require_event(self, event_id: int) -> Event:
        event = self.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    # Writes

    def add(self, *instances) -> None:
        for instance in instances:
            self.db.add(instance)

    def delete(self, instance) -> None:
        self.db.delete(instance)

    def commit(self, conflict_message: str = "Resource already exists") -> None:
        """Commit the session, mapping uniqueness violations to a conflict."""
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(conflict_message)

    def refresh(self, instance) -> None:
        self.db.refresh(instance)

    def flush(self) -> None:
        self.db.flush()
