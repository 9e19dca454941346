from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from main import app
from clubhub.auth import Principal, create_access_token, hash_password
from clubhub.clock import utcnow
from clubhub.database import get_session
from clubhub.enums import EventType, Role, UserStatus
from clubhub.models import Athlete, Event, EventInvitation, Team, TeamAthlete, TeamCoach, User
from clubhub.store import ClubStore

# Create in-memory database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Hashing is slow; every fixture user shares this password
PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture(name="session")
def session_fixture():
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="store")
def store_fixture(session: Session):
    return ClubStore(session)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session):
    counter = {"n": 0}

    def make_user(role=Role.ATHLETE, email=None, status=UserStatus.ACTIVE, **fields) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"{role.value.lower()}{counter['n']}@example.com",
            password_hash=PASSWORD_HASH,
            role=role,
            status=status,
            **fields
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return make_user


@pytest.fixture(name="make_athlete")
def make_athlete_fixture(session: Session, make_user):
    def make_athlete(user=None, **fields) -> Athlete:
        user = user or make_user(Role.ATHLETE)
        athlete = Athlete(user_id=user.id, **fields)
        session.add(athlete)
        session.commit()
        session.refresh(athlete)
        return athlete

    return make_athlete


@pytest.fixture(name="make_team")
def make_team_fixture(session: Session):
    counter = {"n": 0}

    def make_team(name=None, coaches=(), athletes=(), **fields) -> Team:
        counter["n"] += 1
        team = Team(name=name or f"Team {counter['n']}", **fields)
        session.add(team)
        session.commit()
        session.refresh(team)
        for coach in coaches:
            session.add(TeamCoach(team_id=team.id, coach_id=coach.id))
        for athlete in athletes:
            session.add(TeamAthlete(team_id=team.id, athlete_id=athlete.id))
        session.commit()
        return team

    return make_team


@pytest.fixture(name="make_event")
def make_event_fixture(session: Session):
    def make_event(creator, team=None, invitees=(), title="Practice", start_in=timedelta(days=1), **fields) -> Event:
        event = Event(
            title=title,
            type=fields.pop("type", EventType.TRAINING),
            start_time=utcnow() + start_in,
            team_id=team.id if team else None,
            created_by_id=creator.id,
            **fields
        )
        session.add(event)
        session.commit()
        session.refresh(event)
        for invitee in invitees:
            session.add(EventInvitation(event_id=event.id, user_id=invitee.id))
        session.commit()
        return event

    return make_event


@pytest.fixture(name="auth_headers")
def auth_headers_fixture():
    """Bearer headers for a user, so tests can switch callers freely."""
    def auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return auth_headers


def principal_for(user: User) -> Principal:
    return Principal(user_id=user.id, email=user.email, role=user.role)


@pytest.fixture(name="principal")
def principal_fixture():
    return principal_for
