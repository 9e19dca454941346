from sqlmodel import select

from clubhub.auth import verify_password
from clubhub.enums import Role, UserStatus
from clubhub.models import Athlete, EventInvitation, TeamCoach, User


def test_admin_creates_user(client, session, make_user, auth_headers):
    admin = make_user(Role.ADMIN)

    response = client.post("/users", json={
        "email": "coach@example.com",
        "password": "longenough",
        "role": "COACH",
        "status": "ACTIVE",
        "lastName": "Wiegman",
    }, headers=auth_headers(admin))

    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "COACH"
    assert data["status"] == "ACTIVE"
    assert data["lastName"] == "Wiegman"
    assert "passwordHash" not in data

    stored = session.get(User, data["id"])
    assert verify_password("longenough", stored.password_hash)


def test_staff_cannot_create_user(client, make_user, auth_headers):
    staff = make_user(Role.STAFF)
    response = client.post("/users", json={
        "email": "new@example.com",
        "password": "longenough",
        "role": "COACH",
    }, headers=auth_headers(staff))
    assert response.status_code == 403


def test_create_user_duplicate_email(client, make_user, auth_headers):
    admin = make_user(Role.ADMIN)
    existing = make_user()
    response = client.post("/users", json={
        "email": existing.email,
        "password": "longenough",
        "role": "ATHLETE",
    }, headers=auth_headers(admin))
    assert response.status_code == 409


def test_list_users_for_staff_only(client, make_user, auth_headers):
    staff = make_user(Role.STAFF)
    coach = make_user(Role.COACH)
    make_user(Role.ATHLETE, status=UserStatus.PENDING)

    everyone = client.get("/users", headers=auth_headers(staff)).json()
    assert everyone["total"] == 3

    coaches = client.get("/users", params={"role": "COACH"}, headers=auth_headers(staff)).json()
    assert [u["id"] for u in coaches["items"]] == [coach.id]

    pending = client.get("/users", params={"status": "PENDING"}, headers=auth_headers(staff)).json()
    assert pending["total"] == 1

    assert client.get("/users", headers=auth_headers(coach)).status_code == 403


def test_read_self_or_privileged(client, make_user, auth_headers):
    coach = make_user(Role.COACH)
    other = make_user(Role.ATHLETE)

    assert client.get(f"/users/{coach.id}", headers=auth_headers(coach)).status_code == 200
    assert client.get(f"/users/{other.id}", headers=auth_headers(coach)).status_code == 403
    assert client.get("/users/999", headers=auth_headers(coach)).status_code == 404


def test_self_update_without_role_change(client, session, make_user, auth_headers):
    athlete = make_user(Role.ATHLETE)
    headers = auth_headers(athlete)

    response = client.patch(f"/users/{athlete.id}", json={
        "firstName": "Alexia",
        "password": "brandnewpass",
    }, headers=headers)
    assert response.status_code == 200
    assert response.json()["firstName"] == "Alexia"

    session.refresh(athlete)
    assert verify_password("brandnewpass", athlete.password_hash)

    response = client.patch(f"/users/{athlete.id}", json={"role": "ADMIN"}, headers=headers)
    assert response.status_code == 403
    session.refresh(athlete)
    assert athlete.role == Role.ATHLETE


def test_admin_activates_user(client, make_user, auth_headers):
    admin = make_user(Role.ADMIN)
    pending = make_user(Role.COACH, status=UserStatus.PENDING)

    assert client.get("/auth/me", headers=auth_headers(pending)).status_code == 403
    response = client.patch(f"/users/{pending.id}", json={"status": "ACTIVE"}, headers=auth_headers(admin))
    assert response.status_code == 200
    assert client.get("/auth/me", headers=auth_headers(pending)).status_code == 200


def test_update_email_conflict_and_nulls(client, make_user, auth_headers):
    admin = make_user(Role.ADMIN)
    first, second = make_user(), make_user()
    headers = auth_headers(admin)

    assert client.patch(f"/users/{second.id}", json={"email": first.email}, headers=headers).status_code == 409

    response = client.patch(f"/users/{second.id}", json={"email": None}, headers=headers)
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


def test_delete_user_with_owned_events_conflicts(client, make_user, make_event, auth_headers):
    admin = make_user(Role.ADMIN)
    coach = make_user(Role.COACH)
    make_event(coach)

    response = client.delete(f"/users/{coach.id}", headers=auth_headers(admin))
    assert response.status_code == 409
    assert response.json()["message"] == "User still owns events"


def test_delete_user_cleans_up(client, session, make_user, make_athlete, make_team, make_event, auth_headers):
    admin = make_user(Role.ADMIN)
    coach = make_user(Role.COACH)
    athlete = make_athlete()
    athlete_user_id = athlete.user_id
    make_team(coaches=[coach], athletes=[athlete])
    make_event(admin, invitees=[coach])
    coach_id = coach.id

    assert client.delete(f"/users/{coach_id}", headers=auth_headers(admin)).status_code == 204
    assert client.delete(f"/users/{athlete_user_id}", headers=auth_headers(admin)).status_code == 204

    session.expire_all()
    assert session.get(User, coach_id) is None
    assert session.exec(select(TeamCoach).where(TeamCoach.coach_id == coach_id)).all() == []
    assert session.exec(select(EventInvitation).where(EventInvitation.user_id == coach_id)).all() == []
    assert session.exec(select(Athlete).where(Athlete.user_id == athlete_user_id)).all() == []
