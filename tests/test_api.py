import logging

import pytest
from fastapi.testclient import TestClient

from main import app
from clubhub.database import get_session
from clubhub.enums import Role
from clubhub.errors import ConflictError
from clubhub.logger import get_logger
from clubhub.models import TeamCoach
from clubhub.store import ClubStore


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_unknown_route_uses_error_shape(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.json() == {"statusCode": 404, "error": "NOT_FOUND", "message": "Not Found"}


def test_wrong_method_uses_error_shape(client, make_user, auth_headers):
    admin = make_user(Role.ADMIN)
    response = client.put("/teams", json={}, headers=auth_headers(admin))
    assert response.status_code == 405
    assert response.json()["error"] == "METHOD_NOT_ALLOWED"


def test_bad_path_param_is_validation_error(client, make_user, auth_headers):
    admin = make_user(Role.ADMIN)
    response = client.get("/teams/abc", headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "team_id"


def test_cookie_session_is_accepted(client, make_user):
    user = make_user(Role.COACH)
    signin = client.post("/auth/signin", json={"email": user.email, "password": "password123"})
    assert signin.status_code == 200

    response = client.get("/auth/me")
    assert response.status_code == 200
    assert response.json()["id"] == user.id


def test_unexpected_error_returns_generic_500(session, make_user, auth_headers, monkeypatch, caplog):
    def broken_lookup(self, team_id):
        raise RuntimeError("connection to secret-host:5432 lost")

    monkeypatch.setattr(ClubStore, "get_team", broken_lookup)
    app.dependency_overrides[get_session] = lambda: session
    error_logger = logging.getLogger("clubhub.errors")
    error_logger.addHandler(caplog.handler)
    admin = make_user(Role.ADMIN)
    try:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/teams/7", headers=auth_headers(admin))
    finally:
        error_logger.removeHandler(caplog.handler)
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"statusCode": 500, "error": "INTERNAL", "message": "Internal server error"}
    assert "secret-host" not in response.text

    record = next(r for r in caplog.records if r.name == "clubhub.errors")
    message = record.getMessage()
    assert "GET /teams/7" in message
    assert f"principal={admin.id}" in message
    assert "team_id" in message
    assert record.exc_info is not None


def test_commit_maps_integrity_error_to_conflict(store, make_user, make_team):
    coach = make_user(Role.COACH)
    team = make_team(coaches=[coach])

    store.add(TeamCoach(team_id=team.id, coach_id=coach.id))
    with pytest.raises(ConflictError) as exc:
        store.commit("Coach already on this team")
    assert exc.value.message == "Coach already on this team"

    # The session is usable again after the rollback
    assert store.is_coach_on_team(coach.id, team.id)


def test_module_loggers_share_namespace_handler():
    first = get_logger("clubhub.services.teams")
    outside = get_logger("main")

    assert outside.name == "clubhub.main"
    assert first.handlers == [] and outside.handlers == []
    assert len(logging.getLogger("clubhub").handlers) == 1
