from datetime import datetime, timedelta, timezone

from clubhub.clock import as_utc, utcnow
from clubhub.enums import Role
from clubhub.models import Event, Team


def test_as_utc_normalises_input():
    assert as_utc(None) is None
    assert as_utc(datetime(2030, 1, 1, 9, 0)) == datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc)

    paris = timezone(timedelta(hours=1))
    converted = as_utc(datetime(2030, 1, 1, 9, 0, tzinfo=paris))
    assert converted == datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)
    assert converted.utcoffset() == timedelta(0)


def test_stored_timestamps_round_trip(client, session, make_user, auth_headers):
    admin = make_user(Role.ADMIN)
    before = utcnow()

    created = client.post("/teams", json={"name": "Lions U18"}, headers=auth_headers(admin))
    assert created.status_code == 201
    updated = client.patch(f"/teams/{created.json()['id']}", json={"ageGroup": "U18"}, headers=auth_headers(admin))
    assert updated.status_code == 200

    session.expire_all()
    team = session.get(Team, created.json()["id"])
    assert team.created_at.utcoffset() == timedelta(0)
    assert before - timedelta(seconds=1) <= team.created_at <= team.updated_at <= utcnow()


def test_naive_event_times_are_taken_as_utc(client, session, make_user, auth_headers):
    admin = make_user(Role.ADMIN)
    response = client.post("/events", json={
        "title": "Friendly",
        "type": "MATCH",
        "startTime": "2030-06-01T12:00:00",
    }, headers=auth_headers(admin))
    assert response.status_code == 201

    session.expire_all()
    event = session.get(Event, response.json()["id"])
    assert event.start_time == datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)
    assert event.end_time is None
