from datetime import timedelta

from clubhub.enums import Role


def test_admin_overview_counts_everything(client, make_user, make_athlete, make_team, make_event, auth_headers):
    admin = make_user(Role.ADMIN)
    make_team(athletes=[make_athlete(), make_athlete()])
    make_team()
    make_event(admin, start_in=timedelta(days=2), title="Later")
    make_event(admin, start_in=timedelta(days=1), title="Sooner")
    make_event(admin, start_in=timedelta(days=-1), title="Past")

    response = client.get("/dashboard/overview", headers=auth_headers(admin))
    assert response.status_code == 200
    data = response.json()
    assert data["stats"] == {"teams": 2, "athletes": 2, "upcomingEvents": 2, "pendingInvitations": 0}
    assert [e["title"] for e in data["upcomingEvents"]] == ["Sooner", "Later"]


def test_coach_overview_is_scoped(client, make_user, make_athlete, make_team, make_event, auth_headers):
    admin = make_user(Role.ADMIN)
    coach = make_user(Role.COACH)
    shared = make_athlete()
    lions = make_team("Lions U18", coaches=[coach], athletes=[shared, make_athlete()])
    make_team("Lions U16", coaches=[coach], athletes=[shared])
    make_team("Falcons", athletes=[make_athlete()])
    make_event(admin, team=lions, title="Lions training")
    make_event(admin, invitees=[coach], title="Coaches meeting", start_in=timedelta(days=2))
    make_event(admin, title="Board meeting")

    data = client.get("/dashboard/overview", headers=auth_headers(coach)).json()
    assert data["stats"] == {"teams": 2, "athletes": 2, "upcomingEvents": 2, "pendingInvitations": 1}

    rows = {row["title"]: row for row in data["upcomingEvents"]}
    assert set(rows) == {"Lions training", "Coaches meeting"}
    assert rows["Lions training"]["teamName"] == "Lions U18"
    assert rows["Lions training"]["rsvpStatus"] is None
    assert rows["Coaches meeting"]["rsvpStatus"] == "PENDING"


def test_athlete_overview_without_profile(client, make_user, make_team, make_event, auth_headers):
    admin = make_user(Role.ADMIN)
    loner = make_user(Role.ATHLETE)
    make_team()
    make_event(admin, invitees=[loner])

    data = client.get("/dashboard/overview", headers=auth_headers(loner)).json()
    assert data["stats"] == {"teams": 0, "athletes": 0, "upcomingEvents": 1, "pendingInvitations": 1}


def test_player_profile(client, store, make_user, make_athlete, make_team, make_event, auth_headers):
    admin = make_user(Role.ADMIN)
    athlete = make_athlete(position="Midfielder")
    user = store.get_user(athlete.user_id)
    team = make_team("Lions U18", athletes=[athlete])
    make_team("Falcons")
    make_event(admin, team=team, title="Next match", start_in=timedelta(days=2))
    make_event(admin, team=team, title="Last match", start_in=timedelta(days=-2))
    make_event(admin, title="Someone else's event")

    response = client.get("/player-profile", headers=auth_headers(user))
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == user.id
    assert "passwordHash" not in data["user"]
    assert data["athlete"]["position"] == "Midfielder"
    assert [t["name"] for t in data["teams"]] == ["Lions U18"]
    assert [e["title"] for e in data["upcomingEvents"]] == ["Next match"]
    assert [e["title"] for e in data["recentEvents"]] == ["Last match"]


def test_player_profile_requires_athlete_role(client, make_user, auth_headers):
    coach = make_user(Role.COACH)
    response = client.get("/player-profile", headers=auth_headers(coach))
    assert response.status_code == 403


def test_player_profile_without_profile_is_not_found(client, make_user, auth_headers):
    loner = make_user(Role.ATHLETE)
    response = client.get("/player-profile", headers=auth_headers(loner))
    assert response.status_code == 404
    assert response.json()["message"] == "Athlete profile not found"
