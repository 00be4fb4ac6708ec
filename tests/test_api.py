from __future__ import annotations

ORGANIZER = {"X-User-Id": "org-1"}
OFFICIAL = {"X-User-Id": "ref-1"}
STRANGER = {"X-User-Id": "fan-42"}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_list_matches_filters(client):
    data = client.get("/api/matches", params={"sport": "kabaddi"}).json()
    assert data["count"] == 1
    assert data["matches"][0]["id"] == "m-kabaddi-1"

    assert client.get("/api/matches", params={"status": "live"}).json()["count"] == 0


def test_create_and_fetch_match(client):
    body = {
        "sport": "volleyball",
        "tournament": {"id": "t-2", "name": "City Cup", "organizer": "org-2"},
        "team1": "Spikers",
        "team2": "Blockers",
        "officials": ["ref-9"],
        "match_id": "m-vb-2",
    }
    resp = client.post("/api/matches", json=body)
    assert resp.status_code == 201
    assert resp.json()["status"] == "scheduled"

    assert client.get("/api/matches/m-vb-2").json()["team1"] == "Spikers"
    assert client.post("/api/matches", json=body).status_code == 409


def test_create_match_rejects_unknown_sport(client):
    body = {
        "sport": "chess",
        "tournament": {"id": "t-2", "organizer": "org-2"},
        "team1": "A",
        "team2": "B",
    }
    assert client.post("/api/matches", json=body).status_code == 422


def test_unknown_match_is_404(client):
    assert client.get("/api/matches/nope").status_code == 404
    assert client.get("/api/matches/nope/scorecard").status_code == 404
    assert client.post("/api/matches/nope/scorecard/events", json={"type": "wide"}, headers=ORGANIZER).status_code == 404


def test_start_requires_editor(client):
    assert client.post("/api/matches/m-cricket-1/start", headers=STRANGER).status_code == 401
    resp = client.post("/api/matches/m-cricket-1/start", headers=OFFICIAL)
    assert resp.status_code == 200
    assert resp.json()["status"] == "live"
    assert resp.json()["scorecard"]["innings"][0]["team"] == "Mumbai Mavericks"

    assert client.post("/api/matches/m-cricket-1/start", headers=ORGANIZER).status_code == 400


def test_cricket_scoring_flow(client):
    client.post("/api/matches/m-cricket-1/start", headers=ORGANIZER)

    for event in [
        {"type": "run", "value": 4},
        {"type": "run", "value": 1},
        {"type": "wide"},
        {"type": "run", "value": 6},
        {"type": "wicket", "dismissal": "caught"},
        {"type": "run", "value": 2},
    ]:
        resp = client.post("/api/matches/m-cricket-1/scorecard/events", json=event, headers=OFFICIAL)
        assert resp.status_code == 200
        assert resp.json()["applied"] is True

    view = client.get("/api/matches/m-cricket-1/scorecard", headers=OFFICIAL).json()
    innings = view["scorecard"]["innings"][-1]
    assert innings["runs"] == 14
    assert innings["wickets"] == 1
    assert innings["overs_display"] == "0.5"
    assert view["can_edit"] is True
    # background sync to the local store has run by the time the response returns
    assert view["sync_status"] == "synced"


def test_non_editor_event_is_silently_ignored(client):
    client.post("/api/matches/m-kabaddi-1/start", headers=ORGANIZER)
    event = {"type": "set_subscore", "side": "team1", "field": "raid_points", "value": 5}

    resp = client.post("/api/matches/m-kabaddi-1/scorecard/events", json=event, headers=STRANGER)
    assert resp.status_code == 200
    assert resp.json()["applied"] is False
    assert resp.json()["scorecard"]["team1_score"] == 0

    resp = client.post("/api/matches/m-kabaddi-1/scorecard/events", json=event)
    assert resp.json()["applied"] is False


def test_kabaddi_totals(client):
    client.post("/api/matches/m-kabaddi-1/start", headers=ORGANIZER)
    for field, value in (("raid_points", 5), ("tackle_points", 3)):
        client.post(
            "/api/matches/m-kabaddi-1/scorecard/events",
            json={"type": "set_subscore", "side": "team1", "field": field, "value": value},
            headers=ORGANIZER,
        )

    view = client.get("/api/matches/m-kabaddi-1/scorecard").json()
    assert view["scorecard"]["team1_score"] == 8
    assert view["can_edit"] is False


def test_tied_set_completion_is_400(client):
    client.post("/api/matches/m-badminton-1/start", headers=ORGANIZER)
    resp = client.post("/api/matches/m-badminton-1/scorecard/events", json={"type": "complete_set"}, headers=ORGANIZER)
    assert resp.status_code == 400
    assert "tied" in resp.json()["detail"]


def test_completed_match_is_read_only(client):
    client.post("/api/matches/m-football-1/start", headers=ORGANIZER)
    client.post("/api/matches/m-football-1/end", headers=ORGANIZER)

    resp = client.post(
        "/api/matches/m-football-1/scorecard/events",
        json={"type": "set_subscore", "side": "team2", "field": "goals", "value": 1},
        headers=ORGANIZER,
    )
    assert resp.status_code == 409


def test_score_overwrite_is_last_write_wins(client):
    client.post("/api/matches/m-volleyball-1/start", headers=ORGANIZER)

    first = {"sport": "volleyball", "sets": [{"team1": 25, "team2": 20}], "current_set_team1": 3}
    second = {"sport": "volleyball", "sets": [], "current_set_team2": 7}

    resp = client.patch("/api/matches/m-volleyball-1/score", json={"scorecard": first}, headers=OFFICIAL)
    assert resp.status_code == 200
    assert resp.json()["scorecard"]["team1_sets"] == 1

    resp = client.patch("/api/matches/m-volleyball-1/score", json={"scorecard": second}, headers=ORGANIZER)
    stored = resp.json()["scorecard"]
    assert stored["sets"] == []
    assert stored["current_set_team2"] == 7
    assert resp.json()["updated_by"] == "org-1"


def test_score_overwrite_validation(client):
    client.post("/api/matches/m-kabaddi-1/start", headers=ORGANIZER)
    bad_sport = {"scorecard": {"sport": "football", "team1": {"goals": 1}}}
    assert client.patch("/api/matches/m-kabaddi-1/score", json=bad_sport, headers=ORGANIZER).status_code == 400

    bad_value = {"scorecard": {"sport": "kabaddi", "team1": {"raid_points": "lots"}}}
    assert client.patch("/api/matches/m-kabaddi-1/score", json=bad_value, headers=ORGANIZER).status_code == 400

    assert client.patch("/api/matches/m-kabaddi-1/score", json={"scorecard": {}}, headers=STRANGER).status_code == 401


def test_score_overwrite_on_scheduled_match_is_409(client):
    planted = {"scorecard": {"sport": "football", "team1": {"goals": 7}}}
    resp = client.patch("/api/matches/m-football-1/score", json=planted, headers=ORGANIZER)
    assert resp.status_code == 409

    started = client.post("/api/matches/m-football-1/start", headers=ORGANIZER).json()
    assert started["scorecard"]["team1_score"] == 0


def test_score_overwrite_on_completed_match_is_409(client):
    client.post("/api/matches/m-football-1/start", headers=ORGANIZER)
    client.post(
        "/api/matches/m-football-1/scorecard/events",
        json={"type": "set_subscore", "side": "team1", "field": "goals", "value": 2},
        headers=ORGANIZER,
    )
    ended = client.post("/api/matches/m-football-1/end", headers=ORGANIZER).json()
    assert ended["result"] == {"winner": "team1", "winning_team": "Kolkata Strikers", "is_draw": False}

    rewrite = {"scorecard": {"sport": "football", "team1": {"goals": 9}}}
    resp = client.patch("/api/matches/m-football-1/score", json=rewrite, headers=ORGANIZER)
    assert resp.status_code == 409
    assert client.get("/api/matches/m-football-1").json()["scorecard"]["team1_score"] == 2


def test_retry_sync_endpoint(client):
    client.post("/api/matches/m-football-1/start", headers=ORGANIZER)
    assert client.post("/api/matches/m-football-1/scorecard/sync", headers=STRANGER).status_code == 401

    resp = client.post("/api/matches/m-football-1/scorecard/sync", headers=ORGANIZER)
    assert resp.status_code == 200
    assert resp.json()["sync_status"] == "synced"


def test_viewer_reads_are_cached_between_polls(client, store):
    client.post("/api/matches/m-football-1/start", headers=ORGANIZER)
    first = client.get("/api/matches/m-football-1/scorecard").json()
    assert first["refresh_after_seconds"] > 0

    # a write that bypasses the API is only visible after the next poll window
    store.save_scorecard("m-football-1", {"sport": "football", "team1": {"goals": 4}})
    assert client.get("/api/matches/m-football-1/scorecard").json()["scorecard"]["team1_score"] == 0

    client.post(
        "/api/matches/m-football-1/scorecard/events",
        json={"type": "set_subscore", "side": "team2", "field": "goals", "value": 1},
        headers=ORGANIZER,
    )
    view = client.get("/api/matches/m-football-1/scorecard").json()["scorecard"]
    assert (view["team1_score"], view["team2_score"]) == (4, 1)
