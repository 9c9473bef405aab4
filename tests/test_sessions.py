from sqlalchemy.exc import OperationalError

from volley_stats.services import SessionService


def _history(client, id):
    return client.get(f"/api/players/{id}/sessions").json()["sessions"]


def _player(client, id):
    return client.get(f"/api/players/{id}").json()["player"]


def test_create_session(client):
    resp = client.post("/api/sessions", json={"session_date": "2024-03-01"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Session created successfully"
    assert isinstance(body["session_id"], int)


def test_duplicate_session_date_conflicts(client, add_session):
    add_session("2024-03-01")

    resp = client.post("/api/sessions", json={"session_date": "2024-03-01"})

    assert resp.status_code == 400
    assert resp.json() == {"error": 'Session for date "2024-03-01" already exists'}
    assert len(client.get("/api/sessions").json()["sessions"]) == 1


def test_create_session_requires_valid_date(client):
    resp = client.post("/api/sessions", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "session_date is required"}

    resp = client.post("/api/sessions", json={"session_date": "not-a-date"})
    assert resp.status_code == 400
    assert "session_date" in resp.json()["error"]


def test_list_sessions_newest_first_with_participants(client, add_player, add_session, record):
    id = add_player()
    add_session("2024-03-01")
    later = add_session("2024-03-08")
    add_session("2024-02-23")
    record(id, session_id=later, points_scored=3)

    sessions = client.get("/api/sessions").json()["sessions"]

    assert [s["session_date"] for s in sessions] == ["2024-03-08", "2024-03-01", "2024-02-23"]
    assert [s["participant_count"] for s in sessions] == [1, 0, 0]


def test_record_session_stats(client, add_player, add_session, record):
    id = add_player()
    session_id = add_session("2024-03-01")

    resp = record(id, session_id=session_id, points_scored=10, saves=2, mvp_award=True)

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Session statistics added successfully"
    assert body["session_id"] == session_id
    assert body["player"] == {
        "id": id,
        "sessions_attended_count": 1,
        "total_points_scored": 10,
        "total_saves": 2,
        "mvp_awards_count": 1,
    }


def test_recording_twice_overwrites(client, add_player, add_session, record):
    id = add_player()
    session_id = add_session("2024-03-01")

    record(id, session_id=session_id, points_scored=10, saves=2, mvp_award=True)
    record(id, session_id=session_id, points_scored=3, saves=5, mvp_award=False)

    history = _history(client, id)
    assert len(history) == 1
    assert history[0]["points_scored"] == 3
    assert history[0]["saves"] == 5
    assert history[0]["mvp_award"] is False

    player = _player(client, id)
    assert player["sessions_attended_count"] == 1
    assert player["total_points_scored"] == 3
    assert player["total_saves"] == 5
    assert player["mvp_awards_count"] == 0


def test_counters_always_match_session_rows(client, add_player, record):
    id = add_player()
    writes = [
        {"session_date": "2024-03-01", "points_scored": 4, "saves": 1, "mvp_award": True},
        {"session_date": "2024-03-08", "points_scored": 7, "saves": 0},
        {"session_date": "2024-03-01", "points_scored": 2, "saves": 3, "mvp_award": False},
        {"session_date": "2024-03-15", "points_scored": 9, "saves": 2, "mvp_award": True},
    ]

    for fields in writes:
        assert record(id, **fields).status_code == 200

        history = _history(client, id)
        player = _player(client, id)
        assert player["sessions_attended_count"] == len(history)
        assert player["total_points_scored"] == sum(s["points_scored"] for s in history)
        assert player["total_saves"] == sum(s["saves"] for s in history)
        assert player["mvp_awards_count"] == sum(1 for s in history if s["mvp_award"])

    assert _player(client, id)["total_points_scored"] == 18


def test_record_by_date_creates_the_session_once(client, add_player, record):
    ann = add_player("P1", "Ann")
    bob = add_player("P2", "Bob")

    first = record(ann, session_date="2024-03-01").json()["session_id"]
    second = record(bob, session_date="2024-03-01").json()["session_id"]

    assert first == second
    assert len(client.get("/api/sessions").json()["sessions"]) == 1


def test_record_defaults(client, add_player, record):
    id = add_player()

    resp = record(id, session_date="2024-03-01", points_scored=None, saves=None)

    assert resp.status_code == 200
    entry = _history(client, id)[0]
    assert entry["points_scored"] == 0
    assert entry["saves"] == 0
    assert entry["mvp_award"] is False
    assert entry["attendance_status"] == "Present"


def test_record_requires_player_and_session(client, add_player, record):
    resp = client.post("/api/player-sessions", json={"session_date": "2024-03-01"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "player_id is required"}

    id = add_player()
    resp = record(id)
    assert resp.status_code == 400
    assert resp.json() == {"error": "session_id or session_date is required"}


def test_record_rejects_negative_stats(client, add_player, record):
    id = add_player()

    resp = record(id, session_date="2024-03-01", points_scored=-1)

    assert resp.status_code == 400
    assert "points_scored" in resp.json()["error"]
    assert _history(client, id) == []


def test_record_unknown_player_or_session(client, add_player, add_session, record):
    session_id = add_session()
    resp = record(999, session_id=session_id)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Player not found"}

    id = add_player()
    resp = record(id, session_id=999)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Session not found"}
    assert _player(client, id)["sessions_attended_count"] == 0



def test_player_history_newest_first(client, add_player, record):
    id = add_player()
    record(id, session_date="2024-03-01", points_scored=1)
    record(id, session_date="2024-03-15", points_scored=3)
    record(id, session_date="2024-03-08", points_scored=2)

    history = _history(client, id)

    assert [s["session_date"] for s in history] == ["2024-03-15", "2024-03-08", "2024-03-01"]
    assert [s["points_scored"] for s in history] == [3, 2, 1]


def test_session_players_sorted_by_name(client, add_player, add_session, record):
    cara = add_player("P3", "Cara")
    ann = add_player("P1", "Ann")
    add_player("P2", "Bob")
    session_id = add_session()
    record(cara, session_id=session_id, points_scored=5, mvp_award=True)
    record(ann, session_id=session_id, points_scored=2, attendance_status="Late")

    players = client.get(f"/api/sessions/{session_id}/players").json()["players"]

    assert [p["full_name"] for p in players] == ["Ann", "Cara"]
    assert players[0]["attendance_status"] == "Late"
    assert players[1]["mvp_award"] is True


def test_record_rejects_both_session_id_and_date(client, add_player, add_session, record):
    id = add_player()
    session_id = add_session("2024-03-01")

    resp = record(id, session_id=session_id, session_date="2030-01-01", points_scored=1)

    assert resp.status_code == 400
    assert resp.json() == {"error": "give session_id or session_date, not both"}
    assert _history(client, id) == []
    assert len(client.get("/api/sessions").json()["sessions"]) == 1


def test_failed_recompute_rolls_back_the_whole_write(client, add_player, record, monkeypatch):
    id = add_player()

    async def fail(db, player_id):
        raise OperationalError("UPDATE players", {}, Exception("disk I/O error"))

    monkeypatch.setattr(SessionService, "recompute_player_totals", staticmethod(fail))

    resp = record(id, session_date="2024-03-01", points_scored=7, mvp_award=True)

    assert resp.status_code == 500
    assert "disk I/O error" in resp.json()["error"]
    assert client.get(f"/api/players/{id}/sessions").json() == {"sessions": []}
    assert client.get("/api/sessions").json() == {"sessions": []}
    player = _player(client, id)
    assert player["total_points_scored"] == 0
    assert player["mvp_awards_count"] == 0


def test_out_of_range_keys_are_rejected(client, add_player, record):
    id = add_player()

    resp = client.get("/api/sessions/99999999999999999999/players")
    assert resp.status_code == 400
    assert "id" in resp.json()["error"]

    resp = record(id, session_id=99999999999999999999)
    assert resp.status_code == 400
    assert "session_id" in resp.json()["error"]
