def test_empty_dashboard(client):
    stats = client.get("/api/dashboard").json()

    assert stats["total_players"] == 0
    assert stats["total_sessions"] == 0
    assert stats["total_points"] == 0
    assert stats["total_mvps"] == 0
    assert stats["top_mvps"] == []
    assert stats["recent_players"] == []
    assert stats["recent_sessions"] == []


def test_first_session_scenario(client, add_session, add_player, record):
    add_session("2024-03-01")
    id = add_player("P1", "Ann")

    resp = record(id, session_date="2024-03-01", points_scored=10, saves=2, mvp_award=True)
    assert resp.status_code == 200

    ann = client.get("/api/players").json()["players"][0]
    assert ann["full_name"] == "Ann"
    assert ann["sessions_attended_count"] == 1
    assert ann["total_points_scored"] == 10
    assert ann["avg_points_per_session"] == 10.0
    assert ann["mvp_awards_count"] == 1

    stats = client.get("/api/dashboard").json()
    assert stats["total_sessions"] == 1
    assert stats["total_mvps"] == 1
    assert stats["total_points"] == 10
    assert stats["top_mvps"][0]["full_name"] == "Ann"
    assert stats["top_mvps"][0]["mvp_awards_count"] == 1


def test_total_mvps_matches_player_counters(client, add_player, record):
    ann = add_player("P1", "Ann")
    bob = add_player("P2", "Bob")
    record(ann, session_date="2024-03-01", mvp_award=True)
    record(ann, session_date="2024-03-08", mvp_award=True)
    record(bob, session_date="2024-03-08", mvp_award=True)
    record(ann, session_date="2024-03-08", mvp_award=False)

    stats = client.get("/api/dashboard").json()
    players = client.get("/api/players").json()["players"]

    assert stats["total_mvps"] == 2
    assert stats["total_mvps"] == sum(p["mvp_awards_count"] for p in players)


def test_top_mvps_excludes_players_without_awards(client, add_player, record):
    ids = {name: add_player(f"P{i}", name) for i, name in enumerate(["Ann", "Bob", "Cara", "Dee"])}
    record(ids["Bob"], session_date="2024-03-01", mvp_award=True)
    record(ids["Bob"], session_date="2024-03-08", mvp_award=True)
    record(ids["Cara"], session_date="2024-03-01", mvp_award=True)
    record(ids["Ann"], session_date="2024-03-01")

    top = client.get("/api/dashboard").json()["top_mvps"]

    assert [(p["full_name"], p["mvp_awards_count"]) for p in top] == [("Bob", 2), ("Cara", 1)]


def test_top_mvps_limited_to_five(client, add_player, record):
    for i in range(7):
        id = add_player(f"P{i}", f"Player {i}")
        record(id, session_date="2024-03-01", mvp_award=True)

    assert len(client.get("/api/dashboard").json()["top_mvps"]) == 5


def test_recent_players_and_sessions(client, add_player, add_session):
    for i in range(6):
        add_player(f"P{i}", f"Player {i}")
    for day in range(1, 8):
        add_session(f"2024-03-{day:02d}")

    stats = client.get("/api/dashboard").json()

    assert stats["total_players"] == 6
    assert stats["total_sessions"] == 7
    assert [p["player_id"] for p in stats["recent_players"]] == ["P5", "P4", "P3", "P2", "P1"]
    assert [s["session_date"] for s in stats["recent_sessions"]] == [
        "2024-03-07", "2024-03-06", "2024-03-05", "2024-03-04", "2024-03-03",
    ]
