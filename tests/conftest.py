import pytest
from fastapi.testclient import TestClient

from volley_stats.config import Settings
from volley_stats.main import create_app


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite:///:memory:",
        environment="test",
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def add_player(client):
    def _add(player_id="P1", full_name="Ann", **fields):
        resp = client.post(
            "/api/players",
            json={"player_id": player_id, "full_name": full_name, **fields},
        )
        assert resp.status_code == 200, resp.json()
        return resp.json()["id"]
    return _add


@pytest.fixture
def add_session(client):
    def _add(session_date="2024-03-01"):
        resp = client.post("/api/sessions", json={"session_date": session_date})
        assert resp.status_code == 200, resp.json()
        return resp.json()["session_id"]
    return _add


@pytest.fixture
def record(client):
    def _record(player_id, **fields):
        return client.post("/api/player-sessions", json={"player_id": player_id, **fields})
    return _record
