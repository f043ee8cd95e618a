from fastapi.testclient import TestClient

from homehive.main import app

client = TestClient(app)


def test_liveness():
    assert client.get("/health").json()["status"] == "ok"
    assert client.get("/health/live").status_code == 200


def test_database_checks_in_memory_mode():
    db = client.get("/health/db")
    ready = client.get("/health/ready")

    assert db.status_code == 200
    assert db.json()["mode"] == "in_memory"
    assert ready.json() == {"status": "ready", "checks": {"database": "in_memory"}}
