import json


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_deletes_are_audited(client, settings):
    created = client.post("/api/students", json={"name": "Eva", "grade": "4C"}).json()
    client.delete(f"/api/students/{created['id']}")

    with open(settings.audit_log_file, encoding="utf-8") as f:
        entries = [json.loads(line) for line in f if line.strip()]

    assert entries[-1]["action"] == "DELETE"
    assert entries[-1]["resource_type"] == "student"
    assert entries[-1]["resource_id"] == created["id"]
