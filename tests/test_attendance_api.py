import pytest


@pytest.fixture
def record():
    return {"studentId": "stu-001", "date": "2024-04-10", "status": "Presente"}


def test_create_attendance(client, record):
    response = client.post("/api/attendance", json=record)

    assert response.status_code == 201
    stored = client.get(f"/api/attendance/{response.json()['id']}").json()
    assert stored["status"] == "Presente"
    assert stored["date"] == "2024-04-10"


@pytest.mark.parametrize("missing", ["studentId", "date", "status"])
def test_required_fields(client, record, missing):
    del record[missing]

    response = client.post("/api/attendance", json=record)

    assert response.status_code == 400
    assert response.json()["error"] == "Alumno, fecha y estado son campos requeridos"


def test_one_record_per_student_and_day(client, record):
    assert client.post("/api/attendance", json=record).status_code == 201

    response = client.post("/api/attendance", json={**record, "status": "Ausente"})

    assert response.status_code == 400
    assert "Ya existe un registro" in response.json()["error"]
    assert len(client.get("/api/attendance").json()) == 1

    # Same student on another day is fine
    assert client.post("/api/attendance", json={**record, "date": "2024-04-11"}).status_code == 201


def test_invalid_status_and_date(client, record):
    assert client.post("/api/attendance", json={**record, "status": "Enfermo"}).status_code == 400
    assert client.post("/api/attendance", json={**record, "date": "10/04/2024"}).status_code == 400


def test_list_filters_sorted_by_date_desc(client, record):
    client.post("/api/attendance", json=record)
    client.post("/api/attendance", json={**record, "date": "2024-04-12", "status": "Retardo"})
    client.post("/api/attendance", json={**record, "studentId": "stu-002"})

    assert [a["date"] for a in client.get("/api/attendance").json()] == [
        "2024-04-12",
        "2024-04-10",
        "2024-04-10",
    ]
    assert len(client.get("/api/attendance", params={"date": "2024-04-10"}).json()) == 2
    assert len(client.get("/api/attendance", params={"studentId": "stu-002"}).json()) == 1


def test_update_cannot_create_duplicate(client, record):
    client.post("/api/attendance", json=record)
    other = client.post("/api/attendance", json={**record, "date": "2024-04-11"}).json()

    response = client.put(f"/api/attendance/{other['id']}", json={"date": "2024-04-10"})
    assert response.status_code == 400

    response = client.put(f"/api/attendance/{other['id']}", json={"status": "Ausente"})
    assert response.status_code == 200
    assert response.json()["status"] == "Ausente"


def test_delete_attendance(client, record):
    rid = client.post("/api/attendance", json=record).json()["id"]

    assert client.delete(f"/api/attendance/{rid}").status_code == 204
    assert client.get("/api/attendance").json() == []


def test_list_filters_by_status(client, record):
    client.post("/api/attendance", json=record)
    client.post("/api/attendance", json={**record, "date": "2024-04-11", "status": "Ausente"})
    client.post("/api/attendance", json={**record, "studentId": "stu-002", "status": "Ausente"})

    absent = client.get("/api/attendance", params={"status": "Ausente"}).json()
    assert sorted(a["studentId"] for a in absent) == ["stu-001", "stu-002"]

    combined = client.get("/api/attendance", params={"status": "Ausente", "studentId": "stu-001"}).json()
    assert [a["date"] for a in combined] == ["2024-04-11"]

    assert client.get("/api/attendance", params={"status": "Enfermo"}).status_code == 400


def test_range_lists_records_between_dates(client, record):
    for date in ("2024-04-01", "2024-04-10", "2024-04-20"):
        client.post("/api/attendance", json={**record, "date": date})

    response = client.get("/api/attendance/range/2024-04-05/2024-04-20")

    assert response.status_code == 200
    assert [a["date"] for a in response.json()] == ["2024-04-20", "2024-04-10"]
    assert client.get("/api/attendance/range/2024-04-20/2024-04-05").status_code == 400


def test_student_stats_counts_by_status(client, record):
    client.post("/api/attendance", json=record)
    client.post("/api/attendance", json={**record, "date": "2024-04-11"})
    client.post("/api/attendance", json={**record, "date": "2024-04-12", "status": "Retardo"})
    client.post("/api/attendance", json={**record, "studentId": "stu-002", "status": "Ausente"})

    response = client.get("/api/attendance/stats/student/stu-001")

    assert response.status_code == 200
    assert response.json() == [
        {"_id": "Presente", "count": 2},
        {"_id": "Retardo", "count": 1},
    ]
    assert client.get("/api/attendance/stats/student/stu-999").json() == []
