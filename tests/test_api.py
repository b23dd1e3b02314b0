from __future__ import annotations

import pytest

from src.onboarding_tracker.onboarding_tracker.container import build_services
from src.onboarding_tracker.onboarding_tracker.main import create_app


@pytest.fixture
def client(monkeypatch, students_repo, student_factory):
    monkeypatch.setenv("APP_ENV", "testing")
    students_repo.add(student_factory("S-001", name="Priya"))
    students_repo.add(student_factory("S-002", name="Ravi", arrival=("2026-02-01T09:00:00.000+00:00", "Asha")))
    app = create_app(container=build_services(students_repo))
    return app.test_client()


def test_scan_then_duplicate_returns_conflict(client):
    first = client.post("/api/scan/arrival", json={"studentId": "S-001", "volunteerName": "Asha"})
    second = client.post("/api/scan/arrival", json={"studentId": "S-001", "volunteerName": "Bala"})

    assert first.status_code == 200
    body = first.get_json()
    assert body["message"] == "Arrival recorded successfully"
    assert body["student"]["currentStage"] == "Arrival"

    assert second.status_code == 409
    conflict = second.get_json()
    assert conflict["verifiedBy"] == "Asha"
    assert conflict["completedAt"] == body["student"]["arrivalTime"]


def test_scan_unknown_student_is_404(client):
    resp = client.post("/api/scan/hostel", json={"studentId": "S-999", "volunteerName": "Asha"})

    assert resp.status_code == 404


@pytest.mark.parametrize(
    "path, payload",
    [
        ("/api/scan/lunch", {"studentId": "S-001", "volunteerName": "Asha"}),
        ("/api/scan/kit", {"studentId": "S-001"}),
        ("/api/scan/kit", {"volunteerName": "Asha"}),
    ],
)
def test_scan_rejects_invalid_input(client, path, payload):
    assert client.post(path, json=payload).status_code == 400


def test_visitor_count_requires_arrival(client):
    rejected = client.post("/api/scan/arrival/visitors", json={"studentId": "S-001", "visitorCount": 2})
    updated = client.post("/api/scan/arrival/visitors", json={"studentId": "S-002", "visitorCount": 2})

    assert rejected.status_code == 400
    assert updated.status_code == 200
    assert updated.get_json()["student"]["visitorCount"] == 2


def test_journey_endpoints(client):
    one = client.get("/api/analytics/student-journey/S-002")
    missing = client.get("/api/analytics/student-journey/S-999")
    everyone = client.get("/api/analytics/student-journey")

    assert one.get_json()["currentStage"] == "Arrival"
    assert missing.status_code == 404
    assert [j["studentId"] for j in everyone.get_json()] == ["S-001", "S-002"]


def test_analytics_endpoints(client):
    summary = client.get("/api/analytics/summary").get_json()
    pending = client.get("/api/analytics/pending-counts").get_json()
    peak = client.get("/api/analytics/peak-hours").get_json()
    timing = client.get("/api/analytics/stage-timing").get_json()
    volunteers = client.get("/api/analytics/volunteer-stats").get_json()

    assert summary["totalStudents"] == 2
    assert summary["arrivedStudents"] == 1
    assert pending["pendingCounts"]["notArrived"] == 1
    assert peak["intervalMinutes"] == 60
    assert timing["totalStudentsAnalyzed"] == 1
    assert volunteers["topVolunteer"]["name"] == "Asha"


def test_peak_hours_interval(client):
    assert client.get("/api/analytics/peak-hours?interval=15").get_json()["intervalsPerDay"] == 96
    assert client.get("/api/analytics/peak-hours?interval=20").status_code == 400


def test_store_unavailable_is_503(client, students_repo):
    students_repo.unavailable = True

    assert client.get("/api/analytics/summary").status_code == 503
    assert client.post("/api/scan/kit", json={"studentId": "S-001", "volunteerName": "Asha"}).status_code == 503


@pytest.mark.parametrize("path", ["/api/scan/arrival", "/api/scan/arrival/visitors"])
def test_non_object_json_body_is_400(client, path):
    assert client.post(path, json=["S-001"]).status_code == 400
    assert client.post(path, data="S-001", content_type="text/plain").status_code == 400
