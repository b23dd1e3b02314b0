from __future__ import annotations

from datetime import timezone

import pytest

from src.onboarding_tracker.onboarding_tracker.analytics.service import AnalyticsService
from src.onboarding_tracker.onboarding_tracker.core.enums import Checkpoint
from src.onboarding_tracker.onboarding_tracker.core.exceptions import StoreUnavailableError, ValidationError
from src.onboarding_tracker.onboarding_tracker.students.model import CheckpointState


@pytest.fixture
def seeded_repo(students_repo, student_factory):
    students_repo.add(student_factory(
        "S-001",
        arrival=("2026-02-01T09:05:00.000+00:00", "Asha"),
        hostel=("2026-02-01T09:40:00.000+00:00", "Bala"),
        documents=("2026-02-01T10:10:00.000+00:00", "Bala"),
    ))
    students_repo.add(student_factory("S-002", arrival=("2026-02-01T09:20:00.000+00:00", "Asha")))
    students_repo.add(student_factory(
        "S-003",
        arrival=CheckpointState(done=True, completed_at="31/02/2026 9am", completed_by="Chen"),
    ))
    students_repo.add(student_factory("S-004"))
    return students_repo


@pytest.mark.parametrize("width", [0, 20, "abc", None, 90])
def test_invalid_width_rejected_before_scan(seeded_repo, width):
    with pytest.raises(ValidationError):
        AnalyticsService(seeded_repo).peak_time_of_day(width)

    assert seeded_repo.scan_calls == 0


def test_width_accepted_as_query_string(seeded_repo):
    view = AnalyticsService(seeded_repo, zone=timezone.utc).peak_time_of_day("30")

    assert view.interval_minutes == 30
    assert view.buckets_per_day == 48


def test_views_are_deterministic(seeded_repo):
    service = AnalyticsService(seeded_repo, zone=timezone.utc)

    for compute in (
        service.summary,
        service.pending_counts,
        service.stage_timing,
        service.leaderboard,
        lambda: service.peak_time_of_day(15),
    ):
        assert compute().to_dict() == compute().to_dict()


def test_every_view_recomputes_from_a_fresh_scan(seeded_repo, student_factory):
    service = AnalyticsService(seeded_repo)

    before = service.summary().total_students
    seeded_repo.add(student_factory("S-005"))

    assert service.summary().total_students == before + 1


def test_malformed_timestamp_does_not_abort_view(seeded_repo):
    service = AnalyticsService(seeded_repo, zone=timezone.utc)

    timing = service.stage_timing()
    peak = service.peak_time_of_day(60)

    assert timing.students_analyzed == 2
    assert timing.diagnostics.skipped_contributions == 1
    assert peak.totals[Checkpoint.ARRIVAL] == 2
    assert peak.diagnostics.skipped_contributions == 1


@pytest.mark.parametrize("view", ["summary", "pending_counts", "stage_timing", "leaderboard"])
def test_store_failure_propagates(seeded_repo, view):
    seeded_repo.unavailable = True

    with pytest.raises(StoreUnavailableError):
        getattr(AnalyticsService(seeded_repo), view)()


def test_empty_store_views_do_not_fail(students_repo):
    service = AnalyticsService(students_repo)

    assert service.summary().to_dict()["totalStudents"] == 0
    assert service.pending_counts().to_dict()["totalStudents"] == 0
    assert service.peak_time_of_day(60).to_dict()["totalScans"] == 0
    assert service.stage_timing().to_dict()["insights"]["averageJourney"] == "N/A"
    assert service.leaderboard().to_dict()["totalVolunteers"] == 0
