from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

import pytest

from src.onboarding_tracker.onboarding_tracker.core.enums import Checkpoint
from src.onboarding_tracker.onboarding_tracker.core.exceptions import StoreUnavailableError
from src.onboarding_tracker.onboarding_tracker.students.model import CheckpointState, StudentRecord


class InMemoryStudents:
    """Student store whose conditional update is atomic (single lock)."""

    def __init__(self, records=()):
        self._lock = threading.Lock()
        self._by_id: dict[str, StudentRecord] = {r.student_id: r for r in records}
        self.unavailable = False
        self.scan_calls = 0

    def add(self, record: StudentRecord) -> None:
        with self._lock:
            self._by_id[record.student_id] = record

    def get_by_id(self, student_id: str) -> Optional[StudentRecord]:
        if self.unavailable:
            raise StoreUnavailableError("store down")
        with self._lock:
            return self._by_id.get(student_id)

    def complete_checkpoint(self, *, student_id, checkpoint: Checkpoint, completed_at, completed_by) -> bool:
        with self._lock:
            rec = self._by_id.get(student_id)
            if rec is None or rec.checkpoint(checkpoint).done:
                return False
            self._by_id[student_id] = replace(
                rec,
                **{checkpoint.value: CheckpointState(done=True, completed_at=completed_at, completed_by=completed_by)},
            )
            return True

    def update_visitor_count(self, *, student_id, visitor_count) -> None:
        with self._lock:
            rec = self._by_id.get(student_id)
            if rec is not None and rec.arrival.done:
                self._by_id[student_id] = replace(rec, visitor_count=int(visitor_count))

    def scan_all(self):
        self.scan_calls += 1
        if self.unavailable:
            raise StoreUnavailableError("store down")
        with self._lock:
            return [self._by_id[k] for k in sorted(self._by_id)]


def make_student(student_id: str = "S-001", *, name: str = "", visitor_count: int = 0, **checkpoints) -> StudentRecord:
    """Build a record; checkpoint kwargs take a CheckpointState or a (completed_at, completed_by) tuple."""
    states = {}
    for key, value in checkpoints.items():
        if isinstance(value, CheckpointState):
            states[key] = value
        else:
            completed_at, completed_by = value
            states[key] = CheckpointState(done=True, completed_at=completed_at, completed_by=completed_by)
    return StudentRecord(student_id=student_id, name=name or f"Student {student_id}", visitor_count=visitor_count, **states)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 9, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def students_repo() -> InMemoryStudents:
    return InMemoryStudents()


@pytest.fixture
def student_factory():
    return make_student
