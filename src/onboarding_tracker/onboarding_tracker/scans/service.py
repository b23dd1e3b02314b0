from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import format_timestamp, now_utc
from ..common.validators import require_checkpoint, require_non_empty, require_non_negative_int
from ..core.enums import Checkpoint, ScanStatus, VisitorCountStatus
from ..observability.events import LogEvent
from ..observability.structured import create_logger
from ..students.model import CheckpointState, StudentRecord
from ..students.repository import StudentRepository
from .model import ScanOutcome, VisitorCountOutcome

logger = create_logger("scans")


class StageGuard:
    """Use case: accept or reject a checkpoint scan and record it.

    Business rules:
    - A checkpoint is written at most once (done, completed_at, completed_by
      change together, nothing else is touched).
    - No ordering between checkpoints is enforced: hostel may be scanned
      before arrival.
    - The "not done yet" check lives in the store's conditional update, so
      concurrent duplicate scans yield exactly one ACCEPTED.
    """

    def __init__(self, students: StudentRepository, *, clock: Optional[Callable[[], datetime]] = None):
        self._students = students
        self._clock = clock or now_utc

    def apply(
        self,
        student_id: str,
        checkpoint: str | Checkpoint,
        attributor: str,
        *,
        now: datetime | None = None,
    ) -> ScanOutcome:
        checkpoint = require_checkpoint(checkpoint)
        student_id = require_non_empty(student_id, "studentId")
        attributor = require_non_empty(attributor, "volunteerName")

        record = self._students.get_by_id(student_id)
        if not record:
            return self._not_found(student_id, checkpoint)

        state = record.checkpoint(checkpoint)
        if state.done:
            return self._already_completed(record, checkpoint, attributor)

        completed_at = format_timestamp(now or self._clock())
        written = self._students.complete_checkpoint(
            student_id=student_id,
            checkpoint=checkpoint,
            completed_at=completed_at,
            completed_by=attributor,
        )

        if not written:
            # Another scan won between our read and the conditional write.
            latest = self._students.get_by_id(student_id)
            if not latest:
                return self._not_found(student_id, checkpoint)
            logger.info(
                LogEvent.SCAN_RACE_LOST,
                "Concurrent scan completed the checkpoint first",
                {"studentId": student_id, "checkpoint": checkpoint.value, "volunteerName": attributor},
            )
            return self._already_completed(latest, checkpoint, attributor)

        updated = self._students.get_by_id(student_id) or replace(
            record,
            **{checkpoint.value: CheckpointState(done=True, completed_at=completed_at, completed_by=attributor)},
        )
        logger.info(
            LogEvent.SCAN_ACCEPTED,
            "Checkpoint completed",
            {
                "studentId": student_id,
                "checkpoint": checkpoint.value,
                "volunteerName": attributor,
                "completedAt": completed_at,
            },
        )
        return ScanOutcome(status=ScanStatus.ACCEPTED, student_id=student_id, checkpoint=checkpoint, record=updated)

    def set_visitor_count(self, student_id: str, count: object) -> VisitorCountOutcome:
        """Overwrite the visitor count of an arrived student (last writer wins)."""
        student_id = require_non_empty(student_id, "studentId")
        visitor_count = require_non_negative_int(count, "visitorCount")

        record = self._students.get_by_id(student_id)
        if not record:
            logger.warning(
                LogEvent.VISITOR_COUNT_REJECTED,
                "Student not found",
                {"studentId": student_id, "visitorCount": visitor_count},
            )
            return VisitorCountOutcome(status=VisitorCountStatus.NOT_FOUND, student_id=student_id)

        if not record.arrival.done:
            logger.warning(
                LogEvent.VISITOR_COUNT_REJECTED,
                "Student must be marked as arrived first",
                {"studentId": student_id, "visitorCount": visitor_count},
            )
            return VisitorCountOutcome(
                status=VisitorCountStatus.PRECONDITION_FAILED,
                student_id=student_id,
                record=record,
            )

        self._students.update_visitor_count(student_id=student_id, visitor_count=visitor_count)
        logger.info(
            LogEvent.VISITOR_COUNT_UPDATED,
            "Visitor count updated",
            {"studentId": student_id, "visitorCount": visitor_count},
        )
        return VisitorCountOutcome(
            status=VisitorCountStatus.UPDATED,
            student_id=student_id,
            record=replace(record, visitor_count=visitor_count),
        )

    def _not_found(self, student_id: str, checkpoint: Checkpoint) -> ScanOutcome:
        logger.warning(
            LogEvent.SCAN_NOT_FOUND,
            "Student not found",
            {"studentId": student_id, "checkpoint": checkpoint.value},
        )
        return ScanOutcome(status=ScanStatus.NOT_FOUND, student_id=student_id, checkpoint=checkpoint)

    def _already_completed(self, record: StudentRecord, checkpoint: Checkpoint, attributor: str) -> ScanOutcome:
        state = record.checkpoint(checkpoint)
        logger.warning(
            LogEvent.SCAN_ALREADY_COMPLETED,
            f"{checkpoint.label} already completed",
            {
                "studentId": record.student_id,
                "checkpoint": checkpoint.value,
                "volunteerName": attributor,
                "completedAt": state.completed_at,
                "previouslyVerifiedBy": state.completed_by,
            },
        )
        return ScanOutcome(
            status=ScanStatus.ALREADY_COMPLETED,
            student_id=record.student_id,
            checkpoint=checkpoint,
            record=record,
            prior_completed_at=state.completed_at,
            prior_completed_by=state.completed_by,
        )
