from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import CHECKPOINT_ORDER, JourneyStage
from ..core.exceptions import NotFoundError
from ..students.model import StudentRecord
from ..students.repository import StudentRepository


@dataclass(frozen=True)
class StageProgress:
    arrival: bool
    hostel: bool
    documents: bool
    kit: bool

    def to_dict(self) -> dict:
        return {
            "arrival": self.arrival,
            "hostel": self.hostel,
            "documents": self.documents,
            "kit": self.kit,
        }


@dataclass(frozen=True)
class JourneyView:
    """Read-model for one student's onboarding journey."""

    student_id: str
    name: str
    current_stage: JourneyStage
    stage_progress: StageProgress
    arrival_time: Optional[str]
    hostel_verified_time: Optional[str]
    documents_verified_time: Optional[str]
    kit_received_time: Optional[str]
    arrival_verified_by: Optional[str]
    hostel_verified_by: Optional[str]
    documents_verified_by: Optional[str]
    kit_received_by: Optional[str]
    visitor_count: int

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "name": self.name,
            "currentStage": self.current_stage.value,
            "stageProgress": self.stage_progress.to_dict(),
            "arrivalTime": self.arrival_time,
            "hostelVerifiedTime": self.hostel_verified_time,
            "documentsVerifiedTime": self.documents_verified_time,
            "kitReceivedTime": self.kit_received_time,
            "arrivalVerifiedBy": self.arrival_verified_by,
            "hostelVerifiedBy": self.hostel_verified_by,
            "documentsVerifiedBy": self.documents_verified_by,
            "kitReceivedBy": self.kit_received_by,
            "visitorCount": self.visitor_count,
        }


def current_stage(record: StudentRecord) -> JourneyStage:
    """Furthest checkpoint reached.

    Checkpoints are independent flags, so a student may have documents done
    while arrival is not; the label still reads "Documents".
    """
    stage = JourneyStage.NOT_STARTED
    for checkpoint in CHECKPOINT_ORDER:
        if record.checkpoint(checkpoint).done:
            stage = JourneyStage.for_checkpoint(checkpoint)
    return stage


def project(record: StudentRecord) -> JourneyView:
    return JourneyView(
        student_id=record.student_id,
        name=record.name,
        current_stage=current_stage(record),
        stage_progress=StageProgress(
            arrival=record.arrival.done,
            hostel=record.hostel.done,
            documents=record.documents.done,
            kit=record.kit.done,
        ),
        arrival_time=record.arrival.completed_at,
        hostel_verified_time=record.hostel.completed_at,
        documents_verified_time=record.documents.completed_at,
        kit_received_time=record.kit.completed_at,
        arrival_verified_by=record.arrival.completed_by,
        hostel_verified_by=record.hostel.completed_by,
        documents_verified_by=record.documents.completed_by,
        kit_received_by=record.kit.completed_by,
        visitor_count=record.visitor_count,
    )


class JourneyService:
    """Use case: single-student and cohort journey queries."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def get_journey(self, student_id: str) -> JourneyView:
        record = self._students.get_by_id(student_id)
        if not record:
            raise NotFoundError(f"Student {student_id} not found")
        return project(record)

    def list_journeys(self) -> list[JourneyView]:
        return [project(r) for r in self._students.scan_all()]
