from __future__ import annotations

from enum import Enum


class Checkpoint(str, Enum):
    """Onboarding checkpoints, declared in journey order."""

    ARRIVAL = "arrival"
    HOSTEL = "hostel"
    DOCUMENTS = "documents"
    KIT = "kit"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def columns(self) -> tuple[str, str, str]:
        """(done, completed_by, completed_at) column names in the students table."""
        return _CHECKPOINT_COLUMNS[self]


_CHECKPOINT_COLUMNS = {
    Checkpoint.ARRIVAL: ("arrival", "arrival_verified_by", "arrival_time"),
    Checkpoint.HOSTEL: ("hostel_verified", "hostel_verified_by", "hostel_verified_time"),
    Checkpoint.DOCUMENTS: ("documents_verified", "documents_verified_by", "documents_verified_time"),
    Checkpoint.KIT: ("kit_received", "kit_received_by", "kit_received_time"),
}

CHECKPOINT_ORDER: tuple[Checkpoint, ...] = tuple(Checkpoint)


class JourneyStage(str, Enum):
    """Furthest checkpoint reached, used as a single display label."""

    NOT_STARTED = "Not Started"
    ARRIVAL = "Arrival"
    HOSTEL = "Hostel"
    DOCUMENTS = "Documents"
    KIT = "Kit"

    @classmethod
    def for_checkpoint(cls, checkpoint: Checkpoint) -> "JourneyStage":
        return cls(checkpoint.label)


class ScanStatus(str, Enum):
    ACCEPTED = "ACCEPTED"
    ALREADY_COMPLETED = "ALREADY_COMPLETED"
    NOT_FOUND = "NOT_FOUND"


class VisitorCountStatus(str, Enum):
    UPDATED = "UPDATED"
    NOT_FOUND = "NOT_FOUND"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"


class PendingBucket(str, Enum):
    """Mutually exclusive partition by first unmet checkpoint, in declared order."""

    NOT_ARRIVED = "notArrived"
    PENDING_HOSTEL = "pendingHostel"
    PENDING_DOCUMENTS = "pendingDocuments"
    PENDING_KIT = "pendingKit"
    COMPLETED = "completed"
