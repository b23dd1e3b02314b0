from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Checkpoint, ScanStatus, VisitorCountStatus
from ..students.model import StudentRecord


@dataclass(frozen=True)
class ScanOutcome:
    """Result of one checkpoint scan.

    ALREADY_COMPLETED is a rejection, not an error: ``prior_completed_at`` and
    ``prior_completed_by`` carry what the earlier scan recorded.
    """

    status: ScanStatus
    student_id: str
    checkpoint: Checkpoint
    record: Optional[StudentRecord] = None
    prior_completed_at: Optional[str] = None
    prior_completed_by: Optional[str] = None

@dataclass(frozen=True)
class VisitorCountOutcome:
    status: VisitorCountStatus
    student_id: str
    record: Optional[StudentRecord] = None
