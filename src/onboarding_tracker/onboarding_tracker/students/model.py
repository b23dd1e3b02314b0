from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Checkpoint


@dataclass(frozen=True)
class CheckpointState:
    """One checkpoint of a student record.

    ``completed_at`` is kept as persisted text (ISO-8601) so that values written
    by other processes reach analytics unchanged, malformed ones included.
    """

    done: bool = False
    completed_at: Optional[str] = None
    completed_by: Optional[str] = None


@dataclass(frozen=True)
class StudentRecord:
    """Domain entity: one tracked student and their four checkpoints.

    Note: Plain data object (no DB access code).
    """

    student_id: str
    name: str = ""
    group_tag: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    visitor_count: int = 0
    arrival: CheckpointState = field(default_factory=CheckpointState)
    hostel: CheckpointState = field(default_factory=CheckpointState)
    documents: CheckpointState = field(default_factory=CheckpointState)
    kit: CheckpointState = field(default_factory=CheckpointState)

    def checkpoint(self, checkpoint: Checkpoint) -> CheckpointState:
        return getattr(self, checkpoint.value)
