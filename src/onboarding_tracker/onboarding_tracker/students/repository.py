from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ..core.enums import Checkpoint
from .model import StudentRecord


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[StudentRecord]:
        raise NotImplementedError

    def complete_checkpoint(
        self,
        *,
        student_id: str,
        checkpoint: Checkpoint,
        completed_at: str,
        completed_by: str,
    ) -> bool:
        """Conditional write: mark ``checkpoint`` done only while it is not done yet.

        Returns True when this call performed the write, False when the
        checkpoint was already done (or the row is gone). Must be atomic at the
        store: of several concurrent calls for one (student, checkpoint), at
        most one returns True.
        """

        raise NotImplementedError

    def update_visitor_count(self, *, student_id: str, visitor_count: int) -> None:
        raise NotImplementedError

    def scan_all(self) -> Iterable[StudentRecord]:
        """Every record, ordered by student id."""

        raise NotImplementedError
