from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from ..core.enums import CHECKPOINT_ORDER, Checkpoint
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CheckpointState, StudentRecord
from .repository import StudentRepository

_CHECKPOINT_SELECT = ", ".join(col for cp in CHECKPOINT_ORDER for col in cp.columns)

_SELECT_STUDENTS = f"""
    SELECT student_id, name, group_tag, email, phone, visitor_count, {_CHECKPOINT_SELECT}
    FROM students
"""


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat(timespec="milliseconds")
    return str(value)


def _to_checkpoint(row: Dict[str, Any], checkpoint: Checkpoint) -> CheckpointState:
    done_col, by_col, at_col = checkpoint.columns
    return CheckpointState(
        done=bool(row.get(done_col)),
        completed_at=_as_text(row.get(at_col)),
        completed_by=row.get(by_col),
    )


def _to_record(row: Dict[str, Any]) -> StudentRecord:
    return StudentRecord(
        student_id=str(row["student_id"]),
        name=row.get("name") or "",
        group_tag=row.get("group_tag"),
        email=row.get("email"),
        phone=row.get("phone"),
        visitor_count=int(row.get("visitor_count") or 0),
        arrival=_to_checkpoint(row, Checkpoint.ARRIVAL),
        hostel=_to_checkpoint(row, Checkpoint.HOSTEL),
        documents=_to_checkpoint(row, Checkpoint.DOCUMENTS),
        kit=_to_checkpoint(row, Checkpoint.KIT),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[StudentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_STUDENTS + " WHERE student_id=%s", (student_id,))
            r = fetchone(cur)
            if not r:
                return None
            return _to_record(r)

    def complete_checkpoint(
        self,
        *,
        student_id: str,
        checkpoint: Checkpoint,
        completed_at: str,
        completed_by: str,
    ) -> bool:
        done_col, by_col, at_col = checkpoint.columns
        # Column names come from the Checkpoint enum, never from user input.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE students
                SET {done_col}=1, {by_col}=%s, {at_col}=%s
                WHERE student_id=%s AND {done_col}=0
                """,
                (completed_by, completed_at, student_id),
            )
            return cur.rowcount > 0

    def update_visitor_count(self, *, student_id: str, visitor_count: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET visitor_count=%s
                WHERE student_id=%s AND arrival=1
                """,
                (int(visitor_count), student_id),
            )

    def scan_all(self) -> Iterable[StudentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_STUDENTS + " ORDER BY student_id ASC")
            rows = fetchall(cur)
            return [_to_record(r) for r in rows]
