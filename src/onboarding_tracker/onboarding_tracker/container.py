from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo

from .analytics.service import AnalyticsService
from .database.connection import DBConfig, DatabaseConnection
from .journey.projector import JourneyService
from .scans.service import StageGuard
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    students_repo: StudentRepository

    stage_guard: StageGuard
    journey_service: JourneyService
    analytics_service: AnalyticsService


def build_services(students_repo: StudentRepository, *, analytics_timezone: str = "", conn=None) -> Container:
    zone = ZoneInfo(analytics_timezone) if analytics_timezone else None
    return Container(
        conn=conn,
        students_repo=students_repo,
        stage_guard=StageGuard(students_repo),
        journey_service=JourneyService(students_repo),
        analytics_service=AnalyticsService(students_repo, zone=zone),
    )


def build_container(*, db_config: dict, analytics_timezone: str = "") -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_services(MySQLStudentRepository(conn), analytics_timezone=analytics_timezone, conn=conn)
