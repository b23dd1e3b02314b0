from __future__ import annotations

from datetime import tzinfo
from typing import Optional

from ..common.validators import require_bucket_width
from ..core.exceptions import StoreUnavailableError
from ..observability.events import LogEvent
from ..observability.structured import create_logger
from ..students.model import StudentRecord
from ..students.repository import StudentRepository
from . import views
from .model import (
    AggregationDiagnostics,
    LeaderboardView,
    PeakTimeView,
    PendingCountsView,
    StageTimingView,
    SummaryView,
)

logger = create_logger("analytics")


class AnalyticsService:
    """Use case: recompute cohort analytics from a full scan of the store.

    Every call reads a fresh snapshot; views are never cached, so callers
    decide the refresh cadence. A store failure aborts the requested view with
    StoreUnavailableError.
    """

    def __init__(self, students: StudentRepository, *, zone: Optional[tzinfo] = None):
        self._students = students
        self._zone = zone

    def _snapshot(self, view: str) -> list[StudentRecord]:
        try:
            return list(self._students.scan_all())
        except StoreUnavailableError as err:
            logger.error(LogEvent.STORE_UNAVAILABLE, "Full scan failed", {"view": view}, exc_info=err)
            raise

    def _report(self, view: str, diagnostics: AggregationDiagnostics) -> None:
        for anomaly in diagnostics.anomalies:
            logger.warning(
                LogEvent.ANALYTICS_CONTRIBUTION_SKIPPED,
                f"Skipped {anomaly.checkpoint.value} contribution: {anomaly.reason}",
                {"view": view, "studentId": anomaly.student_id, "value": anomaly.value},
            )
        logger.debug(LogEvent.ANALYTICS_VIEW_COMPUTED, f"{view} computed", {"view": view, **diagnostics.to_dict()})

    def summary(self) -> SummaryView:
        result = views.build_summary(self._snapshot("summary"))
        self._report("summary", result.diagnostics)
        return result

    def pending_counts(self) -> PendingCountsView:
        result = views.build_pending_counts(self._snapshot("pending-counts"))
        self._report("pending-counts", result.diagnostics)
        return result

    def peak_time_of_day(self, width_minutes: int | str) -> PeakTimeView:
        # Validate before touching the store.
        width = require_bucket_width(width_minutes)
        result = views.build_peak_time_of_day(self._snapshot("peak-hours"), width, zone=self._zone)
        self._report("peak-hours", result.diagnostics)
        return result

    def stage_timing(self) -> StageTimingView:
        result = views.build_stage_timing(self._snapshot("stage-timing"), zone=self._zone)
        self._report("stage-timing", result.diagnostics)
        return result

    def leaderboard(self) -> LeaderboardView:
        result = views.build_leaderboard(self._snapshot("volunteer-stats"))
        self._report("volunteer-stats", result.diagnostics)
        return result
