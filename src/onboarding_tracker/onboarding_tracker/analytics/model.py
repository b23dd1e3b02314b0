from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..core.enums import Checkpoint, PendingBucket


class StagePair(str, Enum):
    """Checkpoint transitions measured by the funnel and timing views."""

    ARRIVAL_TO_HOSTEL = "arrivalToHostel"
    HOSTEL_TO_DOCUMENTS = "hostelToDocuments"
    DOCUMENTS_TO_KIT = "documentsToKit"
    OVERALL_JOURNEY = "overallJourney"

    @property
    def earlier(self) -> Checkpoint:
        return _PAIR_CHECKPOINTS[self][0]

    @property
    def later(self) -> Checkpoint:
        return _PAIR_CHECKPOINTS[self][1]

    @property
    def label(self) -> str:
        return f"{self.earlier.label} → {self.later.label}"

    @property
    def funnel_key(self) -> str:
        return f"{self.later.value}From{self.earlier.label}"


_PAIR_CHECKPOINTS = {
    StagePair.ARRIVAL_TO_HOSTEL: (Checkpoint.ARRIVAL, Checkpoint.HOSTEL),
    StagePair.HOSTEL_TO_DOCUMENTS: (Checkpoint.HOSTEL, Checkpoint.DOCUMENTS),
    StagePair.DOCUMENTS_TO_KIT: (Checkpoint.DOCUMENTS, Checkpoint.KIT),
    StagePair.OVERALL_JOURNEY: (Checkpoint.ARRIVAL, Checkpoint.KIT),
}

ADJACENT_PAIRS: tuple[StagePair, ...] = (
    StagePair.ARRIVAL_TO_HOSTEL,
    StagePair.HOSTEL_TO_DOCUMENTS,
    StagePair.DOCUMENTS_TO_KIT,
)


@dataclass(frozen=True)
class ContributionAnomaly:
    """One record contribution dropped from a view."""

    student_id: str
    checkpoint: Checkpoint
    reason: str
    value: Optional[str] = None


@dataclass(frozen=True)
class AggregationDiagnostics:
    records_scanned: int = 0
    anomalies: tuple[ContributionAnomaly, ...] = ()

    @property
    def skipped_contributions(self) -> int:
        return len(self.anomalies)

    def to_dict(self) -> dict:
        return {
            "recordsScanned": self.records_scanned,
            "skippedContributions": self.skipped_contributions,
        }


# ===== Summary / funnel =====


@dataclass(frozen=True)
class DropOff:
    stage: str
    percentage: str


@dataclass(frozen=True)
class SummaryView:
    total_students: int
    done_counts: dict[Checkpoint, int]
    total_scans: int
    unique_volunteers: int
    completion_rates: dict[Checkpoint, float]
    funnel: dict[StagePair, str]
    overall_completion_rate: str
    biggest_dropoff: DropOff
    diagnostics: AggregationDiagnostics = field(default_factory=AggregationDiagnostics)

    def to_dict(self) -> dict:
        return {
            "totalStudents": self.total_students,
            "arrivedStudents": self.done_counts[Checkpoint.ARRIVAL],
            "hostelVerified": self.done_counts[Checkpoint.HOSTEL],
            "documentsVerified": self.done_counts[Checkpoint.DOCUMENTS],
            "kitReceived": self.done_counts[Checkpoint.KIT],
            "totalScans": self.total_scans,
            "uniqueVolunteers": self.unique_volunteers,
            "completionRates": {c.value: rate for c, rate in self.completion_rates.items()},
            "completionFunnel": {pair.funnel_key: rate for pair, rate in self.funnel.items()},
            "insights": {
                "overallCompletionRate": self.overall_completion_rate,
                "biggestDropoff": {
                    "stage": self.biggest_dropoff.stage,
                    "percentage": self.biggest_dropoff.percentage,
                },
            },
            "diagnostics": self.diagnostics.to_dict(),
        }


# ===== Pending buckets =====


@dataclass(frozen=True)
class PendingCountsView:
    total_students: int
    counts: dict[PendingBucket, int]
    percentages: dict[PendingBucket, str]
    most_bottleneck: PendingBucket
    diagnostics: AggregationDiagnostics = field(default_factory=AggregationDiagnostics)

    def to_dict(self) -> dict:
        return {
            "pendingCounts": {b.value: n for b, n in self.counts.items()},
            "percentages": {b.value: p for b, p in self.percentages.items()},
            "totalStudents": self.total_students,
            "insights": {"mostBottleneck": self.most_bottleneck.value},
            "diagnostics": self.diagnostics.to_dict(),
        }


# ===== Peak time of day =====


@dataclass(frozen=True)
class BucketCount:
    interval: int
    count: int
    label: str

    def to_dict(self) -> dict:
        return {"interval": self.interval, "count": self.count, "label": self.label}


@dataclass(frozen=True)
class PeakTimeView:
    interval_minutes: int
    buckets_per_day: int
    interval_data: dict[Checkpoint, list[BucketCount]]
    peak_intervals: dict[Checkpoint, BucketCount]
    totals: dict[Checkpoint, int]
    overall_peak_interval: BucketCount
    total_scans: int
    diagnostics: AggregationDiagnostics = field(default_factory=AggregationDiagnostics)

    def to_dict(self) -> dict:
        return {
            "intervalMinutes": self.interval_minutes,
            "intervalsPerDay": self.buckets_per_day,
            "intervalData": {c.value: [b.to_dict() for b in rows] for c, rows in self.interval_data.items()},
            "peakIntervals": {c.value: b.to_dict() for c, b in self.peak_intervals.items()},
            "totals": {c.value: n for c, n in self.totals.items()},
            "overallPeakInterval": self.overall_peak_interval.to_dict(),
            "totalScans": self.total_scans,
            "diagnostics": self.diagnostics.to_dict(),
        }


# ===== Stage timing =====


@dataclass(frozen=True)
class DurationStats:
    count: int
    average: str
    min: str
    max: str
    average_minutes: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "average": self.average,
            "count": self.count,
            "min": self.min,
            "max": self.max,
            "averageMinutes": self.average_minutes,
        }


@dataclass(frozen=True)
class StageTimingView:
    students_analyzed: int
    stage_timings: dict[StagePair, DurationStats]
    bottleneck: str
    average_journey: str
    completion_rate: dict[Checkpoint, float]
    diagnostics: AggregationDiagnostics = field(default_factory=AggregationDiagnostics)

    def to_dict(self) -> dict:
        return {
            "totalStudentsAnalyzed": self.students_analyzed,
            "stageTimings": {pair.value: stats.to_dict() for pair, stats in self.stage_timings.items()},
            "insights": {
                "bottleneck": self.bottleneck,
                "averageJourney": self.average_journey,
                "completionRate": {c.value: rate for c, rate in self.completion_rate.items()},
            },
            "diagnostics": self.diagnostics.to_dict(),
        }


# ===== Volunteer leaderboard =====


@dataclass(frozen=True)
class VolunteerStats:
    name: str
    total: int
    stages: dict[Checkpoint, int]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "totalStudents": self.total,
            "stages": {c.value: n for c, n in self.stages.items()},
        }


@dataclass(frozen=True)
class LeaderboardView:
    volunteers: list[VolunteerStats]
    total_completions: int
    diagnostics: AggregationDiagnostics = field(default_factory=AggregationDiagnostics)

    @property
    def total_volunteers(self) -> int:
        return len(self.volunteers)

    @property
    def top_volunteer(self) -> Optional[VolunteerStats]:
        return self.volunteers[0] if self.volunteers else None

    def to_dict(self) -> dict:
        top = self.top_volunteer
        return {
            "volunteers": [v.to_dict() for v in self.volunteers],
            "totalVolunteers": self.total_volunteers,
            "totalStudents": self.total_completions,
            "topVolunteer": top.to_dict() if top else None,
            "diagnostics": self.diagnostics.to_dict(),
        }
