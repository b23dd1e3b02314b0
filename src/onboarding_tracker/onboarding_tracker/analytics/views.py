"""Pure aggregation folds over a snapshot of student records.

Each function takes the full record list and returns a freshly built view;
nothing is cached or patched incrementally. Per-record problems (missing or
unparsable timestamps, missing attribution) are recorded as anomalies in the
view's diagnostics and never abort the fold.
"""

from __future__ import annotations

import math
from datetime import datetime, tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import format_duration, parse_timestamp, to_zone
from ..core.constants import NOT_AVAILABLE
from ..core.enums import CHECKPOINT_ORDER, Checkpoint, PendingBucket
from ..students.model import StudentRecord
from .bucketizer import bucket_index, bucket_label, buckets_per_day
from .model import (
    ADJACENT_PAIRS,
    AggregationDiagnostics,
    BucketCount,
    ContributionAnomaly,
    DropOff,
    DurationStats,
    LeaderboardView,
    PeakTimeView,
    PendingCountsView,
    StagePair,
    StageTimingView,
    SummaryView,
    VolunteerStats,
)

_BOTTLENECK_CANDIDATES = (
    PendingBucket.PENDING_HOSTEL,
    PendingBucket.PENDING_DOCUMENTS,
    PendingBucket.PENDING_KIT,
)


def percent(numerator: int, denominator: int) -> str:
    """``numerator / denominator * 100`` with one decimal, ``"0.0"`` on a zero denominator."""
    if denominator <= 0:
        return "0.0"
    return f"{numerator / denominator * 100:.1f}"


def _completion_time(
    record: StudentRecord,
    checkpoint: Checkpoint,
    zone: Optional[tzinfo],
    anomalies: list[ContributionAnomaly],
) -> Optional[datetime]:
    state = record.checkpoint(checkpoint)
    if not state.done:
        return None
    if state.completed_at is None:
        anomalies.append(ContributionAnomaly(record.student_id, checkpoint, "missing timestamp"))
        return None
    try:
        parsed = parse_timestamp(state.completed_at)
    except ValueError:
        anomalies.append(
            ContributionAnomaly(record.student_id, checkpoint, "unparsable timestamp", str(state.completed_at))
        )
        return None
    return to_zone(parsed, zone)


def _elapsed_ms(earlier: datetime, later: datetime) -> float:
    if earlier.tzinfo is None or later.tzinfo is None:
        # Mixed naive/aware values: compare wall-clock times.
        earlier = earlier.replace(tzinfo=None)
        later = later.replace(tzinfo=None)
    return (later - earlier).total_seconds() * 1000


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ===== 1. Summary / funnel =====


def build_summary(records: Sequence[StudentRecord]) -> SummaryView:
    total = len(records)
    done_counts = {c: 0 for c in CHECKPOINT_ORDER}
    volunteers: set[str] = set()

    for record in records:
        for checkpoint in CHECKPOINT_ORDER:
            state = record.checkpoint(checkpoint)
            if state.done:
                done_counts[checkpoint] += 1
            if state.completed_by:
                volunteers.add(state.completed_by)

    completion_rates = {c: float(percent(n, total)) for c, n in done_counts.items()}
    funnel = {pair: percent(done_counts[pair.later], done_counts[pair.earlier]) for pair in ADJACENT_PAIRS}

    # Lowest conversion wins; on ties the earliest transition is kept.
    worst = ADJACENT_PAIRS[0]
    for pair in ADJACENT_PAIRS[1:]:
        if float(funnel[pair]) < float(funnel[worst]):
            worst = pair

    return SummaryView(
        total_students=total,
        done_counts=done_counts,
        total_scans=sum(done_counts.values()),
        unique_volunteers=len(volunteers),
        completion_rates=completion_rates,
        funnel=funnel,
        overall_completion_rate=f"{completion_rates[Checkpoint.KIT]:.1f}%",
        biggest_dropoff=DropOff(stage=worst.label, percentage=f"{float(funnel[worst]):.1f}%"),
        diagnostics=AggregationDiagnostics(records_scanned=total),
    )


# ===== 2. Pending buckets =====


def pending_bucket(record: StudentRecord) -> PendingBucket:
    """First unmet checkpoint in journey order (stricter than the furthest-reached label)."""
    if not record.arrival.done:
        return PendingBucket.NOT_ARRIVED
    if not record.hostel.done:
        return PendingBucket.PENDING_HOSTEL
    if not record.documents.done:
        return PendingBucket.PENDING_DOCUMENTS
    if not record.kit.done:
        return PendingBucket.PENDING_KIT
    return PendingBucket.COMPLETED


def build_pending_counts(records: Sequence[StudentRecord]) -> PendingCountsView:
    total = len(records)
    counts = {b: 0 for b in PendingBucket}
    for record in records:
        counts[pending_bucket(record)] += 1

    most = _BOTTLENECK_CANDIDATES[0]
    for bucket in _BOTTLENECK_CANDIDATES[1:]:
        if counts[bucket] > counts[most]:
            most = bucket

    return PendingCountsView(
        total_students=total,
        counts=counts,
        percentages={b: percent(n, total) for b, n in counts.items()},
        most_bottleneck=most,
        diagnostics=AggregationDiagnostics(records_scanned=total),
    )


# ===== 3. Peak time of day =====


def _peak(counts: Sequence[int], width: int) -> BucketCount:
    best = 0
    for i in range(1, len(counts)):
        if counts[i] > counts[best]:
            best = i
    return BucketCount(interval=best, count=counts[best], label=bucket_label(best, width))


def build_peak_time_of_day(
    records: Sequence[StudentRecord],
    width: int,
    *,
    zone: Optional[tzinfo] = None,
) -> PeakTimeView:
    n_buckets = buckets_per_day(width)
    counts = {c: [0] * n_buckets for c in CHECKPOINT_ORDER}
    anomalies: list[ContributionAnomaly] = []

    for record in records:
        for checkpoint in CHECKPOINT_ORDER:
            when = _completion_time(record, checkpoint, zone, anomalies)
            if when is not None:
                counts[checkpoint][bucket_index(when, width)] += 1

    overall = [sum(counts[c][i] for c in CHECKPOINT_ORDER) for i in range(n_buckets)]
    totals = {c: sum(rows) for c, rows in counts.items()}

    return PeakTimeView(
        interval_minutes=width,
        buckets_per_day=n_buckets,
        interval_data={
            c: [BucketCount(interval=i, count=n, label=bucket_label(i, width)) for i, n in enumerate(rows)]
            for c, rows in counts.items()
        },
        peak_intervals={c: _peak(rows, width) for c, rows in counts.items()},
        totals=totals,
        overall_peak_interval=_peak(overall, width),
        total_scans=sum(totals.values()),
        diagnostics=AggregationDiagnostics(records_scanned=len(records), anomalies=tuple(anomalies)),
    )


# ===== 4. Stage timing =====


def duration_stats(samples_ms: Sequence[float]) -> DurationStats:
    if not samples_ms:
        return DurationStats(count=0, average=NOT_AVAILABLE, min=NOT_AVAILABLE, max=NOT_AVAILABLE)

    avg_ms = sum(samples_ms) / len(samples_ms)
    return DurationStats(
        count=len(samples_ms),
        average=format_duration(avg_ms),
        min=format_duration(min(samples_ms)),
        max=format_duration(max(samples_ms)),
        average_minutes=_round_half_up(avg_ms / 60_000),
    )


def build_stage_timing(records: Sequence[StudentRecord], *, zone: Optional[tzinfo] = None) -> StageTimingView:
    samples: dict[StagePair, list[float]] = {pair: [] for pair in StagePair}
    anomalies: list[ContributionAnomaly] = []
    analyzed = 0

    for record in records:
        times = {c: _completion_time(record, c, zone, anomalies) for c in CHECKPOINT_ORDER}
        # Only arrived students are analyzed; later checkpoints alone contribute nothing.
        if times[Checkpoint.ARRIVAL] is None:
            continue
        analyzed += 1

        for pair in StagePair:
            earlier, later = times[pair.earlier], times[pair.later]
            if earlier is None or later is None:
                continue
            elapsed = _elapsed_ms(earlier, later)
            # Checkpoints are not enforced in order; out-of-order pairs are excluded.
            if elapsed > 0:
                samples[pair].append(elapsed)

    stats = {pair: duration_stats(samples[pair]) for pair in StagePair}

    bottleneck = ADJACENT_PAIRS[0]
    for pair in ADJACENT_PAIRS[1:]:
        if (stats[pair].average_minutes or 0) > (stats[bottleneck].average_minutes or 0):
            bottleneck = pair

    return StageTimingView(
        students_analyzed=analyzed,
        stage_timings=stats,
        bottleneck=bottleneck.label,
        average_journey=stats[StagePair.OVERALL_JOURNEY].average,
        completion_rate={
            pair.later: (len(samples[pair]) / analyzed if analyzed else 0.0) for pair in ADJACENT_PAIRS
        },
        diagnostics=AggregationDiagnostics(records_scanned=len(records), anomalies=tuple(anomalies)),
    )


# ===== 5. Volunteer leaderboard =====


def build_leaderboard(records: Sequence[StudentRecord]) -> LeaderboardView:
    tallies: dict[str, dict[Checkpoint, int]] = {}
    anomalies: list[ContributionAnomaly] = []

    for record in records:
        for checkpoint in CHECKPOINT_ORDER:
            state = record.checkpoint(checkpoint)
            if not state.done:
                continue
            if not state.completed_by:
                anomalies.append(ContributionAnomaly(record.student_id, checkpoint, "missing attribution"))
                continue
            stages = tallies.setdefault(state.completed_by, {c: 0 for c in CHECKPOINT_ORDER})
            stages[checkpoint] += 1

    volunteers = [VolunteerStats(name=name, total=sum(stages.values()), stages=stages) for name, stages in tallies.items()]
    volunteers.sort(key=lambda v: (-v.total, v.name))

    return LeaderboardView(
        volunteers=volunteers,
        total_completions=sum(v.total for v in volunteers),
        diagnostics=AggregationDiagnostics(records_scanned=len(records), anomalies=tuple(anomalies)),
    )
