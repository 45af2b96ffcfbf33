"""
Score history: growth score over time, bucketed by day or ISO week.

Aggregates the activity log by date. Achievement bonuses land in the bucket
of their unlock date. `cumulative_score` carries everything earned before
the window, so the last bucket equals the current total when nothing
happened after `end`.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Sequence

from circohback.core.errors import InvalidHistoryWindowError
from circohback.services.achievement_engine import Achievement
from circohback.services.activity_log import Activity

# Widest window a single request may ask for, in days.
MAX_HISTORY_DAYS = 366


class Granularity(str, Enum):
    day = "day"
    week = "week"


@dataclass(frozen=True)
class HistoryBucket:
    period_start: date
    points_earned: int
    activity_count: int
    cumulative_score: int


def bucket_start(day: date, granularity: Granularity) -> date:
    if granularity == Granularity.week:
        return day - timedelta(days=day.weekday())  # Monday
    return day


def compute_score_history(
    activities: Sequence[Activity],
    achievements: Sequence[Achievement],
    start: date,
    end: date,
    granularity: Granularity = Granularity.day,
) -> list[HistoryBucket]:
    if start > end:
        raise InvalidHistoryWindowError(start=start, end=end)
    if (end - start).days + 1 > MAX_HISTORY_DAYS:
        raise InvalidHistoryWindowError(start=start, end=end, max_days=MAX_HISTORY_DAYS)

    first = bucket_start(start, granularity)
    step = timedelta(days=7 if granularity == Granularity.week else 1)

    baseline = 0
    points: dict[date, int] = defaultdict(int)
    counts: dict[date, int] = defaultdict(int)

    dated = [(a.date.date(), a.points, True) for a in activities]
    dated += [(a.date_unlocked.date(), a.points, False) for a in achievements]
    for day, value, is_activity in dated:
        if day < first:
            baseline += value
        elif day <= end:
            key = bucket_start(day, granularity)
            points[key] += value
            if is_activity:
                counts[key] += 1

    buckets: list[HistoryBucket] = []
    running = baseline
    cursor = first
    while cursor <= end:
        running += points[cursor]
        buckets.append(HistoryBucket(
            period_start=cursor,
            points_earned=points[cursor],
            activity_count=counts[cursor],
            cumulative_score=running,
        ))
        cursor += step
    return buckets
