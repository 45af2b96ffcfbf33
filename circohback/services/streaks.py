"""
Streaks derived from the activity log.

Two views:
  * per activity type: consecutive activities of one type no more than
    48 hours apart. A streak whose last activity is older than 48 hours is
    broken and reports count 0.
  * daily: consecutive UTC calendar days with at least one activity. The
    current streak survives until the end of the day after the last active
    day.

Both are pure; `now` / `today` are injected.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from itertools import groupby
from typing import Iterable, Optional, Sequence

from circohback.services.activity_log import Activity

STREAK_WINDOW = timedelta(hours=48)
STREAK_MILESTONES: tuple[int, ...] = (3, 7, 14, 30, 60, 90, 180, 365)


@dataclass(frozen=True)
class TypeStreak:
    activity_type: str
    count: int
    longest: int
    last_performed: datetime
    active: bool


@dataclass(frozen=True)
class DailyStreak:
    current: int
    longest: int
    last_active_day: Optional[date]
    next_milestone: Optional[int]


def next_milestone(streak: int) -> Optional[int]:
    for milestone in STREAK_MILESTONES:
        if milestone > streak:
            return milestone
    return None


# ---------------------------------------------------------------------------
# Per activity type
# ---------------------------------------------------------------------------

def _type_streak(activity_type: str, dates: Sequence[datetime], now: datetime) -> TypeStreak:
    run = longest = 1
    for prev, cur in zip(dates, dates[1:]):
        run = run + 1 if cur - prev <= STREAK_WINDOW else 1
        longest = max(longest, run)
    last = dates[-1]
    active = now - last <= STREAK_WINDOW
    return TypeStreak(
        activity_type=activity_type,
        count=run if active else 0,
        longest=longest,
        last_performed=last,
        active=active,
    )


def compute_type_streaks(activities: Iterable[Activity], now: datetime) -> list[TypeStreak]:
    """One streak per activity type present in the log, sorted by type."""
    ordered = sorted(activities, key=lambda a: (a.type, a.date))
    return [
        _type_streak(activity_type, [a.date for a in group], now)
        for activity_type, group in groupby(ordered, key=lambda a: a.type)
    ]


# ---------------------------------------------------------------------------
# Daily
# ---------------------------------------------------------------------------

def _active_days(activities: Iterable[Activity]) -> list[date]:
    return sorted({a.date.date() for a in activities})


def _runs(days: Sequence[date]) -> list[tuple[date, int]]:
    """(last_day, length) for every run of consecutive days."""
    runs: list[tuple[date, int]] = []
    for day in days:
        if runs and day - runs[-1][0] == timedelta(days=1):
            runs[-1] = (day, runs[-1][1] + 1)
        else:
            runs.append((day, 1))
    return runs


def longest_daily_streak(activities: Iterable[Activity]) -> int:
    runs = _runs(_active_days(activities))
    return max((length for _, length in runs), default=0)


def compute_daily_streak(activities: Iterable[Activity], today: date) -> DailyStreak:
    runs = _runs(_active_days(activities))
    if not runs:
        return DailyStreak(current=0, longest=0, last_active_day=None, next_milestone=next_milestone(0))

    last_day, last_len = runs[-1]
    current = last_len if (today - last_day).days <= 1 else 0
    return DailyStreak(
        current=current,
        longest=max(length for _, length in runs),
        last_active_day=last_day,
        next_milestone=next_milestone(current),
    )
