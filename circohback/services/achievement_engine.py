"""
Achievement engine: unlocks achievements from the activity log.

Rules (one per AchievementDefinition in the growth config)
----------------------------------------------------------
  total_activities     : number of activities >= threshold
  activity_type_count  : activities of `activity_type` >= threshold
  daily_streak         : longest run of consecutive active days >= threshold
  category_complete    : `category` percentage has reached 100%

Conditions read the activity log only, never the total score, so bonus
points cannot feed back into unlocks.

Idempotency
-----------
Each (user_id, code) is unique in `achievements`. A condition that first
evaluates true creates the record; later runs report it as already
unlocked. Records are never updated or removed. db.commit() called once at
the end.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from circohback.models.achievement import AchievementRecord
from circohback.services.activity_log import Activity, as_utc
from circohback.services.category_aggregator import aggregate_categories
from circohback.services.growth_config import (
    AchievementDefinition,
    AchievementKind,
    GrowthConfig,
)
from circohback.services.streaks import longest_daily_streak

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Achievement:
    id: int
    code: str
    title: str
    description: Optional[str]
    icon: Optional[str]
    color: Optional[str]
    points: int
    date_unlocked: datetime


@dataclass
class AchievementResult:
    """Summary of one evaluation run."""
    achievements: list[Achievement]                            # all unlocked, oldest first
    newly_unlocked: list[str] = field(default_factory=list)    # codes
    already_unlocked: list[str] = field(default_factory=list)  # codes


def _to_achievement(record: AchievementRecord) -> Achievement:
    return Achievement(
        id=record.id,
        code=record.code,
        title=record.title,
        description=record.description,
        icon=record.icon,
        color=record.color,
        points=record.points,
        date_unlocked=as_utc(record.date_unlocked),
    )


# ---------------------------------------------------------------------------
# Condition evaluation (pure)
# ---------------------------------------------------------------------------

def satisfied_codes(activities: Sequence[Activity], config: GrowthConfig) -> list[str]:
    """Codes of every achievement whose condition currently holds, in config order."""
    type_counts = Counter(a.type for a in activities)
    longest_streak = longest_daily_streak(activities)
    complete = {
        c.category
        for c in aggregate_categories(activities, config.categories)
        if c.is_complete
    }

    def holds(definition: AchievementDefinition) -> bool:
        if definition.kind == AchievementKind.total_activities:
            return len(activities) >= definition.threshold
        if definition.kind == AchievementKind.activity_type_count:
            return type_counts[definition.activity_type] >= definition.threshold
        if definition.kind == AchievementKind.daily_streak:
            return longest_streak >= definition.threshold
        if definition.kind == AchievementKind.category_complete:
            return definition.category in complete
        return False

    return [d.code for d in config.achievements if holds(d)]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def list_achievements(db: Session, user_id: str) -> list[Achievement]:
    records = (
        db.query(AchievementRecord)
        .filter(AchievementRecord.user_id == user_id)
        .order_by(AchievementRecord.date_unlocked.asc(), AchievementRecord.id.asc())
        .all()
    )
    return [_to_achievement(r) for r in records]


def evaluate_achievements(
    db: Session,
    user_id: str,
    activities: Sequence[Activity],
    config: GrowthConfig,
    now: Optional[datetime] = None,
) -> AchievementResult:
    """
    Unlock every achievement whose condition holds and is not yet recorded.
    Idempotent: safe to call repeatedly with the same log.
    """
    unlocked_at = now or datetime.now(tz=timezone.utc)
    existing = {
        code
        for (code,) in db.query(AchievementRecord.code)
        .filter(AchievementRecord.user_id == user_id)
        .all()
    }

    result = AchievementResult(achievements=[])
    definitions = {d.code: d for d in config.achievements}
    for code in satisfied_codes(activities, config):
        if code in existing:
            result.already_unlocked.append(code)
            continue
        definition = definitions[code]
        db.add(AchievementRecord(
            user_id=user_id,
            code=code,
            title=definition.title,
            description=definition.description,
            icon=definition.icon,
            color=definition.color,
            points=definition.points,
            date_unlocked=unlocked_at,
        ))
        result.newly_unlocked.append(code)

    if result.newly_unlocked:
        try:
            db.commit()
            logger.info("Unlocked achievements user=%s codes=%s", user_id, result.newly_unlocked)
        except IntegrityError:
            # Another request unlocked the same codes first.
            db.rollback()
            result.newly_unlocked = []

    result.achievements = list_achievements(db, user_id)
    return result
