"""
Growth service: ties the pure score facade to persisted state.

refresh_growth runs, in order:
  1. read the activity log
  2. evaluate achievements (may unlock new ones)
  3. compute the score
  4. run level-up detection against the stored LevelState (a user with
     no row yet is Stable(1))
  5. move the stored level with a conditional UPDATE and, on an increase,
     record a LevelUpEvent. Concurrent refreshes that observed the same
     transition race on that UPDATE; only the winner records the event.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from circohback.core.errors import LevelUpEventNotFoundError
from circohback.models.level_state import LevelState, LevelUpEvent
from circohback.services.achievement_engine import evaluate_achievements
from circohback.services.activity_log import list_activities
from circohback.services.growth_config import GrowthConfig
from circohback.services.score_facade import GrowthScore, compute_score, detect_level_up

logger = logging.getLogger(__name__)

# Every user starts at score 0, i.e. Stable(1).
INITIAL_LEVEL = 1


@dataclass
class GrowthRefresh:
    score: GrowthScore
    level_up: Optional[LevelUpEvent]
    new_achievements: list[str]


def _stored_level(db: Session, user_id: str) -> int:
    state = db.get(LevelState, user_id)
    if state is not None:
        return state.last_level
    return _create_initial_state(db, user_id)


def _create_initial_state(db: Session, user_id: str) -> int:
    db.add(LevelState(user_id=user_id, last_level=INITIAL_LEVEL))
    try:
        db.commit()
    except IntegrityError:
        # Another request created the row first.
        db.rollback()
        return db.get(LevelState, user_id).last_level
    return INITIAL_LEVEL


def refresh_growth(
    db: Session,
    user_id: str,
    config: GrowthConfig,
    now: Optional[datetime] = None,
) -> GrowthRefresh:
    activities = list_activities(db, user_id)
    achievements = evaluate_achievements(db, user_id, activities, config, now=now)
    score = compute_score(activities, achievements.achievements, config)

    last_level = _stored_level(db, user_id)
    transition = detect_level_up(last_level, score.current_level)
    result = GrowthRefresh(score=score, level_up=None, new_achievements=achievements.newly_unlocked)
    if not transition.changed:
        return result

    # Compare-and-set: only the request that still sees `last_level` may move it.
    claimed = db.execute(
        update(LevelState)
        .where(LevelState.user_id == user_id, LevelState.last_level == last_level)
        .values(last_level=transition.level)
    ).rowcount == 1
    if not claimed:
        db.rollback()
        logger.info(
            "Level transition already recorded user=%s %s -> %s",
            user_id, last_level, transition.level,
        )
        return result

    if transition.event is None:
        logger.info(
            "Level re-stabilised user=%s %s -> %s",
            user_id, last_level, transition.level,
        )
        db.commit()
        return result

    event = LevelUpEvent(
        user_id=user_id,
        from_level=transition.event.from_level,
        to_level=transition.event.to_level,
        level_title=score.level_title,
        total_score=score.total_score,
        acknowledged=False,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info(
        "Level up user=%s %s -> %s (score=%s)",
        user_id, event.from_level, event.to_level, event.total_score,
    )
    result.level_up = event
    return result


# ---------------------------------------------------------------------------
# Level-up event consumption
# ---------------------------------------------------------------------------

def list_level_up_events(
    db: Session,
    user_id: str,
    pending_only: bool = False,
) -> list[LevelUpEvent]:
    """Newest first."""
    q = db.query(LevelUpEvent).filter(LevelUpEvent.user_id == user_id)
    if pending_only:
        q = q.filter(LevelUpEvent.acknowledged.is_(False))
    return q.order_by(LevelUpEvent.created_at.desc(), LevelUpEvent.id.desc()).all()


def acknowledge_level_up(db: Session, user_id: str, event_id: int) -> LevelUpEvent:
    """Mark a level-up as shown. Acknowledging twice is a no-op."""
    event = (
        db.query(LevelUpEvent)
        .filter(LevelUpEvent.id == event_id, LevelUpEvent.user_id == user_id)
        .first()
    )
    if event is None:
        raise LevelUpEventNotFoundError(user_id=user_id, event_id=event_id)
    if not event.acknowledged:
        event.acknowledged = True
        db.commit()
        db.refresh(event)
    return event
