"""
Activity log: the append-only record of scorable user actions.

The scoring modules never touch the database; they take a list of
`Activity` values produced here. Recording an activity resolves its
category and point value from the growth config, so neither is ever
supplied by the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from circohback.core.errors import UnknownActivityTypeError
from circohback.models.activity import ActivityRecord
from circohback.services.growth_config import GrowthConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Activity:
    id: int
    type: str
    category: Optional[str]
    points: int
    date: datetime
    description: Optional[str] = None
    contact_id: Optional[str] = None


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_activity(record: ActivityRecord) -> Activity:
    return Activity(
        id=record.id,
        type=record.activity_type,
        category=record.category,
        points=record.points,
        date=as_utc(record.occurred_at),
        description=record.description,
        contact_id=record.contact_id,
    )


def record_activity(
    db: Session,
    user_id: str,
    activity_type: str,
    config: GrowthConfig,
    occurred_at: Optional[datetime] = None,
    description: Optional[str] = None,
    contact_id: Optional[str] = None,
) -> Activity:
    definition = config.activity_type(activity_type)
    if definition is None:
        raise UnknownActivityTypeError(activity_type, config.activity_type_names)

    record = ActivityRecord(
        user_id=user_id,
        activity_type=definition.type,
        category=definition.category,
        points=definition.points,
        occurred_at=as_utc(occurred_at) if occurred_at else datetime.now(tz=timezone.utc),
        description=description,
        contact_id=contact_id,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(
        "Recorded activity id=%s user=%s type=%s points=%s",
        record.id, user_id, record.activity_type, record.points,
    )
    return _to_activity(record)


def list_activities(db: Session, user_id: str) -> list[Activity]:
    """Full log for a user, oldest first."""
    records = (
        db.query(ActivityRecord)
        .filter(ActivityRecord.user_id == user_id)
        .order_by(ActivityRecord.occurred_at.asc(), ActivityRecord.id.asc())
        .all()
    )
    return [_to_activity(r) for r in records]


def page_activities(
    db: Session,
    user_id: str,
    limit: int = 50,
    offset: int = 0,
) -> tuple[int, list[Activity]]:
    """Return (total, page) ordered newest first."""
    q = db.query(ActivityRecord).filter(ActivityRecord.user_id == user_id)
    total = q.count()
    items = (
        q.order_by(ActivityRecord.occurred_at.desc(), ActivityRecord.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return total, [_to_activity(r) for r in items]
