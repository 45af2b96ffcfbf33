"""
Achievements and level-up events router.

GET  /users/{user_id}/achievements                      — unlocked achievements
GET  /users/{user_id}/level-ups                         — level-up events (newest first)
POST /users/{user_id}/level-ups/{event_id}/acknowledge  — consume a level-up
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from circohback.db.base import get_db
from circohback.models.level_state import LevelUpEvent
from circohback.schemas.common import ErrorResponse
from circohback.schemas.achievement import (
    AchievementListResponse,
    AchievementResponse,
    LevelUpEventListResponse,
    LevelUpEventResponse,
)
from circohback.services.achievement_engine import list_achievements
from circohback.services.growth_service import acknowledge_level_up, list_level_up_events

router = APIRouter(prefix="/users/{user_id}", tags=["achievements"])


def level_up_to_response(ev: LevelUpEvent) -> LevelUpEventResponse:
    return LevelUpEventResponse(
        id=ev.id,
        from_level=ev.from_level,
        to_level=ev.to_level,
        level_title=ev.level_title,
        total_score=ev.total_score,
        acknowledged=ev.acknowledged,
        created_at=ev.created_at.isoformat() if ev.created_at else "",
    )


@router.get(
    "/achievements",
    response_model=AchievementListResponse,
    summary="Unlocked achievements (oldest first)",
)
def get_achievements(user_id: str, db: Session = Depends(get_db)):
    """
    Achievements are unlocked by `GET /users/{user_id}/growth`; this
    endpoint only lists what has been recorded.
    """
    items = list_achievements(db, user_id)
    return AchievementListResponse(
        total=len(items),
        total_bonus_points=sum(a.points for a in items),
        items=[
            AchievementResponse(
                id=a.id,
                code=a.code,
                title=a.title,
                description=a.description,
                icon=a.icon,
                color=a.color,
                points=a.points,
                date_unlocked=a.date_unlocked.isoformat(),
            )
            for a in items
        ],
    )


@router.get(
    "/level-ups",
    response_model=LevelUpEventListResponse,
    summary="Level-up events (newest first)",
)
def get_level_ups(
    user_id: str,
    pending_only: bool = Query(default=False, description="Only events not yet acknowledged."),
    db: Session = Depends(get_db),
):
    items = list_level_up_events(db, user_id=user_id, pending_only=pending_only)
    return LevelUpEventListResponse(
        total=len(items),
        items=[level_up_to_response(ev) for ev in items],
    )


@router.post(
    "/level-ups/{event_id}/acknowledge",
    response_model=LevelUpEventResponse,
    summary="Mark a level-up as shown",
    responses={
        200: {"description": "Event acknowledged (idempotent)."},
        404: {"model": ErrorResponse, "description": "No such event for this user."},
    },
)
def post_acknowledge_level_up(user_id: str, event_id: int, db: Session = Depends(get_db)):
    event = acknowledge_level_up(db, user_id=user_id, event_id=event_id)
    return level_up_to_response(event)
