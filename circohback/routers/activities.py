"""
Activity log router.

POST /users/{user_id}/activities   — record a scorable action
GET  /users/{user_id}/activities   — paginated log (newest first)
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from circohback.db.base import get_db
from circohback.schemas.common import ErrorResponse
from circohback.schemas.activity import ActivityCreate, ActivityListResponse, ActivityResponse
from circohback.services.activity_log import Activity, page_activities, record_activity
from circohback.services.growth_config import GrowthConfig, get_growth_config

router = APIRouter(prefix="/users/{user_id}/activities", tags=["activities"])


def _activity_to_response(a: Activity) -> ActivityResponse:
    return ActivityResponse(
        id=a.id,
        type=a.type,
        category=a.category,
        points=a.points,
        date=a.date.isoformat(),
        description=a.description,
        contact_id=a.contact_id,
    )


@router.post(
    "",
    response_model=ActivityResponse,
    status_code=201,
    summary="Record an activity",
    responses={
        201: {"description": "Activity recorded with its configured category and points."},
        422: {"model": ErrorResponse, "description": "Unknown activity type or invalid payload."},
    },
)
def create_activity(
    user_id: str,
    payload: ActivityCreate,
    db: Session = Depends(get_db),
    config: GrowthConfig = Depends(get_growth_config),
):
    """
    Append an activity to the user's log.

    `category` and `points` are resolved from the growth config for the
    given `type`; they cannot be supplied by the client.
    """
    activity = record_activity(
        db,
        user_id=user_id,
        activity_type=payload.type,
        config=config,
        occurred_at=payload.date,
        description=payload.description,
        contact_id=payload.contact_id,
    )
    return _activity_to_response(activity)


@router.get(
    "",
    response_model=ActivityListResponse,
    summary="List the activity log (newest first)",
)
def list_user_activities(
    user_id: str,
    limit: int = Query(default=50, ge=1, le=200, description="Page size."),
    offset: int = Query(default=0, ge=0, description="Skip N items."),
    db: Session = Depends(get_db),
):
    total, items = page_activities(db, user_id=user_id, limit=limit, offset=offset)
    return ActivityListResponse(
        total=total,
        items=[_activity_to_response(a) for a in items],
    )
