"""
Growth router.

GET /users/{user_id}/growth                  — score, breakdown, level, level-up
GET /users/{user_id}/growth/history          — score over time
GET /users/{user_id}/growth/recommendations  — focus category + next level
GET /users/{user_id}/streaks                 — daily and per-type streaks
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from circohback.db.base import get_db
from circohback.routers.achievements import level_up_to_response
from circohback.schemas.common import ErrorResponse
from circohback.schemas.growth import (
    CategoryScoreResponse,
    DailyStreakResponse,
    GrowthScoreResponse,
    HistoryBucketResponse,
    LevelProgressResponse,
    RecommendationsResponse,
    ScoreBreakdownResponse,
    ScoreHistoryResponse,
    StreaksResponse,
    TypeStreakResponse,
)
from circohback.services.achievement_engine import list_achievements
from circohback.services.activity_log import list_activities
from circohback.services.growth_config import GrowthConfig, get_growth_config
from circohback.services.growth_service import refresh_growth
from circohback.services.recommendations import build_recommendations
from circohback.services.score_facade import GrowthScore, compute_score
from circohback.services.score_history import MAX_HISTORY_DAYS, Granularity, compute_score_history
from circohback.services.streaks import compute_daily_streak, compute_type_streaks

router = APIRouter(prefix="/users/{user_id}", tags=["growth"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _score_to_response(score: GrowthScore) -> GrowthScoreResponse:
    p = score.level_progress
    return GrowthScoreResponse(
        total_score=score.total_score,
        score_breakdown=ScoreBreakdownResponse(
            total_score=score.score_breakdown.total_score,
            categories=[
                CategoryScoreResponse(
                    category=c.category,
                    title=c.title,
                    raw_score=c.raw_score,
                    cap=c.cap,
                    percentage=float(c.percentage),
                )
                for c in score.score_breakdown.categories
            ],
        ),
        level_progress=LevelProgressResponse(
            current_level=p.current_level,
            level_title=p.level_title,
            color=p.color,
            progress_percentage=float(p.progress_percentage),
            score_for_current_level=p.score_for_current_level,
            score_for_next_level=p.score_for_next_level,
            remaining_points=p.remaining_points,
            is_max_level=p.is_max_level,
        ),
        current_level=score.current_level,
        level_title=score.level_title,
    )


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


# ---------------------------------------------------------------------------
# GET /users/{user_id}/growth
# ---------------------------------------------------------------------------

@router.get(
    "/growth",
    response_model=GrowthScoreResponse,
    summary="Growth score read model",
    responses={
        200: {"description": "Total score, category breakdown and level progress."},
        500: {"model": ErrorResponse, "description": "Unexpected error."},
    },
)
def get_growth(
    user_id: str,
    db: Session = Depends(get_db),
    config: GrowthConfig = Depends(get_growth_config),
):
    """
    Compute the **growth score** from the activity log and unlocked
    achievements.

    Side effects, both idempotent:
    - newly satisfied achievements are unlocked (listed in `new_achievements`);
    - if the computed level is higher than the last level observed for this
      user, a level-up event is recorded and returned in `level_up`. Reading
      again with unchanged data returns `level_up: null`.
    """
    result = refresh_growth(db, user_id=user_id, config=config)
    response = _score_to_response(result.score)
    response.new_achievements = result.new_achievements
    if result.level_up is not None:
        response.level_up = level_up_to_response(result.level_up)
    return response


# ---------------------------------------------------------------------------
# GET /users/{user_id}/growth/history
# ---------------------------------------------------------------------------

@router.get(
    "/growth/history",
    response_model=ScoreHistoryResponse,
    summary="Score over time",
    responses={
        200: {"description": "Points earned and cumulative score per bucket."},
        422: {"model": ErrorResponse, "description": "Invalid window: start after end, or longer than the maximum."},
    },
)
def get_growth_history(
    user_id: str,
    granularity: Granularity = Query(default=Granularity.day),
    end: Optional[date] = Query(
        default=None,
        description="Last day (inclusive). Defaults to today (UTC).",
        examples=["2026-10-19"],
    ),
    start: Optional[date] = Query(
        default=None,
        description="First day (inclusive). Defaults to `days` before `end`.",
    ),
    days: int = Query(
        default=30, ge=1, le=MAX_HISTORY_DAYS, description="Window size when start is omitted."
    ),
    db: Session = Depends(get_db),
):
    window_end = end or _today()
    window_start = start or (window_end - timedelta(days=days - 1))
    buckets = compute_score_history(
        list_activities(db, user_id),
        list_achievements(db, user_id),
        start=window_start,
        end=window_end,
        granularity=granularity,
    )
    return ScoreHistoryResponse(
        granularity=granularity.value,
        start=str(window_start),
        end=str(window_end),
        buckets=[
            HistoryBucketResponse(
                period_start=str(b.period_start),
                points_earned=b.points_earned,
                activity_count=b.activity_count,
                cumulative_score=b.cumulative_score,
            )
            for b in buckets
        ],
    )


# ---------------------------------------------------------------------------
# GET /users/{user_id}/growth/recommendations
# ---------------------------------------------------------------------------

@router.get(
    "/growth/recommendations",
    response_model=RecommendationsResponse,
    summary="What to work on next",
)
def get_recommendations(
    user_id: str,
    db: Session = Depends(get_db),
    config: GrowthConfig = Depends(get_growth_config),
):
    """Read-only: does not unlock achievements or record level-ups."""
    score = compute_score(list_activities(db, user_id), list_achievements(db, user_id), config)
    rec = build_recommendations(score, config)
    return RecommendationsResponse(
        focus_category=rec.focus_category,
        focus_percentage=float(rec.focus_percentage) if rec.focus_percentage is not None else None,
        tips=rec.tips,
        next_level=rec.next_level,
        next_level_title=rec.next_level_title,
        points_to_next_level=rec.points_to_next_level,
    )


# ---------------------------------------------------------------------------
# GET /users/{user_id}/streaks
# ---------------------------------------------------------------------------

@router.get(
    "/streaks",
    response_model=StreaksResponse,
    summary="Daily and per-activity-type streaks",
)
def get_streaks(user_id: str, db: Session = Depends(get_db)):
    activities = list_activities(db, user_id)
    now = datetime.now(tz=timezone.utc)
    daily = compute_daily_streak(activities, now.date())
    return StreaksResponse(
        daily=DailyStreakResponse(
            current=daily.current,
            longest=daily.longest,
            last_active_day=str(daily.last_active_day) if daily.last_active_day else None,
            next_milestone=daily.next_milestone,
        ),
        by_type=[
            TypeStreakResponse(
                activity_type=s.activity_type,
                count=s.count,
                longest=s.longest,
                last_performed=s.last_performed.isoformat(),
                active=s.active,
            )
            for s in compute_type_streaks(activities, now)
        ],
    )
