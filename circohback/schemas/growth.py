"""
Growth score schemas.

GET /users/{user_id}/growth                 → GrowthScoreResponse
GET /users/{user_id}/growth/history         → ScoreHistoryResponse
GET /users/{user_id}/growth/recommendations → RecommendationsResponse
GET /users/{user_id}/streaks                → StreaksResponse
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from circohback.schemas.achievement import LevelUpEventResponse


class CategoryScoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    title: str
    raw_score: int
    cap: int
    percentage: float = Field(description="min(raw_score / cap, 1). Range: 0.0–1.0.")


class ScoreBreakdownResponse(BaseModel):
    total_score: int
    categories: list[CategoryScoreResponse]


class LevelProgressResponse(BaseModel):
    current_level: int
    level_title: str
    color: str
    progress_percentage: float = Field(
        description="Position between this level's threshold and the next. Range: 0–100."
    )
    score_for_current_level: int
    score_for_next_level: Optional[int] = Field(description="Null at the maximum level.")
    remaining_points: int
    is_max_level: bool


class GrowthScoreResponse(BaseModel):
    total_score: int = Field(description="Activity points plus achievement bonus points.")
    score_breakdown: ScoreBreakdownResponse
    level_progress: LevelProgressResponse
    current_level: int
    level_title: str
    level_up: Optional[LevelUpEventResponse] = Field(
        default=None,
        description="Set only on the read that first observed a higher level.",
    )
    new_achievements: list[str] = Field(
        default_factory=list,
        description="Codes of achievements unlocked by this read.",
    )


class HistoryBucketResponse(BaseModel):
    period_start: str
    points_earned: int
    activity_count: int
    cumulative_score: int


class ScoreHistoryResponse(BaseModel):
    granularity: str
    start: str
    end: str
    buckets: list[HistoryBucketResponse] = Field(description="Oldest first.")


class RecommendationsResponse(BaseModel):
    focus_category: Optional[str]
    focus_percentage: Optional[float]
    tips: list[str]
    next_level: Optional[int]
    next_level_title: Optional[str]
    points_to_next_level: int


class TypeStreakResponse(BaseModel):
    activity_type: str
    count: int = Field(description="Current run; 0 once the 48h window has lapsed.")
    longest: int
    last_performed: str
    active: bool


class DailyStreakResponse(BaseModel):
    current: int
    longest: int
    last_active_day: Optional[str]
    next_milestone: Optional[int]


class StreaksResponse(BaseModel):
    daily: DailyStreakResponse
    by_type: list[TypeStreakResponse]
