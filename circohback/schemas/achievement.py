"""
Achievement and level-up schemas.

GET  /users/{user_id}/achievements                     → AchievementListResponse
GET  /users/{user_id}/level-ups                        → LevelUpEventListResponse
POST /users/{user_id}/level-ups/{event_id}/acknowledge → LevelUpEventResponse
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AchievementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    points: int = Field(description="Bonus added to the total score.")
    date_unlocked: str


class AchievementListResponse(BaseModel):
    total: int
    total_bonus_points: int
    items: list[AchievementResponse]


class LevelUpEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    from_level: int
    to_level: int
    level_title: str
    total_score: int
    acknowledged: bool
    created_at: str


class LevelUpEventListResponse(BaseModel):
    total: int
    items: list[LevelUpEventResponse]
