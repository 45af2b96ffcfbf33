"""
Growth config schema.

GET /config/growth → GrowthConfigResponse
"""
from typing import Optional

from pydantic import BaseModel


class LevelResponse(BaseModel):
    level: int
    title: str
    threshold: int
    color: str


class CategoryResponse(BaseModel):
    key: str
    title: str
    description: str
    cap: int


class ActivityTypeResponse(BaseModel):
    type: str
    category: Optional[str]
    points: int
    description: str


class AchievementDefinitionResponse(BaseModel):
    code: str
    title: str
    description: str
    icon: str
    color: str
    points: int
    kind: str
    threshold: int


class GrowthConfigResponse(BaseModel):
    levels: list[LevelResponse]
    categories: list[CategoryResponse]
    activity_types: list[ActivityTypeResponse]
    achievements: list[AchievementDefinitionResponse]
