"""
Config router.

GET /config/growth   — the active level / category / activity table
"""
from fastapi import APIRouter, Depends

from circohback.schemas.config import (
    AchievementDefinitionResponse,
    ActivityTypeResponse,
    CategoryResponse,
    GrowthConfigResponse,
    LevelResponse,
)
from circohback.services.growth_config import GrowthConfig, get_growth_config

router = APIRouter(prefix="/config", tags=["config"])


@router.get(
    "/growth",
    response_model=GrowthConfigResponse,
    summary="Active growth configuration",
)
def growth_config(config: GrowthConfig = Depends(get_growth_config)):
    """Level thresholds, titles and colors; category caps; activity point values."""
    return GrowthConfigResponse(
        levels=[LevelResponse(**lvl.model_dump()) for lvl in config.levels],
        categories=[
            CategoryResponse(key=c.key, title=c.title, description=c.description, cap=c.cap)
            for c in config.categories
        ],
        activity_types=[ActivityTypeResponse(**a.model_dump()) for a in config.activity_types],
        achievements=[
            AchievementDefinitionResponse(
                code=a.code,
                title=a.title,
                description=a.description,
                icon=a.icon,
                color=a.color,
                points=a.points,
                kind=a.kind.value,
                threshold=a.threshold,
            )
            for a in config.achievements
        ],
    )
