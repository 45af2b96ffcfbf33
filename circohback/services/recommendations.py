"""
Recommendations: what to work on next.

The focus category is the one furthest from its cap (lowest percentage;
ties go to config order). Categories already at 100% are never the focus.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from circohback.services.growth_config import GrowthConfig
from circohback.services.level_curve import LevelCurve
from circohback.services.score_facade import GrowthScore


@dataclass(frozen=True)
class Recommendations:
    focus_category: Optional[str]
    focus_percentage: Optional[Decimal]
    tips: list[str]
    next_level: Optional[int]
    next_level_title: Optional[str]
    points_to_next_level: int


def build_recommendations(score: GrowthScore, config: GrowthConfig) -> Recommendations:
    incomplete = [c for c in score.score_breakdown.categories if not c.is_complete]
    focus = min(incomplete, key=lambda c: c.percentage) if incomplete else None

    tips: list[str] = []
    if focus is not None:
        definition = config.category(focus.category)
        if definition is not None:
            tips.extend(definition.recommendations)
    tips.extend(config.general_recommendations)

    progress = score.level_progress
    next_level = next_title = None
    if not progress.is_max_level:
        next_level = progress.current_level + 1
        next_title = LevelCurve(config.levels).definition(next_level).title

    return Recommendations(
        focus_category=focus.category if focus else None,
        focus_percentage=focus.percentage if focus else None,
        tips=tips,
        next_level=next_level,
        next_level_title=next_title,
        points_to_next_level=progress.remaining_points,
    )
