"""
Score facade — the growth-score read model.

Definition
----------
total_score   = sum(activity.points) + sum(achievement.points)
breakdown     = per-category raw score and capped percentage
level         = LevelCurve(total_score)

Level-up detection
------------------
Explicit state machine with states Stable(level):

  Stable(N) --M > N--> Stable(M)   emits LevelUp(N -> M)
  Stable(N) --M == N-> Stable(N)   nothing
  Stable(N) --M < N--> Stable(M)   nothing (no "level down" event)
  (no state) --M-->    Stable(M)   nothing; first observation is the baseline

Detection is keyed on the last-seen level, not on call count, so repeated
reads of unchanged data never re-emit an event.

Public API
----------
compute_score(activities, achievements, config) -> GrowthScore
detect_level_up(last_known_level, new_level)    -> LevelTransition
LevelUpDetector(last_known_level).observe(score) -> Optional[LevelUp]
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from circohback.services.achievement_engine import Achievement
from circohback.services.activity_log import Activity
from circohback.services.category_aggregator import CategoryScore, aggregate_categories
from circohback.services.growth_config import GrowthConfig
from circohback.services.level_curve import LevelCurve, LevelProgress


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoreBreakdown:
    total_score: int
    categories: list[CategoryScore]


@dataclass(frozen=True)
class GrowthScore:
    total_score: int
    score_breakdown: ScoreBreakdown
    level_progress: LevelProgress
    current_level: int
    level_title: str


@dataclass(frozen=True)
class LevelUp:
    from_level: int
    to_level: int


@dataclass(frozen=True)
class LevelTransition:
    level: int                    # the new Stable(level)
    event: Optional[LevelUp]      # set only on an increase
    changed: bool                 # stored state must be written


# ---------------------------------------------------------------------------
# Score
# ---------------------------------------------------------------------------

def total_score(activities: Iterable[Activity], achievements: Iterable[Achievement]) -> int:
    return sum(a.points for a in activities) + sum(a.points for a in achievements)


def compute_score(
    activities: Sequence[Activity],
    achievements: Sequence[Achievement],
    config: GrowthConfig,
) -> GrowthScore:
    total = total_score(activities, achievements)
    progress = LevelCurve(config.levels).progress(total)
    return GrowthScore(
        total_score=total,
        score_breakdown=ScoreBreakdown(
            total_score=total,
            categories=aggregate_categories(activities, config.categories),
        ),
        level_progress=progress,
        current_level=progress.current_level,
        level_title=progress.level_title,
    )


# ---------------------------------------------------------------------------
# Level-up state machine
# ---------------------------------------------------------------------------

def detect_level_up(last_known_level: Optional[int], new_level: int) -> LevelTransition:
    if last_known_level is None:
        return LevelTransition(level=new_level, event=None, changed=True)
    if new_level > last_known_level:
        return LevelTransition(
            level=new_level,
            event=LevelUp(from_level=last_known_level, to_level=new_level),
            changed=True,
        )
    if new_level < last_known_level:
        return LevelTransition(level=new_level, event=None, changed=True)
    return LevelTransition(level=new_level, event=None, changed=False)


class LevelUpDetector:
    """In-memory holder for callers that keep the last-seen level themselves."""

    def __init__(self, last_known_level: Optional[int] = None):
        self.last_known_level = last_known_level

    def observe(self, score: GrowthScore) -> Optional[LevelUp]:
        transition = detect_level_up(self.last_known_level, score.current_level)
        self.last_known_level = transition.level
        return transition.event
