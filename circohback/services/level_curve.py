"""
Level curve: cumulative score -> level, title, and progress to the next level.

Pure function of the total score. Thresholds come from the validated growth
config (level 1 at 0, strictly ascending), so no validation happens here.
"""
from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from typing import Optional, Sequence

from circohback.services.growth_config import LevelDefinition

_HUNDRED = Decimal("100")
_QUANT = Decimal("0.01")


@dataclass(frozen=True)
class LevelProgress:
    current_level: int
    level_title: str
    color: str
    progress_percentage: Decimal          # 0.00 – 100.00
    total_score: int
    score_for_current_level: int
    score_for_next_level: Optional[int]   # None at max level
    remaining_points: int
    is_max_level: bool


class LevelCurve:
    def __init__(self, levels: Sequence[LevelDefinition]):
        self._levels = list(levels)
        self._thresholds = [lvl.threshold for lvl in self._levels]

    @property
    def max_level(self) -> int:
        return len(self._levels)

    def definition(self, level: int) -> LevelDefinition:
        return self._levels[level - 1]

    def level_for(self, total_score: int) -> int:
        """Highest level whose threshold <= total_score; ties open the new level."""
        if total_score < 0:
            return 1
        return max(1, bisect_right(self._thresholds, total_score))

    def progress(self, total_score: int) -> LevelProgress:
        level = self.level_for(total_score)
        current = self.definition(level)

        if level == self.max_level:
            return LevelProgress(
                current_level=level,
                level_title=current.title,
                color=current.color,
                progress_percentage=_HUNDRED.quantize(_QUANT),
                total_score=total_score,
                score_for_current_level=current.threshold,
                score_for_next_level=None,
                remaining_points=0,
                is_max_level=True,
            )

        nxt = self.definition(level + 1)
        span = nxt.threshold - current.threshold
        gained = max(total_score, 0) - current.threshold
        pct = Decimal(gained) * _HUNDRED / Decimal(span)
        pct = min(max(pct, Decimal(0)), _HUNDRED).quantize(_QUANT, rounding=ROUND_DOWN)

        return LevelProgress(
            current_level=level,
            level_title=current.title,
            color=current.color,
            progress_percentage=pct,
            total_score=total_score,
            score_for_current_level=current.threshold,
            score_for_next_level=nxt.threshold,
            remaining_points=max(0, nxt.threshold - max(total_score, 0)),
            is_max_level=False,
        )
