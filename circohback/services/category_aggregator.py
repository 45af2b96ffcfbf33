"""
Category aggregator.

Sums activity points per configured category and expresses each sum as a
fraction of the category cap, clamped to 1. Activities whose category is
missing or not configured fall outside every category; the score facade
still counts them toward the total.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from typing import Iterable, Sequence

from circohback.services.activity_log import Activity
from circohback.services.growth_config import CategoryDefinition

_ONE = Decimal("1")
_ZERO = Decimal("0")
_QUANT = Decimal("0.0001")


@dataclass(frozen=True)
class CategoryScore:
    category: str
    title: str
    raw_score: int
    cap: int
    percentage: Decimal   # 0.0000 – 1.0000, truncated

    @property
    def is_complete(self) -> bool:
        """Cap reached, judged on raw points."""
        if self.cap <= 0:
            return self.raw_score > 0
        return self.raw_score >= self.cap


def category_percentage(raw_score: int, cap: int) -> Decimal:
    if cap <= 0:
        # Zero cap: full as soon as anything lands in it.
        return _ONE if raw_score > 0 else _ZERO
    if raw_score <= 0:
        return _ZERO
    ratio = min(Decimal(raw_score) / Decimal(cap), _ONE)
    return ratio.quantize(_QUANT, rounding=ROUND_DOWN)


def aggregate_categories(
    activities: Iterable[Activity],
    categories: Sequence[CategoryDefinition],
) -> list[CategoryScore]:
    known = {c.key for c in categories}
    sums: dict[str, int] = defaultdict(int)
    for activity in activities:
        if activity.category in known:
            sums[activity.category] += activity.points

    return [
        CategoryScore(
            category=c.key,
            title=c.title,
            raw_score=sums[c.key],
            cap=c.cap,
            percentage=category_percentage(sums[c.key], c.cap),
        )
        for c in categories
    ]
