"""
Growth configuration: the static level / category / activity table.

The table is data, not code: level thresholds, titles and colors; category
caps; the category and point value of each activity type; achievement
unlock rules. It is validated once when loaded so a malformed table is an
operator-facing startup failure, never a per-request one.

Public API
----------
GrowthConfig.from_mapping(raw)  -> GrowthConfig   (raises GrowthConfigError)
load_growth_config(path)        -> GrowthConfig
get_growth_config()             -> GrowthConfig   (cached, FastAPI dependency)
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from circohback.core.config import settings
from circohback.core.errors import GrowthConfigError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Table entries
# ---------------------------------------------------------------------------

class LevelDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1)
    title: str = Field(min_length=1)
    threshold: int = Field(ge=0, description="Minimum total score that opens this level.")
    color: str = "#BE93FD"


class CategoryDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    title: str
    description: str = ""
    cap: int = Field(ge=0, description="Raw score at which the category reads 100%.")
    recommendations: tuple[str, ...] = ()


class ActivityTypeDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = Field(min_length=1)
    category: Optional[str] = None
    points: int = Field(ge=0)
    description: str = ""


class AchievementKind(str, Enum):
    total_activities = "total_activities"
    activity_type_count = "activity_type_count"
    daily_streak = "daily_streak"
    category_complete = "category_complete"


class AchievementDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=1)
    title: str
    description: str = ""
    icon: str = "trophy"
    color: str = "#32FFA5"
    points: int = Field(default=0, ge=0)
    kind: AchievementKind
    threshold: int = Field(default=1, ge=1)
    activity_type: Optional[str] = None
    category: Optional[str] = None


# ---------------------------------------------------------------------------
# Whole table
# ---------------------------------------------------------------------------

class GrowthConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    levels: tuple[LevelDefinition, ...]
    categories: tuple[CategoryDefinition, ...] = ()
    activity_types: tuple[ActivityTypeDefinition, ...] = ()
    achievements: tuple[AchievementDefinition, ...] = ()
    general_recommendations: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_table(self) -> "GrowthConfig":
        errors = _table_errors(self)
        if errors:
            raise ValueError("; ".join(errors))
        return self

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> "GrowthConfig":
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            messages = [
                f"{'.'.join(str(loc) for loc in err['loc']) or 'config'}: {err['msg']}"
                for err in exc.errors()
            ]
            raise GrowthConfigError("Growth configuration is invalid.", messages) from exc

    # --- lookups -----------------------------------------------------------

    @property
    def category_keys(self) -> list[str]:
        return [c.key for c in self.categories]

    @property
    def activity_type_names(self) -> list[str]:
        return [a.type for a in self.activity_types]

    def activity_type(self, name: str) -> Optional[ActivityTypeDefinition]:
        for definition in self.activity_types:
            if definition.type == name:
                return definition
        return None

    def category(self, key: str) -> Optional[CategoryDefinition]:
        for definition in self.categories:
            if definition.key == key:
                return definition
        return None


def _table_errors(cfg: GrowthConfig) -> list[str]:
    errors: list[str] = []

    # Levels: numbered 1..n, first threshold 0, strictly ascending.
    if not cfg.levels:
        errors.append("levels: at least one level is required")
    else:
        numbers = [lvl.level for lvl in cfg.levels]
        if numbers != list(range(1, len(numbers) + 1)):
            errors.append(f"levels: must be numbered 1..{len(numbers)} in order, got {numbers}")
        if cfg.levels[0].threshold != 0:
            errors.append("levels: level 1 must start at threshold 0")
        thresholds = [lvl.threshold for lvl in cfg.levels]
        for prev, cur in zip(thresholds, thresholds[1:]):
            if cur <= prev:
                errors.append(f"levels: thresholds must be strictly ascending, got {thresholds}")
                break

    category_keys = cfg.category_keys
    if len(set(category_keys)) != len(category_keys):
        errors.append(f"categories: duplicate keys in {category_keys}")

    type_names = cfg.activity_type_names
    if len(set(type_names)) != len(type_names):
        errors.append(f"activity_types: duplicate types in {type_names}")
    for definition in cfg.activity_types:
        if definition.category is not None and definition.category not in category_keys:
            errors.append(
                f"activity_types.{definition.type}: unknown category '{definition.category}'"
            )

    codes = [a.code for a in cfg.achievements]
    if len(set(codes)) != len(codes):
        errors.append(f"achievements: duplicate codes in {codes}")
    for ach in cfg.achievements:
        if ach.kind == AchievementKind.activity_type_count and ach.activity_type not in type_names:
            errors.append(
                f"achievements.{ach.code}: activity_type '{ach.activity_type}' is not configured"
            )
        if ach.kind == AchievementKind.category_complete and ach.category not in category_keys:
            errors.append(
                f"achievements.{ach.code}: category '{ach.category}' is not configured"
            )

    return errors


# ---------------------------------------------------------------------------
# Built-in table
# ---------------------------------------------------------------------------

DEFAULT_GROWTH_CONFIG: dict[str, Any] = {
    "levels": [
        {"level": 1, "title": "Newcomer", "threshold": 0, "color": "#BE93FD"},
        {"level": 2, "title": "Beginner", "threshold": 100, "color": "#BE93FD"},
        {"level": 3, "title": "Practitioner", "threshold": 250, "color": "#BE93FD"},
        {"level": 4, "title": "Explorer", "threshold": 500, "color": "#32FFA5"},
        {"level": 5, "title": "Adventurer", "threshold": 1000, "color": "#32FFA5"},
        {"level": 6, "title": "Networker", "threshold": 2000, "color": "#32FFA5"},
        {"level": 7, "title": "Connector", "threshold": 3500, "color": "#FF93B9"},
        {"level": 8, "title": "Influencer", "threshold": 5000, "color": "#FF93B9"},
        {"level": 9, "title": "Maestro", "threshold": 7500, "color": "#FF93B9"},
        {"level": 10, "title": "Relationship Guru", "threshold": 10000, "color": "#FF93B9"},
    ],
    "categories": [
        {
            "key": "consistency",
            "title": "Consistency",
            "description": "How regularly you maintain your relationships",
            "cap": 500,
            "recommendations": [
                "Try to interact with at least one contact each day",
                "Set up reminders for your most important relationships",
            ],
        },
        {
            "key": "empathy",
            "title": "Empathy",
            "description": "How present you are when you connect",
            "cap": 500,
            "recommendations": [
                "Call a friend instead of texting this week",
                "Ask a follow-up question about something they shared last time",
            ],
        },
        {
            "key": "thoughtfulness",
            "title": "Thoughtfulness",
            "description": "How well you remember what matters to people",
            "cap": 500,
            "recommendations": [
                "Take a moment to log memorable interactions after they happen",
                "Plan a meeting with someone you have not seen in a while",
            ],
        },
        {
            "key": "engagement",
            "title": "Engagement",
            "description": "How actively you interact with your contacts",
            "cap": 750,
            "recommendations": [
                "Reference previous conversations or shared experiences in messages",
                "Reply to one message you have been putting off",
            ],
        },
        {
            "key": "organization",
            "title": "Organization",
            "description": "How well you manage and structure your network",
            "cap": 400,
            "recommendations": [
                "Add the people you met recently to your contacts",
                "Review your contacts list weekly",
            ],
        },
    ],
    "activity_types": [
        {"type": "message", "category": "engagement", "points": 10,
         "description": "Sent a message to a contact"},
        {"type": "call", "category": "empathy", "points": 15,
         "description": "Called a contact"},
        {"type": "meeting", "category": "thoughtfulness", "points": 25,
         "description": "Met a contact in person"},
        {"type": "reminder", "category": "consistency", "points": 10,
         "description": "Completed a reminder"},
        {"type": "note", "category": "thoughtfulness", "points": 5,
         "description": "Logged a note or memory"},
        {"type": "contact_added", "category": "organization", "points": 20,
         "description": "Added a new contact"},
    ],
    "achievements": [
        {"code": "first_step", "title": "First Step",
         "description": "Record your first activity", "icon": "footsteps",
         "points": 10, "kind": "total_activities", "threshold": 1},
        {"code": "network_builder", "title": "Network Builder",
         "description": "Add 10 contacts", "icon": "people",
         "points": 50, "kind": "activity_type_count", "threshold": 10,
         "activity_type": "contact_added"},
        {"code": "conversationalist", "title": "Conversationalist",
         "description": "Send 25 messages", "icon": "chatbubbles",
         "points": 50, "kind": "activity_type_count", "threshold": 25,
         "activity_type": "message"},
        {"code": "streak_3", "title": "On a Roll",
         "description": "Stay active 3 days in a row", "icon": "flame",
         "color": "#FF93B9", "points": 50, "kind": "daily_streak", "threshold": 3},
        {"code": "streak_7", "title": "Week Warrior",
         "description": "Stay active 7 days in a row", "icon": "flame",
         "color": "#FF93B9", "points": 100, "kind": "daily_streak", "threshold": 7},
        {"code": "streak_14", "title": "Fortnight Friend",
         "description": "Stay active 14 days in a row", "icon": "flame",
         "color": "#FF93B9", "points": 200, "kind": "daily_streak", "threshold": 14},
        {"code": "streak_30", "title": "Monthly Mainstay",
         "description": "Stay active 30 days in a row", "icon": "flame",
         "color": "#FF93B9", "points": 300, "kind": "daily_streak", "threshold": 30},
        {"code": "consistency_champion", "title": "Consistency Champion",
         "description": "Max out the Consistency category", "icon": "ribbon",
         "points": 150, "kind": "category_complete", "category": "consistency"},
        {"code": "empathy_champion", "title": "Empathy Champion",
         "description": "Max out the Empathy category", "icon": "heart",
         "points": 150, "kind": "category_complete", "category": "empathy"},
    ],
    "general_recommendations": [
        "Complete daily connection suggestions for steady progress",
        "Keep your streak alive: one small interaction a day is enough",
    ],
}


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_growth_config(path: Optional[str] = None) -> GrowthConfig:
    """Load and validate the table from a JSON file, or the built-in one."""
    if not path:
        cfg = GrowthConfig.from_mapping(DEFAULT_GROWTH_CONFIG)
        logger.info("Loaded built-in growth config (%d levels)", len(cfg.levels))
        return cfg

    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise GrowthConfigError(f"Growth config file not found: {file_path}") from exc
    except ValueError as exc:
        raise GrowthConfigError(f"Growth config file is not valid JSON: {file_path}") from exc

    cfg = GrowthConfig.from_mapping(raw)
    logger.info("Loaded growth config from %s (%d levels)", file_path, len(cfg.levels))
    return cfg


@lru_cache(maxsize=1)
def get_growth_config() -> GrowthConfig:
    """Process-wide table. Also used as a FastAPI dependency."""
    return load_growth_config(settings.GROWTH_CONFIG_PATH)
