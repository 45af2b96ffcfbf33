from .activity import ActivityRecord
from .achievement import AchievementRecord
from .level_state import LevelState, LevelUpEvent

__all__ = [
    "ActivityRecord",
    "AchievementRecord",
    "LevelState",
    "LevelUpEvent",
]
