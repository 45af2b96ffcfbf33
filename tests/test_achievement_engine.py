"""
Tests for the achievement engine.

Covered:
  - unlock on first satisfied condition (each rule kind)
  - idempotency: no duplicate records, second run reports already_unlocked
  - display fields copied from the definition at unlock time
"""
import copy
from datetime import datetime, timedelta, timezone

from circohback.models.achievement import AchievementRecord
from circohback.services.achievement_engine import evaluate_achievements, satisfied_codes
from circohback.services.activity_log import list_activities, record_activity
from circohback.services.growth_config import GrowthConfig, load_growth_config

from conftest import EXAMPLE_CONFIG, make_activity

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def _config_with_achievements(*achievements) -> GrowthConfig:
    raw = copy.deepcopy(EXAMPLE_CONFIG)
    raw["achievements"] = list(achievements)
    return GrowthConfig.from_mapping(raw)


class TestSatisfiedCodes:
    def test_nothing_for_empty_log(self):
        assert satisfied_codes([], load_growth_config(None)) == []

    def test_activity_type_count(self):
        cfg = _config_with_achievements(
            {"code": "caller", "title": "Caller", "kind": "activity_type_count",
             "activity_type": "call", "threshold": 2},
        )
        one = [make_activity(1, "call", "empathy", 110)]
        two = one + [make_activity(2, "call", "empathy", 110)]
        assert satisfied_codes(one, cfg) == []
        assert satisfied_codes(two, cfg) == ["caller"]

    def test_category_complete(self):
        cfg = _config_with_achievements(
            {"code": "empath", "title": "Empath", "kind": "category_complete",
             "category": "empathy"},
        )
        acts = [make_activity(1, "call", "empathy", 110), make_activity(2, "call", "empathy", 110)]
        assert satisfied_codes(acts, cfg) == ["empath"]

    def test_daily_streak(self):
        cfg = load_growth_config(None)
        acts = [make_activity(i, "note", "thoughtfulness", 5, when=T0 + timedelta(days=i)) for i in range(3)]
        codes = satisfied_codes(acts, cfg)
        assert "streak_3" in codes
        assert "streak_7" not in codes


class TestEvaluateAchievements:
    def test_unlocks_once(self, db, user_id):
        cfg = load_growth_config(None)
        for i in range(3):
            record_activity(db, user_id, "reminder", cfg, occurred_at=T0 + timedelta(days=i))
        activities = list_activities(db, user_id)

        r1 = evaluate_achievements(db, user_id, activities, cfg)
        assert set(r1.newly_unlocked) == {"first_step", "streak_3"}
        assert r1.already_unlocked == []
        assert {a.code for a in r1.achievements} == {"first_step", "streak_3"}

        r2 = evaluate_achievements(db, user_id, activities, cfg)
        assert r2.newly_unlocked == []
        assert set(r2.already_unlocked) == {"first_step", "streak_3"}

        count = db.query(AchievementRecord).filter(AchievementRecord.user_id == user_id).count()
        assert count == 2

    def test_fields_copied_from_definition(self, db, user_id):
        cfg = load_growth_config(None)
        record_activity(db, user_id, "message", cfg, occurred_at=T0)
        unlocked_at = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
        result = evaluate_achievements(db, user_id, list_activities(db, user_id), cfg, now=unlocked_at)
        [first] = result.achievements
        assert first.code == "first_step"
        assert first.title == "First Step"
        assert first.points == 10
        assert first.icon == "footsteps"
        assert first.date_unlocked == unlocked_at

    def test_no_activities_no_achievements(self, db, user_id):
        result = evaluate_achievements(db, user_id, [], load_growth_config(None))
        assert result.achievements == []
        assert result.newly_unlocked == []


class TestCategoryCompleteBoundary:
    def test_one_point_short_does_not_unlock(self):
        raw = copy.deepcopy(EXAMPLE_CONFIG)
        raw["categories"].append({"key": "big", "title": "Big", "cap": 20_000})
        raw["activity_types"].append({"type": "marathon", "category": "big", "points": 19_999})
        raw["achievements"] = [
            {"code": "full", "title": "Full", "kind": "category_complete", "category": "big"},
        ]
        cfg = GrowthConfig.from_mapping(raw)
        one = [make_activity(1, "marathon", "big", 19_999)]
        assert satisfied_codes(one, cfg) == []
        two = one + [make_activity(2, "marathon", "big", 19_999)]
        assert satisfied_codes(two, cfg) == ["full"]
