"""
Tests for growth config loading and load-time validation.
"""
import copy
import json

import pytest

from circohback.core.errors import GrowthConfigError
from circohback.services.growth_config import (
    DEFAULT_GROWTH_CONFIG,
    GrowthConfig,
    load_growth_config,
)

from conftest import EXAMPLE_CONFIG


def _mutated(**changes):
    raw = copy.deepcopy(EXAMPLE_CONFIG)
    raw.update(changes)
    return raw


class TestDefaultConfig:
    def test_builtin_table_loads(self):
        cfg = load_growth_config(None)
        assert len(cfg.levels) == 10
        assert cfg.levels[0].title == "Newcomer"
        assert cfg.levels[-1].title == "Relationship Guru"
        assert cfg.levels[-1].threshold == 10000

    def test_builtin_activity_types(self):
        cfg = load_growth_config(None)
        assert set(cfg.activity_type_names) == {
            "message", "call", "meeting", "reminder", "note", "contact_added",
        }
        assert cfg.activity_type("meeting").points == 25
        assert cfg.activity_type("nope") is None

    def test_builtin_achievements_reference_known_entries(self):
        cfg = GrowthConfig.from_mapping(DEFAULT_GROWTH_CONFIG)
        assert len(cfg.achievements) == len({a.code for a in cfg.achievements})


class TestValidation:
    def test_non_monotonic_thresholds_rejected(self):
        levels = copy.deepcopy(EXAMPLE_CONFIG["levels"])
        levels[2]["threshold"] = 50
        with pytest.raises(GrowthConfigError) as exc:
            GrowthConfig.from_mapping(_mutated(levels=levels))
        assert exc.value.code == "GROWTH_CONFIG_INVALID"
        assert any("ascending" in e for e in exc.value.details["errors"])

    def test_equal_thresholds_rejected(self):
        levels = copy.deepcopy(EXAMPLE_CONFIG["levels"])
        levels[2]["threshold"] = levels[1]["threshold"]
        with pytest.raises(GrowthConfigError):
            GrowthConfig.from_mapping(_mutated(levels=levels))

    def test_first_threshold_must_be_zero(self):
        levels = copy.deepcopy(EXAMPLE_CONFIG["levels"])
        levels[0]["threshold"] = 10
        with pytest.raises(GrowthConfigError):
            GrowthConfig.from_mapping(_mutated(levels=levels))

    def test_levels_must_be_numbered_in_order(self):
        levels = copy.deepcopy(EXAMPLE_CONFIG["levels"])
        levels[1]["level"] = 5
        with pytest.raises(GrowthConfigError):
            GrowthConfig.from_mapping(_mutated(levels=levels))

    def test_empty_levels_rejected(self):
        with pytest.raises(GrowthConfigError):
            GrowthConfig.from_mapping(_mutated(levels=[]))

    def test_negative_cap_rejected(self):
        cats = copy.deepcopy(EXAMPLE_CONFIG["categories"])
        cats[0]["cap"] = -1
        with pytest.raises(GrowthConfigError):
            GrowthConfig.from_mapping(_mutated(categories=cats))

    def test_zero_cap_allowed(self):
        cats = copy.deepcopy(EXAMPLE_CONFIG["categories"])
        cats[0]["cap"] = 0
        cfg = GrowthConfig.from_mapping(_mutated(categories=cats))
        assert cfg.category("consistency").cap == 0

    def test_activity_type_with_unknown_category_rejected(self):
        types = copy.deepcopy(EXAMPLE_CONFIG["activity_types"])
        types[0]["category"] = "charisma"
        with pytest.raises(GrowthConfigError) as exc:
            GrowthConfig.from_mapping(_mutated(activity_types=types))
        assert any("charisma" in e for e in exc.value.details["errors"])

    def test_negative_points_rejected(self):
        types = copy.deepcopy(EXAMPLE_CONFIG["activity_types"])
        types[0]["points"] = -5
        with pytest.raises(GrowthConfigError):
            GrowthConfig.from_mapping(_mutated(activity_types=types))

    def test_duplicate_activity_types_rejected(self):
        types = copy.deepcopy(EXAMPLE_CONFIG["activity_types"])
        types.append(dict(types[0]))
        with pytest.raises(GrowthConfigError):
            GrowthConfig.from_mapping(_mutated(activity_types=types))

    def test_achievement_with_unknown_category_rejected(self):
        raw = _mutated(achievements=[{
            "code": "x", "title": "X", "kind": "category_complete", "category": "nope",
        }])
        with pytest.raises(GrowthConfigError):
            GrowthConfig.from_mapping(raw)

    def test_duplicate_category_keys_rejected(self):
        cats = copy.deepcopy(EXAMPLE_CONFIG["categories"])
        cats.append(dict(cats[0]))
        with pytest.raises(GrowthConfigError) as exc:
            GrowthConfig.from_mapping(_mutated(categories=cats))
        assert any("duplicate keys" in e for e in exc.value.details["errors"])

    def test_category_keys_in_config_order(self, example_config):
        assert example_config.category_keys == ["consistency", "empathy"]


class TestLoadFromFile:
    def test_load_json_file(self, tmp_path):
        path = tmp_path / "growth.json"
        path.write_text(json.dumps(EXAMPLE_CONFIG), encoding="utf-8")
        cfg = load_growth_config(str(path))
        assert [lvl.threshold for lvl in cfg.levels] == [0, 100, 300, 700]

    def test_missing_file(self, tmp_path):
        with pytest.raises(GrowthConfigError, match="not found"):
            load_growth_config(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "growth.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(GrowthConfigError, match="not valid JSON"):
            load_growth_config(str(path))
