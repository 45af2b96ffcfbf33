"""
Tests for growth orchestration: persisted level-up detection and
level-up event consumption.
"""
import pytest

from circohback.core.errors import LevelUpEventNotFoundError
from circohback.models.level_state import LevelState, LevelUpEvent
from circohback.services.activity_log import record_activity
from circohback.services.growth_config import load_growth_config
from circohback.services import growth_service
from circohback.services.growth_service import (
    _create_initial_state,
    acknowledge_level_up,
    list_level_up_events,
    refresh_growth,
)

from conftest import TestingSessionLocal


@pytest.fixture()
def cfg():
    return load_growth_config(None)


def _meetings(db, user_id, cfg, n):
    for _ in range(n):
        record_activity(db, user_id, "meeting", cfg)


class TestRefreshGrowth:
    def test_new_user_stays_level_one_without_event(self, db, user_id, cfg):
        result = refresh_growth(db, user_id, cfg)
        assert result.score.total_score == 0
        assert result.score.current_level == 1
        assert result.level_up is None
        assert db.get(LevelState, user_id).last_level == 1

    def test_crossing_threshold_emits_one_event(self, db, user_id, cfg):
        # 4 meetings (100) + first_step bonus (10) = 110 → level 2
        _meetings(db, user_id, cfg, 4)
        first = refresh_growth(db, user_id, cfg)
        assert first.score.total_score == 110
        assert first.score.current_level == 2
        assert first.new_achievements == ["first_step"]
        assert first.level_up is not None
        assert (first.level_up.from_level, first.level_up.to_level) == (1, 2)
        assert first.level_up.level_title == "Beginner"

        second = refresh_growth(db, user_id, cfg)
        assert second.level_up is None
        assert second.new_achievements == []
        assert second.score.total_score == 110

        assert len(list_level_up_events(db, user_id)) == 1

    def test_baseline_then_next_transition(self, db, user_id, cfg):
        _meetings(db, user_id, cfg, 4)
        refresh_growth(db, user_id, cfg)
        # +6 meetings → 260 → level 3 (Practitioner, 250)
        _meetings(db, user_id, cfg, 6)
        result = refresh_growth(db, user_id, cfg)
        assert result.score.current_level == 3
        assert (result.level_up.from_level, result.level_up.to_level) == (2, 3)

    def test_lower_level_restabilises_without_event(self, db, user_id, cfg):
        db.add(LevelState(user_id=user_id, last_level=5))
        db.commit()
        _meetings(db, user_id, cfg, 1)
        result = refresh_growth(db, user_id, cfg)
        assert result.level_up is None
        db.expire_all()
        assert db.get(LevelState, user_id).last_level == 1
        assert list_level_up_events(db, user_id) == []


class TestLevelUpConsumption:
    def test_acknowledge_is_idempotent(self, db, user_id, cfg):
        _meetings(db, user_id, cfg, 4)
        event = refresh_growth(db, user_id, cfg).level_up
        assert [e.id for e in list_level_up_events(db, user_id, pending_only=True)] == [event.id]

        acked = acknowledge_level_up(db, user_id, event.id)
        assert acked.acknowledged is True
        assert acknowledge_level_up(db, user_id, event.id).acknowledged is True
        assert list_level_up_events(db, user_id, pending_only=True) == []
        assert len(list_level_up_events(db, user_id)) == 1

    def test_acknowledge_other_users_event_not_found(self, db, user_id, cfg):
        _meetings(db, user_id, cfg, 4)
        event = refresh_growth(db, user_id, cfg).level_up
        with pytest.raises(LevelUpEventNotFoundError):
            acknowledge_level_up(db, "someone-else", event.id)

    def test_acknowledge_missing_event(self, db, user_id):
        with pytest.raises(LevelUpEventNotFoundError):
            acknowledge_level_up(db, user_id, 999_999)
        assert db.query(LevelUpEvent).filter(LevelUpEvent.user_id == user_id).count() == 0


class TestConcurrentRefresh:
    def test_interleaved_refresh_records_one_event(self, db, user_id, cfg, monkeypatch):
        _meetings(db, user_id, cfg, 4)
        db.add(LevelState(user_id=user_id, last_level=1))
        db.commit()

        real_detect = growth_service.detect_level_up
        interleaved = []

        def detect_after_other_request(last_level, new_level):
            # A second request runs to completion between our read and write.
            if not interleaved:
                interleaved.append(True)
                other = TestingSessionLocal()
                try:
                    other_result = refresh_growth(other, user_id, cfg)
                    assert other_result.level_up is not None
                finally:
                    other.close()
            return real_detect(last_level, new_level)

        monkeypatch.setattr(growth_service, "detect_level_up", detect_after_other_request)
        result = refresh_growth(db, user_id, cfg)

        assert interleaved
        assert result.level_up is None
        assert result.score.current_level == 2
        assert len(list_level_up_events(db, user_id)) == 1
        db.expire_all()
        assert db.get(LevelState, user_id).last_level == 2

    def test_initial_state_created_elsewhere_is_reused(self, db, user_id):
        other = TestingSessionLocal()
        try:
            other.add(LevelState(user_id=user_id, last_level=3))
            other.commit()
        finally:
            other.close()

        assert _create_initial_state(db, user_id) == 3
        assert db.query(LevelState).filter(LevelState.user_id == user_id).count() == 1
