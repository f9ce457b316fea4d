from datetime import datetime

import pytest

from gamification.achievements import ACHIEVEMENTS, newly_unlocked
from gamification.levels import calculate_level
from gamification.service import GamificationService
from storage.stats_store import StatsStore
from study_planner.models import UserStats


@pytest.fixture
def service(tmp_path):
    store = StatsStore(path=str(tmp_path / "stats.json"))
    return GamificationService(store, clock=lambda: datetime(2026, 3, 2, 12, 0))


@pytest.mark.parametrize(
    "xp, level, into_level, span",
    [
        (0, 1, 0, 100),
        (99, 1, 99, 100),
        (100, 2, 0, 50),
        (150, 3, 0, 75),
        (250, 4, 25, 112),
    ],
)
def test_calculate_level(xp, level, into_level, span):
    info = calculate_level(xp)
    assert (info.level, info.current_level_xp, info.next_level_xp) == (level, into_level, span)


def test_achievement_ids_are_unique():
    ids = [a.id for a in ACHIEVEMENTS]
    assert len(ids) == len(set(ids))


def test_newly_unlocked_ignores_already_unlocked():
    stats = UserStats(completed_habits=1, streak=7)
    assert {a.id for a in newly_unlocked(stats, [])} == {"first_habit", "habit_streak_7"}
    assert [a.id for a in newly_unlocked(stats, ["first_habit"])] == ["habit_streak_7"]


def test_first_habit_unlocks_achievement(service):
    result = service.complete_habit("u1")

    assert result.stats.completed_habits == 1
    assert result.stats.total_xp == 25 + 50
    assert result.stats.achievements_unlocked == 1
    kinds = [e.kind for e in result.events]
    assert kinds == ["xp", "achievement"]
    assert result.events[1].achievement_id == "first_habit"


def test_second_habit_levels_up_without_repeating_achievement(service):
    service.complete_habit("u1")
    result = service.complete_habit("u1")

    assert result.stats.total_xp == 100
    assert result.stats.level == 2
    assert [e.kind for e in result.events] == ["xp", "level_up"]
    assert len(service.unlocked_achievements("u1")) == 1


def test_early_assignment_counts_and_levels(service):
    result = service.complete_assignment(
        "u1",
        completed_at=datetime(2026, 3, 1, 18, 0),
        due_date=datetime(2026, 3, 2, 23, 59),
    )

    assert result.stats.completed_assignments == 1
    assert result.stats.early_assignments == 1
    assert result.stats.total_xp == 150
    assert result.stats.level == 3
    assert "level_up" in [e.kind for e in result.events]


def test_late_assignment_is_not_early(service):
    result = service.complete_assignment(
        "u1",
        completed_at=datetime(2026, 3, 3, 9, 0),
        due_date=datetime(2026, 3, 2, 23, 59),
    )
    assert result.stats.early_assignments == 0


def test_five_early_assignments_unlock_early_bird(service):
    for _ in range(5):
        result = service.complete_assignment(
            "u1", completed_at=datetime(2026, 3, 1), due_date=datetime(2026, 3, 2)
        )
    assert "early_bird" in [e.achievement_id for e in result.events]


def test_study_time_awards_minute_xp(service):
    result = service.add_study_time("u1", 60)

    assert result.stats.total_study_time_min == 60
    assert result.stats.total_xp == 60 + 150
    assert [e.achievement_id for e in result.events if e.kind == "achievement"] == ["study_1_hour"]


def test_streak_only_rewards_growth(service):
    grown = service.update_streak("u1", 7)
    assert grown.stats.total_xp == 70 + 200

    same = service.update_streak("u1", 7)
    assert same.stats.total_xp == grown.stats.total_xp
    assert same.events == []

    broken = service.update_streak("u1", 2)
    assert broken.stats.streak == 2
    assert broken.stats.total_xp == grown.stats.total_xp


def test_invalid_amounts(service):
    with pytest.raises(ValueError):
        service.award_xp("u1", 0)
    with pytest.raises(ValueError):
        service.add_study_time("u1", -1)


def test_state_survives_new_service(tmp_path, service):
    service.award_xp("u1", 120, "Bonus")

    fresh = GamificationService(StatsStore(path=str(tmp_path / "stats.json")))
    assert fresh.stats("u1").total_xp == 120
    assert fresh.stats("u1").level == 2
    assert fresh.stats("u2") == UserStats()


def test_progress_and_available(service):
    service.complete_habit("u1")

    progress = {p.achievement.id: p for p in service.progress("u1")}
    assert progress["first_habit"].unlocked
    assert progress["first_habit"].progress == 1
    assert not progress["habit_streak_7"].unlocked

    available = [a.id for a in service.available_achievements("u1")]
    assert "first_habit" not in available
    assert len(available) == len(ACHIEVEMENTS) - 1
