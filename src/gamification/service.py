from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from gamification.achievements import ACHIEVEMENTS, newly_unlocked, progress_report
from gamification.levels import calculate_level
from storage.stats_store import StatsStore
from study_planner.models import (
    Achievement,
    AchievementProgress,
    GamificationEvent,
    GamificationResult,
    UnlockedAchievement,
    UserStats,
)

logger = logging.getLogger(__name__)

HABIT_XP = 25
ASSIGNMENT_XP = 50
STREAK_XP_PER_DAY = 10


def _completed_early(completed_at: datetime, due_date: datetime) -> bool:
    # mixed naive/aware inputs are compared on wall-clock time
    if (completed_at.tzinfo is None) != (due_date.tzinfo is None):
        completed_at = completed_at.replace(tzinfo=None)
        due_date = due_date.replace(tzinfo=None)
    return completed_at < due_date


class GamificationService:
    """XP, levels and achievements for one user at a time.

    Every operation loads the user's state from the store, applies the change,
    resolves level-ups and achievement unlocks, saves, and returns the new
    stats together with the events the UI should announce.
    """

    def __init__(self, store: StatsStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def stats(self, user_id: str) -> UserStats:
        return self.store.load_stats(user_id)

    def unlocked_achievements(self, user_id: str) -> List[UnlockedAchievement]:
        return self.store.load_achievements(user_id)

    def available_achievements(self, user_id: str) -> List[Achievement]:
        done = {a.id for a in self.store.load_achievements(user_id)}
        return [a for a in ACHIEVEMENTS if a.id not in done]

    def progress(self, user_id: str) -> List[AchievementProgress]:
        stats = self.store.load_stats(user_id)
        done = [a.id for a in self.store.load_achievements(user_id)]
        return progress_report(stats, done)

    def award_xp(self, user_id: str, amount: int, reason: Optional[str] = None) -> GamificationResult:
        if amount <= 0:
            raise ValueError("XP amount must be positive")
        return self._apply(user_id, {}, amount, reason)

    def complete_habit(self, user_id: str) -> GamificationResult:
        stats = self.store.load_stats(user_id)
        return self._apply(
            user_id,
            {"completed_habits": stats.completed_habits + 1},
            HABIT_XP,
            "Habit completed!",
        )

    def complete_assignment(
        self,
        user_id: str,
        completed_at: Optional[datetime] = None,
        due_date: Optional[datetime] = None,
    ) -> GamificationResult:
        stats = self.store.load_stats(user_id)
        completed_at = completed_at or self.clock()

        changes = {"completed_assignments": stats.completed_assignments + 1}
        if due_date is not None and _completed_early(completed_at, due_date):
            changes["early_assignments"] = stats.early_assignments + 1

        return self._apply(user_id, changes, ASSIGNMENT_XP, "Assignment completed!")

    def add_study_time(self, user_id: str, minutes: int) -> GamificationResult:
        if minutes < 0:
            raise ValueError("study time must not be negative")

        stats = self.store.load_stats(user_id)
        # one XP per minute studied
        return self._apply(
            user_id,
            {"total_study_time_min": stats.total_study_time_min + minutes},
            minutes,
            f"{minutes} minutes of study time!",
        )

    def update_streak(self, user_id: str, streak: int) -> GamificationResult:
        if streak < 0:
            raise ValueError("streak must not be negative")

        stats = self.store.load_stats(user_id)
        xp = STREAK_XP_PER_DAY * streak if streak > stats.streak else 0
        return self._apply(user_id, {"streak": streak}, xp, f"{streak} day streak!")

    def _apply(
        self,
        user_id: str,
        changes: Dict[str, int],
        xp: int,
        reason: Optional[str],
    ) -> GamificationResult:
        stats = self.store.load_stats(user_id).model_copy(update=changes)
        unlocked = self.store.load_achievements(user_id)
        events: List[GamificationEvent] = []

        if xp > 0:
            stats = self._add_xp(stats, xp, reason, events)

        # an unlock grants XP, which may satisfy further achievements
        while True:
            fresh = newly_unlocked(stats, [a.id for a in unlocked])
            if not fresh:
                break
            for achievement in fresh:
                unlocked.append(
                    UnlockedAchievement(**achievement.model_dump(), unlocked_at=self.clock())
                )
                events.append(
                    GamificationEvent(
                        kind="achievement",
                        message=f"Achievement Unlocked! {achievement.title} - {achievement.description}",
                        xp=achievement.xp_reward,
                        achievement_id=achievement.id,
                    )
                )
                logger.info(f"User {user_id} unlocked achievement {achievement.id}")
                stats = self._add_xp(stats, achievement.xp_reward, None, events)

        stats = stats.model_copy(update={"achievements_unlocked": len(unlocked)})
        self.store.save(user_id, stats, unlocked)
        return GamificationResult(stats=stats, events=events)

    @staticmethod
    def _add_xp(
        stats: UserStats,
        amount: int,
        reason: Optional[str],
        events: List[GamificationEvent],
    ) -> UserStats:
        total = stats.total_xp + amount
        level = calculate_level(total)

        if reason:
            events.append(GamificationEvent(kind="xp", message=reason, xp=amount))
        if level.level > stats.level:
            events.append(
                GamificationEvent(
                    kind="level_up",
                    message=f"Level Up! You've reached level {level.level}!",
                )
            )

        return stats.model_copy(update={"total_xp": total, **level.model_dump()})
