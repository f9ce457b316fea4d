from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from study_planner.models import Achievement, AchievementProgress, UserStats


ACHIEVEMENTS: List[Achievement] = [
    # habits
    Achievement(
        id="first_habit",
        title="Habit Starter",
        description="Complete your first habit",
        category="habits",
        xp_reward=50,
        target=1,
        rarity="common",
    ),
    Achievement(
        id="habit_streak_7",
        title="Week Warrior",
        description="Maintain a 7-day habit streak",
        category="streaks",
        xp_reward=200,
        target=7,
        rarity="rare",
    ),
    Achievement(
        id="habit_streak_30",
        title="Monthly Master",
        description="Maintain a 30-day habit streak",
        category="streaks",
        xp_reward=1000,
        target=30,
        rarity="epic",
    ),
    # assignments
    Achievement(
        id="first_assignment",
        title="Task Tackler",
        description="Complete your first assignment",
        category="assignments",
        xp_reward=100,
        target=1,
        rarity="common",
    ),
    Achievement(
        id="assignments_10",
        title="Assignment Ace",
        description="Complete 10 assignments",
        category="assignments",
        xp_reward=500,
        target=10,
        rarity="rare",
    ),
    Achievement(
        id="early_bird",
        title="Early Bird",
        description="Submit 5 assignments before their due date",
        category="assignments",
        xp_reward=300,
        target=5,
        rarity="rare",
    ),
    # study time, in minutes
    Achievement(
        id="study_1_hour",
        title="Study Session",
        description="Study for 1 hour",
        category="study",
        xp_reward=150,
        target=60,
        rarity="common",
    ),
    Achievement(
        id="study_10_hours",
        title="Dedicated Scholar",
        description="Accumulate 10 hours of study time",
        category="study",
        xp_reward=800,
        target=600,
        rarity="epic",
    ),
]

# stat each achievement is measured against
MEASURES: Dict[str, Callable[[UserStats], int]] = {
    "first_habit": lambda s: s.completed_habits,
    "habit_streak_7": lambda s: s.streak,
    "habit_streak_30": lambda s: s.streak,
    "first_assignment": lambda s: s.completed_assignments,
    "assignments_10": lambda s: s.completed_assignments,
    "early_bird": lambda s: s.early_assignments,
    "study_1_hour": lambda s: s.total_study_time_min,
    "study_10_hours": lambda s: s.total_study_time_min,
}


def get_achievement(achievement_id: str) -> Achievement:
    for a in ACHIEVEMENTS:
        if a.id == achievement_id:
            return a
    raise KeyError(achievement_id)


def achievement_progress(achievement: Achievement, stats: UserStats) -> int:
    measure = MEASURES.get(achievement.id)
    if measure is None:
        return 0
    return min(measure(stats), achievement.target)


def newly_unlocked(stats: UserStats, unlocked_ids: Iterable[str]) -> List[Achievement]:
    """Achievements whose target ``stats`` now meets and that are not unlocked yet."""
    done = set(unlocked_ids)
    return [
        a
        for a in ACHIEVEMENTS
        if a.id not in done and achievement_progress(a, stats) >= a.target
    ]


def progress_report(stats: UserStats, unlocked_ids: Iterable[str]) -> List[AchievementProgress]:
    done = set(unlocked_ids)
    return [
        AchievementProgress(
            achievement=a,
            progress=achievement_progress(a, stats),
            unlocked=a.id in done,
        )
        for a in ACHIEVEMENTS
    ]
