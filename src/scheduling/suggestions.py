from __future__ import annotations

from typing import List, Sequence

from study_planner.models import StudySession

NO_SESSIONS = "Consider adding some assignments or habits to create a study schedule."
PEAK_HOURS_USED = "High-priority tasks are scheduled during your peak energy hours!"
MORE_BREAKS = "Consider adding more breaks for better focus and retention."

MIN_BREAK_RATIO = 0.2


def study_minutes(sessions: Sequence[StudySession]) -> float:
    return sum(s.duration_min for s in sessions if s.type != "break")


def break_minutes(sessions: Sequence[StudySession]) -> float:
    return sum(s.duration_min for s in sessions if s.type == "break")


def generate_suggestions(sessions: Sequence[StudySession], peak_hours: Sequence[int]) -> List[str]:
    """Human-readable commentary on a generated day plan."""
    if not sessions:
        return [NO_SESSIONS]

    productive = [s for s in sessions if s.type != "break"]
    suggestions = [f"Scheduled {len(productive)} productive sessions."]

    if any(s.priority == "high" and s.start_time.hour in peak_hours for s in sessions):
        suggestions.append(PEAK_HOURS_USED)

    if break_minutes(sessions) < study_minutes(sessions) * MIN_BREAK_RATIO:
        suggestions.append(MORE_BREAKS)

    return suggestions
