from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional

from scheduling.patterns import analyze_user_patterns, peak_hours
from scheduling.suggestions import break_minutes, generate_suggestions, study_minutes
from study_planner.models import (
    Assignment,
    Habit,
    ScheduleOptimization,
    StudySession,
    UserPatterns,
    UserPreferences,
)

logger = logging.getLogger(__name__)

MAX_ASSIGNMENTS_PER_DAY = 4
MAX_HABITS_PER_DAY = 3
HABIT_SESSION_MIN = 30

PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}


def _new_session_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _assignment_order(a: Assignment):
    # undated work goes after dated work of the same priority
    due = a.due_date
    return (-PRIORITY_RANK[a.priority], due is None, due.timestamp() if due else 0.0)


def _unique(items):
    # a caller may hand in the same record twice; plan it once
    seen = set()
    out = []
    for item in items:
        if item.id not in seen:
            seen.add(item.id)
            out.append(item)
    return out


class Scheduler:
    """Greedy one-day planner.

    Walks a cursor from the start of the working-hours window, placing
    assignment sessions (each followed by a break when one fits) and then
    30-minute habit sessions until the window is used up. The planner never
    raises for odd preferences: an empty or inverted window simply yields
    no sessions.
    """

    def __init__(
        self,
        preferences: Optional[UserPreferences] = None,
        id_factory: Optional[Callable[[str], str]] = None,
    ):
        self.preferences = preferences or UserPreferences()
        self._new_id = id_factory or _new_session_id

    def schedule(
        self,
        day: date,
        assignments: Iterable[Assignment],
        habits: Iterable[Habit],
        *,
        now: Optional[datetime] = None,
        patterns: Optional[UserPatterns] = None,
    ) -> ScheduleOptimization:
        if isinstance(day, datetime):
            day = day.date()
        now = now or datetime.now()
        habits = _unique(habits)
        prefs = self.preferences

        if patterns is None:
            patterns = analyze_user_patterns(habits)

        window_start = datetime.combine(day, prefs.working_hours.start)
        window_end = datetime.combine(day, prefs.working_hours.end)
        session_len = timedelta(minutes=prefs.session_duration_min)
        break_len = timedelta(minutes=prefs.break_duration_min)

        sessions: List[StudySession] = []
        cursor = window_start

        pending = sorted(
            (a for a in _unique(assignments) if not a.is_completed),
            key=_assignment_order,
        )
        for assignment in pending[:MAX_ASSIGNMENTS_PER_DAY]:
            session_end = cursor + session_len
            if session_end > window_end:
                break

            subject = assignment.class_id or "General"
            override = prefs.subject_preferences.get(subject)
            sessions.append(
                StudySession(
                    id=self._new_id(f"session_{assignment.id}"),
                    title=assignment.title,
                    subject=subject,
                    start_time=cursor,
                    end_time=session_end,
                    type="assignment",
                    priority=assignment.priority,
                    estimated_difficulty=override.difficulty if override else "medium",
                    assignment_id=assignment.id,
                )
            )
            cursor = session_end

            if break_len and cursor + break_len <= window_end:
                sessions.append(
                    StudySession(
                        id=self._new_id("break"),
                        title="Break Time",
                        subject="Break",
                        start_time=cursor,
                        end_time=cursor + break_len,
                        type="break",
                        priority="low",
                        estimated_difficulty="easy",
                    )
                )
                cursor += break_len

        open_habits = [h for h in habits if not h.completed_on(now.date())]
        habit_len = timedelta(minutes=HABIT_SESSION_MIN)
        for habit in open_habits[:MAX_HABITS_PER_DAY]:
            session_end = cursor + habit_len
            if session_end > window_end:
                break

            sessions.append(
                StudySession(
                    id=self._new_id(f"habit_{habit.id}"),
                    title=f"Work on: {habit.title}",
                    subject="Habits",
                    start_time=cursor,
                    end_time=session_end,
                    type="study",
                    priority="medium",
                    estimated_difficulty="medium",
                    habit_id=habit.id,
                )
            )
            cursor = session_end

        dropped = max(len(pending) - MAX_ASSIGNMENTS_PER_DAY, 0) + max(
            len(open_habits) - MAX_HABITS_PER_DAY, 0
        )
        if dropped:
            logger.debug(f"Daily capacity reached, {dropped} item(s) left for another day")

        study = study_minutes(sessions)
        rest = break_minutes(sessions)
        total = study + rest
        efficiency = min(study / total, 1.0) if total else 0.0

        logger.info(
            f"Planned {len(sessions)} sessions for {day.isoformat()} "
            f"(study={study:.0f}min, breaks={rest:.0f}min)"
        )

        return ScheduleOptimization(
            sessions=sessions,
            total_study_time=study,
            break_time=rest,
            efficiency=efficiency,
            suggestions=generate_suggestions(sessions, peak_hours(patterns)),
        )


def allocate(
    day: date,
    preferences: UserPreferences,
    assignments: Iterable[Assignment],
    habits: Iterable[Habit],
    *,
    now: Optional[datetime] = None,
    patterns: Optional[UserPatterns] = None,
) -> ScheduleOptimization:
    """Functional entry point around :class:`Scheduler`."""
    return Scheduler(preferences).schedule(
        day, assignments, habits, now=now, patterns=patterns
    )
