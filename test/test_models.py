from datetime import date, datetime, time
from study_planner.models import (
    Assignment,
    Habit,
    ScheduleOptimization,
    StudySession,
    UserPreferences,
    WorkingHours,
)

def test_preferences_defaults():
    p = UserPreferences()
    assert p.working_hours.start == time(9, 0)
    assert p.working_hours.end == time(17, 0)
    assert p.session_duration_min == 45
    assert p.break_duration_min == 15
    assert p.preferred_days == ["monday", "tuesday", "wednesday", "thursday", "friday"]
    assert p.energy_levels.morning == "high"

def test_preferred_days_are_normalized():
    p = UserPreferences(preferred_days=[" Monday", "SATURDAY"])
    assert p.preferred_days == ["monday", "saturday"]

def test_working_hours_minutes():
    assert WorkingHours(start=time(9, 0), end=time(11, 30)).minutes == 150
    assert WorkingHours(start=time(18, 0), end=time(8, 0)).minutes < 0

def test_assignment_completion_status():
    assert Assignment(id="1", title="A", status="TURNED_IN").is_completed
    assert Assignment(id="2", title="B", status="completed").is_completed
    assert not Assignment(id="3", title="C").is_completed

def test_habit_completed_on():
    h = Habit(id="h", title="Run", completions=[{"date": "2026-03-02T06:30:00"}])
    assert h.completed_on(date(2026, 3, 2))
    assert not h.completed_on(date(2026, 3, 3))

def test_session_duration():
    s = StudySession(
        id="s",
        title="X",
        subject="General",
        start_time=datetime(2026, 1, 1, 9, 0),
        end_time=datetime(2026, 1, 1, 9, 45),
        type="assignment",
    )
    assert s.duration_min == 45

def test_empty_schedule():
    s = ScheduleOptimization()
    assert s.sessions == [] and s.efficiency == 0
