from datetime import date, datetime, time

import pytest
from fastapi.testclient import TestClient

from study_planner.models import Assignment, Habit, UserPreferences, WorkingHours

DAY = date(2026, 3, 2)
NOW = datetime(2026, 3, 2, 8, 0)


@pytest.fixture
def day():
    return DAY


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def prefs_factory():
    def _make(start=time(9, 0), end=time(17, 0), session=45, brk=15, **kwargs):
        return UserPreferences(
            working_hours=WorkingHours(start=start, end=end),
            session_duration_min=session,
            break_duration_min=brk,
            **kwargs,
        )
    return _make


@pytest.fixture
def assignment_factory():
    counter = {"n": 0}

    def _make(title=None, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        return Assignment(id=f"a{n}", title=title or f"Assignment {n}", **kwargs)
    return _make


@pytest.fixture
def habit_factory():
    counter = {"n": 0}

    def _make(title=None, completions=None):
        counter["n"] += 1
        n = counter["n"]
        return Habit(id=f"h{n}", title=title or f"Habit {n}", completions=completions or [])
    return _make


@pytest.fixture
def client(tmp_path):
    """API client whose stores live in a temporary directory."""
    from api import dependencies
    from api.main import app
    from gamification.service import GamificationService
    from storage.calendar_store import CalendarEventStore
    from storage.preferences_store import PreferencesStore
    from storage.stats_store import StatsStore

    prefs = PreferencesStore(path=str(tmp_path / "preferences.json"))
    calendar = CalendarEventStore(path=str(tmp_path / "calendar_events.json"))
    service = GamificationService(StatsStore(path=str(tmp_path / "user_stats.json")))

    app.dependency_overrides[dependencies.get_preferences_store] = lambda: prefs
    app.dependency_overrides[dependencies.get_calendar_store] = lambda: calendar
    app.dependency_overrides[dependencies.get_gamification_service] = lambda: service

    yield TestClient(app)

    app.dependency_overrides.clear()
