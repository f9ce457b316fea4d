import os
from pathlib import Path

from gamification.service import GamificationService
from storage.calendar_store import CalendarEventStore
from storage.preferences_store import PreferencesStore
from storage.stats_store import StatsStore

# Configuration
DATA_DIR = Path(os.getenv("DATA_DIR", "data"))

preferences_store = PreferencesStore(path=str(DATA_DIR / "preferences.json"))
calendar_store = CalendarEventStore(path=str(DATA_DIR / "calendar_events.json"))
stats_store = StatsStore(path=str(DATA_DIR / "user_stats.json"))
gamification_service = GamificationService(stats_store)


def get_preferences_store() -> PreferencesStore:
    return preferences_store


def get_calendar_store() -> CalendarEventStore:
    return calendar_store


def get_gamification_service() -> GamificationService:
    return gamification_service
