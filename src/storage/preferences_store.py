from __future__ import annotations

import logging
from datetime import time
from typing import Any, Dict

from storage.json_store import JsonStore
from study_planner.models import UserPreferences

logger = logging.getLogger(__name__)


class InvalidPreferencesError(ValueError):
    """Raised when a preference update would leave the user unschedulable."""


def _time_to_str(t: time) -> str:
    return t.strftime("%H:%M")


def _str_to_time(s: str) -> time:
    h, m = map(int, s.split(":")[:2])
    return time(h, m)


def validate_preferences(prefs: UserPreferences) -> None:
    hours = prefs.working_hours
    if hours.end <= hours.start:
        raise InvalidPreferencesError(
            f"working hours end ({_time_to_str(hours.end)}) must be after "
            f"start ({_time_to_str(hours.start)})"
        )
    if hours.minutes < prefs.session_duration_min:
        raise InvalidPreferencesError(
            f"working hours ({hours.minutes} min) are shorter than one "
            f"session ({prefs.session_duration_min} min)"
        )


class PreferencesStore:
    """Per-user scheduling preferences, one JSON record per user id."""

    def __init__(self, path: str = "data/preferences.json"):
        self._store = JsonStore(path)

    @property
    def path(self):
        return self._store.path

    def load(self, user_id: str) -> UserPreferences:
        data = self._store.get(user_id)
        if data is None:
            return UserPreferences()

        try:
            # working hours are stored as HH:MM strings
            hours = data.get("working_hours") or {}
            for key in ("start", "end"):
                if isinstance(hours.get(key), str):
                    hours[key] = _str_to_time(hours[key])

            return UserPreferences(**data)
        except Exception as e:
            logger.warning(f"Discarding unreadable preferences for {user_id}: {e}")
            return UserPreferences()

    def save(self, user_id: str, prefs: UserPreferences) -> None:
        validate_preferences(prefs)

        data = prefs.model_dump()

        # convert time objects to strings for JSON
        hours = data["working_hours"]
        for key in ("start", "end"):
            if isinstance(hours.get(key), time):
                hours[key] = _time_to_str(hours[key])

        self._store.put(user_id, data)
        logger.info(f"Saved scheduling preferences for user {user_id}")

    def update(self, user_id: str, changes: Dict[str, Any]) -> UserPreferences:
        """Merge a partial change set into the stored preferences and save."""
        current = self.load(user_id).model_dump()

        for key, value in changes.items():
            if isinstance(value, dict) and isinstance(current.get(key), dict):
                current[key] = {**current[key], **value}
            else:
                current[key] = value

        hours = current.get("working_hours") or {}
        if not isinstance(hours, dict):
            raise InvalidPreferencesError("working_hours must be an object with start and end")
        for key in ("start", "end"):
            if isinstance(hours.get(key), str):
                hours[key] = _str_to_time(hours[key])

        prefs = UserPreferences(**current)
        self.save(user_id, prefs)
        return prefs
