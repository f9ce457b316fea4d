from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from storage.json_store import JsonStore
from study_planner.models import CalendarEvent, ScheduleOptimization, StudySession

logger = logging.getLogger(__name__)

BREAK_DESCRIPTION = "Take a break and recharge"


def session_to_event(session: StudySession) -> CalendarEvent:
    if session.type == "break":
        description = BREAK_DESCRIPTION
    else:
        description = (
            f"{session.subject} - Estimated difficulty: {session.estimated_difficulty}"
        )

    return CalendarEvent(
        id=session.id,
        title=session.title,
        start=session.start_time,
        end=session.end_time,
        type=session.type,
        description=description,
        priority=session.priority,
        is_ai_generated=True,
    )


class CalendarEventStore:
    """Calendar events per user, including sessions written from generated schedules."""

    def __init__(self, path: str = "data/calendar_events.json"):
        self._store = JsonStore(path)

    def _raw_events(self, user_id: str) -> list:
        raw = self._store.get(user_id, [])
        return raw if isinstance(raw, list) else []

    def list_events(self, user_id: str, day: Optional[date] = None) -> List[CalendarEvent]:
        events = []
        for raw in self._raw_events(user_id):
            try:
                events.append(CalendarEvent(**raw))
            except Exception as e:
                logger.warning(f"Skipping malformed calendar event for {user_id}: {e}")

        if day is not None:
            events = [e for e in events if e.start.date() == day]
        # stored events may mix naive and aware times; order by wall-clock time
        return sorted(events, key=lambda e: e.start.replace(tzinfo=None))

    def save_schedule(
        self, user_id: str, schedule: ScheduleOptimization
    ) -> List[CalendarEvent]:
        """Append every session of ``schedule`` as an AI-generated event."""
        new_events = [session_to_event(s) for s in schedule.sessions]

        existing = self._raw_events(user_id)
        existing.extend(e.model_dump(mode="json") for e in new_events)
        self._store.put(user_id, existing)

        logger.info(f"Added {len(new_events)} sessions to calendar of user {user_id}")
        return new_events
