import logging
import time
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.dependencies import get_calendar_store, get_preferences_store
from api.metrics import SCHEDULE_EFFICIENCY, SESSIONS_SCHEDULED_TOTAL, observe_request
from scheduling.patterns import analyze_user_patterns
from scheduling.scheduler import Scheduler
from storage.calendar_store import CalendarEventStore
from storage.preferences_store import PreferencesStore
from study_planner.models import (
    Assignment,
    CalendarEvent,
    Habit,
    ScheduleOptimization,
    UserPatterns,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class GenerateScheduleIn(BaseModel):
    user_id: str
    day: date
    assignments: List[Assignment] = Field(default_factory=list)
    habits: List[Habit] = Field(default_factory=list)
    # reference time for "already done today"; defaults to server time
    now: Optional[datetime] = None
    analytics: Optional[dict] = None
    save: bool = False


class GenerateScheduleOut(ScheduleOptimization):
    saved_events: int = 0


class SaveScheduleIn(BaseModel):
    user_id: str
    schedule: ScheduleOptimization


class AnalyzePatternsIn(BaseModel):
    habits: List[Habit] = Field(default_factory=list)
    analytics: Optional[dict] = None


@router.post("/patterns/analyze")
async def analyze_patterns(payload: AnalyzePatternsIn) -> UserPatterns:
    return analyze_user_patterns(payload.habits, payload.analytics)


@router.post("/schedule/generate")
async def generate_schedule(
    payload: GenerateScheduleIn,
    prefs_store: PreferencesStore = Depends(get_preferences_store),
    calendar_store: CalendarEventStore = Depends(get_calendar_store),
) -> GenerateScheduleOut:
    """Plan one day for a user from their open assignments and habits."""
    start = time.time()
    logger.info(
        f"Generating schedule for {payload.user_id} on {payload.day} "
        f"({len(payload.assignments)} assignments, {len(payload.habits)} habits)"
    )

    prefs = prefs_store.load(payload.user_id)
    patterns = analyze_user_patterns(payload.habits, payload.analytics)
    schedule = Scheduler(prefs).schedule(
        payload.day,
        payload.assignments,
        payload.habits,
        now=payload.now,
        patterns=patterns,
    )

    saved = 0
    if payload.save and schedule.sessions:
        try:
            saved = len(calendar_store.save_schedule(payload.user_id, schedule))
        except OSError as e:
            logger.error(f"Failed to save schedule for {payload.user_id}: {e}")
            observe_request("/schedule/generate", "error", start)
            raise HTTPException(status_code=500, detail="Failed to save schedule")

    # Prometheus (best-effort)
    try:
        for s in schedule.sessions:
            SESSIONS_SCHEDULED_TOTAL.labels(type=s.type).inc()
        if schedule.sessions:
            SCHEDULE_EFFICIENCY.observe(schedule.efficiency)
    except Exception:
        pass
    observe_request("/schedule/generate", "saved" if saved else "generated", start)

    return GenerateScheduleOut(**schedule.model_dump(), saved_events=saved)


@router.post("/schedule/save")
async def save_schedule(
    payload: SaveScheduleIn,
    calendar_store: CalendarEventStore = Depends(get_calendar_store),
) -> dict:
    start = time.time()
    try:
        events = calendar_store.save_schedule(payload.user_id, payload.schedule)
    except OSError as e:
        logger.error(f"Failed to save schedule for {payload.user_id}: {e}")
        observe_request("/schedule/save", "error", start)
        raise HTTPException(status_code=500, detail="Failed to save schedule")

    observe_request("/schedule/save", "saved", start)
    return {
        "status": "saved",
        "count": len(events),
        "events": [e.model_dump(mode="json") for e in events],
    }


@router.get("/calendar/{user_id}/events")
async def list_calendar_events(
    user_id: str,
    date: Optional[str] = None,
    calendar_store: CalendarEventStore = Depends(get_calendar_store),
) -> List[CalendarEvent]:
    """Stored events for a user, optionally for one day (YYYY-MM-DD)."""
    day = None
    if date:
        try:
            day = datetime.strptime(date, "%Y-%m-%d").date()
        except ValueError:
            raise HTTPException(
                status_code=400, detail="Invalid date format. Use YYYY-MM-DD"
            )

    return calendar_store.list_events(user_id, day)
