import logging
import time
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from api.dependencies import get_preferences_store
from api.metrics import observe_request
from storage.preferences_store import PreferencesStore
from study_planner.models import UserPreferences

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/preferences/{user_id}")
async def get_preferences(
    user_id: str,
    store: PreferencesStore = Depends(get_preferences_store),
) -> UserPreferences:
    """Stored scheduling preferences, or the defaults for a new user."""
    return store.load(user_id)


@router.put("/preferences/{user_id}")
async def replace_preferences(
    user_id: str,
    prefs: UserPreferences,
    store: PreferencesStore = Depends(get_preferences_store),
) -> UserPreferences:
    start = time.time()
    try:
        store.save(user_id, prefs)
    except ValueError as e:
        logger.info(f"Rejected preferences for {user_id}: {e}")
        observe_request("/preferences", "rejected", start)
        raise HTTPException(status_code=422, detail=str(e))

    observe_request("/preferences", "saved", start)
    return prefs


@router.patch("/preferences/{user_id}")
async def update_preferences(
    user_id: str,
    changes: Dict[str, Any] = Body(...),
    store: PreferencesStore = Depends(get_preferences_store),
) -> UserPreferences:
    """Partial update, e.g. ``{"working_hours": {"end": "18:00"}}``."""
    start = time.time()
    try:
        prefs = store.update(user_id, changes)
    except ValueError as e:
        logger.info(f"Rejected preference update for {user_id}: {e}")
        observe_request("/preferences", "rejected", start)
        raise HTTPException(status_code=422, detail=str(e))

    observe_request("/preferences", "saved", start)
    return prefs
