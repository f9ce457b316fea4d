from __future__ import annotations

import logging
from typing import List

from storage.json_store import JsonStore
from study_planner.models import UnlockedAchievement, UserStats

logger = logging.getLogger(__name__)


class StatsStore:
    """Gamification state per user: running stats and unlocked achievements."""

    def __init__(self, path: str = "data/user_stats.json"):
        self._store = JsonStore(path)

    def _record(self, user_id: str) -> dict:
        record = self._store.get(user_id)
        return record if isinstance(record, dict) else {}

    def load_stats(self, user_id: str) -> UserStats:
        try:
            return UserStats(**self._record(user_id).get("stats", {}))
        except Exception as e:
            logger.warning(f"Resetting unreadable stats for {user_id}: {e}")
            return UserStats()

    def load_achievements(self, user_id: str) -> List[UnlockedAchievement]:
        unlocked = []
        for raw in self._record(user_id).get("achievements", []):
            try:
                unlocked.append(UnlockedAchievement(**raw))
            except Exception as e:
                logger.warning(f"Skipping malformed achievement for {user_id}: {e}")
        return unlocked

    def save(
        self,
        user_id: str,
        stats: UserStats,
        achievements: List[UnlockedAchievement],
    ) -> None:
        self._store.put(
            user_id,
            {
                "stats": stats.model_dump(mode="json"),
                "achievements": [a.model_dump(mode="json") for a in achievements],
            },
        )
