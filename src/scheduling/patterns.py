from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, List, Optional

from study_planner.models import Habit, UserPatterns

logger = logging.getLogger(__name__)

DEFAULT_PEAK_HOUR = 10


def most_productive_hour(habits: Iterable[Habit], default: int = DEFAULT_PEAK_HOUR) -> int:
    """Mode of the hour-of-day over all habit completions.

    Ties go to the hour seen first while scanning. No history -> ``default``.
    """
    hours = [c.hour for h in habits for c in h.completions]
    if not hours:
        return default

    counts = Counter(hours)
    best = max(counts.values())
    return next(h for h in hours if counts[h] == best)


def _number(analytics: dict, key: str, fallback: float) -> float:
    value = analytics.get(key)
    try:
        value = float(value)
    except (TypeError, ValueError):
        return fallback
    # 0 counts as "not recorded", same as a missing key
    return value if value > 0 else fallback


def analyze_user_patterns(
    habits: Iterable[Habit],
    analytics: Optional[dict] = None,
) -> UserPatterns:
    """Estimate productivity patterns from habit history and stored analytics."""
    analytics = analytics if isinstance(analytics, dict) else {}

    patterns = UserPatterns(
        most_productive_hour=most_productive_hour(habits),
        average_session_length=_number(analytics, "averageSessionLength", 45),
        preferred_break_length=_number(analytics, "preferredBreakLength", 15),
        completion_rate=_number(analytics, "completionRate", 0.7),
    )
    logger.debug(f"Analyzed patterns: peak hour {patterns.most_productive_hour}")
    return patterns


def peak_hours(patterns: Optional[UserPatterns]) -> List[int]:
    hour = patterns.most_productive_hour if patterns else DEFAULT_PEAK_HOUR
    return [hour, hour + 1]
