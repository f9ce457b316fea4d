from __future__ import annotations

import math

from study_planner.models import LevelInfo

FIRST_LEVEL_XP = 100
LEVEL_GROWTH = 1.5


def calculate_level(total_xp: int) -> LevelInfo:
    """Level for a running XP total.

    Reaching level 2 takes 100 XP; every further threshold is the previous one
    times 1.5 (rounded down). ``current_level_xp`` is the progress into the
    current level and ``next_level_xp`` the size of that level.
    """
    level = 1
    floor_xp = 0
    next_xp = FIRST_LEVEL_XP

    while total_xp >= next_xp:
        floor_xp = next_xp
        level += 1
        next_xp = math.floor(floor_xp * LEVEL_GROWTH)

    return LevelInfo(
        level=level,
        current_level_xp=total_xp - floor_xp,
        next_level_xp=next_xp - floor_xp,
    )
