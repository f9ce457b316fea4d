from __future__ import annotations

from datetime import date, datetime, time
from typing import Literal, Optional, List, Dict

from pydantic import BaseModel, Field, field_validator


Priority = Literal["low", "medium", "high"]
Difficulty = Literal["easy", "medium", "hard"]
EnergyLevel = Literal["low", "medium", "high"]
TimeOfDay = Literal["morning", "afternoon", "evening"]
SessionType = Literal["study", "review", "assignment", "break"]

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Google Classroom reports handed-in work as TURNED_IN
COMPLETED_STATUSES = {"completed", "TURNED_IN"}


class WorkingHours(BaseModel):
    start: time = Field(default_factory=lambda: time(9, 0))
    end: time = Field(default_factory=lambda: time(17, 0))

    @property
    def minutes(self) -> int:
        """Length of the window in minutes (negative for inverted windows)."""
        return (self.end.hour * 60 + self.end.minute) - (
            self.start.hour * 60 + self.start.minute
        )


class EnergyLevels(BaseModel):
    morning: EnergyLevel = "high"
    afternoon: EnergyLevel = "medium"
    evening: EnergyLevel = "low"


class SubjectPreference(BaseModel):
    difficulty: Difficulty = "medium"
    time_required_min: int = Field(45, gt=0)
    preferred_time_of_day: TimeOfDay = "morning"


class UserPreferences(BaseModel):
    # inverted windows are accepted here; PreferencesStore rejects them on save
    working_hours: WorkingHours = Field(default_factory=WorkingHours)
    preferred_days: List[str] = Field(default_factory=lambda: list(WEEKDAYS[:5]))

    session_duration_min: int = Field(45, gt=0)
    break_duration_min: int = Field(15, ge=0)

    energy_levels: EnergyLevels = Field(default_factory=EnergyLevels)
    subject_preferences: Dict[str, SubjectPreference] = Field(default_factory=dict)

    @field_validator("preferred_days")
    @classmethod
    def known_weekdays(cls, v: List[str]) -> List[str]:
        days = [d.strip().lower() for d in v]
        unknown = [d for d in days if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"unknown weekday(s): {', '.join(unknown)}")
        return days


class Assignment(BaseModel):
    id: str
    title: str = Field(..., min_length=1)
    class_id: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = "medium"
    status: str = "pending"

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @property
    def is_completed(self) -> bool:
        return self.status in COMPLETED_STATUSES


class Habit(BaseModel):
    id: str
    title: str = Field(..., min_length=1)
    completions: List[datetime] = Field(default_factory=list)

    @field_validator("completions", mode="before")
    @classmethod
    def unwrap_completion_records(cls, v):
        # stored habits keep completions as {"date": ...} records
        if not isinstance(v, list):
            return v
        return [c.get("date") if isinstance(c, dict) else c for c in v]

    def completed_on(self, day: date) -> bool:
        return any(c.date() == day for c in self.completions)


class StudySession(BaseModel):
    id: str
    title: str
    subject: str
    start_time: datetime
    end_time: datetime
    type: SessionType
    priority: Priority = "medium"
    estimated_difficulty: Difficulty = "medium"
    assignment_id: Optional[str] = None
    habit_id: Optional[str] = None

    @property
    def duration_min(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 60


class ScheduleOptimization(BaseModel):
    sessions: List[StudySession] = Field(default_factory=list)
    total_study_time: float = 0.0
    break_time: float = 0.0
    efficiency: float = Field(0.0, ge=0.0, le=1.0)
    suggestions: List[str] = Field(default_factory=list)


class UserPatterns(BaseModel):
    most_productive_hour: int = Field(10, ge=0, le=23)
    average_session_length: float = 45
    preferred_break_length: float = 15
    completion_rate: float = 0.7


class CalendarEvent(BaseModel):
    id: str
    title: str
    start: datetime
    end: datetime
    type: SessionType
    description: str = ""
    priority: Priority = "medium"
    is_ai_generated: bool = True


# --- gamification -----------------------------------------------------------

AchievementCategory = Literal["habits", "assignments", "study", "streaks"]
Rarity = Literal["common", "rare", "epic", "legendary"]


class Achievement(BaseModel):
    id: str
    title: str
    description: str
    category: AchievementCategory
    xp_reward: int = Field(..., gt=0)
    target: int = Field(..., gt=0)
    rarity: Rarity = "common"


class UnlockedAchievement(Achievement):
    unlocked_at: datetime


class LevelInfo(BaseModel):
    level: int = 1
    current_level_xp: int = 0
    next_level_xp: int = 100


class UserStats(LevelInfo):
    total_xp: int = Field(0, ge=0)
    streak: int = Field(0, ge=0)
    total_study_time_min: int = Field(0, ge=0)
    completed_assignments: int = Field(0, ge=0)
    early_assignments: int = Field(0, ge=0)
    completed_habits: int = Field(0, ge=0)
    achievements_unlocked: int = Field(0, ge=0)


class GamificationEvent(BaseModel):
    kind: Literal["xp", "level_up", "achievement"]
    message: str
    xp: int = 0
    achievement_id: Optional[str] = None


class AchievementProgress(BaseModel):
    achievement: Achievement
    progress: int
    unlocked: bool


class GamificationResult(BaseModel):
    stats: UserStats
    events: List[GamificationEvent] = Field(default_factory=list)
