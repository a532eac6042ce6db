from datetime import date
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


MINUTES_PER_DAY = 1440


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class LearningPace(str, Enum):
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"


class StudyTime(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class SessionType(str, Enum):
    STUDY = "study"
    REVISION = "revision"
    BUFFER = "buffer"


class Weekday(str, Enum):
    # Declared in date.weekday() order
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return list(cls)[day.weekday()]


class FocusTopic(BaseModel):
    id: str = Field(..., description="Opaque identifier of the weak topic.")
    subject: str = Field(..., min_length=1, description="Subject the topic belongs to.")
    topic: str = Field(..., min_length=1, description="The topic to improve.")
    difficulty: int = Field(..., ge=1, le=5, description="Self-reported difficulty, 1-5.")
    priority: Priority = Field(..., description="How urgently the topic needs work.")
    estimated_effort_minutes: int = Field(
        default=60, gt=0, description="Advisory effort estimate; not used for session sizing."
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class StudyPreferences(BaseModel):
    learning_pace: LearningPace = LearningPace.MEDIUM
    daily_time_limit_minutes: int = Field(120, gt=0, le=MINUTES_PER_DAY, description="Daily study budget in minutes.")
    preferred_study_days: List[Weekday] = Field(
        default_factory=lambda: [
            Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
            Weekday.THURSDAY, Weekday.FRIDAY, Weekday.SATURDAY,
        ],
        description="Weekday names the student is willing to study on.",
    )
    preferred_study_time: StudyTime = StudyTime.EVENING
    base_session_duration_minutes: int = Field(45, gt=0, le=MINUTES_PER_DAY, description="Session length before pace/difficulty scaling.")
    break_duration_minutes: int = Field(10, ge=0, le=MINUTES_PER_DAY, description="Break taken after every session.")

    @field_validator("preferred_study_days", mode="before")
    @classmethod
    def normalise_weekdays(cls, value):
        if isinstance(value, (list, tuple, set)):
            return [item.strip().lower() if isinstance(item, str) else item for item in value]
        return value


class StudySession(BaseModel):
    subject: str
    topic: str
    session_type: SessionType
    scheduled_date: date
    scheduled_time: str = Field(..., description="Slot label, e.g. '18:00'.")
    duration_minutes: int = Field(..., gt=0)
    difficulty: int = Field(..., ge=1, le=5)
    source_topic_id: Optional[str] = Field(None, description="FocusTopic that produced this session.")


class WeeklyPlan(BaseModel):
    week_start_date: date
    week_end_date: date
    total_planned_minutes: int
    sessions: List[StudySession] = Field(default_factory=list)


class PlanRequest(BaseModel):
    focus_topics: List[FocusTopic] = Field(default_factory=list)
    preferences: StudyPreferences
    week_start_date: Optional[date] = Field(None, description="Any date in the target week; defaults to today.")
    seed: Optional[int] = Field(None, description="Seeds the revision topic pick for reproducible plans.")


class PlanResponse(BaseModel):
    success: bool = True
    plan: WeeklyPlan


class PredictRequest(BaseModel):
    pace: LearningPace = LearningPace.MEDIUM
    difficulty: int = Field(3, ge=1, le=5)
    completion_history: List[float] = Field(
        default_factory=list, description="Past completion ratios, each between 0 and 1."
    )

    @field_validator("completion_history")
    @classmethod
    def check_ratios(cls, value: List[float]) -> List[float]:
        for ratio in value:
            if ratio < 0 or ratio > 1:
                raise ValueError("completion ratios must be between 0 and 1")
        return value


class PredictResponse(BaseModel):
    success: bool = True
    probability: float
