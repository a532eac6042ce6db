import logging
import random
from collections import deque
from dataclasses import dataclass, field
from datetime import date
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from models.plan_models import FocusTopic, SessionType, StudyPreferences, StudySession
from scheduler.ranking import (
    REVISION_FREQUENCY,
    clamp_duration,
    rank_topics,
    round_half_up,
    session_duration,
)


logger = logging.getLogger(__name__)

REVISION_RATIO = 0.6
REVISION_DIFFICULTY = 2

BUFFER_SUBJECT = "Flexible"
BUFFER_TOPIC = "Catch-up or extra practice"
BUFFER_DIFFICULTY = 1
BUFFER_MIN_LEFTOVER = 15
BUFFER_MAX_MINUTES = 30


@dataclass
class SchedulerState:
    """Rotation and introduction state shared by every day of one plan.

    Created once per weekly plan and threaded through each day in order.
    """

    ranked_topics: Deque[FocusTopic]
    rng: random.Random
    last_subject: Optional[str] = None
    # (subject, topic) -> id of the focus topic that introduced it, in first-seen order
    topics_introduced: Dict[Tuple[str, str], str] = field(default_factory=dict)
    session_count: int = 0

    @classmethod
    def start_week(cls, topics: Iterable[FocusTopic], rng: Optional[random.Random] = None) -> "SchedulerState":
        return cls(ranked_topics=deque(rank_topics(topics)), rng=rng if rng is not None else random.Random())

    def next_topic_index(self) -> int:
        """Index of the first queued topic whose subject differs from the last one used.

        Falls back to the front of the queue when every topic shares that subject.
        """
        for index, topic in enumerate(self.ranked_topics):
            if topic.subject != self.last_subject:
                return index
        return 0

    def rotate_to_back(self, index: int) -> None:
        topic = self.ranked_topics[index]
        del self.ranked_topics[index]
        self.ranked_topics.append(topic)

    def introduce(self, topic: FocusTopic) -> None:
        self.topics_introduced.setdefault((topic.subject, topic.topic), topic.id)
        self.last_subject = topic.subject


@dataclass
class DaySchedule:
    """Time budget and slot pointer for a single calendar day."""

    scheduled_date: date
    slots: List[str]
    daily_limit: int
    break_minutes: int
    time_used: int = 0
    slot_index: int = 0
    sessions: List[StudySession] = field(default_factory=list)

    @property
    def has_slot(self) -> bool:
        return self.slot_index < len(self.slots)

    @property
    def leftover(self) -> int:
        return self.daily_limit - self.time_used

    def fits(self, minutes: int) -> bool:
        return self.time_used + minutes + self.break_minutes <= self.daily_limit

    def place(self, session_type: SessionType, subject: str, topic: str, minutes: int,
              difficulty: int, source_topic_id: Optional[str] = None,
              take_break: bool = True) -> StudySession:
        session = StudySession(
            subject=subject,
            topic=topic,
            session_type=session_type,
            scheduled_date=self.scheduled_date,
            scheduled_time=self.slots[self.slot_index],
            duration_minutes=minutes,
            difficulty=difficulty,
            source_topic_id=source_topic_id,
        )
        self.sessions.append(session)
        self.slot_index += 1
        self.time_used += minutes + (self.break_minutes if take_break else 0)
        return session


def inject_revision(state: SchedulerState, day: DaySchedule, preferences: StudyPreferences,
                    last_study_minutes: int) -> Optional[StudySession]:
    """Maybe follow a study session with a revision of earlier material.

    Fires every REVISION_FREQUENCY[pace] study sessions of the week. The
    revised topic is drawn from the topics introduced so far using the
    state's random source.
    """
    frequency = REVISION_FREQUENCY[preferences.learning_pace]
    if state.session_count % frequency != 0 or not state.topics_introduced:
        return None

    minutes = clamp_duration(round_half_up(last_study_minutes * REVISION_RATIO))
    if not day.has_slot or not day.fits(minutes):
        logger.debug(f"Revision skipped on {day.scheduled_date}: {minutes}min does not fit")
        return None

    (subject, topic), topic_id = state.rng.choice(list(state.topics_introduced.items()))
    return day.place(
        SessionType.REVISION, subject, topic, minutes, REVISION_DIFFICULTY,
        source_topic_id=topic_id,
    )


def allocate_buffer(day: DaySchedule) -> Optional[StudySession]:
    """Turn a leftover of at least BUFFER_MIN_LEFTOVER minutes into one catch-up block."""
    leftover = day.leftover
    if leftover < BUFFER_MIN_LEFTOVER or not day.has_slot:
        return None
    return day.place(
        SessionType.BUFFER, BUFFER_SUBJECT, BUFFER_TOPIC,
        min(BUFFER_MAX_MINUTES, leftover), BUFFER_DIFFICULTY,
        take_break=False,
    )


def schedule_day(state: SchedulerState, scheduled_date: date, slots: List[str],
                 preferences: StudyPreferences) -> List[StudySession]:
    """
    Fill one day's slots with study sessions under the daily budget.

    Args:
        state (SchedulerState): Week-level rotation state, advanced in place
        scheduled_date (date): The calendar day being filled
        slots (List[str]): Ordered slot labels available that day
        preferences (StudyPreferences): Budget, pace and break settings

    Returns:
        List[StudySession]: The day's sessions in slot order
    """
    day = DaySchedule(
        scheduled_date=scheduled_date,
        slots=slots,
        daily_limit=preferences.daily_time_limit_minutes,
        break_minutes=preferences.break_duration_minutes,
    )

    while state.ranked_topics and day.time_used < day.daily_limit and day.has_slot:
        index = state.next_topic_index()
        topic = state.ranked_topics[index]
        minutes = session_duration(
            preferences.base_session_duration_minutes, preferences.learning_pace, topic.difficulty
        )
        if not day.fits(minutes):
            break

        day.place(SessionType.STUDY, topic.subject, topic.topic, minutes, topic.difficulty,
                  source_topic_id=topic.id)
        state.introduce(topic)
        state.session_count += 1
        inject_revision(state, day, preferences, minutes)
        state.rotate_to_back(index)

    allocate_buffer(day)

    logger.debug(
        f"Scheduled {scheduled_date} | Sessions: {len(day.sessions)} | "
        f"Used: {day.time_used}/{day.daily_limit}min"
    )
    return day.sessions
