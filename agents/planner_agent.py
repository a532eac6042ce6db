import logging
import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from models.plan_models import (
    FocusTopic,
    LearningPace,
    PlanRequest,
    StudyPreferences,
    StudySession,
    Weekday,
    WeeklyPlan,
)
from scheduler.day_scheduler import SchedulerState, schedule_day
from scheduler.errors import InvalidInputError
from scheduler.ranking import ensure_complete
from scheduler.time_slots import get_time_slots


logger = logging.getLogger(__name__)

DAYS_IN_WEEK = 7

BASE_SUCCESS_PROBABILITY = {
    LearningPace.SLOW: 0.6,
    LearningPace.MEDIUM: 0.75,
    LearningPace.FAST: 0.85,
}
ensure_complete(BASE_SUCCESS_PROBABILITY, LearningPace, "BASE_SUCCESS_PROBABILITY")


def normalize_week_start(any_day: date) -> date:
    """Return the Monday on or before the given date."""
    return any_day - timedelta(days=any_day.weekday())


def check_week_window(week_start: date) -> None:
    """Reject a week whose last day would fall past the last representable date."""
    if week_start > date.max - timedelta(days=DAYS_IN_WEEK - 1):
        problem = f"week_start_date: week of {week_start} extends past {date.max}"
        logger.warning(f"Rejected plan request | {problem}")
        raise InvalidInputError("Invalid study preferences", [problem])


def active_study_dates(week_start: date, study_days: Sequence[Weekday]) -> List[date]:
    """The dates of the 7-day window starting at week_start that fall on a study day."""
    wanted = set(study_days)
    window = (week_start + timedelta(days=offset) for offset in range(DAYS_IN_WEEK))
    return [day for day in window if Weekday.of(day) in wanted]


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[str]:
    """Render pydantic error dicts as "location: message" strings."""
    problems = []
    for item in errors:
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}")
    return problems


class PlannerAgent:
    def __init__(self, default_seed: Optional[int] = None):
        """
        Initialize the Planner Agent.

        Args:
            default_seed (Optional[int]): Seed for the revision pick when a request carries none.
                Leave unset for a fresh random pick on every plan.
        """
        self.default_seed = default_seed

    def parse_request(self, payload: Union[PlanRequest, Dict[str, Any]]) -> PlanRequest:
        """Validate a raw request body, raising InvalidInputError on malformed preferences."""
        if isinstance(payload, PlanRequest):
            return payload
        try:
            return PlanRequest.model_validate(payload)
        except ValidationError as e:
            problems = format_validation_errors(e.errors())
            logger.warning(f"Rejected plan request | {len(problems)} problem(s) | {problems}")
            raise InvalidInputError("Invalid study preferences", problems) from e

    def _make_rng(self, seed: Optional[int]) -> random.Random:
        if seed is None:
            seed = self.default_seed
        return random.Random(seed)

    def generate_weekly_plan(
        self,
        focus_topics: Sequence[FocusTopic],
        preferences: StudyPreferences,
        week_start_date: date,
        rng: Optional[random.Random] = None,
    ) -> WeeklyPlan:
        """
        Allocate one week of study, revision and buffer sessions.

        Args:
            focus_topics (Sequence[FocusTopic]): The student's weak topics
            preferences (StudyPreferences): Budget, pace, days and slot settings
            week_start_date (date): First day of the 7-day window
            rng (Optional[random.Random]): Source for revision picks

        Returns:
            WeeklyPlan: Sessions ordered by date then slot, with their total duration

        Raises:
            InvalidInputError: If the 7-day window runs past date.max
        """
        check_week_window(week_start_date)
        week_end_date = week_start_date + timedelta(days=DAYS_IN_WEEK - 1)
        sessions: List[StudySession] = []

        if rng is None:
            rng = self._make_rng(None)

        study_dates = active_study_dates(week_start_date, preferences.preferred_study_days)
        if focus_topics and study_dates:
            state = SchedulerState.start_week(focus_topics, rng)
            slots = get_time_slots(preferences.preferred_study_time)
            for study_date in study_dates:
                sessions.extend(schedule_day(state, study_date, slots, preferences))
        else:
            logger.info(
                f"Empty plan for week of {week_start_date} | Topics: {len(focus_topics)} | "
                f"Study days in window: {len(study_dates)}"
            )

        plan = WeeklyPlan(
            week_start_date=week_start_date,
            week_end_date=week_end_date,
            total_planned_minutes=sum(s.duration_minutes for s in sessions),
            sessions=sessions,
        )
        logger.info(
            f"Generated plan for week of {week_start_date} | Sessions: {len(plan.sessions)} | "
            f"Minutes: {plan.total_planned_minutes}"
        )
        return plan

    def generate_from_request(
        self,
        payload: Union[PlanRequest, Dict[str, Any]],
        today: Optional[date] = None,
    ) -> WeeklyPlan:
        """Validate a request, move its week to Monday and build the plan."""
        request = self.parse_request(payload)
        start = request.week_start_date or today or date.today()
        return self.generate_weekly_plan(
            focus_topics=request.focus_topics,
            preferences=request.preferences,
            week_start_date=normalize_week_start(start),
            rng=self._make_rng(request.seed),
        )

    def predict_success_probability(
        self,
        pace: LearningPace = LearningPace.MEDIUM,
        difficulty: int = 3,
        completion_history: Optional[Sequence[float]] = None,
    ) -> float:
        """
        Estimate how likely a student is to complete a session.

        Args:
            pace (LearningPace): Student's learning pace
            difficulty (int): Session difficulty, 1-5
            completion_history (Sequence[float]): Past completion ratios in [0, 1]

        Returns:
            float: Probability clamped to [0.3, 1.0]
        """
        base = BASE_SUCCESS_PROBABILITY[pace]
        difficulty_penalty = max(0.0, (difficulty - 3) * 0.1)
        history = list(completion_history or [])
        history_boost = (sum(history) / len(history)) * 0.2 if history else 0.0
        return min(1.0, max(0.3, base - difficulty_penalty + history_boost))
