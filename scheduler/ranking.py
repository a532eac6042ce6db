import math
from enum import Enum
from typing import Dict, Iterable, List, Type

from models.plan_models import MINUTES_PER_DAY, FocusTopic, LearningPace, Priority


MIN_SESSION_MINUTES = 20
MAX_SESSION_MINUTES = 90

PRIORITY_WEIGHTS: Dict[Priority, int] = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}

# Slower learners get shorter sessions and more frequent revision
PACE_MULTIPLIERS: Dict[LearningPace, float] = {
    LearningPace.SLOW: 0.7,
    LearningPace.MEDIUM: 1.0,
    LearningPace.FAST: 1.3,
}

REVISION_FREQUENCY: Dict[LearningPace, int] = {
    LearningPace.SLOW: 2,
    LearningPace.MEDIUM: 3,
    LearningPace.FAST: 4,
}


def ensure_complete(table: Dict, enum_cls: Type[Enum], name: str) -> None:
    """Fail at import time if a lookup table misses a member of its enum."""
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        raise RuntimeError(f"{name} has no entry for: {', '.join(missing)}")


ensure_complete(PRIORITY_WEIGHTS, Priority, "PRIORITY_WEIGHTS")
ensure_complete(PACE_MULTIPLIERS, LearningPace, "PACE_MULTIPLIERS")
ensure_complete(REVISION_FREQUENCY, LearningPace, "REVISION_FREQUENCY")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_duration(minutes: int) -> int:
    return max(MIN_SESSION_MINUTES, min(MAX_SESSION_MINUTES, minutes))


def difficulty_factor(difficulty: int) -> float:
    if difficulty <= 2:
        return 0.8
    if difficulty >= 4:
        return 1.2
    return 1.0


def session_duration(base_minutes: int, pace: LearningPace, difficulty: int) -> int:
    """
    Size one study session.

    Args:
        base_minutes (int): The student's preferred session length
        pace (LearningPace): Global pace setting
        difficulty (int): Topic difficulty, 1-5

    Returns:
        int: Minutes, always within [MIN_SESSION_MINUTES, MAX_SESSION_MINUTES]
    """
    # Bases longer than a day all size to the maximum
    base_minutes = min(max(base_minutes, 0), MINUTES_PER_DAY)
    raw = base_minutes * PACE_MULTIPLIERS[pace] * difficulty_factor(difficulty)
    return clamp_duration(round_half_up(raw))


def rank_topics(topics: Iterable[FocusTopic]) -> List[FocusTopic]:
    """Order topics by priority weight, then difficulty, both descending.

    The sort is stable, so equally ranked topics keep their input order.
    """
    return sorted(
        topics,
        key=lambda t: (PRIORITY_WEIGHTS[t.priority], t.difficulty),
        reverse=True,
    )
