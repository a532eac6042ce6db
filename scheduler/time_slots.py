from typing import Dict, List

from models.plan_models import StudyTime
from scheduler.ranking import ensure_complete


TIME_SLOTS: Dict[StudyTime, List[str]] = {
    StudyTime.MORNING: ["06:00", "07:00", "08:00", "09:00", "10:00"],
    StudyTime.AFTERNOON: ["12:00", "13:00", "14:00", "15:00", "16:00"],
    StudyTime.EVENING: ["17:00", "18:00", "19:00", "20:00"],
    StudyTime.NIGHT: ["20:00", "21:00", "22:00"],
}

ensure_complete(TIME_SLOTS, StudyTime, "TIME_SLOTS")


def get_time_slots(preferred_time: StudyTime) -> List[str]:
    """Ordered slot labels for one day; a fresh list each call."""
    return list(TIME_SLOTS[preferred_time])
