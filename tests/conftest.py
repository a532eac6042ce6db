import os
import random
from datetime import date

import pytest

os.environ.setdefault("LOG_FILE", os.path.join("logs", "test.log"))

from models.plan_models import FocusTopic, StudyPreferences


MONDAY = date(2024, 1, 1)


def make_topic(topic_id, subject, topic, difficulty=3, priority="medium"):
    return FocusTopic(
        id=topic_id,
        subject=subject,
        topic=topic,
        difficulty=difficulty,
        priority=priority,
        estimated_effort_minutes=60,
    )


@pytest.fixture
def algebra():
    return make_topic("t-algebra", "Math", "Algebra", difficulty=3, priority="high")


@pytest.fixture
def mixed_topics():
    return [
        make_topic("t-algebra", "Math", "Algebra", difficulty=3, priority="critical"),
        make_topic("t-geometry", "Math", "Geometry", difficulty=4, priority="high"),
        make_topic("t-optics", "Physics", "Optics", difficulty=2, priority="high"),
        make_topic("t-essays", "English", "Essays", difficulty=1, priority="low"),
    ]


@pytest.fixture
def preferences():
    return StudyPreferences(
        learning_pace="medium",
        daily_time_limit_minutes=60,
        preferred_study_days=["monday"],
        preferred_study_time="evening",
        base_session_duration_minutes=45,
        break_duration_minutes=10,
    )


@pytest.fixture
def rng():
    return random.Random(42)
