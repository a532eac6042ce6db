import os
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv(override=True)


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return int(value)


def _list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class PlannerConfig:
    """Service configuration settings"""

    # Logging
    LOG_FILE = os.getenv("LOG_FILE", "logs/app.log")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))  # 10MB
    LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

    # HTTP
    HOST = os.getenv("PLANNER_HOST", "0.0.0.0")
    PORT = int(os.getenv("PLANNER_PORT", "8000"))
    CORS_ORIGINS = _list(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:8080,http://localhost:5173",
    )
    SLOW_REQUEST_THRESHOLD_MS = float(os.getenv("SLOW_REQUEST_THRESHOLD_MS", "1000"))
    STATS_LOG_INTERVAL_SECONDS = int(os.getenv("STATS_LOG_INTERVAL_SECONDS", "300"))  # 5 minutes

    # Scheduler
    RANDOM_SEED = _optional_int("PLANNER_RANDOM_SEED")
