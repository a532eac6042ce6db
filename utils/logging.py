import logging
import logging.handlers
import json
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any
from fastapi import Request

from utils.config import PlannerConfig


class PlannerLogger:
    """Application logger with request timing and plan generation tracking"""

    def __init__(self,
                 log_file: str = PlannerConfig.LOG_FILE,
                 max_file_size: int = PlannerConfig.LOG_MAX_BYTES,
                 backup_count: int = PlannerConfig.LOG_BACKUP_COUNT,
                 log_level: str = PlannerConfig.LOG_LEVEL):

        self.log_file = log_file

        # Create logs directory if it doesn't exist
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("study_planner")
        self.logger.setLevel(getattr(logging, log_level.upper()))

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        console_handler = logging.StreamHandler()

        formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)-20s | %(funcName)-15s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

        self.stats = {
            "requests": 0,
            "plans_generated": 0,
            "empty_plans": 0,
            "rejected_requests": 0,
            "sessions_planned": 0,
            "start_time": time.time()
        }

        self.logger.info(f"Logging initialized | File: {log_file} | Level: {log_level.upper()}")

    def log_request_start(self, request: Request, endpoint: str, request_id: str) -> Dict[str, Any]:
        """Log the start of a request with details"""
        client_ip = request.client.host if request.client else "unknown"
        request_info = {
            "request_id": request_id,
            "endpoint": endpoint,
            "method": request.method,
            "client_ip": client_ip,
            "timestamp": datetime.now().isoformat()
        }
        self.logger.info(f"REQUEST START | {request_id} | {endpoint} | IP: {client_ip}")
        return request_info

    def log_request_end(self, request_info: Dict[str, Any], duration_ms: float, status_code: int = 200):
        """Log the end of a request with performance metrics"""
        self.stats["requests"] += 1
        outcome = "OK" if status_code < 400 else "FAILED"
        self.logger.info(
            f"REQUEST END | {request_info['request_id']} | {request_info['endpoint']} | {outcome} | "
            f"Duration: {duration_ms:.2f}ms | Status: {status_code}"
        )

    def log_plan_generated(self, week_start: str, session_count: int, total_minutes: int, duration_ms: float):
        """Log a finished weekly plan"""
        self.stats["plans_generated"] += 1
        self.stats["sessions_planned"] += session_count
        if session_count == 0:
            self.stats["empty_plans"] += 1
        self.logger.info(
            f"PLAN | Week: {week_start} | Sessions: {session_count} | "
            f"Minutes: {total_minutes} | Duration: {duration_ms:.2f}ms"
        )

    def log_validation_failure(self, endpoint: str, errors: list):
        self.stats["rejected_requests"] += 1
        self.logger.warning(f"INVALID INPUT | {endpoint} | {'; '.join(errors)}")

    def log_error(self, error: Exception, endpoint: str, extra_context: Optional[Dict] = None):
        """Log errors with context"""
        context = f" | Context: {json.dumps(extra_context, default=str)}" if extra_context else ""
        self.logger.error(
            f"ERROR | {endpoint} | {type(error).__name__}: {str(error)}{context}",
            exc_info=True
        )

    def get_request_stats(self) -> Dict[str, Any]:
        """Get current request and planning statistics"""
        uptime_hours = (time.time() - self.stats["start_time"]) / 3600
        plans = max(self.stats["plans_generated"], 1)
        return {
            "total_requests": self.stats["requests"],
            "plans_generated": self.stats["plans_generated"],
            "empty_plans": self.stats["empty_plans"],
            "rejected_requests": self.stats["rejected_requests"],
            "average_sessions_per_plan": round(self.stats["sessions_planned"] / plans, 2),
            "uptime_hours": round(uptime_hours, 2),
            "log_file": self.log_file
        }

    def log_periodic_stats(self):
        stats = self.get_request_stats()
        self.logger.info(
            f"PERIODIC STATS | Requests: {stats['total_requests']} | "
            f"Plans: {stats['plans_generated']} | Rejected: {stats['rejected_requests']} | "
            f"Uptime: {stats['uptime_hours']}h"
        )


# Global logger instance
planner_logger = PlannerLogger()


# Convenience functions for easy usage
def log_request_start(request: Request, endpoint: str, request_id: str):
    return planner_logger.log_request_start(request, endpoint, request_id)

def log_request_end(request_info: Dict[str, Any], duration_ms: float, status_code: int = 200):
    planner_logger.log_request_end(request_info, duration_ms, status_code)

def log_plan_generated(week_start: str, session_count: int, total_minutes: int, duration_ms: float):
    planner_logger.log_plan_generated(week_start, session_count, total_minutes, duration_ms)

def log_validation_failure(endpoint: str, errors: list):
    planner_logger.log_validation_failure(endpoint, errors)

def log_error(error: Exception, endpoint: str, extra_context: Optional[Dict] = None):
    planner_logger.log_error(error, endpoint, extra_context)

def get_request_stats():
    return planner_logger.get_request_stats()

def log_periodic_stats():
    planner_logger.log_periodic_stats()
