import logging
import time
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from utils.config import PlannerConfig
from utils.logging import (
    planner_logger, log_plan_generated, log_validation_failure, get_request_stats
)
from utils.request_middleware import RequestLoggingMiddleware, PerformanceLoggingMiddleware

from agents.planner_agent import PlannerAgent, format_validation_errors
from models.plan_models import PlanRequest, PlanResponse, PredictRequest, PredictResponse
from scheduler.errors import InvalidInputError

logging.basicConfig(level=PlannerConfig.LOG_LEVEL.upper())
# basicConfig does nothing once the root logger has handlers
logging.getLogger().setLevel(PlannerConfig.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.planner_agent = PlannerAgent(default_seed=PlannerConfig.RANDOM_SEED)
    logger.info(
        f"PlannerAgent initialized | Fixed seed: {PlannerConfig.RANDOM_SEED is not None}"
    )
    yield
    logger.info("Study planner shutting down")


app = FastAPI(
    title="Study Session Scheduler API",
    description="Deterministic weekly study, revision and buffer session planning",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    PerformanceLoggingMiddleware,
    slow_request_threshold_ms=PlannerConfig.SLOW_REQUEST_THRESHOLD_MS
)
app.add_middleware(
    RequestLoggingMiddleware,
    log_periodic_stats_interval=PlannerConfig.STATS_LOG_INTERVAL_SECONDS
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=PlannerConfig.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_planner_agent(request: Request) -> PlannerAgent:
    agent = getattr(request.app.state, "planner_agent", None)
    if agent is None:
        agent = PlannerAgent(default_seed=PlannerConfig.RANDOM_SEED)
        request.app.state.planner_agent = agent
    return agent


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    log_validation_failure(f"{request.method} {request.url.path}", exc.errors or [exc.message])
    return JSONResponse(
        status_code=400,
        content={"detail": f"{exc.message}, check your preferences", "errors": exc.errors}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = format_validation_errors(exc.errors())
    return await invalid_input_handler(request, InvalidInputError("Invalid request body", problems))


@app.post("/plan/generate", response_model=PlanResponse)
async def generate_study_plan(req: PlanRequest, request: Request):
    """Build one week of sessions from focus topics and study preferences"""
    agent = get_planner_agent(request)

    start_time = time.time()
    plan = agent.generate_from_request(req)
    duration_ms = (time.time() - start_time) * 1000

    log_plan_generated(
        plan.week_start_date.isoformat(), len(plan.sessions), plan.total_planned_minutes, duration_ms
    )
    return PlanResponse(plan=plan)


@app.post("/plan/predict", response_model=PredictResponse)
async def predict_success(req: PredictRequest, request: Request):
    agent = get_planner_agent(request)
    probability = agent.predict_success_probability(
        pace=req.pace,
        difficulty=req.difficulty,
        completion_history=req.completion_history
    )
    return PredictResponse(probability=probability)


@app.get("/stats")
async def request_stats():
    return get_request_stats()


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.get("/")
async def root():
    return {
        "message": "Study Session Scheduler API",
        "version": "1.0.0",
        "endpoints": {
            "generate": "POST /plan/generate",
            "predict": "POST /plan/predict",
            "stats": "GET /stats",
            "health": "GET /health"
        }
    }


if __name__ == "__main__":
    planner_logger.logger.info(f"Starting server on {PlannerConfig.HOST}:{PlannerConfig.PORT}")
    uvicorn.run(app, host=PlannerConfig.HOST, port=PlannerConfig.PORT)
