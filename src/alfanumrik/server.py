import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from alfanumrik.application.config import resolve_config
from alfanumrik.application.factory import build_tracker
from alfanumrik.application.stats import accuracy_pulse, subject_mastery
from alfanumrik.application.tracker_service import LearningTracker
from alfanumrik.consts import VERSION
from alfanumrik.domain.errors import InvalidInputError, TrackerError
from alfanumrik.domain.learning.models import (
    ActivityEntry,
    ActivityRecord,
    BankQuestion,
    BloomsLevel,
    Difficulty,
    Subject,
)
from alfanumrik.interface._common import to_jsonable

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("alfanumrik.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Alfanumrik Server v{VERSION} starting up...")
    app.state.tracker = build_tracker(resolve_config())
    yield
    # Shutdown
    logger.info("Alfanumrik Server shutting down...")


app = FastAPI(
    title="Alfanumrik Server",
    description="Spaced revision scheduling and mastery analytics.",
    version=VERSION,
    lifespan=lifespan,
)


def get_tracker(request: Request) -> LearningTracker:
    return request.app.state.tracker


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/summary")
def get_summary(tracker: LearningTracker = Depends(get_tracker)):
    """Mastery summary plus per-subject progress and the recent accuracy pulse."""
    records = tracker.ledger.snapshot()
    summary = tracker.summary()
    return {
        **to_jsonable(summary),
        "subject_mastery": to_jsonable(subject_mastery(records), dict[Subject, int]),
        "accuracy_pulse": accuracy_pulse(records),
    }


@app.get("/revision/due")
def get_due(tracker: LearningTracker = Depends(get_tracker)):
    report = tracker.due_report()
    return {"count": len(report), "items": [to_jsonable(r) for r in report]}


class ToggleRequest(BaseModel):
    question: BankQuestion


@app.post("/revision/toggle")
def toggle_revision(req: ToggleRequest, tracker: LearningTracker = Depends(get_tracker)):
    try:
        added = tracker.toggle_revision(req.question)
    except TrackerError as e:
        logger.error(f"Toggle failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return {"added": added, "revision_count": len(tracker.scheduler)}


class ReviewRequest(BaseModel):
    item_key: str
    answer: str | None = None
    time_spent_seconds: float = Field(default=0, ge=0)


@app.post("/revision/review")
def review_item(req: ReviewRequest, tracker: LearningTracker = Depends(get_tracker)):
    """Grade an answer to a revision item. Unknown keys are reported, not failed."""
    try:
        result = tracker.submit_review(req.item_key, req.answer, req.time_spent_seconds)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except TrackerError as e:
        logger.error(f"Review failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    if result is None:
        return {"found": False}
    return {
        "found": True,
        "correct": result.correct,
        "record": to_jsonable(result.record),
        "item": to_jsonable(result.item) if result.item is not None else None,
    }


@app.get("/activity")
def get_activity(limit: int = 20, tracker: LearningTracker = Depends(get_tracker)):
    return to_jsonable(tracker.recent_activity(limit), list[ActivityRecord])


class ActivityRequest(BaseModel):
    subject: Subject
    chapter: str
    difficulty: Difficulty
    accuracy: float = Field(ge=0, le=100)
    marks_achieved: float = Field(default=0, ge=0)
    total_marks: float = Field(default=1, ge=0)
    time_spent_seconds: float = Field(default=0, ge=0)
    blooms_level: BloomsLevel | None = None


@app.post("/activity")
def log_activity(req: ActivityRequest, tracker: LearningTracker = Depends(get_tracker)):
    try:
        record = tracker.log_practice(ActivityEntry(**req.model_dump()))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except TrackerError as e:
        logger.error(f"Logging activity failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return to_jsonable(record)


@app.delete("/activity")
def clear_activity(tracker: LearningTracker = Depends(get_tracker)):
    logger.info("Received history reset request.")
    tracker.reset_history()
    return {"ok": True}
