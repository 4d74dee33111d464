from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import PomodoroPatch
from api.validation import UtcDateTime, success
from auth.utils import get_current_user
from config import settings
from db.database import get_db
from db.models import User
from services import aggregation
from services.record_store import pomodoro_sessions, record_to_dict
from utils.datetime_utils import as_utc, end_of_day, start_of_day, today_utc, utcnow

router = APIRouter(prefix="/pomodoro", tags=["pomodoro"])


class PomodoroStartRequest(BaseModel):
    task_description: Optional[str] = None
    duration: Optional[int] = Field(default=None, gt=0, le=24 * 3600)
    started_at: Optional[UtcDateTime] = None


@router.post("/start", status_code=201)
def start_session(
    req: PomodoroStartRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session = pomodoro_sessions.create(db, user.id, {
        "started_at": req.started_at or utcnow(),
        "duration": req.duration or settings.POMODORO_DEFAULT_SECONDS,
        "task_description": req.task_description,
    })
    return record_to_dict(session)


@router.post("/{session_id}/complete")
def complete_session(
    session_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    pomodoro_sessions.update(db, session_id, user.id, PomodoroPatch(completed=True, completed_at=utcnow()))
    return success()


@router.get("")
def list_sessions(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if start is not None:
        start = as_utc(start)
    if end is not None:
        end = as_utc(end)
    return [record_to_dict(s) for s in pomodoro_sessions.list(db, user.id, start=start, end=end)]


@router.get("/today")
def today_counts(
    day: Optional[date] = Query(default=None, alias="date"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Sessions started on ``day`` (UTC, defaults to today)."""
    day = day or today_utc()
    sessions = pomodoro_sessions.list(db, user.id, start=start_of_day(day), end=end_of_day(day))
    counts = aggregation.pomodoro_day_counts(sessions)
    return {
        "date": day.isoformat(),
        **counts,
        "completion_rate": aggregation.pomodoro_completion_rate(sessions),
    }
