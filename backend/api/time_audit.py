from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import TimeAuditPatch
from api.validation import ClockTime, EnergyLevel, success
from auth.utils import get_current_user
from db.database import get_db
from db.models import TimeAuditEntry, User
from services import aggregation
from services.record_store import record_to_dict, time_audit_entries
from utils.datetime_utils import today_utc

router = APIRouter(prefix="/time-audit", tags=["time-audit"])


def _entry_to_dict(entry: TimeAuditEntry) -> dict:
    payload = record_to_dict(entry)
    payload["duration_minutes"] = aggregation.entry_duration_minutes(entry.start_time, entry.end_time)
    return payload


class TimeAuditCreateRequest(BaseModel):
    activity_date: date
    start_time: ClockTime
    end_time: ClockTime
    description: str = Field(min_length=1)
    energy_level: EnergyLevel
    dollar_value: int = Field(ge=1, le=4)
    category: Optional[str] = Field(default=None, max_length=100)


@router.post("", status_code=201)
def create_entry(
    req: TimeAuditCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = time_audit_entries.create(db, user.id, req.model_dump())
    return _entry_to_dict(entry)


@router.get("")
def list_entries(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entries = time_audit_entries.list(db, user.id, start=start_date, end=end_date)
    return [_entry_to_dict(e) for e in entries]


@router.get("/summary")
def get_summary(
    window: Optional[Literal["weekly", "biweekly", "monthly"]] = None,
    now: Optional[date] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Energy, value-tier and duration totals for the trailing windows."""
    entries = time_audit_entries.list(db, user.id)
    reference = now or today_utc()
    if window:
        return aggregation.time_window_summary(entries, aggregation.SUMMARY_WINDOWS[window], reference)
    return aggregation.summaries_for_windows(entries, reference)


@router.get("/suggestions")
def get_suggestions(
    q: str = "",
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entries = time_audit_entries.list(db, user.id)
    return aggregation.activity_suggestions(entries, q)


@router.get("/day")
def get_day(
    day: Optional[date] = Query(default=None, alias="date"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Entries for one day in start-time order, plus where the next one begins."""
    day = day or today_utc()
    entries = time_audit_entries.list(db, user.id, start=day, end=day)
    return {
        "date": day.isoformat(),
        "entries": [_entry_to_dict(e) for e in aggregation.entries_for_date(entries, day)],
        "next_slot": aggregation.suggest_next_slot(entries, day),
    }


@router.put("/{entry_id}")
def update_entry(
    entry_id: int,
    req: TimeAuditPatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    time_audit_entries.update(db, entry_id, user.id, req)
    return success()


@router.delete("/{entry_id}")
def delete_entry(
    entry_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    time_audit_entries.delete(db, entry_id, user.id)
    return success()
