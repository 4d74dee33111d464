from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import DailyPlanPatch
from api.validation import JsonList, success
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.record_store import daily_plans, record_to_dict
from utils.datetime_utils import today_utc

router = APIRouter(prefix="/daily-plans", tags=["daily-plans"])


class DailyPlanCreateRequest(BaseModel):
    plan_date: date = Field(default_factory=today_utc)
    first_90_min_task: Optional[str] = None
    key_tasks: JsonList = "[]"
    notes: Optional[str] = None


@router.post("", status_code=201)
def create_plan(
    req: DailyPlanCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # One plan per day is not enforced; a second create adds a second row.
    plan = daily_plans.create(db, user.id, req.model_dump())
    return record_to_dict(plan)


@router.get("/by-date")
def get_plan(
    plan_date: Optional[date] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's plan for ``plan_date`` (default today), or null."""
    plan = daily_plans.first(db, user.id, plan_date=plan_date or today_utc())
    return record_to_dict(plan)


@router.put("/{plan_id}")
def update_plan(
    plan_id: int,
    req: DailyPlanPatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    daily_plans.update(db, plan_id, user.id, req)
    return success()
