from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import ScorecardPatch
from api.validation import DecimalValue, EnergyLevel, success
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services import aggregation
from services.record_store import record_to_dict, scorecard_metrics
from utils.datetime_utils import today_utc

router = APIRouter(prefix="/scorecard", tags=["scorecard"])


class ScorecardCreateRequest(BaseModel):
    metric_name: str = Field(min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, max_length=100)
    unit: Optional[str] = Field(default=None, max_length=50)
    target_value: Optional[DecimalValue] = None
    current_value: DecimalValue
    recorded_date: date = Field(default_factory=today_utc)
    status: Optional[EnergyLevel] = None
    notes: Optional[str] = None


@router.post("", status_code=201)
def create_metric(
    req: ScorecardCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    metric = scorecard_metrics.create(db, user.id, req.model_dump())
    return record_to_dict(metric)


@router.get("")
def list_metrics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    metrics = scorecard_metrics.list(db, user.id, start=start_date, end=end_date)
    return [record_to_dict(m) for m in metrics]


@router.get("/series")
def get_series(
    metric_name: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    metrics = scorecard_metrics.list(db, user.id)
    if metric_name:
        return aggregation.chart_series(metrics, metric_name)
    return aggregation.metric_overview(metrics)


@router.put("/{metric_id}")
def update_metric(
    metric_id: int,
    req: ScorecardPatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    scorecard_metrics.update(db, metric_id, user.id, req)
    return success()


@router.delete("/{metric_id}")
def delete_metric(
    metric_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    scorecard_metrics.delete(db, metric_id, user.id)
    return success()
