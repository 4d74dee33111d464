from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.validation import DecimalValue
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services import aggregation
from services.record_store import north_star_metrics, record_to_dict
from utils.datetime_utils import today_utc

router = APIRouter(prefix="/north-star", tags=["north-star"])


class NorthStarCreateRequest(BaseModel):
    metric_name: str = Field(min_length=1, max_length=255)
    unit: str = Field(min_length=1, max_length=50)
    target_value: DecimalValue
    current_value: DecimalValue
    recorded_date: date = Field(default_factory=today_utc)
    notes: Optional[str] = None


@router.post("", status_code=201)
def create_metric(
    req: NorthStarCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    metric = north_star_metrics.create(db, user.id, req.model_dump())
    return record_to_dict(metric)


@router.get("")
def list_metrics(
    metric_name: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = {"metric_name": metric_name} if metric_name else {}
    return [record_to_dict(m) for m in north_star_metrics.list(db, user.id, **filters)]


@router.get("/series")
def get_series(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Latest reading, progress and ascending chart points per metric name."""
    return aggregation.metric_overview(north_star_metrics.list(db, user.id))
