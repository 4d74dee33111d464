from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import GoalReviewPatch
from api.validation import ReviewTime, success
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.record_store import goal_reviews, record_to_dict
from utils.datetime_utils import today_utc, utcnow

router = APIRouter(prefix="/goal-reviews", tags=["goal-reviews"])


class GoalReviewCreateRequest(BaseModel):
    review_date: date = Field(default_factory=today_utc)
    review_time: ReviewTime


@router.post("", status_code=201)
def create_review(
    req: GoalReviewCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = goal_reviews.create(db, user.id, req.model_dump())
    return record_to_dict(review)


@router.get("")
def list_reviews(
    review_date: Optional[date] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    reviews = goal_reviews.list(db, user.id, review_date=review_date or today_utc())
    return [record_to_dict(r) for r in reviews]


@router.post("/{review_id}/complete")
def complete_review(
    review_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    goal_reviews.update(db, review_id, user.id, GoalReviewPatch(completed=True, completed_at=utcnow()))
    return success()
