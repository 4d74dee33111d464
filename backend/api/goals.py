from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import GoalPatch, close_out
from api.validation import GoalStatus, success
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services import aggregation
from services.record_store import power_goals, record_to_dict

router = APIRouter(prefix="/goals", tags=["goals"])


class GoalCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    target_month: Optional[int] = Field(default=None, ge=1, le=12)
    target_year: Optional[int] = Field(default=None, ge=1970, le=9999)


@router.post("", status_code=201)
def create_goal(
    req: GoalCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    goal = power_goals.create(db, user.id, req.model_dump(exclude_none=True))
    return record_to_dict(goal)


@router.get("")
def list_goals(
    status: Optional[GoalStatus] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = {"status": status} if status else {}
    return [record_to_dict(g) for g in power_goals.list(db, user.id, **filters)]


@router.get("/rollup")
def get_rollup(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return aggregation.goal_status_rollup(power_goals.list(db, user.id))


@router.put("/{goal_id}")
def update_goal(
    goal_id: int,
    req: GoalPatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    patch = req
    if req.status in ("completed", "active"):
        patch = close_out(req, req.status == "completed")
    power_goals.update(db, goal_id, user.id, patch)
    return success()


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    power_goals.delete(db, goal_id, user.id)
    return success()
