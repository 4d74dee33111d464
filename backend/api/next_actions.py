from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import NextActionPatch, close_out
from api.validation import success
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.record_store import next_actions, record_to_dict

router = APIRouter(prefix="/next-actions", tags=["next-actions"])


class NextActionCreateRequest(BaseModel):
    project_id: int
    description: str = Field(min_length=1)


@router.post("", status_code=201)
def create_next_action(
    req: NextActionCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    action = next_actions.create(db, user.id, req.model_dump())
    return record_to_dict(action)


@router.get("")
def list_next_actions(
    project_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [record_to_dict(a) for a in next_actions.list(db, user.id, project_id=project_id)]


@router.put("/{action_id}")
def update_next_action(
    action_id: int,
    req: NextActionPatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    patch = req
    if req.completed is not None:
        patch = close_out(req, req.completed)
    next_actions.update(db, action_id, user.id, patch)
    return success()


@router.delete("/{action_id}")
def delete_next_action(
    action_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    next_actions.delete(db, action_id, user.id)
    return success()
