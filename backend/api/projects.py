from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import ProjectPatch, close_out
from api.validation import ProjectStatus, success
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.record_store import projects, record_to_dict

router = APIRouter(prefix="/projects", tags=["projects"])


class ProjectCreateRequest(BaseModel):
    goal_id: int
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    status: ProjectStatus = "not_started"


@router.post("", status_code=201)
def create_project(
    req: ProjectCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # goal_id is a soft reference; the goal may since have been deleted.
    project = projects.create(db, user.id, req.model_dump(exclude_none=True))
    return record_to_dict(project)


@router.get("")
def list_projects(
    goal_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [record_to_dict(p) for p in projects.list(db, user.id, goal_id=goal_id)]


@router.put("/{project_id}")
def update_project(
    project_id: int,
    req: ProjectPatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    patch = req
    if req.status is not None:
        patch = close_out(req, req.status == "completed")
    projects.update(db, project_id, user.id, patch)
    return success()


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    projects.delete(db, project_id, user.id)
    return success()
