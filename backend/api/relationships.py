from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import RelationshipPatch
from api.validation import EnergyLevel, success
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services import aggregation
from services.record_store import record_to_dict, relationships

router = APIRouter(prefix="/relationships", tags=["relationships"])


class RelationshipCreateRequest(BaseModel):
    contact_name: str = Field(min_length=1, max_length=255)
    relationship: Optional[str] = Field(default=None, max_length=100)
    energy_impact: EnergyLevel
    notes: Optional[str] = None
    boundary_set: bool = False
    last_interaction: Optional[date] = None


@router.post("", status_code=201)
def create_relationship(
    req: RelationshipCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = relationships.create(db, user.id, req.model_dump())
    return record_to_dict(row)


@router.get("")
def list_relationships(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [record_to_dict(r) for r in relationships.list(db, user.id)]


@router.get("/summary")
def get_summary(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = relationships.list(db, user.id)
    return {
        "total": len(rows),
        "energy_counts": aggregation.energy_counts(rows, attr="energy_impact"),
        "boundaries_set": sum(1 for r in rows if r.boundary_set),
    }


@router.put("/{relationship_id}")
def update_relationship(
    relationship_id: int,
    req: RelationshipPatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    relationships.update(db, relationship_id, user.id, req)
    return success()


@router.delete("/{relationship_id}")
def delete_relationship(
    relationship_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    relationships.delete(db, relationship_id, user.id)
    return success()
