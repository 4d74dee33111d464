from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.patches import CheckInPatch, CommitmentPatch, PartnerPatch, close_out
from api.validation import CommitmentStatus, success
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.record_store import (
    accountability_partners,
    check_ins,
    commitments,
    record_to_dict,
)
from utils.datetime_utils import utcnow

router = APIRouter(prefix="/accountability", tags=["accountability"])


# ---------------------------------------------------------------------------
# Partners
# ---------------------------------------------------------------------------

class PartnerCreateRequest(BaseModel):
    partner_name: str = Field(min_length=1, max_length=255)
    partner_email: Optional[str] = Field(default=None, max_length=320)
    partner_phone: Optional[str] = Field(default=None, max_length=50)
    relationship: Optional[str] = Field(default=None, max_length=100)


@router.post("/partners", status_code=201)
def create_partner(
    req: PartnerCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    partner = accountability_partners.create(db, user.id, req.model_dump())
    return record_to_dict(partner)


@router.get("/partners")
def list_partners(
    active_only: bool = False,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = {"active": True} if active_only else {}
    return [record_to_dict(p) for p in accountability_partners.list(db, user.id, **filters)]


@router.put("/partners/{partner_id}")
def update_partner(
    partner_id: int,
    req: PartnerPatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    accountability_partners.update(db, partner_id, user.id, req)
    return success()


# ---------------------------------------------------------------------------
# Commitments
# ---------------------------------------------------------------------------

class CommitmentCreateRequest(BaseModel):
    partner_id: Optional[int] = None
    goal_id: Optional[int] = None
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    deadline: Optional[date] = None
    stakes: Optional[str] = None


@router.post("/commitments", status_code=201)
def create_commitment(
    req: CommitmentCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    commitment = commitments.create(db, user.id, req.model_dump())
    return record_to_dict(commitment)


@router.get("/commitments")
def list_commitments(
    status: Optional[CommitmentStatus] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = {"status": status} if status else {}
    return [record_to_dict(c) for c in commitments.list(db, user.id, **filters)]


@router.put("/commitments/{commitment_id}")
def update_commitment(
    commitment_id: int,
    req: CommitmentPatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    patch = req
    if req.status is not None:
        patch = close_out(req, req.status == "completed")
    commitments.update(db, commitment_id, user.id, patch)
    return success()


# ---------------------------------------------------------------------------
# Check-ins
# ---------------------------------------------------------------------------

class CheckInCreateRequest(BaseModel):
    partner_id: Optional[int] = None
    commitment_id: Optional[int] = None
    scheduled_date: date
    notes: Optional[str] = None


class CheckInCompleteRequest(BaseModel):
    notes: Optional[str] = None


@router.post("/check-ins", status_code=201)
def create_check_in(
    req: CheckInCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    check_in = check_ins.create(db, user.id, req.model_dump())
    return record_to_dict(check_in)


@router.get("/check-ins")
def list_check_ins(
    upcoming_only: bool = False,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = {"completed": False} if upcoming_only else {}
    return [record_to_dict(c) for c in check_ins.list(db, user.id, **filters)]


@router.post("/check-ins/{check_in_id}/complete")
def complete_check_in(
    check_in_id: int,
    req: Optional[CheckInCompleteRequest] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    patch = CheckInPatch(completed=True, completed_at=utcnow())
    if req is not None and req.notes is not None:
        patch = patch.with_changes(notes=req.notes)
    check_ins.update(db, check_in_id, user.id, patch)
    return success()
