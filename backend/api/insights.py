from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from api.patches import InsightPatch
from api.validation import InsightType, success
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.insight_service import generate_insight
from services.record_store import ai_insights, record_to_dict

router = APIRouter(prefix="/insights", tags=["insights"])


class InsightGenerateRequest(BaseModel):
    type: InsightType


@router.post("/generate", status_code=201)
async def generate(
    req: InsightGenerateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    insight = await generate_insight(db, user.id, req.type)
    return record_to_dict(insight)


@router.get("")
def list_insights(
    unread_only: bool = False,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = {"read": False} if unread_only else {}
    return [record_to_dict(i) for i in ai_insights.list(db, user.id, **filters)]


@router.post("/{insight_id}/read")
def mark_read(
    insight_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ai_insights.update(db, insight_id, user.id, InsightPatch(read=True))
    return success()
