"""Update bodies, one per record kind.

Each model is both the PUT payload and the patch handed to the store. Only
fields the caller sent are applied. Columns that cannot be null reject an
explicit null; nullable columns accept one and are cleared by it.
"""

from datetime import date
from typing import Optional

from pydantic import Field

from api.validation import (
    ClockTime, CommitmentStatus, DecimalValue, EnergyLevel, GoalStatus,
    JsonList, ProjectStatus, UtcDateTime,
)
from services.record_store import Patch
from utils.datetime_utils import utcnow


class TimeAuditPatch(Patch):
    record_kind = "time_audit_entries"

    activity_date: date = None
    start_time: ClockTime = None
    end_time: ClockTime = None
    description: str = Field(default=None, min_length=1)
    energy_level: EnergyLevel = None
    dollar_value: int = Field(default=None, ge=1, le=4)
    category: Optional[str] = Field(default=None, max_length=100)


class GoalPatch(Patch):
    record_kind = "power_goals"

    title: str = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    target_month: Optional[int] = Field(default=None, ge=1, le=12)
    target_year: Optional[int] = Field(default=None, ge=1970, le=9999)
    status: GoalStatus = None
    completed_at: Optional[UtcDateTime] = None


class ProjectPatch(Patch):
    record_kind = "projects"

    title: str = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: ProjectStatus = None
    completed_at: Optional[UtcDateTime] = None


class NextActionPatch(Patch):
    record_kind = "next_actions"

    description: str = Field(default=None, min_length=1)
    completed: bool = None
    completed_at: Optional[UtcDateTime] = None


class PomodoroPatch(Patch):
    record_kind = "pomodoro_sessions"

    task_description: Optional[str] = None
    completed: bool = None
    completed_at: Optional[UtcDateTime] = None


class ScorecardPatch(Patch):
    record_kind = "scorecard_metrics"

    metric_name: str = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, max_length=100)
    unit: Optional[str] = Field(default=None, max_length=50)
    target_value: Optional[DecimalValue] = None
    current_value: DecimalValue = None
    recorded_date: date = None
    status: Optional[EnergyLevel] = None
    notes: Optional[str] = None


class PartnerPatch(Patch):
    record_kind = "accountability_partners"

    partner_name: str = Field(default=None, min_length=1, max_length=255)
    partner_email: Optional[str] = Field(default=None, max_length=320)
    partner_phone: Optional[str] = Field(default=None, max_length=50)
    relationship: Optional[str] = Field(default=None, max_length=100)
    active: bool = None


class CommitmentPatch(Patch):
    record_kind = "commitments"

    title: str = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    deadline: Optional[date] = None
    stakes: Optional[str] = None
    status: CommitmentStatus = None
    completed_at: Optional[UtcDateTime] = None


class CheckInPatch(Patch):
    record_kind = "check_ins"

    completed: bool = None
    completed_at: Optional[UtcDateTime] = None
    notes: Optional[str] = None


class RelationshipPatch(Patch):
    record_kind = "relationships"

    contact_name: str = Field(default=None, min_length=1, max_length=255)
    relationship: Optional[str] = Field(default=None, max_length=100)
    energy_impact: EnergyLevel = None
    notes: Optional[str] = None
    boundary_set: bool = None
    last_interaction: Optional[date] = None


class DailyPlanPatch(Patch):
    record_kind = "daily_plans"

    first_90_min_task: Optional[str] = None
    key_tasks: Optional[JsonList] = None
    notes: Optional[str] = None
    completed: bool = None


class GoalReviewPatch(Patch):
    record_kind = "goal_reviews"

    completed: bool = None
    completed_at: Optional[UtcDateTime] = None


class InsightPatch(Patch):
    record_kind = "ai_insights"

    read: bool = None


class VoicePatch(Patch):
    record_kind = "voice_recordings"

    transcription: Optional[str] = None
    processed: bool = None


def close_out(patch: Patch, done: bool) -> Patch:
    """Keep ``completed_at`` in step with a completion change in ``patch``.

    Completing without an explicit timestamp stamps the current time;
    reopening without one clears it.
    """
    if "completed_at" in patch.model_fields_set:
        return patch
    return patch.with_changes(completed_at=utcnow() if done else None)
