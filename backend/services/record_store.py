"""Owner-scoped persistence for every record kind.

Reads degrade to an empty result when the store cannot be reached so that
dashboards keep rendering. Writes raise ``StoreUnavailable`` instead, since
silently dropping a write loses user data.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from config import settings
from db.database import Base, StoreUnavailable
from db.models import (
    AccountabilityPartner, AIInsight, CheckIn, Commitment, DailyPlan,
    GoalReview, NextAction, NorthStarMetric, PomodoroSession, PowerGoal,
    Project, Relationship, ScorecardMetric, TimeAuditEntry, VoiceRecording,
)
from utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

_CONNECTION_ERRORS = (OperationalError, InterfaceError)
_SYSTEM_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})


class Patch(BaseModel):
    """Typed field changes for one record kind.

    Subclasses set ``record_kind`` to the table they apply to and declare its
    writable columns. A field belongs to the patch only when it was given
    explicitly; an explicit None clears a nullable column.
    """

    model_config = ConfigDict(extra="forbid")

    record_kind: ClassVar[str] = ""

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)

    def with_changes(self, **values: Any) -> Patch:
        """A new, re-validated patch of the same kind with ``values`` added."""
        return type(self)(**{**self.changes(), **values})

    def __bool__(self) -> bool:
        return bool(self.model_fields_set)


def record_to_dict(row: Base | None) -> dict[str, Any] | None:
    if row is None:
        return None
    payload: dict[str, Any] = {}
    for column in row.__table__.columns:
        value = getattr(row, column.key)
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = float(value)
        payload[column.key] = value
    return payload


class RecordStore(Generic[ModelT]):
    def __init__(
        self,
        model: type[ModelT],
        *,
        order_by: tuple = (),
        range_field: str | None = None,
        owner_scoped_writes: bool = True,
    ):
        self.model = model
        self.order_by = order_by or (model.id.asc(),)
        self.range_field = range_field
        self.owner_scoped_writes = owner_scoped_writes
        self._columns = {c.key for c in model.__table__.columns}

    # ------------------------------------------------------------------
    # execution helpers
    # ------------------------------------------------------------------
    def _read(self, db: Session | None, fn: Callable[[], Any], default: Any) -> Any:
        name = self.model.__tablename__
        if db is None:
            logger.warning(f"Cannot read {name}: database not available")
            return default
        attempts = 1 + max(int(settings.DB_CONNECT_RETRIES or 0), 0)
        for attempt in range(attempts):
            try:
                return fn()
            except _CONNECTION_ERRORS as e:
                db.rollback()
                if attempt + 1 < attempts:
                    logger.info(f"Retrying read of {name} after connection failure: {e}")
                    continue
                logger.warning(f"Read of {name} degraded to empty result: {e}")
        return default

    def _write(self, db: Session | None, fn: Callable[[], Any]) -> Any:
        name = self.model.__tablename__
        if db is None:
            raise StoreUnavailable(f"Cannot write {name}: database not available")
        try:
            return fn()
        except _CONNECTION_ERRORS as e:
            db.rollback()
            logger.warning(f"Write to {name} failed: {e}")
            raise StoreUnavailable(f"Cannot write {name}: database not available") from e

    def _check_fields(self, values: dict[str, Any]) -> None:
        unknown = set(values) - self._columns
        if unknown:
            raise ValueError(f"Unknown {self.model.__tablename__} fields: {sorted(unknown)}")
        reserved = set(values) & _SYSTEM_FIELDS
        if reserved:
            raise ValueError(f"System-managed fields cannot be written: {sorted(reserved)}")

    def _owned(self, db: Session, user_id: int):
        return db.query(self.model).filter(self.model.user_id == user_id)

    def _addressed(self, db: Session, record_id: int, user_id: int):
        query = db.query(self.model).filter(self.model.id == record_id)
        if self.owner_scoped_writes:
            query = query.filter(self.model.user_id == user_id)
        return query

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------
    def create(self, db: Session | None, user_id: int, values: dict[str, Any]) -> ModelT:
        self._check_fields(values)

        def _run() -> ModelT:
            row = self.model(user_id=user_id, **values)
            db.add(row)
            db.flush()
            inserted_id = row.id
            db.commit()
            # Re-read so defaults assigned by the store are reflected.
            db.expire_all()
            return db.query(self.model).filter(self.model.id == inserted_id).one()

        return self._write(db, _run)

    def list(
        self,
        db: Session | None,
        user_id: int,
        *,
        start=None,
        end=None,
        **filters: Any,
    ) -> list[ModelT]:
        def _run() -> list[ModelT]:
            query = self._owned(db, user_id)
            for key, value in filters.items():
                query = query.filter(getattr(self.model, key) == value)
            if self.range_field:
                column = getattr(self.model, self.range_field)
                if start is not None:
                    query = query.filter(column >= start)
                if end is not None:
                    query = query.filter(column <= end)
            return query.order_by(*self.order_by).all()

        return self._read(db, _run, [])

    def first(self, db: Session | None, user_id: int, **filters: Any) -> ModelT | None:
        def _run() -> ModelT | None:
            query = self._owned(db, user_id)
            for key, value in filters.items():
                query = query.filter(getattr(self.model, key) == value)
            return query.order_by(*self.order_by).first()

        return self._read(db, _run, None)

    def update(self, db: Session | None, record_id: int, user_id: int, patch: Patch) -> None:
        """Apply ``patch``. A no-op when no row matches."""
        if not isinstance(patch, Patch) or patch.record_kind != self.model.__tablename__:
            raise TypeError(f"{type(patch).__name__} cannot update {self.model.__tablename__}")
        changes = patch.changes()
        self._check_fields(changes)
        if not changes:
            return

        def _run() -> None:
            values = dict(changes)
            values["updated_at"] = utcnow()
            self._addressed(db, record_id, user_id).update(values, synchronize_session=False)
            db.commit()

        self._write(db, _run)

    def delete(self, db: Session | None, record_id: int, user_id: int) -> None:
        """Delete the row. A no-op when no row matches."""

        def _run() -> None:
            self._addressed(db, record_id, user_id).delete(synchronize_session=False)
            db.commit()

        self._write(db, _run)


time_audit_entries = RecordStore(
    TimeAuditEntry,
    order_by=(TimeAuditEntry.activity_date.desc(), TimeAuditEntry.start_time.asc()),
    range_field="activity_date",
)
power_goals = RecordStore(PowerGoal, order_by=(PowerGoal.target_month.asc(), PowerGoal.id.asc()))
projects = RecordStore(Project)
next_actions = RecordStore(NextAction)
pomodoro_sessions = RecordStore(
    PomodoroSession,
    order_by=(PomodoroSession.started_at.desc(),),
    range_field="started_at",
)
north_star_metrics = RecordStore(NorthStarMetric, order_by=(NorthStarMetric.recorded_date.desc(),))
# Known gap: scorecard update/delete are addressed by id alone, not by owner.
scorecard_metrics = RecordStore(
    ScorecardMetric,
    order_by=(ScorecardMetric.recorded_date.desc(),),
    range_field="recorded_date",
    owner_scoped_writes=False,
)
accountability_partners = RecordStore(AccountabilityPartner)
commitments = RecordStore(Commitment, order_by=(Commitment.created_at.desc(), Commitment.id.desc()))
check_ins = RecordStore(CheckIn, order_by=(CheckIn.scheduled_date.asc(), CheckIn.id.asc()))
relationships = RecordStore(Relationship)
daily_plans = RecordStore(DailyPlan)
goal_reviews = RecordStore(GoalReview)
ai_insights = RecordStore(AIInsight, order_by=(AIInsight.created_at.desc(), AIInsight.id.desc()))
voice_recordings = RecordStore(VoiceRecording, order_by=(VoiceRecording.created_at.desc(), VoiceRecording.id.desc()))
