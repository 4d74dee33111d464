from sqlalchemy import (
    Column, Integer, Text, String, Boolean, ForeignKey, Index,
    Date, DateTime, Numeric,
)
from db.database import Base
from utils.datetime_utils import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, unique=True, nullable=False)
    username_normalized = Column(Text, unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    display_name = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="user")  # user | admin
    token_version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


# Parent links (goal_id, project_id, partner_id, commitment_id) are soft
# references: no FK constraint, no cascade. Readers must tolerate dangling ids.


class TimeAuditEntry(Base):
    __tablename__ = "time_audit_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    activity_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    description = Column(Text, nullable=False)
    energy_level = Column(String(10), nullable=False)  # red | yellow | green
    dollar_value = Column(Integer, nullable=False)  # 1-4
    category = Column(String(100))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_time_audit_user_date", "user_id", "activity_date"),
    )


class PowerGoal(Base):
    __tablename__ = "power_goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    target_month = Column(Integer)  # 1-12
    target_year = Column(Integer)
    status = Column(String(20), nullable=False, default="active")  # active | completed | archived
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    goal_id = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default="not_started")  # not_started | in_progress | completed
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class NextAction(Base):
    __tablename__ = "next_actions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    project_id = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class PomodoroSession(Base):
    __tablename__ = "pomodoro_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    started_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime)
    duration = Column(Integer, nullable=False)  # seconds
    task_description = Column(Text)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_pomodoro_user_started", "user_id", "started_at"),
    )


class NorthStarMetric(Base):
    __tablename__ = "north_star_metrics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    metric_name = Column(String(255), nullable=False)
    unit = Column(String(50), nullable=False)
    target_value = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    current_value = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    recorded_date = Column(Date, nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class ScorecardMetric(Base):
    __tablename__ = "scorecard_metrics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    metric_name = Column(String(255), nullable=False)
    category = Column(String(100))
    unit = Column(String(50))
    target_value = Column(Numeric(10, 2, asdecimal=False))
    current_value = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    recorded_date = Column(Date, nullable=False)
    status = Column(String(10))  # red | yellow | green
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class AccountabilityPartner(Base):
    __tablename__ = "accountability_partners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    partner_name = Column(String(255), nullable=False)
    partner_email = Column(String(320))
    partner_phone = Column(String(50))
    relationship = Column(String(100))
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Commitment(Base):
    __tablename__ = "commitments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    partner_id = Column(Integer)
    goal_id = Column(Integer)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    deadline = Column(Date)
    stakes = Column(Text)  # consequence if not achieved
    status = Column(String(20), nullable=False, default="active")  # active | completed | failed
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class CheckIn(Base):
    __tablename__ = "check_ins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    partner_id = Column(Integer)
    commitment_id = Column(Integer)
    scheduled_date = Column(Date, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime)
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Relationship(Base):
    __tablename__ = "relationships"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    contact_name = Column(String(255), nullable=False)
    relationship = Column(String(100))
    energy_impact = Column(String(10), nullable=False)  # red | yellow | green
    notes = Column(Text)
    boundary_set = Column(Boolean, nullable=False, default=False)
    last_interaction = Column(Date)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class DailyPlan(Base):
    __tablename__ = "daily_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    # One plan per (user_id, plan_date) is a convention only; not enforced.
    plan_date = Column(Date, nullable=False)
    first_90_min_task = Column(Text)
    key_tasks = Column(Text)  # JSON array
    notes = Column(Text)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class GoalReview(Base):
    __tablename__ = "goal_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    review_date = Column(Date, nullable=False)
    review_time = Column(String(10), nullable=False)  # morning | afternoon | evening
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class AIInsight(Base):
    __tablename__ = "ai_insights"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    insight_type = Column(String(100), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(100))
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class VoiceRecording(Base):
    __tablename__ = "voice_recordings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    audio_url = Column(Text, nullable=False)
    audio_key = Column(String(500), nullable=False)
    transcription = Column(Text)
    recording_type = Column(String(50))  # task | goal | time_audit
    processed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
