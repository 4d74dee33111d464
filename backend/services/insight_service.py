import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from ai.providers import AIProvider, get_configured_provider
from db.models import AIInsight
from services import aggregation, record_store

logger = logging.getLogger(__name__)

INSIGHT_TYPES = ("time_audit", "goal_progress", "productivity_patterns")
RECENT_SAMPLE_LIMIT = 10

SYSTEM_PROMPT = "You are a productivity coach analyzing user data. Provide clear, actionable insights."
FALLBACK_CONTENT = "Unable to generate insights at this time."

INSIGHT_TITLES = {
    "time_audit": "Time & Energy Audit Insights",
    "goal_progress": "Goal Progress Analysis",
    "productivity_patterns": "Productivity Pattern Analysis",
}

TIME_AUDIT_PROMPT = """Analyze this time audit data and provide insights:
- Red (energy-draining) activities: {red}
- Yellow (neutral) activities: {yellow}
- Green (energizing) activities: {green}

Recent entries:
{recent}

Provide 3-5 actionable recommendations to maximize green time and minimize red time."""

GOAL_PROGRESS_PROMPT = """Analyze these goals and provide progress insights:
{goals}

Active: {active}, completed: {completed}, archived: {archived}

Provide recommendations for staying on track and achieving these goals."""

PRODUCTIVITY_PROMPT = """Analyze productivity patterns:
- Total Pomodoro sessions: {total}
- Completed sessions: {completed}
- Completion rate: {rate}%

Provide insights on productivity trends and recommendations for improvement."""


@dataclass(frozen=True)
class InsightDraft:
    insight_type: str
    title: str
    prompt: str


def gather(db: Session, user_id: int, insight_type: str) -> dict[str, Any]:
    """Fetch the caller's records for ``insight_type`` and aggregate them."""
    if insight_type == "time_audit":
        entries = record_store.time_audit_entries.list(db, user_id)
        return {
            "energy_counts": aggregation.energy_counts(entries),
            "recent": entries[:RECENT_SAMPLE_LIMIT],
        }
    if insight_type == "goal_progress":
        goals = record_store.power_goals.list(db, user_id)
        return {
            "rollup": aggregation.goal_status_rollup(goals),
            "recent": goals[:RECENT_SAMPLE_LIMIT],
        }
    if insight_type == "productivity_patterns":
        sessions = record_store.pomodoro_sessions.list(db, user_id)
        return {
            "counts": aggregation.pomodoro_day_counts(sessions),
            "completion_rate": aggregation.pomodoro_completion_rate(sessions),
        }
    raise ValueError(f"Unknown insight type: {insight_type}")


def compose(insight_type: str, data: dict[str, Any]) -> InsightDraft:
    if insight_type == "time_audit":
        counts = data["energy_counts"]
        recent = "\n".join(
            f"- {e.description} ({e.energy_level}, {'$' * int(e.dollar_value)})" for e in data["recent"]
        )
        prompt = TIME_AUDIT_PROMPT.format(
            red=counts.get("red", 0),
            yellow=counts.get("yellow", 0),
            green=counts.get("green", 0),
            recent=recent or "- (no entries yet)",
        )
    elif insight_type == "goal_progress":
        rollup = data["rollup"]
        goals = "\n".join(f"- {g.title} ({g.status})" for g in data["recent"])
        prompt = GOAL_PROGRESS_PROMPT.format(
            goals=goals or "- (no goals yet)",
            active=rollup.get("active", 0),
            completed=rollup.get("completed", 0),
            archived=rollup.get("archived", 0),
        )
    elif insight_type == "productivity_patterns":
        prompt = PRODUCTIVITY_PROMPT.format(
            total=data["counts"]["total"],
            completed=data["counts"]["completed"],
            rate=data["completion_rate"],
        )
    else:
        raise ValueError(f"Unknown insight type: {insight_type}")
    return InsightDraft(insight_type=insight_type, title=INSIGHT_TITLES[insight_type], prompt=prompt)


def extract_content(result: Any) -> str:
    content = result.get("content") if isinstance(result, dict) else None
    if isinstance(content, str) and content.strip():
        return content
    return FALLBACK_CONTENT


async def generate_insight(
    db: Session,
    user_id: int,
    insight_type: str,
    provider: AIProvider | None = None,
) -> AIInsight:
    """Gather, compose, invoke the text generator and persist the insight.

    Provider failures are not caught here; the caller sees the operation fail
    and no insight row is written.
    """
    draft = compose(insight_type, gather(db, user_id, insight_type))
    provider = provider or get_configured_provider()
    result = await provider.chat(
        messages=[{"role": "user", "content": draft.prompt}],
        system=SYSTEM_PROMPT,
    )
    content = extract_content(result)
    if content == FALLBACK_CONTENT:
        logger.warning(f"Text generation returned no usable content for {insight_type} insight")
    return record_store.ai_insights.create(
        db,
        user_id,
        {
            "insight_type": draft.insight_type,
            "title": draft.title,
            "content": content,
            "category": draft.insight_type,
        },
    )
