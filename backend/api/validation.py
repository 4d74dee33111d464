import json
from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, Field

from utils.datetime_utils import as_utc

EnergyLevel = Literal["red", "yellow", "green"]
GoalStatus = Literal["active", "completed", "archived"]
ProjectStatus = Literal["not_started", "in_progress", "completed"]
CommitmentStatus = Literal["active", "completed", "failed"]
ReviewTime = Literal["morning", "afternoon", "evening"]
InsightType = Literal["time_audit", "goal_progress", "productivity_patterns"]

# 24h wall-clock time, no timezone.
ClockTime = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]


def _two_places(value: float) -> float:
    return round(value, 2)


# Fits NUMERIC(10, 2).
DecimalValue = Annotated[float, Field(gt=-1e8, lt=1e8), AfterValidator(_two_places)]


def _json_list(value: str) -> str:
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError as e:
        raise ValueError("must be a JSON-encoded array") from e
    if not isinstance(decoded, list):
        raise ValueError("must be a JSON-encoded array")
    return value


JsonList = Annotated[str, AfterValidator(_json_list)]

# Stored columns drop the offset, so instants are converted to UTC first.
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]


def success() -> dict:
    return {"success": True}
