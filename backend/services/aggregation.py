"""Derived views over fetched records.

Everything here is a pure function of its inputs and is recomputed on every
call. Records may be ORM rows or any object exposing the same attribute names.
"""
from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Any

from utils.datetime_utils import as_date, today_utc

ENERGY_LEVELS = ("red", "yellow", "green")
DOLLAR_TIERS = (1, 2, 3, 4)
GOAL_STATUSES = ("active", "completed", "archived")
SUMMARY_WINDOWS = {"weekly": 7, "biweekly": 14, "monthly": 30}
DEFAULT_SLOT_MINUTES = 15
MINUTES_PER_DAY = 24 * 60


def parse_clock(value: str) -> int:
    """Minutes since midnight for an ``HH:MM`` string."""
    hours, minutes = str(value).split(":", 1)
    return int(hours) * 60 + int(minutes)


def format_clock(total_minutes: int) -> str:
    total_minutes %= MINUTES_PER_DAY
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def entry_duration_minutes(start_time: str, end_time: str) -> int:
    # Same-day only: an entry that crosses midnight yields a negative value.
    return parse_clock(end_time) - parse_clock(start_time)


def progress_percentage(current: float | None, target: float | None) -> int:
    """Percent of target reached, rounded half up. Zero when target is 0."""
    if not target:
        return 0
    return math.floor(float(current or 0) / float(target) * 100 + 0.5)


def count_by(records: Iterable[Any], attr: str, keys: Iterable[Any]) -> dict[Any, int]:
    counts = {key: 0 for key in keys}
    for record in records:
        value = getattr(record, attr)
        counts[value] = counts.get(value, 0) + 1
    return counts


def energy_counts(records: Iterable[Any], attr: str = "energy_level") -> dict[str, int]:
    return count_by(records, attr, ENERGY_LEVELS)


def entries_in_window(entries: Iterable[Any], days: int, now: date | datetime | None = None) -> list[Any]:
    end = as_date(now) if now is not None else today_utc()
    start = end - timedelta(days=days)
    return [e for e in entries if start <= as_date(e.activity_date) <= end]


def time_window_summary(entries: Iterable[Any], days: int, now: date | datetime | None = None) -> dict[str, Any]:
    end = as_date(now) if now is not None else today_utc()
    window = entries_in_window(entries, days, end)
    total_minutes = sum(entry_duration_minutes(e.start_time, e.end_time) for e in window)
    return {
        "window_days": days,
        "start_date": (end - timedelta(days=days)).isoformat(),
        "end_date": end.isoformat(),
        "total_entries": len(window),
        "total_minutes": total_minutes,
        "total_hours": round(total_minutes / 60, 1),
        "energy_counts": energy_counts(window),
        "dollar_totals": count_by(window, "dollar_value", DOLLAR_TIERS),
    }


def summaries_for_windows(entries: Iterable[Any], now: date | datetime | None = None) -> dict[str, dict[str, Any]]:
    entries = list(entries)
    return {name: time_window_summary(entries, days, now) for name, days in SUMMARY_WINDOWS.items()}


def entries_for_date(entries: Iterable[Any], day: date) -> list[Any]:
    return sorted(
        (e for e in entries if as_date(e.activity_date) == day),
        key=lambda e: e.start_time,
    )


def suggest_next_slot(entries: Iterable[Any], day: date, slot_minutes: int = DEFAULT_SLOT_MINUTES) -> dict[str, str | None]:
    """Next entry starts where the day's last entry ended and runs one slot."""
    day_entries = entries_for_date(entries, day)
    if not day_entries:
        return {"start_time": None, "end_time": None}
    start = day_entries[-1].end_time
    return {"start_time": start, "end_time": format_clock(parse_clock(start) + slot_minutes)}


def activity_suggestions(entries: Iterable[Any], query: str = "") -> list[str]:
    # Rebuilt from the full history each call; fine at per-user volumes.
    unique = sorted({e.description for e in entries if e.description})
    if not query:
        return unique
    needle = query.lower()
    return [text for text in unique if needle in text.lower()]


def group_by_metric_name(metrics: Iterable[Any]) -> dict[str, list[Any]]:
    groups: dict[str, list[Any]] = {}
    for metric in metrics:
        groups.setdefault(metric.metric_name, []).append(metric)
    return groups


def latest_per_name(metrics: Iterable[Any]) -> dict[str, Any]:
    latest: dict[str, Any] = {}
    for name, series in group_by_metric_name(metrics).items():
        latest[name] = max(series, key=lambda m: as_date(m.recorded_date))
    return latest


def _as_number(value) -> float | None:
    return None if value is None else float(value)


def chart_series(metrics: Iterable[Any], metric_name: str) -> list[dict[str, Any]]:
    series = sorted(
        (m for m in metrics if m.metric_name == metric_name),
        key=lambda m: as_date(m.recorded_date),
    )
    points = []
    for metric in series:
        day = as_date(metric.recorded_date)
        points.append({
            "date": day.isoformat(),
            "label": f"{day.strftime('%b')} {day.day}",
            "current": _as_number(metric.current_value),
            "target": _as_number(metric.target_value),
        })
    return points


def metric_overview(metrics: Iterable[Any]) -> list[dict[str, Any]]:
    """Latest reading per metric name with its progress and chart points."""
    metrics = list(metrics)
    overview = []
    for name, latest in latest_per_name(metrics).items():
        overview.append({
            "metric_name": name,
            "latest_id": latest.id,
            "recorded_date": as_date(latest.recorded_date).isoformat(),
            "current_value": _as_number(latest.current_value),
            "target_value": _as_number(latest.target_value),
            "progress_pct": progress_percentage(latest.current_value, latest.target_value),
            "status": getattr(latest, "status", None),
            "category": getattr(latest, "category", None),
            "series": chart_series(metrics, name),
        })
    return overview


def pomodoro_day_counts(sessions: Iterable[Any]) -> dict[str, int]:
    sessions = list(sessions)
    return {"total": len(sessions), "completed": sum(1 for s in sessions if s.completed)}


def pomodoro_completion_rate(sessions: Iterable[Any]) -> int:
    counts = pomodoro_day_counts(sessions)
    if counts["total"] == 0:
        return 0
    return progress_percentage(counts["completed"], counts["total"])


def goal_status_rollup(goals: Iterable[Any]) -> dict[str, int]:
    goals = list(goals)
    rollup = count_by(goals, "status", GOAL_STATUSES)
    rollup["total"] = len(goals)
    rollup["completion_pct"] = progress_percentage(rollup.get("completed", 0), len(goals))
    return rollup
