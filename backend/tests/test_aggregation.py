from __future__ import annotations

import sys
from datetime import date, timedelta
from pathlib import Path
from types import SimpleNamespace

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from services import aggregation  # noqa: E402

TODAY = date(2026, 3, 15)


def _entry(day: date, start: str, end: str, energy: str = "green", dollar: int = 2, description: str = "Work"):
    return SimpleNamespace(
        activity_date=day,
        start_time=start,
        end_time=end,
        energy_level=energy,
        dollar_value=dollar,
        description=description,
    )


def _metric(metric_id: int, name: str, day: date, current: float, target: float | None = 100.0):
    return SimpleNamespace(
        id=metric_id,
        metric_name=name,
        recorded_date=day,
        current_value=current,
        target_value=target,
        status="green",
        category="sales",
    )


# ─── Progress percentage ───


def test_progress_percentage_boundaries():
    assert aggregation.progress_percentage(5, 0) == 0
    assert aggregation.progress_percentage(0, 0) == 0
    assert aggregation.progress_percentage(100, 100) == 100
    assert aggregation.progress_percentage(0, 100) == 0


def test_progress_percentage_rounds_half_up_and_passes_negatives_through():
    assert aggregation.progress_percentage(1, 8) == 13
    assert aggregation.progress_percentage(2, 3) == 67
    assert aggregation.progress_percentage(1, 3) == 33
    assert aggregation.progress_percentage(-50, 100) == -50


# ─── Time audit ───


def test_entry_duration_within_one_day():
    assert aggregation.entry_duration_minutes("09:00", "09:30") == 30
    assert aggregation.entry_duration_minutes("08:15", "12:00") == 225


def test_entry_duration_across_midnight_is_negative():
    assert aggregation.entry_duration_minutes("23:30", "00:15") == -1395


def test_time_window_summary_includes_both_window_edges():
    entries = [
        _entry(TODAY, "09:00", "09:30", energy="green", dollar=3),
        _entry(TODAY - timedelta(days=7), "10:00", "11:00", energy="red", dollar=1),
        _entry(TODAY - timedelta(days=8), "10:00", "11:00", energy="yellow", dollar=4),
        _entry(TODAY + timedelta(days=1), "10:00", "11:00", energy="yellow", dollar=4),
    ]

    summary = aggregation.time_window_summary(entries, 7, TODAY)

    assert summary["total_entries"] == 2
    assert summary["total_minutes"] == 90
    assert summary["total_hours"] == 1.5
    assert summary["energy_counts"] == {"red": 1, "yellow": 0, "green": 1}
    assert summary["dollar_totals"] == {1: 1, 2: 0, 3: 1, 4: 0}
    assert summary["start_date"] == "2026-03-08"
    assert summary["end_date"] == "2026-03-15"


def test_window_counts_always_sum_to_total_entries():
    energies = ["red", "yellow", "green"]
    entries = [
        _entry(TODAY - timedelta(days=i), "09:00", "10:00", energy=energies[i % 3], dollar=(i % 4) + 1)
        for i in range(40)
    ]

    for window in aggregation.summaries_for_windows(entries, TODAY).values():
        assert sum(window["energy_counts"].values()) == window["total_entries"]
        assert sum(window["dollar_totals"].values()) == window["total_entries"]


def test_summaries_for_windows_uses_weekly_biweekly_monthly():
    entries = [_entry(TODAY - timedelta(days=d), "09:00", "10:00") for d in (0, 10, 20, 40)]

    summaries = aggregation.summaries_for_windows(entries, TODAY)

    assert summaries["weekly"]["total_entries"] == 1
    assert summaries["biweekly"]["total_entries"] == 2
    assert summaries["monthly"]["total_entries"] == 3


def test_activity_suggestions_sorted_unique_and_case_insensitive():
    entries = [
        _entry(TODAY, "09:00", "10:00", description="Email"),
        _entry(TODAY, "10:00", "11:00", description="email triage"),
        _entry(TODAY, "11:00", "12:00", description="Deep work"),
        _entry(TODAY, "12:00", "13:00", description="Email"),
    ]

    assert aggregation.activity_suggestions(entries) == ["Deep work", "Email", "email triage"]
    assert aggregation.activity_suggestions(entries, "EMAIL") == ["Email", "email triage"]
    assert aggregation.activity_suggestions(entries, "gym") == []


def test_next_slot_starts_at_last_end_time_of_the_day():
    entries = [
        _entry(TODAY, "11:00", "11:30"),
        _entry(TODAY, "09:00", "10:00"),
        _entry(TODAY - timedelta(days=1), "15:00", "16:00"),
    ]

    assert aggregation.suggest_next_slot(entries, TODAY) == {"start_time": "11:30", "end_time": "11:45"}
    assert aggregation.suggest_next_slot([], TODAY) == {"start_time": None, "end_time": None}


def test_next_slot_end_wraps_past_midnight():
    entries = [_entry(TODAY, "23:00", "23:50")]

    assert aggregation.suggest_next_slot(entries, TODAY)["end_time"] == "00:05"


def test_entries_for_date_sorted_by_start_time():
    entries = [
        _entry(TODAY, "13:00", "14:00"),
        _entry(TODAY, "08:00", "09:00"),
        _entry(TODAY - timedelta(days=1), "07:00", "08:00"),
    ]

    day = aggregation.entries_for_date(entries, TODAY)

    assert [e.start_time for e in day] == ["08:00", "13:00"]


# ─── Metrics ───


def test_grouping_and_latest_per_name():
    metrics = [
        _metric(1, "Revenue", date(2026, 2, 10), 80),
        _metric(2, "Revenue", date(2026, 1, 5), 50),
        _metric(3, "Leads", date(2026, 1, 20), 12),
    ]

    groups = aggregation.group_by_metric_name(metrics)
    latest = aggregation.latest_per_name(metrics)

    assert sorted(groups) == ["Leads", "Revenue"]
    assert len(groups["Revenue"]) == 2
    assert latest["Revenue"].id == 1
    assert latest["Leads"].id == 3


def test_chart_series_sorted_ascending_with_labels():
    metrics = [
        _metric(1, "Revenue", date(2026, 2, 10), 80),
        _metric(2, "Revenue", date(2026, 1, 5), 50, target=None),
        _metric(3, "Leads", date(2026, 1, 20), 12),
    ]

    series = aggregation.chart_series(metrics, "Revenue")

    assert [p["date"] for p in series] == ["2026-01-05", "2026-02-10"]
    assert series[0] == {"date": "2026-01-05", "label": "Jan 5", "current": 50.0, "target": None}
    assert series[1]["label"] == "Feb 10"


def test_metric_overview_reports_progress_of_latest_reading():
    metrics = [
        _metric(1, "Revenue", date(2026, 1, 5), 50),
        _metric(2, "Revenue", date(2026, 2, 10), 75),
    ]

    (overview,) = aggregation.metric_overview(metrics)

    assert overview["latest_id"] == 2
    assert overview["progress_pct"] == 75
    assert len(overview["series"]) == 2


# ─── Pomodoro and goals ───


def test_pomodoro_counts_and_completion_rate():
    sessions = [SimpleNamespace(completed=True), SimpleNamespace(completed=True), SimpleNamespace(completed=False)]

    assert aggregation.pomodoro_day_counts(sessions) == {"total": 3, "completed": 2}
    assert aggregation.pomodoro_completion_rate(sessions) == 67
    assert aggregation.pomodoro_completion_rate([]) == 0


def test_goal_status_rollup():
    goals = [SimpleNamespace(status=s) for s in ("active", "completed", "completed", "archived")]

    rollup = aggregation.goal_status_rollup(goals)

    assert rollup == {"active": 1, "completed": 2, "archived": 1, "total": 4, "completion_pct": 50}
