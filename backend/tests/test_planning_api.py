"""Pomodoro, daily plans, goal reviews, relationships and accountability."""
from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import settings  # noqa: E402
from utils.datetime_utils import today_utc  # noqa: E402


# ─── Pomodoro ───


def test_pomodoro_start_uses_default_duration(client):
    resp = client.post("/api/pomodoro/start", json={"task_description": "Write outline"})

    assert resp.status_code == 201
    session = resp.json()
    assert session["duration"] == settings.POMODORO_DEFAULT_SECONDS
    assert session["completed"] is False
    assert session["started_at"] is not None


def test_pomodoro_duration_must_be_positive(client):
    assert client.post("/api/pomodoro/start", json={"duration": 0}).status_code == 422
    assert client.post("/api/pomodoro/start", json={"duration": -60}).status_code == 422
    assert client.post("/api/pomodoro/start", json={"duration": 600}).json()["duration"] == 600


def test_pomodoro_complete_and_today_counts(client):
    first = client.post("/api/pomodoro/start", json={}).json()
    client.post("/api/pomodoro/start", json={})

    assert client.post(f"/api/pomodoro/{first['id']}/complete").json() == {"success": True}

    today = client.get("/api/pomodoro/today").json()
    assert today["date"] == today_utc().isoformat()
    assert today["total"] == 2
    assert today["completed"] == 1
    assert today["completion_rate"] == 50

    sessions = {s["id"]: s for s in client.get("/api/pomodoro").json()}
    assert sessions[first["id"]]["completed"] is True
    assert sessions[first["id"]]["completed_at"] is not None


def test_pomodoro_list_filters_by_start_time(client):
    client.post("/api/pomodoro/start", json={"started_at": "2026-01-01T09:00:00"})
    client.post("/api/pomodoro/start", json={"started_at": "2026-01-02T09:00:00"})
    client.post("/api/pomodoro/start", json={"started_at": "2026-01-03T09:00:00"})

    resp = client.get("/api/pomodoro", params={"start": "2026-01-02T00:00:00", "end": "2026-01-03T09:00:00"})

    assert [s["started_at"] for s in resp.json()] == ["2026-01-03T09:00:00", "2026-01-02T09:00:00"]


def test_pomodoro_start_with_offset_counts_on_its_utc_day(client):
    session = client.post("/api/pomodoro/start", json={"started_at": "2026-10-18T21:00:00-05:00"}).json()

    assert session["started_at"] == "2026-10-19T02:00:00"
    assert client.get("/api/pomodoro/today", params={"date": "2026-10-19"}).json()["total"] == 1
    assert client.get("/api/pomodoro/today", params={"date": "2026-10-18"}).json()["total"] == 0

    window = client.get("/api/pomodoro", params={
        "start": "2026-10-18T20:30:00-05:00",
        "end": "2026-10-18T21:30:00-05:00",
    }).json()
    assert [s["id"] for s in window] == [session["id"]]


def test_pomodoro_today_is_zero_for_an_empty_day(client):
    today = client.get("/api/pomodoro/today", params={"date": "2020-01-01"}).json()

    assert today == {"date": "2020-01-01", "total": 0, "completed": 0, "completion_rate": 0}


# ─── Daily plans ───


def test_daily_plan_lookup_by_date(client):
    tasks = json.dumps(["Outline chapter", "Call editor"])
    created = client.post("/api/daily-plans", json={
        "plan_date": "2026-05-04",
        "first_90_min_task": "Write 1000 words",
        "key_tasks": tasks,
    })
    assert created.status_code == 201

    plan = client.get("/api/daily-plans/by-date", params={"plan_date": "2026-05-04"}).json()
    assert plan["id"] == created.json()["id"]
    assert json.loads(plan["key_tasks"]) == ["Outline chapter", "Call editor"]
    assert plan["completed"] is False

    assert client.get("/api/daily-plans/by-date", params={"plan_date": "2026-05-05"}).json() is None


def test_daily_plan_key_tasks_must_be_json_array(client):
    for bad in ("not json", json.dumps({"a": 1}), json.dumps("task")):
        resp = client.post("/api/daily-plans", json={"plan_date": "2026-05-04", "key_tasks": bad})
        assert resp.status_code == 422, bad


def test_daily_plan_update(client):
    plan = client.post("/api/daily-plans", json={"plan_date": "2026-05-04"}).json()
    assert plan["key_tasks"] == "[]"

    client.put(f"/api/daily-plans/{plan['id']}", json={"completed": True, "key_tasks": json.dumps(["Ship"])})

    fresh = client.get("/api/daily-plans/by-date", params={"plan_date": "2026-05-04"}).json()
    assert fresh["completed"] is True
    assert fresh["key_tasks"] == '["Ship"]'


def test_second_plan_for_same_day_is_not_rejected(client):
    first = client.post("/api/daily-plans", json={"plan_date": "2026-05-04", "notes": "first"}).json()
    second = client.post("/api/daily-plans", json={"plan_date": "2026-05-04", "notes": "second"})

    assert second.status_code == 201
    assert client.get("/api/daily-plans/by-date", params={"plan_date": "2026-05-04"}).json()["id"] == first["id"]


# ─── Goal reviews ───


def test_goal_review_create_list_complete(client):
    assert client.post("/api/goal-reviews", json={"review_time": "night"}).status_code == 422

    review = client.post("/api/goal-reviews", json={"review_date": "2026-05-04", "review_time": "morning"}).json()
    client.post("/api/goal-reviews", json={"review_date": "2026-05-05", "review_time": "evening"})

    listed = client.get("/api/goal-reviews", params={"review_date": "2026-05-04"}).json()
    assert [r["id"] for r in listed] == [review["id"]]

    client.post(f"/api/goal-reviews/{review['id']}/complete")
    (done,) = client.get("/api/goal-reviews", params={"review_date": "2026-05-04"}).json()
    assert done["completed"] is True
    assert done["completed_at"] is not None


# ─── Relationships ───


def test_relationship_crud_and_summary(client):
    assert client.post("/api/relationships", json={"contact_name": "Sam", "energy_impact": "purple"}).status_code == 422

    sam = client.post("/api/relationships", json={"contact_name": "Sam", "energy_impact": "green"}).json()
    assert sam["boundary_set"] is False
    client.post("/api/relationships", json={"contact_name": "Alex", "energy_impact": "red", "last_interaction": "2026-04-01"})

    alex = next(r for r in client.get("/api/relationships").json() if r["contact_name"] == "Alex")
    client.put(f"/api/relationships/{alex['id']}", json={"boundary_set": True})

    summary = client.get("/api/relationships/summary").json()
    assert summary == {"total": 2, "energy_counts": {"red": 1, "yellow": 0, "green": 1}, "boundaries_set": 1}

    client.delete(f"/api/relationships/{sam['id']}")
    assert [r["contact_name"] for r in client.get("/api/relationships").json()] == ["Alex"]


# ─── Accountability ───


def test_partner_create_update_and_active_filter(client):
    partner = client.post("/api/accountability/partners", json={"partner_name": "Jordan"}).json()
    assert partner["active"] is True

    client.put(f"/api/accountability/partners/{partner['id']}", json={"active": False})

    assert client.get("/api/accountability/partners", params={"active_only": True}).json() == []
    assert len(client.get("/api/accountability/partners").json()) == 1


def test_commitment_lifecycle(client):
    partner = client.post("/api/accountability/partners", json={"partner_name": "Jordan"}).json()
    commitment = client.post("/api/accountability/commitments", json={
        "partner_id": partner["id"],
        "title": "Finish draft",
        "deadline": "2026-06-01",
        "stakes": "Donate $100",
    }).json()
    assert commitment["status"] == "active"

    assert client.put(f"/api/accountability/commitments/{commitment['id']}", json={"status": "late"}).status_code == 422
    client.put(f"/api/accountability/commitments/{commitment['id']}", json={"status": "completed"})

    (listed,) = client.get("/api/accountability/commitments", params={"status": "completed"}).json()
    assert listed["completed_at"] is not None
    assert listed["deadline"] == "2026-06-01"

    client.put(f"/api/accountability/commitments/{commitment['id']}", json={"status": "active"})
    (reopened,) = client.get("/api/accountability/commitments").json()
    assert reopened["status"] == "active"
    assert reopened["completed_at"] is None


def test_check_ins_ascending_and_completion(client):
    later = client.post("/api/accountability/check-ins", json={"scheduled_date": "2026-06-10"}).json()
    earlier = client.post("/api/accountability/check-ins", json={"scheduled_date": "2026-06-01"}).json()

    listed = client.get("/api/accountability/check-ins").json()
    assert [c["id"] for c in listed] == [earlier["id"], later["id"]]

    client.post(f"/api/accountability/check-ins/{earlier['id']}/complete", json={"notes": "On track"})

    upcoming = client.get("/api/accountability/check-ins", params={"upcoming_only": True}).json()
    assert [c["id"] for c in upcoming] == [later["id"]]
    done = next(c for c in client.get("/api/accountability/check-ins").json() if c["id"] == earlier["id"])
    assert done["completed"] is True
    assert done["notes"] == "On track"
