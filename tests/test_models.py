"""Tests for dayplanner/models.py — dataclass serialization round-trips."""

from datetime import date

import pytest

from dayplanner.models import (
    DayPlan,
    HourlySlot,
    PlanLayout,
    Profile,
    Settings,
    TaskItem,
)


def test_new_plan_uses_layout():
    plan = DayPlan.new(date(2026, 2, 11))
    assert len(plan.tasks) == 8
    assert all(t.text == "" and not t.is_completed for t in plan.tasks)
    assert [p.number for p in plan.priorities] == [1, 2, 3, 4, 5]
    assert [s.hour for s in plan.hourly_slots] == list(range(7, 24))
    assert plan.completed_habits == set()
    assert plan.selected_mood is None
    assert plan.drawing_data is None


def test_new_plan_custom_layout():
    plan = DayPlan.new(date(2026, 2, 11), PlanLayout(tasks=2, priorities=3, first_hour=9, last_hour=17))
    assert len(plan.tasks) == 2
    assert len(plan.priorities) == 3
    assert plan.hourly_slots[0].hour == 9
    assert plan.hourly_slots[-1].hour == 17


def test_task_ids_are_unique():
    ids = {TaskItem().id for _ in range(50)}
    assert len(ids) == 50


def test_day_plan_roundtrip():
    plan = DayPlan.new(date(2026, 2, 11))
    plan.tasks[0].text = "Buy milk"
    plan.tasks[1].text = "Ship it"
    plan.tasks[1].is_completed = True
    plan.priorities[0].text = "Launch"
    plan.hourly_slots[2].text = "Gym"
    plan.completed_habits = {"water", "reading"}
    plan.selected_mood = "great"
    plan.drawing_data = b"\x00\x01strokes"
    plan.notes = "Remember the keys"

    data = plan.to_dict()
    assert data["date"] == "2026-02-11T00:00:00"
    assert data["completedHabits"] == ["reading", "water"]
    assert data["tasks"][1]["isCompleted"] is True

    restored = DayPlan.from_dict(data)
    assert restored == plan


def test_day_plan_empty_drawing_roundtrip():
    plan = DayPlan.new(date(2026, 2, 11))
    plan.drawing_data = b""
    assert DayPlan.from_dict(plan.to_dict()).drawing_data == b""


def test_day_plan_accepts_bare_date_and_missing_keys():
    plan = DayPlan.from_dict({"date": "2026-02-11", "tasks": [{"text": "Old client task"}]})
    assert plan.date == date(2026, 2, 11)
    assert plan.tasks[0].text == "Old client task"
    assert plan.tasks[0].id  # fresh id for records without one
    assert len(plan.priorities) == 5
    assert plan.notes == ""


def test_day_plan_day_override():
    plan = DayPlan.from_dict({"date": "2020-01-01T00:00:00"}, day=date(2026, 2, 11))
    assert plan.date == date(2026, 2, 11)


def test_day_plan_rejects_bad_shapes():
    with pytest.raises(ValueError):
        DayPlan.from_dict({"tasks": []})
    with pytest.raises(ValueError):
        DayPlan.from_dict({"date": "2026-02-11", "tasks": "not a list"})
    with pytest.raises(ValueError):
        DayPlan.from_dict({"date": "2026-02-11", "drawingData": "***"})


@pytest.mark.parametrize("value", ["false", "true", 0, 1, []])
def test_task_completion_must_be_boolean(value):
    with pytest.raises(ValueError):
        TaskItem.from_dict({"text": "x", "isCompleted": value})


def test_task_completion_defaults_to_false():
    assert TaskItem.from_dict({"text": "x"}).is_completed is False
    assert TaskItem.from_dict({"text": "x", "isCompleted": True}).is_completed is True


def test_pending_tasks():
    plan = DayPlan.new(date(2026, 2, 11))
    plan.tasks[0].text = "Open"
    plan.tasks[1].text = "Closed"
    plan.tasks[1].is_completed = True
    plan.tasks[2].text = "   "
    assert [t.text for t in plan.pending_tasks()] == ["Open"]


def test_hourly_slot_display_time():
    assert HourlySlot(hour=7).display_time == "7 am"
    assert HourlySlot(hour=12).display_time == "12 pm"
    assert HourlySlot(hour=23).display_time == "11 pm"


def test_profile_from_dict():
    profile = Profile.from_dict({
        "timezone": "Europe/Berlin",
        "layout": {"tasks": 3, "first_hour": 6},
        "sync": {"folder_name": "Planner"},
    })
    assert profile.timezone == "Europe/Berlin"
    assert profile.layout.tasks == 3
    assert profile.layout.priorities == 5
    assert profile.layout.first_hour == 6
    assert profile.sync.folder_name == "Planner"
    assert profile.sync.timeout_seconds == 30.0


def test_layout_rejects_bad_hours():
    with pytest.raises(ValueError):
        PlanLayout.from_dict({"first_hour": 20, "last_hour": 8})


def test_settings_roundtrip():
    s = Settings(last_rollover_date="2026-02-11", last_sync_at="2026-02-11T08:00:00+00:00")
    assert s.to_dict() == {"lastRolloverDate": "2026-02-11", "lastSyncAt": "2026-02-11T08:00:00+00:00"}
    assert Settings.from_dict(s.to_dict()) == s
