"""Shared test fixtures for DayPlanner tests."""

from __future__ import annotations

import json
import os
from datetime import date
from pathlib import Path

import pytest
import yaml

from dayplanner.models import DayPlan, TaskItem
from dayplanner.rollover import RolloverEngine
from dayplanner.settings import SettingsStore
from dayplanner.store import PlanStore


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with standard structure."""
    root = tmp_path / "workspace"
    (root / "plans").mkdir(parents=True)
    (root / "logs").mkdir(parents=True)

    # Profile
    profile = {
        "timezone": "UTC",
        "layout": {"tasks": 8, "priorities": 5, "first_hour": 7, "last_hour": 23},
        "sync": {"folder_name": "DailyPlannerSync", "token_path": "token.json", "timeout_seconds": 5},
    }
    (root / "profile.yaml").write_text(
        yaml.dump(profile, default_flow_style=False), encoding="utf-8"
    )

    # Settings
    settings = {"lastRolloverDate": "2026-02-10", "lastSyncAt": None}
    (root / "settings.json").write_text(
        json.dumps(settings, indent=2), encoding="utf-8"
    )

    # A stored plan from the day before the watermark
    plan = {
        "date": "2026-02-09T00:00:00",
        "tasks": [
            {"id": "t-1", "text": "Write report", "isCompleted": False},
            {"id": "t-2", "text": "Call plumber", "isCompleted": True},
            {"id": "t-3", "text": "", "isCompleted": False},
        ],
        "priorities": [{"id": "p-1", "number": 1, "text": "Report"}],
        "hourlySlots": [{"id": "h-9", "hour": 9, "text": "Standup"}],
        "completedHabits": ["water"],
        "selectedMood": "good",
        "drawingData": None,
        "notes": "Slow start.",
    }
    (root / "plans" / "2026-02-09.json").write_text(
        json.dumps(plan, indent=2), encoding="utf-8"
    )

    # Set env var
    os.environ["DAYPLANNER_ROOT"] = str(root)
    yield root
    # Cleanup
    if "DAYPLANNER_ROOT" in os.environ:
        del os.environ["DAYPLANNER_ROOT"]


@pytest.fixture
def store(workspace: Path) -> PlanStore:
    return PlanStore(workspace / "plans")


@pytest.fixture
def settings(workspace: Path) -> SettingsStore:
    return SettingsStore(workspace / "settings.json")


@pytest.fixture
def engine(store: PlanStore, settings: SettingsStore) -> RolloverEngine:
    return RolloverEngine(store, settings)


def make_plan(day: date, *tasks: tuple[str, bool]) -> DayPlan:
    """Plan holding exactly the given (text, done) tasks."""
    plan = DayPlan.new(day)
    plan.tasks = [TaskItem(text=text, is_completed=done) for text, done in tasks]
    return plan


def texts(plan: DayPlan) -> list[str]:
    """Non-blank task texts in order."""
    return [t.text for t in plan.tasks if t.text.strip()]
