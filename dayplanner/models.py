"""Typed dataclasses for the DayPlanner data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import base64
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any


HABITS = (
    "water",
    "exercise",
    "reading",
    "meditation",
    "vitamins",
    "sleep",
    "healthy",
    "journal",
)

MOODS = ("great", "good", "okay", "bad", "terrible")


def new_id() -> str:
    return str(uuid.uuid4())


def _as_list(d: dict[str, Any], key: str) -> list[Any] | None:
    """Return d[key] as a list, None when absent; reject other shapes."""
    value = d.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list, got {type(value).__name__}")
    return value


def _as_dict(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


def encode_record_date(day: date) -> str:
    """ISO-8601 timestamp at local midnight, e.g. '2026-10-19T00:00:00'."""
    return datetime(day.year, day.month, day.day).isoformat()


def decode_record_date(value: str) -> date:
    """Accept a full ISO-8601 timestamp or a bare YYYY-MM-DD."""
    value = value.strip()
    if len(value) == 10:
        return date.fromisoformat(value)
    return datetime.fromisoformat(value).date()


# ── Config ────────────────────────────────────────────────────


@dataclass
class PlanLayout:
    """Fixed shape of a freshly created DayPlan."""

    tasks: int = 8
    priorities: int = 5
    first_hour: int = 7
    last_hour: int = 23

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PlanLayout:
        if not d or not isinstance(d, dict):
            return cls()
        default = cls()
        layout = cls(
            tasks=max(0, int(d.get("tasks", default.tasks))),
            priorities=max(0, int(d.get("priorities", default.priorities))),
            first_hour=int(d.get("first_hour", default.first_hour)),
            last_hour=int(d.get("last_hour", default.last_hour)),
        )
        if not 0 <= layout.first_hour <= layout.last_hour <= 23:
            raise ValueError(
                f"Invalid hour range: {layout.first_hour}-{layout.last_hour}"
            )
        return layout

    def hours(self) -> range:
        return range(self.first_hour, self.last_hour + 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks": self.tasks,
            "priorities": self.priorities,
            "first_hour": self.first_hour,
            "last_hour": self.last_hour,
        }


@dataclass
class SyncConfig:
    folder_name: str = "DailyPlannerSync"
    token_path: str = "token.json"
    timeout_seconds: float = 30.0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SyncConfig:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            folder_name=str(d.get("folder_name", "DailyPlannerSync")),
            token_path=str(d.get("token_path", "token.json")),
            timeout_seconds=float(d.get("timeout_seconds", 30.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "folder_name": self.folder_name,
            "token_path": self.token_path,
            "timeout_seconds": self.timeout_seconds,
        }


@dataclass
class Profile:
    timezone: str = "UTC"
    layout: PlanLayout = field(default_factory=PlanLayout)
    sync: SyncConfig = field(default_factory=SyncConfig)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Profile:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            timezone=str(d.get("timezone", "UTC")),
            layout=PlanLayout.from_dict(d.get("layout") or {}),
            sync=SyncConfig.from_dict(d.get("sync") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "layout": self.layout.to_dict(),
            "sync": self.sync.to_dict(),
        }


@dataclass
class Settings:
    """Small persisted values that are not part of any DayPlan."""

    last_rollover_date: str | None = None
    last_sync_at: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            last_rollover_date=d.get("lastRolloverDate"),
            last_sync_at=d.get("lastSyncAt"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastRolloverDate": self.last_rollover_date,
            "lastSyncAt": self.last_sync_at,
        }


# ── Plan items ────────────────────────────────────────────────


@dataclass
class TaskItem:
    id: str = field(default_factory=new_id)
    text: str = ""
    is_completed: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TaskItem:
        d = _as_dict(d, "task")
        done = d.get("isCompleted", False)
        if not isinstance(done, bool):
            raise ValueError(f"isCompleted must be a boolean, got {done!r}")
        return cls(
            id=str(d.get("id") or new_id()),
            text=str(d.get("text") or ""),
            is_completed=done,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "isCompleted": self.is_completed}


@dataclass
class PriorityItem:
    number: int
    text: str = ""
    id: str = field(default_factory=new_id)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PriorityItem:
        d = _as_dict(d, "priority")
        return cls(
            number=int(d["number"]),
            text=str(d.get("text") or ""),
            id=str(d.get("id") or new_id()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "number": self.number, "text": self.text}


@dataclass
class HourlySlot:
    hour: int
    text: str = ""
    id: str = field(default_factory=new_id)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HourlySlot:
        d = _as_dict(d, "hourly slot")
        return cls(
            hour=int(d["hour"]),
            text=str(d.get("text") or ""),
            id=str(d.get("id") or new_id()),
        )

    @property
    def display_time(self) -> str:
        if self.hour == 0:
            return "12 am"
        if self.hour < 12:
            return f"{self.hour} am"
        if self.hour == 12:
            return "12 pm"
        return f"{self.hour - 12} pm"

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "hour": self.hour, "text": self.text}


# ── Day plan ──────────────────────────────────────────────────


@dataclass
class DayPlan:
    date: date
    tasks: list[TaskItem] = field(default_factory=list)
    priorities: list[PriorityItem] = field(default_factory=list)
    hourly_slots: list[HourlySlot] = field(default_factory=list)
    completed_habits: set[str] = field(default_factory=set)
    selected_mood: str | None = None
    drawing_data: bytes | None = None
    notes: str = ""

    @classmethod
    def new(cls, day: date, layout: PlanLayout | None = None) -> DayPlan:
        """Default-populated plan for a date that has no stored record."""
        if layout is None:
            layout = PlanLayout()
        return cls(
            date=day,
            tasks=[TaskItem() for _ in range(layout.tasks)],
            priorities=[PriorityItem(number=n) for n in range(1, layout.priorities + 1)],
            hourly_slots=[HourlySlot(hour=h) for h in layout.hours()],
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any], day: date | None = None) -> DayPlan:
        """Decode a stored record.

        *day* overrides the embedded date (the record's filename is the
        authority). Structural problems raise ValueError/TypeError/KeyError.
        """
        d = _as_dict(d, "plan")
        if day is None:
            raw_date = d.get("date")
            if not isinstance(raw_date, str):
                raise ValueError("plan record has no date")
            day = decode_record_date(raw_date)

        defaults = cls.new(day)
        tasks = _as_list(d, "tasks")
        priorities = _as_list(d, "priorities")
        slots = _as_list(d, "hourlySlots")
        habits = _as_list(d, "completedHabits") or []

        drawing = d.get("drawingData")
        mood = d.get("selectedMood")
        return cls(
            date=day,
            tasks=[TaskItem.from_dict(t) for t in tasks] if tasks is not None else defaults.tasks,
            priorities=(
                [PriorityItem.from_dict(p) for p in priorities]
                if priorities is not None else defaults.priorities
            ),
            hourly_slots=(
                [HourlySlot.from_dict(s) for s in slots]
                if slots is not None else defaults.hourly_slots
            ),
            completed_habits={str(h) for h in habits},
            selected_mood=str(mood) if mood else None,
            drawing_data=base64.b64decode(drawing, validate=True) if drawing is not None else None,
            notes=str(d.get("notes") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": encode_record_date(self.date),
            "tasks": [t.to_dict() for t in self.tasks],
            "priorities": [p.to_dict() for p in self.priorities],
            "hourlySlots": [s.to_dict() for s in self.hourly_slots],
            "completedHabits": sorted(self.completed_habits),
            "selectedMood": self.selected_mood,
            "drawingData": (
                base64.b64encode(self.drawing_data).decode("ascii")
                if self.drawing_data is not None else None
            ),
            "notes": self.notes,
        }

    def pending_tasks(self) -> list[TaskItem]:
        """Incomplete tasks that have text."""
        return [t for t in self.tasks if not t.is_completed and t.text.strip()]


# ── Calendar ──────────────────────────────────────────────────


@dataclass
class CalendarEvent:
    """Read-only event from an external calendar feed; never persisted."""

    id: str
    title: str
    start: datetime
    end: datetime
    color_hex: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "colorHex": self.color_hex,
        }
