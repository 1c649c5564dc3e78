"""PlannerSession: the selected date, its in-memory plan, and every mutation.

Each mutation changes the in-memory plan and saves it before returning, so
the in-memory plan and the stored record only differ inside a single call.
"""

from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Any, Callable, Iterable
from zoneinfo import ZoneInfo

from dayplanner import datekey
from dayplanner.calendar_feed import events_on
from dayplanner.models import HABITS, MOODS, CalendarEvent, DayPlan, PlanLayout, TaskItem
from dayplanner.rollover import RolloverEngine
from dayplanner.store import PlanStore

logger = logging.getLogger("dayplanner.session")

Notifier = Callable[[date, list[TaskItem]], None]


class PlannerSession:
    def __init__(
        self,
        store: PlanStore,
        engine: RolloverEngine,
        layout: PlanLayout | None = None,
        tz: tzinfo | None = None,
        notifier: Notifier | None = None,
        clock: Callable[[tzinfo], date] = datekey.today,
    ) -> None:
        self.store = store
        self.engine = engine
        self.layout = layout or PlanLayout()
        self.tz = tz or ZoneInfo("UTC")
        self.notifier = notifier
        self._clock = clock
        self._events: list[CalendarEvent] = []
        self.current_date = self.today()
        self.plan = self.store.load_or_default(self.current_date, self.layout)

    def today(self) -> date:
        return self._clock(self.tz)

    # ── Lifecycle ─────────────────────────────────────────────

    def on_foreground(self) -> dict[str, Any]:
        """Launch/foreground: save, roll over once per day, show today.

        Rollover problems are logged, never raised; the worst case is that
        today's plan shows without carried-forward tasks.
        """
        self.save()
        today = self.today()
        try:
            result = self.engine.rollover_if_needed(today)
        except OSError as exc:
            logger.exception("Rollover for %s failed", today.isoformat())
            result = {"ok": False, "day": today.isoformat(), "error": str(exc)}
        self._load(today)
        self._notify()
        return result

    def save(self) -> None:
        self.store.save(self.current_date, self.plan)

    def reload(self) -> None:
        """Re-read the selected date from the store, discarding in-memory state."""
        self._load(self.current_date)

    def _load(self, day: date) -> None:
        self.current_date = day
        self.plan = self.store.load_or_default(day, self.layout)

    # ── Navigation ────────────────────────────────────────────

    def select_date(self, day: date) -> None:
        self.save()
        self._load(day)

    def select_month(self, month: int) -> None:
        self.select_date(datekey.with_month(self.current_date, month))

    def delete_plan(self, day: date) -> None:
        self.store.delete(day)
        if day == self.current_date:
            self.plan = DayPlan.new(day, self.layout)

    # ── Tasks ─────────────────────────────────────────────────

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.plan.tasks)

    def toggle_task(self, index: int) -> bool:
        if not self._valid_index(index):
            return False
        task = self.plan.tasks[index]
        task.is_completed = not task.is_completed
        self._tasks_changed()
        return True

    def add_task(self, text: str = "") -> TaskItem:
        task = TaskItem(text=text)
        self.plan.tasks.append(task)
        self._tasks_changed()
        return task

    def update_task_text(self, index: int, text: str) -> bool:
        if not self._valid_index(index):
            return False
        self.plan.tasks[index].text = text
        self._tasks_changed()
        return True

    def delete_task(self, index: int) -> bool:
        if not self._valid_index(index):
            return False
        del self.plan.tasks[index]
        self._tasks_changed()
        return True

    def pending_tasks(self) -> list[TaskItem]:
        return self.plan.pending_tasks()

    # ── Priorities / schedule ─────────────────────────────────

    def update_priority(self, number: int, text: str) -> bool:
        for item in self.plan.priorities:
            if item.number == number:
                item.text = text
                self.save()
                return True
        return False

    def update_slot(self, hour: int, text: str) -> bool:
        for slot in self.plan.hourly_slots:
            if slot.hour == hour:
                slot.text = text
                self.save()
                return True
        return False

    # ── Habits / mood / notes / drawing ───────────────────────

    def toggle_habit(self, habit: str) -> bool:
        """Flip *habit* for the day; returns the new membership."""
        if habit not in HABITS:
            raise ValueError(f"Unknown habit: {habit}")
        habits = self.plan.completed_habits
        if habit in habits:
            habits.discard(habit)
        else:
            habits.add(habit)
        self.save()
        return habit in habits

    def select_mood(self, mood: str | None) -> None:
        if mood is not None and mood not in MOODS:
            raise ValueError(f"Unknown mood: {mood}")
        self.plan.selected_mood = mood
        self.save()

    def update_notes(self, notes: str) -> None:
        self.plan.notes = notes
        self.save()

    def update_drawing(self, data: bytes | None) -> None:
        self.plan.drawing_data = data
        self.save()

    # ── Calendar feed ─────────────────────────────────────────

    def set_calendar_events(self, events: Iterable[CalendarEvent]) -> None:
        """Hold externally fetched events for display. Not persisted."""
        self._events = list(events)

    def calendar_events(self) -> list[CalendarEvent]:
        return events_on(self._events, self.current_date, self.tz)

    # ── Internals ─────────────────────────────────────────────

    def _tasks_changed(self) -> None:
        self.save()
        self._notify()

    def _notify(self) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier(self.current_date, self.pending_tasks())
        except Exception:
            logger.exception("Task notifier failed")
