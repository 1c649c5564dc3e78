#!/usr/bin/env python3
"""DayPlanner TUI — today's tasks, schedule and notes in the terminal."""

from __future__ import annotations

import sys
from datetime import timedelta

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import (
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TextArea,
)

from dayplanner import (
    HABITS,
    MOODS,
    PlannerSession,
    build_session,
    classify,
    configure_logging,
    workspace_root,
)

CSS = """
Screen {
    layout: vertical;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 1fr;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 1 0 0 0;
}

.task-row {
    height: auto;
}

.task-row Checkbox {
    width: auto;
    min-width: 4;
    padding: 0 1 0 0;
}

.task-text {
    width: 1fr;
}

.task-done .task-text {
    text-style: strike;
    opacity: 50%;
}

#notes-area {
    height: 8;
    min-height: 4;
}

#schedule-table {
    height: 1fr;
}

#habits-line {
    height: auto;
    color: $text-muted;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class TaskRow(Horizontal):
    """One task: completion checkbox + editable text."""

    def __init__(self, task_id: str, text: str, done: bool, **kwargs) -> None:
        super().__init__(**kwargs)
        self.task_id = task_id
        self.task_text = text
        self.task_done = done

    def compose(self) -> ComposeResult:
        yield Checkbox(value=self.task_done, id=f"cb-{self.task_id}")
        yield Input(
            value=self.task_text,
            placeholder="task…",
            id=f"txt-{self.task_id}",
            classes="task-text",
        )

    def on_mount(self) -> None:
        self.add_class("task-row")
        if self.task_done:
            self.add_class("task-done")


# ── Main app ───────────────────────────────────────────────────


class DayPlannerApp(App):
    """DayPlanner — one day at a time."""

    TITLE = "DayPlanner"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("left_square_bracket", "prev_day", "Prev"),
        Binding("right_square_bracket", "next_day", "Next"),
        Binding("t", "today", "Today"),
        Binding("a", "focus_add", "Add Task"),
        Binding("n", "focus_notes", "Notes"),
        Binding("m", "cycle_mood", "Mood"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, session: PlannerSession) -> None:
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            VerticalScroll(
                Label("Tasks", classes="section-title"),
                Vertical(id="task-list"),
                Input(placeholder="new task, Enter to add", id="add-task"),
                Label("Notes", classes="section-title"),
                TextArea(id="notes-area"),
                id="left-pane",
                can_focus=False,
            ),
            Vertical(
                Label("Priorities", classes="section-title"),
                DataTable(id="priorities-table", show_cursor=False),
                Label("Schedule", classes="section-title"),
                DataTable(id="schedule-table", show_cursor=False),
                Static(id="habits-line"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    async def on_mount(self) -> None:
        self.query_one("#priorities-table", DataTable).add_columns("#", "Priority")
        self.query_one("#schedule-table", DataTable).add_columns("Time", "Plan")
        result = self.session.on_foreground()
        added = result.get("added") or []
        if added:
            self.notify(f"Carried forward {len(added)} task(s)", title="Rollover")
        elif not result.get("ok", True):
            self.notify(str(result.get("error", "")), title="Rollover failed", severity="warning")
        await self._load_day()

    async def _load_day(self) -> None:
        """Populate every widget from the session's current plan."""
        plan = self.session.plan
        kind = classify(self.session.current_date, self.session.today())
        self.sub_title = f"{self.session.current_date:%A %d %B %Y} ({kind})"

        await self._rebuild_tasks()
        self.query_one("#notes-area", TextArea).load_text(plan.notes)

        priorities = self.query_one("#priorities-table", DataTable)
        priorities.clear()
        for item in plan.priorities:
            priorities.add_row(str(item.number), item.text)

        schedule = self.query_one("#schedule-table", DataTable)
        schedule.clear()
        for slot in plan.hourly_slots:
            schedule.add_row(slot.display_time, slot.text)

        self._update_habits_line()

    async def _rebuild_tasks(self) -> None:
        task_list = self.query_one("#task-list", Vertical)
        await task_list.remove_children()
        await task_list.mount_all(
            TaskRow(t.id, t.text, t.is_completed) for t in self.session.plan.tasks
        )

    def _update_habits_line(self) -> None:
        plan = self.session.plan
        habits = " ".join(
            f"[{'x' if h in plan.completed_habits else ' '}] {h}" for h in HABITS
        )
        mood = plan.selected_mood or "-"
        self.query_one("#habits-line", Static).update(f"Mood: {mood}\n{habits}")

    def _task_index(self, task_id: str) -> int:
        for i, task in enumerate(self.session.plan.tasks):
            if task.id == task_id:
                return i
        return -1

    # ── Save on every change ───────────────────────────────────

    @on(Checkbox.Changed)
    def _on_task_toggle(self, event: Checkbox.Changed) -> None:
        task_id = (event.checkbox.id or "").removeprefix("cb-")
        index = self._task_index(task_id)
        if index < 0 or self.session.plan.tasks[index].is_completed == event.value:
            return
        self.session.toggle_task(index)
        parent = event.checkbox.parent
        if isinstance(parent, TaskRow):
            parent.set_class(event.value, "task-done")

    @on(Input.Changed, ".task-text")
    def _on_task_edit(self, event: Input.Changed) -> None:
        task_id = (event.input.id or "").removeprefix("txt-")
        index = self._task_index(task_id)
        if index < 0 or self.session.plan.tasks[index].text == event.value:
            return
        self.session.update_task_text(index, event.value)

    @on(Input.Submitted, "#add-task")
    async def _on_add_task(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        if not text:
            return
        self.session.add_task(text)
        event.input.value = ""
        await self._rebuild_tasks()

    @on(TextArea.Changed, "#notes-area")
    def _on_notes_change(self, event: TextArea.Changed) -> None:
        if event.text_area.text != self.session.plan.notes:
            self.session.update_notes(event.text_area.text)

    # ── Navigation ─────────────────────────────────────────────

    async def action_prev_day(self) -> None:
        self.session.select_date(self.session.current_date - timedelta(days=1))
        await self._load_day()

    async def action_next_day(self) -> None:
        self.session.select_date(self.session.current_date + timedelta(days=1))
        await self._load_day()

    async def action_today(self) -> None:
        self.session.select_date(self.session.today())
        await self._load_day()

    def action_focus_add(self) -> None:
        self.query_one("#add-task", Input).focus()

    def action_focus_notes(self) -> None:
        self.query_one("#notes-area", TextArea).focus()

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def action_cycle_mood(self) -> None:
        options = [*MOODS, None]
        current = self.session.plan.selected_mood
        index = options.index(current) if current in options else len(options) - 1
        self.session.select_mood(options[(index + 1) % len(options)])
        self._update_habits_line()

    def action_quit_app(self) -> None:
        self.session.save()
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    try:
        configure_logging(root)
        session = build_session(root)
    except OSError as e:
        print(f"Cannot open workspace {root}: {e}")
        print("Set DAYPLANNER_ROOT to a writable directory.")
        sys.exit(1)

    app = DayPlannerApp(session)
    app.run()


if __name__ == "__main__":
    main()
