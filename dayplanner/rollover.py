"""Once-per-day carry-forward of incomplete tasks into today's plan.

The rollover pipeline:
1. Watermark check (skip if already rolled over today)
2. Enumerate stored dates strictly before today, ascending
3. Collect incomplete tasks with text
4. De-dup across all prior dates (trimmed, case-insensitive; first wins)
5. Load or default-create today's plan
6. Append fresh copies of texts today does not already have
7. Save today's plan if anything was appended
8. Advance the watermark
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable

from dayplanner.models import DayPlan, PlanLayout, TaskItem
from dayplanner.settings import SettingsStore
from dayplanner.store import DECODE_ERRORS, PlanStore

logger = logging.getLogger("dayplanner.rollover")


def normalize_text(text: str) -> str:
    return text.strip().lower()


def collect_carry_forward(plans: Iterable[DayPlan]) -> list[TaskItem]:
    """Incomplete, non-blank tasks across *plans*, de-duplicated by text.

    The first occurrence in iteration order wins.
    """
    seen: set[str] = set()
    result = []
    for plan in plans:
        for task in plan.tasks:
            key = normalize_text(task.text)
            if task.is_completed or not key or key in seen:
                continue
            seen.add(key)
            result.append(task)
    return result


def merge_carry_forward(plan: DayPlan, tasks: Iterable[TaskItem]) -> list[str]:
    """Append new copies of *tasks* whose text *plan* lacks. Returns added texts."""
    existing = {normalize_text(t.text) for t in plan.tasks}
    added = []
    for task in tasks:
        key = normalize_text(task.text)
        if not key or key in existing:
            continue
        existing.add(key)
        plan.tasks.append(TaskItem(text=task.text, is_completed=False))
        added.append(task.text)
    return added


class RolloverEngine:
    """Reads every stored plan, writes only today's, at most once per day."""

    def __init__(
        self,
        store: PlanStore,
        settings: SettingsStore,
        layout: PlanLayout | None = None,
        on_rollover: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.layout = layout or PlanLayout()
        self.on_rollover = on_rollover

    def has_run(self, today: date) -> bool:
        last = self.settings.last_rollover_date()
        return last is not None and last >= today

    def rollover_if_needed(self, today: date) -> dict[str, Any]:
        """Carry incomplete prior tasks into *today* unless already done today.

        A source date that cannot be read is skipped and reported; the
        watermark still advances. A failure to save today's plan propagates
        and leaves the watermark alone so the next call retries.
        """
        # 1. Idempotency guard
        if self.has_run(today):
            return {"ok": True, "day": today.isoformat(), "already_rolled_over": True}

        # 2-3. Scan prior dates
        sources = []
        skipped = []
        for day in sorted(d for d in self.store.all_dates() if d < today):
            try:
                plan = self.store.load(day)
            except (OSError, *DECODE_ERRORS) as exc:
                logger.warning("Skipping rollover source %s: %s", day.isoformat(), exc)
                skipped.append(day.isoformat())
                continue
            if plan is not None:
                sources.append(plan)

        # 4. De-dup
        carry = collect_carry_forward(sources)

        # 5-7. Merge into today
        added: list[str] = []
        if carry:
            today_plan = self.store.load_or_default(today, self.layout)
            added = merge_carry_forward(today_plan, carry)
            if added:
                self.store.save(today, today_plan)

        # 8. Watermark last
        self.settings.set_last_rollover_date(today)

        if added or skipped:
            logger.info(
                "Rollover for %s: %d task(s) carried forward, %d source(s) skipped",
                today.isoformat(), len(added), len(skipped),
            )

        result = {"ok": True, "day": today.isoformat(), "added": added, "skipped": skipped}
        if self.on_rollover is not None:
            try:
                self.on_rollover(result)
            except Exception:
                logger.exception("Rollover listener failed")
        return result
