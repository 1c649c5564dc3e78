"""Durable per-date plan storage: one JSON file per calendar day."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

from dayplanner.datekey import from_filename, to_filename
from dayplanner.fileio import dump_json, read_json, write_json_atomic
from dayplanner.models import DayPlan, PlanLayout
from dayplanner.workspace import plans_dir, workspace_root

logger = logging.getLogger("dayplanner.store")

# Everything DayPlan.from_dict / json can raise on a damaged record.
# json.JSONDecodeError, UnicodeDecodeError and binascii.Error are ValueErrors;
# Infinity or 1e999 where an int belongs is an OverflowError (ArithmeticError);
# pathologically nested arrays exhaust the json decoder (RecursionError).
DECODE_ERRORS = (ValueError, TypeError, KeyError, ArithmeticError, RecursionError)


def encode_plan(plan: DayPlan) -> bytes:
    return dump_json(plan.to_dict()).encode("utf-8")


def decode_plan(data: bytes, day: date | None = None) -> DayPlan:
    """Decode a serialized record; raises one of DECODE_ERRORS when damaged."""
    return DayPlan.from_dict(json.loads(data.decode("utf-8")), day=day)


class PlanStore:
    """Maps a date to ``plans/YYYY-MM-DD.json``.

    Writes go through a temp file + rename, so a reader never sees a partial
    record. A missing record is not an error; a damaged one is logged and
    treated as missing.
    """

    def __init__(self, directory: Path | None = None) -> None:
        if directory is None:
            directory = plans_dir(workspace_root())
        self.directory = directory

    def path_for(self, day: date) -> Path:
        return self.directory / to_filename(day)

    def save(self, day: date, plan: DayPlan) -> None:
        plan.date = day
        write_json_atomic(self.path_for(day), plan.to_dict())

    def load(self, day: date) -> DayPlan | None:
        path = self.path_for(day)
        if not path.exists():
            return None
        try:
            data = read_json(path)
            if not data:
                raise ValueError("empty record")
            return DayPlan.from_dict(data, day=day)
        except DECODE_ERRORS as exc:
            logger.warning("Discarding unreadable plan %s: %s", path.name, exc)
            return None

    def load_or_default(self, day: date, layout: PlanLayout | None = None) -> DayPlan:
        plan = self.load(day)
        return plan if plan is not None else DayPlan.new(day, layout)

    def read_bytes(self, day: date) -> bytes | None:
        """Raw serialized record, re-encoded from a clean load."""
        plan = self.load(day)
        return encode_plan(plan) if plan is not None else None

    def delete(self, day: date) -> None:
        self.path_for(day).unlink(missing_ok=True)

    def all_dates(self) -> set[date]:
        if not self.directory.is_dir():
            return set()
        dates = set()
        for entry in self.directory.iterdir():
            day = from_filename(entry.name)
            if day is not None and entry.is_file():
                dates.add(day)
        return dates
