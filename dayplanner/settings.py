"""Small key-value settings persisted in settings.json."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from dayplanner.fileio import read_json, write_json_atomic
from dayplanner.models import Settings
from dayplanner.workspace import settings_path, workspace_root

logger = logging.getLogger("dayplanner.settings")


class SettingsStore:
    """Load/modify/save wrapper around settings.json.

    Every setter writes the whole file atomically before returning.
    """

    def __init__(self, path: Path | None = None) -> None:
        if path is None:
            path = settings_path(workspace_root())
        self.path = path

    def load(self) -> Settings:
        try:
            return Settings.from_dict(read_json(self.path))
        except ValueError as exc:
            logger.warning("Resetting unreadable settings %s: %s", self.path, exc)
            return Settings()

    def save(self, settings: Settings) -> None:
        write_json_atomic(self.path, settings.to_dict())

    # ── Rollover watermark ────────────────────────────────────

    def last_rollover_date(self) -> date | None:
        raw = self.load().last_rollover_date
        if not raw:
            return None
        try:
            return date.fromisoformat(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid lastRolloverDate %r", raw)
            return None

    def set_last_rollover_date(self, day: date) -> None:
        settings = self.load()
        settings.last_rollover_date = day.isoformat()
        self.save(settings)

    # ── Sync bookkeeping ──────────────────────────────────────

    def set_last_sync_at(self, stamp: str) -> None:
        settings = self.load()
        settings.last_sync_at = stamp
        self.save(settings)
