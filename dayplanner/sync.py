"""Mirror the plan store to a remote folder, one file per date.

Each file is its own task: ``asyncio.gather`` fans out, and the report is
returned once every task has finished. A failed file never affects another,
and files that succeeded are not rolled back when others fail. Pull always
overwrites the local record for that date (last writer wins).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, Protocol

from dayplanner.datekey import from_filename, to_filename
from dayplanner.settings import SettingsStore
from dayplanner.store import DECODE_ERRORS, PlanStore, decode_plan

logger = logging.getLogger("dayplanner.sync")


class RemoteFolder(Protocol):
    """Folder-scoped object store. All methods block and may raise."""

    def ensure_folder(self) -> str:
        """Find or create the folder; returns its id."""

    def list_files(self) -> dict[str, str]:
        """File name -> remote file id."""

    def upload(self, name: str, data: bytes, file_id: str | None = None) -> str:
        """Create (file_id None) or replace a file; returns its id."""

    def download(self, file_id: str) -> bytes: ...


@dataclass
class FileResult:
    name: str
    ok: bool
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "ok": self.ok, "error": self.error}


@dataclass
class SyncReport:
    direction: str  # push, pull
    results: list[FileResult] = field(default_factory=list)
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error and all(r.ok for r in self.results)

    @property
    def failed(self) -> list[FileResult]:
        return [r for r in self.results if not r.ok]

    def to_dict(self) -> dict[str, Any]:
        return {
            "direction": self.direction,
            "ok": self.ok,
            "error": self.error,
            "succeeded": sum(1 for r in self.results if r.ok),
            "failed": len(self.failed),
            "results": [r.to_dict() for r in self.results],
        }


def _error_text(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class RemoteSyncAdapter:
    def __init__(
        self,
        store: PlanStore,
        remote: RemoteFolder,
        settings: SettingsStore | None = None,
        on_complete: Callable[[SyncReport], None] | None = None,
    ) -> None:
        self.store = store
        self.remote = remote
        self.settings = settings
        self.on_complete = on_complete

    async def _open_folder(self) -> dict[str, str] | None:
        try:
            await asyncio.to_thread(self.remote.ensure_folder)
            return await asyncio.to_thread(self.remote.list_files)
        except Exception as exc:
            logger.error("Remote folder unavailable: %s", _error_text(exc))
            return None

    # ── Push ──────────────────────────────────────────────────

    async def push(self, dates: Iterable[date] | None = None) -> SyncReport:
        """Upload-or-replace the record of every date (default: all local dates)."""
        existing = await self._open_folder()
        if existing is None:
            return self._finish(SyncReport("push", error="Failed to access remote folder"))

        if dates is None:
            dates = self.store.all_dates()
        results = await asyncio.gather(
            *(self._push_one(day, existing) for day in sorted(dates))
        )
        return self._finish(SyncReport("push", list(results)))

    async def _push_one(self, day: date, existing: dict[str, str]) -> FileResult:
        name = to_filename(day)
        try:
            data = await asyncio.to_thread(self.store.read_bytes, day)
            if data is None:
                return FileResult(name, False, "Failed to load local plan")
            await asyncio.to_thread(self.remote.upload, name, data, existing.get(name))
        except Exception as exc:
            logger.warning("Upload of %s failed: %s", name, _error_text(exc))
            return FileResult(name, False, _error_text(exc))
        return FileResult(name, True)

    # ── Pull ──────────────────────────────────────────────────

    async def pull(self) -> SyncReport:
        """Download every remote record and save it locally, replacing local copies."""
        files = await self._open_folder()
        if files is None:
            return self._finish(SyncReport("pull", error="Failed to access remote folder"))

        jobs = []
        for name, file_id in sorted(files.items()):
            day = from_filename(name)
            if day is None:
                logger.debug("Ignoring remote file %s", name)
                continue
            jobs.append(self._pull_one(day, name, file_id))
        results = await asyncio.gather(*jobs)
        return self._finish(SyncReport("pull", list(results)))

    async def _pull_one(self, day: date, name: str, file_id: str) -> FileResult:
        try:
            data = await asyncio.to_thread(self.remote.download, file_id)
        except Exception as exc:
            logger.warning("Download of %s failed: %s", name, _error_text(exc))
            return FileResult(name, False, _error_text(exc))
        try:
            plan = decode_plan(data, day=day)
        except DECODE_ERRORS as exc:
            logger.warning("Remote record %s is unreadable: %s", name, exc)
            return FileResult(name, False, f"Failed to decode plan: {exc}")
        try:
            await asyncio.to_thread(self.store.save, day, plan)
        except OSError as exc:
            logger.warning("Saving pulled record %s failed: %s", name, exc)
            return FileResult(name, False, _error_text(exc))
        return FileResult(name, True)

    # ── Bookkeeping ───────────────────────────────────────────

    def _finish(self, report: SyncReport) -> SyncReport:
        if report.ok:
            if self.settings is not None:
                self.settings.set_last_sync_at(
                    datetime.now(timezone.utc).isoformat(timespec="seconds")
                )
        else:
            logger.warning(
                "Sync %s finished with %d failure(s)%s",
                report.direction,
                len(report.failed),
                f": {report.error}" if report.error else "",
            )
        if self.on_complete is not None:
            try:
                self.on_complete(report)
            except Exception:
                logger.exception("Sync listener failed")
        return report
