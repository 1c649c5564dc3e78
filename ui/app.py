from __future__ import annotations

import base64
import binascii
import os
import secrets
import threading
from datetime import date
from pathlib import Path
from typing import Any

from dayplanner import (
    PlannerSession,
    RemoteSyncAdapter,
    build_session,
    build_sync_adapter,
    classify,
    configure_logging,
    parse_date,
    parse_google_events,
    workspace_root as _workspace_root,
)

from fastapi import FastAPI, Depends, HTTPException, status
from fastapi import Body
from fastapi.security import HTTPBasic, HTTPBasicCredentials


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="DayPlanner", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("DAYPLANNER_USERNAME", "")
    expected_password = os.environ.get("DAYPLANNER_PASSWORD", "")

    if credentials is None:
        if not expected_username or not expected_password:
            return "guest"
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    if not expected_username or not expected_password:
        return "guest"

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Session ───────────────────────────────────────────────────

# One session per workspace root; the lock serializes access to its plan.
_sessions: dict[Path, PlannerSession] = {}
_lock = threading.RLock()


def _session() -> PlannerSession:
    root = _workspace_root()
    with _lock:
        session = _sessions.get(root)
        if session is None:
            configure_logging(root)
            session = build_session(root)
            session.on_foreground()
            _sessions[root] = session
        return session


def _plan_view(session: PlannerSession) -> dict[str, Any]:
    return {
        "date": session.current_date.isoformat(),
        "kind": classify(session.current_date, session.today()),
        "plan": session.plan.to_dict(),
        "pending": len(session.pending_tasks()),
        "events": [e.to_dict() for e in session.calendar_events()],
    }


def _parse_date(value: Any) -> date:
    try:
        return parse_date(str(value or ""))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {value}")


def _text(payload: dict[str, Any], key: str = "text") -> str:
    value = payload.get(key, "")
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"'{key}' must be a string")
    return value


# ── Plan & navigation ─────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/plan")
def api_get_plan(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """The selected date's plan plus its calendar events."""
    session = _session()
    with _lock:
        return _plan_view(session)


@app.post("/api/plan/date")
def api_select_date(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    day = _parse_date(payload.get("date"))
    session = _session()
    with _lock:
        session.select_date(day)
        return _plan_view(session)


@app.post("/api/plan/month")
def api_select_month(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Jump to another month of the selected year, clamping the day."""
    month = payload.get("month")
    if not isinstance(month, int) or isinstance(month, bool):
        raise HTTPException(status_code=400, detail="'month' must be an integer")
    session = _session()
    with _lock:
        try:
            session.select_month(month)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _plan_view(session)


@app.post("/api/plan/today")
def api_select_today(username: str = Depends(get_current_user)) -> dict[str, Any]:
    session = _session()
    with _lock:
        session.select_date(session.today())
        return _plan_view(session)


@app.delete("/api/plans/{date_str}")
def api_delete_plan(date_str: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    day = _parse_date(date_str)
    session = _session()
    with _lock:
        session.delete_plan(day)
    return {"ok": True, "date": day.isoformat()}


@app.get("/api/dates")
def api_list_dates(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Every date with a stored plan, ascending."""
    session = _session()
    with _lock:
        dates = sorted(session.store.all_dates())
    return {"dates": [d.isoformat() for d in dates]}


@app.post("/api/rollover")
def api_rollover(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Same as returning to the foreground: roll over if due, then show today."""
    session = _session()
    with _lock:
        result = session.on_foreground()
        return {"rollover": result, **_plan_view(session)}


# ── Tasks ─────────────────────────────────────────────────────

@app.get("/api/pending")
def api_pending(username: str = Depends(get_current_user)) -> dict[str, Any]:
    session = _session()
    with _lock:
        pending = session.pending_tasks()
        return {"date": session.current_date.isoformat(), "tasks": [t.to_dict() for t in pending]}


@app.post("/api/tasks")
def api_add_task(payload: dict[str, Any] = Body(default={}), username: str = Depends(get_current_user)) -> dict[str, Any]:
    text = _text(payload)
    session = _session()
    with _lock:
        task = session.add_task(text)
    return {"ok": True, "task": task.to_dict()}


@app.post("/api/tasks/{index}/toggle")
def api_toggle_task(index: int, username: str = Depends(get_current_user)) -> dict[str, Any]:
    session = _session()
    with _lock:
        if not session.toggle_task(index):
            raise HTTPException(status_code=404, detail=f"No task at index {index}")
        return {"ok": True, "task": session.plan.tasks[index].to_dict()}


@app.put("/api/tasks/{index}")
def api_update_task(index: int, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    text = _text(payload)
    session = _session()
    with _lock:
        if not session.update_task_text(index, text):
            raise HTTPException(status_code=404, detail=f"No task at index {index}")
        return {"ok": True, "task": session.plan.tasks[index].to_dict()}


@app.delete("/api/tasks/{index}")
def api_delete_task(index: int, username: str = Depends(get_current_user)) -> dict[str, Any]:
    session = _session()
    with _lock:
        if not session.delete_task(index):
            raise HTTPException(status_code=404, detail=f"No task at index {index}")
    return {"ok": True, "index": index}


# ── Priorities, schedule, habits, mood ────────────────────────

@app.put("/api/priorities/{number}")
def api_update_priority(number: int, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    text = _text(payload)
    session = _session()
    with _lock:
        if not session.update_priority(number, text):
            raise HTTPException(status_code=404, detail=f"No priority {number}")
    return {"ok": True, "number": number, "text": text}


@app.put("/api/slots/{hour}")
def api_update_slot(hour: int, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    text = _text(payload)
    session = _session()
    with _lock:
        if not session.update_slot(hour, text):
            raise HTTPException(status_code=404, detail=f"No schedule slot at hour {hour}")
    return {"ok": True, "hour": hour, "text": text}


@app.post("/api/habits/{habit}/toggle")
def api_toggle_habit(habit: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    session = _session()
    with _lock:
        try:
            done = session.toggle_habit(habit)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "habit": habit, "completed": done}


@app.put("/api/mood")
def api_select_mood(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Set the day's mood; ``{"mood": null}`` clears it."""
    mood = payload.get("mood")
    session = _session()
    with _lock:
        try:
            session.select_mood(mood)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "mood": mood}


# ── Notes & drawing ───────────────────────────────────────────

@app.put("/api/notes")
def api_update_notes(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    notes = _text(payload, "notes")
    session = _session()
    with _lock:
        session.update_notes(notes)
    return {"ok": True}


@app.put("/api/drawing")
def api_update_drawing(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Replace the opaque drawing blob (base64), or clear it with null."""
    encoded = payload.get("drawingData")
    data = None
    if encoded is not None:
        try:
            data = base64.b64decode(str(encoded), validate=True)
        except (binascii.Error, ValueError):
            raise HTTPException(status_code=400, detail="drawingData must be base64")
    session = _session()
    with _lock:
        session.update_drawing(data)
    return {"ok": True, "bytes": len(data) if data is not None else 0}


# ── Calendar ──────────────────────────────────────────────────

@app.put("/api/calendar/events")
def api_set_calendar_events(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Hand over Calendar API ``items`` fetched elsewhere; shown, never stored."""
    items = payload.get("items", [])
    if not isinstance(items, list):
        raise HTTPException(status_code=400, detail="'items' must be a list")
    session = _session()
    with _lock:
        events = parse_google_events(items, session.tz)
        session.set_calendar_events(events)
        return {"ok": True, "received": len(events), "events": [e.to_dict() for e in session.calendar_events()]}


# ── Sync ──────────────────────────────────────────────────────

def _sync_adapter() -> RemoteSyncAdapter:
    adapter = build_sync_adapter(_workspace_root())
    if adapter is None:
        raise HTTPException(status_code=409, detail="Not signed in to Google Drive")
    return adapter


@app.post("/api/sync/push")
async def api_sync_push(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Upload every stored plan to the Drive folder."""
    adapter = _sync_adapter()
    session = _session()
    with _lock:
        session.save()
    report = await adapter.push()
    return report.to_dict()


@app.post("/api/sync/pull")
async def api_sync_pull(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Download every plan from the Drive folder, replacing local copies."""
    adapter = _sync_adapter()
    session = _session()
    report = await adapter.pull()
    with _lock:
        session.reload()
    return report.to_dict()
